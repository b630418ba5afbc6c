"""
Bay Homes Listing API.
REST backend for managing properties, areas, developers and projects.
"""

__version__ = "1.0.0"
