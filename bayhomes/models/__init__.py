"""
Document models for the Bay Homes Listing API.
Includes User, Area, Developer, Project and Property models.
"""

from bayhomes.models.user import User
from bayhomes.models.area import Area
from bayhomes.models.developer import Developer
from bayhomes.models.project import Project
from bayhomes.models.property import Property, PropertyStatus

# Export all models for easy importing
__all__ = [
    "User",
    "Area",
    "Developer",
    "Project",
    "Property",
    "PropertyStatus",
]
