"""
Repository layer for data access operations.
Repositories stage and query documents; services own the transaction.
"""

from bayhomes.repositories.base import BaseRepository, ListParams
from bayhomes.repositories.user import UserRepository
from bayhomes.repositories.area import AreaRepository
from bayhomes.repositories.developer import DeveloperRepository
from bayhomes.repositories.project import ProjectRepository
from bayhomes.repositories.property import PropertyRepository

__all__ = [
    "BaseRepository",
    "ListParams",
    "UserRepository",
    "AreaRepository",
    "DeveloperRepository",
    "ProjectRepository",
    "PropertyRepository"
]
