"""
Service layer for business logic implementation.
Contains the listing workflows, blob store access and error handling.
"""

from .blob_store import BlobStore, CloudinaryBlobStore, LocalBlobStore, build_blob_store
from .media import MediaCoordinator
from .ledger import RelationshipLedger
from .base import EntityService
from .user import UserService
from .area import AreaService
from .developer import DeveloperService
from .project import ProjectService
from .property import PropertyService
from .error_handler import ErrorHandlerService

__all__ = [
    "BlobStore",
    "CloudinaryBlobStore",
    "LocalBlobStore",
    "build_blob_store",
    "MediaCoordinator",
    "RelationshipLedger",
    "EntityService",
    "UserService",
    "AreaService",
    "DeveloperService",
    "ProjectService",
    "PropertyService",
    "ErrorHandlerService"
]
