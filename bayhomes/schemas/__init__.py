"""
Pydantic schemas for request/response validation.
"""

from .common import Command, MutationResponse, ErrorResponse, ErrorInfo, ErrorDetail

from .user import UserCreate, UserSummary, UserResponse

from .area import AreaCreate, AreaUpdate, AreaSummary, AreaResponse, AreaDetailResponse

from .developer import (
    DeveloperCreate,
    DeveloperUpdate,
    DeveloperSummary,
    DeveloperResponse,
    DeveloperDetailResponse
)

from .project import (
    FloorPlanInput,
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectDetailResponse
)

from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyStatusUpdate,
    PropertyResponse,
    PropertyDetailResponse,
    parse_property_update
)

__all__ = [
    "Command",
    "MutationResponse",
    "ErrorResponse",
    "ErrorInfo",
    "ErrorDetail",
    "UserCreate",
    "UserSummary",
    "UserResponse",
    "AreaCreate",
    "AreaUpdate",
    "AreaSummary",
    "AreaResponse",
    "AreaDetailResponse",
    "DeveloperCreate",
    "DeveloperUpdate",
    "DeveloperSummary",
    "DeveloperResponse",
    "DeveloperDetailResponse",
    "FloorPlanInput",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectDetailResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyStatusUpdate",
    "PropertyResponse",
    "PropertyDetailResponse",
    "parse_property_update",
]
