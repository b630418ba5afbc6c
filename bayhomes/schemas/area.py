"""
Pydantic schemas for area requests and responses.
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from bayhomes.schemas.common import Command, Document, Location
from bayhomes.schemas.user import UserSummary


class AreaCreate(Command):
    """Schema for creating a new area."""

    area_name: str = Field(
        ...,
        alias="areaName",
        min_length=1,
        max_length=255,
        description="Area name, unique",
        examples=["Downtown"]
    )

    description: Optional[str] = Field(None, max_length=5000)

    features: List[str] = Field(
        default_factory=list,
        description="Highlights such as schools or metro access"
    )

    image: Optional[str] = Field(
        None,
        description="Image as a data URI, base64 string or an existing URL"
    )

    location: Optional[Location] = None

    email: EmailStr = Field(..., description="Email of the creating user")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class AreaUpdate(Command):
    """Schema for updating an area; only supplied fields change."""

    area_name: Optional[str] = Field(None, alias="areaName", min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    features: Optional[List[str]] = None
    image: Optional[str] = None
    location: Optional[Location] = None


class AreaSummary(Document):
    """Area embedded in a populated property or project."""

    id: str = Field(..., alias="_id")
    area_name: str = Field(..., alias="areaName")
    image: Optional[str] = None
    location: Optional[Location] = None


class AreaResponse(Document):
    """Schema for area responses."""

    id: str = Field(..., alias="_id")
    area_name: str = Field(..., alias="areaName")
    description: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    location: Optional[Location] = None
    creator_id: str = Field(..., alias="creatorId")
    property_ids: List[str] = Field(default_factory=list, alias="propertyId")
    project_ids: List[str] = Field(default_factory=list, alias="projectId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class AreaDetailResponse(AreaResponse):
    """Area with its creator populated."""

    creator: Optional[UserSummary] = None
