"""
Pydantic schemas for developer requests and responses.
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from bayhomes.schemas.common import Command, Document
from bayhomes.schemas.user import UserSummary


class DeveloperCreate(Command):
    """Schema for creating a new developer."""

    developer_name: str = Field(
        ...,
        alias="developerName",
        min_length=1,
        max_length=255,
        description="Developer name, unique",
        examples=["Emaar"]
    )

    description: Optional[str] = Field(None, max_length=5000)

    image: Optional[str] = Field(
        None,
        description="Logo as a data URI, base64 string or an existing URL"
    )

    email: EmailStr = Field(..., description="Email of the creating user")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class DeveloperUpdate(Command):
    """Schema for updating a developer; only supplied fields change."""

    developer_name: Optional[str] = Field(None, alias="developerName", min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    image: Optional[str] = None


class DeveloperSummary(Document):
    """Developer embedded in a populated project."""

    id: str = Field(..., alias="_id")
    developer_name: str = Field(..., alias="developerName")
    image: Optional[str] = None


class DeveloperResponse(Document):
    """Schema for developer responses."""

    id: str = Field(..., alias="_id")
    developer_name: str = Field(..., alias="developerName")
    description: Optional[str] = None
    image: Optional[str] = None
    creator_id: str = Field(..., alias="creatorId")
    project_ids: List[str] = Field(default_factory=list, alias="projectId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class ProjectBrief(Document):
    """Project listed on a developer's detail page."""

    id: str = Field(..., alias="_id")
    project_name: str = Field(..., alias="projectName")
    project_type: Optional[str] = Field(None, alias="projectType")
    background_image: Optional[str] = Field(None, alias="backgroundImage")


class DeveloperDetailResponse(DeveloperResponse):
    """Developer with its creator and projects populated."""

    creator: Optional[UserSummary] = None
    projects: List[ProjectBrief] = Field(default_factory=list)
