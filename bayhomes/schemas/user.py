"""
Pydantic schemas for user requests and responses.
Users are created on first sign-in and referenced by email afterwards.
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from bayhomes.schemas.common import Command, Document


class UserCreate(Command):
    """Schema for the get-or-create user call made at sign-in."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["agent@bayhomes.ae"]
    )

    name: Optional[str] = Field(
        None,
        max_length=255,
        description="Display name"
    )

    avatar: Optional[str] = Field(
        None,
        max_length=1024,
        description="Avatar URL"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def clean_name(cls, v):
        """Strip surrounding whitespace from the display name."""
        return v.strip() if v else v


class UserSummary(Document):
    """User embedded in a populated listing."""

    id: str = Field(..., alias="_id")
    email: str
    name: Optional[str] = None
    avatar: Optional[str] = None


class UserResponse(UserSummary):
    """Schema for user responses with back-reference lists."""

    property_ids: List[str] = Field(default_factory=list, alias="allProperties")
    area_ids: List[str] = Field(default_factory=list, alias="allAreas")
    developer_ids: List[str] = Field(default_factory=list, alias="allDevelopers")
    project_ids: List[str] = Field(default_factory=list, alias="allProjects")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
