"""
Pydantic schemas for project requests and responses.
Handles the interior, exterior, background and floor plan image sets.
"""

from pydantic import AliasChoices, EmailStr, Field, field_validator
from typing import List, Optional, Union
from datetime import datetime
from decimal import Decimal
from bayhomes.schemas.common import Command, Document, Location
from bayhomes.schemas.area import AreaSummary
from bayhomes.schemas.developer import DeveloperSummary
from bayhomes.schemas.user import UserSummary


def _as_text(v):
    """Accept numbers for free-text fields such as size or handover date."""
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return v


class FloorPlanInput(Command):
    """One floor plan in a project payload."""

    floor_type: Optional[str] = Field(None, alias="floorType", description="Studio, 1BR, penthouse...")
    floor_size: Optional[str] = Field(None, alias="floorSize")
    floor_image: Optional[str] = Field(
        None,
        alias="floorImage",
        description="Floor plan image as a data URI, base64 string or an existing URL"
    )
    num_of_rooms: Optional[int] = Field(None, alias="numOfrooms", ge=0)

    @field_validator("floor_type", "floor_size", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class ProjectBase(Command):
    """Fields shared by project create and update payloads."""

    description: Optional[str] = Field(None, max_length=10000)
    project_type: Optional[str] = Field(None, alias="projectType", max_length=100)
    start_price: Optional[Decimal] = Field(None, alias="startPrice", ge=0)
    size: Optional[str] = Field(None, max_length=100)
    rooms: Optional[str] = Field(None, max_length=100)
    handover_date: Optional[str] = Field(None, alias="handoverDate", max_length=50)
    amenities: Optional[List[str]] = Field(
        None,
        validation_alias=AliasChoices("aminities", "amenities"),
        description="Amenity names; the UI sends them as 'aminities'"
    )
    interior_images: Optional[List[str]] = Field(None, alias="inImages")
    exterior_images: Optional[List[str]] = Field(None, alias="outImages")
    background_image: Optional[str] = Field(None, alias="backgroundImage")
    floor_plans: Optional[List[FloorPlanInput]] = Field(None, alias="floorPlans")
    location: Optional[Location] = None
    about_map: Optional[str] = Field(None, alias="aboutMap")
    map_url: Optional[str] = Field(None, alias="mapURL", max_length=2048)

    @field_validator("size", "rooms", "handover_date", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""

    project_name: str = Field(..., alias="projectName", min_length=1, max_length=255)
    area_name: str = Field(..., alias="areaName", min_length=1, description="Name of an existing area")
    developer_name: str = Field(..., alias="developerName", min_length=1, description="Name of an existing developer")
    email: EmailStr = Field(..., description="Email of the creating user")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class ProjectUpdate(ProjectBase):
    """Schema for updating a project; only supplied fields change."""

    project_name: Optional[str] = Field(None, alias="projectName", min_length=1, max_length=255)
    area_name: Optional[str] = Field(None, alias="areaName", min_length=1)
    developer_name: Optional[str] = Field(None, alias="developerName", min_length=1)


class ProjectImages(Document):
    interior: List[str] = Field(default_factory=list, alias="inImages")
    exterior: List[str] = Field(default_factory=list, alias="outImages")
    background_image: Optional[str] = Field(None, alias="backgroundImage")


class FloorPlanResponse(Document):
    floor_type: Optional[str] = Field(None, alias="floorType")
    floor_size: Optional[Union[str, float]] = Field(None, alias="floorSize")
    floor_image: Optional[str] = Field(None, alias="floorImage")
    num_of_rooms: Optional[int] = Field(None, alias="numOfrooms")


class ProjectResponse(Document):
    """Schema for project responses."""

    id: str = Field(..., alias="_id")
    project_name: str = Field(..., alias="projectName")
    description: Optional[str] = None
    project_type: Optional[str] = Field(None, alias="projectType")
    start_price: Optional[float] = Field(None, alias="startPrice")
    size: Optional[str] = None
    rooms: Optional[str] = None
    handover_date: Optional[str] = Field(None, alias="handoverDate")
    amenities: List[str] = Field(default_factory=list, alias="aminities")
    images: ProjectImages
    floor_plans: List[FloorPlanResponse] = Field(default_factory=list, alias="floorPlans")
    location: Optional[Location] = None
    about_map: Optional[str] = Field(None, alias="aboutMap")
    map_url: Optional[str] = Field(None, alias="mapURL")
    area_id: Optional[str] = Field(None, alias="areaId")
    developer_id: Optional[str] = Field(None, alias="developerId")
    creator_id: str = Field(..., alias="creatorId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class ProjectDetailResponse(ProjectResponse):
    """Project with area, developer and creator populated."""

    area: Optional[AreaSummary] = None
    developer: Optional[DeveloperSummary] = None
    creator: Optional[UserSummary] = None
