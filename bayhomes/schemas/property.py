"""
Pydantic schemas for property requests and responses.
Handles property create, partial update, status-only update and validation.
"""

from pydantic import EmailStr, Field, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import datetime
from decimal import Decimal
from bayhomes.models.property import PropertyStatus
from bayhomes.schemas.common import Command, Document, Location
from bayhomes.schemas.area import AreaSummary
from bayhomes.schemas.user import UserSummary
from bayhomes.utils.exceptions import ValidationError


class PropertyBase(Command):
    """Fields shared by property create and update payloads."""

    description: Optional[str] = Field(None, max_length=10000)

    location: Optional[Location] = Field(
        None,
        description="Free-text address or an object such as {city, street}"
    )

    price: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Asking price or yearly rent"
    )

    background_image: Optional[str] = Field(
        None,
        alias="backgroundImage",
        description="Cover image as a data URI, base64 string or an existing URL"
    )

    num_of_rooms: Optional[int] = Field(None, alias="numOfrooms", ge=0, le=100)
    num_of_bathrooms: Optional[int] = Field(None, alias="numOfbathrooms", ge=0, le=100)
    size: Optional[float] = Field(None, ge=0, description="Size in square feet")
    permit_no: Optional[str] = Field(None, alias="permitNo", max_length=100)
    purpose: Optional[str] = Field(None, max_length=50, description="Sale or rent")
    furnishing_type: Optional[str] = Field(None, alias="furnishingType", max_length=50)
    classification: Optional[str] = Field(None, max_length=100)
    project_name: Optional[str] = Field(None, alias="projectName", max_length=255)

    barcode: Optional[str] = Field(
        None,
        description="Permit barcode image as a data URI, base64 string or an existing URL"
    )

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        """Validate price value."""
        if v is not None and v > Decimal("999999999999.99"):
            raise ValueError("Price exceeds maximum allowed value")
        return v


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property listing title",
        examples=["Marina view 2BR"]
    )

    property_type: str = Field(
        ...,
        alias="propertyType",
        min_length=1,
        max_length=100,
        description="Apartment, villa, townhouse..."
    )

    prop_images: List[str] = Field(
        ...,
        alias="propImages",
        description="Gallery images; raw payloads are uploaded, URLs are kept"
    )

    features: List[str] = Field(default_factory=list)
    featured: bool = False
    area_name: str = Field(..., alias="areaName", min_length=1, description="Name of an existing area")
    email: EmailStr = Field(..., description="Email of the creating user")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class PropertyUpdate(PropertyBase):
    """Schema for updating a property; only supplied fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    property_type: Optional[str] = Field(None, alias="propertyType", min_length=1, max_length=100)
    prop_images: Optional[List[str]] = Field(None, alias="propImages")
    features: Optional[List[str]] = None
    featured: Optional[bool] = None
    area_name: Optional[str] = Field(None, alias="areaName", min_length=1)


class PropertyStatusUpdate(Command):
    """Status-only update, used to archive or re-activate a listing."""

    status: PropertyStatus


def _accepted_keys(model) -> set:
    keys = set()
    for name, field in model.model_fields.items():
        keys.add(name)
        if field.alias:
            keys.add(field.alias)
    return keys


_UPDATE_KEYS = _accepted_keys(PropertyUpdate)


def parse_property_update(payload: Dict[str, Any]) -> Union[PropertyStatusUpdate, PropertyUpdate]:
    """
    Pick the update command for a request body.

    A body carrying ``status`` is a status-only update and may not change
    anything else; every other body is a partial field update.

    Args:
        payload: Decoded JSON body

    Returns:
        PropertyStatusUpdate or PropertyUpdate

    Raises:
        ValidationError: If the body is not an object, or mixes status with other fields
        pydantic.ValidationError: If the fields do not validate
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    if "status" in payload:
        others = sorted(key for key in payload if key != "status" and key in _UPDATE_KEYS)
        if others:
            raise ValidationError(
                "Status updates cannot change other fields",
                field_errors=[{"field": key, "message": "not allowed with status", "type": "status_only"}
                              for key in others]
            )
        return PropertyStatusUpdate.model_validate(payload)

    return PropertyUpdate.model_validate(payload)


class PropertyImages(Document):
    gallery: List[str] = Field(default_factory=list, alias="propImages")
    background_image: Optional[str] = Field(None, alias="backgroundImage")


class PropertyResponse(Document):
    """Schema for property responses."""

    id: str = Field(..., alias="_id")
    title: str
    description: Optional[str] = None
    property_type: Optional[str] = Field(None, alias="propertyType")
    location: Optional[Location] = None
    price: Optional[float] = None
    images: PropertyImages
    num_of_rooms: Optional[int] = Field(None, alias="numOfrooms")
    num_of_bathrooms: Optional[int] = Field(None, alias="numOfbathrooms")
    size: Optional[float] = None
    features: List[str] = Field(default_factory=list)
    permit_no: Optional[str] = Field(None, alias="permitNo")
    purpose: Optional[str] = None
    furnishing_type: Optional[str] = Field(None, alias="furnishingType")
    classification: Optional[str] = None
    featured: bool = False
    project_name: Optional[str] = Field(None, alias="projectName")
    barcode: Optional[str] = None
    status: PropertyStatus
    area_id: Optional[str] = Field(None, alias="areaId")
    creator_id: str = Field(..., alias="creatorId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class PropertyDetailResponse(PropertyResponse):
    """Property with area and creator populated."""

    area: Optional[AreaSummary] = None
    creator: Optional[UserSummary] = None
