"""
Shared response schemas: the mutation envelope and the error envelope.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union

# A free-text address or a structured one such as {"city": ..., "street": ...}
Location = Union[str, Dict[str, Any]]


class Command(BaseModel):
    """
    Base for request payloads.
    Fields are read by their UI names (``propImages``) or their Python names.
    """

    class Config:
        populate_by_name = True
        extra = "ignore"
        str_strip_whitespace = True

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually supplied with a value, keyed by Python name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class Document(BaseModel):
    """
    Base for response documents.
    Built from ``Model.to_dict()`` by Python name, serialized by UI name.
    """

    class Config:
        populate_by_name = True


class MutationResponse(BaseModel):
    """Envelope returned by create, update and delete endpoints."""

    success: bool = Field(
        True,
        description="Whether the operation succeeded"
    )

    message: str = Field(
        ...,
        description="Human-readable outcome",
        examples=["Property created successfully"]
    )

    data: Optional[Any] = Field(
        None,
        description="The created or updated document, when there is one"
    )


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["areaName"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message"
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["missing"]
    )


class ErrorInfo(BaseModel):
    """Machine-readable part of an error response."""

    code: str = Field(
        ...,
        description="Error code identifier",
        examples=["RELATED_ENTITY_NOT_FOUND"]
    )

    timestamp: str = Field(
        ...,
        description="Error timestamp in ISO format"
    )

    request_id: Optional[str] = Field(
        None,
        description="Request identifier for tracking"
    )

    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Field errors for validation failures"
    )


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    success: bool = Field(False)
    message: str = Field(..., description="Human-readable error message")
    error: ErrorInfo
