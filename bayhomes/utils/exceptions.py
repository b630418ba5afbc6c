"""
Custom exception classes for the Bay Homes Listing API.
Each class carries its HTTP status and error code; the error handler turns
them into the standard error envelope.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: Optional[str] = None

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status_code or self.default_status,
            detail=detail,
            headers=headers
        )
        self.error_code = error_code or self.default_code


class ValidationError(APIException):
    """Payload is well-formed JSON but not an acceptable command."""

    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    """Document addressed by id does not exist."""

    default_status = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        suffix = f" with ID: {resource_id}" if resource_id else ""
        super().__init__(f"{resource} not found{suffix}")


class RelatedEntityNotFoundError(APIException):
    """A required related entity, looked up by natural key, is missing."""

    default_status = status.HTTP_400_BAD_REQUEST
    default_code = "RELATED_ENTITY_NOT_FOUND"

    def __init__(self, resource: str, key: Optional[str] = None):
        named = f"{resource} '{key}'" if key else resource
        super().__init__(f"{named} not found. Please create the {resource.lower()} first.")
        self.resource = resource
        self.key = key


class ConflictError(APIException):
    default_status = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class DuplicateResourceError(ConflictError):
    """Another document already uses this natural key."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with name '{identifier}' already exists")


class BadRequestError(APIException):
    default_status = status.HTTP_400_BAD_REQUEST
    default_code = "BAD_REQUEST"


class InternalServerError(APIException):
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)


# Blob store
class BlobStoreError(InternalServerError):
    """The external blob store rejected an upload or destroy call."""

    default_code = "BLOB_STORE_ERROR"

    def __init__(self, action: str, detail: str):
        super().__init__(f"Blob store {action} failed: {detail}")


class InvalidImagePayloadError(ValidationError):
    """Image payload is neither a blob URL nor a decodable image."""

    def __init__(self, detail: str):
        super().__init__(f"Invalid image payload: {detail}")


class ImageTooLargeError(ValidationError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"Image size {size} bytes exceeds maximum allowed size {max_size} bytes")


class RequestTooLargeError(BadRequestError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"Request body of {size} bytes exceeds maximum allowed size {max_size} bytes")
