"""
Utility modules for the Bay Homes Listing API.
"""

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    RelatedEntityNotFoundError,
    ConflictError,
    DuplicateResourceError,
    BadRequestError,
    InternalServerError,
    BlobStoreError,
    InvalidImagePayloadError,
    ImageTooLargeError,
    RequestTooLargeError
)

from .images import is_blob_url, blob_urls, public_id_from_url, decode_image_payload

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "RelatedEntityNotFoundError",
    "ConflictError",
    "DuplicateResourceError",
    "BadRequestError",
    "InternalServerError",
    "BlobStoreError",
    "InvalidImagePayloadError",
    "ImageTooLargeError",
    "RequestTooLargeError",

    # Image helpers
    "is_blob_url",
    "blob_urls",
    "public_id_from_url",
    "decode_image_payload",
]
