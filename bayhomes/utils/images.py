"""
Image value helpers.
Image fields accept either a blob store URL (already stored) or a raw payload
(data URI or bare base64) that still has to be uploaded.
"""

from PIL import Image, UnidentifiedImageError
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse
import base64
import binascii
import io
import re

from bayhomes.utils.exceptions import InvalidImagePayloadError, ImageTooLargeError

URL_PREFIXES = ("http://", "https://")

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w=.+-]+)*;base64,(?P<data>.*)$", re.DOTALL)
_VERSION_SEGMENT = re.compile(r"^v\d+$")


def is_blob_url(value: Optional[str]) -> bool:
    """True when the value is an already stored blob URL rather than a payload."""
    return bool(value) and value.startswith(URL_PREFIXES)


def blob_urls(values: Iterable[Optional[str]]) -> List[str]:
    """Keep only the values that are blob URLs."""
    return [value for value in values if is_blob_url(value)]


def public_id_from_url(url: str) -> str:
    """
    Derive the blob store identifier from a stored URL.

    Cloudinary delivery URLs look like
    ``https://res.cloudinary.com/<cloud>/image/upload/v1712/<folder>/<name>.jpg``;
    the identifier is everything after ``upload/`` without the version
    segment and the extension. Other URLs use their last path segment.

    Args:
        url: Stored blob URL

    Returns:
        Identifier accepted by ``BlobStore.destroy``
    """
    parsed = urlparse(url)
    segments = [segment for segment in parsed.path.split("/") if segment]
    if not segments:
        if not parsed.hostname:
            raise InvalidImagePayloadError(f"cannot derive identifier from '{url}'")
        return parsed.hostname

    if "upload" in segments:
        segments = segments[segments.index("upload") + 1:]
        # Transformation and version segments precede the identifier
        while len(segments) > 1 and ("," in segments[0] or _VERSION_SEGMENT.match(segments[0])):
            segments = segments[1:]
    else:
        segments = segments[-1:]

    public_id = "/".join(segments)
    return public_id.rsplit(".", 1)[0] if "." in segments[-1] else public_id


def decode_image_payload(payload: str, max_size: Optional[int] = None,
                         allowed_formats: Optional[List[str]] = None) -> Tuple[bytes, str]:
    """
    Decode a raw image payload and validate it with Pillow.

    Args:
        payload: Data URI or bare base64 string
        max_size: Optional maximum decoded size in bytes
        allowed_formats: Optional list of allowed Pillow format names (lowercase)

    Returns:
        Tuple of (image bytes, lowercase format name)

    Raises:
        InvalidImagePayloadError: If the payload cannot be decoded as an image
        ImageTooLargeError: If the decoded image exceeds ``max_size``
    """
    if not isinstance(payload, str) or not payload:
        raise InvalidImagePayloadError("expected a non-empty string")

    match = _DATA_URI.match(payload)
    encoded = match.group("data") if match else payload

    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImagePayloadError(f"not valid base64 ({e})")

    if max_size is not None and len(content) > max_size:
        raise ImageTooLargeError(len(content), max_size)

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
            image_format = (img.format or "").lower()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImagePayloadError(f"not a readable image ({e})")

    if allowed_formats and image_format not in allowed_formats:
        raise InvalidImagePayloadError(
            f"format '{image_format}' not allowed. Allowed formats: {', '.join(allowed_formats)}"
        )

    return content, image_format
