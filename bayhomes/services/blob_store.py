"""
Blob store abstraction for listing images.
Supports Cloudinary (production) and the local filesystem (development).

The store is an explicitly constructed object injected into the services,
so tests can substitute a double.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
import asyncio
import logging
import uuid

import aiofiles
import aiofiles.os
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from bayhomes.config import Settings
from bayhomes.utils.exceptions import BlobStoreError
from bayhomes.utils.images import decode_image_payload

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Remote media host contract: upload a payload, destroy by identifier."""

    @abstractmethod
    async def upload(self, payload: str) -> str:
        """
        Store an image payload.

        Args:
            payload: Data URI or base64 encoded image

        Returns:
            Durable URL of the stored image
        """

    @abstractmethod
    async def destroy(self, public_id: str) -> None:
        """
        Delete a stored image.

        Args:
            public_id: Identifier derived from the stored URL
        """


class CloudinaryBlobStore(BlobStore):
    """Cloudinary backed store. The SDK is blocking, so calls run in a worker thread."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: Optional[str] = None):
        if not (cloud_name and api_key and api_secret):
            raise ValueError("Cloudinary cloud name, API key and API secret are required")

        self.folder = folder
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }
        logger.info(f"CloudinaryBlobStore initialized: cloud={cloud_name}, folder={folder}")

    async def upload(self, payload: str) -> str:
        options = dict(self._credentials, resource_type="image")
        if self.folder:
            options["folder"] = self.folder

        try:
            result = await asyncio.to_thread(cloudinary.uploader.upload, payload, **options)
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise BlobStoreError("upload", str(e))

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise BlobStoreError("upload", "response did not include a URL")

        logger.debug(f"Uploaded image to Cloudinary: {result.get('public_id')}")
        return url

    async def destroy(self, public_id: str) -> None:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy, public_id, resource_type="image", **self._credentials
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary destroy failed for {public_id}: {e}")
            raise BlobStoreError("destroy", str(e))

        outcome = result.get("result")
        if outcome == "not found":
            logger.warning(f"Cloudinary image already gone: {public_id}")
        elif outcome != "ok":
            raise BlobStoreError("destroy", f"unexpected result '{outcome}' for {public_id}")
        else:
            logger.debug(f"Destroyed Cloudinary image: {public_id}")


class LocalBlobStore(BlobStore):
    """Filesystem store for development; files are served by the app under /media."""

    def __init__(self, media_dir: str, base_url: str, max_size: Optional[int] = None,
                 allowed_formats: Optional[List[str]] = None):
        self.media_dir = Path(media_dir)
        self.base_url = base_url.rstrip("/")
        self.max_size = max_size
        self.allowed_formats = allowed_formats
        self.media_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalBlobStore initialized: media_dir={self.media_dir}, base_url={self.base_url}")

    async def upload(self, payload: str) -> str:
        content, image_format = decode_image_payload(payload, self.max_size, self.allowed_formats)
        extension = "jpg" if image_format == "jpeg" else image_format
        filename = f"{uuid.uuid4().hex}.{extension}"
        file_path = self.media_dir / filename

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise BlobStoreError("upload", str(e))

        logger.debug(f"Saved image locally: {file_path}")
        return f"{self.base_url}/{filename}"

    async def destroy(self, public_id: str) -> None:
        # Identifiers are flat file stems; only direct children with that exact stem match
        stem = Path(public_id).name
        matches = [
            file_path for file_path in self.media_dir.iterdir()
            if file_path.is_file() and file_path.stem == stem
        ] if stem else []
        if not matches:
            logger.warning(f"Local image not found for deletion: {public_id}")
            return

        for file_path in matches:
            try:
                await aiofiles.os.remove(file_path)
            except OSError as e:
                raise BlobStoreError("destroy", str(e))
            logger.debug(f"Deleted local image: {file_path}")


def build_blob_store(settings: Settings) -> BlobStore:
    """
    Construct the blob store selected by configuration.

    Args:
        settings: Application settings

    Returns:
        BlobStore instance
    """
    if settings.blob_backend == "local":
        return LocalBlobStore(
            media_dir=settings.media_dir,
            base_url=settings.media_base_url,
            max_size=settings.max_image_size,
            allowed_formats=settings.allowed_image_formats,
        )

    return CloudinaryBlobStore(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        folder=settings.cloudinary_folder,
    )
