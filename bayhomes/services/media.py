"""
Image lifecycle coordination between the services and the blob store.
Uploads new payloads concurrently, keeps stored URLs untouched and releases
blobs that a mutation no longer references.
"""

from typing import Dict, Iterable, List, Optional, Sequence
import asyncio
import logging

from bayhomes.services.blob_store import BlobStore
from bayhomes.utils.images import blob_urls, is_blob_url, public_id_from_url

logger = logging.getLogger(__name__)


class MediaCoordinator:
    """
    Per-operation helper around a BlobStore.
    Remembers every URL it uploaded so a failed operation can give them back.
    """

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store
        self.uploaded: List[str] = []

    async def resolve_one(self, value: Optional[str]) -> Optional[str]:
        """Resolve a single image field value to a blob URL."""
        resolved = await self.resolve_many([value])
        return resolved[0]

    async def resolve_many(self, values: Sequence[Optional[str]]) -> List[Optional[str]]:
        """
        Resolve image field values to blob URLs, keeping their order.

        URLs pass through unchanged, empty values stay empty and raw payloads
        are uploaded concurrently. If any upload fails the whole batch fails:
        the blobs stored by the other uploads are released before the first
        error is re-raised.

        Args:
            values: Mix of blob URLs, raw payloads and None

        Returns:
            List of blob URLs (or None) in input order
        """
        pending = [(index, value) for index, value in enumerate(values) if value and not is_blob_url(value)]
        resolved = [value or None for value in values]
        if not pending:
            return resolved

        results = await asyncio.gather(
            *(self.blob_store.upload(payload) for _, payload in pending),
            return_exceptions=True
        )

        failures = [result for result in results if isinstance(result, BaseException)]
        stored = [result for result in results if not isinstance(result, BaseException)]
        if failures:
            logger.error(f"Image upload batch failed ({len(failures)} of {len(pending)} uploads): {failures[0]}")
            await self.release(stored)
            raise failures[0]

        self.uploaded.extend(stored)
        for (index, _), url in zip(pending, stored):
            resolved[index] = url

        logger.debug(f"Uploaded {len(stored)} images")
        return resolved

    async def resolve_groups(self, groups: Dict[str, Sequence[Optional[str]]]) -> Dict[str, List[Optional[str]]]:
        """
        Resolve several image fields as one concurrent batch.

        Args:
            groups: Field name to list of values

        Returns:
            Field name to list of resolved values, same shapes as the input
        """
        flat: List[Optional[str]] = []
        bounds = {}
        for name, values in groups.items():
            start = len(flat)
            flat.extend(values)
            bounds[name] = (start, len(flat))

        resolved = await self.resolve_many(flat)
        return {name: resolved[start:end] for name, (start, end) in bounds.items()}

    @staticmethod
    def superseded(old_urls: Iterable[Optional[str]], new_urls: Iterable[Optional[str]]) -> List[str]:
        """URLs referenced before a mutation and no longer referenced after it."""
        keep = {url for url in new_urls if url}
        result = []
        for url in old_urls:
            if url and url not in keep and url not in result:
                result.append(url)
        return result

    async def release(self, urls: Iterable[str]) -> List[str]:
        """
        Destroy blobs by URL, concurrently and best effort.

        Failures are logged with their URL and returned; they are never raised,
        so a committed mutation is not reported as failed because of cleanup.

        Args:
            urls: Blob URLs to destroy

        Returns:
            URLs whose destroy call failed
        """
        targets = blob_urls(dict.fromkeys(urls))
        if not targets:
            return []

        results = await asyncio.gather(*(self._destroy(url) for url in targets), return_exceptions=True)

        failed = []
        for url, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to release blob {url}, it is now orphaned: {result}")
                failed.append(url)

        logger.info(f"Released {len(targets) - len(failed)} of {len(targets)} blobs")
        return failed

    async def discard_uploaded(self) -> List[str]:
        """Release everything uploaded by this coordinator; used when an operation aborts."""
        uploaded, self.uploaded = self.uploaded, []
        if uploaded:
            logger.warning(f"Operation aborted, releasing {len(uploaded)} freshly uploaded blobs")
        return await self.release(uploaded)

    async def _destroy(self, url: str) -> None:
        await self.blob_store.destroy(public_id_from_url(url))
