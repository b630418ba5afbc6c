"""
Shared plumbing for the listing services.
Holds the session, the media coordinator and the relationship ledger, and
runs each mutation as one transaction.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.database import transaction
from bayhomes.models.user import User
from bayhomes.repositories.user import UserRepository
from bayhomes.services.blob_store import BlobStore
from bayhomes.services.ledger import RelationshipLedger
from bayhomes.services.media import MediaCoordinator
from bayhomes.utils.exceptions import RelatedEntityNotFoundError
import logging

logger = logging.getLogger(__name__)


class EntityService:
    """
    Base class for the area, developer, project and property services.

    A mutation resolves its references, uploads its new images and stages
    its document writes inside ``transaction()``. Blobs that are no longer
    referenced are released only after the commit.
    """

    def __init__(self, db_session: AsyncSession, blob_store: BlobStore):
        self.db = db_session
        self.media = MediaCoordinator(blob_store)
        self.ledger = RelationshipLedger()
        self.user_repo = UserRepository(db_session)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Run one mutation atomically.

        Commits when the block exits cleanly. On any failure the session is
        rolled back and every blob uploaded inside the block is released, so
        neither documents nor blobs of a failed operation survive.
        """
        self.media.uploaded = []
        try:
            async with transaction(self.db) as session:
                yield session
        except Exception as e:
            logger.error(f"{type(self).__name__} transaction aborted: {e}")
            await self.media.discard_uploaded()
            raise
        self.media.uploaded = []

    async def _resolve_creator(self, email: str) -> User:
        """
        Resolve the owning user by email.

        Raises:
            RelatedEntityNotFoundError: If no user has this email
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            raise RelatedEntityNotFoundError("User", email)
        return user
