"""
Developer service for managing the companies behind projects.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.models.developer import Developer
from bayhomes.models.project import Project
from bayhomes.repositories.base import ListParams
from bayhomes.repositories.developer import DeveloperRepository
from bayhomes.repositories.project import ProjectRepository
from bayhomes.schemas.developer import DeveloperCreate, DeveloperUpdate
from bayhomes.services.base import EntityService
from bayhomes.services.blob_store import BlobStore
from bayhomes.utils.exceptions import APIException, DuplicateResourceError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class DeveloperService(EntityService):
    """Developer service with transactional multi-document writes."""

    def __init__(self, db_session: AsyncSession, blob_store: BlobStore):
        super().__init__(db_session, blob_store)
        self.developer_repo = DeveloperRepository(db_session)
        self.project_repo = ProjectRepository(db_session)

    async def list_developers(
        self,
        developer_name: Optional[str] = None,
        params: Optional[ListParams] = None
    ) -> Tuple[List[Developer], int]:
        """List developers, optionally filtered by exact name."""
        return await self.developer_repo.list(self.developer_repo.conditions(developer_name), params)

    async def get_developer(self, developer_id: uuid.UUID) -> Developer:
        """
        Get a developer with its creator populated.

        Raises:
            NotFoundError: If the developer doesn't exist
        """
        developer = await self.developer_repo.get_detail(developer_id)
        if not developer:
            raise NotFoundError("Developer", str(developer_id))
        return developer

    async def get_developer_projects(self, developer: Developer) -> List[Project]:
        """Projects listed in the developer's back-reference list."""
        return await self.developer_repo.list_projects(developer)

    async def create_developer(self, command: DeveloperCreate) -> Developer:
        """
        Create a developer and link it into the creator's list.

        Raises:
            RelatedEntityNotFoundError: If the user doesn't exist
            DuplicateResourceError: If the name is taken
        """
        try:
            async with self.transaction():
                creator = await self._resolve_creator(command.email)
                await self._ensure_name_free(command.developer_name)

                image = await self.media.resolve_one(command.image)

                developer = Developer(
                    developer_name=command.developer_name,
                    description=command.description,
                    image=image,
                    project_ids=[],
                    creator=creator,
                )
                await self.developer_repo.add(developer)
                self.ledger.link(creator, "developer_ids", developer.id)

            logger.info(f"Developer created by {creator.email}: {developer.developer_name} (ID: {developer.id})")
            return developer

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create developer '{command.developer_name}': {e}")
            raise

    async def update_developer(self, developer_id: uuid.UUID, command: DeveloperUpdate) -> Developer:
        """
        Update the supplied fields of a developer; a replaced logo is released after the commit.

        Raises:
            NotFoundError: If the developer doesn't exist
            DuplicateResourceError: If the new name is taken by another developer
        """
        try:
            async with self.transaction():
                developer = await self.get_developer(developer_id)
                old_images = developer.image_urls
                changes = command.changes()

                if "developer_name" in changes and changes["developer_name"] != developer.developer_name:
                    await self._ensure_name_free(changes["developer_name"])

                if "image" in changes:
                    changes["image"] = await self.media.resolve_one(changes["image"])

                for field, value in changes.items():
                    setattr(developer, field, value)

            logger.info(f"Developer updated: {developer.id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update developer {developer_id}: {e}")
            raise

        await self.media.release(self.media.superseded(old_images, developer.image_urls))
        return developer

    async def delete_developer(self, developer_id: uuid.UUID) -> None:
        """
        Delete a developer, pull its id from the creator and detach its
        projects in one transaction, then release its logo.

        Raises:
            NotFoundError: If the developer doesn't exist
        """
        try:
            async with self.transaction():
                developer = await self.get_developer(developer_id)
                owned = developer.image_urls

                self.ledger.unlink(developer.creator, "developer_ids", developer.id)

                projects = await self.project_repo.list_by_developer(developer.id)
                for project in projects:
                    project.developer = None
                    project.developer_id = None

                await self.developer_repo.remove(developer)

            logger.info(f"Developer deleted: {developer_id} ({len(projects)} projects detached)")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete developer {developer_id}: {e}")
            raise

        await self.media.release(owned)

    async def _ensure_name_free(self, developer_name: str) -> None:
        if await self.developer_repo.get_by_name(developer_name):
            raise DuplicateResourceError("Developer", developer_name)
