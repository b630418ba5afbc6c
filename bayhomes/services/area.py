"""
Area service for managing neighbourhoods.
Areas are created before the properties and projects that reference them by name.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.models.area import Area
from bayhomes.repositories.base import ListParams
from bayhomes.repositories.area import AreaRepository
from bayhomes.repositories.project import ProjectRepository
from bayhomes.repositories.property import PropertyRepository
from bayhomes.schemas.area import AreaCreate, AreaUpdate
from bayhomes.services.base import EntityService
from bayhomes.services.blob_store import BlobStore
from bayhomes.utils.exceptions import APIException, DuplicateResourceError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class AreaService(EntityService):
    """Area service with transactional multi-document writes."""

    def __init__(self, db_session: AsyncSession, blob_store: BlobStore):
        super().__init__(db_session, blob_store)
        self.area_repo = AreaRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.project_repo = ProjectRepository(db_session)

    async def list_areas(
        self,
        area_name: Optional[str] = None,
        params: Optional[ListParams] = None
    ) -> Tuple[List[Area], int]:
        """List areas, optionally filtered by exact name."""
        return await self.area_repo.list(self.area_repo.conditions(area_name), params)

    async def get_area(self, area_id: uuid.UUID) -> Area:
        """
        Get an area with its creator populated.

        Raises:
            NotFoundError: If the area doesn't exist
        """
        area = await self.area_repo.get_detail(area_id)
        if not area:
            raise NotFoundError("Area", str(area_id))
        return area

    async def create_area(self, command: AreaCreate) -> Area:
        """
        Create an area and link it into the creator's list.

        Args:
            command: Validated create payload

        Returns:
            Created area

        Raises:
            RelatedEntityNotFoundError: If the user doesn't exist
            DuplicateResourceError: If the name is taken
        """
        try:
            async with self.transaction():
                creator = await self._resolve_creator(command.email)
                await self._ensure_name_free(command.area_name)

                image = await self.media.resolve_one(command.image)

                area = Area(
                    area_name=command.area_name,
                    description=command.description,
                    features=list(command.features),
                    image=image,
                    location=command.location,
                    property_ids=[],
                    project_ids=[],
                    creator=creator,
                )
                await self.area_repo.add(area)
                self.ledger.link(creator, "area_ids", area.id)

            logger.info(f"Area created by {creator.email}: {area.area_name} (ID: {area.id})")
            return area

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create area '{command.area_name}': {e}")
            raise

    async def update_area(self, area_id: uuid.UUID, command: AreaUpdate) -> Area:
        """
        Update the supplied fields of an area; a replaced image is released after the commit.

        Raises:
            NotFoundError: If the area doesn't exist
            DuplicateResourceError: If the new name is taken by another area
        """
        try:
            async with self.transaction():
                area = await self.get_area(area_id)
                old_images = area.image_urls
                changes = command.changes()

                if "area_name" in changes and changes["area_name"] != area.area_name:
                    await self._ensure_name_free(changes["area_name"])

                if "image" in changes:
                    changes["image"] = await self.media.resolve_one(changes["image"])

                for field, value in changes.items():
                    setattr(area, field, value)

            logger.info(f"Area updated: {area.id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update area {area_id}: {e}")
            raise

        await self.media.release(self.media.superseded(old_images, area.image_urls))
        return area

    async def delete_area(self, area_id: uuid.UUID) -> None:
        """
        Delete an area.

        The id is pulled from the creator's list, and properties and projects
        located in the area are detached from it, in the same transaction.
        The area image is released afterwards.

        Raises:
            NotFoundError: If the area doesn't exist
        """
        try:
            async with self.transaction():
                area = await self.get_area(area_id)
                owned = area.image_urls

                self.ledger.unlink(area.creator, "area_ids", area.id)

                properties = await self.property_repo.list_by_area(area.id)
                projects = await self.project_repo.list_by_area(area.id)
                for dependent in [*properties, *projects]:
                    dependent.area = None
                    dependent.area_id = None

                await self.area_repo.remove(area)

            logger.info(f"Area deleted: {area_id} ({len(properties)} properties, {len(projects)} projects detached)")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete area {area_id}: {e}")
            raise

        await self.media.release(owned)

    async def _ensure_name_free(self, area_name: str) -> None:
        if await self.area_repo.get_by_name(area_name):
            raise DuplicateResourceError("Area", area_name)
