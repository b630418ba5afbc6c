"""
Project service for managing developments.
A project belongs to one area, one developer and one user; all three list its id.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.models.area import Area
from bayhomes.models.developer import Developer
from bayhomes.models.project import Project
from bayhomes.repositories.base import ListParams
from bayhomes.repositories.area import AreaRepository
from bayhomes.repositories.developer import DeveloperRepository
from bayhomes.repositories.project import ProjectRepository
from bayhomes.schemas.project import ProjectCreate, ProjectUpdate
from bayhomes.services.base import EntityService
from bayhomes.services.blob_store import BlobStore
from bayhomes.utils.exceptions import APIException, NotFoundError, RelatedEntityNotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

FLOOR_PLAN_KEYS = ("floor_type", "floor_size", "floor_image", "num_of_rooms")


def _floor_plan(plan: Dict[str, Any]) -> Dict[str, Any]:
    """Stored floor plan shape; every key is present."""
    return {key: plan.get(key) for key in FLOOR_PLAN_KEYS}


class ProjectService(EntityService):
    """Project service with transactional multi-document writes."""

    def __init__(self, db_session: AsyncSession, blob_store: BlobStore):
        super().__init__(db_session, blob_store)
        self.project_repo = ProjectRepository(db_session)
        self.area_repo = AreaRepository(db_session)
        self.developer_repo = DeveloperRepository(db_session)

    async def list_projects(
        self,
        project_name_like: Optional[str] = None,
        project_type: Optional[str] = None,
        params: Optional[ListParams] = None
    ) -> Tuple[List[Project], int]:
        """List projects by name substring and type."""
        conditions = self.project_repo.conditions(project_name_like, project_type)
        return await self.project_repo.list(conditions, params)

    async def get_project(self, project_id: uuid.UUID) -> Project:
        """
        Get a project with area, developer and creator populated.

        Raises:
            NotFoundError: If the project doesn't exist
        """
        project = await self.project_repo.get_detail(project_id)
        if not project:
            raise NotFoundError("Project", str(project_id))

        logger.debug(f"Retrieved project: {project_id}")
        return project

    async def create_project(self, command: ProjectCreate) -> Project:
        """
        Create a project.

        Developer, area and creator are resolved before any upload. Interior,
        exterior, background and floor plan images go up as one concurrent
        batch. The project and the three back-reference lists are written in
        one transaction.

        Args:
            command: Validated create payload

        Returns:
            Created project with relations populated

        Raises:
            RelatedEntityNotFoundError: If the developer, area or user doesn't exist
            BlobStoreError: If an image upload fails
        """
        try:
            async with self.transaction():
                developer = await self._resolve_developer(command.developer_name)
                area = await self._resolve_area(command.area_name)
                creator = await self._resolve_creator(command.email)

                plans = [_floor_plan(plan.model_dump()) for plan in command.floor_plans or []]
                images = await self.media.resolve_groups({
                    "interior": command.interior_images or [],
                    "exterior": command.exterior_images or [],
                    "background": [command.background_image],
                    "floors": [plan["floor_image"] for plan in plans],
                })
                for plan, url in zip(plans, images["floors"]):
                    plan["floor_image"] = url

                project = Project(
                    project_name=command.project_name,
                    description=command.description,
                    project_type=command.project_type,
                    start_price=command.start_price,
                    size=command.size,
                    rooms=command.rooms,
                    handover_date=command.handover_date,
                    amenities=list(command.amenities or []),
                    interior_images=[url for url in images["interior"] if url],
                    exterior_images=[url for url in images["exterior"] if url],
                    background_image=images["background"][0],
                    floor_plans=plans,
                    location=command.location,
                    about_map=command.about_map,
                    map_url=command.map_url,
                    area=area,
                    developer=developer,
                    creator=creator,
                )
                await self.project_repo.add(project)

                self.ledger.link(developer, "project_ids", project.id)
                self.ledger.link(area, "project_ids", project.id)
                self.ledger.link(creator, "project_ids", project.id)

            logger.info(f"Project created by {creator.email}: {project.project_name} (ID: {project.id})")
            return project

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create project '{command.project_name}': {e}")
            raise

    async def update_project(self, project_id: uuid.UUID, command: ProjectUpdate) -> Project:
        """
        Update the supplied fields of a project.

        A changed area or developer name moves the project id between the
        old and new back-reference lists. Superseded images are released
        after the commit.

        Raises:
            NotFoundError: If the project doesn't exist
            RelatedEntityNotFoundError: If a new area or developer name doesn't exist
        """
        try:
            async with self.transaction():
                project = await self.get_project(project_id)
                old_images = project.image_urls
                changes = command.changes()

                area_name = changes.pop("area_name", None)
                if area_name is not None and (project.area is None or project.area.area_name != area_name):
                    area = await self._resolve_area(area_name)
                    self.ledger.move(project.area, area, "project_ids", project.id)
                    project.area = area

                developer_name = changes.pop("developer_name", None)
                if developer_name is not None and (
                    project.developer is None or project.developer.developer_name != developer_name
                ):
                    developer = await self._resolve_developer(developer_name)
                    self.ledger.move(project.developer, developer, "project_ids", project.id)
                    project.developer = developer

                await self._apply_images(project, changes)

                for field, value in changes.items():
                    setattr(project, field, value)

            logger.info(f"Project updated: {project.id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update project {project_id}: {e}")
            raise

        await self.media.release(self.media.superseded(old_images, project.image_urls))
        return project

    async def delete_project(self, project_id: uuid.UUID) -> None:
        """
        Delete a project, pull its id from the developer, the area and the
        creator, then release every blob it owned.

        Raises:
            NotFoundError: If the project doesn't exist
        """
        try:
            async with self.transaction():
                project = await self.get_project(project_id)
                owned = project.image_urls

                self.ledger.unlink(project.developer, "project_ids", project.id)
                self.ledger.unlink(project.area, "project_ids", project.id)
                self.ledger.unlink(project.creator, "project_ids", project.id)
                await self.project_repo.remove(project)

            logger.info(f"Project deleted: {project_id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete project {project_id}: {e}")
            raise

        await self.media.release(owned)

    async def _resolve_area(self, area_name: str) -> Area:
        area = await self.area_repo.get_by_name(area_name)
        if not area:
            raise RelatedEntityNotFoundError("Area", area_name)
        return area

    async def _resolve_developer(self, developer_name: str) -> Developer:
        developer = await self.developer_repo.get_by_name(developer_name)
        if not developer:
            raise RelatedEntityNotFoundError("Developer", developer_name)
        return developer

    async def _apply_images(self, project: Project, changes: Dict[str, Any]) -> None:
        """Resolve the supplied image fields, floor plans included, as one upload batch."""
        groups = {}
        if "interior_images" in changes:
            groups["interior"] = changes.pop("interior_images")
        if "exterior_images" in changes:
            groups["exterior"] = changes.pop("exterior_images")
        if "background_image" in changes:
            groups["background"] = [changes.pop("background_image")]

        plans = None
        if "floor_plans" in changes:
            plans = [_floor_plan(plan) for plan in changes.pop("floor_plans")]
            groups["floors"] = [plan["floor_image"] for plan in plans]

        if not groups:
            return

        resolved = await self.media.resolve_groups(groups)
        if "interior" in resolved:
            project.interior_images = [url for url in resolved["interior"] if url]
        if "exterior" in resolved:
            project.exterior_images = [url for url in resolved["exterior"] if url]
        if "background" in resolved:
            project.background_image = resolved["background"][0]
        if plans is not None:
            for plan, url in zip(plans, resolved["floors"]):
                plan["floor_image"] = url
            project.floor_plans = plans
