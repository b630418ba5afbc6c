"""
Developer repository.
Developers are resolved by name from project payloads.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.repositories.base import BaseRepository
from bayhomes.models.developer import Developer
from bayhomes.models.project import Project
from typing import Any, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class DeveloperRepository(BaseRepository[Developer]):
    """Repository for developers with name filtering and creator population."""

    sort_fields = {
        "developerName": "developer_name",
        "developer_name": "developer_name",
        "createdAt": "created_at",
        "created_at": "created_at",
        "updatedAt": "updated_at",
        "updated_at": "updated_at",
    }

    def __init__(self, db: AsyncSession):
        super().__init__(Developer, db)

    def conditions(self, developer_name: Optional[str] = None) -> List[Any]:
        """Build list filters; the developer name matches exactly."""
        conditions = []
        if developer_name:
            conditions.append(Developer.developer_name == developer_name)
        return conditions

    async def get_by_name(self, developer_name: str) -> Optional[Developer]:
        """Resolve a developer by its natural key."""
        return await self.get_by_field("developer_name", developer_name)

    async def get_detail(self, developer_id: uuid.UUID) -> Optional[Developer]:
        """Get a developer with its creator populated."""
        return await self.get_by_id(developer_id, relations=("creator",))

    async def list_projects(self, developer: Developer) -> List[Project]:
        """
        Resolve the developer's project back-references.

        Args:
            developer: Developer whose ``project_ids`` are resolved

        Returns:
            Projects in back-reference order
        """
        projects = await BaseRepository(Project, self.db).get_many_by_ids(developer.project_ids or [])
        logger.debug(f"Resolved {len(projects)} projects for developer {developer.id}")
        return projects
