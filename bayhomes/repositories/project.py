"""
Project repository for development listings.
Provides name search, type filtering and population of area, developer and creator.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from bayhomes.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from bayhomes.models.project import Project
from typing import Any, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class ProjectRepository(BaseRepository[Project]):
    """Repository for projects."""

    sort_fields = {
        "projectName": "project_name",
        "project_name": "project_name",
        "projectType": "project_type",
        "project_type": "project_type",
        "startPrice": "start_price",
        "start_price": "start_price",
        "createdAt": "created_at",
        "created_at": "created_at",
        "updatedAt": "updated_at",
        "updated_at": "updated_at",
    }

    def __init__(self, db: AsyncSession):
        super().__init__(Project, db)

    def conditions(
        self,
        project_name_like: Optional[str] = None,
        project_type: Optional[str] = None
    ) -> List[Any]:
        """
        Build list filters.

        Args:
            project_name_like: Case-insensitive substring of the project name
            project_type: Exact project type

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []
        if project_name_like:
            conditions.append(Project.project_name.ilike(contains_pattern(project_name_like), escape=LIKE_ESCAPE))
        if project_type:
            conditions.append(Project.project_type == project_type)
        return conditions

    async def get_detail(self, project_id: uuid.UUID) -> Optional[Project]:
        """Get a project with its area, developer and creator populated."""
        return await self.get_by_id(project_id, relations=("area", "developer", "creator"))

    async def list_by_area(self, area_id: uuid.UUID) -> List[Project]:
        """All projects located in an area."""
        result = await self.db.execute(select(Project).where(Project.area_id == area_id))
        return list(result.scalars().all())

    async def list_by_developer(self, developer_id: uuid.UUID) -> List[Project]:
        """All projects built by a developer."""
        result = await self.db.execute(select(Project).where(Project.developer_id == developer_id))
        return list(result.scalars().all())
