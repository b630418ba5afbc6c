"""
Area repository.
Areas are resolved by name from property and project payloads.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.repositories.base import BaseRepository
from bayhomes.models.area import Area
from typing import Any, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class AreaRepository(BaseRepository[Area]):
    """Repository for areas with name filtering and creator population."""

    sort_fields = {
        "areaName": "area_name",
        "area_name": "area_name",
        "createdAt": "created_at",
        "created_at": "created_at",
        "updatedAt": "updated_at",
        "updated_at": "updated_at",
    }

    def __init__(self, db: AsyncSession):
        super().__init__(Area, db)

    def conditions(self, area_name: Optional[str] = None) -> List[Any]:
        """Build list filters; the area name matches exactly."""
        conditions = []
        if area_name:
            conditions.append(Area.area_name == area_name)
        return conditions

    async def get_by_name(self, area_name: str) -> Optional[Area]:
        """Resolve an area by its natural key."""
        return await self.get_by_field("area_name", area_name)

    async def get_detail(self, area_id: uuid.UUID) -> Optional[Area]:
        """Get an area with its creator populated."""
        return await self.get_by_id(area_id, relations=("creator",))
