"""
Property repository for managing property listings.
Provides title search, type and status filtering, and population of area and creator.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from bayhomes.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from bayhomes.models.property import Property, PropertyStatus
from typing import Any, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    List queries use the type/status index and sort newest first by default.
    """

    sort_fields = {
        "title": "title",
        "price": "price",
        "propertyType": "property_type",
        "property_type": "property_type",
        "status": "status",
        "size": "size",
        "numOfrooms": "num_of_rooms",
        "createdAt": "created_at",
        "created_at": "created_at",
        "updatedAt": "updated_at",
        "updated_at": "updated_at",
    }

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    def conditions(
        self,
        title_like: Optional[str] = None,
        property_type: Optional[str] = None,
        status: Optional[PropertyStatus] = None
    ) -> List[Any]:
        """
        Build list filters.

        Args:
            title_like: Case-insensitive substring of the title
            property_type: Exact property type
            status: Lifecycle status

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []
        if title_like:
            conditions.append(Property.title.ilike(contains_pattern(title_like), escape=LIKE_ESCAPE))
        if property_type:
            conditions.append(Property.property_type == property_type)
        if status:
            conditions.append(Property.status == status)
        return conditions

    async def get_detail(self, property_id: uuid.UUID) -> Optional[Property]:
        """Get a property with its area and creator populated."""
        return await self.get_by_id(property_id, relations=("area", "creator"))

    async def list_by_area(self, area_id: uuid.UUID) -> List[Property]:
        """All properties located in an area."""
        result = await self.db.execute(select(Property).where(Property.area_id == area_id))
        return list(result.scalars().all())
