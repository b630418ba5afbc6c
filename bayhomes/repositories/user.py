"""
User repository.
Users are looked up by email, the natural key every create payload carries.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.repositories.base import BaseRepository
from bayhomes.models.user import User
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for the users owning listings."""

    sort_fields = {
        "email": "email",
        "name": "name",
        "createdAt": "created_at",
        "created_at": "created_at",
    }

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: User email

        Returns:
            User if found, None otherwise
        """
        return await self.get_by_field("email", email)
