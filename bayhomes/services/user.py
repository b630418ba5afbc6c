"""
User service.
Users are created on their first sign-in and never deleted by the listing workflows.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from bayhomes.database import transaction
from bayhomes.models.user import User
from bayhomes.repositories.base import ListParams
from bayhomes.repositories.user import UserRepository
from bayhomes.schemas.user import UserCreate
from bayhomes.utils.exceptions import NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Lookup and get-or-create for the users that own listings."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def list_users(self, params: Optional[ListParams] = None) -> Tuple[List[User], int]:
        return await self.user_repo.list((), params)

    async def get_user(self, user_id: uuid.UUID) -> User:
        """
        Get a user by ID.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def get_or_create_user(self, command: UserCreate) -> Tuple[User, bool]:
        """
        Return the user with this email, creating it on first sight.

        Args:
            command: Validated sign-in payload

        Returns:
            Tuple of (user, whether it was created)
        """
        async with transaction(self.db):
            user = await self.user_repo.get_by_email(command.email)
            if user:
                logger.debug(f"User already exists: {command.email}")
                return user, False

            user = User(
                email=command.email,
                name=command.name,
                avatar=command.avatar,
                property_ids=[],
                area_ids=[],
                developer_ids=[],
                project_ids=[],
            )
            await self.user_repo.add(user)

        logger.info(f"User created: {user.email} (ID: {user.id})")
        return user, True
