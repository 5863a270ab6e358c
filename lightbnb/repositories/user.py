"""
User repository for account lookup and creation.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from lightbnb.repositories.base import BaseRepository
from lightbnb.models.user import User
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for users, keyed by id and by unique email."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Insert a user. The password must already be hashed.

        A duplicate email surfaces as the driver's IntegrityError.
        """
        created_user = await self.create(user_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        normalized_email = email.lower().strip()
        return await self.get_by_field("email", normalized_email)
