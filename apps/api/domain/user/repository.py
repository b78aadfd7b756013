"""User repository implementation."""

from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging import get_logger

from .models import User

logger = get_logger(__name__)


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists(self, user_id: str) -> bool:
        result = await self.session.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def create(self, user: User) -> User:
        """Create a new user."""
        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create user", error=str(e))
            raise
        logger.info("User created", user_id=user.id, email=user.email)
        return user

    async def apply_changes(self, user_id: str, assignments: dict[str, Any]) -> Optional[User]:
        """Apply column assignments and return the refreshed user."""
        if assignments:
            await self.session.execute(
                update(User).where(User.id == user_id).values(**assignments)
            )
            await self.session.commit()
        return await self.get_by_id(user_id)
