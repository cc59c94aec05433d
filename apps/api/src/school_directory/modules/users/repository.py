"""
User Repository

Database operations for user management.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.modules.users.models import User

logger = logging.getLogger(__name__)


def default_name_for(email: str) -> str:
    """Use the local part of the address when no name was given."""
    return email.split("@", 1)[0]


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        name: str | None = None,
        is_admin: bool = False,
        last_login: datetime | None = None,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (unique)
            name: Display name, defaults to the email local part
            is_admin: Whether the user is an administrator
            last_login: Time of the login that created the user

        Returns:
            Created User instance
        """
        user = User(
            email=email,
            name=name or default_name_for(email),
            is_admin=is_admin,
            last_login=last_login,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email}")
        return user

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address.

        Args:
            db: Database session
            email: Email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def record_login(db: AsyncSession, email: str, name: str | None = None) -> User:
        """
        Create the user on first login, otherwise stamp last_login.

        Commits the change.
        """
        now = datetime.now(UTC)
        user = await UserRepository.get_by_email(db, email)

        if user is None:
            user = await UserRepository.create(db, email=email, name=name, last_login=now)
        else:
            user.last_login = now
            await db.flush()

        await db.commit()
        return user
