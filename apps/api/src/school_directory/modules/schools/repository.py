"""
School Repository

Database operations for the school directory.
"""

import logging

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.modules.schools.models import School

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        address: str,
        city: str,
        state: str,
        contact: str,
        email: str,
        image: str,
    ) -> School:
        """
        Create a new school record.

        Args:
            db: Database session
            name: School name
            address: Street address
            city: City name
            state: State name
            contact: 10-digit contact number
            email: Contact email address
            image: Stored image reference (path or URL)

        Returns:
            Created School instance
        """
        school = School(
            name=name,
            address=address,
            city=city,
            state=state,
            contact=contact,
            email=email,
            image=image,
        )

        db.add(school)
        await db.flush()
        await db.refresh(school)
        await db.commit()

        logger.info(f"Created school: {school.id} - {school.name}")
        return school

    @staticmethod
    def list_statement() -> Select:
        """All schools, newest first."""
        return select(School).order_by(School.created_at.desc())

    @staticmethod
    async def list_all(db: AsyncSession) -> list[School]:
        result = await db.execute(SchoolRepository.list_statement())
        return list(result.scalars().all())
