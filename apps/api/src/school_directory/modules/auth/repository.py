"""
One-Time Code Repository

Database operations for login codes.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Delete, delete
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.modules.auth.models import OneTimeCode


async def replace_code(
    db: AsyncSession,
    email: str,
    code: str,
    expires_at: datetime,
) -> OneTimeCode:
    """Delete every code for the email and store a new one in one transaction."""

    await db.execute(delete(OneTimeCode).where(OneTimeCode.email == email))

    new_code = OneTimeCode(email=email, code=code, expires_at=expires_at)
    db.add(new_code)
    await db.commit()
    await db.refresh(new_code)

    return new_code


def build_consume_statement(email: str, code: str, now: datetime) -> Delete:
    """Conditional delete of a matching, unexpired code."""
    return (
        delete(OneTimeCode)
        .where(
            OneTimeCode.email == email,
            OneTimeCode.code == code,
            OneTimeCode.expires_at > now,
        )
        .returning(OneTimeCode.id)
    )


async def consume_code(db: AsyncSession, email: str, code: str, now: datetime) -> UUID | None:
    """
    Atomically consume a code.

    Lookup and removal are one DELETE ... RETURNING statement, so when two
    requests race on the same code only one of them gets the row back.

    Returns:
        The consumed code's ID, or None if no valid code matched
    """
    result = await db.execute(build_consume_statement(email, code, now))
    consumed_id = result.scalars().first()
    await db.commit()
    return consumed_id
