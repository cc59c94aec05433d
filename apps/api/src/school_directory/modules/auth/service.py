"""
One-Time Code Login Service

Business logic for passwordless email login.

1. Request Flow:
   - Validate the email address
   - Replace any previous code for the email with a fresh 6-digit code
   - Hand the code to the email sender

2. Verify Flow:
   - Atomically consume a matching, unexpired code
   - Create the user on first login, otherwise stamp last_login

Security considerations:
- Codes come from the secrets CSPRNG
- A code can be consumed once; concurrent verifications race on a single
  conditional DELETE so only one succeeds
- Wrong, expired and reused codes produce the same error
- Codes are never logged here (the console email sender logs them in development)
- Emails are compared case-insensitively
"""

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.core.email import EmailSender, send_otp_email
from school_directory.core.errors import InvalidOrExpiredCode, PersistenceError, ValidationError
from school_directory.modules.auth import repository
from school_directory.modules.users.models import User
from school_directory.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# Constants
CODE_MIN = 100000
CODE_MAX = 999999
DEFAULT_CODE_TTL_MINUTES = 10

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CODE_PATTERN = re.compile(r"^[0-9]{6}$")


@dataclass
class OtpRequestResult:
    """Outcome of a code request.

    ``delivered`` is reported separately: the code stays valid even when the
    email could not be sent.
    """

    email: str
    code: str
    expires_at: datetime
    delivered: bool


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def generate_code() -> str:
    """
    Generate a 6-digit login code.

    Uniform over 100000-999999, so the string is never zero-padded.
    """
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def calculate_code_expiry(ttl_minutes: int, now: datetime | None = None) -> datetime:
    return (now or datetime.now(UTC)) + timedelta(minutes=ttl_minutes)


async def request_code(
    db: AsyncSession,
    email_sender: EmailSender,
    email: str | None,
    ttl_minutes: int = DEFAULT_CODE_TTL_MINUTES,
) -> OtpRequestResult:
    """
    Issue a login code for an email address.

    Args:
        db: Database session
        email_sender: Delivery collaborator
        email: Address to send the code to
        ttl_minutes: Code lifetime

    Returns:
        The stored code and whether it was delivered

    Raises:
        ValidationError: If the email address is malformed
        PersistenceError: If the code could not be stored
    """
    email = normalize_email(email)
    if not is_valid_email(email):
        raise ValidationError(
            "Valid email is required",
            errors={"email": "Valid email is required"},
        )

    code = generate_code()
    expires_at = calculate_code_expiry(ttl_minutes)

    try:
        await repository.replace_code(db, email, code, expires_at)
    except SQLAlchemyError as e:
        logger.error(f"Failed to store login code for {email}: {e}")
        await db.rollback()
        raise PersistenceError() from e

    delivered = await send_otp_email(email_sender, email, code, ttl_minutes)
    if delivered:
        logger.info(f"Login code issued for {email}")
    else:
        logger.warning(f"Login code issued for {email} but email delivery failed")

    return OtpRequestResult(email=email, code=code, expires_at=expires_at, delivered=delivered)


async def verify_code(
    db: AsyncSession,
    email: str | None,
    code: str | None,
    name: str | None = None,
) -> User:
    """
    Verify and consume a login code.

    Args:
        db: Database session
        email: Address the code was sent to
        code: Submitted code
        name: Display name for a first-time user

    Returns:
        The logged-in user

    Raises:
        ValidationError: If email or code is missing
        InvalidOrExpiredCode: If no unexpired code matched
        PersistenceError: If the database failed
    """
    email = normalize_email(email)
    code = (code or "").strip()

    if not email or not code:
        raise ValidationError("Email and OTP are required")

    if not CODE_PATTERN.match(code):
        raise InvalidOrExpiredCode()

    try:
        consumed_id = await repository.consume_code(db, email, code, datetime.now(UTC))
    except SQLAlchemyError as e:
        logger.error(f"Failed to verify login code for {email}: {e}")
        await db.rollback()
        raise PersistenceError() from e

    if consumed_id is None:
        logger.info(f"Rejected login code for {email}")
        raise InvalidOrExpiredCode()

    try:
        user = await UserRepository.record_login(db, email, (name or "").strip() or None)
    except SQLAlchemyError as e:
        logger.error(f"Failed to record login for {email}: {e}")
        await db.rollback()
        raise PersistenceError() from e

    logger.info(f"User logged in: {user.email}")
    return user
