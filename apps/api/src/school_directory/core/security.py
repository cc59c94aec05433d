"""
Session Token Signing

Session tokens are stateless HS256 JWTs. They cannot be revoked before they
expire; rotating JWT_SECRET invalidates every outstanding token.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from school_directory.core.config import Settings

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "session"


def create_session_token(
    settings: Settings,
    *,
    user_id: str,
    email: str,
    name: str | None,
    is_admin: bool = False,
    now: datetime | None = None,
) -> str:
    """
    Create a signed session token.

    Payload contains:
      sub      - user ID
      email    - user's email address
      name     - display name
      is_admin - admin flag
      type     - always "session"
      iat/exp  - issue time and expiry (SESSION_TTL_DAYS later)
    """
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": user_id,
        "email": email,
        "name": name,
        "is_admin": is_admin,
        "type": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.session_ttl_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """
    Verify signature and expiry and return the claims.

    Returns None for any failure; callers cannot tell why a token was rejected.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected session token: {e}")
        return None
