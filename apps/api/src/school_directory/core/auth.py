"""
Session Authentication

Issues and reads the session cookie and provides FastAPI dependencies for
authenticated endpoints.

Cookie contract:
- HttpOnly, SameSite=strict, Path=/
- Secure everywhere except local development
- Max-Age equal to the session token lifetime
- Logout overwrites the cookie with an empty value and Max-Age=0
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request, Response

from school_directory.core.config import Settings
from school_directory.core.errors import AuthenticationRequired
from school_directory.core.security import SESSION_TOKEN_TYPE, create_session_token, decode_token
from school_directory.core.services import get_settings_dependency

logger = logging.getLogger(__name__)


@dataclass
class SessionUser:
    """
    The identity carried by a session token.

    Attributes:
        id: User's unique identifier
        email: User's email address
        name: User's display name
        is_admin: Whether the user is an administrator
    """

    id: str
    email: str
    name: str | None = None
    is_admin: bool = False

    def __str__(self) -> str:
        return f"SessionUser(id={self.id}, email={self.email})"


def issue_session_token(settings: Settings, user) -> str:
    """Mint a session token for a persisted user."""
    return create_session_token(
        settings,
        user_id=str(user.id),
        email=user.email,
        name=user.name,
        is_admin=bool(user.is_admin),
    )


def read_session_token(token: str | None, settings: Settings) -> SessionUser | None:
    """
    Validate a session token and extract the user.

    Returns None for a missing, malformed, forged or expired token.
    """
    if not token:
        return None

    payload = decode_token(token, settings)
    if payload is None:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        logger.warning(f"Rejected token with type: {payload.get('type')}")
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        logger.warning("Rejected token with missing claims")
        return None

    return SessionUser(
        id=str(user_id),
        email=email,
        name=payload.get("name"),
        is_admin=bool(payload.get("is_admin", False)),
    )


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        secure=not settings.is_development,
        samesite="strict",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=not settings.is_development,
        samesite="strict",
    )


async def get_optional_user(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> SessionUser | None:
    """
    Optional authentication dependency.

    Returns the session user if the request carries a valid cookie, or None.
    """
    token = request.cookies.get(settings.session_cookie_name)
    return read_session_token(token, settings)


async def get_current_user(
    user: SessionUser | None = Depends(get_optional_user),
) -> SessionUser:
    """
    FastAPI dependency for endpoints that require a session.

    Raises:
        AuthenticationRequired: If the cookie is missing, invalid, or expired
    """
    if user is None:
        raise AuthenticationRequired()

    logger.debug(f"Authenticated user: {user.id} ({user.email})")
    return user


__all__ = [
    "SessionUser",
    "clear_session_cookie",
    "get_current_user",
    "get_optional_user",
    "issue_session_token",
    "read_session_token",
    "set_session_cookie",
]
