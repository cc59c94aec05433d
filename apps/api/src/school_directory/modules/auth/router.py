"""
Authentication Router

Passwordless login with emailed one-time codes.

Endpoints:
- POST /auth/request-otp - Email a login code
- POST /auth/verify-otp - Exchange a code for a session cookie
- GET|POST /auth/logout - Clear the session cookie
- GET /auth/me - Current session user, or null
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.core.auth import (
    SessionUser,
    clear_session_cookie,
    get_optional_user,
    issue_session_token,
    set_session_cookie,
)
from school_directory.core.config import Settings
from school_directory.core.database import get_db
from school_directory.core.email import EmailSender
from school_directory.core.errors import UpstreamDeliveryFailure
from school_directory.core.services import get_email_sender, get_settings_dependency
from school_directory.modules.auth import service
from school_directory.modules.auth.schemas import (
    LogoutResponse,
    MeResponse,
    RequestOtpRequest,
    RequestOtpResponse,
    UserResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/request-otp",
    response_model=RequestOtpResponse,
    response_model_exclude_none=True,
    summary="Request Login Code",
)
async def request_otp(
    data: RequestOtpRequest,
    db: AsyncSession = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings_dependency),
) -> RequestOtpResponse:
    """
    Generate a login code and email it.

    Any earlier code for the same email stops working. In development the
    code is echoed in the response for local testing.

    Raises:
        ValidationError 400: If the email is malformed
        UpstreamDeliveryFailure 500: If the code was stored but the email failed
    """
    result = await service.request_code(db, email_sender, data.email, settings.otp_ttl_minutes)

    if settings.is_development:
        return RequestOtpResponse(
            message="Development mode: OTP generated. Check server console for the code.",
            email=result.email,
            otp=result.code,
        )

    if not result.delivered:
        raise UpstreamDeliveryFailure(
            "Failed to send OTP email. Please try again or contact support."
        )

    return RequestOtpResponse(
        message=f"OTP sent to {result.email}. Please check your inbox and spam folder.",
        email=result.email,
    )


@router.post("/verify-otp", response_model=VerifyOtpResponse, summary="Verify Login Code")
async def verify_otp(
    data: VerifyOtpRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
) -> VerifyOtpResponse:
    """
    Consume a login code and start a session.

    Raises:
        ValidationError 400: If email or code is missing
        InvalidOrExpiredCode 400: If the code is wrong, expired or already used
    """
    user = await service.verify_code(db, data.email, data.otp, data.name)

    token = issue_session_token(settings, user)
    set_session_cookie(response, token, settings)

    return VerifyOtpResponse(
        user=UserResponse(id=str(user.id), email=user.email, name=user.name),
    )


@router.api_route(
    "/logout",
    methods=["GET", "POST"],
    response_model=LogoutResponse,
    summary="Log Out",
)
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings_dependency),
) -> LogoutResponse:
    """Expire the session cookie. Sessions are stateless, so nothing else changes."""
    clear_session_cookie(response, settings)
    return LogoutResponse()


@router.get("/me", response_model=MeResponse, summary="Current User")
async def me(user: SessionUser | None = Depends(get_optional_user)) -> MeResponse:
    """Return the user from the session cookie, or null when not logged in."""
    if user is None:
        return MeResponse(success=False, user=None)

    return MeResponse(
        success=True,
        user=UserResponse(id=user.id, email=user.email, name=user.name),
    )
