"""Authentication schemas."""

from pydantic import BaseModel, Field


class RequestOtpRequest(BaseModel):
    """Request body for POST /auth/request-otp."""

    email: str | None = Field(None, max_length=255)


class RequestOtpResponse(BaseModel):
    success: bool = True
    message: str
    email: str
    otp: str | None = None


class VerifyOtpRequest(BaseModel):
    """Request body for POST /auth/verify-otp."""

    email: str | None = Field(None, max_length=255)
    otp: str | None = Field(None, max_length=16)
    name: str | None = Field(None, max_length=100)


class UserResponse(BaseModel):
    """Public view of a user."""

    id: str
    email: str
    name: str | None = None


class VerifyOtpResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: UserResponse


class MeResponse(BaseModel):
    success: bool
    user: UserResponse | None = None


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logged out successfully"
