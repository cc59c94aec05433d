"""
Authentication module - Passwordless login with emailed one-time codes.
"""

from school_directory.modules.auth.models import OneTimeCode
from school_directory.modules.auth.router import router
from school_directory.modules.auth.schemas import RequestOtpRequest, VerifyOtpRequest

__all__ = ["router", "OneTimeCode", "RequestOtpRequest", "VerifyOtpRequest"]
