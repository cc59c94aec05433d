"""
Core module - Configuration, database, security, delivery collaborators.
"""

from school_directory.core.config import Settings, get_settings
from school_directory.core.database import Base, Database, get_db
from school_directory.core.errors import (
    AppError,
    AuthenticationRequired,
    InvalidOrExpiredCode,
    PersistenceError,
    UpstreamDeliveryFailure,
    ValidationError,
)
from school_directory.core.security import create_session_token, decode_token
from school_directory.core.services import AppServices

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "Database",
    "get_db",
    # Errors
    "AppError",
    "AuthenticationRequired",
    "InvalidOrExpiredCode",
    "PersistenceError",
    "UpstreamDeliveryFailure",
    "ValidationError",
    # Security
    "create_session_token",
    "decode_token",
    # Services
    "AppServices",
]
