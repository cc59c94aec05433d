"""
Authentication Models

One-time login codes. At most one code per email is kept; requesting a new
code deletes the old one and verifying a code deletes it.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from school_directory.modules.shared import BaseModel


class OneTimeCode(BaseModel):
    """A 6-digit login code sent to an email address."""

    __tablename__ = "otp_codes"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(6), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_otp_codes_email_code", "email", "code"),
        Index("ix_otp_codes_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<OneTimeCode(id={self.id}, email={self.email}, expires_at={self.expires_at})>"
