"""
School Models

Directory entries. A school is created by a validated upload and never
modified afterwards.
"""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from school_directory.modules.shared import BaseModel


class School(BaseModel):
    """A school listed in the directory."""

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Location
    address: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    state: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Contact information
    contact: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Path or URL returned by the image storage
    image: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
    )

    __table_args__ = (Index("ix_schools_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name})>"
