"""
School Schemas

Response serialization for the school directory. Submissions arrive as
multipart forms and are validated in ``validation.py``.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SchoolOut(BaseModel):
    """A school as returned by GET /getSchools."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    address: str
    city: str
    state: str
    contact: str
    email: str
    image: str
    created_at: datetime


class AddSchoolResponse(BaseModel):
    success: bool = True
    message: str = "School added successfully"
    school_id: UUID = Field(..., serialization_alias="schoolId")


class SchoolListResponse(BaseModel):
    success: bool = True
    data: list[SchoolOut]
