"""
School Directory Router

Endpoints:
- POST /addSchool - Submit a school with its image (multipart form)
- GET /getSchools - List all schools, newest first
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.core.auth import SessionUser, get_optional_user
from school_directory.core.config import Settings
from school_directory.core.database import get_db
from school_directory.core.errors import AuthenticationRequired
from school_directory.core.services import get_image_storage, get_settings_dependency
from school_directory.core.storage import ImageStorage
from school_directory.modules.schools import service
from school_directory.modules.schools.schemas import (
    AddSchoolResponse,
    SchoolListResponse,
    SchoolOut,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/addSchool",
    response_model=AddSchoolResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add School",
)
async def add_school(
    name: str | None = Form(None),
    address: str | None = Form(None),
    city: str | None = Form(None),
    state: str | None = Form(None),
    contact: str | None = Form(None),
    email: str | None = Form(None),
    image: list[UploadFile] | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_settings_dependency),
    user: SessionUser | None = Depends(get_optional_user),
) -> AddSchoolResponse:
    """
    Add a school to the directory.

    Every field is required. ``contact`` must be 10 digits and exactly one
    ``image`` part must be sent: a jpeg, png or gif of at most 5 MB.

    Raises:
        ValidationError 400: Field-level errors in ``errors``
        AuthenticationRequired 401: If login is required and missing
        UpstreamDeliveryFailure 500: If the image could not be stored
    """
    if settings.schools_require_login and user is None:
        await service.close_uploads(image)
        raise AuthenticationRequired()

    upload = await service.single_image(image)

    fields = {
        "name": name,
        "address": address,
        "city": city,
        "state": state,
        "contact": contact,
        "email": email,
    }
    school = await service.add_school(db, storage, fields, upload, settings.max_upload_bytes)

    logger.info(f"School added: id={school.id}, name={school.name}")
    return AddSchoolResponse(school_id=school.id)


@router.get("/getSchools", response_model=SchoolListResponse, summary="List Schools")
async def get_schools(db: AsyncSession = Depends(get_db)) -> SchoolListResponse:
    """Return all schools ordered by creation time, most recent first."""
    schools = await service.list_schools(db)
    return SchoolListResponse(data=[SchoolOut.model_validate(s) for s in schools])
