"""
School Directory Service Layer

Adding a school runs three steps in order:
1. Validate the form fields and the image (nothing is stored on failure)
2. Hand the image to the storage backend, which returns a path or URL
3. Insert the school record with that reference

If storage fails no record is written. If the insert fails the stored image
is removed again so no upload is left without a record.
"""

import logging
from collections.abc import Mapping

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from school_directory.core.errors import PersistenceError, UpstreamDeliveryFailure, ValidationError
from school_directory.core.storage import ImageStorage, StorageError
from school_directory.modules.schools.models import School
from school_directory.modules.schools.repository import SchoolRepository
from school_directory.modules.schools.validation import (
    DEFAULT_MAX_IMAGE_BYTES,
    REQUIRED_FIELDS,
    validate_image,
    validate_school_fields,
)

logger = logging.getLogger(__name__)


MULTIPLE_IMAGES_ERROR = "Only one school image can be uploaded"


async def close_uploads(uploads: list[UploadFile] | None) -> None:
    for upload in uploads or []:
        await upload.close()


async def single_image(uploads: list[UploadFile] | None) -> UploadFile | None:
    """
    Pick the one image part of a submission.

    Returns None when no image was sent so ``add_school`` reports it as
    missing. More than one image part rejects the submission and closes
    every upload.

    Raises:
        ValidationError: If more than one image was sent
    """
    if not uploads:
        return None

    if len(uploads) > 1:
        await close_uploads(uploads)
        logger.info(f"Rejected submission with {len(uploads)} image parts")
        raise ValidationError(MULTIPLE_IMAGES_ERROR, errors={"image": MULTIPLE_IMAGES_ERROR})

    return uploads[0]


async def _read_valid_image(image: UploadFile | None, max_bytes: int) -> bytes:
    """Read the upload and apply the image rules."""
    if image is None or not image.filename:
        raise ValidationError(
            "School image is required",
            errors={"image": "School image is required"},
        )

    # One byte past the limit is enough to know the file is too large
    data = await image.read(max_bytes + 1)

    error = validate_image(image.filename, image.content_type, len(data), max_bytes)
    if error:
        logger.info(f"Rejected image upload {image.filename!r}: {error}")
        raise ValidationError(error, errors={"image": error})

    return data


async def _discard_image(storage: ImageStorage, reference: str) -> None:
    try:
        await storage.delete(reference)
    except Exception:
        logger.exception(f"Failed to remove orphaned image {reference}")


async def add_school(
    db: AsyncSession,
    storage: ImageStorage,
    fields: Mapping[str, str | None],
    image: UploadFile | None,
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> School:
    """
    Validate, store and persist a school submission.

    Args:
        db: Database session
        storage: Image storage backend
        fields: Submitted form fields
        image: Submitted image file
        max_image_bytes: Largest accepted image

    Returns:
        The created school

    Raises:
        ValidationError: If any field or the image is invalid
        UpstreamDeliveryFailure: If the image could not be stored
        PersistenceError: If the record could not be inserted
    """
    try:
        errors = validate_school_fields(fields)
        if errors:
            raise ValidationError("Please correct the highlighted fields.", errors=errors)

        data = await _read_valid_image(image, max_image_bytes)
    finally:
        # Drops the spooled temporary file behind the upload
        if image is not None:
            await image.close()

    try:
        reference = await storage.save(data, image.filename, image.content_type or "")
    except StorageError as e:
        logger.error(f"Image storage failed: {e}")
        raise UpstreamDeliveryFailure("Failed to store school image. Please try again.") from e

    values = {field: str(fields[field]).strip() for field in REQUIRED_FIELDS}

    try:
        school = await SchoolRepository.create(db, **values, image=reference)
    except SQLAlchemyError as e:
        logger.error(f"Failed to insert school {values['name']!r}: {e}")
        await db.rollback()
        await _discard_image(storage, reference)
        raise PersistenceError("Failed to add school") from e

    return school


async def list_schools(db: AsyncSession) -> list[School]:
    """Return every school, newest first."""
    try:
        return await SchoolRepository.list_all(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch schools: {e}")
        raise PersistenceError("Failed to fetch schools") from e
