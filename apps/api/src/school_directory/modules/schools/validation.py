"""
School Submission Validation

Field rules for school records and file rules for the school image. Both
checks run before anything is stored.
"""

import re
from collections.abc import Mapping

REQUIRED_FIELDS = ("name", "address", "city", "state", "contact", "email")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONTACT_PATTERN = re.compile(r"^[0-9]{10}$")

ALLOWED_IMAGE_FORMATS = {"jpeg", "jpg", "png", "gif"}
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024

# jpg and jpeg name the same format
_FORMAT_ALIASES = {"jpg": "jpeg"}


def validate_school_fields(fields: Mapping[str, str | None]) -> dict[str, str] | None:
    """
    Check a school submission's form fields.

    Returns:
        Mapping of field name to error message, or None if every rule passed
    """
    errors: dict[str, str] = {}

    for field in REQUIRED_FIELDS:
        value = fields.get(field)
        if value is None or not str(value).strip():
            errors[field] = f"{field.capitalize()} is required"

    email = (fields.get("email") or "").strip()
    if email and not EMAIL_PATTERN.match(email):
        errors["email"] = "Invalid email address"

    contact = (fields.get("contact") or "").strip()
    if contact and not CONTACT_PATTERN.match(contact):
        errors["contact"] = "Contact must be a 10-digit number"

    return errors or None


def _image_format_from_filename(filename: str) -> str | None:
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[-1].lower()


def _image_format_from_content_type(content_type: str) -> str | None:
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type.startswith("image/"):
        return None
    return media_type.split("/", 1)[1]


def validate_image(
    filename: str | None,
    content_type: str | None,
    size: int,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> str | None:
    """
    Check an uploaded image.

    The extension and the declared MIME type must both be jpeg, jpg, png or
    gif and must name the same format; the file must be non-empty and no
    larger than ``max_bytes``.

    Returns:
        An error message, or None if the file is acceptable
    """
    extension = _image_format_from_filename(filename or "")
    mime_format = _image_format_from_content_type(content_type or "")

    if extension not in ALLOWED_IMAGE_FORMATS or mime_format not in ALLOWED_IMAGE_FORMATS:
        return "Only image files are allowed (jpeg, jpg, png, gif)"

    if _FORMAT_ALIASES.get(extension, extension) != _FORMAT_ALIASES.get(mime_format, mime_format):
        return "Image file type does not match its extension"

    if size <= 0:
        return "Image file is empty"

    if size > max_bytes:
        return f"Image must be {max_bytes // (1024 * 1024)} MB or smaller"

    return None
