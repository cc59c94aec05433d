"""
Image Storage

Uploaded school images are stored either on the local disk (served back
under ``upload_url_prefix``) or in an S3-compatible bucket through MinIO.
``save`` returns the reference that is persisted with the school record.
"""

import asyncio
import logging
import secrets
import time
import uuid
from io import BytesIO
from pathlib import Path

from minio import Minio

from school_directory.core.config import Settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an image could not be stored."""


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"


class ImageStorage:
    """Interface for image storage backends."""

    async def startup(self) -> None:
        return None

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        raise NotImplementedError

    async def delete(self, reference: str) -> None:
        raise NotImplementedError


class LocalDiskStorage(ImageStorage):
    """Stores images in a directory on the local filesystem."""

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/schoolImages"):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    async def startup(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _new_filename(self, filename: str) -> str:
        suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return f"image-{suffix}.{_extension(filename)}"

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        stored_name = self._new_filename(filename)
        path = self.upload_dir / stored_name
        try:
            await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

        logger.info(f"Stored image locally: {path} ({len(data)} bytes)")
        return f"{self.url_prefix}/{stored_name}"

    async def delete(self, reference: str) -> None:
        name = reference.rsplit("/", 1)[-1]
        path = self.upload_dir / name
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.info(f"Deleted local image: {path}")


class ObjectStorage(ImageStorage):
    """Stores images in a MinIO / S3-compatible bucket."""

    def __init__(self, client: Minio, bucket: str, public_base: str):
        self.client = client
        self.bucket = bucket
        self.public_base = public_base.rstrip("/")

    async def startup(self) -> None:
        exists = await asyncio.to_thread(self.client.bucket_exists, self.bucket)
        if not exists:
            await asyncio.to_thread(self.client.make_bucket, self.bucket)
            logger.info(f"Created bucket {self.bucket}")

    def _object_name(self, filename: str) -> str:
        return f"schools/{uuid.uuid4().hex}.{_extension(filename)}"

    def _public_url(self, object_name: str) -> str:
        # Presigned URLs expire, so references are plain bucket URLs
        return f"{self.public_base}/{self.bucket}/{object_name}"

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        object_name = self._object_name(filename)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                self.bucket,
                object_name,
                BytesIO(data),
                length=len(data),
                content_type=content_type or "application/octet-stream",
            )
        except Exception as e:
            raise StorageError(f"Could not upload {object_name}: {e}") from e

        logger.info(f"Stored image in bucket {self.bucket}: {object_name}")
        return self._public_url(object_name)

    async def delete(self, reference: str) -> None:
        marker = "schools/"
        if marker not in reference:
            return
        object_name = marker + reference.split(marker, 1)[1].split("?", 1)[0]
        await asyncio.to_thread(self.client.remove_object, self.bucket, object_name)
        logger.info(f"Deleted image from bucket {self.bucket}: {object_name}")


def build_image_storage(settings: Settings) -> ImageStorage:
    """Select the image storage backend for this process."""
    if settings.use_object_storage:
        logger.info(f"Image storage: object storage at {settings.minio_endpoint}")
        client = Minio(
            endpoint=settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
        )
        scheme = "https" if settings.minio_secure else "http"
        public_base = settings.minio_public_base or f"{scheme}://{settings.minio_endpoint}"
        return ObjectStorage(client, settings.minio_bucket, public_base)

    logger.info(f"Image storage: local disk at {settings.upload_dir}")
    return LocalDiskStorage(settings.upload_dir, settings.upload_url_prefix)
