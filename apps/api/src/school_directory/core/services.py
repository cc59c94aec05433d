"""
Service Container

Holds the collaborators shared by request handlers: the database pool, the
email sender and the image storage. The application lifespan builds one
``AppServices`` at startup and tears it down at shutdown.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from school_directory.core.config import Settings
from school_directory.core.database import Database
from school_directory.core.email import EmailSender, build_email_sender
from school_directory.core.storage import ImageStorage, build_image_storage

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    settings: Settings
    database: Database
    email_sender: EmailSender
    image_storage: ImageStorage

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppServices":
        return cls(
            settings=settings,
            database=Database(settings),
            email_sender=build_email_sender(settings),
            image_storage=build_image_storage(settings),
        )

    async def startup(self) -> None:
        await self.database.connect()
        logger.info("[OK] Database connected")
        await self.image_storage.startup()
        logger.info("[OK] Image storage ready")

    async def shutdown(self) -> None:
        await self.database.disconnect()
        logger.info("[OK] Database pool closed")


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.services.email_sender


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.services.image_storage
