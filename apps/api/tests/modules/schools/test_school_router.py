"""
API tests for the school directory endpoints.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from school_directory.app_factory import create_app
from school_directory.core.auth import issue_session_token
from school_directory.core.database import get_db
from school_directory.core.services import get_image_storage
from school_directory.modules.schools.models import School

SERVICE = "school_directory.modules.schools.service"

FORM = {
    "name": "Green Valley High",
    "address": "12 Hill Road",
    "city": "Pune",
    "state": "Maharashtra",
    "contact": "9876543210",
    "email": "office@greenvalley.edu",
}


def png_upload(data: bytes = b"\x89PNG image"):
    return {"image": ("logo.png", data, "image/png")}


def build_client(settings, mock_db, image_storage) -> TestClient:
    app = create_app(settings)

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    return TestClient(app)


@pytest.fixture
def created_school():
    school = MagicMock(id=uuid4())
    school.name = "Green Valley High"
    return school


class TestAddSchool:
    """Tests for POST /api/addSchool."""

    def test_creates_school(self, settings, mock_db, image_storage, created_school):
        client = build_client(settings, mock_db, image_storage)

        with patch(f"{SERVICE}.SchoolRepository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=created_school)

            response = client.post("/api/addSchool", data=FORM, files=png_upload())

        assert response.status_code == 201
        assert response.json() == {
            "success": True,
            "message": "School added successfully",
            "schoolId": str(created_school.id),
        }
        assert mock_repo.create.call_args.kwargs["image"] in image_storage.files

    def test_field_errors(self, settings, mock_db, image_storage):
        client = build_client(settings, mock_db, image_storage)

        with patch(f"{SERVICE}.SchoolRepository") as mock_repo:
            mock_repo.create = AsyncMock()

            response = client.post(
                "/api/addSchool",
                data={**FORM, "contact": "12345", "email": "nope"},
                files=png_upload(),
            )

            mock_repo.create.assert_not_called()

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "VALIDATION_ERROR"
        assert body["errors"] == {
            "contact": "Contact must be a 10-digit number",
            "email": "Invalid email address",
        }
        assert image_storage.files == {}

    def test_missing_image(self, settings, mock_db, image_storage):
        client = build_client(settings, mock_db, image_storage)

        response = client.post("/api/addSchool", data=FORM)

        assert response.status_code == 400
        assert response.json()["errors"] == {"image": "School image is required"}

    def test_spoofed_image_rejected(self, settings, mock_db, image_storage):
        client = build_client(settings, mock_db, image_storage)

        response = client.post(
            "/api/addSchool",
            data=FORM,
            files={"image": ("brochure.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["errors"]["image"] == (
            "Only image files are allowed (jpeg, jpg, png, gif)"
        )
        assert image_storage.files == {}

    def test_oversized_image_rejected(self, settings_factory, mock_db, image_storage):
        client = build_client(settings_factory(max_upload_bytes=1024), mock_db, image_storage)

        response = client.post("/api/addSchool", data=FORM, files=png_upload(b"x" * 2048))

        assert response.status_code == 400
        assert "image" in response.json()["errors"]
        assert image_storage.files == {}

    def test_multiple_images_rejected(self, settings, mock_db, image_storage):
        client = build_client(settings, mock_db, image_storage)

        with patch(f"{SERVICE}.SchoolRepository") as mock_repo:
            mock_repo.create = AsyncMock()

            response = client.post(
                "/api/addSchool",
                data=FORM,
                files=[
                    ("image", ("a.png", b"\x89PNG first", "image/png")),
                    ("image", ("b.png", b"\x89PNG second", "image/png")),
                ],
            )

            mock_repo.create.assert_not_called()

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["errors"] == {"image": "Only one school image can be uploaded"}
        assert image_storage.files == {}

    def test_login_required_when_enabled(self, settings_factory, mock_db, image_storage):
        settings = settings_factory(schools_require_login=True)
        client = build_client(settings, mock_db, image_storage)

        response = client.post("/api/addSchool", data=FORM, files=png_upload())

        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_REQUIRED"
        assert image_storage.files == {}

    def test_login_required_accepts_session(
        self, settings_factory, mock_db, image_storage, sample_user, created_school
    ):
        settings = settings_factory(schools_require_login=True)
        client = build_client(settings, mock_db, image_storage)
        client.cookies.set("auth_token", issue_session_token(settings, sample_user))

        with patch(f"{SERVICE}.SchoolRepository") as mock_repo:
            mock_repo.create = AsyncMock(return_value=created_school)

            response = client.post("/api/addSchool", data=FORM, files=png_upload())

        assert response.status_code == 201


class TestGetSchools:
    """Tests for GET /api/getSchools."""

    def test_lists_schools_in_repository_order(self, settings, mock_db, image_storage):
        now = datetime.now(UTC)
        newer = School(
            id=uuid4(),
            created_at=now,
            image="/schoolImages/image-2.png",
            **FORM,
        )
        older = School(
            id=uuid4(),
            created_at=now - timedelta(days=1),
            image="/schoolImages/image-1.png",
            **{**FORM, "name": "Hillside School"},
        )
        client = build_client(settings, mock_db, image_storage)

        with patch(f"{SERVICE}.SchoolRepository") as mock_repo:
            mock_repo.list_all = AsyncMock(return_value=[newer, older])

            response = client.get("/api/getSchools")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [s["id"] for s in body["data"]] == [str(newer.id), str(older.id)]
        assert body["data"][0]["name"] == "Green Valley High"
        assert body["data"][0]["image"] == "/schoolImages/image-2.png"
        assert body["data"][1]["contact"] == "9876543210"

    def test_empty_directory(self, settings, mock_db, image_storage):
        client = build_client(settings, mock_db, image_storage)

        with patch(f"{SERVICE}.SchoolRepository") as mock_repo:
            mock_repo.list_all = AsyncMock(return_value=[])

            response = client.get("/api/getSchools")

        assert response.json() == {"success": True, "data": []}
