"""
Tests for the error envelope.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from school_directory.core.errors import (
    InvalidOrExpiredCode,
    PersistenceError,
    ValidationError,
    error_envelope,
    register_exception_handlers,
)


def build_app(expose_internal_errors: bool = False) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app, expose_internal_errors=expose_internal_errors)

    @app.get("/validation")
    async def validation():
        raise ValidationError("Bad input", errors={"name": "Name is required"})

    @app.get("/database")
    async def database():
        raise PersistenceError()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return app


class TestErrorEnvelope:
    def test_envelope_without_field_errors(self):
        assert error_envelope(InvalidOrExpiredCode()) == {
            "success": False,
            "error": "INVALID_OR_EXPIRED_CODE",
            "message": "Invalid or expired OTP. Please request a new one.",
        }

    def test_envelope_with_field_errors(self):
        content = error_envelope(ValidationError(errors={"email": "Invalid email address"}))

        assert content["errors"] == {"email": "Invalid email address"}


class TestExceptionHandlers:
    def test_app_error(self):
        client = TestClient(build_app())

        response = client.get("/validation")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": "Bad input",
            "errors": {"name": "Name is required"},
        }

    def test_persistence_error(self):
        client = TestClient(build_app())

        response = client.get("/database")

        assert response.status_code == 500
        assert response.json()["error"] == "PERSISTENCE_ERROR"

    def test_unhandled_error_hides_detail(self):
        client = TestClient(build_app(), raise_server_exceptions=False)

        response = client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "INTERNAL_ERROR"
        assert "detail" not in body

    def test_unhandled_error_detail_in_development(self):
        client = TestClient(build_app(expose_internal_errors=True), raise_server_exceptions=False)

        response = client.get("/boom")

        assert response.json()["detail"] == "secret internals"
