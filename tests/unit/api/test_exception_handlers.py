"""Unit tests for exception handlers."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from api.exception_handlers import setup_exception_handlers
from core.exceptions import (
    HandymanProfileNotFoundError,
    PersistenceError,
    ProfileValidationError,
)


def _create_test_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


async def _get(app: FastAPI, path: str) -> Response:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_not_found_carries_user_id(self) -> None:
        app = _create_test_app()

        @app.get("/raise-app")
        async def _() -> None:
            raise HandymanProfileNotFoundError("u1")

        response = await _get(app, "/raise-app")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "HANDYMAN_NOT_FOUND"
        assert body["message"] == "No handyman profile found"
        assert body["details"] == {"user_id": "u1"}

    @pytest.mark.asyncio
    async def test_missing_fields_use_form_message(self) -> None:
        app = _create_test_app()

        @app.get("/raise-validation")
        async def _() -> None:
            raise ProfileValidationError(fields=["name", "hourly_rate"])

        response = await _get(app, "/raise-validation")

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["message"] == "Please fill in all required fields"
        assert body["details"]["fields"] == ["name", "hourly_rate"]

    @pytest.mark.asyncio
    async def test_persistence_error_is_500(self) -> None:
        app = _create_test_app()

        @app.get("/raise-db")
        async def _() -> None:
            raise PersistenceError()

        response = await _get(app, "/raise-db")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["message"] == "Error updating your profile"
        assert body["details"] is None

    @pytest.mark.asyncio
    async def test_http_exception_returns_standard_format(self) -> None:
        app = _create_test_app()

        @app.get("/raise-http")
        async def _() -> None:
            raise HTTPException(status_code=403, detail="Forbidden")

        response = await _get(app, "/raise-http")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "HTTP_ERROR"
        assert body["message"] == "Forbidden"

    @pytest.mark.asyncio
    async def test_request_validation_error_lists_fields(self) -> None:
        app = _create_test_app()

        class Body(BaseModel):
            experience: int

        @app.post("/validate")
        async def _(body: Body) -> dict[str, bool]:
            return {"ok": True}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/validate", json={"experience": "many"})

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "body.experience"

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self) -> None:
        app = _create_test_app()
        mock_request = MagicMock()
        mock_request.state.request_id = "test-req-id"

        handler = app.exception_handlers.get(Exception)
        assert handler is not None, "Global exception handler not registered"

        response = await handler(mock_request, RuntimeError("Something went wrong"))  # type: ignore[misc]

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error_code"] == "INTERNAL_ERROR"
        assert body["details"]["request_id"] == "test-req-id"
