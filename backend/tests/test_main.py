"""
Backend — Application Factory Tests
=====================================

What:  Exception-to-HTTP mapping, route mounting per environment and
       OpenAPI operation ids.
How:   Builds fresh apps with create_app() and mounts throwaway routes that
       raise each application exception.
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.exceptions import (
    ConflictError,
    DatabaseError,
    EmailDeliveryError,
    NotFoundError,
    ValidationError,
)
from app.main import create_app, log_service_directory
from app.middleware.logging import level_for_status
from app.services.service_directory import SERVICE_KEYS


def app_raising(exc):
    app = create_app()

    @app.get("/boom")
    async def boom():
        raise exc

    return app


async def get_boom(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        return await ac.get("/boom")


class TestExceptionHandlers:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc, status, error",
        [
            (ValidationError(message="bad input", field="title"), 400, "validation_error"),
            (NotFoundError(resource="item", resource_id="42"), 404, "not_found"),
            (ConflictError(message="taken"), 409, "conflict"),
            (EmailDeliveryError(), 503, "email_delivery_error"),
        ],
    )
    async def test_status_and_error_code(self, exc, status, error):
        response = await get_boom(app_raising(exc))
        assert response.status_code == status
        assert response.json()["error"] == error
        assert response.json()["message"] == exc.message

    @pytest.mark.asyncio
    async def test_validation_error_reports_field(self):
        response = await get_boom(app_raising(ValidationError(message="bad", field="title")))
        assert response.json()["details"]["field"] == "title"

    @pytest.mark.asyncio
    async def test_database_error_is_generic(self):
        exc = DatabaseError(context={"sql": "INSERT INTO user ..."})
        response = await get_boom(app_raising(exc))
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "details" not in body
        assert "INSERT" not in response.text


class TestRouting:

    def test_private_routes_only_in_local(self, monkeypatch):
        local_paths = set(create_app().openapi()["paths"])
        assert f"{settings.api_v1_str}/private/users/" in local_paths

        monkeypatch.setattr(settings, "environment", "staging")
        staging_paths = set(create_app().openapi()["paths"])
        assert f"{settings.api_v1_str}/private/users/" not in staging_paths
        assert "/health" in staging_paths

    def test_operation_ids_use_tag_prefix(self):
        schema = create_app().openapi()
        operation_ids = {
            op["operationId"]
            for path in schema["paths"].values()
            for op in path.values()
        }
        assert "users-read_user_me" in operation_ids
        assert "login-login_access_token" in operation_ids

    def test_openapi_under_api_prefix(self):
        assert create_app().openapi_url == f"{settings.api_v1_str}/openapi.json"


class TestRequestLogging:

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (302, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_access_line_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.access"):
            await client.get(f"{settings.api_v1_str}/utils/services/")
        assert any("/utils/services/" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_health_probe_not_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.access"):
            await client.get("/health")
        assert not [r for r in caplog.records if r.name == "app.access"]


class TestStartupServiceLog:

    def test_port_mode_urls_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="app.main"):
            log_service_directory()

        lines = [r.getMessage() for r in caplog.records if r.name == "app.main"]
        assert "ports mode" in lines[0]
        # header + one line per service
        assert len(lines) == 1 + len(SERVICE_KEYS)
        assert any("Frontend" in line and "http://localhost:5173" in line for line in lines)
        assert any("http://localhost:8000/docs" in line for line in lines)
        assert any("Mail capture UI" in line and "http://localhost:1080" in line for line in lines)

    def test_staging_domain_marks_mailcatcher_not_deployed(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "domain", "example.com")
        monkeypatch.setattr(settings, "environment", "staging")
        with caplog.at_level(logging.INFO, logger="app.main"):
            log_service_directory()

        lines = [r.getMessage() for r in caplog.records if r.name == "app.main"]
        assert "domain mode" in lines[0]
        assert any("https://api.example.com" in line for line in lines)
        mail_line = next(line for line in lines if "Mail capture UI" in line)
        assert "(not deployed)" in mail_line
