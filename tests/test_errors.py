"""
Tests for the error envelope, health check and rate limiter helpers.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from pydantic import ValidationError as SettingsValidationError
from starlette.requests import Request

from library_api.config import Settings, get_settings
from library_api.database import get_db
from library_api.main import app
from library_api.services.rate_limiter import get_client_ip, retry_after_seconds


def make_request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": ("10.0.0.9", 12345),
    }
    return Request(scope)


@pytest.fixture
def failing_client():
    """Client whose database dependency blows up."""

    def broken_db():
        raise RuntimeError("database exploded")

    app.dependency_overrides[get_db] = broken_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "error": "Not Found"}

    def test_method_not_allowed(self, client):
        response = client.patch("/api/authors")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json()["success"] is False

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/books",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"success": False, "error": "Malformed JSON body"}

    def test_unexpected_error_is_500(self, failing_client):
        response = failing_client.get("/api/authors")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"success": False, "error": "Internal Server Error"}

    def test_debug_mode_includes_stack(self, failing_client, monkeypatch):
        monkeypatch.setattr(get_settings(), "debug", True)

        response = failing_client.get("/api/authors")

        body = response.json()
        assert body["error"] == "Internal Server Error"
        assert "database exploded" in body["stack"]


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"
        assert body["rate_limiting"]["enabled"] is False

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["api"] == "/api"


class TestClientIp:
    def test_forwarded_for_first_hop(self):
        request = make_request({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})

        assert get_client_ip(request) == "203.0.113.5"

    def test_real_ip(self):
        request = make_request({"X-Real-IP": " 198.51.100.7 "})

        assert get_client_ip(request) == "198.51.100.7"

    def test_falls_back_to_peer(self):
        assert get_client_ip(make_request({})) == "10.0.0.9"


class TestSettings:
    def test_invalid_log_level(self):
        with pytest.raises(SettingsValidationError):
            Settings(log_level="chatty")

    def test_log_level_uppercased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_lists_parsed(self):
        settings = Settings(
            allowed_origins="http://a.test, http://b.test",
            allowed_image_types="image/PNG, ,image/gif",
        )

        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]
        assert settings.allowed_image_types_list == ["image/png", "image/gif"]

    def test_non_positive_upload_size(self):
        with pytest.raises(SettingsValidationError):
            Settings(max_upload_size=0)


class TestRetryAfter:
    @pytest.mark.parametrize(
        "limit, seconds",
        [
            ("30 per 1 minute", 60),
            ("100/minute", 60),
            ("5 per 10 seconds", 10),
            ("1000/day", 86400),
        ],
    )
    def test_window_length(self, limit, seconds):
        assert retry_after_seconds(limit) == seconds
