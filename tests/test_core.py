"""
Test core utilities: settings, identifiers, errors, logging, pagination and tokens.
"""
import json
import logging
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from library_api.common.pagination import PaginationParams
from library_api.core.config import Settings
from library_api.core.db import generate_id, normalize_id
from library_api.core.errors import register_exception_handlers
from library_api.core.exceptions import (
    ConflictException,
    ErrorKind,
    InternalException,
    NotFoundException,
    ValidationException,
)
from library_api.core.security import TokenError, create_access_token, decode_access_token
from library_api.logging import JSONFormatter, SensitiveDataFilter, get_logger


def _record(msg, *args, **extra):
    record = logging.LogRecord("library_api.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSettings:
    """Test settings parsing."""

    def test_production_disables_debug(self):
        settings = Settings(APP_ENV="production", DEBUG=True)
        assert settings.DEBUG is False
        assert settings.is_production

    def test_invalid_env(self):
        with pytest.raises(ValueError):
            Settings(APP_ENV="moon")

    def test_cors_origins_split(self):
        settings = Settings(BACKEND_CORS_ORIGINS="http://a.test, http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(DATABASE_URL="sqlite+aiosqlite:///x.db").is_sqlite
        assert not Settings(DATABASE_URL="postgresql+asyncpg://u:p@h/db").is_sqlite


class TestIdentifiers:
    """Test identifier helpers."""

    def test_generated_ids_are_canonical(self):
        new_id = generate_id()
        assert normalize_id(new_id) == new_id

    def test_dashed_form_is_accepted(self):
        new_id = generate_id()
        dashed = f"{new_id[:8]}-{new_id[8:12]}-{new_id[12:16]}-{new_id[16:20]}-{new_id[20:]}"
        assert normalize_id(dashed.upper()) == new_id

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "zz" * 16, 42])
    def test_malformed(self, value):
        assert normalize_id(value) is None


class TestExceptions:
    """Test the tagged error kinds."""

    def test_kinds(self):
        assert ValidationException(["x"]).kind is ErrorKind.VALIDATION
        assert NotFoundException().kind is ErrorKind.NOT_FOUND
        assert ConflictException().kind is ErrorKind.CONFLICT
        assert InternalException().kind is ErrorKind.INTERNAL

    def test_validation_exception_keeps_every_error(self):
        exc = ValidationException(["a", "b"])
        assert exc.to_dict() == {
            "kind": "validation_error",
            "message": "Validation failed",
            "errors": ["a", "b"],
        }
        assert str(exc) == "Validation failed: a, b"


class TestErrorHandlers:
    """Test the kind to status mapping."""

    @pytest.fixture
    def error_app(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/fail/{kind}")
        async def fail(kind: str):
            raise {
                "validation": ValidationException(["bad field"]),
                "missing": NotFoundException("Thing not found"),
                "conflict": ConflictException("Thing exists"),
                "internal": InternalException(),
            }[kind]

        return app

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,status_code",
        [("validation", 400), ("missing", 404), ("conflict", 409), ("internal", 500)],
    )
    async def test_status_codes(self, error_app, kind, status_code):
        transport = ASGITransport(app=error_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(f"/fail/{kind}")

        assert response.status_code == status_code
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None

    @pytest.mark.asyncio
    async def test_validation_body(self, error_app):
        transport = ASGITransport(app=error_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/fail/validation")

        assert response.json()["errors"] == ["bad field"]
        assert response.json()["meta"] == {"code": "validation_error"}


class TestLogging:
    """Test log filters and formatters."""

    def test_get_logger_is_namespaced(self):
        assert get_logger("services").name == "library_api.services"
        assert get_logger("library_api.main").name == "library_api.main"

    def test_secrets_are_masked(self):
        record = _record("login with password=hunter2 token: abc123")
        SensitiveDataFilter().filter(record)

        assert "hunter2" not in record.getMessage()
        assert "abc123" not in record.getMessage()
        assert "***REDACTED***" in record.getMessage()

    def test_emails_are_masked(self):
        record = _record("Created contact %s", "alice.johnson@email.com")
        SensitiveDataFilter().filter(record)

        assert record.getMessage() == "Created contact a***@email.com"

    def test_plain_messages_untouched(self):
        record = _record("Deleted book %s", "B1")
        SensitiveDataFilter().filter(record)

        assert record.msg == "Deleted book %s"
        assert record.getMessage() == "Deleted book B1"

    def test_json_formatter(self):
        record = _record("hello", book_id="b1", api_token="t")
        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["book_id"] == "b1"
        assert data["api_token"] == "***REDACTED***"


class TestPagination:
    """Test paging parameter clamping."""

    def _params(self, settings, page, limit):
        request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(settings=settings)))
        return PaginationParams(request, page=page, limit=limit, sort_by=None, sort_order="asc")

    def test_defaults(self):
        params = self._params(Settings(), page=1, limit=None)
        assert (params.page, params.limit, params.skip) == (1, 10, 0)

    def test_clamping(self):
        settings = Settings(MAX_PAGE_SIZE=50)
        params = self._params(settings, page=-3, limit=1000)
        assert (params.page, params.limit) == (1, 50)

        params = self._params(settings, page=3, limit=0)
        assert (params.page, params.limit, params.skip) == (3, 1, 2)

    def test_meta(self):
        params = self._params(Settings(), page=2, limit=4)
        assert params.meta(9) == {"page": 2, "limit": 4, "total": 9, "totalPages": 3}
        assert params.meta(0)["totalPages"] == 0


class TestTokens:
    """Test bearer token verification."""

    def test_round_trip(self):
        settings = Settings(SECRET_KEY="k")
        token = create_access_token("user-1", settings)
        assert decode_access_token(token, settings)["sub"] == "user-1"

    def test_wrong_key(self):
        token = create_access_token("user-1", Settings(SECRET_KEY="k"))
        with pytest.raises(TokenError):
            decode_access_token(token, Settings(SECRET_KEY="other"))
