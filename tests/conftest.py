"""
Test configuration and fixtures for the library API tests.
"""
from typing import Any, AsyncGenerator, Dict

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.config import Settings
from library_api.core.db import Database
from library_api.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        APP_ENV="testing",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'library_test.db'}",
        LOG_LEVEL="WARNING",
        AUTH_ENABLED=False,
        SECRET_KEY="test-secret",
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create a fresh database for each test."""
    db = Database(settings.DATABASE_URL)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as db_session:
        yield db_session


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    """Create app instance wired to the test database."""
    application = create_app(settings)
    application.state.database = database
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return an async client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def author_data() -> Dict[str, Any]:
    return {
        "name": "Test",
        "bio": "x",
        "birthDate": "1980-01-01",
        "nationality": "T",
    }


@pytest.fixture
def book_data() -> Dict[str, Any]:
    """Book fields without ``authorId``, add it per test."""
    return {
        "title": "B1",
        "isbn": "1234567890123",
        "genre": "G",
        "publishedDate": "2020-01-01",
        "description": "d",
        "totalPages": 100,
    }


@pytest.fixture
def contact_data() -> Dict[str, Any]:
    return {
        "firstName": "Alice",
        "lastName": "Johnson",
        "email": "alice.johnson@email.com",
        "favoriteColor": "Purple",
        "birthday": "1992-03-12",
    }
