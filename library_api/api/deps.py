from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.config import Settings, get_settings
from library_api.core.db import Database
from library_api.core.security import TokenError, decode_access_token
from library_api.logging import get_logger
from library_api.services import AuthorService, BookService, ContactService

bearer_scheme = HTTPBearer(auto_error=False)
logger = get_logger("api.deps")


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_database(request: Request) -> Database:
    """The ``Database`` created by the application lifespan."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialised")
    return database


async def get_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for the request.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    async with database.session() as session:
        yield session


def get_author_service(db: AsyncSession = Depends(get_session)) -> AuthorService:
    return AuthorService(db)


def get_book_service(
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> BookService:
    return BookService(db, loan_period_days=settings.LOAN_PERIOD_DAYS)


def get_contact_service(db: AsyncSession = Depends(get_session)) -> ContactService:
    return ContactService(db)


async def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Optional[Dict[str, Any]]:
    """
    Verify the bearer token when authentication is enabled.

    Returns:
        Token claims, or None when ``AUTH_ENABLED`` is off

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if not settings.AUTH_ENABLED:
        return None

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_access_token(credentials.credentials, settings)
    except TokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
