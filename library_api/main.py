import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from library_api.api.v1 import contacts
from library_api.api.v1.router import api_router
from library_api.core.config import Settings, get_settings
from library_api.core.db import create_database
from library_api.core.errors import register_exception_handlers
from library_api.logging import get_logger, setup_logging

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and release it on shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.APP_ENV})")

    # Tests install their own database before the app starts
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        database = create_database(settings)
        await database.connect()
        app.state.database = database

    try:
        yield
    finally:
        if owns_database:
            await app.state.database.dispose()
            app.state.database = None
        logger.info("Shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to run with, defaults to the cached environment settings

    Returns:
        Configured application
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(lifespan=lifespan, **settings.fastapi_kwargs)
    app.state.settings = settings
    app.state.database = None

    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add a unique request ID and process time to each response."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response

    if settings.cors_origins:
        logger.debug(f"Configuring CORS with origins: {settings.cors_origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials="*" not in settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(contacts.router, prefix=settings.CONTACTS_PREFIX, tags=["Contacts"])

    @app.get("/", tags=["Meta"])
    async def read_root():
        """API information."""
        return {
            "app": settings.PROJECT_NAME,
            "version": settings.PROJECT_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "authors": f"{settings.API_PREFIX}/authors",
                "books": f"{settings.API_PREFIX}/books",
                "contacts": settings.CONTACTS_PREFIX,
                "docs": settings.DOCS_URL,
                "health": "/health",
            },
        }

    @app.get("/health", tags=["Meta"])
    async def health_check(request: Request):
        """Health check including store connectivity."""
        database = request.app.state.database
        connected = database is not None and await database.check_connection()
        body = {
            "status": "ok" if connected else "unavailable",
            "database": "connected" if connected else "disconnected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return JSONResponse(status_code=200 if connected else 503, content=body)

    logger.info("Application created")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("library_api.main:app", host="0.0.0.0", port=8000, reload=get_settings().DEBUG)
