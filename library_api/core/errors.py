import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.core.exceptions import ErrorKind, LibraryException

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_body(
    message: str, errors: Optional[List[str]] = None, code: Optional[str] = None
) -> Dict[str, Any]:
    """Build the standard error envelope."""
    body: Dict[str, Any] = {
        "success": False,
        "message": message,
        "data": None,
        "errors": errors,
        "meta": None,
    }
    if code:
        body["meta"] = {"code": code}
    return body


async def library_error_handler(request: Request, exc: LibraryException) -> JSONResponse:
    """
    Map a tagged core error to its HTTP status.
    """
    status_code = STATUS_BY_KIND[exc.kind]
    errors = getattr(exc, "errors", None)

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.message, errors=errors, code=exc.code),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None) or {},
    )


async def http_422_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Report malformed request payloads with one message per offending field.
    """
    errors = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error.get("loc", ()) if loc != "body")
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])

    logger.warning(f"422 on {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("Invalid request data", errors=errors),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Store failure on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", code=ErrorKind.INTERNAL.value),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibraryException, library_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, http_422_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
