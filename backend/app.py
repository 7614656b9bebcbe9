"""FastAPI application factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1 import api_router
from api.v1.envelope import failure
from core import settings
from services import PostServiceError

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


async def _post_service_error_handler(_: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, PostServiceError) else PostServiceError(str(exc))
    return failure(error.status_code, error.message, error=error.error)


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        return failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", error=str(exc))
    return failure(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    error = _format_validation_errors(exc) if isinstance(exc, RequestValidationError) else str(exc)
    return failure(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        "Invalid request payload",
        error=error,
    )


async def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while processing request")
    return failure(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        error=str(exc),
    )


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    application = FastAPI(title="Postboard API")
    application.add_exception_handler(PostServiceError, _post_service_error_handler)
    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _validation_exception_handler)
    application.add_exception_handler(Exception, _unhandled_exception_handler)
    application.include_router(api_router)
    return application


app = create_app()
