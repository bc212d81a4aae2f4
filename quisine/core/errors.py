"""Error taxonomy and the JSON error envelope.

Services raise these; routers let them propagate. The handlers registered by
``register_exception_handlers`` turn every failure into ``{"msg": ...}`` (or
``{"message": ..., "stack": ...}`` on the last-resort path).
"""
from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from quisine.core.config import IS_PROD

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    def __init__(self, status_code: int, detail: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(AppError):
    def __init__(self, entity: str) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, f"{entity} not found")


class ValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Tenant not authorized") -> None:
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class AuthenticationError(AppError):
    def __init__(self, detail: str = "Not authenticated") -> None:
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ImageStorageError(AppError):
    def __init__(self, detail: str = "Image upload failed") -> None:
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"msg": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("[DB] %s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"msg": "Server Error"})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[SERVER_ERROR] %s %s", request.method, request.url.path, exc_info=exc)
    content: dict[str, Any] = {
        "message": str(exc),
        "stack": None if IS_PROD else "".join(traceback.format_exception(exc)),
    }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
