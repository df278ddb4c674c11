"""
Error taxonomy and HTTP exception handlers.

Services raise these at the point of detection; the handlers registered in
``participium.main`` turn them into ``{"code", "name", "message"}`` bodies.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    name = "InternalServerError"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    code = status.HTTP_400_BAD_REQUEST
    name = "BadRequestError"


class UnauthorizedError(AppError):
    code = status.HTTP_401_UNAUTHORIZED
    name = "UnauthorizedError"


class InsufficientRightsError(AppError):
    code = status.HTTP_403_FORBIDDEN
    name = "InsufficientRightsError"


class NotFoundError(AppError):
    code = status.HTTP_404_NOT_FOUND
    name = "NotFoundError"


class ConflictError(AppError):
    code = status.HTTP_409_CONFLICT
    name = "ConflictError"


def _error_body(code: int, name: str, message: str) -> dict:
    return {"code": code, "name": name, "message": message}


async def app_error_handler(request: Request, exc: AppError):
    if exc.code >= 500:
        logger.error("%s on %s: %s", exc.name, request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", exc.name, request.url.path, exc.message)
    from participium.services.mapper_service import create_error_dto

    return JSONResponse(status_code=exc.code, content=create_error_dto(exc).model_dump())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    names = {
        400: BadRequestError.name,
        401: UnauthorizedError.name,
        403: InsufficientRightsError.name,
        404: NotFoundError.name,
        409: ConflictError.name,
    }
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, names.get(exc.status_code, "HTTPError"), str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body / query validation failures are plain bad requests."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    logger.info("Validation error on %s: %s", request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(status.HTTP_400_BAD_REQUEST, BadRequestError.name, message),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all for unhandled exceptions.
    Prevents stack trace leakage to clients.
    """
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            AppError.name,
            "An unexpected error occurred.",
        ),
    )
