"""
Error Translation
Maps service-layer exceptions onto HTTP status codes and `{message}` bodies.
"""

import logging

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.services import accounts, auth_service, matching, media

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins
DOMAIN_ERROR_STATUS = (
    (accounts.DuplicateEmailError, status.HTTP_400_BAD_REQUEST),
    (accounts.AccountValidationError, status.HTTP_400_BAD_REQUEST),
    (accounts.UserNotFoundError, status.HTTP_404_NOT_FOUND),
    (accounts.AdminNotFoundError, status.HTTP_404_NOT_FOUND),
    (auth_service.InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (auth_service.InactiveAccountError, status.HTTP_403_FORBIDDEN),
    (matching.MatchingError, status.HTTP_400_BAD_REQUEST),
    (media.MediaValidationError, status.HTTP_400_BAD_REQUEST),
    (media.MediaStoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)

DOMAIN_ERRORS = (
    accounts.AccountError,
    auth_service.AuthError,
    matching.MatchingError,
    media.MediaValidationError,
    media.MediaStoreError,
)


def to_http_exception(exc: Exception) -> HTTPException:
    for error_cls, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Something went wrong!")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation error", "errors": errors},
    )


async def domain_exception_handler(request: Request, exc: Exception):
    http_exc = to_http_exception(exc)
    if http_exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=http_exc.status_code, content={"message": http_exc.detail})


async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"{request.method} {request.url.path} hit a uniqueness conflict: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Resource already exists"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Something went wrong!"},
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    for error_cls in DOMAIN_ERRORS:
        app.add_exception_handler(error_cls, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": f"Too many requests: {exc.detail}"},
    )
