"""Translate service errors into HTTP responses.

Every failure body is ``{"message": ...}``. Internal errors are logged with
their detail and answered with a fixed message.
"""

from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink.common.logging_config import get_logger
from shortlink.errors import (
    InternalError,
    InvalidRequest,
    LinkError,
    LinkIdNotUnique,
    LinkIdNotValid,
    LinkNotFound,
    MalformedURL,
    RouteNotFound,
    URLWithMatchingHosts,
    URLWithoutHost,
)

logger = get_logger("web")

# Unprocessable content
UNPROCESSABLE = 422

STATUS_CODES: Dict[Type[LinkError], int] = {
    LinkNotFound: status.HTTP_404_NOT_FOUND,
    LinkIdNotUnique: UNPROCESSABLE,
    LinkIdNotValid: UNPROCESSABLE,
    MalformedURL: UNPROCESSABLE,
    URLWithoutHost: UNPROCESSABLE,
    URLWithMatchingHosts: UNPROCESSABLE,
    RouteNotFound: status.HTTP_404_NOT_FOUND,
    InvalidRequest: status.HTTP_400_BAD_REQUEST,
}


def error_response(error: LinkError) -> JSONResponse:
    """Build the JSON response for a service error."""
    if isinstance(error, InternalError):
        logger.error(f"Internal server error: {error.detail}")
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        code = next(
            (c for cls, c in STATUS_CODES.items() if isinstance(error, cls)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse(status_code=code, content={"message": error.message})


async def link_error_handler(request: Request, exc: LinkError) -> JSONResponse:
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return error_response(InvalidRequest("; ".join(parts) or "malformed request"))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(RouteNotFound())
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(InternalError(str(exc)))


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": "Too many requests"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on an app."""
    app.add_exception_handler(LinkError, link_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
