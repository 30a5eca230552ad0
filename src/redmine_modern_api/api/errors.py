"""
redmine_modern_api.api.errors

Error translation: every failure raised while handling a request becomes an
error envelope with an HTTP status and a machine-readable code.

Responsibilities:
- Render `ApiError` subclasses as-is.
- Translate framework failures (request validation, unknown routes,
  missing rows) into the same taxonomy.
- Log unclassified failures with full detail and answer with a generic body.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_405_METHOD_NOT_ALLOWED

from redmine_modern_api.api import envelope
from redmine_modern_api.errors import (
    ApiError,
    Internal,
    MissingParameter,
    NotFound,
    ValidationFailure,
)
from redmine_modern_api.observability.logging import get_logger

log = get_logger(__name__)

_HTTP_CODES = {
    HTTP_404_NOT_FOUND: "NOT_FOUND",
    HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def render(exc: ApiError) -> JSONResponse:
    return envelope.error(
        exc.message,
        code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )


def _field_name(loc: tuple) -> str:
    # loc looks like ("body", "username") or ("query", "page").
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or str(loc[-1])


def translate_validation_error(exc: RequestValidationError) -> ApiError:
    errors = exc.errors()
    missing = [e for e in errors if e.get("type") == "missing"]
    if errors and len(missing) == len(errors):
        return MissingParameter(_field_name(tuple(missing[0]["loc"])))
    return ValidationFailure(
        details=[f"{_field_name(tuple(e['loc']))}: {e['msg']}" for e in errors]
    )


async def _api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return render(exc)


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return render(translate_validation_error(exc))


async def _no_result_handler(_: Request, exc: NoResultFound) -> JSONResponse:
    return render(NotFound(str(exc)))


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = envelope.error(
        str(exc.detail),
        code=_HTTP_CODES.get(exc.status_code),
        status_code=exc.status_code,
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the request-context middleware, so bind path/method explicitly.
    log.error(
        "api_error",
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return render(Internal())


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(NoResultFound, _no_result_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


# --- Module Notes -----------------------------------------------------------
# Starlette routes handlers for `Exception` through ServerErrorMiddleware, which
# still re-raises after the response is sent (visible to ASGI test transports).
