"""
redmine_modern_api.errors

Failure taxonomy shared by the auth, service and API layers.

Responsibilities:
- Give every failure kind a stable machine code, an HTTP status and a
  caller-facing message.
- Stay free of FastAPI imports so services can raise them directly; the API
  layer renders them as error envelopes (see `api.errors`).
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class ApiError(Exception):
    """Base class for failures that are reported to the caller as an error envelope."""

    status_code: int = HTTP_400_BAD_REQUEST
    code: str | None = None
    message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = details
        super().__init__(self.message)


class MissingCredentials(ApiError):
    code = "MISSING_CREDENTIALS"
    message = "Username and password are required"


class InvalidCredentials(ApiError):
    status_code = HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    message = "Invalid username or password"


class MissingApiKey(ApiError):
    status_code = HTTP_401_UNAUTHORIZED
    code = "MISSING_API_KEY"
    message = "API key is required"


class InvalidApiKey(ApiError):
    status_code = HTTP_401_UNAUTHORIZED
    code = "INVALID_API_KEY"
    message = "Invalid API key"


class RotationFailure(ApiError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    code = "TOKEN_ROTATION_FAILED"
    message = "Failed to rotate API token"


class NotFound(ApiError):
    status_code = HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Not found"


class AccessDenied(ApiError):
    status_code = HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"
    message = "Access denied"


class ValidationFailure(ApiError):
    """`details` carries the list of field-level messages."""

    status_code = 422  # unprocessable content
    code = "VALIDATION_ERROR"
    message = "Validation failed"


class MissingParameter(ApiError):
    code = "MISSING_PARAMETER"

    def __init__(self, param: str) -> None:
        self.param = param
        super().__init__(f"Missing parameter: {param}")


class Internal(ApiError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    message = "An unexpected error occurred"


# --- Module Notes -----------------------------------------------------------
# Handlers pick the code per call site where the host API uses a narrower one,
# e.g. `NotFound("Project not found", code="PROJECT_NOT_FOUND")`.
