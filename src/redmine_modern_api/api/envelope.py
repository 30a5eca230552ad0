"""
redmine_modern_api.api.envelope

Uniform success/error JSON response shapes.

Success: ``{"success": true, "message"?: str, **data}``
Error:   ``{"success": false, "message": str, "error"?: code, "details"?: any}``
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.status import HTTP_200_OK, HTTP_400_BAD_REQUEST


def success(
    data: Mapping[str, Any] | None = None,
    *,
    message: str | None = None,
    status_code: int = HTTP_200_OK,
) -> JSONResponse:
    """
    Build a success envelope. `data` keys are merged at the top level.

    Precondition: `data` must not contain the reserved keys ``success`` or ``message``.
    """

    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(data or {})
    return JSONResponse(jsonable_encoder(body), status_code=status_code)


def error(
    message: str,
    *,
    code: str | None = None,
    status_code: int = HTTP_400_BAD_REQUEST,
    details: Any = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "message": message}
    if code:
        body["error"] = code
    if details:
        body["details"] = details
    return JSONResponse(jsonable_encoder(body), status_code=status_code)
