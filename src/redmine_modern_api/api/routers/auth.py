"""
redmine_modern_api.api.routers.auth

Login/logout endpoints.

Responsibilities:
- Exchange username/password for the user's API token (rotating it).
- Rotate the caller's API token on logout without revealing the new one.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from redmine_modern_api.api import envelope
from redmine_modern_api.auth.deps import gatekeeper_dep, get_principal
from redmine_modern_api.auth.gatekeeper import Gatekeeper
from redmine_modern_api.auth.models import Principal
from redmine_modern_api.errors import RotationFailure

router = APIRouter(prefix="/api/v1", tags=["auth"])


class LoginRequest(BaseModel):
    # Optional so blank and absent fields both report MISSING_CREDENTIALS.
    username: str | None = None
    password: str | None = None


@router.post("/login")
async def login(
    body: LoginRequest | None = None,
    gatekeeper: Gatekeeper = Depends(gatekeeper_dep),
) -> JSONResponse:
    body = body or LoginRequest()
    result = await gatekeeper.authenticate_by_password(body.username, body.password)
    return envelope.success(
        {"user": result.principal.as_dict(), "api_token": result.api_token},
        message="Login successful",
    )


@router.delete("/logout")
async def logout(
    principal: Principal = Depends(get_principal),
    gatekeeper: Gatekeeper = Depends(gatekeeper_dep),
) -> JSONResponse:
    try:
        await gatekeeper.rotate_token(principal)
    except RotationFailure as e:
        raise RotationFailure("Failed to logout", code="LOGOUT_FAILED") from e
    return envelope.success(message="Logout successful")
