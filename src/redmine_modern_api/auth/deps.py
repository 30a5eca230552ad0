"""
redmine_modern_api.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert the `X-Redmine-API-Key` header into a typed `Principal`.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.api.deps import db_session
from redmine_modern_api.auth.gatekeeper import Gatekeeper
from redmine_modern_api.auth.models import Principal

API_KEY_HEADER = "X-Redmine-API-Key"

# auto_error=False: a missing header must surface as MISSING_API_KEY, not a bare 403.
_api_key = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def gatekeeper_dep(session: AsyncSession = Depends(db_session)) -> Gatekeeper:
    return Gatekeeper(session)


async def get_principal(
    api_key: str | None = Depends(_api_key),
    gatekeeper: Gatekeeper = Depends(gatekeeper_dep),
) -> Principal:
    return await gatekeeper.authenticate_by_token(api_key)
