"""
redmine_modern_api.api.routers.health

Liveness and readiness endpoints, outside the versioned `/api/v1` surface.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api import __version__
from redmine_modern_api.api.deps import db_session, settings_dep
from redmine_modern_api.db.models import User
from redmine_modern_api.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz(settings: Settings = Depends(settings_dep)) -> dict[str, str]:
    return {"status": "ok", "service": settings.service_name, "version": __version__}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Ready once the host's user table answers; every authenticated request starts there.
    await session.execute(select(User.id).limit(1))
    return {"status": "ready", "database": session.get_bind().dialect.name}
