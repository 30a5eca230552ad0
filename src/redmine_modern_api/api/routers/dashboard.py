"""
redmine_modern_api.api.routers.dashboard

Personal and per-project dashboard endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.api import envelope
from redmine_modern_api.api.deps import db_session, settings_dep
from redmine_modern_api.auth.deps import get_principal
from redmine_modern_api.auth.models import Principal
from redmine_modern_api.services.dashboard_service import DashboardService
from redmine_modern_api.settings import Settings

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    data = await DashboardService(session=session, settings=settings).overview(principal)
    return envelope.success(data, message="Dashboard loaded successfully")


@router.get("/project/{project_id}")
async def project_dashboard(
    project_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    # `project_id` is the project identifier (slug), not the numeric id.
    svc = DashboardService(session=session, settings=settings)
    data = await svc.project_dashboard(principal, project_id)
    return envelope.success(data, message="Project dashboard loaded successfully")
