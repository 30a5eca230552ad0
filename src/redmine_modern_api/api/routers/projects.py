"""
redmine_modern_api.api.routers.projects

Project listing, detail and custom field endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.api import envelope
from redmine_modern_api.api.deps import db_session, settings_dep
from redmine_modern_api.auth.deps import get_principal
from redmine_modern_api.auth.models import Principal
from redmine_modern_api.services.project_service import ProjectService
from redmine_modern_api.settings import Settings

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("")
async def list_projects(
    status: int | None = Query(default=None),
    search: str | None = Query(default=None),
    sort_by: str | None = Query(default=None),
    sort_direction: str | None = Query(default=None),
    page: int | None = Query(default=None, ge=1),
    per_page: int | None = Query(default=None, ge=1),
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    data = await ProjectService(session=session, settings=settings).list_projects(
        principal,
        status=status,
        search=search,
        sort_by=sort_by,
        sort_direction=sort_direction,
        page=page,
        per_page=per_page,
    )
    return envelope.success(data, message="Projects loaded successfully")


@router.get("/{identifier}")
async def show_project(
    identifier: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    project = await ProjectService(session=session, settings=settings).project_detail(
        principal, identifier
    )
    return envelope.success({"project": project}, message="Project loaded successfully")


@router.get("/{identifier}/custom_fields")
async def project_custom_fields(
    identifier: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    fields = await ProjectService(session=session, settings=settings).mandatory_custom_fields(
        principal, identifier
    )
    return envelope.success(
        {"mandatory_fields": fields}, message="Custom fields loaded successfully"
    )
