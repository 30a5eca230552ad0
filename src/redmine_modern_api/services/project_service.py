"""
redmine_modern_api.services.project_service

Project listing, detail and custom-field views for a principal.

Responsibilities:
- Validate listing parameters (sorting, paging) and page through member projects.
- Shape projects, their statistics and custom fields into JSON-ready dicts.
"""

from __future__ import annotations

import math
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.auth.models import Principal
from redmine_modern_api.db.models import CustomField, Project
from redmine_modern_api.db.repositories.custom_fields import CustomFieldRepo
from redmine_modern_api.db.repositories.projects import (
    SORTABLE_COLUMNS,
    IssueCounts,
    ProjectRepo,
)
from redmine_modern_api.errors import NotFound, ValidationFailure
from redmine_modern_api.services.field_formats import FieldType
from redmine_modern_api.settings import Settings

SORT_DIRECTIONS = ("asc", "desc")
DESCRIPTION_PREVIEW_LENGTH = 200


def truncate(text: str | None, length: int = DESCRIPTION_PREVIEW_LENGTH) -> str | None:
    if text is None or len(text) <= length:
        return text
    return text[: length - 3] + "..."


def project_not_found() -> NotFound:
    return NotFound("Project not found", code="PROJECT_NOT_FOUND")


class ProjectService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._settings = settings
        self._projects = ProjectRepo(session)
        self._custom_fields = CustomFieldRepo(session)

    async def list_projects(
        self,
        principal: Principal,
        *,
        status: int | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_direction: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> dict[str, Any]:
        sort_by = sort_by or "name"
        sort_direction = (sort_direction or "asc").lower()
        problems = []
        if sort_by not in SORTABLE_COLUMNS:
            problems.append(f"sort_by: must be one of {', '.join(sorted(SORTABLE_COLUMNS))}")
        if sort_direction not in SORT_DIRECTIONS:
            problems.append("sort_direction: must be one of asc, desc")
        if problems:
            raise ValidationFailure(details=problems)

        page = page or 1
        per_page = min(
            per_page or self._settings.projects_per_page, self._settings.projects_max_per_page
        )

        total, projects = await self._projects.list_for_member(
            principal.id,
            status=status,
            search=search,
            sort_by=sort_by,
            descending=sort_direction == "desc",
            limit=per_page,
            offset=(page - 1) * per_page,
        )
        ids = [p.id for p in projects]
        issue_counts = await self._projects.issue_counts(ids)
        member_counts = await self._projects.member_counts(ids)

        return {
            "projects": [
                self._format_project(
                    p, issue_counts.get(p.id, IssueCounts()), member_counts.get(p.id, 0)
                )
                for p in projects
            ],
            "pagination": {
                "page": page,
                "per_page": per_page,
                "total_count": total,
                "total_pages": math.ceil(total / per_page),
            },
        }

    async def project_detail(self, principal: Principal, identifier: str) -> dict[str, Any]:
        project = await self._projects.find_for_member(principal.id, identifier)
        if project is None:
            raise project_not_found()

        counts = (await self._projects.issue_counts([project.id])).get(project.id, IssueCounts())
        members = (await self._projects.member_counts([project.id])).get(project.id, 0)
        custom_values = await self._custom_fields.project_values(
            project.id, include_hidden=principal.admin
        )

        data = self._base_fields(project)
        data.update(
            {
                "issues_count": counts.total,
                "open_issues_count": counts.open,
                "closed_issues_count": counts.closed,
                "members_count": members,
                "trackers": [{"id": t.id, "name": t.name} for t in project.trackers],
                "issue_categories": [
                    {"id": c.id, "name": c.name} for c in project.issue_categories
                ],
                "versions": [
                    {"id": v.id, "name": v.name, "status": v.status, "due_date": v.effective_date}
                    for v in project.versions
                ],
                "custom_fields": [
                    {
                        "id": cf.id,
                        "name": cf.name,
                        "value": values if cf.multiple else (values[0] if values else None),
                    }
                    for cf, values in custom_values
                ],
            }
        )
        return data

    async def mandatory_custom_fields(
        self, principal: Principal, identifier: str
    ) -> list[dict[str, Any]]:
        project = await self._projects.find_for_member(principal.id, identifier)
        if project is None:
            raise project_not_found()
        fields = await self._custom_fields.issue_fields_for_project(project.id)
        return [format_custom_field(cf) for cf in fields if cf.is_required]

    @staticmethod
    def _base_fields(project: Project) -> dict[str, Any]:
        return {
            "id": project.id,
            "name": project.name,
            "identifier": project.identifier,
            "description": project.description,
            "status": project.status,
            "is_public": project.is_public,
            "parent_id": project.parent_id,
            "parent_name": project.parent.name if project.parent else None,
            "created_on": project.created_on,
            "updated_on": project.updated_on,
            "homepage": project.homepage,
        }

    def _format_project(
        self, project: Project, counts: IssueCounts, members: int
    ) -> dict[str, Any]:
        data = self._base_fields(project)
        data["description"] = truncate(project.description)
        data.update(
            {
                "issues_count": counts.total,
                "open_issues_count": counts.open,
                "members_count": members,
            }
        )
        return data


def format_custom_field(cf: CustomField) -> dict[str, Any]:
    return {
        "id": cf.id,
        "name": cf.name,
        "field_format": cf.field_format,
        "is_required": cf.is_required,
        "is_filter": cf.is_filter,
        "searchable": cf.searchable,
        "visible": cf.visible,
        "multiple": cf.multiple,
        "default_value": cf.default_value,
        "description": cf.description,
        "possible_values": cf.possible_values or [],
        "min_length": cf.min_length,
        "max_length": cf.max_length,
        "regexp": cf.regexp,
        "field_type_info": FieldType.for_format(cf.field_format, cf.possible_values).as_dict(),
    }
