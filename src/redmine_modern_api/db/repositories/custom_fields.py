"""
redmine_modern_api.db.repositories.custom_fields

Repository for custom field definitions and project custom values.
"""

from __future__ import annotations

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.db.models import CustomField, CustomValue, custom_fields_projects

ISSUE_CUSTOM_FIELD = "IssueCustomField"
PROJECT_CUSTOM_FIELD = "ProjectCustomField"


class CustomFieldRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def issue_fields_for_project(self, project_id: int) -> list[CustomField]:
        # Issue fields apply to a project when they are global or explicitly enabled on it.
        enabled = select(custom_fields_projects.c.custom_field_id).where(
            custom_fields_projects.c.project_id == project_id
        )
        stmt = (
            select(CustomField)
            .where(
                CustomField.type == ISSUE_CUSTOM_FIELD,
                or_(CustomField.is_for_all.is_(True), CustomField.id.in_(enabled)),
            )
            .order_by(CustomField.position, CustomField.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def project_values(
        self, project_id: int, *, include_hidden: bool = False
    ) -> list[tuple[CustomField, list[str]]]:
        """
        Return each project custom field with the values stored for `project_id`.

        Fields without a stored value are included with an empty list.
        """

        stmt = (
            select(CustomField, CustomValue.value)
            .outerjoin(
                CustomValue,
                and_(
                    CustomValue.custom_field_id == CustomField.id,
                    CustomValue.customized_type == "Project",
                    CustomValue.customized_id == project_id,
                ),
            )
            .where(CustomField.type == PROJECT_CUSTOM_FIELD)
            .order_by(CustomField.position, CustomField.id, CustomValue.id)
        )
        if not include_hidden:
            stmt = stmt.where(CustomField.visible.is_(True))

        grouped: dict[int, tuple[CustomField, list[str]]] = {}
        for field, value in (await self._session.execute(stmt)).all():
            _, values = grouped.setdefault(field.id, (field, []))
            if value is not None:
                values.append(value)
        return list(grouped.values())
