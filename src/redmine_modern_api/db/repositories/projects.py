"""
redmine_modern_api.db.repositories.projects

Repository for host `Project` records and their membership/statistics.

Responsibilities:
- List a user's member projects with filtering, sorting and pagination.
- Resolve projects by identifier (optionally restricted to memberships).
- Compute per-project issue and member counts in bulk.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from redmine_modern_api.db.models import Issue, IssueStatus, Member, Project, ProjectStatus

# Columns a caller may sort the project listing by.
SORTABLE_COLUMNS = {
    "id": Project.id,
    "name": Project.name,
    "identifier": Project.identifier,
    "status": Project.status,
    "created_on": Project.created_on,
    "updated_on": Project.updated_on,
}


@dataclass(frozen=True, slots=True)
class IssueCounts:
    total: int = 0
    open: int = 0

    @property
    def closed(self) -> int:
        return self.total - self.open


class ProjectRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _member_projects(self, user_id: int) -> Select[tuple[Project]]:
        # `parent_name` is rendered for every row; the parent may be off-page or filtered out.
        return (
            select(Project)
            .join(Member, Member.project_id == Project.id)
            .where(Member.user_id == user_id)
            .options(selectinload(Project.parent))
        )

    async def list_for_member(
        self,
        user_id: int,
        *,
        status: int | None = None,
        search: str | None = None,
        sort_by: str = "name",
        descending: bool = False,
        limit: int,
        offset: int,
    ) -> tuple[int, list[Project]]:
        stmt = self._member_projects(user_id).where(Project.status == ProjectStatus.active)
        if status is not None:
            stmt = stmt.where(Project.status == status)
        if search:
            stmt = stmt.where(Project.name.contains(search, autoescape=True))

        total = (
            await self._session.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()

        column = SORTABLE_COLUMNS[sort_by]
        stmt = (
            stmt.order_by(column.desc() if descending else column.asc(), Project.id)
            .limit(limit)
            .offset(offset)
        )
        projects = list((await self._session.execute(stmt)).scalars().all())
        return total, projects

    async def count_active_for_member(self, user_id: int) -> int:
        stmt = self._member_projects(user_id).where(Project.status == ProjectStatus.active)
        return (
            await self._session.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()

    async def find_for_member(self, user_id: int, identifier: str) -> Project | None:
        # Detail views need trackers/categories/versions; load them eagerly (no async lazy loads).
        stmt = (
            self._member_projects(user_id)
            .where(Project.identifier == identifier)
            .options(
                selectinload(Project.trackers),
                selectinload(Project.issue_categories),
                selectinload(Project.versions),
            )
        )
        return (await self._session.execute(stmt)).scalars().first()

    async def get_by_identifier(self, identifier: str) -> Project | None:
        stmt = select(Project).where(Project.identifier == identifier)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def is_member(self, user_id: int, project_id: int) -> bool:
        stmt = select(func.count(Member.id)).where(
            Member.user_id == user_id, Member.project_id == project_id
        )
        return (await self._session.execute(stmt)).scalar_one() > 0

    async def issue_counts(self, project_ids: list[int]) -> dict[int, IssueCounts]:
        if not project_ids:
            return {}
        open_case = case((IssueStatus.is_closed.is_(False), 1), else_=0)
        stmt = (
            select(Issue.project_id, func.count(Issue.id), func.sum(open_case))
            .join(IssueStatus, IssueStatus.id == Issue.status_id)
            .where(Issue.project_id.in_(project_ids))
            .group_by(Issue.project_id)
        )
        rows = (await self._session.execute(stmt)).all()
        return {pid: IssueCounts(total=total, open=int(opened or 0)) for pid, total, opened in rows}

    async def member_counts(self, project_ids: list[int]) -> dict[int, int]:
        if not project_ids:
            return {}
        stmt = (
            select(Member.project_id, func.count(Member.id))
            .where(Member.project_id.in_(project_ids))
            .group_by(Member.project_id)
        )
        return {pid: count for pid, count in (await self._session.execute(stmt)).all()}
