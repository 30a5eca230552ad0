"""
redmine_modern_api.db.repositories.issues

Aggregate queries over issues and issue journals.

Responsibilities:
- Per-assignee counts and breakdowns for the personal dashboard.
- Per-project breakdowns (status, tracker, priority, assignee) and daily
  created/closed/activity series for the project dashboard.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.db.models import (
    Enumeration,
    Issue,
    IssueStatus,
    Journal,
    Tracker,
    User,
)

UNASSIGNED = "Unassigned"


def _day_key(value: Any) -> str:
    # DATE() comes back as str on SQLite and as a date object on other backends.
    return value.isoformat() if isinstance(value, date) else str(value)


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min)


class IssueStatsRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _scalar(self, stmt) -> int:
        return int((await self._session.execute(stmt)).scalar_one() or 0)

    async def _pairs(self, stmt) -> dict[Any, int]:
        return {key: count for key, count in (await self._session.execute(stmt)).all()}

    # -- assigned to a user ------------------------------------------------

    async def assigned_counts(self, user_id: int, *, today: date) -> dict[str, int]:
        assigned = Issue.assigned_to_id == user_id
        total = await self._scalar(select(func.count(Issue.id)).where(assigned))
        open_stmt = (
            select(func.count(Issue.id))
            .join(IssueStatus, IssueStatus.id == Issue.status_id)
            .where(assigned, IssueStatus.is_closed.is_(False))
        )
        opened = await self._scalar(open_stmt)
        overdue = await self._scalar(open_stmt.where(Issue.due_date < today))
        return {"total": total, "open": opened, "overdue": overdue}

    async def assigned_by_status(self, user_id: int) -> dict[str, int]:
        stmt = (
            select(IssueStatus.name, func.count(Issue.id))
            .join(IssueStatus, IssueStatus.id == Issue.status_id)
            .where(Issue.assigned_to_id == user_id)
            .group_by(IssueStatus.name)
            .order_by(IssueStatus.name)
        )
        return await self._pairs(stmt)

    async def assigned_by_priority(self, user_id: int) -> dict[str, int]:
        stmt = (
            select(Enumeration.name, func.count(Issue.id))
            .join(Enumeration, Enumeration.id == Issue.priority_id)
            .where(Issue.assigned_to_id == user_id)
            .group_by(Enumeration.name)
            .order_by(Enumeration.name)
        )
        return await self._pairs(stmt)

    async def recent_journals_for_assignee(
        self, user_id: int, *, limit: int
    ) -> list[tuple[Journal, Issue, User]]:
        stmt = (
            select(Journal, Issue, User)
            .join(
                Issue,
                and_(Issue.id == Journal.journalized_id, Journal.journalized_type == "Issue"),
            )
            .join(User, User.id == Journal.user_id)
            .where(Issue.assigned_to_id == user_id)
            .order_by(desc(Journal.created_on), desc(Journal.id))
            .limit(limit)
        )
        return [tuple(row) for row in (await self._session.execute(stmt)).all()]

    # -- per project -------------------------------------------------------

    async def by_status(self, project_id: int) -> dict[str, int]:
        stmt = (
            select(IssueStatus.name, func.count(Issue.id))
            .join(IssueStatus, IssueStatus.id == Issue.status_id)
            .where(Issue.project_id == project_id)
            .group_by(IssueStatus.name)
            .order_by(IssueStatus.name)
        )
        return await self._pairs(stmt)

    async def by_tracker(self, project_id: int) -> dict[str, int]:
        stmt = (
            select(Tracker.name, func.count(Issue.id))
            .join(Tracker, Tracker.id == Issue.tracker_id)
            .where(Issue.project_id == project_id)
            .group_by(Tracker.name)
            .order_by(Tracker.name)
        )
        return await self._pairs(stmt)

    async def by_priority(self, project_id: int) -> dict[str, int]:
        # Ordered by priority position (lowest first), not by name.
        stmt = (
            select(Enumeration.name, Enumeration.position, func.count(Issue.id))
            .join(Enumeration, Enumeration.id == Issue.priority_id)
            .where(Issue.project_id == project_id)
            .group_by(Enumeration.name, Enumeration.position)
            .order_by(Enumeration.position)
        )
        return {name: count for name, _, count in (await self._session.execute(stmt)).all()}

    async def by_assignee(self, project_id: int, *, limit: int = 10) -> dict[str, int]:
        assignee = func.coalesce(User.login, UNASSIGNED).label("assignee")
        count = func.count(Issue.id).label("issue_count")
        stmt = (
            select(assignee, count)
            .outerjoin(User, User.id == Issue.assigned_to_id)
            .where(Issue.project_id == project_id)
            .group_by(assignee)
            .order_by(desc(count), assignee)
            .limit(limit)
        )
        return await self._pairs(stmt)

    async def counts(self, project_id: int) -> dict[str, int]:
        in_project = Issue.project_id == project_id
        total = await self._scalar(select(func.count(Issue.id)).where(in_project))
        closed = await self._scalar(
            select(func.count(Issue.id))
            .join(IssueStatus, IssueStatus.id == Issue.status_id)
            .where(in_project, IssueStatus.is_closed.is_(True))
        )
        return {"total": total, "open": total - closed, "closed": closed}

    async def created_per_day(self, project_id: int, *, since: date) -> dict[str, int]:
        day = func.date(Issue.created_on)
        stmt = (
            select(day, func.count(Issue.id))
            .where(Issue.project_id == project_id, Issue.created_on >= _start_of(since))
            .group_by(day)
        )
        return {_day_key(k): v for k, v in (await self._pairs(stmt)).items()}

    async def closed_per_day(self, project_id: int, *, since: date) -> dict[str, int]:
        day = func.date(Issue.closed_on)
        stmt = (
            select(day, func.count(Issue.id))
            .where(
                Issue.project_id == project_id,
                Issue.closed_on.is_not(None),
                Issue.closed_on >= _start_of(since),
            )
            .group_by(day)
        )
        return {_day_key(k): v for k, v in (await self._pairs(stmt)).items()}

    async def journals_per_day(self, project_id: int, *, since: date) -> dict[str, int]:
        day = func.date(Journal.created_on)
        stmt = (
            select(day, func.count(Journal.id))
            .join(
                Issue,
                and_(Issue.id == Journal.journalized_id, Journal.journalized_type == "Issue"),
            )
            .where(Issue.project_id == project_id, Journal.created_on >= _start_of(since))
            .group_by(day)
        )
        return {_day_key(k): v for k, v in (await self._pairs(stmt)).items()}
