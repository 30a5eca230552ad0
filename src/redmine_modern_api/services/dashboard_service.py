"""
redmine_modern_api.services.dashboard_service

Dashboard aggregations for a principal.

Responsibilities:
- Personal dashboard: assigned-issue summary, breakdowns and recent journals.
- Project dashboard: chart-ready series (labels/data/colors) over a project's issues.
"""

from __future__ import annotations

from datetime import date, timedelta
from itertools import cycle, islice
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.auth.models import Principal
from redmine_modern_api.auth.permissions import can_view_issues
from redmine_modern_api.db.models import Project
from redmine_modern_api.db.repositories.issues import IssueStatsRepo
from redmine_modern_api.db.repositories.projects import ProjectRepo
from redmine_modern_api.errors import AccessDenied, NotFound
from redmine_modern_api.settings import Settings

BASE_COLORS = [
    "#007bff",
    "#28a745",
    "#dc3545",
    "#ffc107",
    "#17a2b8",
    "#6c757d",
    "#fd7e14",
    "#6f42c1",
    "#e83e8c",
    "#20c997",
]
PRIORITY_COLORS = ["#dc3545", "#fd7e14", "#ffc107", "#28a745", "#17a2b8"]

TIMELINE_DAYS = 30
ACTIVITY_DAYS = 7
TOP_ASSIGNEES = 10


def generate_colors(count: int) -> list[str]:
    return list(islice(cycle(BASE_COLORS), count))


def _days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=n) for n in range((end - start).days + 1)]


def _chart(kind: str, title: str, data: dict[str, int], colors: list[str]) -> dict[str, Any]:
    return {
        "type": kind,
        "title": title,
        "labels": list(data.keys()),
        "data": list(data.values()),
        "colors": colors,
    }


class DashboardService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._settings = settings
        self._issues = IssueStatsRepo(session)
        self._projects = ProjectRepo(session)

    async def overview(self, principal: Principal, *, today: date | None = None) -> dict[str, Any]:
        today = today or date.today()
        counts = await self._issues.assigned_counts(principal.id, today=today)
        journals = await self._issues.recent_journals_for_assignee(
            principal.id, limit=self._settings.recent_activity_limit
        )
        return {
            "summary": {
                "total_issues": counts["total"],
                "open_issues": counts["open"],
                "overdue_issues": counts["overdue"],
                "projects_count": await self._projects.count_active_for_member(principal.id),
            },
            "my_issues": {
                "by_status": await self._issues.assigned_by_status(principal.id),
                "by_priority": await self._issues.assigned_by_priority(principal.id),
            },
            "recent_activity": [
                {
                    "id": journal.id,
                    "issue_id": issue.id,
                    "issue_subject": issue.subject,
                    "user": author.name,
                    "created_at": journal.created_on,
                    "notes": journal.notes,
                }
                for journal, issue, author in journals
            ],
        }

    async def project_dashboard(
        self, principal: Principal, identifier: str, *, today: date | None = None
    ) -> dict[str, Any]:
        project = await self._projects.get_by_identifier(identifier)
        if project is None:
            raise NotFound("Project not found", code="PROJECT_NOT_FOUND")
        is_member = await self._projects.is_member(principal.id, project.id)
        if not can_view_issues(principal, project, is_member=is_member):
            raise AccessDenied()

        today = today or date.today()
        counts = await self._issues.counts(project.id)
        return {
            "project": self._project_summary(project, counts),
            "issues_by_status": await self._by_status(project),
            "issues_by_tracker": await self._by_tracker(project),
            "issues_by_priority": await self._by_priority(project),
            "issues_by_assignee": await self._by_assignee(project),
            "issues_timeline": await self._timeline(project, today),
            "activity_chart": await self._activity(project, today),
            "completion_rate": self._completion_rate(counts),
        }

    @staticmethod
    def _project_summary(project: Project, counts: dict[str, int]) -> dict[str, Any]:
        return {
            "id": project.id,
            "name": project.name,
            "description": project.description,
            "status": project.status,
            "total_issues": counts["total"],
            "open_issues": counts["open"],
            "closed_issues": counts["closed"],
        }

    async def _by_status(self, project: Project) -> dict[str, Any]:
        data = await self._issues.by_status(project.id)
        return _chart("pie", "Issues by Status", data, generate_colors(len(data)))

    async def _by_tracker(self, project: Project) -> dict[str, Any]:
        data = await self._issues.by_tracker(project.id)
        return _chart("doughnut", "Issues by Tracker", data, generate_colors(len(data)))

    async def _by_priority(self, project: Project) -> dict[str, Any]:
        data = await self._issues.by_priority(project.id)
        return _chart("bar", "Issues by Priority", data, list(PRIORITY_COLORS))

    async def _by_assignee(self, project: Project) -> dict[str, Any]:
        data = await self._issues.by_assignee(project.id, limit=TOP_ASSIGNEES)
        return _chart(
            "horizontal_bar", f"Top {TOP_ASSIGNEES} Assignees", data, generate_colors(len(data))
        )

    async def _timeline(self, project: Project, today: date) -> dict[str, Any]:
        start = today - timedelta(days=TIMELINE_DAYS)
        created = await self._issues.created_per_day(project.id, since=start)
        closed = await self._issues.closed_per_day(project.id, since=start)
        days = _days(start, today)
        return {
            "type": "line",
            "title": f"Issues Timeline (Last {TIMELINE_DAYS} Days)",
            "labels": [d.strftime("%m/%d") for d in days],
            "datasets": [
                {
                    "label": "Created",
                    "data": [created.get(d.isoformat(), 0) for d in days],
                    "color": "#28a745",
                    "fill": False,
                },
                {
                    "label": "Closed",
                    "data": [closed.get(d.isoformat(), 0) for d in days],
                    "color": "#6c757d",
                    "fill": False,
                },
            ],
        }

    async def _activity(self, project: Project, today: date) -> dict[str, Any]:
        start = today - timedelta(days=ACTIVITY_DAYS)
        activity = await self._issues.journals_per_day(project.id, since=start)
        days = _days(start, today)
        return {
            "type": "bar",
            "title": f"Activity (Last {ACTIVITY_DAYS} Days)",
            "labels": [d.strftime("%a %m/%d") for d in days],
            "data": [activity.get(d.isoformat(), 0) for d in days],
            "colors": ["#007bff"],
        }

    @staticmethod
    def _completion_rate(counts: dict[str, int]) -> dict[str, Any]:
        total = counts["total"]
        if total == 0:
            return {"percentage": 0, "total": 0, "completed": 0}
        completed = counts["closed"]
        return {
            "type": "progress",
            "title": "Overall Completion",
            "percentage": round(completed / total * 100, 2),
            "total": total,
            "completed": completed,
            "remaining": total - completed,
        }
