"""
redmine_modern_api.auth.permissions

Project visibility checks derived from host data (admin flag, membership,
public flag, project status).
"""

from __future__ import annotations

from redmine_modern_api.auth.models import Principal
from redmine_modern_api.db.models import Project, ProjectStatus


def can_view_issues(principal: Principal, project: Project, *, is_member: bool) -> bool:
    # Archived projects are hidden from everyone but admins.
    if principal.admin:
        return True
    if project.status == ProjectStatus.archived:
        return False
    return is_member or bool(project.is_public)
