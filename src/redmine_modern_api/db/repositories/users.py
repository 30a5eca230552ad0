"""
redmine_modern_api.db.repositories.users

Repository for host `User` records.

Responsibilities:
- Look up active users by login (password login) or by API token value.
- Record successful logins.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.db.models import API_TOKEN_ACTION, Token, User, UserStatus


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active_by_login(self, login: str) -> User | None:
        # Logins are matched case-insensitively, like the host application does.
        stmt = select(User).where(
            func.lower(User.login) == login.lower(),
            User.status == UserStatus.active,
        )
        return (await self._session.execute(stmt)).scalars().first()

    async def get_active_by_api_key(self, value: str) -> User | None:
        stmt = (
            select(User)
            .join(Token, Token.user_id == User.id)
            .where(
                Token.action == API_TOKEN_ACTION,
                Token.value == value,
                User.status == UserStatus.active,
            )
        )
        return (await self._session.execute(stmt)).scalars().first()

    async def touch_last_login(self, user_id: int) -> None:
        user = await self._session.get(User, user_id)
        if user is None:
            return
        user.last_login_on = datetime.now(UTC).replace(tzinfo=None)
