"""
redmine_modern_api.db.repositories.tokens

Repository for host `Token` records.

Responsibilities:
- Issue new random token values.
- Delete a user's tokens for a given action.
"""

from __future__ import annotations

import secrets

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.db.models import Token


def generate_token_value() -> str:
    # 40 hex chars, the width of the host's `tokens.value` column.
    return secrets.token_hex(20)


class TokenRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def delete_for_user(self, user_id: int, *, action: str) -> int:
        stmt = delete(Token).where(Token.user_id == user_id, Token.action == action)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def create(self, *, user_id: int, action: str) -> Token:
        token = Token(user_id=user_id, action=action, value=generate_token_value())
        self._session.add(token)
        await self._session.flush()
        return token
