"""
redmine_modern_api.auth.gatekeeper

Request gatekeeper: resolves credentials to a `Principal` and manages API tokens.

Responsibilities:
- Password login against the host user store (issues a fresh API token).
- API-key lookup for every authenticated request (read-only).
- Token rotation on login/logout as a single transaction.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.auth.models import Principal
from redmine_modern_api.auth.passwords import check_password
from redmine_modern_api.db.models import API_TOKEN_ACTION
from redmine_modern_api.db.repositories.tokens import TokenRepo
from redmine_modern_api.db.repositories.users import UserRepo
from redmine_modern_api.errors import (
    InvalidApiKey,
    InvalidCredentials,
    MissingApiKey,
    MissingCredentials,
    RotationFailure,
)
from redmine_modern_api.observability.logging import get_logger

log = get_logger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True, slots=True)
class LoginResult:
    principal: Principal
    api_token: str


class Gatekeeper:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._tokens = TokenRepo(session)

    async def authenticate_by_password(
        self, username: str | None, password: str | None
    ) -> LoginResult:
        if _blank(username) or _blank(password):
            raise MissingCredentials()

        user = await self._users.get_active_by_login(username.strip())
        if user is None or not check_password(
            password, salt=user.salt, hashed_password=user.hashed_password
        ):
            log.info("login_rejected", login=username)
            raise InvalidCredentials()

        principal = Principal.from_user(user)
        await self._users.touch_last_login(user.id)
        token = await self.rotate_token(principal)
        log.info("login_succeeded", user_id=principal.id)
        return LoginResult(principal=principal, api_token=token)

    async def authenticate_by_token(self, token: str | None) -> Principal:
        if _blank(token):
            raise MissingApiKey()

        user = await self._users.get_active_by_api_key(token.strip())
        if user is None:
            raise InvalidApiKey()
        return Principal.from_user(user)

    async def rotate_token(self, principal: Principal) -> str:
        """
        Replace the principal's API token with a new one.

        Delete and insert commit together; on any store failure the transaction
        is rolled back, so the previous token (if any) stays valid.
        """

        try:
            await self._tokens.delete_for_user(principal.id, action=API_TOKEN_ACTION)
            token = await self._tokens.create(user_id=principal.id, action=API_TOKEN_ACTION)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("token_rotation_failed", user_id=principal.id, exc_info=True)
            raise RotationFailure() from e
        return token.value


# --- Module Notes -----------------------------------------------------------
# Handlers never read an ambient "current user": they receive the Principal
# resolved here through `auth.deps.get_principal`.
