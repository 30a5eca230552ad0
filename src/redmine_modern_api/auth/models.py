"""
redmine_modern_api.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from redmine_modern_api.db.models import User


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, resolved once per request from the host user store.
    """

    id: int
    login: str
    firstname: str
    lastname: str
    mail: str | None
    admin: bool

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(
            id=user.id,
            login=user.login,
            firstname=user.firstname,
            lastname=user.lastname,
            mail=user.mail,
            admin=bool(user.admin),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "login": self.login,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "mail": self.mail,
            "admin": self.admin,
        }


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API and service layers.
