"""
redmine_modern_api.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create the host tables for local development and tests.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from redmine_modern_api.db import models  # noqa: F401  # register models on Base.metadata
from redmine_modern_api.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    In production the tables belong to the host application and already exist.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
