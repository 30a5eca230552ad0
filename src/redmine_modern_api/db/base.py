"""
redmine_modern_api.db.base

Declarative base for the host application's tables.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Constraint names for tables this service creates itself (dev/test databases, Alembic).
NAMING_CONVENTION = {
    "ix": "index_%(table_name)s_on_%(column_0_N_name)s",
    "uq": "index_%(table_name)s_on_%(column_0_N_name)s_unique",
    "fk": "fk_%(table_name)s_%(column_0_name)s",
    "pk": "%(table_name)s_pkey",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
