"""
redmine_modern_api.db.models

ORM mapping of the host Redmine schema.

Responsibilities:
- Map the subset of Redmine tables the API reads (users, tokens, projects,
  issues, journals, custom fields and their lookups).
- Keep the host's column names and status constants so the service can run
  directly against a Redmine database.

Only the columns the API touches are mapped; the host owns the full schema.
"""

from __future__ import annotations

import enum
from datetime import UTC, date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from redmine_modern_api.db.base import Base


def _now() -> datetime:
    # Redmine stores naive timestamps.
    return datetime.now(UTC).replace(tzinfo=None)


class UserStatus(enum.IntEnum):
    active = 1
    registered = 2
    locked = 3


class ProjectStatus(enum.IntEnum):
    active = 1
    closed = 5
    archived = 9


# Action name of the token used for REST API authentication.
API_TOKEN_ACTION = "api"


projects_trackers = Table(
    "projects_trackers",
    Base.metadata,
    Column("project_id", ForeignKey("projects.id"), primary_key=True),
    Column("tracker_id", ForeignKey("trackers.id"), primary_key=True),
)

custom_fields_projects = Table(
    "custom_fields_projects",
    Base.metadata,
    Column("custom_field_id", ForeignKey("custom_fields.id"), primary_key=True),
    Column("project_id", ForeignKey("projects.id"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    login: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    hashed_password: Mapped[str] = mapped_column(String(40), nullable=False, default="")
    salt: Mapped[str | None] = mapped_column(String(64), nullable=True)
    firstname: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    lastname: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=UserStatus.active)
    last_login_on: Mapped[datetime | None] = mapped_column(nullable=True)
    created_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now)
    updated_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now, onupdate=_now)

    email_addresses: Mapped[list[EmailAddress]] = relationship(
        back_populates="user", lazy="selectin", cascade="all, delete-orphan"
    )

    @property
    def mail(self) -> str | None:
        for address in self.email_addresses:
            if address.is_default:
                return address.address
        return None

    @property
    def name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip() or self.login


class EmailAddress(Base):
    __tablename__ = "email_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user: Mapped[User] = relationship(back_populates="email_addresses")


class Token(Base):
    __tablename__ = "tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, default=0)
    action: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    value: Mapped[str] = mapped_column(String(40), nullable=False, default="", unique=True)
    created_on: Mapped[datetime] = mapped_column(nullable=False, default=_now)
    updated_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now)

    __table_args__ = (Index("index_tokens_on_user_id", "user_id"),)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    identifier: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    homepage: Mapped[str | None] = mapped_column(String(255), nullable=True, default="")
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    parent_id: Mapped[int | None] = mapped_column(ForeignKey("projects.id"), nullable=True)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=ProjectStatus.active)
    created_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now)
    updated_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now, onupdate=_now)

    parent: Mapped[Project | None] = relationship(remote_side=[id])
    trackers: Mapped[list[Tracker]] = relationship(secondary=projects_trackers)
    issue_categories: Mapped[list[IssueCategory]] = relationship()
    versions: Mapped[list[Version]] = relationship()


class Member(Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, default=0)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, default=0)
    created_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now)

    __table_args__ = (Index("index_members_on_user_id_and_project_id", "user_id", "project_id"),)


class IssueStatus(Base):
    __tablename__ = "issue_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Tracker(Base):
    __tablename__ = "trackers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Enumeration(Base):
    """Single-table enumerations; issue priorities have type ``IssuePriority``."""

    __tablename__ = "enumerations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tracker_id: Mapped[int] = mapped_column(ForeignKey("trackers.id"), nullable=False)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status_id: Mapped[int] = mapped_column(ForeignKey("issue_statuses.id"), nullable=False)
    assigned_to_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    priority_id: Mapped[int] = mapped_column(ForeignKey("enumerations.id"), nullable=False)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now)
    updated_on: Mapped[datetime | None] = mapped_column(nullable=True, default=_now)
    closed_on: Mapped[datetime | None] = mapped_column(nullable=True)


class Journal(Base):
    __tablename__ = "journals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Polymorphic owner; issue journals use journalized_type == "Issue".
    journalized_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    journalized_type: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_on: Mapped[datetime] = mapped_column(nullable=False, default=_now)

    __table_args__ = (
        Index("journals_journalized_id", "journalized_id", "journalized_type"),
        Index("index_journals_on_created_on", "created_on"),
    )


class CustomField(Base):
    """Single-table custom fields (``IssueCustomField``, ``ProjectCustomField``, ...)."""

    __tablename__ = "custom_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    field_format: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    # Serialized list of choices for list fields.
    possible_values: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    regexp: Mapped[str | None] = mapped_column(String(255), nullable=True, default="")
    min_length: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_length: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_for_all: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_filter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    searchable: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    default_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    multiple: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    projects: Mapped[list[Project]] = relationship(secondary=custom_fields_projects)


class CustomValue(Base):
    __tablename__ = "custom_values"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customized_type: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    customized_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    custom_field_id: Mapped[int] = mapped_column(
        ForeignKey("custom_fields.id"), nullable=False, default=0
    )
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("custom_values_customized", "customized_type", "customized_id"),
    )


class Version(Base):
    __tablename__ = "versions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    status: Mapped[str | None] = mapped_column(String(255), nullable=True, default="open")
    # Redmine calls the version due date "effective_date".
    effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class IssueCategory(Base):
    __tablename__ = "issue_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(60), nullable=False, default="")


# --- Module Notes -----------------------------------------------------------
# Custom field `possible_values` is mapped as JSON here; a stock Redmine column
# holds YAML and needs a custom type when pointed at a production database.
