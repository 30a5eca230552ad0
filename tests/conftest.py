"""
tests.conftest

Shared fixtures: an app bound to a temporary SQLite database, an ASGI client,
and a small Redmine dataset seeded through the ORM.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

import httpx
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from redmine_modern_api.api.app import create_app
from redmine_modern_api.auth.passwords import hash_password
from redmine_modern_api.db.models import (
    API_TOKEN_ACTION,
    CustomField,
    CustomValue,
    EmailAddress,
    Enumeration,
    Issue,
    IssueCategory,
    IssueStatus,
    Journal,
    Member,
    Project,
    ProjectStatus,
    Token,
    Tracker,
    User,
    UserStatus,
    Version,
)
from redmine_modern_api.settings import Settings

PASSWORD = "secret"
ALICE_TOKEN = "abc123"
BOB_TOKEN = "bob-token"
CAROL_TOKEN = "carol-token"


@dataclass
class Seed:
    today: date
    alice: User
    bob: User
    carol: User
    alpha: Project
    beta: Project
    gamma: Project
    delta: Project
    epsilon: Project
    zeta: Project


def at_noon(day: date) -> datetime:
    return datetime.combine(day, time(12, 0))


@pytest_asyncio.fixture
async def app(tmp_path) -> AsyncIterator[FastAPI]:
    settings = Settings(
        env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'redmine.db'}"
    )
    app = create_app(settings=settings)
    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def session(app: FastAPI) -> AsyncIterator[AsyncSession]:
    async with app.state.sessionmaker() as s:
        yield s


def _user(login: str, firstname: str, lastname: str, **kwargs) -> User:
    salt = f"salt-{login}"
    user = User(
        login=login,
        firstname=firstname,
        lastname=lastname,
        salt=salt,
        hashed_password=hash_password(PASSWORD, salt),
        **kwargs,
    )
    user.email_addresses = [EmailAddress(address=f"{login}@example.com", is_default=True)]
    return user


@pytest_asyncio.fixture
async def seeded(session: AsyncSession) -> Seed:
    today = date.today()

    alice = _user("alice", "Alice", "Anderson")
    bob = _user("bob", "Bob", "Brown", admin=True)
    carol = _user("carol", "Carol", "Clark", status=UserStatus.locked)
    session.add_all([alice, bob, carol])

    new = IssueStatus(name="New", is_closed=False, position=1)
    closed = IssueStatus(name="Closed", is_closed=True, position=2)
    bug = Tracker(name="Bug", position=1)
    feature = Tracker(name="Feature", position=2)
    low = Enumeration(name="Low", position=1, type="IssuePriority")
    normal = Enumeration(name="Normal", position=2, type="IssuePriority")
    high = Enumeration(name="High", position=3, type="IssuePriority")
    session.add_all([new, closed, bug, feature, low, normal, high])

    alpha = Project(
        name="Alpha",
        identifier="alpha",
        description="x" * 250,
        is_public=True,
        homepage="https://alpha.example.com",
    )
    alpha.trackers = [bug, feature]
    beta = Project(name="Beta", identifier="beta", is_public=False)
    gamma = Project(
        name="Gamma", identifier="gamma", is_public=True, status=ProjectStatus.archived
    )
    delta = Project(name="Delta", identifier="delta", status=ProjectStatus.closed)
    zeta = Project(name="Zeta", identifier="zeta", is_public=True)
    session.add_all([alpha, beta, gamma, delta, zeta])
    await session.flush()

    epsilon = Project(name="Epsilon", identifier="epsilon", is_public=False, parent_id=alpha.id)
    session.add(epsilon)
    await session.flush()

    session.add_all(
        [
            Member(user_id=alice.id, project_id=alpha.id),
            Member(user_id=bob.id, project_id=alpha.id),
            Member(user_id=bob.id, project_id=beta.id),
            Member(user_id=alice.id, project_id=gamma.id),
            Member(user_id=alice.id, project_id=delta.id),
            Member(user_id=alice.id, project_id=epsilon.id),
            Member(user_id=bob.id, project_id=zeta.id),
            Token(user_id=alice.id, action=API_TOKEN_ACTION, value=ALICE_TOKEN),
            Token(user_id=bob.id, action=API_TOKEN_ACTION, value=BOB_TOKEN),
            Token(user_id=carol.id, action=API_TOKEN_ACTION, value=CAROL_TOKEN),
            IssueCategory(project_id=alpha.id, name="Backend"),
            Version(project_id=alpha.id, name="1.0", status="open", effective_date=today),
        ]
    )

    def issue(subject: str, **kwargs) -> Issue:
        kwargs.setdefault("created_on", at_noon(today))
        return Issue(project_id=alpha.id, author_id=bob.id, subject=subject, **kwargs)

    yesterday = today - timedelta(days=1)
    i1 = issue(
        "Overdue bug",
        tracker_id=bug.id,
        status_id=new.id,
        priority_id=normal.id,
        assigned_to_id=alice.id,
        due_date=yesterday,
    )
    i2 = issue(
        "Open feature",
        tracker_id=feature.id,
        status_id=new.id,
        priority_id=high.id,
        assigned_to_id=alice.id,
    )
    i3 = issue(
        "Fixed bug",
        tracker_id=bug.id,
        status_id=closed.id,
        priority_id=normal.id,
        assigned_to_id=alice.id,
        due_date=yesterday,
        closed_on=at_noon(today),
    )
    i4 = issue(
        "Bob's bug",
        tracker_id=bug.id,
        status_id=new.id,
        priority_id=low.id,
        assigned_to_id=bob.id,
    )
    i5 = issue(
        "Old feature",
        tracker_id=feature.id,
        status_id=closed.id,
        priority_id=low.id,
        created_on=at_noon(today - timedelta(days=3)),
        closed_on=at_noon(today - timedelta(days=2)),
    )
    session.add_all([i1, i2, i3, i4, i5])
    await session.flush()

    session.add_all(
        [
            Journal(
                journalized_id=i1.id,
                journalized_type="Issue",
                user_id=bob.id,
                notes="Looked into it",
                created_on=at_noon(yesterday),
            ),
            Journal(
                journalized_id=i4.id,
                journalized_type="Issue",
                user_id=bob.id,
                notes="Mine",
                created_on=at_noon(today),
            ),
            Journal(
                journalized_id=i3.id,
                journalized_type="Issue",
                user_id=alice.id,
                notes="Done",
                created_on=at_noon(today) + timedelta(minutes=5),
            ),
        ]
    )

    severity = CustomField(
        type="IssueCustomField",
        name="Severity",
        field_format="list",
        possible_values=["S1", "S2"],
        is_required=True,
        is_for_all=True,
        position=1,
    )
    customer = CustomField(
        type="IssueCustomField",
        name="Customer",
        field_format="string",
        is_required=True,
        max_length=64,
        position=2,
    )
    customer.projects = [alpha]
    notes = CustomField(
        type="IssueCustomField",
        name="Notes",
        field_format="text",
        is_for_all=True,
        position=3,
    )
    due = CustomField(
        type="IssueCustomField",
        name="Due",
        field_format="date",
        is_required=True,
        position=4,
    )
    due.projects = [beta]
    rating = CustomField(
        type="IssueCustomField",
        name="Rating",
        field_format="rating",
        is_required=True,
        is_for_all=True,
        position=5,
    )
    budget = CustomField(
        type="ProjectCustomField", name="Budget", field_format="int", position=1
    )
    secret = CustomField(
        type="ProjectCustomField",
        name="Secret",
        field_format="string",
        visible=False,
        position=2,
    )
    session.add_all([severity, customer, notes, due, rating, budget, secret])
    await session.flush()

    session.add_all(
        [
            CustomValue(
                customized_type="Project",
                customized_id=alpha.id,
                custom_field_id=budget.id,
                value="1000",
            ),
            CustomValue(
                customized_type="Project",
                customized_id=alpha.id,
                custom_field_id=secret.id,
                value="hidden",
            ),
        ]
    )
    await session.commit()

    return Seed(
        today=today,
        alice=alice,
        bob=bob,
        carol=carol,
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        delta=delta,
        epsilon=epsilon,
        zeta=zeta,
    )


def auth(token: str) -> dict[str, str]:
    return {"X-Redmine-API-Key": token}
