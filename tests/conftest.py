"""Fixtures backed by an in-memory SQLite database.

Every test gets a fresh schema. ``db`` is one open session and transaction,
the way a request sees it; ``sessionmaker`` hands out independent sessions
for HTTP tests and for seeding committed data.
"""

from types import SimpleNamespace

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.core.teams.models import Team
from app.core.users.models import User, UserRole
from app.core.tasks.models import TaskItem  # noqa
from app.core.assignments.models import TaskAssignment  # noqa


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    # let SQLAlchemy own BEGIN so SAVEPOINTs behave like on PostgreSQL
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(sessionmaker) -> AsyncSession:
    async with sessionmaker() as session:
        async with session.begin():
            yield session


async def seed_directory(session: AsyncSession) -> SimpleNamespace:
    """Two teams. Team A has a creator, an admin and two plain members; team B has one user."""
    team_a = Team(name="Team A")
    team_b = Team(name="Team B")
    session.add_all([team_a, team_b])
    await session.flush()

    def member(team, email, role=UserRole.MEMBER):
        return User(team_id=team.id, email=email, name=email.split("@")[0].title(), role=role.value)

    people = SimpleNamespace(
        team_a=team_a,
        team_b=team_b,
        creator=member(team_a, "carol@a.test"),
        admin=member(team_a, "mallory@a.test", UserRole.ADMIN),
        user=member(team_a, "ursula@a.test"),
        other=member(team_a, "xavier@a.test"),
        outsider=member(team_b, "olga@b.test"),
    )
    session.add_all([people.creator, people.admin, people.user, people.other, people.outsider])
    await session.flush()
    return people


@pytest.fixture
async def people(db) -> SimpleNamespace:
    return await seed_directory(db)


@pytest.fixture
async def directory(sessionmaker) -> SimpleNamespace:
    """Same people as ``people``, committed so that independent sessions see them."""
    async with sessionmaker() as session:
        async with session.begin():
            return await seed_directory(session)
