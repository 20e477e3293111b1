"""
Shared fixtures: a fresh in-memory SQLite schema per test, seeded with a
small set of companies, projects, contacts and users, plus an HTTP client
bound to the same database.
"""

import os

os.environ.setdefault("CDB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CDB_LOG_FORMAT", "console")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import enable_sqlite_foreign_keys, get_session, init_db
from app.main import app
from app.models import AppUser, Collaboration, Company, Contact, Project

COMPANY_ONE, COMPANY_TWO, COMPANY_THREE = 1, 2, 3
PROJECT_SOURCE, PROJECT_TARGET = 10, 20
CONTACT_ALICE, CONTACT_BOB = 100, 101


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded(session_factory):
    async with session_factory() as s:
        s.add_all(
            [
                Company(id=COMPANY_ONE, name="Company One"),
                Company(id=COMPANY_TWO, name="Company Two"),
                Company(id=COMPANY_THREE, name="Company Three"),
                Project(id=PROJECT_SOURCE, name="Spring Gala", fr_goal=50000),
                Project(id=PROJECT_TARGET, name="Autumn Run", fr_goal=20000),
            ]
        )
        await s.flush()
        s.add_all(
            [
                Contact(id=CONTACT_ALICE, name="Alice Contact", company_id=COMPANY_ONE),
                Contact(id=CONTACT_BOB, name="Bob Contact", company_id=COMPANY_TWO),
                AppUser(
                    id="user-jane",
                    full_name="Jane Doe",
                    email="jane@example.org",
                    role="Project responsible",
                ),
            ]
        )
        await s.commit()


@pytest.fixture
async def session(session_factory, seeded):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def client(session_factory, seeded):
    async def _override_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_collaboration(session_factory, seeded):
    """Insert a collaboration row directly, bypassing the service layer."""

    async def _make(company_id: int, project_id: int, **fields) -> int:
        fields.setdefault("priority", "Medium")
        async with session_factory() as s:
            row = Collaboration(company_id=company_id, project_id=project_id, **fields)
            s.add(row)
            await s.commit()
            return row.id

    return _make
