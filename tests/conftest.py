"""
Pytest configuration and shared fixtures.

Service and API tests run against a throwaway SQLite database per test
(aiosqlite), created from the ORM metadata.
"""

import os

# Must be set before recruiting_crm.db.session builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import asyncio
import uuid
from typing import List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from recruiting_crm.db.base import Base
from recruiting_crm.models import Candidate, PipelineStage, PipelineType, Position
from recruiting_crm.schemas.automation import AutomationEvent
from recruiting_crm.services.audit_logger import AuditLogger
from recruiting_crm.services.automation import AutomationDispatcher
from recruiting_crm.services.recruiting_pipeline_service import RecruitingPipelineService


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


class RecordingAutomationClient:
    """Keeps every event it receives."""

    def __init__(self):
        self.events: List[AutomationEvent] = []

    async def process_event(self, event: AutomationEvent) -> None:
        self.events.append(event)

    @property
    def types(self) -> List[str]:
        return [e.type.value for e in self.events]


class FailingAutomationClient:
    async def process_event(self, event: AutomationEvent) -> None:
        raise RuntimeError("automation service unavailable")


class SlowAutomationClient:
    async def process_event(self, event: AutomationEvent) -> None:
        await asyncio.sleep(5)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'pipeline.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def automation_client():
    return RecordingAutomationClient()


@pytest.fixture
def audit_logger(session_factory):
    return AuditLogger(session_factory)


@pytest.fixture
def service(db, automation_client, audit_logger):
    return RecruitingPipelineService(
        db,
        AutomationDispatcher(automation_client, timeout_seconds=1.0),
        audit_logger,
    )


@pytest.fixture
def tenant_id():
    return uuid.uuid4()


@pytest.fixture
def other_tenant_id():
    return uuid.uuid4()


async def seed_tenant(session: AsyncSession, tenant_id: uuid.UUID, with_stages: bool = True) -> dict:
    """Two candidates, two positions and (optionally) three recruiting stages."""
    candidates = [
        Candidate(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            current_title="Staff Engineer",
            current_company="Analytical Engines",
        ),
        Candidate(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            first_name="Grace",
            last_name="Hopper",
            email="grace@example.com",
            current_title="Rear Admiral",
            current_company="US Navy",
        ),
    ]
    positions = [
        Position(id=uuid.uuid4(), tenant_id=tenant_id, title="Backend Engineer", department="Engineering"),
        Position(id=uuid.uuid4(), tenant_id=tenant_id, title="Engineering Manager", department="Engineering"),
    ]
    stages = []
    if with_stages:
        stages = [
            PipelineStage(
                id=uuid.uuid4(),
                tenant_id=tenant_id,
                code=code,
                name=name,
                order_index=order,
                color=color,
                pipeline_type=PipelineType.RECRUITING,
            )
            for code, name, order, color in [
                ("APPLIED", "Applied", 1, "#3B82F6"),
                ("SCREENING", "Screening", 2, "#8B5CF6"),
                ("INTERVIEW", "Interview", 3, "#F59E0B"),
            ]
        ]
        # Sales stage with a lower order_index that must never be picked as default
        stages.append(
            PipelineStage(
                id=uuid.uuid4(),
                tenant_id=tenant_id,
                code="LEAD",
                name="Lead",
                order_index=0,
                pipeline_type=PipelineType.SALES,
            )
        )
    session.add_all(candidates + positions + stages)
    await session.commit()
    return {
        "candidates": candidates,
        "positions": positions,
        "stages": [s for s in stages if s.pipeline_type == PipelineType.RECRUITING],
        "sales_stages": [s for s in stages if s.pipeline_type == PipelineType.SALES],
    }


@pytest_asyncio.fixture
async def seeded(db, tenant_id):
    return await seed_tenant(db, tenant_id)


@pytest_asyncio.fixture
async def other_seeded(db, other_tenant_id):
    return await seed_tenant(db, other_tenant_id)
