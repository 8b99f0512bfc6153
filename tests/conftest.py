"""Shared fixtures for the Members API tests.

Every test gets its own SQLite file under ``tmp_path`` with the schema
applied, and the service uses a fixed clock so join dates are
predictable.  HTTP tests call the app in-process through
``ASGITransport``.
"""

from datetime import date
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from members_api.app.core.db import Outcome, QueryResult, StorageGateway, init_db
from members_api.app.main import create_app
from members_api.app.services.member_service import MemberService
from seed_members import seed

TODAY = date(2024, 4, 1)


def fixed_clock() -> date:
    return TODAY


class FailingGateway:
    """Gateway stand-in whose every statement fails with a store error."""

    def __init__(self, outcome: Outcome = Outcome.ERROR, error: str = "disk I/O error") -> None:
        self.outcome = outcome
        self.error = error
        self.calls: List[tuple] = []

    async def execute(self, query, params=()):
        self.calls.append((query, tuple(params)))
        return QueryResult(self.outcome, error=self.error)


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "members.db")
    init_db(path)
    return path


@pytest.fixture
def seeded_db(db_path) -> str:
    """Database holding the three sample members (ids 1-3)."""
    seed(db_path)
    return db_path


@pytest.fixture
def gateway(db_path) -> StorageGateway:
    return StorageGateway(db_path)


@pytest.fixture
def service(gateway) -> MemberService:
    return MemberService(gateway, clock=fixed_clock)


@pytest.fixture
def app(gateway):
    return create_app(gateway=gateway, clock=fixed_clock)


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class ExplodingGateway:
    """Gateway stand-in that raises instead of returning a result."""

    def __init__(self, message: str = "secret detail") -> None:
        self.message = message

    async def execute(self, query, params=()):
        raise RuntimeError(self.message)
