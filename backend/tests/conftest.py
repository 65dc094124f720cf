"""
Pytest configuration and fixtures for Mahjong Ledger tests.

Shared fixtures for async FastAPI endpoints and the MongoDB store adapter
using mongomock-motor (no real MongoDB required).
"""

import os

# Set required env vars before any package imports
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-only")
# Disable rate limiting in tests
os.environ["TESTING"] = "1"

from typing import Optional

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from mahjong_ledger.models.common import SEAT_ORDER
from mahjong_ledger.models.game_record import GameRecord, SeatEntry


def make_record(
    game_id: str,
    seats: list[tuple[str, Optional[float]]],
    timestamp: str = "2024-03-01T20:00:00Z",
) -> GameRecord:
    """Build a GameRecord from ``[(players_cell, score), ...]`` in table order."""
    padded = list(seats) + [("", 0.0)] * (len(SEAT_ORDER) - len(seats))
    return GameRecord(
        game_id=game_id,
        timestamp=timestamp,
        seats={
            seat: SeatEntry(
                player_names=[n.strip() for n in players.split("+") if n.strip()],
                score=score,
            )
            for seat, (players, score) in zip(SEAT_ORDER, padded)
        },
    )


@pytest_asyncio.fixture
async def test_db():
    """In-memory MongoDB mock database, discarded after each test."""
    client = AsyncMongoMockClient()
    db = client["mahjong_ledger_test"]
    yield db
    client.close()


@pytest_asyncio.fixture
async def store(test_db):
    """A MongoGameStore over the mock database, installed as the active store."""
    from mahjong_ledger.dal.mongo_store import MongoGameStore
    from mahjong_ledger.dal.store import use_store

    mongo_store = MongoGameStore(test_db)
    use_store(mongo_store)
    yield mongo_store
    use_store(None)


@pytest_asyncio.fixture
async def client(store):
    """Async HTTP client for the FastAPI app, wired to the mock store.

    Yields:
        AsyncClient: HTTPX async client with the FastAPI app.
    """
    from httpx import ASGITransport, AsyncClient
    from mahjong_ledger.auth.context import session_registry
    from mahjong_ledger.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    session_registry.reset()


@pytest.fixture
def admin_token() -> str:
    """A valid admin JWT for test use."""
    from mahjong_ledger.auth.jwt import create_access_token
    from mahjong_ledger.config import settings

    return create_access_token(data={"sub": settings.ADMIN_USERNAME, "role": "admin"})


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def record_factory():
    """The ``make_record`` builder, for tests that assemble game histories."""
    return make_record
