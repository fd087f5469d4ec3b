"""
Shared pytest fixtures.
"""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("AUTH_PROVIDER", "mock")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from chatledger.infrastructure.local.database import get_session_factory, init_db


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite database file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'chatledger_test.db'}",
        connect_args={"timeout": 30},
    )
    await init_db(engine)
    yield get_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def test_user_id():
    return "test_user"


@pytest.fixture
def other_user_id():
    return "other_user"
