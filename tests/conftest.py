"""Pytest configuration and fixtures."""
import os
from datetime import datetime, timezone
from itertools import count
from unittest.mock import AsyncMock, MagicMock

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Wednesday
NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
USER_ID = "user123"


@pytest.fixture
def make_entry():
    """Factory for TimeEntry models with sensible defaults."""
    from timeledger.models.time_entry import TimeEntry

    ids = count(1)

    def _make(**fields):
        fields.setdefault("_id", f"entry{next(ids)}")
        fields.setdefault("user_id", USER_ID)
        fields.setdefault("created_at", datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc))
        return TimeEntry(**fields)

    return _make


@pytest.fixture
def customer_a():
    from timeledger.models.customer import Customer

    return Customer(id="cust-a", name="A")


@pytest.fixture
def customer_b():
    from timeledger.models.customer import Customer

    return Customer(id="cust-b", name="B")


@pytest.fixture
def fake_db():
    """
    Factory for a mocked Motor database.

    Collections return the given documents from find()/find_one().
    """

    def _make(entry_docs=(), customer_docs=(), task_docs=(), running_doc=None):
        mock_entries = MagicMock()
        mock_entries.find.return_value.sort.return_value.to_list = AsyncMock(
            return_value=list(entry_docs)
        )
        mock_entries.find_one = AsyncMock(return_value=running_doc)

        mock_customers = MagicMock()
        mock_customers.find.return_value.to_list = AsyncMock(
            return_value=list(customer_docs)
        )

        mock_tasks = MagicMock()
        mock_tasks.find.return_value.to_list = AsyncMock(return_value=list(task_docs))

        mock_db = MagicMock()
        mock_db.__getitem__.side_effect = lambda key: {
            "time_entries": mock_entries,
            "customers": mock_customers,
            "tasks": mock_tasks,
        }[key]
        return mock_db

    return _make


@pytest.fixture
def auth_headers():
    """Bearer token headers for USER_ID."""
    from timeledger.utils.auth import create_access_token

    token = create_access_token(user_id=USER_ID)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def app_client():
    """
    Create a test client backed by a mocked database.

    Yields a function that installs the database to use and returns the
    client. The request clock is pinned to NOW.
    """
    from timeledger.database import get_database
    from timeledger.main import app
    from timeledger.routers.deps import get_now

    app.dependency_overrides[get_now] = lambda: NOW

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:

        def _with_db(db):
            app.dependency_overrides[get_database] = lambda: db
            return client

        yield _with_db

    app.dependency_overrides.clear()
