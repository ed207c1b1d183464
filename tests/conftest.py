"""Shared test fixtures.

Seeds the environment required by ``triagem.core.config`` before any
application module is imported, and provides Supabase doubles: a plain
``MagicMock`` for call-shape assertions and an in-memory fake for
behavioural tests.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

from collections.abc import Generator  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tests.fakes import FakeSupabase, chainable_query_mock  # noqa: E402


@pytest.fixture()
def mock_supabase() -> MagicMock:
    """A Supabase client mock whose ``table()`` returns one chainable query."""
    client = MagicMock()
    client.table.return_value = chainable_query_mock()
    return client


@pytest.fixture()
def fake_supabase() -> FakeSupabase:
    """An in-memory Supabase double with ``candidates`` and ``users`` tables."""
    return FakeSupabase()


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client used by the health router."""
    mock_client = MagicMock()
    mock_client.table.return_value = chainable_query_mock()
    with patch("triagem.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "triagem.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()


@pytest.fixture()
def test_client(fake_supabase: FakeSupabase) -> Generator[TestClient, None, None]:
    """A FastAPI TestClient whose services run against ``fake_supabase``."""
    from triagem.main import app
    from triagem.routers.deps import get_client

    app.dependency_overrides[get_client] = lambda: fake_supabase
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
