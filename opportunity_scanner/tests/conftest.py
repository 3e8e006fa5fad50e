"""Shared fixtures for the Opportunity Scanner test-suite."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from opportunity_scanner.core.llm_client import GeminiClient
from opportunity_scanner.core.result_store import ResultStore


@pytest.fixture
def mock_llm_client():
    """A GeminiClient stand-in whose ``generate`` is an AsyncMock."""
    client = AsyncMock(spec=GeminiClient)
    client.generate = AsyncMock()
    return client


@pytest_asyncio.fixture
async def result_store(tmp_path):
    """A ResultStore backed by a fresh SQLite file, initialized and disposed per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test_opportunities.db'}")
    store = ResultStore(engine)
    await store.initialize()
    yield store
    await store.close()
