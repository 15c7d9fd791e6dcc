"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Type -> default status used by the test log types.
TEST_STATUS_DEFAULTS = {"foo": "pending", "bar": "done"}


@pytest.fixture
def status_defaulter():
    """Create status defaulter for the foo/bar test log types."""
    from farm_log.workflow import StatusWorkflowDefaulter

    return StatusWorkflowDefaulter(TEST_STATUS_DEFAULTS)


@pytest_asyncio.fixture
async def storage(status_defaulter):
    """Create in-memory storage for testing."""
    from farm_log.storage import Storage

    st = Storage(":memory:", status_defaulter=status_defaulter)
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def log_query(storage):
    """Create log query factory with storage."""
    from farm_log.query import LogQueryFactory

    return LogQueryFactory(storage)


@pytest.fixture
def asset_logs(storage, log_query):
    """Create asset logs service."""
    from farm_log.assets import AssetLogs

    return AssetLogs(storage, log_query)


@pytest.fixture
def make_asset(storage):
    """Create and save an asset."""

    async def _make(**fields):
        fields.setdefault("type", "test")
        asset = storage.create("asset", fields)
        await storage.save(asset)
        return asset

    return _make


@pytest.fixture
def make_log(storage):
    """Create and save a log."""

    async def _make(**fields):
        log = storage.create("log", fields)
        await storage.save(log)
        return log

    return _make
