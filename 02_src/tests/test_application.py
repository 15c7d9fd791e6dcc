"""Tests for Application."""

import pytest

from farm_log.app import Application
from farm_log.assets import AssetLogs
from farm_log.errors import ConfigurationError
from farm_log.query import LogQueryFactory
from farm_log.storage import Storage


@pytest.fixture
async def app():
    """Create and start an in-memory application."""
    application = Application(db_path=":memory:")
    await application.start()
    yield application
    await application.stop()


class TestApplicationStart:
    """Tests for Application.start()."""

    async def test_start_initializes_components(self, app):
        """Test that start wires components in dependency order."""
        assert isinstance(app.storage, Storage)
        assert isinstance(app.log_query, LogQueryFactory)
        assert isinstance(app.asset_logs, AssetLogs)
        assert app.log_query._storage is app.storage
        assert app.asset_logs._storage is app.storage
        assert app.asset_logs._log_query_factory is app.log_query

    async def test_properties_before_start(self):
        """Test that components are unavailable before start."""
        application = Application(db_path=":memory:")
        with pytest.raises(RuntimeError):
            application.storage
        with pytest.raises(RuntimeError):
            application.asset_logs

    async def test_stop_closes_storage(self):
        """Test that stop releases components."""
        application = Application(db_path=":memory:")
        await application.start()
        await application.stop()

        with pytest.raises(RuntimeError):
            application.log_query


class TestApplicationStatusDefaults:
    """Tests for status default configuration."""

    async def test_workflow_defaults(self, app):
        """Test that built-in log types start pending."""
        log = app.storage.create("log", {"type": "observation"})
        assert log.status == "pending"

    async def test_explicit_defaults(self):
        """Test that status defaults passed in override workflow defaults."""
        application = Application(
            db_path=":memory:", status_defaults={"observation": "done", "foo": "pending"}
        )
        await application.start()
        try:
            assert application.storage.create("log", {"type": "observation"}).status == "done"
            assert application.storage.create("log", {"type": "foo"}).status == "pending"
            assert application.storage.create("log", {"type": "bar"}).status is None
        finally:
            await application.stop()

    def test_env_defaults(self, monkeypatch):
        """Test reading LOG_STATUS_DEFAULTS from the environment."""
        monkeypatch.setenv("LOG_STATUS_DEFAULTS", '{"harvest": "done"}')
        application = Application(db_path=":memory:")
        assert application.status_defaulter.default_status("harvest") == "done"
        assert application.status_defaulter.default_status("seeding") == "pending"

    def test_invalid_env_defaults(self, monkeypatch):
        """Test that an override outside the workflow is rejected."""
        monkeypatch.setenv("LOG_STATUS_DEFAULTS", '{"harvest": "complete"}')
        with pytest.raises(ConfigurationError):
            Application(db_path=":memory:")


class TestApplicationReset:
    """Tests for Application.reset()."""

    async def test_reset_clears_data(self, app):
        """Test that reset removes stored logs."""
        log = app.storage.create("log", {"type": "activity"})
        await app.storage.save(log)

        await app.reset()

        assert await app.log_query.build_query(access_check=False) == []
