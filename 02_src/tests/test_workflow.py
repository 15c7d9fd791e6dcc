"""Tests for log status workflows."""

import pytest

from farm_log.errors import ConfigurationError
from farm_log.models import Log
from farm_log.workflow import LOG_DEFAULT_WORKFLOW, LogWorkflow, StatusWorkflowDefaulter


class TestLogStatusWorkflow:
    """Tests for defaults applied by storage on creation."""

    async def test_log_status_workflow(self, storage):
        """Test per-type default statuses."""
        foo_log = storage.create("log", {"type": "foo"})
        assert foo_log.status == "pending"

        bar_log = storage.create("log", {"type": "bar"})
        assert bar_log.status == "done"

    async def test_explicit_status_kept(self, storage):
        """Test that an explicit status is never overridden."""
        log = storage.create("log", {"type": "foo", "status": "complete"})
        assert log.status == "complete"

    async def test_unconfigured_type_left_unset(self, storage):
        """Test that a type without a default keeps a None status."""
        log = storage.create("log", {"type": "observation"})
        assert log.status is None

    async def test_default_not_reapplied_on_save(self, storage):
        """Test that later status changes survive saving and loading."""
        log = storage.create("log", {"type": "foo"})
        await storage.save(log)

        log.status = "complete"
        await storage.save(log)

        loaded = await storage.load("log", log.id)
        assert loaded.status == "complete"

    async def test_unset_status_persists(self, storage):
        """Test that a log without status can still be saved."""
        log = storage.create("log", {"type": "observation"})
        await storage.save(log)

        loaded = await storage.load("log", log.id)
        assert loaded.status is None


class TestStatusWorkflowDefaulter:
    """Tests for StatusWorkflowDefaulter."""

    def test_default_status(self):
        """Test table lookup."""
        defaulter = StatusWorkflowDefaulter({"foo": "pending"})
        assert defaulter.default_status("foo") == "pending"
        assert defaulter.default_status("bar") is None

    def test_apply(self):
        """Test that apply only fills a missing status."""
        defaulter = StatusWorkflowDefaulter({"foo": "pending"})

        assert defaulter.apply(Log(type="foo")).status == "pending"
        assert defaulter.apply(Log(type="foo", status="done")).status == "done"
        assert defaulter.apply(Log(type="bar")).status is None

    def test_from_workflows_uses_initial_state(self):
        """Test that a workflow's first state becomes the default."""
        done_first = LogWorkflow(id="log_done", label="Done", states=("done", "pending"))
        defaulter = StatusWorkflowDefaulter.from_workflows(
            {"foo": LOG_DEFAULT_WORKFLOW, "bar": done_first}
        )

        assert defaulter.type_defaults == {"foo": "pending", "bar": "done"}

    def test_from_workflows_overrides(self):
        """Test that overrides win and may name types without workflows."""
        defaulter = StatusWorkflowDefaulter.from_workflows(
            {"foo": LOG_DEFAULT_WORKFLOW},
            overrides={"foo": "done", "custom": "planned"},
        )

        assert defaulter.default_status("foo") == "done"
        assert defaulter.default_status("custom") == "planned"

    def test_from_workflows_rejects_unknown_state(self):
        """Test that an override outside the workflow is a configuration error."""
        with pytest.raises(ConfigurationError):
            StatusWorkflowDefaulter.from_workflows(
                {"foo": LOG_DEFAULT_WORKFLOW}, overrides={"foo": "complete"}
            )

    def test_workflow_requires_states(self):
        """Test that an empty workflow is rejected."""
        with pytest.raises(ConfigurationError):
            LogWorkflow(id="empty", label="Empty", states=())
