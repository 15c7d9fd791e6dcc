"""Tests for AssetLogs."""

import time

from farm_log.models import Log


class TestAssetLogsService:
    """Tests for AssetLogs.get_logs() and get_first_log()."""

    async def test_asset_logs_service(self, asset_logs, make_asset, make_log):
        """Test listing, filtering and first log lookup."""
        asset = await make_asset()
        timestamp = int(time.time())
        foo_log = await make_log(type="foo", timestamp=timestamp + 1, asset=[asset])
        bar_log = await make_log(type="bar", timestamp=timestamp, asset=[asset])

        logs = await asset_logs.get_logs(asset)
        assert len(logs) == 2

        logs = await asset_logs.get_logs(asset, "bar")
        assert len(logs) == 1
        assert logs[0].id == bar_log.id

        first_log = await asset_logs.get_first_log(asset)
        assert first_log.id == foo_log.id

    async def test_get_logs_materializes_in_order(self, asset_logs, make_asset, make_log):
        """Test that full Log records come back most recent first."""
        asset = await make_asset()
        old = await make_log(type="foo", timestamp=100, asset=[asset])
        new = await make_log(type="bar", timestamp=200, asset=[asset])
        tied = await make_log(type="foo", timestamp=200, asset=[asset])

        logs = await asset_logs.get_logs(asset)
        assert all(isinstance(log, Log) for log in logs)
        assert [log.id for log in logs] == [tied.id, new.id, old.id]
        assert logs[1].type == "bar"
        assert logs[1].asset == [asset.id]

    async def test_get_logs_excludes_other_assets(self, asset_logs, make_asset, make_log):
        """Test that logs referencing only other assets are excluded."""
        asset = await make_asset()
        other = await make_asset()
        mine = await make_log(type="foo", asset=[asset])
        await make_log(type="foo", asset=[other])

        logs = await asset_logs.get_logs(asset.id)
        assert [log.id for log in logs] == [mine.id]

    async def test_first_log_is_head_of_logs(self, asset_logs, make_asset, make_log):
        """Test that the first log is the most recent one."""
        asset = await make_asset()
        await make_log(type="foo", timestamp=100, asset=[asset])
        latest = await make_log(type="bar", timestamp=300, asset=[asset])
        await make_log(type="foo", timestamp=200, asset=[asset])

        logs = await asset_logs.get_logs(asset)
        first_log = await asset_logs.get_first_log(asset)
        assert first_log == logs[0]
        assert first_log.id == latest.id

    async def test_asset_without_logs(self, asset_logs, make_asset, make_log):
        """Test that an asset with no logs yields empty results."""
        asset = await make_asset()
        await make_log(type="foo")

        assert await asset_logs.get_logs(asset) == []
        assert await asset_logs.get_first_log(asset) is None

    async def test_nonexistent_asset(self, asset_logs):
        """Test that unknown asset IDs are not an error."""
        assert await asset_logs.get_logs(12345) == []
        assert await asset_logs.get_first_log(12345) is None

    async def test_reflects_live_state(self, asset_logs, make_asset, make_log, storage):
        """Test that removing a reference removes the log from the lookup."""
        asset = await make_asset()
        log = await make_log(type="foo", asset=[asset])
        assert len(await asset_logs.get_logs(asset)) == 1

        log.asset = []
        await storage.save(log)
        assert await asset_logs.get_logs(asset) == []
