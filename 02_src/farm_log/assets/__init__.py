"""Asset logs module."""

from .asset_logs import AssetLogs, IAssetLogs

__all__ = ["AssetLogs", "IAssetLogs"]
