"""farm-log core module."""

from .app import Application, IApplication
from .assets import AssetLogs, IAssetLogs
from .errors import (
    ConfigurationError,
    FarmLogError,
    InvalidCriteriaError,
    QueryError,
    StorageError,
)
from .models import Asset, Log, LogQueryCriteria, TextLong
from .normalizers import TextLongNormalizer
from .query import ILogQueryFactory, LogQueryFactory
from .storage import EntityQuery, IStorage, Storage
from .workflow import LOG_DEFAULT_WORKFLOW, LogWorkflow, StatusWorkflowDefaulter

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "Asset",
    "Log",
    "LogQueryCriteria",
    "TextLong",
    # Errors
    "FarmLogError",
    "StorageError",
    "QueryError",
    "InvalidCriteriaError",
    "ConfigurationError",
    # Components
    "IStorage",
    "Storage",
    "EntityQuery",
    "ILogQueryFactory",
    "LogQueryFactory",
    "IAssetLogs",
    "AssetLogs",
    "LogWorkflow",
    "LOG_DEFAULT_WORKFLOW",
    "StatusWorkflowDefaulter",
    "TextLongNormalizer",
]
