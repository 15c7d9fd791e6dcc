"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .assets import AssetLogs, IAssetLogs
from .config import DEFAULT_LOG_TYPES, resolve_db_path, resolve_status_defaults
from .logging_config import get_logger
from .query import ILogQueryFactory, LogQueryFactory
from .storage import AccessPolicy, IStorage, Storage
from .workflow import LOG_DEFAULT_WORKFLOW, StatusWorkflowDefaulter

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Clear all stored assets and logs."""
        ...

    @property
    def storage(self) -> IStorage: ...

    @property
    def log_query(self) -> ILogQueryFactory: ...

    @property
    def asset_logs(self) -> IAssetLogs: ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        status_defaults: dict[str, str] | None = None,
        access_policy: AccessPolicy | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        if status_defaults is None:
            status_defaults = resolve_status_defaults(os.getenv("LOG_STATUS_DEFAULTS"))
        self._status_defaulter = StatusWorkflowDefaulter.from_workflows(
            {log_type: LOG_DEFAULT_WORKFLOW for log_type in DEFAULT_LOG_TYPES},
            overrides=status_defaults,
        )
        self._access_policy = access_policy

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._log_query: ILogQueryFactory | None = None
        self._asset_logs: IAssetLogs | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (applies status defaults on log creation)
        self._storage = Storage(
            self._db_path,
            status_defaulter=self._status_defaulter,
            access_policy=self._access_policy,
        )
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Log query factory (depends on Storage)
        self._log_query = LogQueryFactory(self._storage)

        # 3. Asset logs (depends on Storage + log query factory)
        self._asset_logs = AssetLogs(self._storage, self._log_query)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._asset_logs = None
        self._log_query = None
        if self._storage:
            await self._storage.close()
            self._storage = None
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Clear all stored assets and logs."""
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

    @property
    def status_defaulter(self) -> StatusWorkflowDefaulter:
        """Get the log status defaulter."""
        return self._status_defaulter

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def log_query(self) -> ILogQueryFactory:
        """Get log query factory instance."""
        if not self._log_query:
            raise RuntimeError("Application not started")
        return self._log_query

    @property
    def asset_logs(self) -> IAssetLogs:
        """Get asset logs service instance."""
        if not self._asset_logs:
            raise RuntimeError("Application not started")
        return self._asset_logs
