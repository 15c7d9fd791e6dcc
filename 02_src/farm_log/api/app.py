"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..app import Application
from ..errors import InvalidCriteriaError, StorageError
from ..logging_config import get_logger
from .routes import assets, logs

logger = get_logger(__name__)

# Global application instance
_app: Application | None = None


def get_app() -> Application:
    """Get the global application instance."""
    global _app
    if not _app:
        _app = Application()
    return _app


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or get_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="farm-log API",
        description="Log queries and asset log lookups",
        version="0.1.0",
        lifespan=lifespan,
    )

    @fastapi_app.exception_handler(InvalidCriteriaError)
    async def invalid_criteria(request: Request, exc: InvalidCriteriaError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @fastapi_app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    # Include routers
    fastapi_app.include_router(logs.create_logs_router(application))
    fastapi_app.include_router(assets.create_assets_router(application))

    return fastapi_app
