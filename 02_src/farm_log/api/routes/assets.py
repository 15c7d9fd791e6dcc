"""Asset API routes."""

from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from .schemas import AssetCreateRequest, AssetResponse, LogResponse


def create_assets_router(app: IApplication) -> APIRouter:
    """Create assets router."""
    router = APIRouter(prefix="/api/assets", tags=["assets"])

    @router.post("", response_model=AssetResponse, status_code=201)
    async def create_asset(request: AssetCreateRequest) -> AssetResponse:
        """Create an asset."""
        try:
            asset = app.storage.create("asset", request.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        await app.storage.save(asset)
        return AssetResponse.from_asset(asset)

    @router.get("/{asset_id}/logs", response_model=list[LogResponse])
    async def get_asset_logs(
        asset_id: int,
        type: str | None = Query(None, description="Filter by log type"),
    ) -> list[LogResponse]:
        """Get logs referencing an asset, most recent first."""
        logs = await app.asset_logs.get_logs(asset_id, type, access_check=False)
        return [LogResponse.from_log(log) for log in logs]

    @router.get("/{asset_id}/logs/first", response_model=LogResponse | None)
    async def get_first_asset_log(asset_id: int) -> LogResponse | None:
        """Get the most recent log referencing an asset, or null."""
        log = await app.asset_logs.get_first_log(asset_id, access_check=False)
        return LogResponse.from_log(log) if log else None

    return router
