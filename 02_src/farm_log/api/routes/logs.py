"""Log API routes."""

from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from .schemas import LogCreateRequest, LogResponse


def create_logs_router(app: IApplication) -> APIRouter:
    """Create logs router."""
    router = APIRouter(prefix="/api/logs", tags=["logs"])

    @router.get("", response_model=list[int])
    async def query_logs(
        type: str | None = Query(None, description="Filter by log type"),
        timestamp: int | None = Query(None, description="Exclude logs after this epoch time"),
        status: str | None = Query(None, description="Filter by status"),
        asset: int | None = Query(None, description="Filter by referenced asset ID"),
        limit: int | None = Query(None, ge=0, description="Maximum number of results"),
    ) -> list[int]:
        """Get log IDs, most recent first."""
        return await app.log_query.build_query(
            {
                "type": type,
                "timestamp": timestamp,
                "status": status,
                "asset": asset,
                "limit": limit,
            },
            access_check=False,
        )

    @router.post("", response_model=LogResponse, status_code=201)
    async def create_log(request: LogCreateRequest) -> LogResponse:
        """Create a log."""
        try:
            log = app.storage.create("log", request.to_fields())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if log.asset:
            found = await app.storage.load_multiple("asset", log.asset)
            missing = sorted(set(log.asset) - {asset.id for asset in found})
            if missing:
                raise HTTPException(
                    status_code=400,
                    detail=f"Unknown asset IDs: {', '.join(map(str, missing))}",
                )

        await app.storage.save(log)
        return LogResponse.from_log(log)

    @router.get("/{log_id}", response_model=LogResponse)
    async def get_log(log_id: int) -> LogResponse:
        """Get a log by ID."""
        log = await app.storage.load("log", log_id)
        if log is None:
            raise HTTPException(status_code=404, detail="Log not found")
        return LogResponse.from_log(log)

    return router
