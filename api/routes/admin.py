"""Admin routes for triggering fetches and inspecting fetch history."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.fetch_log import FetchLogModel
from api.routes.dependencies import clamp_pagination, get_orchestrator
from api.schemas.requests import FetchRequest
from api.schemas.responses import ErrorResponse, FetchLogListResponse, FetchLogResponse, FetchResponse
from database.connection import get_db
from database.repositories.fetch_log_repo import FetchLogRepository
from ingestion.orchestrator import FetchOrchestrator


router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/fetch",
    response_model=FetchResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}}
)
async def trigger_fetch(
    request: Optional[FetchRequest] = None,
    orchestrator: FetchOrchestrator = Depends(get_orchestrator)
):
    """
    Run a fetch now.

    - With a source_id, fetches that source only (404 if it does not exist)
    - Without a body, runs a full cycle over all enabled sources
    """
    if request is not None and request.source_id:
        result = await orchestrator.fetch_source(request.source_id)
        return FetchResponse(results=[result])

    results = await orchestrator.fetch_all()
    return FetchResponse(results=results)


@router.get("/logs", response_model=FetchLogListResponse)
async def list_fetch_logs(
    source_id: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = 1,
    limit: int = 20,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """List fetch logs, newest first."""
    fetch_log_repo = FetchLogRepository(db)
    page, limit = clamp_pagination(page, limit)

    logs, total = await fetch_log_repo.list_fetch_logs(
        source_id=source_id,
        status=status_filter,
        page=page,
        limit=limit
    )

    return FetchLogListResponse(
        data=[FetchLogResponse(**FetchLogModel(**log).model_dump()) for log in logs],
        total=total,
        page=page,
        limit=limit,
        total_pages=FetchLogListResponse.pages(total, limit)
    )
