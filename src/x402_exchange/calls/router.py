"""Call analytics API router."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from x402_exchange.calls.ranges import resolve_range
from x402_exchange.calls.schemas import CallListResponse, CallResponse, DashboardStats
from x402_exchange.calls.table import (
    SORT_FIELDS,
    STATUS_FILTERS,
    apply_table_view,
    csv_filename,
    export_csv,
)
from x402_exchange.common.security import require_user

router = APIRouter(prefix="/calls")


def _get_service():
    from x402_exchange.deps import get_call_service
    return get_call_service()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


def _check_view(status: str, sort: str, direction: str) -> None:
    if status not in STATUS_FILTERS:
        raise HTTPException(status_code=422, detail=f"Unknown status filter: {status}")
    if sort not in SORT_FIELDS:
        raise HTTPException(status_code=422, detail=f"Unknown sort field: {sort}")
    if direction not in ("asc", "desc"):
        raise HTTPException(status_code=422, detail=f"Unknown sort direction: {direction}")


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    preset: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    user_id: str = Depends(require_user),
):
    svc = _get_service()
    db = _get_db()
    date_range = resolve_range(preset, start, end)
    async with db.get_session() as session:
        return await svc.get_stats(session, user_id, date_range)


@router.get("", response_model=CallListResponse)
async def list_calls(
    preset: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    search: str = Query(""),
    status: str = Query("all"),
    sort: str = Query("timestamp"),
    direction: str = Query("desc"),
    user_id: str = Depends(require_user),
):
    _check_view(status, sort, direction)
    svc = _get_service()
    db = _get_db()
    date_range = resolve_range(preset, start, end)
    async with db.get_session() as session:
        rows = await svc.recent_calls(session, user_id, date_range)
    rows = apply_table_view(rows, search, status, sort, direction)
    return CallListResponse(
        preset=date_range.preset,
        start=date_range.start,
        end=date_range.end,
        total=len(rows),
        items=[CallResponse.model_validate(r) for r in rows],
    )


@router.get("/export")
async def export_calls(
    preset: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    search: str = Query(""),
    status: str = Query("all"),
    sort: str = Query("timestamp"),
    direction: str = Query("desc"),
    user_id: str = Depends(require_user),
):
    _check_view(status, sort, direction)
    svc = _get_service()
    db = _get_db()
    date_range = resolve_range(preset, start, end)
    async with db.get_session() as session:
        rows = await svc.recent_calls(session, user_id, date_range)
    rows = apply_table_view(rows, search, status, sort, direction)
    return Response(
        content=export_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{csv_filename()}"'},
    )
