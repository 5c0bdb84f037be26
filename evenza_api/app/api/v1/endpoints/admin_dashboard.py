"""Admin overview and activity log."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ....core.db import Database, get_db
from ....schemas.activity import ActivityRead
from ....schemas.common import Page
from ....schemas.dashboard import AdminDashboard
from ....services.activity_service import ActivityService
from ....services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/dashboard", response_model=AdminDashboard)
async def dashboard(db: Database = Depends(get_db)) -> AdminDashboard:
    """Platform totals, completed revenue and the latest activity."""
    return AdminDashboard(**await DashboardService.admin_overview(db))


@router.get("/activity", response_model=Page[ActivityRead])
async def list_activity(
    user_id: Optional[int] = None,
    type: Optional[str] = None,
    resource_type: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[ActivityRead]:
    items, total = await ActivityService.list_activity(
        db,
        user_id=user_id,
        type=type,
        resource_type=resource_type,
        search=search,
        limit=limit,
        offset=offset,
    )
    return Page[ActivityRead](items=items, total=total, limit=limit, offset=offset)
