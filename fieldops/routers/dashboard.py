"""API Router for dashboard statistics."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fieldops.backend.base import Backend
from fieldops.dashboard.aggregator import AdminDashboard, EngineerDashboard
from fieldops.models.dashboard import (
    AdminDashboardStats, DashboardFilter, EngineerDashboardStats, TimeFrame,
)
from fieldops.routers.deps import get_backend, get_current_user, require_admin

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def dashboard_filter(
    time_frame: TimeFrame = Query('month'),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    region_id: Optional[str] = Query(None),
    engineer_id: Optional[str] = Query(None),
) -> DashboardFilter:
    return DashboardFilter(
        time_frame=time_frame,
        date_from=date_from,
        date_to=date_to,
        region_id=region_id,
        engineer_id=engineer_id,
    )


@router.get("/admin", response_model=AdminDashboardStats)
async def admin_dashboard(
    filter: DashboardFilter = Depends(dashboard_filter),
    user: dict = Depends(require_admin),
    backend: Backend = Depends(get_backend),
):
    """Organisation-wide statistics for administrators."""
    return await AdminDashboard(backend).compute_stats(filter)


@router.get("/engineer", response_model=EngineerDashboardStats)
async def engineer_dashboard(
    filter: DashboardFilter = Depends(dashboard_filter),
    user: dict = Depends(get_current_user),
    backend: Backend = Depends(get_backend),
):
    """Statistics over the caller's own reports and incidents."""
    return await EngineerDashboard(backend).compute_stats(filter, user)
