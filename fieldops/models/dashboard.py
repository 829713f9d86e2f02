"""Pydantic models for dashboard filters and statistics."""
from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel

TimeFrame = Literal['day', 'week', 'month', 'year', 'all', 'custom', '7days', '30days', '90days']


class DashboardFilter(ApplicationModel):
    """Time window and optional region/engineer filter."""
    time_frame: TimeFrame = Field(default='month')
    date_from: Optional[date] = Field(None, description="Custom range start")
    date_to: Optional[date] = Field(None, description="Custom range end")
    region_id: Optional[str] = None
    engineer_id: Optional[str] = None


class FuelBucket(ApplicationModel):
    type: str
    amount: float = 0


class IncidentTypeCount(ApplicationModel):
    type: str
    count: int = 0


class DashboardStats(ApplicationModel):
    """Statistics shared by the admin and engineer dashboards."""
    worker_count: int = 0
    equipment_count: int = 0
    operator_count: int = 0
    report_count: int = 0
    incident_count: int = 0
    total_fuel: float = 0
    fuel_by_type: List[FuelBucket] = Field(default=[])
    incidents_by_type: List[IncidentTypeCount] = Field(default=[])
    recent_reports: List[dict] = Field(default=[])
    recent_incidents: List[dict] = Field(default=[])


class AdminDashboardStats(DashboardStats):
    regions: List[dict] = Field(default=[])


class EngineerDashboardStats(DashboardStats):
    workers_used: List[dict] = Field(default=[], description="Distinct workers on recent reports")
    equipment_used: List[dict] = Field(default=[], description="Distinct equipment on recent reports")
