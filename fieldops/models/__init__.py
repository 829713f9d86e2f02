"""Pydantic models for request/response validation."""
from fieldops.models.region import RegionCreate, RegionUpdate
from fieldops.models.worker import WorkerCreate, WorkerUpdate
from fieldops.models.equipment import EquipmentCreate, EquipmentUpdate
from fieldops.models.incident import IncidentCreate, IncidentUpdate
from fieldops.models.report import ReportCreate, ReportUpdate, ReportWorkerLink, ReportEquipmentLink
from fieldops.models.user import UserResponse
from fieldops.models.dashboard import (
    DashboardFilter, DashboardStats, AdminDashboardStats, EngineerDashboardStats,
    FuelBucket, IncidentTypeCount,
)

__all__ = [
    'RegionCreate', 'RegionUpdate',
    'WorkerCreate', 'WorkerUpdate',
    'EquipmentCreate', 'EquipmentUpdate',
    'IncidentCreate', 'IncidentUpdate',
    'ReportCreate', 'ReportUpdate', 'ReportWorkerLink', 'ReportEquipmentLink',
    'UserResponse',
    'DashboardFilter', 'DashboardStats', 'AdminDashboardStats', 'EngineerDashboardStats',
    'FuelBucket', 'IncidentTypeCount',
]
