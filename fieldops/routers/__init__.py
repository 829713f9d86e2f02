"""API Routers for the field operations service."""
from fieldops.routers.regions import router as regions_router
from fieldops.routers.workers import router as workers_router
from fieldops.routers.equipment import router as equipment_router
from fieldops.routers.reports import router as reports_router
from fieldops.routers.incidents import router as incidents_router
from fieldops.routers.dashboard import router as dashboard_router
from fieldops.routers.users import router as users_router

__all__ = [
    'regions_router',
    'workers_router',
    'equipment_router',
    'reports_router',
    'incidents_router',
    'dashboard_router',
    'users_router',
]
