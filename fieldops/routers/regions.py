"""API Router for Regions."""
from fastapi import APIRouter

from fieldops.models.region import RegionCreate, RegionUpdate
from fieldops.routers.crud import add_crud_routes

router = APIRouter(prefix="/api/regions", tags=["regions"])

add_crud_routes(
    router, 'regions', RegionCreate, RegionUpdate,
    label="Region",
    conflict_message="A region with this name already exists",
    delete_conflict_message="Region is still used by workers, equipment, reports or incidents",
    scoped=False,
    admin_only=True,
)
