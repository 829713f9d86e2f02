"""API Router for Equipment."""
from fastapi import APIRouter

from fieldops.models.equipment import EquipmentCreate, EquipmentUpdate
from fieldops.routers.crud import add_crud_routes

router = APIRouter(prefix="/api/equipment", tags=["equipment"])

add_crud_routes(
    router, 'equipment', EquipmentCreate, EquipmentUpdate,
    label="Equipment",
    conflict_message="Equipment references an unknown region or has an invalid fuel type",
    delete_conflict_message="Equipment appears on existing reports",
)
