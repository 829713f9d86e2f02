"""API Router for Workers."""
from fastapi import APIRouter

from fieldops.models.worker import WorkerCreate, WorkerUpdate
from fieldops.routers.crud import add_crud_routes

router = APIRouter(prefix="/api/workers", tags=["workers"])

add_crud_routes(
    router, 'workers', WorkerCreate, WorkerUpdate,
    label="Worker",
    conflict_message="Worker references an unknown region",
    delete_conflict_message="Worker appears on existing reports",
)
