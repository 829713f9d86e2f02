"""API Router for Incidents."""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from fieldops.exceptions import WriteError
from fieldops.models.incident import IncidentCreate, IncidentUpdate
from fieldops.routers.crud import add_crud_routes, check_write_access
from fieldops.routers.deps import collection_dependency, get_current_user, raise_for_write
from fieldops.services.access import has_region_access, is_admin
from fieldops.services.blob_storage import BlobStorageService
from fieldops.sync.collection import RealtimeCollection

logger = logging.getLogger('incidents_router')
router = APIRouter(prefix="/api/incidents", tags=["incidents"])

get_incidents = collection_dependency('incidents')

MAX_PHOTO_BYTES = 10 * 1024 * 1024


def get_blob_storage() -> BlobStorageService:
    return BlobStorageService()


@router.post("/{incident_id}/photo", response_model=dict)
async def upload_incident_photo(
    incident_id: str,
    file: UploadFile = File(...),
    user: dict = Depends(get_current_user),
    incidents: RealtimeCollection = Depends(get_incidents),
    storage: BlobStorageService = Depends(get_blob_storage),
):
    """Upload a photo and attach its public URL to the incident."""
    incident = incidents.get(incident_id)
    if incident is None or not (is_admin(user) or has_region_access(user, incident.get('regionId'))):
        raise HTTPException(404, "Incident not found")
    check_write_access(user, incident.get('regionId'))

    data = await file.read()
    if not data:
        raise HTTPException(400, "Empty file")
    if len(data) > MAX_PHOTO_BYTES:
        raise HTTPException(413, "Photo is too large")

    path = storage.incident_photo_path(incident_id, file.filename or 'photo.jpg')
    url = await run_in_threadpool(storage.upload, data, path)
    if not url:
        raise HTTPException(502, "Photo upload failed")

    try:
        updated = await incidents.update(incident_id, {'imageUrl': url})
    except WriteError as exc:
        raise_for_write(exc, "Incident", "Incident could not be updated")

    logger.info(f"Attached photo to incident {incident_id}")
    return updated


add_crud_routes(
    router, 'incidents', IncidentCreate, IncidentUpdate,
    label="Incident",
    conflict_message="Incident references an unknown region or has an invalid type",
    delete_conflict_message="Incident could not be deleted",
    owner_field='engineerId',
)
