"""List/get/create/update/delete routes served from a live collection mirror."""
import logging
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from fieldops.exceptions import WriteError
from fieldops.routers.deps import collection_dependency, get_current_user, raise_for_write
from fieldops.services.access import build_region_scope, has_region_access, is_admin, is_engineer
from fieldops.sync.collection import RealtimeCollection

logger = logging.getLogger('crud_router')


def check_write_access(user: dict, region_id: Optional[str], admin_only: bool = False):
    """Raise 403 unless ``user`` may write a row in ``region_id``."""
    if admin_only and not is_admin(user):
        raise HTTPException(403, "Administrator role required")
    if region_id and not has_region_access(user, region_id):
        raise HTTPException(403, "No access to this region")


def add_crud_routes(router: APIRouter, collection_name: str,
                    create_model: Optional[Type[BaseModel]], update_model: Type[BaseModel],
                    label: str, conflict_message: str, delete_conflict_message: str,
                    scoped: bool = True, admin_only: bool = False,
                    owner_field: Optional[str] = None, include_get: bool = True):
    """Register the standard routes for one collection on ``router``.

    ``scoped`` collections are filtered to the caller's regions on read;
    ``owner_field`` is pinned to the caller's id when an engineer creates a row.
    """
    get_collection = collection_dependency(collection_name)

    def visible(user: dict, record: Optional[dict]) -> bool:
        if record is None:
            return False
        if not scoped or is_admin(user):
            return True
        return has_region_access(user, record.get('regionId'))

    @router.get("", response_model=List[dict])
    async def list_records(
        response: Response,
        region_id: Optional[str] = Query(None),
        user: dict = Depends(get_current_user),
        collection: RealtimeCollection = Depends(get_collection),
    ):
        items = collection.items
        if scoped:
            items = build_region_scope(user, region_id).filter_records(items)
        if collection.error is not None:
            # Last-known-good rows are still served
            response.headers['X-Sync-Error'] = collection.error.message
        return items

    if include_get:
        @router.get("/{record_id}", response_model=dict)
        async def get_record(
            record_id: str,
            user: dict = Depends(get_current_user),
            collection: RealtimeCollection = Depends(get_collection),
        ):
            record = collection.get(record_id)
            if not visible(user, record):
                raise HTTPException(404, f"{label} not found")
            return record

    if create_model is not None:
        @router.post("", response_model=dict)
        async def create_record(
            payload: create_model,
            user: dict = Depends(get_current_user),
            collection: RealtimeCollection = Depends(get_collection),
        ):
            record = payload.model_dump(by_alias=True)
            if owner_field and is_engineer(user):
                record[owner_field] = user['id']
            check_write_access(user, record.get('regionId'), admin_only)
            try:
                created = await collection.add(record)
            except WriteError as exc:
                raise_for_write(exc, label, conflict_message)
            logger.info(f"Created {collection_name} {created['id']}")
            return created

    @router.put("/{record_id}", response_model=dict)
    async def update_record(
        record_id: str,
        payload: update_model,
        user: dict = Depends(get_current_user),
        collection: RealtimeCollection = Depends(get_collection),
    ):
        existing = collection.get(record_id)
        if not visible(user, existing):
            raise HTTPException(404, f"{label} not found")
        changes = payload.model_dump(by_alias=True, exclude_unset=True)
        if not changes:
            raise HTTPException(400, "No fields to update")
        check_write_access(user, existing.get('regionId'), admin_only)
        check_write_access(user, changes.get('regionId'), admin_only)
        try:
            updated = await collection.update(record_id, changes)
        except WriteError as exc:
            raise_for_write(exc, label, conflict_message)
        logger.info(f"Updated {collection_name} {record_id}")
        return updated

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        user: dict = Depends(get_current_user),
        collection: RealtimeCollection = Depends(get_collection),
    ):
        existing = collection.get(record_id)
        if not visible(user, existing):
            raise HTTPException(404, f"{label} not found")
        check_write_access(user, existing.get('regionId'), admin_only)
        try:
            await collection.remove(record_id)
        except WriteError as exc:
            raise_for_write(exc, label, delete_conflict_message)
        logger.info(f"Deleted {collection_name} {record_id}")
        return {"message": f"{label} deleted successfully"}
