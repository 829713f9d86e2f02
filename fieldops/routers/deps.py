"""Shared dependencies for API routers."""
import logging
from typing import NoReturn, Optional

from fastapi import Depends, Header, HTTPException, Request

from fieldops.backend.base import Backend, Query
from fieldops.exceptions import BackendError, WriteError
from fieldops.services.access import is_admin
from fieldops.sync.case import to_application
from fieldops.sync.collection import RealtimeCollection

logger = logging.getLogger('deps')

CONFLICT_CODES = {'foreign_key_violation', 'unique_violation', 'check_violation', 'not_null_violation'}


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def collection_dependency(name: str):
    """Dependency returning the application's live mirror of ``name``."""
    def dependency(request: Request) -> RealtimeCollection:
        collections = request.app.state.collections
        if name not in collections:
            raise HTTPException(503, f"{name} is not being synchronized")
        return collections[name]
    return dependency


async def get_current_user(
    x_user_id: Optional[str] = Header(None),
    backend: Backend = Depends(get_backend),
) -> dict:
    """Resolve the caller from the identity header set by the auth layer."""
    if not x_user_id:
        raise HTTPException(401, "Not authenticated")
    try:
        rows = await backend.select(Query('users').eq('id', x_user_id).limit(1))
    except BackendError as exc:
        logger.error(f"Error loading user {x_user_id}: {exc.message}")
        raise HTTPException(503, "User lookup unavailable")
    if not rows:
        logger.warning(f"Request with unknown user id: {x_user_id}")
        raise HTTPException(401, "Unknown user")
    return to_application(rows[0])


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not is_admin(user):
        raise HTTPException(403, "Administrator role required")
    return user


def raise_for_write(exc: WriteError, label: str, conflict_message: str) -> NoReturn:
    """Turn a rejected write into a short, action-specific HTTP error."""
    if exc.code == 'not_found':
        raise HTTPException(404, f"{label} not found")
    if exc.code in CONFLICT_CODES:
        raise HTTPException(409, conflict_message)
    raise HTTPException(400, f"Could not save {label.lower()}")
