"""API Router for daily work Reports."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from fieldops.backend.base import Backend
from fieldops.exceptions import FetchError, WriteError
from fieldops.models.report import ReportCreate, ReportUpdate
from fieldops.routers.crud import add_crud_routes, check_write_access
from fieldops.routers.deps import collection_dependency, get_backend, get_current_user, raise_for_write
from fieldops.services.access import has_region_access, is_admin, is_engineer
from fieldops.services.reports import create_report as create_report_with_links, load_report_links
from fieldops.sync.collection import RealtimeCollection

logger = logging.getLogger('reports_router')
router = APIRouter(prefix="/api/reports", tags=["reports"])

get_reports = collection_dependency('reports')


@router.get("/{report_id}", response_model=dict)
async def get_report(
    report_id: str,
    user: dict = Depends(get_current_user),
    backend: Backend = Depends(get_backend),
    reports: RealtimeCollection = Depends(get_reports),
):
    """Get a report with its workers and equipment."""
    report = reports.get(report_id)
    if report is None or not (is_admin(user) or has_region_access(user, report.get('regionId'))):
        raise HTTPException(404, "Report not found")
    try:
        return await load_report_links(backend, report)
    except FetchError:
        raise HTTPException(503, "Report details are unavailable")


@router.post("", response_model=dict)
async def create_report(
    payload: ReportCreate,
    user: dict = Depends(get_current_user),
    backend: Backend = Depends(get_backend),
):
    """Create a report together with its worker and equipment links."""
    data = payload.model_dump(by_alias=True)
    workers = data.pop('workers')
    equipment = data.pop('equipment')
    if is_engineer(user):
        data['engineerId'] = user['id']
    check_write_access(user, data.get('regionId'))

    try:
        report = await create_report_with_links(backend, data, workers, equipment)
    except WriteError as exc:
        raise_for_write(exc, "Report", "Report references an unknown region, worker or equipment")

    logger.info(f"Created report {report['id']} for {data.get('date')}")
    return report


add_crud_routes(
    router, 'reports', None, ReportUpdate,
    label="Report",
    conflict_message="Report references an unknown region",
    delete_conflict_message="Report could not be deleted",
    owner_field='engineerId',
    include_get=False,
)
