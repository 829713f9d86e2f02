"""Report creation with linked workers and equipment as one atomic write."""
import logging
from typing import List, Optional

from fieldops.backend.base import Backend, Query
from fieldops.exceptions import BackendError, FetchError, WriteError
from fieldops.sync.case import to_application, to_storage

logger = logging.getLogger('reports_service')


async def create_report(backend: Backend, report: dict,
                        workers: Optional[List[dict]] = None,
                        equipment: Optional[List[dict]] = None) -> dict:
    """Insert ``report`` and its links; nothing is written if any part fails.

    Arguments use application field names; so does the returned report,
    which carries its ``workers`` and ``equipment`` links.
    """
    params = to_storage({
        'report': report,
        'workers': workers or [],
        'equipment': equipment or [],
    })
    try:
        created = await backend.rpc('create_report', params)
    except BackendError as exc:
        logger.warning(f"Error creating report: {exc.message}")
        raise WriteError("Could not create report", exc.code) from exc
    return to_application(created)


async def load_report_links(backend: Backend, report: dict) -> dict:
    """Return ``report`` with its worker and equipment links nested."""
    try:
        workers = await backend.select(Query('report_workers').eq('report_id', report['id']))
        equipment = await backend.select(Query('report_equipment').eq('report_id', report['id']))
    except BackendError as exc:
        logger.error(f"Error loading links for report {report['id']}: {exc.message}")
        raise FetchError("Could not load report details", exc.code) from exc
    return {**report, **to_application({'workers': workers, 'equipment': equipment})}
