"""
Dashboard statistics for admins and engineers.

Reads reports, incidents, workers and equipment under a time window and
region filter and folds them into counts, sums and groupings. A failed
read never reaches the caller: the dashboard degrades to zeroed stats.
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from fieldops.backend.base import Backend, Query
from fieldops.config import settings
from fieldops.dashboard.dates import TimeWindow, format_for_query, resolve_time_window
from fieldops.exceptions import AggregationError
from fieldops.models.dashboard import (
    AdminDashboardStats, DashboardFilter, EngineerDashboardStats,
    FuelBucket, IncidentTypeCount,
)
from fieldops.services.access import RegionScope, build_region_scope
from fieldops.sync.case import to_application

logger = logging.getLogger('dashboard')

UNKNOWN = 'Unknown'


def _number(value) -> float:
    """Missing amounts count as zero."""
    return float(value) if value else 0.0


def total_fuel(reports: Iterable[dict]) -> float:
    return sum(_number(report.get('totalFuel')) for report in reports)


def count_operators(equipment: Iterable[dict]) -> int:
    return len({item['operatorId'] for item in equipment if item.get('operatorId')})


def fuel_by_type(usages: Iterable[dict], equipment_by_id: Dict[str, dict]) -> List[FuelBucket]:
    """Sum fuel amounts per fuel type of the equipment that consumed them.

    Usage rows whose equipment or fuel type is unknown go to ``Unknown``.
    """
    buckets: Dict[str, float] = {}
    for usage in usages:
        equipment = equipment_by_id.get(usage.get('equipmentId')) or {}
        fuel_type = equipment.get('fuelType') or UNKNOWN
        buckets[fuel_type] = buckets.get(fuel_type, 0.0) + _number(usage.get('fuelAmount'))
    return [FuelBucket(type=fuel_type, amount=amount) for fuel_type, amount in buckets.items()]


def incidents_by_type(incidents: Iterable[dict]) -> List[IncidentTypeCount]:
    counts: Dict[str, int] = {}
    for incident in incidents:
        incident_type = incident.get('type') or UNKNOWN
        counts[incident_type] = counts.get(incident_type, 0) + 1
    return [IncidentTypeCount(type=incident_type, count=count) for incident_type, count in counts.items()]


class DashboardAggregator:
    """Reads shared by both dashboard variants."""

    def __init__(self, backend: Backend, recent_limit: Optional[int] = None):
        self.backend = backend
        self.recent_limit = settings.RECENT_LIMIT if recent_limit is None else recent_limit

    async def _read(self, query: Query) -> List[dict]:
        try:
            rows = await self.backend.select(query)
        except Exception as exc:
            raise AggregationError(f"Could not read {query.collection}: {exc}", getattr(exc, 'code', None)) from exc
        return to_application(rows)

    @staticmethod
    def _dated(collection: str, scope: RegionScope, window: Optional[TimeWindow],
               engineer_id: Optional[str] = None) -> Query:
        query = scope.apply(Query(collection))
        if engineer_id:
            query.eq('engineer_id', engineer_id)
        if window is not None:
            start, end = format_for_query(window)
            query.gte('date', start).lte('date', end)
        return query.order('date', descending=True)

    async def _by_ids(self, collection: str, ids: Iterable[str]) -> List[dict]:
        ids = sorted({record_id for record_id in ids if record_id})
        if not ids:
            return []
        return await self._read(Query(collection).in_('id', ids))

    async def _links(self, collection: str, report_ids: List[str]) -> List[dict]:
        if not report_ids:
            return []
        return await self._read(Query(collection).in_('report_id', report_ids))

    async def _fuel_by_type(self, reports: List[dict]) -> List[FuelBucket]:
        usages = await self._links('report_equipment', [report['id'] for report in reports])
        equipment = await self._by_ids('equipment', (usage.get('equipmentId') for usage in usages))
        return fuel_by_type(usages, {item['id']: item for item in equipment})

    @staticmethod
    def _window(filter: DashboardFilter, now: Optional[datetime]) -> Optional[TimeWindow]:
        return resolve_time_window(filter.time_frame, (filter.date_from, filter.date_to), now=now)


class AdminDashboard(DashboardAggregator):
    """Organisation-wide stats, optionally narrowed to a region or engineer."""

    async def compute_stats(self, filter: DashboardFilter,
                            now: Optional[datetime] = None) -> AdminDashboardStats:
        scope = RegionScope.for_region(filter.region_id)
        window = self._window(filter, now)
        try:
            return await self._collect(filter, scope, window)
        except AggregationError as exc:
            logger.error(f"Error computing admin dashboard stats: {exc.message}")
            return AdminDashboardStats()

    async def _collect(self, filter: DashboardFilter, scope: RegionScope,
                       window: Optional[TimeWindow]) -> AdminDashboardStats:
        reports = await self._read(self._dated('reports', scope, window, filter.engineer_id))
        incidents = await self._read(self._dated('incidents', scope, window, filter.engineer_id))
        workers = await self._read(scope.apply(Query('workers')))
        equipment = await self._read(scope.apply(Query('equipment')))
        regions = await self._read(Query('regions').order('name'))

        return AdminDashboardStats(
            worker_count=len(workers),
            equipment_count=len(equipment),
            operator_count=count_operators(equipment),
            report_count=len(reports),
            incident_count=len(incidents),
            total_fuel=total_fuel(reports),
            fuel_by_type=await self._fuel_by_type(reports),
            incidents_by_type=incidents_by_type(incidents),
            recent_reports=reports[:self.recent_limit],
            recent_incidents=incidents[:self.recent_limit],
            regions=regions,
        )


class EngineerDashboard(DashboardAggregator):
    """Stats over one engineer's own reports and incidents."""

    async def compute_stats(self, filter: DashboardFilter, user: dict,
                            now: Optional[datetime] = None) -> EngineerDashboardStats:
        # Raises AccessDenied for a region the engineer is not assigned to
        scope = build_region_scope(user, filter.region_id)
        window = self._window(filter, now)
        try:
            return await self._collect(user['id'], scope, window)
        except AggregationError as exc:
            logger.error(f"Error computing engineer dashboard stats for {user.get('id')}: {exc.message}")
            return EngineerDashboardStats()

    async def _collect(self, engineer_id: str, scope: RegionScope,
                       window: Optional[TimeWindow]) -> EngineerDashboardStats:
        reports = await self._read(self._dated('reports', scope, window, engineer_id))
        incidents = await self._read(self._dated('incidents', scope, window, engineer_id))
        workers = await self._read(scope.apply(Query('workers')))
        equipment = await self._read(scope.apply(Query('equipment')))

        recent_reports = reports[:self.recent_limit]
        recent_ids = [report['id'] for report in recent_reports]
        worker_links = await self._links('report_workers', recent_ids)
        equipment_links = await self._links('report_equipment', recent_ids)
        workers_used = await self._by_ids('workers', (link.get('workerId') for link in worker_links))
        equipment_used = await self._by_ids('equipment', (link.get('equipmentId') for link in equipment_links))

        return EngineerDashboardStats(
            worker_count=len(workers),
            equipment_count=len(equipment),
            operator_count=count_operators(equipment),
            report_count=len(reports),
            incident_count=len(incidents),
            total_fuel=total_fuel(reports),
            fuel_by_type=await self._fuel_by_type(reports),
            incidents_by_type=incidents_by_type(incidents),
            recent_reports=recent_reports,
            recent_incidents=incidents[:self.recent_limit],
            workers_used=workers_used,
            equipment_used=equipment_used,
        )
