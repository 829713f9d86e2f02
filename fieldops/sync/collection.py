"""Realtime mirror of one backend collection with CRUD helpers."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fieldops.backend.base import Backend, ChangeEvent, Query, Subscription
from fieldops.exceptions import BackendError, FetchError, WriteError
from fieldops.sync.case import to_application, to_snake, to_storage

logger = logging.getLogger('sync')


class RealtimeCollection:
    """Keeps an in-memory list of a collection's rows current.

    The mirror is loaded with ``fetch_all()`` and reloaded in full on every
    change notification for the collection, whichever row or client caused
    it. ``add``/``update``/``remove`` never touch the mirror themselves; the
    notification they cause triggers the reload.

    Records in the mirror use application (camel-case) field names.

    Usage:
        async with RealtimeCollection(backend, 'workers', filter={'regionId': region_id}) as workers:
            await workers.add({'fullName': 'Jane', 'personalId': 'P1', 'dailySalary': 50})
            print(workers.items)
    """

    def __init__(self, backend: Backend, collection: str,
                 filter: Optional[Dict[str, Any]] = None,
                 events: Optional[Iterable[str]] = None,
                 order_by: Optional[Tuple[str, bool]] = None,
                 limit: Optional[int] = None):
        self.backend = backend
        self.collection = collection
        self.filter = self._check_filter(filter)
        self.events = events
        self.order_by = order_by
        self.limit = limit

        self.items: List[dict] = []
        self.error: Optional[FetchError] = None
        self.loading = False

        self._subscription: Optional[Subscription] = None
        self._request_id = 0

    @staticmethod
    def _check_filter(filter: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if filter and len(filter) > 1:
            raise ValueError("Only a single-field equality filter is supported")
        return dict(filter) if filter else None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    async def start(self, initial_fetch: bool = True):
        """Open the change subscription and load the mirror."""
        if self._subscription is None:
            self._subscription = self.backend.subscribe(self.collection, self._on_change, self.events)
            logger.info(f"Subscribed to {self.collection} changes")
        if initial_fetch:
            await self.refresh()

    async def stop(self):
        """Release the change subscription."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info(f"Unsubscribed from {self.collection} changes")

    async def __aenter__(self) -> 'RealtimeCollection':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    def _query(self) -> Query:
        query = Query(self.collection)
        if self.filter:
            (field, value), = self.filter.items()
            query.eq(to_snake(field), value)
        if self.order_by:
            field, descending = self.order_by
            query.order(to_snake(field), descending=descending)
        if self.limit is not None:
            query.limit(self.limit)
        return query

    async def fetch_all(self) -> List[dict]:
        """Reload the whole collection into the mirror.

        Raises ``FetchError`` when the read fails; the previous mirror is kept
        and the error is also stored on ``self.error``. A response that was
        overtaken by a later ``fetch_all()`` is discarded.
        """
        self._request_id += 1
        request_id = self._request_id
        self.loading = True

        try:
            rows = await self.backend.select(self._query())
        except Exception as exc:
            error = FetchError(f"Could not load {self.collection}", getattr(exc, 'code', 'unavailable'))
            logger.error(f"Error fetching {self.collection}: {exc}")
            if request_id == self._request_id:
                self.error = error
                self.loading = False
            raise error from exc

        if request_id != self._request_id:
            logger.debug(f"Discarding superseded {self.collection} fetch #{request_id}")
            return self.items

        self.items = to_application(rows)
        self.error = None
        self.loading = False
        return self.items

    refetch = fetch_all

    async def refresh(self) -> bool:
        """Reload the mirror, keeping a failure as local error state."""
        try:
            await self.fetch_all()
        except FetchError:
            return False
        return True

    async def set_filter(self, filter: Optional[Dict[str, Any]]):
        """Replace the equality filter and reload."""
        self.filter = self._check_filter(filter)
        await self.refresh()

    async def _on_change(self, event: ChangeEvent):
        logger.debug(f"Change on {event.collection}: {event.kind} {event.record_id}")
        await self.refresh()

    def get(self, record_id: str) -> Optional[dict]:
        """Look up a record in the mirror by primary key."""
        for item in self.items:
            if item.get('id') == record_id:
                return item
        return None

    def _storage_fields(self, record: dict) -> dict:
        try:
            return to_storage(record)
        except ValueError as exc:
            raise WriteError(f"Invalid {self.collection} record: {exc}", 'invalid_query') from exc

    async def add(self, record: dict) -> dict:
        """Insert a record and return it as stored."""
        try:
            row = await self.backend.insert(self.collection, self._storage_fields(record))
        except BackendError as exc:
            logger.warning(f"Error adding to {self.collection}: {exc.message}")
            raise WriteError(f"Could not add {self.collection} record", exc.code) from exc
        return to_application(row)

    async def update(self, record_id: str, changes: dict) -> dict:
        """Update a record by primary key and return it as stored."""
        try:
            row = await self.backend.update(self.collection, record_id, self._storage_fields(changes))
        except BackendError as exc:
            logger.warning(f"Error updating {self.collection} {record_id}: {exc.message}")
            raise WriteError(f"Could not update {self.collection} record", exc.code) from exc
        return to_application(row)

    async def remove(self, record_id: str) -> None:
        """Delete a record by primary key."""
        try:
            await self.backend.delete(self.collection, record_id)
        except BackendError as exc:
            logger.warning(f"Error deleting from {self.collection} {record_id}: {exc.message}")
            raise WriteError(f"Could not delete {self.collection} record", exc.code) from exc
