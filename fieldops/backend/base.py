"""Interfaces every backend implementation provides."""
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger('backend')

INSERT = 'insert'
UPDATE = 'update'
DELETE = 'delete'
ALL_EVENTS = frozenset({INSERT, UPDATE, DELETE})


@dataclass(frozen=True)
class ChangeEvent:
    """A row in ``collection`` was inserted, updated or deleted."""
    kind: str
    collection: str
    record_id: Optional[str] = None


Listener = Callable[[ChangeEvent], Awaitable[None]]


class Query:
    """Read of one collection with equality/range predicates, ordering and limit.

    Usage:
        Query('reports').eq('region_id', region_id).gte('date', '2024-06-01').order('date', descending=True)
    """

    def __init__(self, collection: str):
        self.collection = collection
        self.filters: List[Tuple[str, str, Any]] = []
        self.order_by: Optional[Tuple[str, bool]] = None
        self.limit_count: Optional[int] = None

    def eq(self, column: str, value: Any) -> 'Query':
        self.filters.append((column, 'eq', value))
        return self

    def gte(self, column: str, value: Any) -> 'Query':
        self.filters.append((column, 'gte', value))
        return self

    def lte(self, column: str, value: Any) -> 'Query':
        self.filters.append((column, 'lte', value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> 'Query':
        self.filters.append((column, 'in', list(values)))
        return self

    def order(self, column: str, descending: bool = False) -> 'Query':
        self.order_by = (column, descending)
        return self

    def limit(self, count: int) -> 'Query':
        self.limit_count = count
        return self

    def __repr__(self) -> str:
        return f"Query({self.collection!r}, filters={self.filters!r}, order_by={self.order_by!r})"


class Subscription:
    """Handle for one listener registered on a collection's change feed."""

    def __init__(self, feed: 'ChangeFeed', collection: str, listener: Listener,
                 events: Optional[Iterable[str]] = None):
        self.feed = feed
        self.collection = collection
        self.listener = listener
        self.events = frozenset(events) if events else ALL_EVENTS
        self.active = True

    def wants(self, event: ChangeEvent) -> bool:
        return self.active and event.kind in self.events

    def unsubscribe(self):
        """Release the subscription. Safe to call more than once."""
        if self.active:
            self.active = False
            self.feed.remove(self)


class ChangeFeed:
    """Per-collection fan-out of change events to async listeners.

    Events are published after the write is committed. A failing listener
    is logged and does not affect other listeners or the write itself.
    """

    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = defaultdict(list)

    def subscribe(self, collection: str, listener: Listener,
                  events: Optional[Iterable[str]] = None) -> Subscription:
        subscription = Subscription(self, collection, listener, events)
        self._subscriptions[collection].append(subscription)
        logger.debug(f"Listener subscribed to {collection} ({len(self._subscriptions[collection])} active)")
        return subscription

    def remove(self, subscription: Subscription):
        listeners = self._subscriptions.get(subscription.collection, [])
        if subscription in listeners:
            listeners.remove(subscription)

    def listener_count(self, collection: str) -> int:
        return len(self._subscriptions.get(collection, []))

    async def publish(self, event: ChangeEvent):
        for subscription in list(self._subscriptions.get(event.collection, [])):
            if not subscription.wants(event):
                continue
            try:
                await subscription.listener(event)
            except Exception:
                logger.exception(f"Change listener for {event.collection} failed on {event.kind}")


class Backend:
    """Hosted data backend as seen by the sync layer and the dashboard.

    Rows cross this boundary with storage-convention (underscore) field names.
    Implementations raise ``BackendError`` on failure.
    """

    async def select(self, query: Query) -> List[dict]:
        raise NotImplementedError

    async def insert(self, collection: str, row: dict) -> dict:
        raise NotImplementedError

    async def update(self, collection: str, record_id: str, changes: dict) -> dict:
        raise NotImplementedError

    async def delete(self, collection: str, record_id: str) -> None:
        raise NotImplementedError

    def subscribe(self, collection: str, listener: Listener,
                  events: Optional[Iterable[str]] = None) -> Subscription:
        raise NotImplementedError

    async def rpc(self, name: str, params: dict) -> Any:
        raise NotImplementedError
