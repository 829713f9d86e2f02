"""Backend collaborator: query, mutation and change-notification interfaces."""
from fieldops.backend.base import (
    Backend, ChangeEvent, ChangeFeed, Query, Subscription,
    INSERT, UPDATE, DELETE, ALL_EVENTS,
)
from fieldops.backend.sqlite import SQLiteBackend

__all__ = [
    'Backend', 'ChangeEvent', 'ChangeFeed', 'Query', 'Subscription',
    'INSERT', 'UPDATE', 'DELETE', 'ALL_EVENTS',
    'SQLiteBackend',
]
