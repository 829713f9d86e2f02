"""Realtime collection sync and field-name conversion."""
from fieldops.sync.case import to_application, to_storage, to_camel, to_snake
from fieldops.sync.collection import RealtimeCollection

__all__ = [
    'RealtimeCollection',
    'to_application', 'to_storage', 'to_camel', 'to_snake',
]
