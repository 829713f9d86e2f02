"""Error taxonomy shared by the backend, the sync layer and the dashboard."""
from typing import Optional


class BackendError(Exception):
    """A backend read or write failed.

    ``code`` is machine-readable: ``not_found``, ``foreign_key_violation``,
    ``unique_violation``, ``check_violation``, ``not_null_violation``,
    ``invalid_query`` or ``unavailable``.
    """

    def __init__(self, message: str, code: str = 'unavailable'):
        super().__init__(message)
        self.message = message
        self.code = code


class FieldOpsError(Exception):
    """Base class for errors raised by the application layer."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FetchError(FieldOpsError):
    """Reading a collection failed."""


class WriteError(FieldOpsError):
    """An insert, update or delete was rejected."""


class AggregationError(FieldOpsError):
    """A read needed for dashboard statistics failed."""


class AccessDenied(FieldOpsError):
    """The caller may not see the requested region."""
