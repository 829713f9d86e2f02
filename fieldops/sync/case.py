"""Field-name conversion between the storage and application conventions.

Storage rows use underscore-separated lower-case names (``license_plate``),
application records use camel-case (``licensePlate``). Conversion is
recursive over nested dicts and lists and keeps key order.
"""
import re
from typing import Any, Callable

_UNDERSCORE_LETTER = re.compile(r'_([a-z])')
_UPPER = re.compile(r'([A-Z])')


def to_camel(name: str) -> str:
    """``daily_salary`` -> ``dailySalary``."""
    return _UNDERSCORE_LETTER.sub(lambda match: match.group(1).upper(), name)


def to_snake(name: str) -> str:
    """``dailySalary`` -> ``daily_salary``."""
    return _UPPER.sub(r'_\1', name).lower()


def _convert(value: Any, rename: Callable[[str], str]) -> Any:
    if isinstance(value, list):
        return [_convert(item, rename) for item in value]
    if not isinstance(value, dict):
        return value

    converted = {}
    for key, item in value.items():
        new_key = rename(key) if isinstance(key, str) else key
        if new_key in converted:
            raise ValueError(f"Field {key!r} collides with another field on {new_key!r}")
        converted[new_key] = _convert(item, rename)
    return converted


def to_application(value: Any) -> Any:
    """Convert a storage row (or list of rows) to application field names."""
    return _convert(value, to_camel)


def to_storage(value: Any) -> Any:
    """Convert an application record (or list of records) to storage field names."""
    return _convert(value, to_snake)
