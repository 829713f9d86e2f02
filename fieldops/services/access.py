"""Role-based region scoping.

Every caller that needs to restrict rows to the regions a user may see goes
through ``build_region_scope``.
"""
from typing import Iterable, List, NamedTuple, Optional

from fieldops.backend.base import Query
from fieldops.exceptions import AccessDenied

ADMIN = 'admin'
ENGINEER = 'engineer'


def is_admin(user: Optional[dict]) -> bool:
    return bool(user) and user.get('role') == ADMIN


def is_engineer(user: Optional[dict]) -> bool:
    return bool(user) and user.get('role') == ENGINEER


def assigned_regions(user: Optional[dict]) -> List[str]:
    """Regions an engineer is assigned to, falling back to their home region."""
    if not user:
        return []
    regions = list(user.get('assignedRegions') or [])
    if not regions and user.get('regionId'):
        regions = [user['regionId']]
    return regions


def has_region_access(user: Optional[dict], region_id: Optional[str]) -> bool:
    if not user or not region_id:
        return False
    if is_admin(user):
        return True
    return region_id in assigned_regions(user)


class RegionScope(NamedTuple):
    """Allowed region ids; ``None`` means unrestricted."""
    region_ids: Optional[List[str]] = None

    @classmethod
    def for_region(cls, region_id: Optional[str]) -> 'RegionScope':
        return cls([region_id] if region_id else None)

    @property
    def unrestricted(self) -> bool:
        return self.region_ids is None

    def allows(self, region_id: Optional[str]) -> bool:
        return self.unrestricted or region_id in self.region_ids

    def apply(self, query: Query, column: str = 'region_id') -> Query:
        if self.unrestricted:
            return query
        if len(self.region_ids) == 1:
            return query.eq(column, self.region_ids[0])
        return query.in_(column, self.region_ids)

    def filter_records(self, records: Iterable[dict], field: str = 'regionId') -> List[dict]:
        return [record for record in records if self.allows(record.get(field))]


def build_region_scope(user: Optional[dict], region_id: Optional[str] = None) -> RegionScope:
    """Region filter for ``user``, optionally narrowed to ``region_id``.

    Admins see everything or the requested region. Engineers see the
    requested region only if assigned to it, otherwise all their regions.
    """
    if is_admin(user):
        return RegionScope.for_region(region_id)

    if not is_engineer(user):
        raise AccessDenied("Unknown role", 'forbidden')

    if region_id:
        if not has_region_access(user, region_id):
            raise AccessDenied(f"No access to region {region_id}", 'forbidden')
        return RegionScope([region_id])

    return RegionScope(assigned_regions(user))
