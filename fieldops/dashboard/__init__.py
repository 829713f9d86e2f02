"""Dashboard aggregation and time-window resolution."""
from fieldops.dashboard.aggregator import (
    AdminDashboard, EngineerDashboard,
    fuel_by_type, incidents_by_type, count_operators, total_fuel,
)
from fieldops.dashboard.dates import TimeWindow, resolve_time_window, format_for_query

__all__ = [
    'AdminDashboard', 'EngineerDashboard',
    'fuel_by_type', 'incidents_by_type', 'count_operators', 'total_fuel',
    'TimeWindow', 'resolve_time_window', 'format_for_query',
]
