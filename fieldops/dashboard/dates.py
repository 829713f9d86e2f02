"""Time-window resolution for dashboard filters.

Calendar frames (day, week, month) are aligned to local midnight; weeks
start on ``settings.WEEK_START`` (0 = Monday). ``year`` is a rolling window
ending now, not the calendar year. ``all``, and ``custom`` without both
bounds, resolve to ``None`` meaning no date filtering.
"""
import calendar
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional, Tuple, Union

from fieldops.config import settings

TIME_FRAMES = ('day', 'week', 'month', 'year', 'all', 'custom', '7days', '30days', '90days')

_ROLLING_DAYS = {'7days': 7, '30days': 30, '90days': 90}

DateLike = Union[date, datetime]


class TimeWindow(NamedTuple):
    start: datetime
    end: datetime


def start_of_day(value: DateLike) -> datetime:
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: DateLike) -> datetime:
    """Last millisecond of the day, e.g. ``23:59:59.999``."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def _months_back(value: datetime, months: int) -> datetime:
    month_index = value.year * 12 + value.month - 1 - months
    year, month = divmod(month_index, 12)
    day = min(value.day, calendar.monthrange(year, month + 1)[1])
    return value.replace(year=year, month=month + 1, day=day)


def resolve_time_window(time_frame: str,
                        date_range: Optional[Tuple[Optional[DateLike], Optional[DateLike]]] = None,
                        now: Optional[datetime] = None,
                        week_start: Optional[int] = None) -> Optional[TimeWindow]:
    """Turn a time-frame selector into a ``[start, end]`` window, or ``None`` for unbounded."""
    if time_frame not in TIME_FRAMES:
        raise ValueError(f"Unknown time frame: {time_frame}")

    now = now or datetime.now()
    if week_start is None:
        week_start = settings.WEEK_START

    if time_frame == 'day':
        return TimeWindow(start_of_day(now), end_of_day(now))

    if time_frame == 'week':
        start = start_of_day(now - timedelta(days=(now.weekday() - week_start) % 7))
        return TimeWindow(start, end_of_day(start + timedelta(days=6)))

    if time_frame == 'month':
        last_day = calendar.monthrange(now.year, now.month)[1]
        return TimeWindow(start_of_day(now.replace(day=1)), end_of_day(now.replace(day=last_day)))

    if time_frame == 'year':
        return TimeWindow(_months_back(now, 12), now)

    if time_frame in _ROLLING_DAYS:
        start = start_of_day(now - timedelta(days=_ROLLING_DAYS[time_frame] - 1))
        return TimeWindow(start, end_of_day(now))

    if time_frame == 'custom' and date_range:
        start, end = date_range
        if start is not None and end is not None:
            start = start if isinstance(start, datetime) else start_of_day(start)
            end = end if isinstance(end, datetime) else end_of_day(end)
            return TimeWindow(start, end)

    # 'all', or 'custom' without a complete range
    return None


def format_for_query(window: TimeWindow) -> Tuple[str, str]:
    """Render window bounds for comparison against stored ISO date strings.

    A midnight start is rendered as a bare date so that date-only values on
    that day still compare as inside the window.
    """
    if window.start.time() == time.min:
        start = window.start.date().isoformat()
    else:
        start = window.start.isoformat(timespec='milliseconds')
    return start, window.end.isoformat(timespec='milliseconds')
