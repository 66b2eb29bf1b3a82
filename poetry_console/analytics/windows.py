"""
Time windows relative to "now" and the predicates that test instants against them.
"""
import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from .temporal import localize

logger = logging.getLogger(__name__)

InstantPredicate = Callable[[datetime], bool]


class TimeWindow(str, Enum):
    """Named relative time range"""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union["TimeWindow", str, None]) -> "TimeWindow":
        """
        Parse a window name.

        "day" is accepted as a synonym of "today". Unknown or missing
        values fall back to ALL.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ALL
        name = str(value).strip().lower()
        if name == "day":
            return cls.TODAY
        try:
            return cls(name)
        except ValueError:
            logger.warning(f"Unknown time window {value!r}, using 'all'")
            return cls.ALL


WindowArg = Union[TimeWindow, str, None]


def sunday_weekday(moment: datetime) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return (moment.weekday() + 1) % 7


def week_days(now: datetime) -> Tuple[date, date]:
    """Calendar dates of the Sunday and the Saturday of the week containing `now`."""
    sunday = now.date() - timedelta(days=sunday_weekday(now))
    return sunday, sunday + timedelta(days=6)


def in_week(instant: datetime, now: datetime) -> bool:
    """Whether `instant` falls on a local date of the week containing `now`."""
    sunday, saturday = week_days(now)
    return sunday <= instant.date() <= saturday


def week_bounds(now: datetime, tz=None) -> Tuple[datetime, datetime]:
    """
    Sunday 00:00 through Saturday 23:59:59.999999 of the week containing `now`.

    Both bounds are wall-clock times in `tz` (default: the zone of `now`),
    so across a DST change each carries its own UTC offset.
    """
    sunday, saturday = week_days(now)
    zone = tz if tz is not None else now.tzinfo
    return (
        datetime.combine(sunday, time.min, tzinfo=zone),
        datetime.combine(saturday, time.max, tzinfo=zone),
    )


def same_day(a: datetime, b: datetime) -> bool:
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def same_month(a: datetime, b: datetime) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def window_predicate(
    window: WindowArg,
    now: datetime,
    *,
    tz=None
) -> InstantPredicate:
    """
    Build a predicate selecting instants inside `window` relative to `now`.

    Args:
        window: Window name or member
        now: Reference instant (aware, in the engine zone)
        tz: Engine zone; instants are compared in it

    Returns:
        Callable returning True for instants inside the window
    """
    window = TimeWindow.parse(window)

    def _local(instant: datetime) -> datetime:
        return instant.astimezone(tz) if instant.tzinfo is not None else instant

    if window is TimeWindow.TODAY:
        return lambda instant: same_day(_local(instant), now)

    if window is TimeWindow.WEEK:
        return lambda instant: in_week(_local(instant), now)

    if window is TimeWindow.MONTH:
        return lambda instant: same_month(_local(instant), now)

    if window is TimeWindow.YEAR:
        return lambda instant: _local(instant).year == now.year

    return lambda instant: True


def resolve_now(now: Optional[datetime], tz=None) -> datetime:
    """Current time in the engine zone unless a reference instant is given."""
    if now is None:
        now = datetime.now(tz)
    return localize(now, tz)
