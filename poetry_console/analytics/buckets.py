"""
Bucketing Aggregators

Count instants into fixed-cardinality buckets. Every bucket is emitted,
zero or not, so charts always receive a full axis. The year series is the
exception: its buckets are the distinct years present.
"""
import calendar
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.dashboard import SeriesPoint
from ..ports.document_store_port import Collection, Document
from .temporal import normalize
from .windows import in_week, same_day, same_month, sunday_weekday

HOURS_PER_DAY = 24
MONTHS_PER_YEAR = 12
WEEKDAY_LABELS = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"
)

Instants = Iterable[Optional[datetime]]


@dataclass(frozen=True)
class EntitySource:
    """Which collection to scan and which field holds its timestamp"""
    collection: Collection
    timestamp_field: str
    label: str


POEMS_BY_DATE_POSTED = EntitySource(Collection.POEMS, "datePosted", "poems")
USERS_BY_CREATED_AT = EntitySource(Collection.USERS, "createdAt", "users")


def extract_instants(documents: Iterable[Document], field: str, tz=None) -> List[Optional[datetime]]:
    """Normalize one timestamp field of every document (None where unreadable)."""
    return [normalize(document.get(field), tz) for document in documents]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _valid(instants: Instants) -> Iterable[datetime]:
    return (instant for instant in instants if instant is not None)


def per_hour_today(instants: Instants, now: datetime) -> List[SeriesPoint]:
    """24 buckets for the hours of the current day."""
    counts = Counter(i.hour for i in _valid(instants) if same_day(i, now))
    return [
        SeriesPoint(index=hour, label=f"{hour}:00", value=counts[hour])
        for hour in range(HOURS_PER_DAY)
    ]


def per_day_this_week(instants: Instants, now: datetime) -> List[SeriesPoint]:
    """7 buckets, Sunday first, for the Sunday-to-Saturday week containing `now`."""
    counts = Counter(sunday_weekday(i) for i in _valid(instants) if in_week(i, now))
    return [
        SeriesPoint(index=day, label=label, value=counts[day])
        for day, label in enumerate(WEEKDAY_LABELS)
    ]


def per_day_this_month(instants: Instants, now: datetime) -> List[SeriesPoint]:
    """One bucket per calendar day of the current month, 1-based."""
    counts = Counter(i.day for i in _valid(instants) if same_month(i, now))
    return [
        SeriesPoint(index=day, label=str(day), value=counts[day])
        for day in range(1, days_in_month(now.year, now.month) + 1)
    ]


def per_month(instants: Instants, year: int) -> List[SeriesPoint]:
    """12 buckets for the months of `year`, 1-based."""
    counts = Counter(i.month for i in _valid(instants) if i.year == year)
    return [
        SeriesPoint(index=month, label=str(month), value=counts[month])
        for month in range(1, MONTHS_PER_YEAR + 1)
    ]


def per_year(instants: Instants) -> List[SeriesPoint]:
    """One bucket per distinct year present, ascending."""
    counts = Counter(i.year for i in _valid(instants))
    return [
        SeriesPoint(index=year, label=str(year), value=counts[year])
        for year in sorted(counts)
    ]


class SeriesGranularity(str, Enum):
    """Shape of a count series"""
    HOUR = "hour"        # hours of today
    WEEK = "week"        # weekdays of this week
    MONTH = "month"      # days of this month
    YEAR = "year"        # months of a given year
    YEARS = "years"      # every year present


def build_series(
    granularity: SeriesGranularity,
    instants: Instants,
    now: datetime,
    year: Optional[int] = None
) -> List[SeriesPoint]:
    """Dispatch to the aggregator for `granularity`."""
    granularity = SeriesGranularity(granularity)
    if granularity is SeriesGranularity.HOUR:
        return per_hour_today(instants, now)
    if granularity is SeriesGranularity.WEEK:
        return per_day_this_week(instants, now)
    if granularity is SeriesGranularity.MONTH:
        return per_day_this_month(instants, now)
    if granularity is SeriesGranularity.YEAR:
        return per_month(instants, year if year is not None else now.year)
    return per_year(instants)


def empty_series(
    granularity: SeriesGranularity,
    now: datetime,
    year: Optional[int] = None
) -> List[SeriesPoint]:
    """The all-zero series of a given shape."""
    return build_series(granularity, [], now, year)
