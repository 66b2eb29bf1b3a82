"""
Temporal Normalizer

Turns the timestamp shapes found in legacy documents into aware datetimes.
Anything that cannot be read as a calendar instant becomes None; callers
exclude None from every time-based aggregation.
"""
import math
from datetime import date, datetime, time, timezone, tzinfo
from enum import Enum
from functools import lru_cache
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

# Method names of objects that know how to turn themselves into a datetime
# (Firestore-style `toDate`, protobuf `ToDatetime`, plain `to_datetime`).
CONVERSION_METHODS = ("to_datetime", "ToDatetime", "toDate")

# Free-form parses fill missing fields from a default; two different
# defaults expose strings that lack a year, month or day.
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


class RawTimestampKind(str, Enum):
    """Closed set of raw timestamp shapes"""
    CONVERTIBLE = "convertible"
    NATIVE = "native"
    TEXT = "text"
    NUMERIC = "numeric"
    OTHER = "other"


def _conversion_method(raw: Any):
    for name in CONVERSION_METHODS:
        method = getattr(raw, name, None)
        if callable(method):
            return method
    return None


def classify(raw: Any) -> RawTimestampKind:
    """Decide which shape a raw timestamp value has."""
    if isinstance(raw, (datetime, date)):
        return RawTimestampKind.NATIVE
    if isinstance(raw, str):
        return RawTimestampKind.TEXT
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return RawTimestampKind.NUMERIC
    if raw is not None and _conversion_method(raw) is not None:
        return RawTimestampKind.CONVERTIBLE
    return RawTimestampKind.OTHER


@lru_cache(maxsize=32)
def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Map a configured zone name to tzinfo; None means the host's local zone."""
    if not name:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def localize(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express a datetime in the engine zone; naive values are taken as already local to it."""
    if value.tzinfo is None:
        if tz is None:
            return value.astimezone()
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def _from_native(raw: Any, tz: Optional[tzinfo]) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return localize(raw, tz)
    if isinstance(raw, date):
        return localize(datetime.combine(raw, time.min), tz)
    return None


def _from_text(raw: str, tz: Optional[tzinfo]) -> Optional[datetime]:
    text = raw.strip()
    if not text:
        return None
    try:
        return localize(datetime.fromisoformat(text), tz)
    except ValueError:
        pass
    try:
        first, second = (date_parser.parse(text, default=d) for d in _PARSE_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first != second:
        return None
    return localize(first, tz)


def _from_epoch_millis(raw: float, tz: Optional[tzinfo]) -> Optional[datetime]:
    if not math.isfinite(raw):
        return None
    try:
        return datetime.fromtimestamp(raw / 1000, tz=timezone.utc).astimezone(tz)
    except (ValueError, OverflowError, OSError):
        return None


def _from_convertible(raw: Any, tz: Optional[tzinfo]) -> Optional[datetime]:
    converted = _conversion_method(raw)()
    return _from_native(converted, tz)


_HANDLERS = {
    RawTimestampKind.NATIVE: _from_native,
    RawTimestampKind.TEXT: _from_text,
    RawTimestampKind.NUMERIC: _from_epoch_millis,
    RawTimestampKind.CONVERTIBLE: _from_convertible,
}


def normalize(raw: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Convert a raw timestamp into an aware datetime in `tz`.

    Args:
        raw: Timestamp-like value read from a document
        tz: Engine time zone (None = host local zone)

    Returns:
        The instant, or None when the value is missing or not a valid date
    """
    handler = _HANDLERS.get(classify(raw))
    if handler is None:
        return None
    try:
        return handler(raw, tz)
    except Exception:
        # A conversion method or exotic tzinfo misbehaved; treat as unreadable.
        return None
