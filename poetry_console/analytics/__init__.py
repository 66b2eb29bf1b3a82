"""
Analytics engine: timestamp normalization, time windows, bucketed series
and leaderboards computed client-side over document snapshots.
"""
from .temporal import RawTimestampKind, classify, normalize, resolve_timezone
from .windows import TimeWindow, window_predicate, week_bounds
from .buckets import (
    EntitySource,
    POEMS_BY_DATE_POSTED,
    USERS_BY_CREATED_AT,
    SeriesGranularity,
    build_series,
    empty_series,
)
from .leaderboards import (
    LeaderboardRow,
    build_user_names,
    identity_key,
    leaderboard,
    top_poems_by_comments,
)

__all__ = [
    "RawTimestampKind",
    "classify",
    "normalize",
    "resolve_timezone",
    "TimeWindow",
    "window_predicate",
    "week_bounds",
    "EntitySource",
    "POEMS_BY_DATE_POSTED",
    "USERS_BY_CREATED_AT",
    "SeriesGranularity",
    "build_series",
    "empty_series",
    "LeaderboardRow",
    "build_user_names",
    "identity_key",
    "leaderboard",
    "top_poems_by_comments",
]
