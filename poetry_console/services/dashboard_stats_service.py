"""
Dashboard Stats Service - Analytics queries for the admin dashboard

Every query re-reads the collections it needs (there is no cache), issues
independent reads concurrently, and never raises: a failure is logged and
the query's empty result is returned instead.
"""
import asyncio
import time
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from ..analytics.buckets import (
    EntitySource,
    POEMS_BY_DATE_POSTED,
    USERS_BY_CREATED_AT,
    SeriesGranularity,
    build_series,
    empty_series,
    extract_instants,
)
from ..analytics.leaderboards import build_user_names, leaderboard, top_poems_by_comments
from ..analytics.temporal import resolve_timezone
from ..analytics.windows import TimeWindow, WindowArg, resolve_now, same_month, window_predicate
from ..core.logging_framework import LogCategory, get_logger
from ..core.settings import AnalyticsSettings
from ..models.dashboard import (
    CommenterEntry,
    DashboardSummary,
    PoetEntry,
    SeriesPoint,
    TopPoem,
)
from ..ports.document_store_port import Collection, DocumentStorePort


def fail_soft(operation: str, default: Callable[..., Any]):
    """
    Turn any failure of a query into its safe default.

    `default` is called with the same arguments as the query.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(self, *args, **kwargs)
            except Exception as e:
                self._logger.error(
                    f"Error computing {operation}: {e}",
                    category=LogCategory.ANALYTICS,
                    exc_info=True
                )
                return default(self, *args, **kwargs)
            self._logger.log_performance(operation, (time.perf_counter() - start) * 1000)
            return result
        return wrapper
    return decorator


class DashboardStatsService:
    """
    Service answering the dashboard's named analytics queries

    Provides:
    - Summary counters (totals, this month, this year)
    - Poem / user count series per hour, weekday, day, month and year
    - Top poems by comment count
    - Most commented users and most active poets
    - User id to display name table
    """

    def __init__(
        self,
        store: DocumentStorePort,
        *,
        settings: Optional[AnalyticsSettings] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self._store = store
        self._settings = settings or AnalyticsSettings()
        self._tz = resolve_timezone(self._settings.timezone)
        self._clock = clock
        self._logger = get_logger("services.dashboard_stats")

    def now(self) -> datetime:
        """Reference instant for window and bucket computations"""
        return resolve_now(self._clock() if self._clock else None, self._tz)

    def _default_now(self) -> datetime:
        """Reference instant for fallback results; a failing clock yields the wall clock."""
        try:
            return self.now()
        except Exception:
            return resolve_now(None, self._tz)

    def _limit(self, limit: Optional[int]) -> int:
        return self._settings.default_limit if limit is None else limit

    # ==================== Summary ====================

    @fail_soft("dashboard_summary", lambda self: DashboardSummary())
    async def get_dashboard_summary(self) -> DashboardSummary:
        """
        Get headline counters

        Returns:
            Totals of poems, users and pending requests plus poems this
            month / this year and users joined this year
        """
        total_poems, total_users, pending_requests, poems, users = await asyncio.gather(
            self._store.count(Collection.POEMS),
            self._store.count(Collection.USERS),
            self._store.count(Collection.POEM_REQUESTS),
            self._store.list_all(Collection.POEMS),
            self._store.list_all(Collection.USERS),
        )

        now = self.now()
        poem_instants = [
            i for i in extract_instants(poems, POEMS_BY_DATE_POSTED.timestamp_field, self._tz)
            if i is not None
        ]
        user_instants = [
            i for i in extract_instants(users, USERS_BY_CREATED_AT.timestamp_field, self._tz)
            if i is not None
        ]

        return DashboardSummary(
            total_poems=total_poems,
            total_users=total_users,
            pending_requests=pending_requests,
            poems_this_month=sum(1 for i in poem_instants if same_month(i, now)),
            poems_this_year=sum(1 for i in poem_instants if i.year == now.year),
            users_this_year=sum(1 for i in user_instants if i.year == now.year),
        )

    # ==================== Series ====================

    @fail_soft(
        "series",
        lambda self, source, granularity, year=None: empty_series(
            granularity, self._default_now(), year
        )
    )
    async def get_series(
        self,
        source: EntitySource,
        granularity: SeriesGranularity,
        year: Optional[int] = None
    ) -> List[SeriesPoint]:
        """
        Count one entity source into buckets

        Args:
            source: Collection and timestamp field to scan
            granularity: Bucket shape
            year: Year whose months are bucketed (YEAR granularity only)
        """
        documents = await self._store.list_all(source.collection)
        instants = extract_instants(documents, source.timestamp_field, self._tz)
        return build_series(granularity, instants, self.now(), year)

    async def get_poems_per_hour_today(self) -> List[SeriesPoint]:
        return await self.get_series(POEMS_BY_DATE_POSTED, SeriesGranularity.HOUR)

    async def get_users_per_hour_today(self) -> List[SeriesPoint]:
        return await self.get_series(USERS_BY_CREATED_AT, SeriesGranularity.HOUR)

    async def get_poems_per_day_this_week(self) -> List[SeriesPoint]:
        return await self.get_series(POEMS_BY_DATE_POSTED, SeriesGranularity.WEEK)

    async def get_users_per_day_this_week(self) -> List[SeriesPoint]:
        return await self.get_series(USERS_BY_CREATED_AT, SeriesGranularity.WEEK)

    async def get_poems_per_day_this_month(self) -> List[SeriesPoint]:
        return await self.get_series(POEMS_BY_DATE_POSTED, SeriesGranularity.MONTH)

    async def get_users_per_day_this_month(self) -> List[SeriesPoint]:
        return await self.get_series(USERS_BY_CREATED_AT, SeriesGranularity.MONTH)

    async def get_poems_per_month(self, year: Optional[int] = None) -> List[SeriesPoint]:
        return await self.get_series(POEMS_BY_DATE_POSTED, SeriesGranularity.YEAR, year)

    async def get_users_per_month(self, year: Optional[int] = None) -> List[SeriesPoint]:
        return await self.get_series(USERS_BY_CREATED_AT, SeriesGranularity.YEAR, year)

    async def get_poems_per_year(self) -> List[SeriesPoint]:
        return await self.get_series(POEMS_BY_DATE_POSTED, SeriesGranularity.YEARS)

    async def get_users_per_year(self) -> List[SeriesPoint]:
        return await self.get_series(USERS_BY_CREATED_AT, SeriesGranularity.YEARS)

    # ==================== Top poems ====================

    @fail_soft("top_poems_by_comments", lambda self, *args, **kwargs: [])
    async def get_top_poems_by_comments(
        self,
        window: WindowArg = TimeWindow.TODAY,
        limit: Optional[int] = None
    ) -> List[TopPoem]:
        """
        Get poems with the most comments inside a window

        Args:
            window: today, week, month, year or all
            limit: Maximum number of poems (defaults to top_poems_limit)
        """
        poems, comments = await asyncio.gather(
            self._store.list_all(Collection.POEMS),
            self._store.list_all(Collection.COMMENTS),
        )
        predicate = window_predicate(window, self.now(), tz=self._tz)
        if limit is None:
            limit = self._settings.top_poems_limit
        return top_poems_by_comments(poems, comments, predicate, limit=limit, tz=self._tz)

    async def get_top_poems_by_comments_all_time(self, limit: Optional[int] = None) -> List[TopPoem]:
        return await self.get_top_poems_by_comments(TimeWindow.ALL, limit)

    # ==================== Leaderboards ====================

    @fail_soft("most_commented_users", lambda self, *args, **kwargs: [])
    async def get_most_commented_users(
        self,
        window: WindowArg = TimeWindow.TODAY,
        limit: Optional[int] = None
    ) -> List[CommenterEntry]:
        """
        Get the users who wrote the most comments inside a window

        Args:
            window: today, week, month, year or all
            limit: Maximum number of rows (defaults to default_limit)
        """
        comments, users = await asyncio.gather(
            self._store.list_all(Collection.COMMENTS),
            self._store.list_all(Collection.USERS),
        )
        rows = leaderboard(
            comments,
            build_user_names(users),
            window_predicate(window, self.now(), tz=self._tz),
            timestamp_field="timestamp",
            limit=self._limit(limit),
            tz=self._tz,
        )
        return [
            CommenterEntry(user_id=row.user_id, name=row.name, comment_count=row.count)
            for row in rows
        ]

    async def get_most_commented_users_all_time(self, limit: Optional[int] = None) -> List[CommenterEntry]:
        return await self.get_most_commented_users(TimeWindow.ALL, limit)

    @fail_soft("most_active_poets", lambda self, *args, **kwargs: [])
    async def get_most_active_poets(
        self,
        window: WindowArg = TimeWindow.TODAY,
        limit: Optional[int] = None
    ) -> List[PoetEntry]:
        """
        Get the authors who posted the most poems inside a window

        Args:
            window: today, week, month, year or all
            limit: Maximum number of rows (defaults to default_limit)
        """
        poems, users = await asyncio.gather(
            self._store.list_all(Collection.POEMS),
            self._store.list_all(Collection.USERS),
        )
        rows = leaderboard(
            poems,
            build_user_names(users),
            window_predicate(window, self.now(), tz=self._tz),
            timestamp_field=POEMS_BY_DATE_POSTED.timestamp_field,
            include_author=True,
            limit=self._limit(limit),
            tz=self._tz,
        )
        return [
            PoetEntry(user_id=row.user_id, name=row.name, poem_count=row.count)
            for row in rows
        ]

    async def get_most_active_poets_all_time(self, limit: Optional[int] = None) -> List[PoetEntry]:
        return await self.get_most_active_poets(TimeWindow.ALL, limit)

    # ==================== User names ====================

    @fail_soft("user_names_map", lambda self: {})
    async def get_user_names_map(self) -> Dict[str, str]:
        """Get the user key to display name table"""
        users = await self._store.list_all(Collection.USERS)
        return build_user_names(users)
