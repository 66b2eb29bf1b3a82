"""
Use case for getting the dashboard overview
"""
import asyncio

from ..analytics.windows import TimeWindow, WindowArg
from ..models.dashboard import (
    CommenterLeaderboards,
    DashboardOverview,
    PoetLeaderboards,
)
from ..services.dashboard_stats_service import DashboardStatsService

LEADERBOARD_WINDOWS = (
    TimeWindow.TODAY,
    TimeWindow.WEEK,
    TimeWindow.MONTH,
    TimeWindow.YEAR,
    TimeWindow.ALL,
)


class GetDashboardOverviewUseCase:
    """Use case for retrieving everything the dashboard page renders"""

    def __init__(self, stats_service: DashboardStatsService):
        self.stats_service = stats_service

    async def execute(self, window: WindowArg = TimeWindow.TODAY) -> DashboardOverview:
        """
        Get the dashboard overview

        Args:
            window: Window of the "top poems" panel

        Returns:
            Summary, count series, top poems and leaderboards for every window
        """
        stats = self.stats_service
        window = TimeWindow.parse(window)

        # Fetch all widgets in parallel; each one degrades on its own
        (
            summary,
            poems_per_hour_today,
            users_per_hour_today,
            poems_per_day_this_week,
            users_per_day_this_week,
            poems_per_day_this_month,
            users_per_day_this_month,
            poems_per_month,
            users_per_month,
            top_poems,
            top_poems_all_time,
            user_names,
            *leaderboards,
        ) = await asyncio.gather(
            stats.get_dashboard_summary(),
            stats.get_poems_per_hour_today(),
            stats.get_users_per_hour_today(),
            stats.get_poems_per_day_this_week(),
            stats.get_users_per_day_this_week(),
            stats.get_poems_per_day_this_month(),
            stats.get_users_per_day_this_month(),
            stats.get_poems_per_month(),
            stats.get_users_per_month(),
            stats.get_top_poems_by_comments(window),
            stats.get_top_poems_by_comments_all_time(),
            stats.get_user_names_map(),
            *(stats.get_most_commented_users(w) for w in LEADERBOARD_WINDOWS),
            *(stats.get_most_active_poets(w) for w in LEADERBOARD_WINDOWS),
        )

        commenters = leaderboards[:len(LEADERBOARD_WINDOWS)]
        poets = leaderboards[len(LEADERBOARD_WINDOWS):]

        return DashboardOverview(
            summary=summary,
            poems_per_hour_today=poems_per_hour_today,
            users_per_hour_today=users_per_hour_today,
            poems_per_day_this_week=poems_per_day_this_week,
            users_per_day_this_week=users_per_day_this_week,
            poems_per_day_this_month=poems_per_day_this_month,
            users_per_day_this_month=users_per_day_this_month,
            poems_per_month=poems_per_month,
            users_per_month=users_per_month,
            top_poems=top_poems,
            top_poems_all_time=top_poems_all_time,
            most_commented_users=CommenterLeaderboards(
                **{w.value: rows for w, rows in zip(LEADERBOARD_WINDOWS, commenters)}
            ),
            most_active_poets=PoetLeaderboards(
                **{w.value: rows for w, rows in zip(LEADERBOARD_WINDOWS, poets)}
            ),
            user_names=user_names,
        )
