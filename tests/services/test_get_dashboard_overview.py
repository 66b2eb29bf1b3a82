"""
Tests for the Dashboard Overview Use Case
"""
import pytest

from poetry_console.services.dashboard_stats_service import DashboardStatsService
from poetry_console.usecases.get_dashboard_overview import GetDashboardOverviewUseCase


class TestGetDashboardOverview:
    """Tests for GetDashboardOverviewUseCase.execute"""

    @pytest.mark.asyncio
    async def test_overview_matches_individual_queries(self, stats_service):
        overview = await GetDashboardOverviewUseCase(stats_service).execute("today")

        assert overview.summary == await stats_service.get_dashboard_summary()
        assert overview.poems_per_hour_today == await stats_service.get_poems_per_hour_today()
        assert overview.users_per_month == await stats_service.get_users_per_month()
        assert overview.top_poems == await stats_service.get_top_poems_by_comments("today")
        assert overview.most_commented_users.week == await stats_service.get_most_commented_users("week")
        assert overview.most_active_poets.all == await stats_service.get_most_active_poets_all_time()
        assert overview.user_names == await stats_service.get_user_names_map()

    @pytest.mark.asyncio
    async def test_window_only_changes_top_poems(self, stats_service):
        use_case = GetDashboardOverviewUseCase(stats_service)
        today = await use_case.execute("today")
        week = await use_case.execute("week")

        assert [p.slug for p in today.top_poems] == ["morning-light"]
        assert [p.slug for p in week.top_poems] == ["morning-light", "evening-tide"]
        assert today.top_poems_all_time == week.top_poems_all_time

    @pytest.mark.asyncio
    async def test_every_widget_degrades_independently(self, failing_store, analytics_settings, fixed_clock):
        service = DashboardStatsService(failing_store, settings=analytics_settings, clock=fixed_clock)
        overview = await GetDashboardOverviewUseCase(service).execute()

        assert overview.summary.total_poems == 0
        assert len(overview.poems_per_hour_today) == 24
        assert len(overview.users_per_day_this_week) == 7
        assert overview.top_poems == []
        assert overview.most_commented_users.today == []
        assert overview.user_names == {}
