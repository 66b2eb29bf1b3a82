"""Business logic services"""

from .dashboard_stats_service import DashboardStatsService
from .moderation_service import ModerationService

__all__ = [
    "DashboardStatsService",
    "ModerationService",
]
