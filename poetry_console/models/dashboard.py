"""
Dashboard analytics Pydantic models
"""
from typing import Dict, List

from pydantic import Field

from .base import CamelModel


class SeriesPoint(CamelModel):
    """One bucket of a count series"""
    index: int = Field(..., description="Bucket position: hour, weekday, day, month or year")
    label: str
    value: int = 0


class DashboardSummary(CamelModel):
    """Headline counters of the admin dashboard"""
    total_poems: int = 0
    total_users: int = 0
    pending_requests: int = 0
    poems_this_month: int = 0
    poems_this_year: int = 0
    users_this_year: int = 0


class TopPoem(CamelModel):
    """Poem ranked by comment count"""
    slug: str
    title: str = ""
    comment_count: int = 0


class CommenterEntry(CamelModel):
    """Most-commented-users leaderboard row"""
    user_id: str
    name: str
    comment_count: int = 0

    @property
    def count(self) -> int:
        return self.comment_count


class PoetEntry(CamelModel):
    """Most-active-poets leaderboard row"""
    user_id: str
    name: str
    poem_count: int = 0

    @property
    def count(self) -> int:
        return self.poem_count


class CommenterLeaderboards(CamelModel):
    """Most-commented-users leaderboard for every named window"""
    today: List[CommenterEntry] = Field(default_factory=list)
    week: List[CommenterEntry] = Field(default_factory=list)
    month: List[CommenterEntry] = Field(default_factory=list)
    year: List[CommenterEntry] = Field(default_factory=list)
    all: List[CommenterEntry] = Field(default_factory=list)


class PoetLeaderboards(CamelModel):
    """Most-active-poets leaderboard for every named window"""
    today: List[PoetEntry] = Field(default_factory=list)
    week: List[PoetEntry] = Field(default_factory=list)
    month: List[PoetEntry] = Field(default_factory=list)
    year: List[PoetEntry] = Field(default_factory=list)
    all: List[PoetEntry] = Field(default_factory=list)


class DashboardOverview(CamelModel):
    """Everything the dashboard overview page renders"""
    summary: DashboardSummary = Field(default_factory=DashboardSummary)
    poems_per_hour_today: List[SeriesPoint] = Field(default_factory=list)
    users_per_hour_today: List[SeriesPoint] = Field(default_factory=list)
    poems_per_day_this_week: List[SeriesPoint] = Field(default_factory=list)
    users_per_day_this_week: List[SeriesPoint] = Field(default_factory=list)
    poems_per_day_this_month: List[SeriesPoint] = Field(default_factory=list)
    users_per_day_this_month: List[SeriesPoint] = Field(default_factory=list)
    poems_per_month: List[SeriesPoint] = Field(default_factory=list)
    users_per_month: List[SeriesPoint] = Field(default_factory=list)
    top_poems: List[TopPoem] = Field(default_factory=list)
    top_poems_all_time: List[TopPoem] = Field(default_factory=list)
    most_commented_users: CommenterLeaderboards = Field(default_factory=CommenterLeaderboards)
    most_active_poets: PoetLeaderboards = Field(default_factory=PoetLeaderboards)
    user_names: Dict[str, str] = Field(default_factory=dict)
