"""
Dashboard API Router
Analytics widgets of the admin dashboard
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..analytics.buckets import POEMS_BY_DATE_POSTED, USERS_BY_CREATED_AT, SeriesGranularity
from ..analytics.windows import TimeWindow
from ..core.deps import (
    get_dashboard_overview_use_case,
    get_dashboard_stats_service,
    get_request_id,
)
from ..core.exceptions import UnknownSeriesException
from ..models.base import ErrorResponse, MetaInfo, SuccessResponse
from ..models.dashboard import (
    CommenterEntry,
    DashboardOverview,
    DashboardSummary,
    PoetEntry,
    SeriesPoint,
    TopPoem,
)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

SERIES_SOURCES = {
    "poems": POEMS_BY_DATE_POSTED,
    "users": USERS_BY_CREATED_AT,
}

WINDOW_DESCRIPTION = "Time window (today, week, month, year, all; 'day' = today)"


@router.get(
    "/summary",
    response_model=SuccessResponse[DashboardSummary],
    summary="Headline counters",
    description="Total poems, users and pending requests plus this month / this year counts."
)
async def get_summary(
    stats_service=Depends(get_dashboard_stats_service),
    request_id: str = Depends(get_request_id)
):
    """Get dashboard summary"""
    result = await stats_service.get_dashboard_summary()

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/series/{entity}/{granularity}",
    response_model=SuccessResponse[List[SeriesPoint]],
    responses={404: {"model": ErrorResponse}},
    summary="Count series",
    description="Poems or users counted per hour, weekday, day of month, month or year."
)
async def get_series(
    entity: str,
    granularity: str,
    year: Optional[int] = Query(default=None, ge=1, le=9999, description="Year for the 'year' series"),
    stats_service=Depends(get_dashboard_stats_service),
    request_id: str = Depends(get_request_id)
):
    """Get one count series"""
    source = SERIES_SOURCES.get(entity)
    valid_granularities = [g.value for g in SeriesGranularity]
    if source is None or granularity not in valid_granularities:
        raise UnknownSeriesException(entity, granularity)

    result = await stats_service.get_series(source, SeriesGranularity(granularity), year)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/top-poems",
    response_model=SuccessResponse[List[TopPoem]],
    summary="Top poems by comments",
    description="Poems with the most comments inside a time window."
)
async def get_top_poems(
    window: str = Query(default=TimeWindow.TODAY.value, description=WINDOW_DESCRIPTION),
    limit: Optional[int] = Query(default=None, ge=0, le=100),
    stats_service=Depends(get_dashboard_stats_service),
    request_id: str = Depends(get_request_id)
):
    """Get top poems by comment count"""
    result = await stats_service.get_top_poems_by_comments(window, limit)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/leaderboards/commenters",
    response_model=SuccessResponse[List[CommenterEntry]],
    summary="Most commented users",
    description="Users who wrote the most comments inside a time window."
)
async def get_most_commented_users(
    window: str = Query(default=TimeWindow.TODAY.value, description=WINDOW_DESCRIPTION),
    limit: Optional[int] = Query(default=None, ge=0, le=100),
    stats_service=Depends(get_dashboard_stats_service),
    request_id: str = Depends(get_request_id)
):
    """Get most commented users"""
    result = await stats_service.get_most_commented_users(window, limit)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/leaderboards/poets",
    response_model=SuccessResponse[List[PoetEntry]],
    summary="Most active poets",
    description="Authors who posted the most poems inside a time window."
)
async def get_most_active_poets(
    window: str = Query(default=TimeWindow.TODAY.value, description=WINDOW_DESCRIPTION),
    limit: Optional[int] = Query(default=None, ge=0, le=100),
    stats_service=Depends(get_dashboard_stats_service),
    request_id: str = Depends(get_request_id)
):
    """Get most active poets"""
    result = await stats_service.get_most_active_poets(window, limit)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/user-names",
    response_model=SuccessResponse[Dict[str, str]],
    summary="User display names",
    description="Map of user id to display name."
)
async def get_user_names(
    stats_service=Depends(get_dashboard_stats_service),
    request_id: str = Depends(get_request_id)
):
    """Get user names map"""
    result = await stats_service.get_user_names_map()

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/overview",
    response_model=SuccessResponse[DashboardOverview],
    summary="Dashboard overview",
    description="Every dashboard widget in one response."
)
async def get_overview(
    window: str = Query(default=TimeWindow.TODAY.value, description="Window of the top poems panel"),
    use_case=Depends(get_dashboard_overview_use_case),
    request_id: str = Depends(get_request_id)
):
    """Get the full dashboard overview"""
    result = await use_case.execute(window)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )
