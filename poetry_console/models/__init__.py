"""Pydantic models for request/response schemas"""

from .base import (
    CamelModel,
    MetaInfo,
    ErrorDetail,
    SuccessResponse,
    ErrorResponse,
)

from .dashboard import (
    SeriesPoint,
    DashboardSummary,
    TopPoem,
    CommenterEntry,
    PoetEntry,
    CommenterLeaderboards,
    PoetLeaderboards,
    DashboardOverview,
)

from .moderation import (
    PoemListing,
    CommentListing,
    ReplySummary,
)

from .health import (
    HealthStatus,
    StoreHealth,
    HealthResponse,
)

__all__ = [
    # Base
    "CamelModel",
    "MetaInfo",
    "ErrorDetail",
    "SuccessResponse",
    "ErrorResponse",
    # Dashboard
    "SeriesPoint",
    "DashboardSummary",
    "TopPoem",
    "CommenterEntry",
    "PoetEntry",
    "CommenterLeaderboards",
    "PoetLeaderboards",
    "DashboardOverview",
    # Moderation
    "PoemListing",
    "CommentListing",
    "ReplySummary",
    # Health
    "HealthStatus",
    "StoreHealth",
    "HealthResponse",
]
