"""
Dependency Injection for FastAPI

The document store is built once per application (see main.lifespan) and
kept on app.state; services are cheap wrappers built per request.
"""
from fastapi import Depends, Request

from .settings import AppSettings, get_settings
from .exceptions import ServiceUnavailableException
from .logging_middleware import new_request_id
from ..ports.document_store_port import DocumentStorePort
from ..services.dashboard_stats_service import DashboardStatsService
from ..services.moderation_service import ModerationService
from ..usecases.get_dashboard_overview import GetDashboardOverviewUseCase


def get_app_settings(request: Request) -> AppSettings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or new_request_id()


def get_document_store(request: Request) -> DocumentStorePort:
    """Get the application's document store"""
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise ServiceUnavailableException("store", "Document store is not initialized")
    return store


def get_clock(request: Request):
    """Reference clock override (tests pin "now" through app.state.clock)"""
    return getattr(request.app.state, "clock", None)


def get_dashboard_stats_service(
    store: DocumentStorePort = Depends(get_document_store),
    settings: AppSettings = Depends(get_app_settings),
    clock=Depends(get_clock)
) -> DashboardStatsService:
    return DashboardStatsService(store, settings=settings.analytics, clock=clock)


def get_moderation_service(
    store: DocumentStorePort = Depends(get_document_store),
    settings: AppSettings = Depends(get_app_settings)
) -> ModerationService:
    return ModerationService(store, settings=settings.analytics)


def get_dashboard_overview_use_case(
    stats_service: DashboardStatsService = Depends(get_dashboard_stats_service)
) -> GetDashboardOverviewUseCase:
    return GetDashboardOverviewUseCase(stats_service)
