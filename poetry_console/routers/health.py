"""
Health API Router
Service status check
"""
import time

from fastapi import APIRouter, Depends, Response

from ..core.deps import get_app_settings, get_document_store
from ..core.exceptions import PoetryConsoleError
from ..core.logging_framework import LogCategory, get_logger
from ..core.settings import AppSettings
from ..models.health import HealthResponse, HealthStatus, StoreHealth
from ..ports.document_store_port import Collection

router = APIRouter(prefix="/health", tags=["Health"])

logger = get_logger("routers.health")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Service status",
    description="Checks that the document store answers a count query."
)
async def health_check(
    response: Response,
    store=Depends(get_document_store),
    settings: AppSettings = Depends(get_app_settings)
):
    """Health check of the API and its document store"""
    start = time.perf_counter()
    try:
        await store.count(Collection.POEMS)
        store_health = StoreHealth(
            status=HealthStatus.HEALTHY,
            provider=settings.store.provider.value,
            response_time_ms=int((time.perf_counter() - start) * 1000)
        )
    except (PoetryConsoleError, OSError) as e:
        logger.warning(f"Store health check failed: {e}", category=LogCategory.STORE)
        store_health = StoreHealth(
            status=HealthStatus.UNHEALTHY,
            provider=settings.store.provider.value,
            error=str(e)
        )
        response.status_code = 503

    return HealthResponse(
        status=store_health.status,
        version=settings.app_version,
        store=store_health
    )
