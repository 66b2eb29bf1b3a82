"""
Poetry Console API Main Application
Admin dashboard analytics over the poems, users, comments and poem requests collections
"""
import argparse
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .core.exceptions import (
    APIException,
    api_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from .core.logging_framework import LogCategory, get_logger, setup_logging
from .core.logging_middleware import setup_logging_middleware
from .core.settings import AppSettings, SettingsLoader, StoreProvider, get_settings
from .infrastructure.memory.document_store import MemoryDocumentStore
from .infrastructure.postgres.document_store import PostgresDocumentStore
from .ports.document_store_port import DocumentStorePort
from .routers import dashboard, health, moderation

API_PREFIX = "/api/v1"

logger = get_logger("main")


async def build_document_store(settings: AppSettings) -> DocumentStorePort:
    """Create the document store selected by settings.store.provider"""
    store_settings = settings.store
    if store_settings.provider is StoreProvider.POSTGRES:
        return await PostgresDocumentStore.create(
            store_settings.postgres_dsn,
            table_name=store_settings.table_name,
            min_size=store_settings.pool_min_size,
            max_size=store_settings.pool_max_size,
            command_timeout=store_settings.command_timeout,
        )
    if store_settings.seed_file:
        return MemoryDocumentStore.from_file(store_settings.seed_file)
    return MemoryDocumentStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    settings: AppSettings = app.state.settings

    # Startup
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        category=LogCategory.BUSINESS,
        extra_data={
            "environment": settings.environment.value,
            "store": settings.store.provider.value,
            "timezone": settings.analytics.timezone or "local",
        }
    )

    owns_store = app.state.document_store is None
    if owns_store:
        app.state.document_store = await build_document_store(settings)

    yield

    # Shutdown
    logger.info("Shutting down application", category=LogCategory.BUSINESS)
    if owns_store:
        close = getattr(app.state.document_store, "close", None)
        if close is not None:
            await close()
        app.state.document_store = None


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    document_store: Optional[DocumentStorePort] = None,
    clock: Optional[Callable[[], datetime]] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to get_settings())
        document_store: Pre-built store; when omitted the lifespan builds one
        clock: Reference clock for the analytics queries
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="""
## Poetry Console Admin API

Analytics and moderation listings for the poetry site's admin dashboard.

### Features
- **Summary**: total poems, users and pending requests
- **Series**: poem and user counts per hour, weekday, day, month and year
- **Leaderboards**: top poems by comments, most commented users, most active poets
- **Moderation**: poem and comment listings with search and sorting
        """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.document_store = document_store
    app.state.clock = clock

    setup_logging_middleware(app)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Include routers with /api/v1 prefix
    app.include_router(dashboard.router, prefix=API_PREFIX)
    app.include_router(moderation.router, prefix=API_PREFIX)
    app.include_router(health.router, prefix=API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        """API root endpoint"""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment.value,
            "docs": "/docs",
            "health": f"{API_PREFIX}/health"
        }

    return app


def main():
    """Run the API with uvicorn"""
    import uvicorn

    parser = argparse.ArgumentParser(description="Poetry Console API Server")
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--host", help="Bind host")
    parser.add_argument("--port", type=int, help="Bind port")
    args = parser.parse_args()

    settings = SettingsLoader.load(Path(args.config) if args.config else None)
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None
    )


if __name__ == "__main__":
    main()
