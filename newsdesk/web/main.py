"""
FastAPI Application Entry Point.

Serves the record and tag forms as HTML pages, the same operations as a
JSON API under the configured prefix, and health checks.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from newsdesk.client.strapi import close_strapi_client
from newsdesk.components.analytics import AnalyticsBeacon
from newsdesk.core.config import get_app_config, get_base_path
from newsdesk.core.exception_handlers import register_exception_handlers
from newsdesk.core.logging import get_logger, setup_logging
from newsdesk.core.middleware import RequestContextMiddleware
from newsdesk.web import api, health, pages

logger = get_logger(__name__)

STATIC_DIR = pages.TEMPLATES_DIR.parent / "static"

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
            "backend": app_config.backend.base_url,
        },
    )
    yield
    await close_strapi_client()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Pages and static files live under BASE_PATH; health and the JSON API
    stay at the root so probes and scripts do not depend on it.
    """
    app_settings = get_app_config().application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )
    app.state.beacon = AnalyticsBeacon()

    app.add_middleware(RequestContextMiddleware, api_prefix=app_settings.api_prefix)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api.router, prefix=app_settings.api_prefix, tags=["forms"])
    base_path = get_base_path()
    app.include_router(pages.router, prefix=base_path)
    app.mount(f"{base_path}/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    Creates the app on first call and caches it, so importing this module
    does not read configuration.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn newsdesk.web.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
