"""
ASGI application.

`create_app()` builds a fully wired FastAPI instance from config/settings.
uvicorn imports `jotter.backend.main:app`, which is built on first access
so that importing this module never reads configuration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jotter.backend.api import health
from jotter.backend.api.v1 import build_router
from jotter.backend.core.config import AppConfig, get_app_config
from jotter.backend.core.database import dispose_engine
from jotter.backend.core.exception_handlers import register_exception_handlers
from jotter.backend.core.logging import get_logger, setup_logging
from jotter.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_app_config()
    setup_logging(level=config.logging.level)
    logger.info(
        "Jotter API started",
        extra={"version": config.application.version, "env": config.application.environment},
    )
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("Jotter API stopped")


def _add_middleware(app: FastAPI, config: AppConfig) -> None:
    # Starlette runs the last added middleware first
    app.add_middleware(RequestContextMiddleware, log_requests=config.features.api_request_logging)
    origins = config.application.cors.origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )


def create_app() -> FastAPI:
    config = get_app_config()
    application = config.application
    docs_enabled = application.debug

    app = FastAPI(
        title=application.name,
        description=application.description,
        version=application.version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )
    _add_middleware(app, config)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(
        build_router(notes_generation_enabled=config.features.notes_generation_enabled),
        prefix=application.api_prefix,
    )
    return app


_app: FastAPI | None = None


def __getattr__(name: str) -> FastAPI:
    """Module level `app`, created on first access."""
    global _app
    if name != "app":
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    if _app is None:
        _app = create_app()
    return _app
