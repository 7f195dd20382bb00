"""Application factory and top-level wiring for the Device Manager service.

``create_app`` brings together configuration, the database gateway, the API
router, middlewares and error handling. Collaborators can be passed in
explicitly (tests hand over an in-memory engine or a fake gateway); otherwise
they are built from settings.
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.engine import Engine

from .core.errors import register_exception_handlers
from .crud.devices import DeviceGateway, SqlDeviceGateway
from .db.migrate import run_migrations
from .db.session import build_engine, build_session_factory
from .middlewares import ApiVersionsHeaderMiddleware, RequestIdMiddleware
from .routers import api_devices as api_devices_router
from .settings import AppSettings, get_settings


def create_app(
    settings: AppSettings | None = None,
    *,
    engine: Engine | None = None,
    gateway: DeviceGateway | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    if gateway is None:
        engine = engine or build_engine(settings.DB_URL, schema=settings.DB_SCHEMA)
        # Tables and indexes are created on first boot and left alone afterwards.
        run_migrations(engine)
        gateway = SqlDeviceGateway(build_session_factory(engine))

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.gateway = gateway

    app.add_middleware(ApiVersionsHeaderMiddleware, versions=settings.API_SUPPORTED_VERSIONS)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(api_devices_router.router)

    if settings.METRICS_ENABLED:
        # One registry per app so several apps can live in one process.
        Instrumentator(registry=CollectorRegistry()).instrument(app).expose(app, include_in_schema=False)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app"]
