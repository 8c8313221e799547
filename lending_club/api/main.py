"""FastAPI application factory"""

import threading

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from lending_club.api.middleware import RequestIDMiddleware, MetricsMiddleware
from lending_club.api.v1 import clock, contracts, items, members
from lending_club.config import settings
from lending_club.demo import seed_demo
from lending_club.domain.system import System
from lending_club.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app(system: System | None = None) -> FastAPI:
    """Create and configure FastAPI application around a System instance"""
    app = FastAPI(
        title="Lending Club",
        description="Peer-to-peer item lending with daily credit settlement",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if system is None:
        system = System()
        if settings.seed_demo:
            seed_demo(system)

    app.state.system = system
    app.state.system_lock = threading.Lock()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(items.router, prefix="/v1", tags=["items"])
    app.include_router(contracts.router, prefix="/v1", tags=["contracts"])
    app.include_router(clock.router, prefix="/v1", tags=["time"])

    return app


app = create_app()
