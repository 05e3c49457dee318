"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from amc_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from amc_portal.api.v1 import admins, clients, hour_requests, payments, portfolio, work_logs
from amc_portal.infrastructure.observability.logging import setup_logging
from amc_portal.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="AMC Portal",
        description="Client contracts, work logs, payments and contract health",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(admins.router, prefix="/v1", tags=["admins"])
    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(work_logs.router, prefix="/v1", tags=["work-logs"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(hour_requests.router, prefix="/v1", tags=["hour-requests"])
    app.include_router(portfolio.router, prefix="/v1", tags=["portfolio"])

    return app


app = create_app()
