"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from gig_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from gig_ledger.api.v1 import (
    cards,
    cycle,
    days_off,
    goals,
    history,
    obligations,
    occurrences,
    settings as cycle_settings,
    transactions,
)
from gig_ledger.infrastructure.database.session import init_db
from gig_ledger.infrastructure.observability.logging import setup_logging
from gig_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Gig Ledger",
        description="Billing cycles, recurring obligations and daily earnings targets",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

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
    app.include_router(cycle_settings.router, prefix="/v1", tags=["settings"])
    app.include_router(cycle.router, prefix="/v1", tags=["cycle"])
    app.include_router(obligations.router, prefix="/v1", tags=["obligations"])
    app.include_router(occurrences.router, prefix="/v1", tags=["occurrences"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(days_off.router, prefix="/v1", tags=["days-off"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(history.router, prefix="/v1", tags=["history"])
    app.include_router(cards.router, prefix="/v1", tags=["cards"])

    return app


app = create_app()
