"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_tracker.api.v1 import accounts, auth, emis, expenses, income, views
from finance_tracker.infrastructure.database.session import init_db
from finance_tracker.infrastructure.observability.logging import setup_logging
from finance_tracker.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        create_tables: Create missing tables on startup (tests manage their own schema)
    """
    app = FastAPI(
        title="Finance Tracker",
        description="Expenses, income and EMI tracking with monthly projections",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan if create_tables else None,
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

    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])
    app.include_router(income.router, prefix="/v1", tags=["income"])
    app.include_router(emis.router, prefix="/v1", tags=["emis"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(views.router, prefix="/v1", tags=["views"])

    return app


app = create_app()
