"""
batchCOGS FastAPI Application

Main entry point for the API server.
Run with: uvicorn api.main:app --reload
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.dependencies import get_inventory_service, get_sales_service
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.errors import setup_exception_handlers
from api.routers import health, inventory, reports, sales

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()

    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    if settings.storage_backend.lower() != "memory":
        os.makedirs(settings.data_dir, exist_ok=True)
        os.makedirs(os.path.dirname(settings.sqlite_path), exist_ok=True)

    # Restore the ledger and the sales journal before serving requests
    ledger = get_inventory_service()
    get_sales_service()
    logger.info(
        f"Ledger ready: {len(ledger.list_ingredients())} ingredients, "
        f"{len(ledger.list_batches())} batches ({settings.storage_backend} storage)"
    )

    yield

    # Shutdown
    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="API for perishable restaurant stock: FEFO batches, availability and COGS",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(
        inventory.router,
        prefix="/api/v1/inventory",
        tags=["Inventory"]
    )
    app.include_router(
        sales.router,
        prefix="/api/v1/sales",
        tags=["Sales"]
    )
    app.include_router(
        reports.router,
        prefix="/api/v1/reports",
        tags=["Reports"]
    )

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
