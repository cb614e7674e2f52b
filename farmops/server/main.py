"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request monitoring), registers the exception handlers, mounts the uploads
directory and includes all API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from farmops.core.database import engine, init_db
from farmops.core.logging_config import get_logger, setup_logging
from farmops.core.monitoring import initialize_logfire

from .api.v1 import (
    customers,
    dashboard,
    documents,
    employees,
    farms,
    health,
    invites,
    orders,
    payments,
    products,
    skus,
    storefront,
    tasks,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestMonitoringMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    This is the modern approach replacing the deprecated @app.on_event decorators.
    """
    # Startup
    logger.info("Starting up farmops server...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down farmops server...")
    await engine.dispose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    farmops Server API

    This API provides the backend services for multi-tenant farm operations.
    It covers products and SKUs, customers, employees, orders with production
    scheduling, task tracking, payments, a public storefront and PDF documents.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestMonitoringMiddleware)

setup_exception_handlers(app)
initialize_logfire(app, engine)

uploads_dir = Path(settings.storage.uploads_dir)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")

FARM = f"{constant.API_V1_STR}/farms/{{farm_id}}"
ORDER = f"{FARM}/orders/{{order_id}}"

app.include_router(health.router, tags=["health"])
app.include_router(farms.router, prefix=f"{constant.API_V1_STR}/farms", tags=["farms"])
app.include_router(products.categories_router, prefix=f"{FARM}/product-categories", tags=["products"])
app.include_router(products.router, prefix=f"{FARM}/products", tags=["products"])
app.include_router(skus.router, prefix=f"{FARM}/products/{{product_id}}/skus", tags=["skus"])
app.include_router(skus.farm_skus_router, prefix=f"{FARM}/skus", tags=["skus"])
app.include_router(customers.router, prefix=f"{FARM}/customers", tags=["customers"])
app.include_router(customers.tags_router, prefix=f"{FARM}/customer-tags", tags=["customers"])
app.include_router(employees.router, prefix=f"{FARM}/employees", tags=["employees"])
app.include_router(employees.team_router, prefix=f"{FARM}/team", tags=["employees"])
app.include_router(invites.router, prefix=f"{constant.API_V1_STR}/invites", tags=["invites"])
app.include_router(orders.router, prefix=f"{FARM}/orders", tags=["orders"])
app.include_router(payments.order_payments_router, prefix=ORDER, tags=["payments"])
app.include_router(documents.order_documents_router, prefix=f"{ORDER}/documents", tags=["documents"])
app.include_router(tasks.router, prefix=f"{FARM}/tasks", tags=["tasks"])
app.include_router(dashboard.router, prefix=f"{FARM}/dashboard", tags=["dashboard"])
app.include_router(payments.router, prefix=f"{FARM}/payments", tags=["payments"])
app.include_router(payments.public_router, prefix=f"{constant.API_V1_STR}/payment-link", tags=["payments"])
app.include_router(documents.router, prefix=f"{FARM}/documents", tags=["documents"])
app.include_router(storefront.router, prefix=f"{constant.API_V1_STR}/storefront", tags=["storefront"])
