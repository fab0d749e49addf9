"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from qc_tracker.core.database.session import close_db, engine, init_db
from qc_tracker.core.logging_config import get_logger, setup_logging
from qc_tracker.core.monitoring import initialize_logfire

from .api.v1 import customer_sites, customers, health
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Verifies the database tables on startup and releases the connection pool
    on shutdown.
    """
    # Startup
    try:
        logger.info("Starting up QC Tracker Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down QC Tracker Server...")
    await close_db()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    QC Tracker Server API

    This API maintains the reference data of the quality-control tracking
    system (customers, customer sites, ...). Every resource shares the same
    list, read, create, update and delete contract and the same response envelope.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app=app, engine=engine)

app.include_router(health.router, tags=["health"])
app.include_router(health.router, prefix=constant.API_V1_STR, tags=["health"])
app.include_router(customers.router, prefix=f"{constant.API_V1_STR}/customers")
app.include_router(customer_sites.router, prefix=f"{constant.API_V1_STR}/customer-sites")
