# src/main.py
from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import uvicorn as uv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware
from core.cache import init_cache
from core.config import settings
from core.debug import DebugContext, DebugTimingMiddleware
from db.database import check_db_connection, create_tables, disconnect_db
from utils.exception_handler import setup_exception_handlers
from utils.logger import setup_logger, attach_file_handler
from utils.rate_limiter import limiter
from routes import (
    auth_router,
    password_reset_router,
    doctors_router,
    patients_router,
    appointments_router,
    treatments_router,
    invoices_router,
    inventory_router,
    odontograms_router,
    reports_router,
    scheduling_router,
    debug_router,
)

# Quiet third-party loggers
for log in ["watchfiles", "uvicorn.error", "uvicorn.access", "uvicorn.asgi"]:
    logging.getLogger(log).setLevel(logging.WARNING)

logger = setup_logger("SERVER")

if settings.LOG_FILE:
    attach_file_handler(settings.LOG_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown of the database and cache"""
    logger.info("Starting Dental Clinic API...")

    try:
        if settings.CREATE_TABLES_ON_STARTUP:
            await create_tables()

        if await check_db_connection():
            logger.info("Database connection verified")
        else:
            logger.warning("Database not reachable at startup")

        backend = await init_cache()
        logger.info(f"Cache backend: {backend}")

        logger.info("Application startup complete")
        yield

    except Exception as e:
        logger.error(f"Startup failed: {str(e)}")
        raise
    finally:
        logger.info("Closing database connection")
        await disconnect_db()
        logger.info("Shutting down application...")


app = FastAPI(
    title="Dental Clinic API",
    description="Patients, appointments, treatments, invoices, inventory and odontograms",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
)

# Request statistics, never in production
app.state.debug_context = (
    DebugContext(environment=settings.ENVIRONMENT)
    if settings.DEBUG_CONTEXT_ACTIVE
    else None
)
app.add_middleware(DebugTimingMiddleware)

# Rate limiting configuration
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Exception handling
setup_exception_handlers(app)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Response-Time-Ms"],
)

for router in (
    auth_router,
    password_reset_router,
    doctors_router,
    patients_router,
    appointments_router,
    treatments_router,
    invoices_router,
    inventory_router,
    odontograms_router,
    reports_router,
    scheduling_router,
    debug_router,
):
    app.include_router(router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "message": "Dental Clinic API",
        "status": "healthy",
        "version": app.version,
    }


@app.get("/health")
async def health_check():
    """Detailed health check endpoint"""
    db_healthy = await check_db_connection()
    return {
        "status": "healthy" if db_healthy else "degraded",
        "database": "connected" if db_healthy else "disconnected",
        "cache": "enabled" if settings.CACHE_ENABLED else "disabled",
        "environment": settings.ENVIRONMENT,
    }


if __name__ == "__main__":
    uv.run(
        "main:app",
        host=settings.UVICORN_HOST,
        port=settings.UVICORN_PORT,
        reload=settings.RELOAD,
        workers=1 if settings.RELOAD else settings.WORKERS_COUNT,
        log_level="info",
        access_log=True,
    )
