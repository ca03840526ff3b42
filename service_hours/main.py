# service_hours/main.py - FastAPI application, middleware and error handlers
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import traceback
import time

from service_hours.core.config import settings
from service_hours.core.db import get_engine, health_check as db_health_check
from service_hours.core.exceptions import ServiceHoursError, StoreError
from service_hours.models import Base
from service_hours.api.routers import students, service_requests, assignments, dashboard, reports


# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.log_format_string
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Service Hours API...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database URL: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'local'}")

    engine = get_engine()

    # Migrations own the schema outside development
    if settings.is_development:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")

    yield

    logger.info("Shutting down Service Hours API...")


app = FastAPI(
    title=settings.API_TITLE,
    description="Student community-service hour tracking: rosters, service requests and hour ledger",
    version=settings.API_VERSION,
    docs_url="/docs" if settings.is_development and settings.DEV_SHOW_DOCS else None,
    redoc_url="/redoc" if settings.is_development and settings.DEV_SHOW_DOCS else None,
    lifespan=lifespan
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and processing time"""
    start_time = time.time()
    logger.info(f"Incoming {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response {response.status_code} for {request.method} {request.url.path} ({process_time:.3f}s)")
    return response


app.add_middleware(CORSMiddleware, **settings.get_cors_config())


@app.exception_handler(ServiceHoursError)
async def service_error_handler(request: Request, exc: ServiceHoursError):
    """Turn service errors into JSON responses naming the offending field or limit"""
    if isinstance(exc, StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    logger.error(traceback.format_exc())

    if settings.is_development:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "traceback": traceback.format_exc()
            }
        )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENV,
        "version": settings.API_VERSION,
        "database": db_health_check(),
    }


logger.info("Registering API routers...")
app.include_router(students.router, prefix="/api/students", tags=["Students"])
app.include_router(service_requests.router, prefix="/api/service-requests", tags=["Service Requests"])
app.include_router(assignments.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])


@app.get("/")
async def root():
    return {
        "message": "Service Hours API",
        "version": settings.API_VERSION,
        "docs_url": "/docs" if settings.is_development else "Documentation disabled in production",
    }
