from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime

# Configure logging first
from smarthrms.utils.logging_config import configure_for_environment, get_logger

configure_for_environment()
logger = get_logger(__name__)

from smarthrms.routers import employees, tasks, leaves, attendance, matching, reports
from smarthrms.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("SmartHRMS API starting up...")
    logger.info("Initializing database indexes...")

    try:
        from smarthrms.services.db import init_indexes
        await init_indexes()
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
        logger.info("Application will continue - some operations may be slower without indexes")

    logger.info("SmartHRMS API startup completed")

    yield

    logger.info("SmartHRMS API shutting down...")
    from smarthrms.services.db import client
    client.close()
    logger.info("SmartHRMS API shutdown completed")


app = FastAPI(title="SmartHRMS API", version=API_VERSION, lifespan=lifespan)

# Middleware runs LIFO: the exception handler wraps logging and timing
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the SmartHRMS API", "version": API_VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


# Include routers
app.include_router(employees.router, prefix="/api/employees", tags=["employees"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(leaves.router, prefix="/api/leaves", tags=["leaves"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])
app.include_router(matching.router, prefix="/api")   # matching has prefix="/match"
app.include_router(reports.router, prefix="/api")    # reports has prefix="/reports"

logger.info("SmartHRMS API initialized successfully")
