"""
City Prosperity Index Web App - FastAPI Entry Point

Standardizes urban indicator measurements per city and aggregates them into
the City Prosperity Index.

Run with: uvicorn cpi_app.main:app --reload
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cpi_app.config import settings
from cpi_app.database import close_db, init_db
from cpi_app.api import aggregates, auth, comparisons, history, indicators
from cpi_engine.errors import StoreError, UnknownIndicatorError, ValidationError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle manager."""
    # Startup: Initialize database
    await init_db()
    logger.info("Database ready")
    if settings.calculation_log_dir:
        logger.info(f"Per-city calculation logs: {settings.calculation_log_dir}")

    yield

    # Shutdown: release database connections
    await close_db()


app = FastAPI(
    title="City Prosperity Index",
    description="Standardization and aggregation of urban prosperity indicators",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware - allow frontend to access API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----- Error Handlers -----


@app.exception_handler(UnknownIndicatorError)
async def unknown_indicator_handler(request: Request, exc: UnknownIndicatorError):
    return JSONResponse(status_code=404, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store error on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Include API routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(indicators.router, prefix="/api/indicators", tags=["Indicators"])
app.include_router(history.router, prefix="/api/history", tags=["History"])
app.include_router(aggregates.router, prefix="/api", tags=["Aggregates"])
app.include_router(comparisons.router, prefix="/api/comparisons", tags=["Comparisons"])


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "status": "ok",
        "app": "City Prosperity Index",
        "version": "0.1.0",
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "database": "connected",
    }
