"""
OdoVision Backend - FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .app_logger import setup_logging
from .config import get_settings
from .api.routes import router

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)
    logger.info("Starting OdoVision Backend...")

    yield

    logger.info("Shutting down OdoVision Backend...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Odometer mileage recognition from photographs",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "odovision.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
