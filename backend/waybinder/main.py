"""
Waybinder GPS API

FastAPI application exposing GPS track ingestion.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from waybinder import __version__
from waybinder.config import settings
from waybinder.api.v1.router import api_router


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Waybinder GPS API...")
    logger.info(
        f"GPS defaults: simplify_tolerance={settings.gps_simplify_tolerance}, "
        f"moving_threshold={settings.gps_moving_speed_threshold_kmh} km/h"
    )

    yield

    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Waybinder GPS API",
    description="GPS track ingestion: parsing, statistics and simplification",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
