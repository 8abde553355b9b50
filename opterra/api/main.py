"""
FastAPI Application - Opterra Risk Engine API

CORS: Configured via environment variables.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from opterra.config import settings
from .routes import router


# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"🚀 Starting {settings.PROJECT_NAME}")
    logger.info(f"📍 Running in {settings.ENVIRONMENT} mode")
    yield
    # Shutdown
    logger.info(f"👋 Shutting down {settings.PROJECT_NAME}")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Water heater risk assessment: stress, aging, verdict, budget and maintenance",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# For Vercel deployments, allow_origin_regex matches all vercel.app subdomains
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=r"https://.*\.vercel\.app",
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)


app.include_router(router, prefix=settings.API_V1_STR, tags=["Assessment"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint."""
    return {
        "message": "Opterra Risk Engine API",
        "docs": "/docs",
        "health": "/ping",
    }


@app.get("/ping", tags=["Health"])
async def ping():
    """Lightweight heartbeat."""
    return {"status": "ok"}
