"""Needledrop API - Main application entry point."""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api import api_router
from app import __version__
from app.exceptions import NeedledropError
from app.logging_config import setup_logging

# Initialize logging
setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Needledrop",
    description="Social music logging - Rate, review, follow",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
# In production, set CORS_ORIGINS env var to your domain(s)
cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NeedledropError)
async def needledrop_error_handler(request: Request, exc: NeedledropError):
    """Map service errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
def root():
    """Root endpoint - API info."""
    return {
        "name": "Needledrop",
        "version": __version__,
        "docs": "/docs",
    }
