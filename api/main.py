"""
Spin Wheel Platform API - Main Application.

FastAPI application with CORS enabled for the wheel frontend.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.dependencies import get_settings
from api.models import HealthResponse
from config.settings import LOG_FORMAT

settings = get_settings()

logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Spin Wheel API {__version__} starting, spin store: {settings.spins_file}")
    logger.info(f"Email configured: {settings.email_configured}")
    logger.info(
        f"SMS configured: {settings.sms_configured} "
        f"(fast2sms={settings.fast2sms_configured}, msg91={settings.msg91_configured}, "
        f"twilio={settings.twilio_configured})"
    )
    yield


# Create FastAPI application
app = FastAPI(
    title="Spin Wheel Platform API",
    description="REST API for the promotional spin-the-wheel coupon giveaway",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are rejected in the same shape as missing fields."""
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"allowed": False, "success": False, "message": "Missing required fields"},
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Liveness probe; does not touch the spin store or providers.
    """
    return HealthResponse(status="ok", message="Server is running")


# Import and include routers
from api.routers import spins

app.include_router(spins.router, prefix="/api", tags=["Spins"])
