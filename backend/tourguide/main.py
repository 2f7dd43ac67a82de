"""Tourist Guide FastAPI Application.

Main entry point for the address engine API. The application owns the
AddressCacheService: it is created on first use and destroyed on shutdown,
which stops its background sweep.
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tourguide.api import router
from tourguide.models import (
    AddressCacheError,
    ErrorCode,
    InvalidConfigurationError,
    ServiceDestroyedError,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    app.state.address_cache = None
    app.state.geocoder = None
    yield
    # Shutdown - stop the sweep timer and close the HTTP client
    if app.state.address_cache is not None:
        app.state.address_cache.destroy()
        app.state.address_cache = None
    if app.state.geocoder is not None:
        await app.state.geocoder.close()
        app.state.geocoder = None


app = FastAPI(
    title="Tourist Guide Address API",
    description="Address caching and change detection for a location-aware tourist guide",
    version="0.1.0",
    lifespan=lifespan,
)

# Comma-separated list, e.g. "https://guia.example,http://localhost:5173"
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)


def _error_response(status_code: int, code: ErrorCode, message: str, user_message: str):
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "user_message": user_message,
            },
        },
    )


# Global exception handlers
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    return _error_response(
        422,
        ErrorCode.VALIDATION_ERROR,
        str(exc),
        "Invalid request format. Please check your input.",
    )


@app.exception_handler(AddressCacheError)
async def address_cache_exception_handler(request: Request, exc: AddressCacheError):
    """Handle address engine errors."""
    if isinstance(exc, ServiceDestroyedError):
        status_code = 503
    elif isinstance(exc, InvalidConfigurationError):
        status_code = 500
    else:
        status_code = 400
    logger.warning(f"[API] {exc.code.value}: {exc}")
    return _error_response(
        status_code,
        exc.code,
        str(exc),
        "The address service could not handle this request.",
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.exception("Unhandled error")
    return _error_response(
        500,
        ErrorCode.API_ERROR,
        str(exc),
        "Something went wrong. Please try again.",
    )


# Include API routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check(request: Request):
    """Liveness plus the state of the address cache, if it was created."""
    service = getattr(request.app.state, "address_cache", None)
    if service is None or service.is_destroyed:
        return {"status": "healthy", "address_cache": None}
    return {
        "status": "healthy",
        "address_cache": {
            "size": service.cache_size,
            "sweep_running": service.sweep_running,
        },
    }
