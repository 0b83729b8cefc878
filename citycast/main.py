"""
FastAPI backend for cityCast.

Small request/response handlers: third-party API proxies (Google, OpenTripMap,
Open-Meteo, Mollie), stop and feedback records, and turn-by-turn progress.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from citycast.api.v1.endpoints import router as api_v1_router
from citycast.config import configure_structlog, settings
from citycast.errors import CityCastError
from citycast.repositories import initialize_repositories

configure_structlog()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    logger.info(
        "cityCast API starting up",
        version=settings.api_version,
        environment=settings.get_environment_display(),
        debug=settings.debug,
    )

    initialize_repositories()

    for name, key in (
        ("MAPS_KEY", settings.maps_key),
        ("PLACES_API_KEY", settings.places_api_key),
        ("OPENTRIPMAP_API_KEY", settings.opentripmap_api_key),
        ("MOLLIE_API_KEY", settings.mollie_api_key),
    ):
        if not key:
            logger.warning("API key not configured - dependent endpoints will fail", key=name)

    logger.info("API routes registered", endpoints=len(app.routes))

    yield

    logger.info("cityCast API shutting down")


app = FastAPI(
    title=settings.api_title,
    description="Tour stops, upstream API proxies and turn-by-turn navigation for cityCast.",
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production() else None,
    redoc_url="/redoc" if not settings.is_production() else None,
    openapi_url="/openapi.json" if not settings.is_production() else None,
)

app.add_middleware(CORSMiddleware, **settings.get_cors_config())


@app.exception_handler(CityCastError)
async def citycast_error_handler(request: Request, exc: CityCastError) -> JSONResponse:
    """Render service errors as ``{"error": message}``."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and parameters are a plain 400."""
    logger.info("Invalid request", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


app.include_router(api_v1_router)


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint providing basic API information.

    Use `/api/v1/health` for detailed health checks.
    """
    return {
        "service": settings.api_title,
        "version": settings.api_version,
        "environment": settings.get_environment_display(),
        "status": "operational",
        "docs": "/docs" if not settings.is_production() else "disabled",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "citycast.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,  # Use our structured logging
    )
