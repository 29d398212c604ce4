"""FastAPI application for the VLSM calculator.

Runs directly on Uvicorn (ASGI server):

    uvicorn vlsm_calculator.main:app

Environment Variables:
    AUTH_METHOD: Authentication method (none, api_key)

    API Key Authentication (AUTH_METHOD=api_key):
        API_KEYS: Comma-separated list of valid API keys

    CORS Configuration:
        CORS_ORIGINS: Comma-separated list of allowed CORS origins
                     If not set or empty, localhost development origins are used
                     Example: http://localhost:3000,http://localhost:5173

    LOG_LEVEL: Logging level name (default: INFO)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .auth import validate_api_key
from .config import (
    AuthMethod,
    get_api_keys,
    get_auth_method,
    get_cors_origins,
    get_log_level,
    validate_configuration,
)
from .routers import health, vlsm

logger = logging.getLogger(__name__)

# Paths reachable without credentials
PUBLIC_PATHS = [
    "/api/v1/health",
    "/api/v1/health/ready",
    "/api/v1/health/live",
    "/api/v1/docs",
    "/api/v1/redoc",
    "/api/v1/openapi.json",
    "/",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate configuration and set up logging when the server starts."""
    validate_configuration()
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Authentication: {get_auth_method().value}")
    yield


app = FastAPI(
    title="VLSM Calculator API",
    description="Allocates variable-length IPv4 subnets from a parent network",
    version=__version__,
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)

cors_origins = get_cors_origins()
if not cors_origins:
    cors_origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8001",
    ]
    logger.warning("CORS: Using default localhost origins for development")
else:
    logger.info(f"CORS: Allowed origins: {', '.join(cors_origins)}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(vlsm.router)


@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    """Handle authentication based on AUTH_METHOD."""
    if request.url.path in PUBLIC_PATHS:
        return await call_next(request)

    if get_auth_method() == AuthMethod.API_KEY:
        api_key = request.headers.get("X-API-Key")
        if not validate_api_key(api_key, get_api_keys()):
            logger.warning(
                "Rejected request: invalid or missing API key",
                extra={
                    "path": request.url.path,
                    "client_host": request.client.host if request.client else "unknown",
                },
            )
            return JSONResponse(status_code=401, content={"detail": "Invalid or missing API key"})

    return await call_next(request)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "VLSM Calculator API",
        "version": __version__,
        "docs": "/api/v1/docs",
        "openapi": "/api/v1/openapi.json",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("vlsm_calculator.main:app", host="0.0.0.0", port=8000)
