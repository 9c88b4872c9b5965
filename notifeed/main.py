from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from . import schemas
from .cache import ping
from .errors import InvalidRetentionConfig, StoreUnavailable
from .routers import notifications, system

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application...")
    try:
        ping()
        logger.info("Redis reachable")
    except StoreUnavailable as e:
        # Requests will answer 503 until Redis comes back.
        logger.warning(f"Redis not reachable at startup: {e}")
    logger.info("Notification feed API ready")
    yield
    # Shutdown
    logger.info("Shutting down application...")


app = FastAPI(
    title="Notification Feed API",
    version="1.0.0",
    description="Per-user notification feeds backed by Redis",
    lifespan=lifespan,
)


def _problem(status_code: int, title: str, detail: str) -> JSONResponse:
    problem = schemas.Problem(title=title, status=status_code, detail=detail)
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return _problem(status.HTTP_503_SERVICE_UNAVAILABLE, "Store unavailable", str(exc))


@app.exception_handler(InvalidRetentionConfig)
async def invalid_retention_handler(request: Request, exc: InvalidRetentionConfig) -> JSONResponse:
    return _problem(status.HTTP_400_BAD_REQUEST, "Invalid retention configuration", str(exc))


# Include all routers
app.include_router(system.router)
app.include_router(notifications.router)
