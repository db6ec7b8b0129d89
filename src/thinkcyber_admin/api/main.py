"""FastAPI application for the ThinkCyber admin gateway."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from thinkcyber_admin import __version__
from thinkcyber_admin.api.exception_handlers import register_exception_handlers
from thinkcyber_admin.api.routers import (
    categories,
    health,
    homepage,
    privacy,
    subcategories,
    terms,
    topics,
)
from thinkcyber_admin.config.settings import configure_logging, settings

logger = logging.getLogger(__name__)

# Uploads carry user file names, so their details are not logged
UPLOAD_SUFFIX = "/videos/upload"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    configure_logging()
    logger.info(
        "Admin gateway %s forwarding to %s", __version__, settings.api_base_url
    )
    yield


app = FastAPI(
    title="ThinkCyber Admin API",
    description="Admin gateway for the ThinkCyber learning platform backend",
    version=__version__,
    lifespan=lifespan,
)

register_exception_handlers(app)


def _is_sensitive_path(path: str) -> bool:
    """Check if the path is a video upload, which is not logged in detail."""
    return path.endswith(UPLOAD_SUFFIX)


def _get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxied requests."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        # First IP in the chain is the original client
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host
    return "unknown"


@app.middleware("http")
async def log_requests(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """
    Log incoming requests and outgoing responses.

    The response line is logged at INFO for 2xx/3xx, WARNING for 4xx and
    ERROR for 5xx. Sensitive endpoints are logged without their path.
    """
    start_time = time.perf_counter()

    method = request.method
    path = request.url.path
    client_ip = _get_client_ip(request)
    sensitive = _is_sensitive_path(path)

    if sensitive:
        logger.info("Request: %s [sensitive endpoint] from %s", method, client_ip)
    else:
        logger.info("Request: %s %s from %s", method, path, client_ip)

    response = await call_next(request)

    duration = time.perf_counter() - start_time
    status_code = response.status_code

    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    if sensitive:
        logger.log(
            log_level,
            "Response: %s [sensitive endpoint] - %d (%.3fs)",
            method,
            status_code,
            duration,
        )
    else:
        logger.log(
            log_level,
            "Response: %s %s - %d (%.3fs)",
            method,
            path,
            status_code,
            duration,
        )

    return response


# Mount routers under the /api prefix
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(categories.router, prefix="/api", tags=["categories"])
app.include_router(subcategories.router, prefix="/api", tags=["subcategories"])
app.include_router(topics.router, prefix="/api", tags=["topics"])
app.include_router(terms.router, prefix="/api", tags=["terms"])
app.include_router(privacy.router, prefix="/api", tags=["privacy"])
app.include_router(homepage.router, prefix="/api", tags=["homepage"])
