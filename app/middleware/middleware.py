# app/middleware/middleware.py
"""
HTTP plumbing around the routers.

``lifespan`` prepares logging and the schema before the first request and
releases the engine pool on shutdown. ``LoggingMiddleware`` tags every
request with a correlation id, ``SecurityHeadersMiddleware`` hardens every
response, and ``configure_cors`` lists the browser origins allowed to call
the API.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.configs import settings
from app.db import close_db, init_db
from app.monitoring import bind_request_id, clear_context, configure_logging, get_logger
from app.utils.helpers import host

REQUEST_ID_HEADER = "X-Request-ID"

DEV_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    configure_logging()
    base_url = f"http://{settings.HOST}:{settings.PORT}"
    logger.info(
        "Starting application",
        app=app.title,
        environment=settings.ENVIRONMENT,
        log_file=settings.LOG_FILE if settings.LOG_TO_FILE else None,
    )

    try:
        await init_db()
    except Exception:
        logger.exception("Database schema could not be prepared")
        raise

    logger.info("Ready", api=base_url, docs=f"{base_url}/docs", health=f"{base_url}/health")

    yield

    logger.info("Stopping application", app=app.title)
    await close_db()


def configure_cors(app: FastAPI) -> None:
    """Allow the local frontend, plus the production one when configured."""
    origins = list(DEV_ORIGINS)
    if settings.PRODUCTION_FRONTEND_URL:
        origins.append(settings.PRODUCTION_FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Access log with a per-request correlation id.

    An incoming ``X-Request-ID`` is reused, otherwise a fresh one is minted.
    The id is echoed back on the response and is present on every log line
    emitted while the request runs.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_id(request_id)
        method, path = request.method, request.url.path
        started = perf_counter()
        logger.info("Request received", method=method, path=path, client=host(request))

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=method,
                path=path,
                status=response.status_code,
                elapsed_ms=round((perf_counter() - started) * 1000, 2),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response
