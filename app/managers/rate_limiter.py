# app/managers/rate_limiter.py

"""
Per-client request limits with slowapi.

Clients are keyed by remote address (``ProxyHeadersMiddleware`` resolves the
real address behind a proxy). Limits are declared per route; the login,
register and post-create endpoints are the throttled ones.
"""

from logging import getLogger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from app.configs import LimiterConfig, file_logger
from app.utils.helpers import host

logger = file_logger(getLogger(__name__))

AUTH_LIMIT = "5/minute"
POST_CREATE_LIMIT = "10/minute"


def get_identifier(request: Request) -> str:
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Answer 429 with the application's ``{"message": ...}`` error shape."""
    limit = exc.detail if isinstance(exc, RateLimitExceeded) else None
    logger.warning(f"Rate limit {limit} exceeded for ip: {host(request)} at {request.url.path}")
    message = f"Too many requests, limit is {limit}" if limit else "Too many requests"
    return ORJSONResponse(status_code=HTTP_429_TOO_MANY_REQUESTS, content={"message": message})
