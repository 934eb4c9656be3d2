# app/main.py

"""Blog API application: auth and post routers, middleware stack and error mapping."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.db import check_db
from app.errors import (
    BaseAppError,
    DatabaseError,
    Forbidden,
    PasswordHashingError,
    Unauthorized,
    ValidationError,
    app_exception_handler,
    auth_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    password_hashing_exception_handler,
    validation_error_handler,
    validation_exception_handler,
)
from app.managers import limiter, rate_limit_exceeded_handler
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import get_logger
from app.routes import auth_router, post_router
from app.schemas import HealthCheckResponse
from app.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Users, bearer-token auth, and posts with drafts, soft delete and search",
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
    swagger_ui_parameters={"docExpansion": "none", "operationsSorter": "method"},
)
app.state.limiter = limiter

# Starlette wraps in reverse order: ProxyHeaders runs first, CORS last.
configure_cors(app)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

for router in (auth_router, post_router):
    app.include_router(router)

# Most specific first; BaseAppError catches the remaining domain errors.
EXCEPTION_HANDLERS = (
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (Unauthorized, auth_exception_handler),
    (Forbidden, auth_exception_handler),
    (ValidationError, validation_error_handler),
    (BaseAppError, app_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (Exception, create_unhandled_exception_handler(get_logger(__name__))),
)
for exc_type, handler in EXCEPTION_HANDLERS:
    app.add_exception_handler(exc_type, handler)


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Service and database status",
    response_model=HealthCheckResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "degraded",
                        "version": "1.0.0",
                        "database": "unavailable",
                        "timestamp": "2026-01-01 00:00:00",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Report whether the API can reach its database.

    Always answers 200; an unreachable database turns ``status`` into
    ``degraded`` so load balancers can tell the process is alive.
    """
    database_ok = await check_db()
    return HealthCheckResponse(
        status="ok" if database_ok else "degraded",
        version=app.version,
        database="ok" if database_ok else "unavailable",
        timestamp=today_str(),
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Liveness banner",
    response_class=PlainTextResponse,
    responses={200: {"content": {"text/plain": {"example": "API is running..."}}}},
    operation_id="root_access",
)
async def root() -> PlainTextResponse:
    return PlainTextResponse("API is running...")
