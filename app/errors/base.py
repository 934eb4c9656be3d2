"""
Root of the application error taxonomy and the handler factories.

Every error a client can see is a ``BaseAppError`` carrying its own HTTP
status; handlers render it as ``{"message": detail}`` plus any public
attributes the subclass adds (``errors`` for validation failures).
"""

from collections.abc import Awaitable, Callable
from logging import Logger, getLogger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.configs.settings import DEFAULT_ERROR_MESSAGE, file_logger
from app.utils.helpers import host

type ExceptionHandler = Callable[[Request, Exception], Awaitable[ORJSONResponse]]

_RESERVED = frozenset({"detail", "status_code"})


class BaseAppError(Exception):
    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


class InternalError(BaseAppError):
    """A broken invariant on our side; the client only sees a generic 500."""

    def __init__(self, detail: str = DEFAULT_ERROR_MESSAGE) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


def error_body(exc: Exception) -> dict[str, object]:
    """``{"message": ...}`` plus the public extras of ``exc``."""
    body: dict[str, object] = {"message": getattr(exc, "detail", "Internal Server Error")}
    body.update(
        (key, value)
        for key, value in vars(exc).items()
        if key not in _RESERVED and not key.startswith("_")
    )
    return body


def create_exception_handler(logger: Logger) -> ExceptionHandler:
    """
    Build a handler that answers with the error's own status and message.

    Args:
        logger: Where the rejected request is reported (warning level).
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        body = error_body(exc)
        logger.warning(f"{body['message']} for ip: {host(request)} for endpoint {request.url.path}")
        return ORJSONResponse(content=body, status_code=status_code)

    return handler


def create_unhandled_exception_handler(logger: Logger) -> ExceptionHandler:
    """
    Build the catch-all for exceptions no other handler claimed.

    The traceback goes to the log; the client gets a generic 500 message.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.error(
            f"Unhandled {type(exc).__name__} for ip: {host(request)} "
            f"for endpoint {request.url.path}",
            exc_info=exc,
        )
        return ORJSONResponse(
            content={"message": DEFAULT_ERROR_MESSAGE},
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return handler


app_exception_handler = create_exception_handler(file_logger(getLogger(__name__)))
