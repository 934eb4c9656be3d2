"""400 responses for malformed input, raised by us or by FastAPI's request parsing."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler
from app.utils.helpers import host

logger = file_logger(getLogger(__name__))

# Leading loc segment naming where the value came from, not the field itself.
_SOURCES = frozenset({"body", "query", "path", "header"})


class ValidationError(BaseAppError):
    """Client input is missing or malformed. ``errors`` lists per-field problems."""

    def __init__(self, detail: str = "Validation Error", errors: list[dict] | None = None) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []


def _jsonable_ctx(ctx: dict) -> dict:
    return {
        key: str(value) if isinstance(value, Exception) else value for key, value in ctx.items()
    }


def format_errors(errors: list[dict]) -> list[dict]:
    """Reduce pydantic error dicts to ``{field, message, type[, context]}``."""
    formatted = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _SOURCES:
            del loc[0]
        entry = {
            "field": ".".join(map(str, loc)),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        if "ctx" in error:
            entry["context"] = _jsonable_ctx(error["ctx"])
        formatted.append(entry)
    return formatted


def summarize_errors(formatted: list[dict]) -> str:
    """Join formatted errors into one ``field: message; ...`` line."""
    if not formatted:
        return "Validation failed"
    return "; ".join(
        f"{e['field']}: {e['message'].removeprefix('Value error, ')}"
        if e["field"]
        else e["message"].removeprefix("Value error, ")
        for e in formatted
    )


async def validation_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """FastAPI ``RequestValidationError`` → 400 ``{message, errors}``."""
    errors = format_errors(list(cast(RequestValidationError, exc).errors()))
    logger.warning(f"Rejected input from ip: {host(request)} on {request.url.path}: {errors}")
    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"message": summarize_errors(errors), "errors": errors},
    )


validation_error_handler = create_exception_handler(logger)
