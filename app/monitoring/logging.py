"""
Structured logging for the Blog API.

structlog is wired on top of the standard library so that both
``get_logger(__name__)`` (structlog) and ``file_logger(getLogger(__name__))``
(stdlib) records pass through one processor chain:

- console rendering with rich tracebacks in development, JSON elsewhere
- request/user correlation ids merged from contextvars
- credentials never reach a sink: password and token fields are masked by
  key, bearer tokens and email addresses by pattern, and control characters
  are escaped against log injection

Examples
--------
>>> from app.monitoring import get_logger
>>> logger = get_logger("app.services.post")
>>> logger.info("Post created", post_id="123")
"""

from logging import Filter, Formatter, LogRecord, StreamHandler, root
from logging.handlers import RotatingFileHandler
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    merge_contextvars,
)
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from app.configs.settings import file_logger, settings
from app.utils.helpers import today_str

REDACTED = "[REDACTED]"

# Event keys and HTTP headers whose values are always masked
SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "password_hash",
        "token",
        "access_token",
        "secret_key",
        "authorization",
        "cookie",
        "proxy-authorization",
    },
)

# JWT first: a token payload can contain something that looks like an email
_JWT = re_compile(r"eyJ[\w-]*\.eyJ[\w-]*\.[\w-]*")
_EMAIL = re_compile(r"[\w.%+-]+@[\w.-]+\.[a-zA-Z]{2,}")

_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape control characters so one event stays on one line.

    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(_ESCAPES)


def redact_pii(message: str) -> str:
    """
    Mask bearer tokens and email addresses inside free text.

    >>> redact_pii("Login for user@example.com")
    'Login for [REDACTED_EMAIL]'
    """
    message = _JWT.sub("[REDACTED_JWT]", message)
    return _EMAIL.sub("[REDACTED_EMAIL]", message)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """
    Mask credential-bearing headers.

    >>> sanitize_headers({"Authorization": "Bearer abc", "Accept": "json"})
    {'Authorization': '[REDACTED]', 'Accept': 'json'}
    """
    return {k: REDACTED if k.lower() in SENSITIVE_KEYS else v for k, v in headers.items()}


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict.setdefault("timestamp", today_str())
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask sensitive keys, then scrub every remaining string value."""
    for key, value in event_dict.items():
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = redact_pii(sanitize_log_message(value))
        elif key == "headers" and isinstance(value, dict):
            event_dict[key] = sanitize_headers(value)
    return event_dict


def get_renderer(*, colors: bool = True) -> Processor:
    """ConsoleRenderer with rich tracebacks in development, JSONRenderer otherwise."""
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer()


def _formatter(renderer: Processor) -> Formatter:
    return ProcessorFormatter(
        processors=[
            ProcessorFormatter.remove_processors_meta,
            add_timestamp,
            sanitize_event_dict,
            renderer,
        ],
        # stdlib records (uvicorn, sqlalchemy, file_logger users) start here
        foreign_pre_chain=[
            merge_contextvars,
            add_log_level,
            add_logger_name,
            ExtraAdder(),
        ],
    )


def configure_logging() -> None:
    """
    Configure structlog and the root handlers.

    Safe to call more than once: root handlers are replaced, not stacked.
    """
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    console = StreamHandler()
    console.setFormatter(_formatter(get_renderer(colors=True)))
    console.addFilter(RequestIdFilter())
    root.addHandler(console)

    # The rotating file always gets JSON, whatever the console shows
    file_logger(root)
    for handler in root.handlers:
        if isinstance(handler, RotatingFileHandler):
            handler.setFormatter(_formatter(JSONRenderer()))


def get_logger(name: str) -> BoundLogger:
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    bind_contextvars(request_id=request_id)


def bind_user_id(user_id: str) -> None:
    """Attach the authenticated caller to every event logged for this request."""
    bind_contextvars(user_id=user_id)


def get_request_id() -> str | None:
    return get_contextvars().get("request_id")


def clear_context() -> None:
    clear_contextvars()


class RequestIdFilter(Filter):
    """Expose the bound request id as ``record.request_id`` for plain formatters."""

    def filter(self, record: LogRecord) -> bool:
        record.request_id = get_contextvars().get("request_id", "-")
        return True
