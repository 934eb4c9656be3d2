from datetime import UTC, datetime
from re import sub
from time import perf_counter

from fastapi import Request


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(tz=UTC)


def time_taken(start_time: float) -> str:
    minutes, seconds = divmod(perf_counter() - start_time, 60)
    return f"{int(minutes)}m {int(seconds)}s"


def generate_slug(title: str) -> str:
    """
    Derive a URL-safe, lowercase slug from a post title.

    Characters outside ``[a-z0-9]``, whitespace and ``-`` are dropped,
    whitespace runs become a single ``-`` and repeated or edge hyphens are
    collapsed/stripped.

    Args:
        title: Post title.

    Returns:
        str: The slug, possibly empty when the title has no usable characters.

    Example:
        >>> generate_slug("Hello World")
        'hello-world'
    """
    slug = title.strip().lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")


def parse_positive_int(value: str | int | None, default: int, maximum: int | None = None) -> int:
    """
    Parse a query value as a positive integer, falling back to ``default``.

    Absent, non-numeric and non-positive values all yield ``default``;
    values above ``maximum`` are clamped to it.
    """
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    if parsed <= 0:
        return default
    return parsed if maximum is None else min(parsed, maximum)
