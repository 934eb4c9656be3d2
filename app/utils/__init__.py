"""Utility helper functions."""

from app.utils.helpers import (
    generate_slug,
    host,
    parse_positive_int,
    time_taken,
    today_str,
    utc_now,
)

__all__ = [
    "generate_slug",
    "host",
    "parse_positive_int",
    "time_taken",
    "today_str",
    "utc_now",
]
