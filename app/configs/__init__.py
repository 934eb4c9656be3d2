from app.configs.settings import (
    CONFIG_MAP,
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE,
    MAX_PAGE_LIMIT,
    LimiterConfig,
    file_logger,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_LIMIT",
    "MAX_PAGE",
    "MAX_PAGE_LIMIT",
    "LimiterConfig",
    "file_logger",
    "settings",
]
