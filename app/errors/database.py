"""Persistence errors: lookups that miss, constraint conflicts and driver failures."""

from logging import getLogger

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """Any failure surfaced by the persistence layer (500 unless narrowed)."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    def __init__(self, detail: str = "Failed to connect to the database") -> None:
        super().__init__(detail)


class DatabaseInitializationError(DatabaseError):
    def __init__(self, detail: str = "Failed to initialize database") -> None:
        super().__init__(detail)


class DuplicateEntryError(DatabaseError):
    """A unique value (post slug, user email) is already taken."""

    def __init__(self, detail: str = "A record with this value already exists") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class RecordNotFoundError(DatabaseError):
    """The addressed record is absent, or hidden from the caller (soft-deleted, draft)."""

    def __init__(self, detail: str = "Record not found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


NotFound = RecordNotFoundError

database_exception_handler = create_exception_handler(logger)
