from logging import getLogger

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class PasswordHashingError(BaseAppError):
    """The argon2 backend failed; retried before surfacing as a 500."""

    def __init__(self, detail: str = "Could not process the password") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


password_hashing_exception_handler = create_exception_handler(logger)
