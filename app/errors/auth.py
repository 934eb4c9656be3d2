"""Authentication and authorization errors."""

from logging import getLogger

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.configs import file_logger, settings
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class Unauthorized(BaseAppError):
    """Raised when the bearer token is missing, invalid or names an unknown user."""

    def __init__(
        self,
        detail: str = "Not authorized",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class InvalidCredentialsError(Unauthorized):
    """Raised when login credentials are invalid."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class Forbidden(BaseAppError):
    """Raised when an authenticated caller does not own the resource."""

    def __init__(self, detail: str = "Not authorized to modify this post") -> None:
        status_code = HTTP_401_UNAUTHORIZED if settings.LEGACY_OWNERSHIP_401 else HTTP_403_FORBIDDEN
        super().__init__(detail, status_code)


auth_exception_handler = create_exception_handler(logger)
