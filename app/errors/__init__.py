from app.errors.auth import (
    Forbidden,
    InvalidCredentialsError,
    Unauthorized,
    auth_exception_handler,
)
from app.errors.base import (
    BaseAppError,
    InternalError,
    app_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
)
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    NotFound,
    RecordNotFoundError,
    database_exception_handler,
)
from app.errors.password_hasher import PasswordHashingError, password_hashing_exception_handler
from app.errors.validation import (
    ValidationError,
    validation_error_handler,
    validation_exception_handler,
)

__all__ = [
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "Forbidden",
    "InternalError",
    "InvalidCredentialsError",
    "NotFound",
    "PasswordHashingError",
    "RecordNotFoundError",
    "Unauthorized",
    "ValidationError",
    "app_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "password_hashing_exception_handler",
    "validation_error_handler",
    "validation_exception_handler",
]
