from app.managers.password_manager import (
    PasswordHasher,
    get_password_hasher,
    hash_password,
    verify_password,
)
from app.managers.rate_limiter import (
    AUTH_LIMIT,
    POST_CREATE_LIMIT,
    limiter,
    rate_limit_exceeded_handler,
)
from app.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "AUTH_LIMIT",
    "POST_CREATE_LIMIT",
    "PasswordHasher",
    "create_access_token",
    "decode_access_token",
    "get_password_hasher",
    "hash_password",
    "limiter",
    "rate_limit_exceeded_handler",
    "verify_password",
]
