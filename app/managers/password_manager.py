"""
Credential hashing for user accounts (Argon2id via passlib).

The cost profile comes from ``PASSWORD_SECURITY_LEVEL``. Hashing and
verification are CPU bound, so the coroutines below push them onto a small
thread pool and the event loop keeps serving requests.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor
from functools import cache

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from app.configs import CONFIG_MAP, settings
from app.decorators.with_retry import with_retry
from app.errors.password_hasher import PasswordHashingError
from app.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="password-hasher")
logger = get_logger(__name__)


class PasswordHasher:
    """
    Argon2id hasher for one cost level.

    Hashes produced with pbkdf2_sha256 still verify (deprecated scheme) so
    accounts imported from older stores keep working.
    """

    def __init__(self, level: str | None = None) -> None:
        self.level = level or settings.PASSWORD_SECURITY_LEVEL
        cost = CONFIG_MAP[self.level]
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=cost.memory_cost,
            argon2__time_cost=cost.time_cost,
            argon2__parallelism=cost.parallelism,
        )
        logger.info("Password hasher ready", scheme="argon2id", level=self.level)

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        >>> PasswordHasher("low").hash("secret123")  # doctest: +SKIP
        '$argon2id$v=19$m=8192,t=1,p=1$...'

        Raises:
            ValueError: If ``password`` is empty
            PasswordHashingError: If the argon2 backend fails
        """
        if not password:
            mssg = "Password cannot be empty"
            raise ValueError(mssg)
        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Argon2 backend could not hash the password")
            raise PasswordHashingError from e

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """
        Check ``password`` against a stored hash.

        With no stored hash (unknown account) a dummy verification still
        runs, so a miss costs as much time as a wrong password.
        """
        if not hashed_password or not hashed_password.strip():
            self.pwd_context.dummy_verify()
            return False
        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            logger.exception("Stored password hash is malformed")
            return False


@cache
def get_password_hasher() -> PasswordHasher:
    """Process-wide hasher at the configured level."""
    return PasswordHasher()


@with_retry(base_delay=0.1, max_delay=1, retry_on=PasswordHashingError)
async def hash_password(password: str) -> str:
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str | None) -> bool:
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify,
        password,
        hashed_password,
    )
