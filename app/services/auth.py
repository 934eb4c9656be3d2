"""Authentication service handling registration, login and token issue."""

from datetime import timedelta
from logging import getLogger

from app.configs import file_logger, settings
from app.errors.auth import InvalidCredentialsError
from app.managers.password_manager import verify_password
from app.managers.token_manager import create_access_token
from app.models import UserDB
from app.repositories import UserRepository
from app.schemas.auth import Token
from app.schemas.user import UserCreate

logger = file_logger(getLogger(__name__))


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register_user(self, user: UserCreate) -> tuple[UserDB, Token]:
        """
        Create an account and issue its first access token.

        Args:
            user: Registration payload

        Returns:
            tuple[UserDB, Token]: The stored user and a bearer token

        Raises:
            DuplicateEntryError: If the email is already registered
        """
        db_user = await self.user_repo.create(user)
        logger.info(f"User {db_user.uuid} registered")
        return db_user, self.create_token_for_user(db_user)

    async def authenticate_user(self, email: str, password: str) -> UserDB:
        """
        Authenticate a user by email and password.

        Unknown emails still pay for a password verification so both failure
        modes take about as long.

        Args:
            email: User email
            password: User password

        Returns:
            UserDB: Authenticated user

        Raises:
            InvalidCredentialsError: If authentication fails
        """
        user = await self.user_repo.get_by_email(email)
        password_hash = user.password_hash if user else None

        if not await verify_password(password, password_hash) or user is None:
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError

        return user

    def create_token_for_user(self, user: UserDB) -> Token:
        """
        Create an access token for a user.

        Args:
            user: User entity

        Returns:
            Token: Token object with the access token
        """
        access_token = create_access_token(
            user_id=user.uuid,
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        return Token(access_token=access_token, token_type="bearer")
