"""User repository for database operations."""

from app.errors.database import DuplicateEntryError
from app.managers.password_manager import hash_password
from app.models.user import UserDB
from app.repositories.base import BaseRepository
from app.schemas.user import UserCreate


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Password hashing happens here, explicitly, before the row is written.
    """

    model = UserDB
    id_field = "uuid"

    async def create(self, user: UserCreate) -> UserDB:
        """
        Create a new user in the database.

        Args:
            user: Registration payload

        Returns:
            UserDB: Created user database model

        Raises:
            DuplicateEntryError: If the email is already registered
            DatabaseError: For other database errors
        """
        if await self._exists("email", user.email):
            raise DuplicateEntryError(detail=f"Email '{user.email}' is already registered")

        password_hash = await hash_password(user.password.get_secret_value())

        db_user = UserDB(
            name=user.name,
            email=user.email,
            password_hash=password_hash,
        )
        return await self._save(db_user)

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email (case-insensitive, emails are stored lowercased).

        Args:
            email: Email to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_field("email", email.lower())

    def _duplicate_message(self, reason: str) -> str:
        return "Email is already registered"
