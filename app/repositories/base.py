"""Shared persistence plumbing for the user and post repositories."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlmodel import SQLModel

from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
)
from app.errors.validation import ValidationError

type FilterValue = str | int | float | bool | UUID | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Lookups and writes common to every table.

    Subclasses set ``model`` and, when the primary key is not ``id``,
    ``id_field``. Writes are flushed but never committed here: the request
    scoped session (``get_session``) owns the transaction.
    """

    model: type[ModelT]
    id_field: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _column(self, name: str) -> InstrumentedAttribute:
        return getattr(self.model, name)

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        """Primary-key lookup; None when absent."""
        return await self.get_by_field(self.id_field, record_id)

    async def get_by_field(self, field_name: str, value: FilterValue) -> ModelT | None:
        """Single-row lookup on a unique column; None when absent."""
        result = await self.session.execute(
            select(self.model).where(self._column(field_name) == value),
        )
        return result.scalar_one_or_none()

    async def _exists(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Whether any row other than ``exclude_id`` holds ``value`` in ``field_name``.

        Used as the friendly pre-check in front of unique constraints.
        """
        statement = select(1).where(self._column(field_name) == value)
        if exclude_id is not None:
            statement = statement.where(self._column(self.id_field) != exclude_id)
        result = await self.session.execute(statement.limit(1))
        return result.first() is not None

    async def _save(self, record: ModelT) -> ModelT:
        """
        Flush ``record`` and reload server-side state into it.

        Raises:
            DuplicateEntryError: A unique constraint rejected the row (400)
            ValidationError: A value the column cannot hold (400)
            DatabaseError: Any other integrity violation
            DatabaseConnectionError: Driver or connection failure
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            reason = str(e.orig or e)
            if "unique" in reason.lower() or "duplicate" in reason.lower():
                raise DuplicateEntryError(detail=self._duplicate_message(reason)) from e
            raise DatabaseError(detail=f"Integrity error while saving {self.model.__name__}") from e
        except DataError as e:
            await self.session.rollback()
            raise ValidationError(
                detail=f"{self.model.__name__} holds a value the column cannot store",
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseConnectionError(
                detail=f"Failed to save {self.model.__name__}",
            ) from e
        return record

    def _duplicate_message(self, reason: str) -> str:
        return f"{self.model.__name__} already exists"
