"""Data access helpers for working with claimed numbers."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unique_numbers.models.unique_number import UniqueNumber
from unique_numbers.services.errors import NumberConflictError

__all__ = ["NumberRepository", "is_unique_violation"]

# PostgreSQL SQLSTATE for unique_violation.
UNIQUE_VIOLATION = "23505"
_SQLITE_UNIQUE_ERRORNAMES = {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True if ``exc`` was caused by a uniqueness constraint.

    Args:
        exc: Integrity error raised by SQLAlchemy during a flush or commit.

    Returns:
        Whether the underlying DBAPI error reports a unique violation.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION
    errorname = getattr(orig, "sqlite_errorname", None)
    if errorname is not None:
        return errorname in _SQLITE_UNIQUE_ERRORNAMES
    return "UNIQUE constraint failed" in str(orig)


class NumberRepository:
    """Thin wrapper around database access for claimed numbers.

    Every method issues a single statement and commits it on its own, so a
    failed insert never leaves a half-finished transaction behind.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def insert(self, number: int, bubble_id: str | None = None) -> UniqueNumber:
        """Insert a new number and return the persisted ORM instance.

        Args:
            number: Candidate number to claim.
            bubble_id: Optional caller annotation stored alongside the number.

        Raises:
            NumberConflictError: If the number is already claimed.
            sqlalchemy.exc.SQLAlchemyError: For any other persistence failure.
        """
        row = UniqueNumber(number=number, bubble_id=bubble_id)
        self.session.add(row)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if is_unique_violation(exc):
                raise NumberConflictError(number) from exc
            raise
        self.session.refresh(row)
        return row

    def get_by_number(self, number: int) -> UniqueNumber | None:
        """Return the row holding ``number``, if any."""
        return self.session.scalars(
            select(UniqueNumber).where(UniqueNumber.number == number)
        ).first()

    def count(self) -> int:
        """Return the number of claimed numbers."""
        total = self.session.scalar(select(func.count()).select_from(UniqueNumber))
        return int(total or 0)

    def delete_by_number(self, number: int) -> dict[str, Any] | None:
        """Delete the row holding ``number`` and return its column values."""
        result = self.session.execute(
            delete(UniqueNumber)
            .where(UniqueNumber.number == number)
            .returning(
                UniqueNumber.id,
                UniqueNumber.number,
                UniqueNumber.created_at,
                UniqueNumber.bubble_id,
            )
            .execution_options(synchronize_session=False)
        )
        deleted = result.mappings().first()
        self.session.commit()
        return dict(deleted) if deleted is not None else None

    def delete_older_than(self, threshold: datetime) -> int:
        """Delete rows created before ``threshold`` and return how many went."""
        result = self.session.execute(
            delete(UniqueNumber)
            .where(UniqueNumber.created_at < threshold)
            .execution_options(synchronize_session=False)
        )
        deleted = int(result.rowcount or 0)
        self.session.commit()
        return deleted

    def delete_all(self) -> int:
        """Delete every row and return how many were removed."""
        result = self.session.execute(
            delete(UniqueNumber).execution_options(synchronize_session=False)
        )
        deleted = int(result.rowcount or 0)
        self.session.commit()
        return deleted
