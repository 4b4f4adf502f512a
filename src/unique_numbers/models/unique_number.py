# src/unique_numbers/models/unique_number.py
"""SQLAlchemy model for claimed numbers."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from unique_numbers.db.session import Base


class UniqueNumber(Base):
    """A number claimed by the allocator.

    Rows are immutable once inserted. Global uniqueness of ``number`` is
    enforced by the table constraint, never by application code.
    """

    __tablename__ = "unique_numbers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    number: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    # Opaque caller annotation, never read by the allocator.
    bubble_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"UniqueNumber(id={self.id!r}, number={self.number!r})"
