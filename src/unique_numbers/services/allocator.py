"""Allocation of unique random numbers.

The allocator draws a random candidate from a fixed keyspace and asks the
store to insert it. The store's unique constraint is the only arbiter of
uniqueness: concurrent callers racing on the same draw see exactly one
successful insert, and the loser simply draws again. The allocator keeps no
shared state between calls and takes no locks.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final

from unique_numbers.db.time import days_before, utcnow
from unique_numbers.models.unique_number import UniqueNumber
from unique_numbers.repositories.number_repo import NumberRepository
from unique_numbers.services.errors import (
    AllocationExhaustedError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    NumberConflictError,
)

logger = logging.getLogger(__name__)

NUMBER_MIN: Final[int] = 111_111_111
NUMBER_MAX: Final[int] = 999_999_999
TOTAL_POSSIBLE: Final[int] = NUMBER_MAX - NUMBER_MIN + 1
MAX_ATTEMPTS: Final[int] = 10
DEFAULT_RETENTION_DAYS: Final[int] = 1825
# Literal string match only; this is not an authentication mechanism.
DELETE_ALL_CONFIRMATION: Final[str] = "DELETE_ALL_NUMBERS"
# Signed 64-bit range of the number column.
BIGINT_MIN: Final[int] = -(2**63)
BIGINT_MAX: Final[int] = 2**63 - 1


@dataclass(frozen=True)
class Allocated:
    """Successful allocation."""

    record: UniqueNumber
    attempts: int


@dataclass(frozen=True)
class Exhausted:
    """Every attempt collided with an already claimed number."""

    attempts: int


AllocationResult = Allocated | Exhausted


@dataclass(frozen=True)
class UtilizationStats:
    """Snapshot of how much of the keyspace has been claimed."""

    total_generated: int
    total_possible: int
    percentage_used: str


def format_percentage_used(total: int, total_possible: int = TOTAL_POSSIBLE) -> str:
    """Return the share of the keyspace in use as a percentage string.

    An empty store reports ``"0%"``; anything else is formatted with exactly
    six decimals, so a single row reads ``"0.000000%"``.
    """
    if total <= 0:
        return "0%"
    return f"{total / total_possible * 100:.6f}%"


class NumberAllocator:
    """Service issuing and managing unique numbers on top of a repository."""

    def __init__(
        self,
        repo: NumberRepository,
        *,
        rng: random.Random | None = None,
        number_min: int = NUMBER_MIN,
        number_max: int = NUMBER_MAX,
        max_attempts: int = MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if number_min > number_max:
            raise ValueError("number_min must not exceed number_max")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._repo = repo
        self._rng = rng or random.SystemRandom()
        self._number_min = number_min
        self._number_max = number_max
        self._max_attempts = max_attempts
        self._clock = clock

    @property
    def total_possible(self) -> int:
        """Size of the keyspace served by this allocator."""
        return self._number_max - self._number_min + 1

    def draw(self) -> int:
        """Return a candidate drawn uniformly from the closed keyspace."""
        return self._rng.randint(self._number_min, self._number_max)

    def allocate(self, bubble_id: str | None = None) -> AllocationResult:
        """Claim a previously unused number.

        Args:
            bubble_id: Optional annotation stored with the claimed number.

        Returns:
            ``Allocated`` with the persisted row, or ``Exhausted`` when every
            attempt hit an existing number.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: Any store failure other than a
                uniqueness conflict, propagated unchanged.
        """
        for attempt in range(1, self._max_attempts + 1):
            candidate = self.draw()
            try:
                record = self._repo.insert(candidate, bubble_id=bubble_id)
            except NumberConflictError:
                logger.warning(
                    "Number %s already exists, retrying (attempt %d/%d)",
                    candidate,
                    attempt,
                    self._max_attempts,
                )
                continue
            logger.info("Generated number %s after %d attempt(s)", record.number, attempt)
            return Allocated(record=record, attempts=attempt)

        logger.error("Gave up generating a number after %d attempts", self._max_attempts)
        return Exhausted(attempts=self._max_attempts)

    def generate(self, bubble_id: str | None = None) -> UniqueNumber:
        """Claim a number or raise if the keyspace looks saturated.

        Raises:
            AllocationExhaustedError: If every attempt collided.
        """
        result = self.allocate(bubble_id=bubble_id)
        if isinstance(result, Exhausted):
            raise AllocationExhaustedError(result.attempts)
        return result.record

    def exists(self, number: int) -> tuple[bool, UniqueNumber | None]:
        """Return whether ``number`` is claimed, together with its row.

        Values that cannot fit the BIGINT column are never stored, so they are
        reported absent without a query.
        """
        if not BIGINT_MIN <= number <= BIGINT_MAX:
            return False, None
        record = self._repo.get_by_number(number)
        return record is not None, record

    def stats(self) -> UtilizationStats:
        """Return keyspace utilisation figures."""
        total = self._repo.count()
        return UtilizationStats(
            total_generated=total,
            total_possible=self.total_possible,
            percentage_used=format_percentage_used(total, self.total_possible),
        )

    def delete(self, number: int) -> dict[str, Any]:
        """Delete a single claimed number.

        Raises:
            InvalidArgumentError: If ``number`` lies outside the keyspace.
            NotFoundError: If ``number`` is not claimed.
        """
        if not self._number_min <= number <= self._number_max:
            raise InvalidArgumentError(
                f"Number must be between {self._number_min} and {self._number_max}"
            )
        deleted = self._repo.delete_by_number(number)
        if deleted is None:
            raise NotFoundError(f"Number {number} not found")
        logger.info("Deleted number %s", number)
        return deleted

    def delete_older_than(self, days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Delete numbers created more than ``days`` days ago.

        Raises:
            InvalidArgumentError: If ``days`` is negative.
        """
        if days < 0:
            raise InvalidArgumentError("Days must be a non-negative integer")
        threshold = days_before(self._clock(), days)
        deleted = self._repo.delete_older_than(threshold)
        logger.info("Deleted %d number(s) older than %d day(s)", deleted, days)
        return deleted

    def delete_all(self, confirmation_token: object) -> int:
        """Delete every claimed number.

        Raises:
            ForbiddenError: Unless ``confirmation_token`` equals the sentinel.
        """
        if confirmation_token != DELETE_ALL_CONFIRMATION:
            logger.warning("Refused delete-all request without valid confirmation token")
            raise ForbiddenError(
                f"Confirmation required: send confirmationToken={DELETE_ALL_CONFIRMATION!r}"
            )
        deleted = self._repo.delete_all()
        logger.warning("Deleted all %d number(s)", deleted)
        return deleted
