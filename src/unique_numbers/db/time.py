"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta

# Earliest instant representable by the database driver.
EPOCH_FLOOR = datetime.min.replace(tzinfo=UTC)


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def days_before(moment: datetime, days: int) -> datetime:
    """Return the instant ``days`` whole days before ``moment``.

    Windows reaching past year 1 clamp to ``EPOCH_FLOOR``.
    """
    try:
        return moment - timedelta(days=days)
    except OverflowError:
        return EPOCH_FLOOR
