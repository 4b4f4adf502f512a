"""Delete numbers older than a retention window; meant to run from cron."""
from __future__ import annotations

import argparse
import logging

from unique_numbers.core.settings import settings
from unique_numbers.db.session import SessionLocal
from unique_numbers.repositories.number_repo import NumberRepository
from unique_numbers.services.allocator import DEFAULT_RETENTION_DAYS, NumberAllocator

logger = logging.getLogger("unique_numbers.purge")


def purge(days: int) -> int:
    """Delete numbers created more than ``days`` days ago and return the count."""
    with SessionLocal() as session:
        allocator = NumberAllocator(NumberRepository(session))
        return allocator.delete_older_than(days)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Purge old unique numbers")
    parser.add_argument(
        "--days",
        type=int,
        default=DEFAULT_RETENTION_DAYS,
        help=f"Retention window in days (default: {DEFAULT_RETENTION_DAYS})",
    )
    args = parser.parse_args(argv)
    if args.days < 0:
        parser.error("--days must be a non-negative integer")

    logging.basicConfig(level=settings.log_level.upper(), format="[purge] %(message)s")
    deleted = purge(args.days)
    logger.info("deleted %d number(s) older than %d day(s)", deleted, args.days)


if __name__ == "__main__":
    main()
