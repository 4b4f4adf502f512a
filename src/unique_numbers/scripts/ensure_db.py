"""Utility script to prepare the configured database."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql

from unique_numbers.core.settings import settings

logger = logging.getLogger("unique_numbers.ensure_db")


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    - Strips quotes and whitespace.
    - Converts SQLAlchemy schemes (postgresql+*) and the short ``postgres``
      scheme to plain "postgresql".
    """
    uri = (uri or "").strip()
    if (uri.startswith("'") and uri.endswith("'")) or (uri.startswith('"') and uri.endswith('"')):
        uri = uri[1:-1]
    if not uri:
        raise ValueError("DATABASE_URL is empty")

    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme == "postgres" or scheme.startswith("postgresql+"):
        scheme = "postgresql"
    if scheme != "postgresql":
        raise ValueError(f"Not a PostgreSQL DATABASE_URL: {uri!r}")

    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def split_db_url(db_url: str) -> tuple[str, str]:
    """Return `(admin_url, target_db)` using the maintenance database."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    target_db = parts.path.lstrip("/") or "postgres"

    if parts.netloc:
        admin_url = urlunsplit(
            ("postgresql", parts.netloc, "/postgres", parts.query, parts.fragment)
        )
    else:
        # hostless/local-socket style
        admin_url = "postgresql:///postgres"

    return admin_url, target_db


def ensure_database_exists(db_url: str) -> None:
    """Create the configured database if it is missing."""
    admin_url, target_db = split_db_url(db_url)

    if os.getenv("ENSURE_DB_DEBUG") == "1":
        logger.info("admin_url=%r target_db=%r", admin_url, target_db)

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            logger.info("created database %s", target_db)
        else:
            logger.info("database %s already exists", target_db)


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database and schema exist")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop the unique_numbers table before recreating it.",
    )
    parser.add_argument(
        "--skip-create-database",
        action="store_true",
        help="Only create the schema; assume the database already exists.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level.upper(), format="[ensure_db] %(message)s")

    # Imported late so the engine is only built once settings are final.
    from unique_numbers.db.session import create_tables, drop_tables

    raw_url = settings.effective_database_url
    try:
        if raw_url.startswith("postgresql") and not args.skip_create_database:
            ensure_database_exists(raw_url)
        if args.drop_tables:
            drop_tables()
            logger.info("dropped tables")
        create_tables()
        logger.info("schema is up to date")
    except Exception as exc:
        logger.error("ERROR: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
