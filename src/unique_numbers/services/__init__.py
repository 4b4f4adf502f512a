"""Service layer for the unique number service."""
