# src/unique_numbers/models/__init__.py
"""SQLAlchemy models for the unique number service."""

from .unique_number import UniqueNumber

__all__ = ["UniqueNumber"]
