# src/unique_numbers/api/endpoints/__init__.py
"""API endpoint modules."""

from .numbers import router as numbers_router
from .system import router as system_router

__all__ = [
    "numbers_router",
    "system_router",
]
