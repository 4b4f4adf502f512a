# src/unique_numbers/api/__init__.py
"""HTTP API for the unique number service."""

from .endpoints import numbers_router, system_router
from .errors import install_error_handlers

__all__ = [
    "install_error_handlers",
    "numbers_router",
    "system_router",
]
