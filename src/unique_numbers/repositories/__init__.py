"""Repositories wrapping database access."""

from .number_repo import NumberRepository

__all__ = ["NumberRepository"]
