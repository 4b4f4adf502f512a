"""Pydantic schemas for the unique number API."""

from .number import (
    BulkDeleteResponse,
    CheckResponse,
    DeleteAllRequest,
    DeleteResponse,
    ErrorResponse,
    GenerateResponse,
    NumberCreate,
    NumberOut,
    StatsOut,
    StatsResponse,
)

__all__ = [
    "BulkDeleteResponse",
    "CheckResponse",
    "DeleteAllRequest",
    "DeleteResponse",
    "ErrorResponse",
    "GenerateResponse",
    "NumberCreate",
    "NumberOut",
    "StatsOut",
    "StatsResponse",
]
