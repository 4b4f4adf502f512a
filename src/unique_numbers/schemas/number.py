# src/unique_numbers/schemas/number.py
"""Number-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NumberCreate(BaseModel):
    """Optional body accepted when generating a number."""

    bubble_id: str | None = Field(None, description="Free-text annotation stored with the number")


class NumberOut(BaseModel):
    """Schema for a claimed number returned by the API."""

    id: int
    number: int
    created_at: datetime
    bubble_id: str | None = None

    model_config = ConfigDict(from_attributes=True)


class GenerateResponse(BaseModel):
    """Response body for a freshly generated number."""

    success: bool = True
    data: NumberOut


class CheckResponse(BaseModel):
    """Response body for an existence check."""

    success: bool = True
    exists: bool
    data: NumberOut | None = None


class StatsOut(BaseModel):
    """Keyspace utilisation figures."""

    total_generated: int
    total_possible: int
    percentage_used: str


class StatsResponse(BaseModel):
    """Response body for the statistics endpoint."""

    success: bool = True
    data: StatsOut


class DeleteResponse(BaseModel):
    """Response body for a single-number delete."""

    success: bool = True
    message: str
    data: NumberOut


class BulkDeleteResponse(BaseModel):
    """Response body for deletes affecting many rows."""

    success: bool = True
    message: str
    deleted_count: int


class DeleteAllRequest(BaseModel):
    """Body required to wipe every claimed number."""

    # Any JSON value is accepted; only the exact string matches.
    confirmation_token: Any = Field(
        None,
        alias="confirmationToken",
        description="Must equal DELETE_ALL_NUMBERS",
    )

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Envelope used for every failure."""

    success: bool = False
    error: str
