# src/unique_numbers/api/endpoints/numbers.py
"""Number allocation and maintenance endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, Query

from unique_numbers.api.dependencies import AllocatorDep
from unique_numbers.schemas.number import (
    BulkDeleteResponse,
    CheckResponse,
    DeleteAllRequest,
    DeleteResponse,
    GenerateResponse,
    NumberCreate,
    NumberOut,
    StatsOut,
    StatsResponse,
)
from unique_numbers.services.allocator import DEFAULT_RETENTION_DAYS

router = APIRouter(tags=["numbers"])

# Sync endpoints run in the threadpool; uniqueness relies solely on the table constraint.


@router.post("/generate-number", response_model=GenerateResponse)
def generate_number(
    allocator: AllocatorDep,
    payload: Annotated[NumberCreate | None, Body()] = None,
) -> GenerateResponse:
    """Generate and persist a new unique number.

    Args:
        allocator: Number allocator bound to the request session
        payload: Optional body carrying a ``bubble_id`` annotation

    Returns:
        The claimed number with its id and creation time

    Raises:
        AllocationExhaustedError: If every attempt collided
    """
    bubble_id = payload.bubble_id if payload is not None else None
    record = allocator.generate(bubble_id=bubble_id)
    return GenerateResponse(data=NumberOut.model_validate(record))


@router.get("/check-number/{number}", response_model=CheckResponse)
def check_number(number: int, allocator: AllocatorDep) -> CheckResponse:
    """Report whether ``number`` has already been issued."""
    exists, record = allocator.exists(number)
    data = NumberOut.model_validate(record) if record is not None else None
    return CheckResponse(exists=exists, data=data)


@router.get("/stats", response_model=StatsResponse)
def get_stats(allocator: AllocatorDep) -> StatsResponse:
    """Return how much of the keyspace has been consumed."""
    stats = allocator.stats()
    return StatsResponse(
        data=StatsOut(
            total_generated=stats.total_generated,
            total_possible=stats.total_possible,
            percentage_used=stats.percentage_used,
        )
    )


@router.delete("/delete-number/{number}", response_model=DeleteResponse)
def delete_number(number: int, allocator: AllocatorDep) -> DeleteResponse:
    """Delete a single issued number.

    Raises:
        InvalidArgumentError: If the number lies outside the keyspace
        NotFoundError: If the number was never issued
    """
    deleted = allocator.delete(number)
    return DeleteResponse(
        message=f"Number {number} deleted",
        data=NumberOut.model_validate(deleted),
    )


@router.delete("/delete-old-numbers", response_model=BulkDeleteResponse)
def delete_old_numbers(
    allocator: AllocatorDep,
    days: int = Query(
        DEFAULT_RETENTION_DAYS,
        ge=0,
        description="Delete numbers created more than this many days ago",
    ),
) -> BulkDeleteResponse:
    """Purge numbers older than ``days`` days."""
    deleted = allocator.delete_older_than(days)
    return BulkDeleteResponse(
        message=f"Deleted {deleted} number(s) older than {days} day(s)",
        deleted_count=deleted,
    )


@router.delete("/delete-all-numbers", response_model=BulkDeleteResponse)
def delete_all_numbers(
    allocator: AllocatorDep,
    payload: Annotated[DeleteAllRequest | None, Body()] = None,
) -> BulkDeleteResponse:
    """Delete every issued number.

    The literal confirmation token is the only safeguard on this call.

    Raises:
        ForbiddenError: If the confirmation token is missing or wrong
    """
    token = payload.confirmation_token if payload is not None else None
    deleted = allocator.delete_all(token)
    return BulkDeleteResponse(
        message=f"Deleted all {deleted} number(s)",
        deleted_count=deleted,
    )
