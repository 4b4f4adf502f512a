"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from unique_numbers.db.session import get_db
from unique_numbers.repositories.number_repo import NumberRepository
from unique_numbers.services.allocator import NumberAllocator

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_allocator(db: SessionDep) -> NumberAllocator:
    """Build an allocator bound to the request's database session.

    Args:
        db: Database session

    Returns:
        NumberAllocator backed by a repository on ``db``
    """
    return NumberAllocator(NumberRepository(db))


AllocatorDep = Annotated[NumberAllocator, Depends(get_allocator)]
