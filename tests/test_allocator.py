# tests/test_allocator.py
"""Tests for the number allocator service."""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from tests.conftest import ScriptedRandom
from unique_numbers.db.time import EPOCH_FLOOR, days_before, utcnow
from unique_numbers.models import UniqueNumber
from unique_numbers.services.allocator import (
    BIGINT_MAX,
    BIGINT_MIN,
    DELETE_ALL_CONFIRMATION,
    MAX_ATTEMPTS,
    NUMBER_MAX,
    NUMBER_MIN,
    TOTAL_POSSIBLE,
    Allocated,
    Exhausted,
    NumberAllocator,
    format_percentage_used,
)
from unique_numbers.services.errors import (
    AllocationExhaustedError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    NumberConflictError,
)


class ConflictingRepository:
    """Repository stub whose inserts always collide."""

    def __init__(self) -> None:
        self.inserts = 0

    def insert(self, number, bubble_id=None):
        self.inserts += 1
        raise NumberConflictError(number)


class FailingRepository:
    """Repository stub whose every call fails like an unreachable database."""

    def __init__(self) -> None:
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise OperationalError("INSERT", {}, Exception("connection refused"))

    insert = _fail
    get_by_number = _fail
    count = _fail
    delete_by_number = _fail
    delete_older_than = _fail
    delete_all = _fail


def test_keyspace_constants() -> None:
    """The keyspace spans nine-digit numbers from 111111111 to 999999999."""
    assert NUMBER_MIN == 111111111
    assert NUMBER_MAX == 999999999
    assert TOTAL_POSSIBLE == 888888889
    assert MAX_ATTEMPTS == 10


def test_allocate_returns_number_in_range(make_allocator) -> None:
    """A successful allocation persists a value inside the keyspace."""
    allocator = make_allocator()

    result = allocator.allocate()

    assert isinstance(result, Allocated)
    assert result.attempts == 1
    record = result.record
    assert NUMBER_MIN <= record.number <= NUMBER_MAX
    assert record.id is not None
    assert record.created_at is not None
    assert allocator.exists(record.number)[0] is True


def test_allocate_stores_bubble_id(make_allocator) -> None:
    """The optional annotation is stored untouched."""
    record = make_allocator().generate(bubble_id="bubble-42")

    assert record.bubble_id == "bubble-42"


def test_allocate_retries_after_collision(repo, make_allocator) -> None:
    """A drawn number that is already claimed is discarded and redrawn."""
    repo.insert(111111111)
    rng = ScriptedRandom([111111111, 222222222])
    allocator = make_allocator(rng=rng)

    result = allocator.allocate()

    assert isinstance(result, Allocated)
    assert result.attempts == 2
    assert result.record.number == 222222222
    assert repo.count() == 2


def test_racing_allocators_never_share_a_number(repo, make_allocator) -> None:
    """Two callers drawing the same value: the store lets only one claim it."""
    first = make_allocator(rng=ScriptedRandom([555555555]))
    second = make_allocator(rng=ScriptedRandom([555555555, 666666666]))

    won = first.generate()
    lost_then_won = second.generate()

    assert won.number == 555555555
    assert lost_then_won.number == 666666666
    assert repo.count() == 2


def test_allocate_exhausts_on_full_keyspace(repo, make_allocator) -> None:
    """Every draw in a pre-filled keyspace collides until attempts run out."""
    for number in (1, 2, 3):
        repo.insert(number)
    rng = ScriptedRandom([1, 2, 3] * 4)
    allocator = make_allocator(rng=rng, number_min=1, number_max=3)

    result = allocator.allocate()

    assert result == Exhausted(attempts=MAX_ATTEMPTS)
    assert rng.draws == MAX_ATTEMPTS
    assert repo.count() == 3


def test_generate_raises_when_exhausted() -> None:
    """generate() turns exhaustion into AllocationExhaustedError."""
    stub = ConflictingRepository()
    allocator = NumberAllocator(stub, max_attempts=4)

    with pytest.raises(AllocationExhaustedError) as excinfo:
        allocator.generate()

    assert excinfo.value.attempts == 4
    assert excinfo.value.message == "Failed to generate unique number"
    assert stub.inserts == 4


def test_store_failure_aborts_without_retry() -> None:
    """Non-conflict store errors propagate after a single attempt."""
    stub = FailingRepository()
    allocator = NumberAllocator(stub)

    with pytest.raises(OperationalError):
        allocator.allocate()

    assert stub.calls == 1


def test_allocator_rejects_bad_configuration(repo) -> None:
    """Bounds and attempt limit are validated at construction."""
    with pytest.raises(ValueError):
        NumberAllocator(repo, number_min=10, number_max=9)
    with pytest.raises(ValueError):
        NumberAllocator(repo, max_attempts=0)


def test_exists_for_unknown_and_out_of_range_numbers(make_allocator) -> None:
    """Exists never validates the range; unknown values are simply absent."""
    allocator = make_allocator()

    assert allocator.exists(123456789) == (False, None)
    assert allocator.exists(5) == (False, None)


@pytest.mark.parametrize("number", [BIGINT_MAX + 1, BIGINT_MIN - 1, 99999999999999999999])
def test_exists_outside_bigint_range_skips_store(number: int) -> None:
    """Values the number column cannot hold are absent without a query."""
    stub = FailingRepository()

    assert NumberAllocator(stub).exists(number) == (False, None)
    assert stub.calls == 0


@pytest.mark.parametrize(
    ("total", "expected"),
    [
        (0, "0%"),
        (1, "0.000000%"),
        (888889, "0.100000%"),
        (8888889, "1.000000%"),
        (TOTAL_POSSIBLE, "100.000000%"),
    ],
)
def test_format_percentage_used(total: int, expected: str) -> None:
    """Zero renders as a bare 0%, everything else with six decimals."""
    assert format_percentage_used(total) == expected


def test_stats_counts_rows(repo, make_allocator) -> None:
    """Stats report the stored total against the full keyspace."""
    allocator = make_allocator()
    assert allocator.stats().percentage_used == "0%"

    repo.insert(111111112)
    repo.insert(111111113)
    stats = allocator.stats()

    assert stats.total_generated == 2
    assert stats.total_possible == TOTAL_POSSIBLE
    assert stats.percentage_used == "0.000000%"


def test_delete_removes_number(repo, make_allocator) -> None:
    """Deleting a claimed number returns its row and frees it."""
    created = repo.insert(333333333, bubble_id="b-1")
    allocator = make_allocator()

    deleted = allocator.delete(333333333)

    assert deleted["id"] == created.id
    assert deleted["number"] == 333333333
    assert deleted["bubble_id"] == "b-1"
    assert allocator.exists(333333333) == (False, None)


def test_delete_unknown_number_is_not_found(make_allocator) -> None:
    """Deleting a number that was never issued raises NotFoundError."""
    with pytest.raises(NotFoundError):
        make_allocator().delete(444444444)


@pytest.mark.parametrize("number", [100000000, 111111110, 1000000000, -1])
def test_delete_out_of_range_skips_store(number: int) -> None:
    """Out-of-range deletes are rejected before the store is touched."""
    stub = FailingRepository()
    allocator = NumberAllocator(stub)

    with pytest.raises(InvalidArgumentError):
        allocator.delete(number)

    assert stub.calls == 0


def test_delete_older_than_uses_age_threshold(db_session, repo, make_allocator) -> None:
    """Only rows created before now minus the given days are removed."""
    now = utcnow()
    db_session.add_all(
        [
            UniqueNumber(number=111111200, created_at=now - timedelta(days=2000)),
            UniqueNumber(number=111111201, created_at=now - timedelta(days=10)),
            UniqueNumber(number=111111202, created_at=now),
        ]
    )
    db_session.commit()
    allocator = make_allocator(clock=lambda: now + timedelta(seconds=1))

    assert allocator.delete_older_than() == 1
    assert allocator.exists(111111200)[0] is False
    assert repo.count() == 2

    assert allocator.delete_older_than(0) == 2
    assert repo.count() == 0


def test_delete_older_than_huge_window_deletes_nothing(repo, make_allocator) -> None:
    """A window reaching past the earliest datetime matches no rows."""
    repo.insert(111111203)

    assert make_allocator().delete_older_than(1_000_000) == 0
    assert repo.count() == 1


def test_days_before_clamps_to_epoch_floor() -> None:
    """Subtracting more days than the calendar holds clamps instead of overflowing."""
    now = utcnow()

    assert days_before(now, 1_000_000) == EPOCH_FLOOR
    assert days_before(now, 2) == now - timedelta(days=2)


def test_delete_older_than_rejects_negative_days() -> None:
    """A negative age is invalid and never reaches the store."""
    stub = FailingRepository()

    with pytest.raises(InvalidArgumentError):
        NumberAllocator(stub).delete_older_than(-1)

    assert stub.calls == 0


@pytest.mark.parametrize(
    "token", [None, "", "delete_all_numbers", "DELETE_ALL_NUMBERS ", 123, ["DELETE_ALL_NUMBERS"]]
)
def test_delete_all_requires_exact_token(repo, make_allocator, token) -> None:
    """Anything but the literal sentinel is forbidden and deletes nothing."""
    repo.insert(777777777)

    with pytest.raises(ForbiddenError):
        make_allocator().delete_all(token)

    assert repo.count() == 1


def test_delete_all_with_token_empties_store(repo, make_allocator) -> None:
    """The exact token wipes every row and reports how many existed."""
    for number in (777777771, 777777772, 777777773):
        repo.insert(number)

    assert make_allocator().delete_all(DELETE_ALL_CONFIRMATION) == 3
    assert repo.count() == 0
