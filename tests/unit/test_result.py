import pytest

from recordstore import ConflictError, Failure, NotFoundError, Success, capture
from tests.support import Item, integrity_error


async def test_capture_returns_success(store, connection):
    connection.returns([{"id": "1", "name": "A"}])

    result = await capture(store.read("1"))

    assert result.is_success()
    assert result.unwrap() == Item("1", "A")


async def test_capture_turns_classified_error_into_failure(store, connection):
    connection.returns([])

    result = await capture(store.read("1"))

    match result:
        case Failure(error=NotFoundError() as error):
            assert error.details["id"] == "1"
        case _:
            pytest.fail(f"expected NotFound failure, got {result!r}")


async def test_capture_conflict(store, connection):
    connection.raises(integrity_error("dup", "23505"))

    result = await capture(store.create(Item("1", "A")))

    assert isinstance(result, Failure)
    assert isinstance(result.error, ConflictError)
    assert result.or_else("fallback") == "fallback"


async def test_capture_does_not_hide_unclassified_errors():
    async def broken():
        raise RuntimeError("not a data access error")

    with pytest.raises(RuntimeError):
        await capture(broken())


def test_failure_unwrap_reraises_error():
    with pytest.raises(NotFoundError):
        Failure(NotFoundError("missing")).unwrap()


def test_success_map():
    assert Success(2).map(lambda v: v * 3) == Success(6)
    assert Failure("x").map(lambda v: v * 3) == Failure("x")
