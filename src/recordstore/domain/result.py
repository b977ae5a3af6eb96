"""
Result Types for Data Access Operations
Success envelope and classified failure, usable without catching exceptions
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from recordstore.exceptions import DataAccessError

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Success(Generic[T]):
    """
    Represents a successful operation result.

    Attributes:
        value: The record, paginated result, or ``None`` for delete
    """

    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def map(self, func: Callable[[T], Any]) -> Success[Any]:
        """Transform the success value using the provided function."""
        return Success(func(self.value))

    def or_else(self, default: T) -> T:
        return self.value

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """
    Represents a failed operation result.

    Attributes:
        error: The classified error
    """

    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def map(self, func: Callable[[Any], Any]) -> Failure[E]:
        """Does nothing for Failure (error propagates)."""
        return self

    def or_else(self, default: Any) -> Any:
        return default

    def unwrap(self) -> Any:
        """
        Raise the wrapped error.

        Raises:
            The classified error when it is an exception, ValueError otherwise
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Attempted to unwrap a Failure: {self.error}")


Result = Success[T] | Failure[E]


async def capture(operation: Awaitable[Success[T]]) -> Success[T] | Failure[DataAccessError]:
    """
    Await an adapter operation and return its outcome as a value.

    Classified errors become ``Failure``; anything else keeps propagating.

    Usage:
        match await capture(store.read("42")):
            case Success(value=item): ...
            case Failure(error=NotFoundError()): ...
    """
    try:
        return await operation
    except DataAccessError as e:
        return Failure(e)
