"""Test doubles: a record type and a connection that replays scripted results."""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError


@dataclass(frozen=True)
class Item:
    id: str
    name: str

    def to_row(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_row(cls, row) -> "Item":
        return cls(id=row["id"], name=row["name"])


class FakeMappings:
    def __init__(self, rows: List[Dict[str, Any]]):
        self._rows = rows

    def first(self):
        return self._rows[0] if self._rows else None

    def all(self):
        return list(self._rows)


class FakeResult:
    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, rowcount: Optional[int] = None):
        self._rows = rows or []
        self.rowcount = len(self._rows) if rowcount is None else rowcount

    def mappings(self):
        return FakeMappings(self._rows)


class FakeConnection:
    """Records every statement and replays scripted results or errors."""

    def __init__(self):
        self.calls: List[tuple] = []
        self._responses: List[Any] = []

    def returns(self, rows=None, rowcount=None) -> "FakeConnection":
        self._responses.append(FakeResult(rows, rowcount))
        return self

    def raises(self, error: BaseException) -> "FakeConnection":
        self._responses.append(error)
        return self

    async def execute(self, statement, params=None):
        self.calls.append((str(statement), dict(params or {})))
        response = self._responses.pop(0) if self._responses else FakeResult()
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def last_sql(self) -> str:
        return self.calls[-1][0]

    @property
    def last_params(self) -> Dict[str, Any]:
        return self.calls[-1][1]


class FakeDriverError(Exception):
    def __init__(self, message: str, sqlstate: Optional[str] = None):
        super().__init__(message)
        self.sqlstate = sqlstate


def integrity_error(message: str, sqlstate: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, FakeDriverError(message, sqlstate))


def programming_error(message: str, sqlstate: str) -> ProgrammingError:
    return ProgrammingError("SELECT ...", {}, FakeDriverError(message, sqlstate))


def connection_error(message: str = "connection refused") -> OperationalError:
    return OperationalError("SELECT ...", {}, FakeDriverError(message))
