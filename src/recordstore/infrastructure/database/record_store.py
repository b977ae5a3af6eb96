"""
Generic Record Store
CRUD and filtered listing for any record type over a borrowed async connection
"""
from __future__ import annotations

import contextlib
from typing import Any, Dict, Generic, Iterator, Mapping, Optional, Type, TypeVar, Union

from sqlalchemy import text
from sqlalchemy.engine import Result as SAResult

from recordstore.domain.contracts import FromRow, Identifiable, PaginatedResult, Record, SortOrder, ToRow
from recordstore.domain.result import Success
from recordstore.exceptions import InvalidArgumentError, NotFoundError, OperationFailedError
from recordstore.infrastructure.database.error_mapping import classify_exception
from recordstore.infrastructure.database.query_builder import (
    SCOPE_COLUMN,
    SCOPE_PARAM,
    QueryBuilder,
    sanitize_column_name,
    validate_table_name,
)
from recordstore.infrastructure.observability.logger import get_logger

T = TypeVar("T")
S = TypeVar("S", bound=Record)

# Identity/audit columns never rewritten by update
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class RecordStore(Generic[T]):
    """
    Generic PostgreSQL record store.

    Translates create/read/update/delete/query calls into parameterized SQL
    against one table. The store needs only a table name, a row
    serializer/deserializer pair for ``T`` and a connection exposing
    ``await execute(statement, params)`` (``AsyncConnection`` or
    ``AsyncSession``). It never commits, rolls back or closes that connection.

    Every operation returns a ``Success`` envelope or raises a
    ``DataAccessError`` subclass; driver exceptions never escape.

    Attributes:
        connection: Borrowed async connection or session
        table_name: Validated table name
        from_row: Row mapping -> record
        to_row: Record -> row mapping whose keys are column names
    """

    def __init__(
        self,
        connection: Any,
        table_name: str,
        from_row: FromRow[T],
        to_row: ToRow[T],
        *,
        logger: Any = None,
    ) -> None:
        self.connection = connection
        self.table_name = validate_table_name(table_name)
        self.from_row = from_row
        self.to_row = to_row
        self._query_builder = QueryBuilder(self.table_name)
        self._logger = (logger or get_logger(__name__)).bind(table=self.table_name)

    @classmethod
    def for_model(
        cls,
        connection: Any,
        table_name: str,
        model: Type[S],
        *,
        logger: Any = None,
    ) -> "RecordStore[S]":
        """Build a store for a record class implementing ``Record`` (``id`` plus ``to_row``/``from_row``)."""
        return cls(
            connection,
            table_name,
            from_row=model.from_row,
            to_row=lambda record: record.to_row(),
            logger=logger,
        )

    # ---- helpers -------------------------------------------------------------

    @contextlib.contextmanager
    def _classified(
        self,
        operation: str,
        *,
        record_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Iterator[None]:
        try:
            yield
        except Exception as e:
            error = classify_exception(
                e,
                logger=self._logger,
                table=self.table_name,
                operation=operation,
                record_id=record_id,
                scope=user_id,
            )
            if error is e:
                raise
            raise error from e

    async def _execute(self, sql: str, params: Mapping[str, Any]) -> SAResult:
        return await self.connection.execute(text(sql), dict(params))

    def _column_values(self, item: T, exclude: frozenset = frozenset()) -> Dict[str, Any]:
        values = {sanitize_column_name(column): value for column, value in self.to_row(item).items()}
        return {column: value for column, value in values.items() if column not in exclude}

    def _first_record(self, result: SAResult) -> Optional[T]:
        row = result.mappings().first()
        return self.from_row(dict(row)) if row is not None else None

    @staticmethod
    def _not_found(record_id: str, user_id: Optional[str]) -> NotFoundError:
        suffix = " for this user" if user_id is not None else ""
        return NotFoundError(f'Item with ID "{record_id}" not found{suffix}.')

    @staticmethod
    def _scope(sql: str, params: Dict[str, Any], user_id: Optional[str]) -> str:
        if user_id is None:
            return sql
        params[SCOPE_PARAM] = user_id
        return f"{sql} AND {SCOPE_COLUMN} = :{SCOPE_PARAM}"

    # ---- operations ----------------------------------------------------------

    async def create(self, item: T, *, user_id: Optional[str] = None) -> Success[T]:
        """
        Insert ``item`` and return the row the store wrote.

        Args:
            item: Record to insert
            user_id: Owner; written to the ``user_id`` column when given

        Raises:
            ConflictError: Unique constraint violated
            BadRequestError: Foreign key constraint violated
            InvalidArgumentError: A serialized key is not a valid column name
            OperationFailedError: Any other store or connection failure
        """
        self._logger.debug("Creating item")
        with self._classified("create", user_id=user_id):
            values = self._column_values(item)
            if user_id is not None:
                values[SCOPE_COLUMN] = user_id

            if values:
                columns = ", ".join(values)
                placeholders = ", ".join(f":{column}" for column in values)
                sql = f"INSERT INTO {self.table_name} ({columns}) VALUES ({placeholders}) RETURNING *;"
            else:
                sql = f"INSERT INTO {self.table_name} DEFAULT VALUES RETURNING *;"

            result = await self._execute(sql, values)
            created = self._first_record(result)
            if created is None:
                raise OperationFailedError(f"Insert into {self.table_name} returned no row")

            self._logger.debug("Created item", id=getattr(created, "id", None))
            return Success(created)

    async def read(self, id: str, *, user_id: Optional[str] = None) -> Success[T]:
        """
        Fetch one record by id, optionally restricted to an owner.

        Raises:
            NotFoundError: No row matched
        """
        self._logger.debug("Reading item", id=id)
        with self._classified("read", record_id=id, user_id=user_id):
            params: Dict[str, Any] = {"id": id}
            sql = self._scope(f"SELECT * FROM {self.table_name} WHERE id = :id", params, user_id)

            result = await self._execute(sql + ";", params)
            record = self._first_record(result)
            if record is None:
                raise self._not_found(id, user_id)

            self._logger.debug("Read item", id=id)
            return Success(record)

    async def update(self, id: str, item: T, *, user_id: Optional[str] = None) -> Success[T]:
        """
        Overwrite the mutable columns of one record.

        ``id`` and ``created_at`` are never rewritten. When nothing else is
        left to write, this is a read of the current record.

        Raises:
            NotFoundError: No row matched
            ConflictError: Unique constraint violated
            BadRequestError: Foreign key constraint violated
            InvalidArgumentError: A serialized column would reuse the owner
                scope's bind name
        """
        self._logger.debug("Updating item", id=id)
        with self._classified("update", record_id=id, user_id=user_id):
            values = self._column_values(item, exclude=IMMUTABLE_FIELDS)
            # SET binds share one namespace with :id and :userId
            if user_id is not None and SCOPE_PARAM in values:
                raise InvalidArgumentError(
                    f"Column {SCOPE_PARAM!r} clashes with the owner scope parameter"
                )
            if values:
                assignments = ", ".join(f"{column} = :{column}" for column in values)
                params: Dict[str, Any] = {**values, "id": id}
                sql = self._scope(
                    f"UPDATE {self.table_name} SET {assignments} WHERE id = :id", params, user_id
                )

                result = await self._execute(sql + " RETURNING *;", params)
                updated = self._first_record(result)
                if updated is None:
                    raise self._not_found(id, user_id)

                self._logger.debug("Updated item", id=id)
                return Success(updated)

        self._logger.debug("Nothing to update, reading item instead", id=id)
        return await self.read(id, user_id=user_id)

    async def delete(self, id: str, *, user_id: Optional[str] = None) -> Success[None]:
        """
        Remove one record.

        Raises:
            NotFoundError: No row matched; deleting nothing is an error
        """
        self._logger.debug("Deleting item", id=id)
        with self._classified("delete", record_id=id, user_id=user_id):
            params: Dict[str, Any] = {"id": id}
            sql = self._scope(f"DELETE FROM {self.table_name} WHERE id = :id", params, user_id)

            result = await self._execute(sql + ";", params)
            if result.rowcount == 0:
                raise self._not_found(id, user_id)

            self._logger.debug("Deleted item", id=id)
            return Success(None)

    async def list(
        self,
        *,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Union[SortOrder, str, None] = None,
    ) -> Success[PaginatedResult[T]]:
        """All records (optionally scoped); same as ``query({})``."""
        return await self.query(
            {},
            user_id=user_id,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    async def query(
        self,
        query: Optional[Mapping[str, Any]] = None,
        *,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Union[SortOrder, str, None] = None,
    ) -> Success[PaginatedResult[T]]:
        """
        Filtered, sorted, size-limited listing.

        One extra row is requested when ``limit`` is given; if it comes back,
        it is dropped and ``has_more`` is set. ``cursor`` is the id of the last
        returned record, or ``None`` when records are not ``Identifiable``.
        Without a limit the whole matching set is returned.

        Args:
            query: Filter map (see ``QueryBuilder.build_select``)
            user_id: Owner scope
            limit: Page size
            sort_by: Column to order by
            sort_order: ``SortOrder`` or ``"asc"``/``"desc"``

        Raises:
            InvalidArgumentError: A filter key or sort column is not an identifier
            BadRequestError: Malformed ``_in`` value or limit
        """
        self._logger.debug("Querying items", query=dict(query or {}), limit=limit, sort_by=sort_by)
        with self._classified("query", user_id=user_id):
            sql, params = self._query_builder.build_select(
                query,
                user_id=user_id,
                limit=limit,
                sort_by=sort_by,
                sort_order=sort_order,
            )

            result = await self._execute(sql, params)
            items = [self.from_row(dict(row)) for row in result.mappings().all()]

            has_more = False
            if limit is not None and len(items) > limit:
                has_more = True
                del items[limit:]

            cursor = None
            if items and isinstance(items[-1], Identifiable) and items[-1].id is not None:
                cursor = str(items[-1].id)

            self._logger.debug("Queried items", count=len(items), has_more=has_more)
            return Success(PaginatedResult(items=items, has_more=has_more, cursor=cursor))


__all__ = ["RecordStore", "IMMUTABLE_FIELDS"]
