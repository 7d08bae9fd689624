"""SQL execution client.

``SqlClient`` is the contract the ``Db`` facade needs from an execution
layer. ``ConnectionClient`` implements it on top of a ConnectionManager
and adapter: it rewrites placeholders for the driver, executes, ends the
transaction and decodes rows with the mapper it is given.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

from row_orm.core.connection import ConnectionConfig, ConnectionManager
from row_orm.core.exceptions import ExecutionError
from row_orm.core.params import coerce_params, normalize_params
from row_orm.mapping.protocol import Mapper

T = TypeVar("T")

logger = logging.getLogger(__name__)


@runtime_checkable
class SqlClient(Protocol):
    """Execution layer protocol."""

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a write statement. Returns the affected row count."""
        ...

    def query(self, sql: str, params: Sequence[Any], row_decoder: Mapper[T]) -> list[T]:
        """Execute a query and decode every row with *row_decoder*."""
        ...


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # Check if rows are already dict-like (e.g., MySQL dict cursor)
    first_row = rows[0]
    if isinstance(first_row, dict):
        return [dict(row) for row in rows]

    # Tuple-like rows, zip with columns
    return [dict(zip(columns, row, strict=True)) for row in rows]


def _rollback(conn: Any, sql: str) -> None:
    """Roll back after a failed statement; the statement's error is the one raised."""
    try:
        conn.rollback()
    except Exception as e:
        logger.warning("Rollback failed after error in %s: %s", sql, e)


class ConnectionClient:
    """``SqlClient`` backed by a pooled ConnectionManager.

    Every call is its own transaction: writes commit, reads end their
    transaction before the connection goes back to the pool, and any
    failure rolls back. Bound parameters are never logged.
    """

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> ConnectionClient:
        """Create a ConnectionClient from a ConnectionConfig."""
        return cls(ConnectionManager(config))

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a write statement and commit. Returns affected row count."""
        driver_sql = normalize_params(sql, self._paramstyle)
        logger.debug("Execute: %s", sql)

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self._connection_manager.adapter.execute(
                    conn, driver_sql, coerce_params(params)
                )
                rowcount = int(cursor.rowcount)
                conn.commit()
            except Exception as e:
                _rollback(conn, sql)
                raise ExecutionError(sql, str(e)) from e
        return rowcount

    def query(self, sql: str, params: Sequence[Any], row_decoder: Mapper[T]) -> list[T]:
        """Execute a query and decode all rows."""
        driver_sql = normalize_params(sql, self._paramstyle)
        logger.debug("Query: %s", sql)

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self._connection_manager.adapter.execute(
                    conn, driver_sql, coerce_params(params)
                )
                rows = _rows_to_dicts(cursor)
                conn.commit()
            except Exception as e:
                _rollback(conn, sql)
                raise ExecutionError(sql, str(e)) from e

        return row_decoder.map_many(rows)  # type: ignore[arg-type]

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._connection_manager.close_pool()
