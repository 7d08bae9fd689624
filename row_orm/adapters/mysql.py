"""MySQL adapter using mysql-connector-python.

The driver is imported when the first connection is opened, so the
``mysql`` extra is only needed by applications that use this backend.
"""

from __future__ import annotations

from typing import Any

from row_orm.adapters.pool import ConnectionPool
from row_orm.core.connection import ConnectionConfig
from row_orm.core.exceptions import ConnectionError  # noqa: A004


class MysqlAdapter:
    """MySQL adapter. ``?`` placeholders are rewritten to ``%s`` by the client."""

    @property
    def paramstyle(self) -> str:
        return "format"

    def create_pool(self, config: ConnectionConfig) -> ConnectionPool:
        def connect() -> Any:
            import mysql.connector

            try:
                return mysql.connector.connect(
                    host=config.host,
                    port=config.port,
                    user=config.user,
                    password=config.password,
                    database=config.database,
                    connection_timeout=config.pool_timeout,
                    **config.extra,
                )
            except mysql.connector.Error as e:
                raise ConnectionError(f"Cannot connect to MySQL at {config.host}: {e}") from e

        return ConnectionPool(connect, config.pool_size, config.pool_timeout)

    def acquire_connection(self, pool: ConnectionPool) -> Any:
        return pool.acquire()

    def release_connection(self, connection: Any, pool: ConnectionPool) -> None:
        pool.release(connection)

    def close_pool(self, pool: ConnectionPool) -> None:
        pool.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> Any:
        """Run *sql* on a buffered cursor so rowcount and fetchall are both available."""
        cursor = connection.cursor(buffered=True)
        cursor.execute(sql, params)
        return cursor
