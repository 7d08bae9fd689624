"""SQLite adapter using the stdlib sqlite3 module."""

from __future__ import annotations

import sqlite3
from typing import Any

from row_orm.adapters.pool import ConnectionPool
from row_orm.core.connection import ConnectionConfig


class SqliteAdapter:
    """SQLite accepts ``?`` placeholders and ``limit ?,?`` natively.

    Every pooled connection opens ``config.database``; for ``:memory:``
    that means one private database per connection, so use ``pool_size=1``.
    """

    @property
    def paramstyle(self) -> str:
        return "qmark"

    def create_pool(self, config: ConnectionConfig) -> ConnectionPool:
        def connect() -> sqlite3.Connection:
            conn = sqlite3.connect(
                config.database,
                timeout=config.pool_timeout,
                check_same_thread=False,
                **config.extra,
            )
            conn.execute("PRAGMA journal_mode=WAL")
            return conn

        return ConnectionPool(connect, config.pool_size, config.pool_timeout)

    def acquire_connection(self, pool: ConnectionPool) -> sqlite3.Connection:
        return pool.acquire()  # type: ignore[no-any-return]

    def release_connection(self, connection: sqlite3.Connection, pool: ConnectionPool) -> None:
        pool.release(connection)

    def close_pool(self, pool: ConnectionPool) -> None:
        pool.close()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> sqlite3.Cursor:
        return connection.execute(sql, params)
