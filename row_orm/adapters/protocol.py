"""Database adapter protocol.

An adapter knows how to open connections for one backend, which
placeholder style its driver expects and how to run a statement.
``ConnectionManager`` drives it; ``ConnectionClient`` never touches a
driver directly.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_orm.core.connection import ConnectionConfig


@runtime_checkable
class Adapter(Protocol):
    @property
    def paramstyle(self) -> str:
        """DB-API placeholder style of the driver: ``qmark`` or ``format``."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any: ...

    def acquire_connection(self, pool: Any) -> Any: ...

    def release_connection(self, connection: Any, pool: Any) -> None: ...

    def close_pool(self, pool: Any) -> None: ...

    def execute(self, connection: Any, sql: str, params: tuple[Any, ...] = ()) -> Any:
        """Run *sql* with positional *params*; return a DB-API cursor."""
        ...
