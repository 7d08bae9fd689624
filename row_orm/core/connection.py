"""Connection configuration and management.

``ConnectionConfig`` is the validated connection settings model.
``ConnectionManager`` loads the adapter for the configured driver and
owns its pool, opened lazily on first use.
"""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel, Field

from row_orm.core.enums import DatabaseBackend
from row_orm.core.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections.

    ``extra`` is passed through to the driver's connect call.
    """

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = Field(default=None, repr=False)
    database: str
    pool_size: int = Field(default=5, ge=1)
    pool_timeout: int = Field(default=30, ge=0)
    extra: dict[str, Any] = {}

    @property
    def backend(self) -> DatabaseBackend:
        """The backend named by ``driver``.

        Raises:
            AdapterError: If the driver is not supported.
        """
        try:
            return DatabaseBackend(self.driver.lower())
        except ValueError:
            raise AdapterError(f"Unsupported database driver: {self.driver}") from None


# backend -> (module_path, class_name)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_orm.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.MYSQL: ("row_orm.adapters.mysql", "MysqlAdapter"),
}


def _load_adapter(backend: DatabaseBackend) -> Any:
    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{backend.value}': {e}") from e


class ConnectionManager:
    """Hands out pooled connections for one ``ConnectionConfig``.

    Safe to share between threads. After ``close_pool`` the next
    ``get_connection`` opens a new pool.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.backend)
        self._pool: Any = None
        self._lock = threading.Lock()

    @property
    def adapter(self) -> Any:
        return self._adapter

    def initialize_pool(self) -> Any:
        """Create the pool if it does not exist yet and return it."""
        with self._lock:
            if self._pool is None:
                logger.info(
                    "Opening %s pool for %s (size %d)",
                    self.config.backend.value,
                    self.config.database,
                    self.config.pool_size,
                )
                self._pool = self._adapter.create_pool(self.config)
            return self._pool

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Borrow a connection for the duration of the ``with`` block."""
        pool = self.initialize_pool()
        connection = self._adapter.acquire_connection(pool)
        try:
            yield connection
        finally:
            self._adapter.release_connection(connection, pool)

    def close_pool(self) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            self._adapter.close_pool(pool)
