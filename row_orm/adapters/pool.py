"""Fixed-size blocking connection pool shared by the sync adapters."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

from row_orm.core.exceptions import PoolError

logger = logging.getLogger(__name__)


class ConnectionPool:
    """Up to *size* connections, opened on demand by *connect*.

    ``acquire`` blocks for at most *timeout* seconds when every connection
    is in use. Connections are reused most-recently-released first.
    """

    def __init__(self, connect: Callable[[], Any], size: int, timeout: float) -> None:
        if size < 1:
            raise PoolError(f"Pool size must be at least 1, got {size}")
        self._connect = connect
        self._size = size
        self._timeout = timeout
        self._idle: queue.LifoQueue[Any] = queue.LifoQueue()
        self._opened = 0
        self._closed = False
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    def acquire(self) -> Any:
        if self._closed:
            raise PoolError("Pool is closed")
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass

        with self._lock:
            can_open = self._opened < self._size
            if can_open:
                self._opened += 1
        if can_open:
            try:
                return self._connect()
            except BaseException:
                with self._lock:
                    self._opened -= 1
                raise

        try:
            return self._idle.get(timeout=self._timeout)
        except queue.Empty:
            raise PoolError(
                f"No connection available within {self._timeout}s (pool size {self._size})"
            ) from None

    def release(self, connection: Any) -> None:
        if self._closed:
            connection.close()
            return
        self._idle.put(connection)

    def close(self) -> None:
        """Close idle connections; busy ones are closed when released."""
        self._closed = True
        closed = 0
        while True:
            try:
                connection = self._idle.get_nowait()
            except queue.Empty:
                break
            connection.close()
            closed += 1
        logger.debug("Closed %d pooled connections", closed)
