"""Mapper protocol.

Entity and scalar mappers both implement this interface. The client hands
each query's rows to ``map_many``; ``map_one`` decodes a single row.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Mapper(Protocol[T]):
    """Row decoder handed to ``SqlClient.query``."""

    def map_one(self, row: Mapping[str, Any]) -> T:
        """Map a single row (column name → value, in column order) to a target object."""
        ...

    def map_many(self, rows: list[Mapping[str, Any]]) -> list[T]:
        """Map multiple rows to a list of target objects."""
        ...
