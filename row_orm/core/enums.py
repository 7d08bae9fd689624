"""Enumerations shared across row_orm."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    MYSQL = "mysql"


class ValueKind(Enum):
    """How a property value is encoded when bound and decoded when read."""

    SCALAR = "scalar"
    ENUM = "enum"
