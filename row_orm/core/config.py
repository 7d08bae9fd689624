"""Top-level configuration for a Db instance."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from row_orm.core.connection import ConnectionConfig


class DbConfig(BaseModel):
    """Everything needed to build a ``Db`` at process start.

    Attributes:
        namespace: Dotted package name scanned for ``@entity`` types.
        connection: Connection settings handed to the adapter.
        search_path: Directories and archives to scan instead of ``sys.path``.
    """

    namespace: str
    connection: ConnectionConfig
    search_path: list[str] | None = None

    @field_validator("namespace")
    @classmethod
    def _strip_namespace(cls, value: str) -> str:
        value = value.strip().strip(".")
        if not value:
            raise ValueError("namespace must not be empty")
        return value
