"""Db - the public CRUD and query surface.

Db resolves entity types and table names through the EntityRegistry,
takes SQL from each entity's StatementCache, executes it through an
SqlClient and decodes rows with an EntityMapper.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from row_orm.core.client import ConnectionClient, SqlClient
from row_orm.core.config import DbConfig
from row_orm.core.exceptions import EmptyResultError, NonUniqueResultError
from row_orm.core.registry import EntityRegistry
from row_orm.core.sql import build_limited_select, parse_table_name
from row_orm.mapping.entity import EntityMapper
from row_orm.mapping.scalar import ScalarMapper, integer
from row_orm.metadata.entity import EntityMetadata
from row_orm.metadata.statements import SQLOperation

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Db:
    """Entity-aware database facade.

    Args:
        registry: Registry of all entity types, built once at startup.
        client: Execution layer used for every statement.
    """

    def __init__(self, registry: EntityRegistry, client: SqlClient) -> None:
        self._registry = registry
        self._client = client
        self._mappers: dict[type, EntityMapper[Any]] = {
            entity_type: EntityMapper(registry.get(entity_type))
            for entity_type in registry.entity_types
        }

    @classmethod
    def from_config(cls, config: DbConfig) -> Db:
        """Scan ``config.namespace`` for entities and connect with ``config.connection``.

        Raises:
            ConfigurationError: If any discovered entity is invalid.
        """
        registry = EntityRegistry.scan(config.namespace, config.search_path)
        return cls(registry, ConnectionClient.from_config(config.connection))

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    def _mapper(self, metadata: EntityMetadata) -> EntityMapper[Any]:
        return self._mappers[metadata.entity_type]

    def _update(self, operation: SQLOperation) -> int:
        return self._client.execute(operation.sql, operation.params)

    # --- entity operations ---

    def create(self, entity: Any) -> int:
        """Insert *entity*, writing all insertable properties."""
        metadata = self._registry.get(type(entity))
        return self._update(metadata.statements.insert_entity(entity))

    def get_by_id(self, entity_type: type[T], id_value: Any) -> T | None:
        """Fetch an entity by identifier.

        Returns None if no row matches.
        Raises NonUniqueResultError if more than one row matches.
        """
        metadata = self._registry.get(entity_type)
        operation = metadata.statements.get_by_id(id_value)
        rows = self._client.query(operation.sql, operation.params, self._mapper(metadata))
        if len(rows) == 0:
            return None
        if len(rows) > 1:
            raise NonUniqueResultError(operation.sql, len(rows))
        return rows[0]  # type: ignore[no-any-return]

    def update_entity(self, entity: Any) -> int:
        """Update all updatable properties of *entity*."""
        metadata = self._registry.get(type(entity))
        return self._update(metadata.statements.update_entity(entity))

    def update_properties(self, entity: Any, *property_names: str) -> int:
        """Update only the named properties of *entity*, in the given order.

        Raises:
            EmptyPropertyListError: If no property name is given.
            UnknownPropertyError: If a name is not a mapped property.
            NonUpdatablePropertyError: If a named property is not updatable.
        """
        metadata = self._registry.get(type(entity))
        return self._update(metadata.statements.update_properties(entity, property_names))

    def delete_entity(self, entity: Any) -> int:
        """Delete the row identified by *entity*'s identifier."""
        metadata = self._registry.get(type(entity))
        return self._update(metadata.statements.delete_entity(entity))

    def delete_by_id(self, entity_type: type, id_value: Any) -> int:
        """Delete the row of *entity_type* with the given identifier."""
        metadata = self._registry.get(entity_type)
        return self._update(metadata.statements.delete_by_id(id_value))

    # --- queries ---

    def query_for_list(self, sql: str, *params: Any) -> list[Any]:
        """Run ``select ... from <table> ...`` and map rows to that table's entity.

        Raises:
            SQLGrammarError: If *sql* is not of that shape.
            UnknownTableError: If no entity maps to the table.
        """
        logger.debug("Query for list: %s", sql)
        metadata = self._registry.get_by_table(parse_table_name(sql))
        return self._client.query(sql, params, self._mapper(metadata))

    def query_for_limited_list(
        self, sql: str, first: int, max_rows: int, *params: Any
    ) -> list[Any]:
        """Like ``query_for_list`` but returns at most *max_rows* rows from offset *first*.

        A trailing ``for update`` clause is kept after the pagination clause.
        """
        logger.debug("Query for limited list (first=%d, max=%d): %s", first, max_rows, sql)
        return self.query_for_list(build_limited_select(sql), *params, first, max_rows)

    def query_for_object(self, sql: str, *params: Any) -> Any:
        """Run an entity query that must return exactly one row."""
        return _exactly_one(sql, self.query_for_list(sql, *params))

    def query_for_long(self, sql: str, *params: Any) -> int:
        """Run a query returning exactly one row; return its first column as int."""
        logger.debug("Query for long: %s", sql)
        return _exactly_one(sql, self._client.query(sql, params, ScalarMapper(integer)))

    def query_for_int(self, sql: str, *params: Any) -> int:
        """Same as ``query_for_long``; kept for callers counting small results."""
        logger.debug("Query for int: %s", sql)
        return _exactly_one(sql, self._client.query(sql, params, ScalarMapper(integer)))

    def execute_update(self, sql: str, *params: Any) -> int:
        """Execute any write statement. Returns number of affected rows."""
        return self._client.execute(sql, params)


def _exactly_one(sql: str, rows: list[T]) -> T:
    if not rows:
        raise EmptyResultError(sql)
    if len(rows) > 1:
        raise NonUniqueResultError(sql, len(rows))
    return rows[0]
