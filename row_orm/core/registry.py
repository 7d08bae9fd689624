"""Entity Registry - one EntityMetadata per discovered entity type.

The registry is immutable after construction: build once at startup, then
read-only access for the lifetime of the application. Both indexes are
exposed through ``MappingProxyType`` and safe for concurrent readers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType

from row_orm.core.exceptions import DuplicateTableError, UnknownEntityError, UnknownTableError
from row_orm.discovery.catalog import TypeCatalog
from row_orm.metadata.entity import EntityMetadata, build_entity_metadata
from row_orm.metadata.markers import is_entity

logger = logging.getLogger(__name__)


class EntityRegistry:
    """Maps entity types and table names to their ``EntityMetadata``.

    Args:
        entity_types: Entity types to register. Repeats are ignored.

    Raises:
        ConfigurationError: If any entity is invalid or two entities share
            a table. No partial registry is produced.
    """

    def __init__(self, entity_types: Iterable[type]) -> None:
        by_type: dict[type, EntityMetadata] = {}
        by_table: dict[str, EntityMetadata] = {}

        for entity_type in entity_types:
            if entity_type in by_type:
                continue
            metadata = build_entity_metadata(entity_type)
            existing = by_table.get(metadata.table_name)
            if existing is not None:
                raise DuplicateTableError(
                    metadata.table_name,
                    _qualified(existing.entity_type),
                    _qualified(entity_type),
                )
            logger.info(
                "Found entity class: %s (table %s)",
                _qualified(entity_type),
                metadata.table_name,
            )
            by_type[entity_type] = metadata
            by_table[metadata.table_name] = metadata

        self._by_type = MappingProxyType(by_type)
        self._by_table = MappingProxyType(by_table)

    @classmethod
    def scan(
        cls,
        namespace: str,
        search_path: Iterable[str | Path] | None = None,
    ) -> EntityRegistry:
        """Discover ``@entity`` types under *namespace* and register them."""
        logger.info("Scanning %s for entities", namespace)
        catalog = TypeCatalog(namespace, predicate=is_entity, search_path=search_path)
        return cls(catalog.scan())

    def get(self, entity_type: type) -> EntityMetadata:
        """Look up metadata by entity type.

        Raises:
            UnknownEntityError: If the type is not registered.
        """
        try:
            return self._by_type[entity_type]
        except KeyError:
            raise UnknownEntityError(_qualified(entity_type)) from None

    def get_by_table(self, table_name: str) -> EntityMetadata:
        """Look up metadata by table name.

        Raises:
            UnknownTableError: If no entity maps to the table.
        """
        try:
            return self._by_table[table_name]
        except KeyError:
            raise UnknownTableError(table_name) from None

    def has(self, entity_type: type) -> bool:
        """Check if an entity type is registered."""
        return entity_type in self._by_type

    @property
    def entity_types(self) -> list[type]:
        """Registered entity types, sorted by qualified name."""
        return sorted(self._by_type, key=_qualified)

    @property
    def table_names(self) -> list[str]:
        """Registered table names, sorted alphabetically."""
        return sorted(self._by_table)

    def __len__(self) -> int:
        """Number of registered entities."""
        return len(self._by_type)


def _qualified(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"
