"""row_orm - metadata-driven SQL generation and row materialization for plain entity types."""

from __future__ import annotations

from row_orm.core.client import ConnectionClient, SqlClient
from row_orm.core.config import DbConfig
from row_orm.core.connection import ConnectionConfig, ConnectionManager
from row_orm.core.db import Db
from row_orm.core.enums import DatabaseBackend, ValueKind
from row_orm.core.exceptions import (
    AdapterError,
    CardinalityError,
    ConfigurationError,
    ConnectionError,  # noqa: A004
    DuplicateIdentifierError,
    DuplicateTableError,
    EmptyPropertyListError,
    EmptyResultError,
    EntityDefinitionError,
    ExecutionError,
    MappingError,
    MissingIdentifierError,
    MissingMutatorError,
    NonUniqueResultError,
    NonUpdatablePropertyError,
    PoolError,
    ResolutionError,
    RowMappingError,
    RowOrmError,
    SQLGrammarError,
    UnknownEntityError,
    UnknownPropertyError,
    UnknownTableError,
)
from row_orm.core.registry import EntityRegistry
from row_orm.discovery.catalog import TypeCatalog
from row_orm.mapping.entity import EntityMapper
from row_orm.metadata.base import AbstractEntity
from row_orm.metadata.entity import EntityMetadata, PropertyMapping, build_entity_metadata
from row_orm.metadata.markers import Column, Id, Transient, Version, entity, is_entity

__all__ = [
    # Facade
    "Db",
    "DbConfig",
    # Execution
    "SqlClient",
    "ConnectionClient",
    "ConnectionConfig",
    "ConnectionManager",
    # Registry & discovery
    "EntityRegistry",
    "TypeCatalog",
    # Metadata
    "EntityMetadata",
    "PropertyMapping",
    "build_entity_metadata",
    "EntityMapper",
    "AbstractEntity",
    # Markers
    "entity",
    "is_entity",
    "Id",
    "Version",
    "Transient",
    "Column",
    # Enums
    "DatabaseBackend",
    "ValueKind",
    # Exceptions
    "RowOrmError",
    "ConfigurationError",
    "MissingIdentifierError",
    "DuplicateIdentifierError",
    "MissingMutatorError",
    "EntityDefinitionError",
    "DuplicateTableError",
    "ResolutionError",
    "UnknownEntityError",
    "UnknownTableError",
    "SQLGrammarError",
    "UnknownPropertyError",
    "NonUpdatablePropertyError",
    "EmptyPropertyListError",
    "CardinalityError",
    "EmptyResultError",
    "NonUniqueResultError",
    "MappingError",
    "RowMappingError",
    "ExecutionError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
