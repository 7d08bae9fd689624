"""Metadata layer - markers, introspection and SQL templates per entity."""

from __future__ import annotations

from row_orm.metadata.base import AbstractEntity
from row_orm.metadata.entity import EntityMetadata, PropertyMapping, build_entity_metadata
from row_orm.metadata.markers import Column, Id, Transient, Version, entity, is_entity
from row_orm.metadata.statements import SQLOperation, StatementCache, StatementTemplate

__all__ = [
    "AbstractEntity",
    "Column",
    "EntityMetadata",
    "Id",
    "PropertyMapping",
    "SQLOperation",
    "StatementCache",
    "StatementTemplate",
    "Transient",
    "Version",
    "build_entity_metadata",
    "entity",
    "is_entity",
]
