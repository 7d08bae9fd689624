"""Per-type persistence metadata.

``build_entity_metadata`` introspects an entity type once and returns an
immutable ``EntityMetadata``. Every configuration problem surfaces here,
never at call time.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from row_orm.core.enums import ValueKind
from row_orm.core.exceptions import (
    DuplicateIdentifierError,
    EntityDefinitionError,
    MissingIdentifierError,
    MissingMutatorError,
)
from row_orm.core.sql import is_identifier
from row_orm.metadata.introspect import (
    enum_type_of,
    find_accessors,
    requires_arguments,
    split_annotation,
)
from row_orm.metadata.markers import Column, Id, Transient, Version, entity_info
from row_orm.metadata.statements import StatementCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyMapping:
    """Correspondence between one entity property and one table column."""

    name: str
    column_name: str
    insertable: bool = True
    updatable: bool = True
    is_identifier: bool = False
    is_version: bool = False
    enum_type: type[enum.Enum] | None = None
    nullable: bool = True
    length: int | None = None

    @property
    def value_kind(self) -> ValueKind:
        return ValueKind.SCALAR if self.enum_type is None else ValueKind.ENUM

    def get(self, entity: Any) -> Any:
        """Read the property for binding; enums are bound by symbolic name."""
        value = getattr(entity, self.name)
        if self.enum_type is not None and isinstance(value, enum.Enum):
            return value.name
        return value

    def set(self, entity: Any, value: Any) -> None:
        """Assign a decoded column value; enum symbolic names are coerced."""
        if self.enum_type is not None and not isinstance(value, self.enum_type):
            value = self.enum_type[value]
        setattr(entity, self.name, value)


@dataclass(frozen=True, eq=False)
class EntityMetadata:
    """Immutable mapping of one entity type onto one table.

    Equality is identity: the registry holds exactly one instance per type.
    """

    entity_type: type
    table_name: str
    id_property: str
    mappings: Mapping[str, PropertyMapping]
    version_property: str | None = None
    statements: StatementCache = field(init=False, repr=False)
    _by_column: Mapping[str, PropertyMapping] = field(init=False, repr=False)
    _by_column_lower: Mapping[str, PropertyMapping] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        by_column = {m.column_name: m for m in self.mappings.values()}
        object.__setattr__(self, "mappings", MappingProxyType(dict(self.mappings)))
        object.__setattr__(self, "_by_column", MappingProxyType(by_column))
        object.__setattr__(
            self,
            "_by_column_lower",
            MappingProxyType({name.lower(): m for name, m in by_column.items()}),
        )
        object.__setattr__(self, "statements", StatementCache(self))

    @property
    def entity_name(self) -> str:
        return self.entity_type.__qualname__

    @property
    def id_mapping(self) -> PropertyMapping:
        return self.mappings[self.id_property]

    def column_mapping(self, column_name: str) -> PropertyMapping | None:
        """Find the mapping for a result column (exact, then case-insensitive)."""
        mapping = self._by_column.get(column_name)
        if mapping is None:
            mapping = self._by_column_lower.get(column_name.lower())
        return mapping

    def id_value(self, entity: Any) -> Any:
        return self.id_mapping.get(entity)

    def new_instance(self) -> Any:
        """Create a fresh, zero-valued instance of the entity type."""
        return self.entity_type()


def _find_marker(markers: tuple[Any, ...], kind: type) -> Any:
    for marker in markers:
        if isinstance(marker, kind) or marker is kind:
            return marker
    return None


def _build_mapping(name: str, annotation: Any) -> PropertyMapping:
    _, markers = split_annotation(annotation)
    column = _find_marker(markers, Column)
    if not isinstance(column, Column):
        column = Column()
    return PropertyMapping(
        name=name,
        column_name=column.name or name,
        insertable=column.insertable,
        updatable=column.updatable,
        is_identifier=_find_marker(markers, Id) is not None,
        is_version=_find_marker(markers, Version) is not None,
        enum_type=enum_type_of(annotation),
        nullable=column.nullable,
        length=column.length,
    )


def build_entity_metadata(entity_type: type) -> EntityMetadata:
    """Introspect *entity_type* into an ``EntityMetadata``.

    Raises:
        MissingIdentifierError: No property is marked with ``Id``.
        DuplicateIdentifierError: More than one property is marked with ``Id``.
        MissingMutatorError: A mapped property cannot be written.
        EntityDefinitionError: Invalid table/column names, a shared column,
            more than one version property, or no zero-argument constructor.
    """
    name = entity_type.__qualname__
    info = entity_info(entity_type)
    table_name = (info.table if info is not None else None) or entity_type.__name__
    if not is_identifier(table_name):
        raise EntityDefinitionError(name, f"invalid table name '{table_name}'")

    try:
        accessors = find_accessors(entity_type)
    except NameError as e:
        raise EntityDefinitionError(name, f"unresolvable annotation: {e}") from e

    persistent = {
        prop: accessor
        for prop, accessor in sorted(accessors.items())
        if _find_marker(split_annotation(accessor.annotation)[1], Transient) is None
    }

    id_property: str | None = None
    for prop, accessor in persistent.items():
        if _find_marker(split_annotation(accessor.annotation)[1], Id) is not None:
            if id_property is not None:
                raise DuplicateIdentifierError(name, id_property, prop)
            id_property = prop
    if id_property is None:
        raise MissingIdentifierError(name)

    mappings: dict[str, PropertyMapping] = {}
    # lower-cased column name -> property; result columns match case-insensitively
    columns: dict[str, str] = {}
    version_property: str | None = None
    for prop, accessor in persistent.items():
        if not accessor.has_mutator:
            raise MissingMutatorError(name, prop)
        mapping = _build_mapping(prop, accessor.annotation)
        if not is_identifier(mapping.column_name):
            raise EntityDefinitionError(name, f"invalid column name '{mapping.column_name}'")
        column_key = mapping.column_name.lower()
        if column_key in columns:
            raise EntityDefinitionError(
                name,
                f"column '{mapping.column_name}' mapped by both "
                f"'{columns[column_key]}' and '{prop}' (column names are case-insensitive)",
            )
        if mapping.is_version:
            if version_property is not None:
                raise EntityDefinitionError(
                    name, f"duplicate version property: '{version_property}' and '{prop}'"
                )
            version_property = prop
        columns[column_key] = prop
        mappings[prop] = mapping

    if requires_arguments(entity_type):
        raise EntityDefinitionError(name, "entity must be constructible without arguments")

    logger.debug("Mapped %s to table %s (%d columns)", name, table_name, len(mappings))
    return EntityMetadata(
        entity_type=entity_type,
        table_name=table_name,
        id_property=id_property,
        mappings=mappings,
        version_property=version_property,
    )
