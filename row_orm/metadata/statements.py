"""Statement templates and per-entity SQL generation.

Templates are pure functions of immutable metadata. Each one is built on
first use and stored by a single attribute assignment, so concurrent
first use at worst computes the same text twice.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from row_orm.core.exceptions import (
    EmptyPropertyListError,
    NonUpdatablePropertyError,
    UnknownPropertyError,
)

if TYPE_CHECKING:
    from row_orm.metadata.entity import EntityMetadata


@dataclass(frozen=True)
class StatementTemplate:
    """SQL text plus the properties supplying its parameters, in order."""

    sql: str
    properties: tuple[str, ...]


@dataclass(frozen=True)
class SQLOperation:
    """A statement ready to execute: SQL text and bound parameters."""

    sql: str
    params: tuple[Any, ...]


class StatementCache:
    """Lazily generated statement templates for one ``EntityMetadata``."""

    def __init__(self, metadata: EntityMetadata) -> None:
        self._metadata = metadata
        self._select_by_id: StatementTemplate | None = None
        self._delete_by_id: StatementTemplate | None = None
        self._insert: StatementTemplate | None = None
        self._update: StatementTemplate | None = None

    # -- templates -----------------------------------------------------------

    @property
    def select_template(self) -> StatementTemplate:
        """``select * from <table> where <id> = ?``"""
        template = self._select_by_id
        if template is None:
            template = self._by_id("select *")
            self._select_by_id = template
        return template

    @property
    def delete_template(self) -> StatementTemplate:
        """``delete from <table> where <id> = ?``"""
        template = self._delete_by_id
        if template is None:
            template = self._by_id("delete")
            self._delete_by_id = template
        return template

    @property
    def insert_template(self) -> StatementTemplate:
        """``insert into <table> (<a>, <b>) values (?, ?)``, columns sorted by property."""
        template = self._insert
        if template is None:
            template = self._build_insert()
            self._insert = template
        return template

    @property
    def update_template(self) -> StatementTemplate:
        """``update <table> set <a>=?, <b>=? where <id>=?``, id bound last."""
        template = self._update
        if template is None:
            md = self._metadata
            properties = [
                name
                for name, m in sorted(md.mappings.items())
                if m.updatable and name != md.id_property
            ]
            if not properties:
                raise EmptyPropertyListError(md.entity_name, "No updatable properties")
            template = self._build_update(properties)
            self._update = template
        return template

    def update_subset_template(self, property_names: Sequence[str]) -> StatementTemplate:
        """Build (without caching) an update of the named properties, in order."""
        md = self._metadata
        if not property_names:
            raise EmptyPropertyListError(md.entity_name, "Update properties required")
        for name in property_names:
            mapping = md.mappings.get(name)
            if mapping is None:
                raise UnknownPropertyError(md.entity_name, name)
            if not mapping.updatable:
                raise NonUpdatablePropertyError(md.entity_name, name)
        return self._build_update(list(property_names))

    def _by_id(self, verb: str) -> StatementTemplate:
        md = self._metadata
        sql = f"{verb} from {md.table_name} where {md.id_mapping.column_name} = ?"
        return StatementTemplate(sql, (md.id_property,))

    def _build_insert(self) -> StatementTemplate:
        md = self._metadata
        properties = [name for name, m in sorted(md.mappings.items()) if m.insertable]
        if not properties:
            raise EmptyPropertyListError(md.entity_name, "No insertable properties")
        columns = ", ".join(md.mappings[name].column_name for name in properties)
        placeholders = ", ".join("?" for _ in properties)
        sql = f"insert into {md.table_name} ({columns}) values ({placeholders})"
        return StatementTemplate(sql, tuple(properties))

    def _build_update(self, properties: list[str]) -> StatementTemplate:
        md = self._metadata
        assignments = ", ".join(f"{md.mappings[name].column_name}=?" for name in properties)
        sql = (
            f"update {md.table_name} set {assignments} "
            f"where {md.id_mapping.column_name}=?"
        )
        return StatementTemplate(sql, (*properties, md.id_property))

    # -- operations ----------------------------------------------------------

    def _bind(self, template: StatementTemplate, entity: Any) -> SQLOperation:
        mappings = self._metadata.mappings
        params = tuple(mappings[name].get(entity) for name in template.properties)
        return SQLOperation(template.sql, params)

    def get_by_id(self, id_value: Any) -> SQLOperation:
        return SQLOperation(self.select_template.sql, (id_value,))

    def delete_by_id(self, id_value: Any) -> SQLOperation:
        return SQLOperation(self.delete_template.sql, (id_value,))

    def delete_entity(self, entity: Any) -> SQLOperation:
        return self.delete_by_id(self._metadata.id_value(entity))

    def insert_entity(self, entity: Any) -> SQLOperation:
        return self._bind(self.insert_template, entity)

    def update_entity(self, entity: Any) -> SQLOperation:
        return self._bind(self.update_template, entity)

    def update_properties(self, entity: Any, property_names: Sequence[str]) -> SQLOperation:
        return self._bind(self.update_subset_template(property_names), entity)
