"""Unit tests for StatementCache SQL generation and parameter binding."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import Annotated

import pytest

from row_orm.core.exceptions import (
    EmptyPropertyListError,
    NonUpdatablePropertyError,
    UnknownPropertyError,
)
from row_orm.metadata.entity import build_entity_metadata
from row_orm.metadata.markers import Column, Id, Transient, entity
from row_orm.metadata.statements import SQLOperation


class Status(enum.Enum):
    ACTIVE = 1
    DISABLED = 2


@entity
@dataclass
class User:
    id: Annotated[int, Id()] = 0
    name: str = ""
    passwd: str = ""
    css_style_name: Annotated[str | None, Column(name="style")] = None
    status: Status = Status.ACTIVE
    created: Annotated[int, Column(updatable=False)] = 0
    secret: Annotated[str, Column(insertable=False)] = ""
    scratch: Annotated[str, Transient()] = ""


@entity(table="tags")
@dataclass
class Tag:
    tag_id: Annotated[str, Id(), Column(name="tid")] = ""


INSERT_SQL = "insert into User (created, style, id, name, passwd, status) values (?, ?, ?, ?, ?, ?)"
UPDATE_SQL = "update User set style=?, name=?, passwd=?, secret=?, status=? where id=?"


def _alice() -> User:
    return User(
        id=7,
        name="alice",
        passwd="pw",
        css_style_name="dark",
        status=Status.DISABLED,
        created=100,
        secret="s",
        scratch="ignored",
    )


class TestTemplates:
    def test_select_by_id(self) -> None:
        statements = build_entity_metadata(User).statements
        assert statements.select_template.sql == "select * from User where id = ?"
        assert statements.select_template.properties == ("id",)

    def test_delete_by_id(self) -> None:
        statements = build_entity_metadata(User).statements
        assert statements.delete_template.sql == "delete from User where id = ?"

    def test_insert_sorted_by_property_name(self) -> None:
        template = build_entity_metadata(User).statements.insert_template
        assert template.sql == INSERT_SQL
        assert template.properties == (
            "created", "css_style_name", "id", "name", "passwd", "status",
        )

    def test_update_excludes_identifier_and_non_updatable(self) -> None:
        template = build_entity_metadata(User).statements.update_template
        assert template.sql == UPDATE_SQL
        assert template.properties[-1] == "id"

    def test_identifier_column_override(self) -> None:
        statements = build_entity_metadata(Tag).statements
        assert statements.select_template.sql == "select * from tags where tid = ?"
        assert statements.insert_template.sql == "insert into tags (tid) values (?)"

    def test_templates_are_cached(self) -> None:
        statements = build_entity_metadata(User).statements
        assert statements.insert_template is statements.insert_template
        assert statements.update_template is statements.update_template
        assert statements.select_template is statements.select_template
        assert statements.delete_template is statements.delete_template

    def test_subset_template_not_cached(self) -> None:
        statements = build_entity_metadata(User).statements
        first = statements.update_subset_template(["name"])
        second = statements.update_subset_template(["name"])
        assert first == second
        assert first is not second

    def test_no_updatable_properties(self) -> None:
        statements = build_entity_metadata(Tag).statements
        with pytest.raises(EmptyPropertyListError, match="No updatable properties"):
            statements.update_template

    def test_concurrent_first_use_yields_same_text(self) -> None:
        statements = build_entity_metadata(User).statements
        barrier = threading.Barrier(8)
        results: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            sql = statements.insert_template.sql
            with lock:
                results.append(sql)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [INSERT_SQL] * 8


class TestOperations:
    def test_get_by_id(self) -> None:
        op = build_entity_metadata(User).statements.get_by_id(5)
        assert op == SQLOperation("select * from User where id = ?", (5,))

    def test_delete_entity_uses_identifier(self) -> None:
        op = build_entity_metadata(User).statements.delete_entity(_alice())
        assert op == SQLOperation("delete from User where id = ?", (7,))

    def test_insert_entity_binds_enum_by_name(self) -> None:
        op = build_entity_metadata(User).statements.insert_entity(_alice())
        assert op.sql == INSERT_SQL
        assert op.params == (100, "dark", 7, "alice", "pw", "DISABLED")

    def test_update_entity_binds_identifier_last(self) -> None:
        op = build_entity_metadata(User).statements.update_entity(_alice())
        assert op.sql == UPDATE_SQL
        assert op.params == ("dark", "alice", "pw", "s", "DISABLED", 7)

    def test_update_properties_keeps_given_order(self) -> None:
        op = build_entity_metadata(User).statements.update_properties(
            _alice(), ["passwd", "name"]
        )
        assert op.sql == "update User set passwd=?, name=? where id=?"
        assert op.params == ("pw", "alice", 7)

    def test_update_properties_column_override(self) -> None:
        op = build_entity_metadata(User).statements.update_properties(
            _alice(), ["css_style_name"]
        )
        assert op.sql == "update User set style=? where id=?"
        assert op.params == ("dark", 7)

    def test_update_properties_identifier_allowed(self) -> None:
        op = build_entity_metadata(User).statements.update_properties(_alice(), ["id"])
        assert op.sql == "update User set id=? where id=?"
        assert op.params == (7, 7)

    def test_update_properties_empty(self) -> None:
        statements = build_entity_metadata(User).statements
        with pytest.raises(EmptyPropertyListError, match="Update properties required"):
            statements.update_properties(_alice(), [])

    def test_update_properties_not_updatable(self) -> None:
        statements = build_entity_metadata(User).statements
        with pytest.raises(NonUpdatablePropertyError) as exc_info:
            statements.update_properties(_alice(), ["name", "created"])
        assert exc_info.value.property_name == "created"

    def test_update_properties_unknown(self) -> None:
        statements = build_entity_metadata(User).statements
        with pytest.raises(UnknownPropertyError):
            statements.update_properties(_alice(), ["nickname"])

    def test_transient_is_unknown(self) -> None:
        statements = build_entity_metadata(User).statements
        with pytest.raises(UnknownPropertyError):
            statements.update_properties(_alice(), ["scratch"])
