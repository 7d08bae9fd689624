"""Unit tests for entity introspection and EntityMetadata."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Annotated

import pytest
from pydantic import BaseModel

from row_orm.core.enums import ValueKind
from row_orm.core.exceptions import (
    ConfigurationError,
    DuplicateIdentifierError,
    EntityDefinitionError,
    MissingIdentifierError,
    MissingMutatorError,
)
from row_orm.metadata.base import AbstractEntity
from row_orm.metadata.entity import build_entity_metadata
from row_orm.metadata.markers import Column, Id, Transient, Version, entity, is_entity


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


@entity(table="jobs")
@dataclass
class Job:
    id: Annotated[int, Id()] = 0
    title: str = ""


@entity
@dataclass
class NoId:
    name: str = ""


@entity
@dataclass
class TwoIds:
    a: Annotated[int, Id()] = 0
    b: Annotated[int, Id()] = 0


@entity
@dataclass
class TransientId:
    id: Annotated[int, Id(), Transient()] = 0


@entity
@dataclass(frozen=True)
class FrozenEntity:
    id: Annotated[int, Id()] = 0


@entity
class ReadOnlyTotal:
    def __init__(self) -> None:
        self._id = 0
        self._total = 0

    @property
    def id(self) -> Annotated[int, Id()]:
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        self._id = value

    @property
    def total(self) -> int:
        return self._total


@entity
class PropertyEntity:
    def __init__(self) -> None:
        self._id = 0
        self._label = ""

    @property
    def id(self) -> Annotated[int, Id()]:
        return self._id

    @id.setter
    def id(self, value: int) -> None:
        self._id = value

    @property
    def label(self) -> str:
        return self._label

    @label.setter
    def label(self, value: str) -> None:
        self._label = value

    @property
    def display(self) -> Annotated[str, Transient()]:
        return f"#{self._id} {self._label}"


@entity
@dataclass
class NeedsArgs:
    id: Annotated[int, Id()]


@entity
@dataclass
class SharedColumn:
    id: Annotated[int, Id()] = 0
    a: Annotated[str, Column(name="x")] = ""
    b: Annotated[str, Column(name="x")] = ""


@entity
@dataclass
class CaseClash:
    id: Annotated[int, Id()] = 0
    name: str = ""
    label: Annotated[str, Column(name="Name")] = ""


@entity
@dataclass
class TwoVersions:
    id: Annotated[int, Id()] = 0
    v1: Annotated[int, Version()] = 0
    v2: Annotated[int, Version()] = 0


@entity(table="bad table")
@dataclass
class BadTable:
    id: Annotated[int, Id()] = 0


@entity
@dataclass
class BadColumn:
    id: Annotated[int, Id()] = 0
    name: Annotated[str, Column(name="name; drop table x")] = ""


@entity
class Person(BaseModel):
    id: Annotated[int, Id()] = 0
    name: str = ""
    status: Status | None = None


@entity
@dataclass
class Account(AbstractEntity):
    owner: str = ""


@dataclass
class SubUser(User):
    extra: str = ""


class TestEntityMarker:
    def test_bare_decorator(self) -> None:
        assert is_entity(User)

    def test_undecorated_type(self) -> None:
        assert not is_entity(AbstractEntity)

    def test_marker_not_inherited(self) -> None:
        assert not is_entity(SubUser)


class TestBuildMetadata:
    def test_table_defaults_to_type_name(self) -> None:
        md = build_entity_metadata(User)
        assert md.table_name == "User"
        assert md.entity_name == "User"
        assert md.entity_type is User

    def test_table_override(self) -> None:
        assert build_entity_metadata(Job).table_name == "jobs"

    def test_identifier(self) -> None:
        md = build_entity_metadata(User)
        assert md.id_property == "id"
        assert md.id_mapping.is_identifier
        assert md.id_mapping.column_name == "id"

    def test_transient_excluded(self) -> None:
        md = build_entity_metadata(User)
        assert "scratch" not in md.mappings
        assert set(md.mappings) == {
            "id", "name", "passwd", "css_style_name", "status", "created", "secret",
        }

    def test_column_override(self) -> None:
        md = build_entity_metadata(User)
        assert md.mappings["css_style_name"].column_name == "style"

    def test_insertable_and_updatable_flags(self) -> None:
        md = build_entity_metadata(User)
        assert md.mappings["created"].insertable
        assert not md.mappings["created"].updatable
        assert not md.mappings["secret"].insertable
        assert md.mappings["secret"].updatable

    def test_value_kinds(self) -> None:
        md = build_entity_metadata(User)
        assert md.mappings["status"].value_kind is ValueKind.ENUM
        assert md.mappings["status"].enum_type is Status
        assert md.mappings["name"].value_kind is ValueKind.SCALAR

    def test_optional_enum_detected(self) -> None:
        md = build_entity_metadata(Person)
        assert md.mappings["status"].enum_type is Status

    def test_column_lookup_exact_then_case_insensitive(self) -> None:
        md = build_entity_metadata(User)
        assert md.column_mapping("style") is md.mappings["css_style_name"]
        assert md.column_mapping("STYLE") is md.mappings["css_style_name"]
        assert md.column_mapping("Name") is md.mappings["name"]
        assert md.column_mapping("unknown") is None

    def test_property_accessors(self) -> None:
        md = build_entity_metadata(PropertyEntity)
        assert set(md.mappings) == {"id", "label"}

    def test_pydantic_model(self) -> None:
        md = build_entity_metadata(Person)
        assert md.table_name == "Person"
        assert set(md.mappings) == {"id", "name", "status"}

    def test_inherited_base_properties(self) -> None:
        md = build_entity_metadata(Account)
        assert set(md.mappings) == {
            "id", "version", "creation_time", "modified_time", "owner",
        }
        assert md.version_property == "version"
        assert md.mappings["id"].length == 32
        assert not md.mappings["id"].nullable
        assert not md.mappings["id"].updatable
        assert not md.mappings["creation_time"].updatable

    def test_no_version_property(self) -> None:
        assert build_entity_metadata(User).version_property is None

    def test_new_instance_is_fresh(self) -> None:
        md = build_entity_metadata(User)
        first = md.new_instance()
        assert isinstance(first, User)
        assert first is not md.new_instance()

    def test_id_value(self) -> None:
        md = build_entity_metadata(User)
        assert md.id_value(User(id=42)) == 42


class TestMetadataErrors:
    def test_missing_identifier(self) -> None:
        with pytest.raises(MissingIdentifierError, match="NoId"):
            build_entity_metadata(NoId)

    def test_duplicate_identifier(self) -> None:
        with pytest.raises(DuplicateIdentifierError) as exc_info:
            build_entity_metadata(TwoIds)
        assert exc_info.value.properties == ("a", "b")

    def test_transient_identifier_is_missing(self) -> None:
        with pytest.raises(MissingIdentifierError):
            build_entity_metadata(TransientId)

    def test_frozen_dataclass_has_no_mutators(self) -> None:
        with pytest.raises(MissingMutatorError) as exc_info:
            build_entity_metadata(FrozenEntity)
        assert exc_info.value.property_name == "id"

    def test_read_only_property(self) -> None:
        with pytest.raises(MissingMutatorError) as exc_info:
            build_entity_metadata(ReadOnlyTotal)
        assert exc_info.value.property_name == "total"

    def test_constructor_arguments_required(self) -> None:
        with pytest.raises(EntityDefinitionError, match="without arguments"):
            build_entity_metadata(NeedsArgs)

    def test_shared_column(self) -> None:
        with pytest.raises(EntityDefinitionError, match="mapped by both"):
            build_entity_metadata(SharedColumn)

    def test_columns_differing_only_by_case(self) -> None:
        with pytest.raises(EntityDefinitionError, match="case-insensitive"):
            build_entity_metadata(CaseClash)

    def test_duplicate_version(self) -> None:
        with pytest.raises(EntityDefinitionError, match="duplicate version"):
            build_entity_metadata(TwoVersions)

    def test_invalid_table_name(self) -> None:
        with pytest.raises(EntityDefinitionError, match="invalid table name"):
            build_entity_metadata(BadTable)

    def test_invalid_column_name(self) -> None:
        with pytest.raises(EntityDefinitionError, match="invalid column name"):
            build_entity_metadata(BadColumn)

    def test_all_are_configuration_errors(self) -> None:
        for cls in (NoId, TwoIds, FrozenEntity, NeedsArgs, BadTable):
            with pytest.raises(ConfigurationError):
                build_entity_metadata(cls)


class TestImmutability:
    def test_metadata_is_frozen(self) -> None:
        md = build_entity_metadata(User)
        with pytest.raises(dataclasses.FrozenInstanceError):
            md.table_name = "other"  # type: ignore[misc]

    def test_mappings_are_read_only(self) -> None:
        md = build_entity_metadata(User)
        with pytest.raises(TypeError):
            md.mappings["name"] = md.mappings["passwd"]  # type: ignore[index]


class TestPropertyMapping:
    def test_enum_bound_by_name(self) -> None:
        mapping = build_entity_metadata(User).mappings["status"]
        assert mapping.get(User(status=Status.DISABLED)) == "DISABLED"

    def test_enum_decoded_from_name(self) -> None:
        mapping = build_entity_metadata(User).mappings["status"]
        user = User()
        mapping.set(user, "DISABLED")
        assert user.status is Status.DISABLED

    def test_enum_instance_assigned_as_is(self) -> None:
        mapping = build_entity_metadata(User).mappings["status"]
        user = User()
        mapping.set(user, Status.DISABLED)
        assert user.status is Status.DISABLED

    def test_scalar_passthrough(self) -> None:
        mapping = build_entity_metadata(User).mappings["name"]
        user = User()
        mapping.set(user, "alice")
        assert mapping.get(user) == "alice"
