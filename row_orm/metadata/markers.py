"""Persistence markers.

Property markers are attached with ``typing.Annotated``, either on a field
annotation or on the return annotation of a property getter::

    @entity(table="users")
    @dataclass
    class User:
        id: Annotated[int, Id()] = 0
        name: str = ""
        style: Annotated[str | None, Column(name="css_style_name")] = None
        cache: Annotated[dict | None, Transient()] = None
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar, overload

T = TypeVar("T", bound=type)

ENTITY_ATTR = "__row_orm_entity__"


@dataclass(frozen=True)
class Id:
    """Marks the identifying property (primary key)."""


@dataclass(frozen=True)
class Version:
    """Marks an optimistic-concurrency counter. Tracked, not enforced."""


@dataclass(frozen=True)
class Transient:
    """Excludes a property from all mapping."""


@dataclass(frozen=True)
class Column:
    """Explicit column settings. ``length`` and ``nullable`` are informational."""

    name: str | None = None
    insertable: bool = True
    updatable: bool = True
    nullable: bool = True
    length: int | None = None


@dataclass(frozen=True)
class EntityInfo:
    """Type-level settings recorded by ``@entity``."""

    table: str | None = None


@overload
def entity(cls: T, *, table: str | None = None) -> T: ...


@overload
def entity(cls: None = None, *, table: str | None = None) -> Callable[[T], T]: ...


def entity(cls: Any = None, *, table: str | None = None) -> Any:
    """Class decorator making a type discoverable as an entity.

    Usable bare (``@entity``) or with a table override
    (``@entity(table="users")``).
    """

    def wrap(target: T) -> T:
        setattr(target, ENTITY_ATTR, EntityInfo(table=table))
        return target

    if cls is None:
        return wrap
    return wrap(cls)


def entity_info(cls: type) -> EntityInfo | None:
    """Return the ``EntityInfo`` declared directly on *cls*, if any."""
    info = cls.__dict__.get(ENTITY_ATTR)
    return info if isinstance(info, EntityInfo) else None


def is_entity(cls: type) -> bool:
    """Discovery predicate: *cls* itself was decorated with ``@entity``."""
    return entity_info(cls) is not None
