"""Accessor/mutator discovery for entity types.

Supports Pydantic models, dataclasses, plain annotated classes and public
``property`` objects. Detection order follows the mapping layer:
Pydantic fields, then dataclass fields, then remaining class annotations.
"""

from __future__ import annotations

import dataclasses
import enum
import inspect
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Union

# Properties defined by these modules belong to the model machinery, not the entity
_FRAMEWORK_MODULES = ("builtins", "pydantic")


@dataclass(frozen=True)
class Accessor:
    """One readable property of an entity type."""

    name: str
    annotation: Any
    has_mutator: bool


def _is_frozen(cls: type) -> bool:
    """Check if instances of *cls* reject attribute assignment."""
    if hasattr(cls, "model_config"):
        return bool(cls.model_config.get("frozen", False))  # type: ignore[attr-defined]
    if dataclasses.is_dataclass(cls):
        return bool(cls.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    return False


def _field_annotations(cls: type) -> dict[str, Any]:
    """Extract persistent fields and their annotations (Pydantic, dataclass, or plain)."""
    # Pydantic model: Annotated extras are kept on FieldInfo.metadata
    if hasattr(cls, "model_fields"):
        fields: dict[str, Any] = {}
        for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
            annotation = info.annotation
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]  # type: ignore[valid-type]
            fields[name] = annotation
        return fields

    hints = typing.get_type_hints(cls, include_extras=True)

    # Dataclass
    if dataclasses.is_dataclass(cls):
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls)}

    # Plain class - annotated attributes
    return {
        name: hint
        for name, hint in hints.items()
        if hint is not ClassVar and typing.get_origin(hint) is not ClassVar
    }


def _properties(cls: type) -> dict[str, property]:
    """Collect public properties along the MRO; subclasses override."""
    found: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        if klass.__module__.split(".")[0] in _FRAMEWORK_MODULES:
            continue
        for name, attr in vars(klass).items():
            if isinstance(attr, property):
                found[name] = attr
            elif name in found:
                del found[name]
    return found


def find_accessors(cls: type) -> dict[str, Accessor]:
    """Enumerate the readable public properties of *cls*, keyed by name.

    Raises:
        NameError: If an annotation refers to an undefined name.
    """
    writable = not _is_frozen(cls)

    accessors: dict[str, Accessor] = {}
    for name, annotation in _field_annotations(cls).items():
        if name.startswith("_"):
            continue
        accessors[name] = Accessor(name, annotation, writable)

    for name, prop in _properties(cls).items():
        if name.startswith("_") or prop.fget is None:
            continue
        annotation = typing.get_type_hints(prop.fget, include_extras=True).get("return", Any)
        accessors[name] = Accessor(name, annotation, prop.fset is not None)

    return accessors


def split_annotation(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, m1, m2]`` into ``(T, (m1, m2))``."""
    if typing.get_origin(annotation) is Annotated:
        base, *extras = typing.get_args(annotation)
        return base, tuple(extras)
    return annotation, ()


def enum_type_of(annotation: Any) -> type[enum.Enum] | None:
    """Return the Enum class behind *annotation*, unwrapping ``Optional``."""
    base, _ = split_annotation(annotation)
    if typing.get_origin(base) in (Union, types.UnionType):
        members = [arg for arg in typing.get_args(base) if arg is not type(None)]
        if len(members) != 1:
            return None
        base = members[0]
    if inspect.isclass(base) and issubclass(base, enum.Enum):
        return base
    return None


def requires_arguments(cls: type) -> bool:
    """True if ``cls()`` cannot be called without arguments."""
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    return any(
        p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in sig.parameters.values()
    )
