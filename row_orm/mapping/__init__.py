"""Mapping layer - transform result rows into entities and scalars."""

from __future__ import annotations

from row_orm.mapping.entity import EntityMapper
from row_orm.mapping.protocol import Mapper
from row_orm.mapping.scalar import ScalarMapper

__all__ = [
    "EntityMapper",
    "Mapper",
    "ScalarMapper",
]
