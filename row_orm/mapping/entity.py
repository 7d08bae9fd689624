"""Row-to-entity mapper.

Each row becomes a fresh instance of the entity type. Columns with no
mapping are ignored, nulls leave the property at its default value, and
enum properties are decoded from their symbolic name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from row_orm.core.exceptions import RowMappingError
from row_orm.metadata.entity import EntityMetadata

T = TypeVar("T")


class EntityMapper(Generic[T]):
    """Materializes result rows into instances of one entity type.

    Args:
        metadata: Metadata of the target entity type.
    """

    def __init__(self, metadata: EntityMetadata) -> None:
        self._metadata = metadata

    @property
    def metadata(self) -> EntityMetadata:
        return self._metadata

    def map_row(self, columns: Sequence[str], values: Sequence[Any]) -> T:
        """Map positional values, named by *columns* in physical order."""
        return self._materialize(zip(columns, values, strict=True))

    def map_one(self, row: Mapping[str, Any]) -> T:
        """Map a single row dict to an entity instance."""
        return self._materialize(row.items())

    def map_many(self, rows: list[Mapping[str, Any]]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]

    def _materialize(self, cells: Iterable[tuple[str, Any]]) -> T:
        md = self._metadata
        instance = md.new_instance()
        for column, value in cells:
            if value is None:
                continue
            mapping = md.column_mapping(column)
            if mapping is None:
                continue
            try:
                mapping.set(instance, value)
            except Exception as e:
                raise RowMappingError(md.entity_name, column, f"{type(e).__name__}: {e}") from e
        return instance  # type: ignore[no-any-return]
