"""First-column scalar mapper used by the ``query_for_long``/``query_for_int`` helpers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from row_orm.core.exceptions import RowMappingError

T = TypeVar("T")


def integer(value: Any) -> int:
    """Convert *value* to ``int`` without dropping a fractional part."""
    number = int(value)
    if not isinstance(value, str) and number != value:
        raise ValueError(f"{value!r} is not an integral value")
    return number


class ScalarMapper(Generic[T]):
    """Maps each row to its first column value passed through *convert*.

    A NULL value maps to ``convert(0)``. A value *convert* rejects raises
    ``RowMappingError``.
    """

    def __init__(self, convert: Callable[[Any], T]) -> None:
        self._convert = convert

    def map_one(self, row: Mapping[str, Any]) -> T:
        column, value = next(iter(row.items()), ("", None))
        try:
            return self._convert(0 if value is None else value)
        except (TypeError, ValueError, OverflowError) as e:
            target = getattr(self._convert, "__name__", "scalar")
            raise RowMappingError(target, column, str(e)) from e

    def map_many(self, rows: list[Mapping[str, Any]]) -> list[T]:
        return [self.map_one(row) for row in rows]
