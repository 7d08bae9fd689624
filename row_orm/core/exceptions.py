"""row_orm exception hierarchy.

All exceptions are row_orm-specific. Raw driver exceptions are never
exposed to callers; they are chained as the ``__cause__`` of an
``ExecutionError``.
"""

from __future__ import annotations


class RowOrmError(Exception):
    """Base exception for all row_orm errors."""


# --- Configuration (raised while building the registry) ---


class ConfigurationError(RowOrmError):
    """Base for entity definition errors. Fatal at startup."""


class MissingIdentifierError(ConfigurationError):
    """Raised when an entity declares no identifier property."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Missing identifier on entity '{entity_name}'")


class DuplicateIdentifierError(ConfigurationError):
    """Raised when an entity declares more than one identifier property."""

    def __init__(self, entity_name: str, first: str, second: str) -> None:
        self.entity_name = entity_name
        self.properties = (first, second)
        super().__init__(
            f"Duplicate identifier on entity '{entity_name}': '{first}' and '{second}'"
        )


class MissingMutatorError(ConfigurationError):
    """Raised when a mapped property can be read but not written."""

    def __init__(self, entity_name: str, property_name: str) -> None:
        self.entity_name = entity_name
        self.property_name = property_name
        super().__init__(
            f"Property '{property_name}' of entity '{entity_name}' has an accessor "
            "but no mutator"
        )


class EntityDefinitionError(ConfigurationError):
    """Raised for any other invalid entity declaration."""

    def __init__(self, entity_name: str, detail: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Invalid entity '{entity_name}': {detail}")


class DuplicateTableError(ConfigurationError):
    """Raised when two entity types map to the same table name."""

    def __init__(self, table_name: str, type_a: str, type_b: str) -> None:
        self.table_name = table_name
        super().__init__(f"Duplicate table '{table_name}': {type_a} and {type_b}")


# --- Resolution (per call) ---


class ResolutionError(RowOrmError):
    """Base for errors resolving a call against the registry."""


class UnknownEntityError(ResolutionError):
    """Raised when a type is not a registered entity."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Unknown entity: '{entity_name}'")


class UnknownTableError(ResolutionError):
    """Raised when a table name is not mapped by any registered entity."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Unknown table: '{table_name}'")


class SQLGrammarError(ResolutionError):
    """Raised when a query does not have the ``select ... from <table>`` shape."""

    def __init__(self, sql: str) -> None:
        self.sql = sql
        super().__init__(f"SQL grammar error: {sql}")


class UnknownPropertyError(ResolutionError):
    """Raised when a property name is not mapped on the entity."""

    def __init__(self, entity_name: str, property_name: str) -> None:
        self.entity_name = entity_name
        self.property_name = property_name
        super().__init__(f"Entity '{entity_name}' has no mapped property '{property_name}'")


class NonUpdatablePropertyError(ResolutionError):
    """Raised when updating a property declared with ``updatable=False``."""

    def __init__(self, entity_name: str, property_name: str) -> None:
        self.entity_name = entity_name
        self.property_name = property_name
        super().__init__(
            f"Could not update property '{property_name}' of entity '{entity_name}' "
            "because it is not updatable"
        )


class EmptyPropertyListError(ResolutionError):
    """Raised when a statement would carry no columns to write."""

    def __init__(self, entity_name: str, detail: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"{detail} (entity '{entity_name}')")


# --- Cardinality ---


class CardinalityError(RowOrmError):
    """Base for result-size violations."""


class EmptyResultError(CardinalityError):
    """Raised when exactly one row was required but none was returned."""

    def __init__(self, sql: str) -> None:
        self.sql = sql
        super().__init__(f"Empty result for: {sql}")


class NonUniqueResultError(CardinalityError):
    """Raised when at most one row was expected but more were returned."""

    def __init__(self, sql: str, row_count: int) -> None:
        self.sql = sql
        self.row_count = row_count
        super().__init__(f"Non-unique result ({row_count} rows) for: {sql}")


# --- Mapping ---


class MappingError(RowOrmError):
    """Base for mapping errors."""


class RowMappingError(MappingError):
    """Raised when a decoded column value cannot be assigned to an entity."""

    def __init__(self, entity_name: str, column_name: str, detail: str) -> None:
        self.entity_name = entity_name
        self.column_name = column_name
        super().__init__(
            f"Cannot map column '{column_name}' onto {entity_name}: {detail}"
        )


# --- Execution ---


class ExecutionError(RowOrmError):
    """Raised when the driver fails to execute a statement."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Execution failed for '{sql}': {detail}")


# --- Adapter ---


class AdapterError(RowOrmError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
