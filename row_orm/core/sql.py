"""SQL text helpers: table extraction, pagination and identifier checks."""

from __future__ import annotations

import re

from row_orm.core.exceptions import SQLGrammarError

# select <anything> from <table> [<anything>]; keywords are case-insensitive
_SELECT_FROM = re.compile(
    r"^\s*select\s.*?\sfrom\s+(\w+)(?:\W.*)?$",
    re.IGNORECASE | re.DOTALL,
)

_FOR_UPDATE = re.compile(r"\s+for\s+update\s*$", re.IGNORECASE)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

LIMIT_CLAUSE = " limit ?,?"


def parse_table_name(sql: str) -> str:
    """Return the table named by a ``select ... from <table> ...`` statement.

    Raises:
        SQLGrammarError: If *sql* does not have that shape.
    """
    m = _SELECT_FROM.match(sql)
    if m is None:
        raise SQLGrammarError(sql)
    return m.group(1)


def build_limited_select(sql: str) -> str:
    """Append ``limit ?,?`` to *sql*, keeping a trailing ``for update`` last.

    >>> build_limited_select("select * from User where id>? for update")
    'select * from User where id>? limit ?,? for update'
    """
    m = _FOR_UPDATE.search(sql)
    if m is None:
        return sql + LIMIT_CLAUSE
    return sql[: m.start()] + LIMIT_CLAUSE + " for update"


def is_identifier(name: str) -> bool:
    """True if *name* can be written into SQL unquoted."""
    return _IDENTIFIER.match(name) is not None
