"""SQL parameter normalization.

Generated and caller SQL uses ``?`` placeholders. Drivers with the
``format`` paramstyle (mysql-connector) expect ``%s`` instead; string
literals are left untouched.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

# A single-quoted literal (backslash escapes allowed) or a bare placeholder
_LITERAL_OR_PLACEHOLDER = re.compile(r"'(?:[^'\\]|\\.)*'|\?")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Rewrite ``?`` placeholders for the driver's paramstyle.

    Args:
        sql: SQL string with ``?`` placeholders.
        paramstyle: ``qmark`` (returned as is) or ``format`` (``%s``).
    """
    if paramstyle == "qmark":
        return sql
    return _to_format(sql)


def _placeholder_to_format(match: re.Match[str]) -> str:
    token = match.group()
    return "%s" if token == "?" else token


@lru_cache(maxsize=256)
def _to_format(sql: str) -> str:
    return _LITERAL_OR_PLACEHOLDER.sub(_placeholder_to_format, sql)


def coerce_params(params: Sequence[Any] | Any | None) -> tuple[Any, ...]:
    """Normalize *params* to a tuple for positional binding.

    * ``None`` → empty tuple.
    * ``tuple`` / ``list`` → ``tuple``.
    * Any other scalar → wrapped in a single-element tuple.
    """
    if params is None:
        return ()
    if isinstance(params, (tuple, list)):
        return tuple(params)
    return (params,)
