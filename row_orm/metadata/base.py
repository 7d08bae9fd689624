"""Reusable entity base carrying identity, version and timestamps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from row_orm.metadata.markers import Column, Id, Version


@dataclass
class AbstractEntity:
    """Base for entities keyed by a 32-character string id.

    Not an entity itself: subclasses add ``@entity`` and their own fields,
    which must all have defaults.
    """

    id: Annotated[str | None, Id(), Column(nullable=False, updatable=False, length=32)] = None
    version: Annotated[int, Version(), Column(nullable=False)] = 0
    creation_time: Annotated[int, Column(nullable=False, updatable=False)] = 0
    modified_time: Annotated[int, Column(nullable=False)] = 0
