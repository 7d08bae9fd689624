"""Discovery layer - enumerate candidate types under a namespace."""

from __future__ import annotations

from row_orm.discovery.catalog import TypeCatalog

__all__ = ["TypeCatalog"]
