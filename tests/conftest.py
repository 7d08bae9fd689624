"""Shared test fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from row_orm.core.connection import ConnectionConfig


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config (single connection, one database)."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def forget_modules():
    """Collect top-level package names to drop from sys.modules after the test."""
    names: set[str] = set()
    yield names
    for module_name in list(sys.modules):
        if module_name.split(".")[0] in names:
            del sys.modules[module_name]


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    """Temporary source root for generated modules."""
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def write_source(src_dir: Path, forget_modules: set[str]):
    """Helper to write modules into the temp source root, leaving sys.path alone.

    Usage:
        write_source("shop/models/product.py", "class Product: ...")
    """

    def _write(relative_path: str, content: str = "") -> Path:
        file_path = src_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        forget_modules.add(relative_path.split("/")[0].removesuffix(".py"))
        return file_path

    return _write
