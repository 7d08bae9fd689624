"""
Example 03: Entity Discovery

This example demonstrates building a Db from configuration: every class
decorated with @entity under a package namespace is registered at startup.
"""

import tempfile
from pathlib import Path

from row_orm import ConnectionConfig, Db, DbConfig, TypeCatalog

MODELS = '''
from dataclasses import dataclass
from typing import Annotated

from row_orm import AbstractEntity, Id, entity


@entity
@dataclass
class Customer(AbstractEntity):
    name: str = ""


@entity(table="orders")
@dataclass
class Order:
    id: Annotated[int, Id()] = 0
    customer_id: str = ""
'''


def main():
    src_dir = Path(tempfile.mkdtemp())
    package = src_dir / "shop" / "models"
    package.mkdir(parents=True)
    (src_dir / "shop" / "__init__.py").write_text("")
    (package / "__init__.py").write_text("")
    (package / "entities.py").write_text(MODELS)

    print("=== Modules under shop.models ===\n")
    for name in sorted(TypeCatalog("shop.models", search_path=[src_dir]).module_names()):
        print(f"  - {name}")
    print()

    config = DbConfig(
        namespace="shop.models",
        connection=ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1),
        search_path=[str(src_dir)],
    )
    db = Db.from_config(config)

    print("=== Registered tables ===\n")
    for table in db.registry.table_names:
        metadata = db.registry.get_by_table(table)
        columns = ", ".join(m.column_name for m in metadata.mappings.values())
        print(f"  {table} -> {metadata.entity_name} ({columns})")


if __name__ == "__main__":
    main()
