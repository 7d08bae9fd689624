"""
Example 01: Entity CRUD

This example demonstrates declaring an entity and using Db's generated
insert, update, select and delete statements.
"""

import enum
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from row_orm import Column, ConnectionClient, ConnectionConfig, Db, EntityRegistry, Id, Transient, entity


class Role(enum.Enum):
    MEMBER = 1
    ADMIN = 2


@entity(table="users")
@dataclass
class User:
    id: Annotated[int, Id()] = 0
    name: str = ""
    email: str = ""
    role: Role = Role.MEMBER
    created_at: Annotated[int, Column(updatable=False)] = 0
    cached_greeting: Annotated[str, Transient()] = ""


def main():
    logging.basicConfig(level=logging.INFO)

    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    config = ConnectionConfig(driver="sqlite", database=db_path, pool_size=1)
    client = ConnectionClient.from_config(config)
    db = Db(EntityRegistry([User]), client)

    db.execute_update("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            role TEXT NOT NULL,
            created_at INTEGER NOT NULL
        )
    """)

    print("=== Generated SQL ===\n")
    statements = db.registry.get(User).statements
    print(f"select: {statements.select_template.sql}")
    print(f"insert: {statements.insert_template.sql}")
    print(f"update: {statements.update_template.sql}")
    print(f"delete: {statements.delete_template.sql}\n")

    print("=== CRUD ===\n")
    alice = User(id=1, name="Alice", email="alice@example.com", role=Role.ADMIN, created_at=1700000000)
    db.create(alice)
    print(f"created: {db.get_by_id(User, 1)}")

    # Only the named column is written
    alice.email = "alice@new.example.com"
    alice.name = "not saved"
    db.update_properties(alice, "email")
    print(f"after update_properties: {db.get_by_id(User, 1)}")

    alice.name = "Alice Smith"
    db.update_entity(alice)
    print(f"after update_entity: {db.get_by_id(User, 1)}")

    db.delete_entity(alice)
    print(f"after delete: {db.get_by_id(User, 1)}")

    client.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
