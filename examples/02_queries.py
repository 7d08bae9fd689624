"""
Example 02: Entity Queries and Pagination

This example demonstrates query_for_list, query_for_limited_list and the
scalar helpers. The target entity is inferred from the table after FROM.
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from row_orm import Column, ConnectionClient, ConnectionConfig, Db, EntityRegistry, Id, entity


@entity(table="jobs")
@dataclass
class Job:
    id: Annotated[int, Id()] = 0
    title: Annotated[str, Column(name="job_title")] = ""
    priority: int = 0


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    client = ConnectionClient.from_config(
        ConnectionConfig(driver="sqlite", database=db_path, pool_size=1)
    )
    db = Db(EntityRegistry([Job]), client)
    db.execute_update("CREATE TABLE jobs (id INTEGER PRIMARY KEY, job_title TEXT, priority INTEGER)")

    for i in range(1, 8):
        db.create(Job(id=i, title=f"job-{i}", priority=i % 3))

    print("=== query_for_list ===\n")
    for job in db.query_for_list("select * from jobs where priority=? order by id", 1):
        print(f"  - {job}")
    print()

    print("=== query_for_limited_list ===\n")
    sql = "select * from jobs where id>=? order by id"
    first = 0
    while True:
        page = db.query_for_limited_list(sql, first, 3, 1)
        if not page:
            break
        print(f"page at {first}: {[job.id for job in page]}")
        first += len(page)
    print()

    print("=== scalars ===\n")
    print(f"count: {db.query_for_long('select count(*) from jobs')}")
    print(f"max priority: {db.query_for_int('select max(priority) from jobs')}")
    print(f"single job: {db.query_for_object('select * from jobs where job_title=?', 'job-4')}")

    client.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
