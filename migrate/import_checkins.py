#!/usr/bin/env python3
"""Bulk-load subjects, machines and check-ins from JSONL into the store.

Each line is one object with a ``table`` key (``subjects``, ``machines`` or
``checkins``) plus that table's columns:

    {"table": "subjects", "id": 25, "name": "Pikachu", "type_primary": "Electric"}
    {"table": "checkins", "id": 1, "subject_id": 25, "machine_id": 1,
     "arrived_at": "2024-03-05 14:37:10", "healed_at": null, "outcome": null}

Run:
    DB_PATH=./data/healstats.db python -m migrate.import_checkins export.jsonl
"""

import json
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from healstats.db import get_conn
from healstats.models import Checkin, Machine, Subject

BATCH_SIZE = 10000

TABLES = {
    "subjects": (Subject, ("id", "name", "type_primary", "type_secondary")),
    "machines": (Machine, ("id", "name", "model", "location")),
    "checkins": (Checkin, ("id", "subject_id", "machine_id", "arrived_at", "healed_at",
                           "outcome", "initial_hp", "max_hp")),
}
_INSERT_SQL = {
    table: f"INSERT OR IGNORE INTO {table}({','.join(cols)}) VALUES({','.join('?' for _ in cols)})"
    for table, (_, cols) in TABLES.items()
}


def _to_row(table: str, rec: dict) -> tuple | None:
    model, cols = TABLES[table]
    try:
        obj = model(**rec)
    except ValidationError:
        return None
    if isinstance(obj, Checkin) and obj.healed_at is not None and obj.healed_at < obj.arrived_at:
        return None
    values = obj.model_dump()
    return tuple(
        values[c].strftime("%Y-%m-%d %H:%M:%S") if hasattr(values[c], "strftime") else values[c]
        for c in cols
    )


def load_file(conn, path: Path) -> dict:
    """Insert every valid line of ``path``; returns per-table and skipped counts."""
    counts = {table: 0 for table in TABLES}
    counts["skipped"] = 0
    batches: dict[str, list[tuple]] = {table: [] for table in TABLES}

    with open(path) as f:
        for line in f:
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
            except (json.JSONDecodeError, ValueError):
                counts["skipped"] += 1
                continue
            table = rec.pop("table", None) if isinstance(rec, dict) else None
            if table not in TABLES:
                counts["skipped"] += 1
                continue
            row = _to_row(table, rec)
            if row is None:
                counts["skipped"] += 1
                continue
            batches[table].append(row)
            if len(batches[table]) >= BATCH_SIZE:
                counts[table] += _flush(conn, table, batches[table])
                batches[table] = []

    for table, batch in batches.items():
        if batch:
            counts[table] += _flush(conn, table, batch)
    return counts


def _flush(conn, table: str, batch: list[tuple]) -> int:
    cur = conn.executemany(_INSERT_SQL[table], batch)
    conn.commit()
    return cur.rowcount


def main(argv: list[str]) -> int:
    if len(argv) != 1:
        print("usage: python -m migrate.import_checkins FILE.jsonl", file=sys.stderr)
        return 2
    path = Path(argv[0])
    if not path.is_file():
        print(f"File {path} not found.", file=sys.stderr)
        return 1

    conn = get_conn()
    counts = load_file(conn, path)

    print("Import complete:")
    print(f"  Subjects inserted: {counts['subjects']}")
    print(f"  Machines inserted: {counts['machines']}")
    print(f"  Check-ins inserted: {counts['checkins']}")
    print(f"  Skipped:           {counts['skipped']}")

    row = conn.execute("SELECT COUNT(*) as cnt FROM checkins").fetchone()
    print(f"  DB check-in count: {row['cnt']}")
    return 0


if __name__ == "__main__":
    start = time.time()
    rc = main(sys.argv[1:])
    print(f"  Elapsed: {time.time() - start:.1f}s")
    sys.exit(rc)
