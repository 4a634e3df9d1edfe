"""Read queries against the check-in store.

Each function returns typed rows; aggregation happens in the engine modules.
``sqlite3`` errors are left to propagate to the caller.
"""

import logging
import sqlite3

from .db import get_conn
from .models import Checkin, Machine, Subject

logger = logging.getLogger(__name__)

_CHECKIN_COLS = "id, subject_id, machine_id, arrived_at, healed_at, outcome, initial_hp, max_hp"


def fetch_checkins(conn: sqlite3.Connection | None = None) -> list[Checkin]:
    """All check-ins, oldest arrival first."""
    conn = conn or get_conn()
    rows = conn.execute(
        f"SELECT {_CHECKIN_COLS} FROM checkins ORDER BY arrived_at, id"
    ).fetchall()
    logger.debug("fetched %d check-ins", len(rows))
    return [Checkin(**dict(r)) for r in rows]


def fetch_active_checkins(conn: sqlite3.Connection | None = None) -> list[Checkin]:
    conn = conn or get_conn()
    rows = conn.execute(
        f"SELECT {_CHECKIN_COLS} FROM checkins WHERE healed_at IS NULL ORDER BY arrived_at, id"
    ).fetchall()
    return [Checkin(**dict(r)) for r in rows]


def count_active_checkins(conn: sqlite3.Connection | None = None) -> int:
    conn = conn or get_conn()
    return conn.execute(
        "SELECT COUNT(*) FROM checkins WHERE healed_at IS NULL"
    ).fetchone()[0] or 0


def fetch_subjects(conn: sqlite3.Connection | None = None) -> dict[int, Subject]:
    """Subjects keyed by id."""
    conn = conn or get_conn()
    return {
        r["id"]: Subject(**dict(r))
        for r in conn.execute(
            "SELECT id, name, type_primary, type_secondary FROM subjects"
        )
    }


def fetch_machines(conn: sqlite3.Connection | None = None) -> list[Machine]:
    conn = conn or get_conn()
    return [
        Machine(**dict(r))
        for r in conn.execute("SELECT id, name, model, location FROM machines ORDER BY id")
    ]
