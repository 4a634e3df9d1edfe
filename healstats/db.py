import sqlite3
from pathlib import Path

from . import config

_conn: sqlite3.Connection | None = None

SCHEMA = """
CREATE TABLE IF NOT EXISTS subjects (
    id              INTEGER PRIMARY KEY,
    name            TEXT NOT NULL,
    type_primary    TEXT NOT NULL,
    type_secondary  TEXT
);

CREATE TABLE IF NOT EXISTS machines (
    id              INTEGER PRIMARY KEY,
    name            TEXT NOT NULL,
    model           TEXT NOT NULL,
    location        TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS checkins (
    id              INTEGER PRIMARY KEY,
    subject_id      INTEGER NOT NULL,
    machine_id      INTEGER NOT NULL,
    arrived_at      TEXT NOT NULL,
    healed_at       TEXT,
    outcome         TEXT CHECK (outcome IN ('successful', 'failed')),
    initial_hp      INTEGER NOT NULL DEFAULT 0,
    max_hp          INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_checkins_arrived ON checkins(arrived_at);
CREATE INDEX IF NOT EXISTS idx_checkins_machine ON checkins(machine_id);
CREATE INDEX IF NOT EXISTS idx_checkins_subject ON checkins(subject_id);
CREATE INDEX IF NOT EXISTS idx_checkins_active ON checkins(healed_at) WHERE healed_at IS NULL;
"""


def get_conn() -> sqlite3.Connection:
    global _conn
    if _conn is None:
        Path(config.DB_PATH).parent.mkdir(parents=True, exist_ok=True)
        _conn = sqlite3.connect(config.DB_PATH, check_same_thread=False)
        _conn.execute("PRAGMA journal_mode=WAL")
        _conn.execute("PRAGMA synchronous=NORMAL")
        _conn.execute(f"PRAGMA busy_timeout={config.BUSY_TIMEOUT_MS}")
        _conn.row_factory = sqlite3.Row
        _conn.executescript(SCHEMA)
    return _conn


def close_conn():
    global _conn
    if _conn is not None:
        _conn.close()
        _conn = None
