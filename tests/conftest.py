import pytest

from healstats import config, db


@pytest.fixture
def conn(tmp_path, monkeypatch):
    """A fresh store in a temporary SQLite file, closed after the test."""
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "healstats.db"))
    db.close_conn()
    c = db.get_conn()
    yield c
    db.close_conn()


@pytest.fixture
def seeded(conn):
    conn.executemany(
        "INSERT INTO subjects(id, name, type_primary, type_secondary) VALUES (?, ?, ?, ?)",
        [(1, "Pikachu", "Electric", None), (2, "Bulbasaur", "Grass", "Poison")],
    )
    conn.executemany(
        "INSERT INTO machines(id, name, model, location) VALUES (?, ?, ?, ?)",
        [(1, "Alpha", "HX-100", "Ward A"), (2, "Beta", "HX-200", "Ward B")],
    )
    conn.executemany(
        "INSERT INTO checkins(id, subject_id, machine_id, arrived_at, healed_at, outcome, initial_hp, max_hp) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        [
            (1, 1, 1, "2024-03-05 09:00:00", "2024-03-05 09:30:00", "successful", 10, 35),
            (2, 2, 1, "2024-03-05 10:15:00", "2024-03-05 11:15:00", "successful", 5, 45),
            (3, 1, 1, "2024-03-05 13:00:00", None, None, 12, 35),
            (4, 2, 2, "2024-03-06 08:00:00", "2024-03-06 08:20:00", "failed", 1, 45),
            (5, 9, 2, "2024-03-06 09:00:00", "2024-03-06 09:10:00", "successful", 20, 50),
        ],
    )
    conn.commit()
    return conn
