"""Shared builders for healstats tests."""

from datetime import datetime, timedelta

from healstats.models import Checkin, Machine, Subject

T0 = datetime(2024, 3, 5, 9, 0, 0)


def subject(id, name=None, type_primary="Normal", type_secondary=None):
    return Subject(id=id, name=name or f"subject-{id}",
                   type_primary=type_primary, type_secondary=type_secondary)


def machine(id, name=None, model="HX-100", location="Lobby"):
    return Machine(id=id, name=name or f"machine-{id}", model=model, location=location)


def checkin(id, subject_id=1, machine_id=1, arrived_at=T0, minutes=None,
            outcome=None, initial_hp=10, max_hp=100):
    """Build a check-in; ``minutes`` set means completed after that many minutes."""
    healed_at = arrived_at + timedelta(minutes=minutes) if minutes is not None else None
    return Checkin(
        id=id, subject_id=subject_id, machine_id=machine_id,
        arrived_at=arrived_at, healed_at=healed_at,
        outcome=outcome if healed_at is not None else None,
        initial_hp=initial_hp, max_hp=max_hp,
    )


def ok(id, **kw):
    kw.setdefault("minutes", 30)
    return checkin(id, outcome="successful", **kw)


def fail(id, **kw):
    kw.setdefault("minutes", 30)
    return checkin(id, outcome="failed", **kw)


def subjects_by_id(*subjects):
    return {s.id: s for s in subjects}
