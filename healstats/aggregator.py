"""Turn check-in rows into trend series, trend summaries and machine tables.

Everything here is a pure function of the rows passed in; callers fetch the
rows through ``healstats.store`` and pass them down.
"""

import logging
from datetime import date, datetime

from .bucketing import filter_by_date, group_checkins
from .models import (
    ActiveCheckin, ActiveCheckins, AggregatedBucket, Checkin, CurrentPatient,
    Machine, MachineSummary, Subject, TrendFilters, TrendResult, TrendSummary,
)

logger = logging.getLogger(__name__)


def success_rate(successful: int, completed: int) -> float:
    """Percentage of completed check-ins that succeeded, one decimal place.

    Active check-ins are never part of ``completed``. Returns ``0.0`` when
    nothing has completed yet.
    """
    if completed <= 0:
        return 0.0
    return round(successful / completed * 100, 1)


def count_outcomes(checkins: list[Checkin]) -> tuple[int, int, int, int]:
    """Return ``(total, successful, failed, completed)``."""
    total = successful = failed = completed = 0
    for c in checkins:
        total += 1
        if c.is_active:
            continue
        completed += 1
        if c.is_successful:
            successful += 1
        elif c.is_failed:
            failed += 1
    return total, successful, failed, completed


def build_buckets(checkins: list[Checkin], subjects: dict[int, Subject],
                  group_by: str = "day", segment_by: str = "none") -> list[AggregatedBucket]:
    groups = group_checkins(checkins, subjects, group_by, segment_by)
    buckets = []
    for (period, _), (label, members) in sorted(
            groups.items(), key=lambda kv: (kv[0][0], kv[1][0] or "")):
        total, ok, bad, _ = count_outcomes(members)
        buckets.append(AggregatedBucket(
            period=period, segment=label, total=total, successful=ok, failed=bad,
        ))
    return buckets


def build_trend(checkins: list[Checkin], subjects: dict[int, Subject],
                active_checkins: int, *, start_date: date | None = None,
                end_date: date | None = None, group_by: str = "day",
                segment_by: str = "none") -> TrendResult:
    """Bucketed trend series plus a summary over the filtered window.

    ``active_checkins`` is the global count of open check-ins and is reported
    as-is; it is not restricted to the window.
    """
    window = filter_by_date(checkins, start_date, end_date)
    buckets = build_buckets(window, subjects, group_by, segment_by)
    total, ok, bad, completed = count_outcomes(window)
    logger.debug("trend: %d check-ins in window -> %d buckets (%s/%s)",
                 len(window), len(buckets), group_by, segment_by)
    return TrendResult(
        data=buckets,
        summary=TrendSummary(
            total_checkins=total,
            successful=ok,
            failed=bad,
            success_rate=success_rate(ok, completed),
            active_checkins=active_checkins,
        ),
        filters=TrendFilters(
            start_date=start_date, end_date=end_date,
            group_by=group_by, segment_by=segment_by,
        ),
    )


def healing_minutes(checkin: Checkin) -> float | None:
    if checkin.healed_at is None:
        return None
    return (checkin.healed_at - checkin.arrived_at).total_seconds() / 60


def machine_summaries(checkins: list[Checkin], machines: list[Machine],
                      subjects: dict[int, Subject]) -> list[MachineSummary]:
    """One summary per known machine, ordered by id.

    Machines without check-ins still appear with zero counts and no average
    healing time. Check-ins on unknown machines are ignored.
    """
    by_machine: dict[int, list[Checkin]] = {m.id: [] for m in machines}
    for c in checkins:
        if c.machine_id in by_machine:
            by_machine[c.machine_id].append(c)

    out = []
    for m in sorted(machines, key=lambda m: m.id):
        rows = by_machine[m.id]
        total, ok, bad, completed = count_outcomes(rows)
        durations = [d for d in (healing_minutes(c) for c in rows) if d is not None]
        avg = round(sum(durations) / len(durations), 1) if durations else None
        patients = []
        for c in rows:
            if not c.is_active:
                continue
            s = subjects.get(c.subject_id)
            patients.append(CurrentPatient(
                checkin_id=c.id,
                subject_name=s.name if s else None,
                type_primary=s.type_primary if s else None,
                type_secondary=s.type_secondary if s else None,
                arrived_at=c.arrived_at,
                initial_hp=c.initial_hp,
                max_hp=c.max_hp,
            ))
        out.append(MachineSummary(
            id=m.id, name=m.name, model=m.model, location=m.location,
            total_checkins=total, successful=ok, failed=bad,
            success_rate=success_rate(ok, completed),
            avg_healing_time_minutes=avg,
            current_patients=patients,
        ))
    return out


def active_checkins(checkins: list[Checkin], subjects: dict[int, Subject],
                    machines: list[Machine], now: datetime | None = None) -> ActiveCheckins:
    """Open check-ins, oldest first, with time spent in treatment so far."""
    now = now or datetime.now()
    machines_by_id = {m.id: m for m in machines}
    items = []
    for c in sorted((c for c in checkins if c.is_active), key=lambda c: (c.arrived_at, c.id)):
        s = subjects.get(c.subject_id)
        m = machines_by_id.get(c.machine_id)
        minutes = max(0.0, (now - c.arrived_at).total_seconds() / 60)
        items.append(ActiveCheckin(
            id=c.id,
            subject_id=c.subject_id,
            subject_name=s.name if s else None,
            type_primary=s.type_primary if s else None,
            type_secondary=s.type_secondary if s else None,
            machine_id=c.machine_id,
            machine_name=m.name if m else None,
            machine_location=m.location if m else None,
            arrived_at=c.arrived_at,
            initial_hp=c.initial_hp,
            max_hp=c.max_hp,
            minutes_in_treatment=round(minutes, 1),
        ))
    return ActiveCheckins(active_checkins=items, count=len(items))
