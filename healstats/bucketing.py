"""Period and segment keys for trend series.

Timestamps are used as stored: no timezone conversion is applied, so a
period label reflects the wall-clock fields of ``arrived_at``.
"""

from datetime import date, datetime

from .errors import InvalidInputError
from .models import Checkin, Subject

GROUP_BY_FORMATS = {
    "day": "%Y-%m-%d",
    "hour": "%Y-%m-%d %H",
}
SEGMENT_BY_OPTIONS = ("none", "type", "subject")


def validate_group_by(group_by: str) -> str:
    if group_by not in GROUP_BY_FORMATS:
        raise InvalidInputError(
            f"group_by must be one of {', '.join(GROUP_BY_FORMATS)}; got {group_by!r}"
        )
    return group_by


def validate_segment_by(segment_by: str) -> str:
    if segment_by not in SEGMENT_BY_OPTIONS:
        raise InvalidInputError(
            f"segment_by must be one of {', '.join(SEGMENT_BY_OPTIONS)}; got {segment_by!r}"
        )
    return segment_by


def period_label(ts: datetime, group_by: str) -> str:
    """Truncate ``ts`` to the start of its day or hour as a sortable string.

    ``2024-03-05 14:37:10``, day  → ``2024-03-05``
    ``2024-03-05 14:37:10``, hour → ``2024-03-05 14``
    """
    return ts.strftime(GROUP_BY_FORMATS[validate_group_by(group_by)])


def filter_by_date(checkins: list[Checkin], start_date: date | None = None,
                   end_date: date | None = None) -> list[Checkin]:
    """Keep check-ins whose arrival day lies within the inclusive window."""
    out = []
    for c in checkins:
        day = c.arrived_at.date()
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue
        out.append(c)
    return out


def segment_key(checkin: Checkin, subjects: dict[int, Subject],
                segment_by: str) -> tuple[object, str] | None:
    """Return ``(group_key, label)`` for a segmented check-in.

    ``None`` means the check-in has no resolvable subject and is left out of
    segmented output. Subjects group by id and are labelled by name.
    """
    subject = subjects.get(checkin.subject_id)
    if subject is None:
        return None
    if segment_by == "type":
        return subject.type_primary, subject.type_primary
    return subject.id, subject.name


def group_checkins(checkins: list[Checkin], subjects: dict[int, Subject],
                   group_by: str = "day", segment_by: str = "none"):
    """Partition check-ins into ``{(period, segment_key): (label, [checkins])}``.

    With ``segment_by="none"`` every check-in lands under ``(period, None)``,
    orphaned ones included.
    """
    validate_group_by(group_by)
    validate_segment_by(segment_by)
    groups: dict[tuple, tuple[str | None, list[Checkin]]] = {}
    for c in checkins:
        period = period_label(c.arrived_at, group_by)
        if segment_by == "none":
            key, label = (period, None), None
        else:
            seg = segment_key(c, subjects, segment_by)
            if seg is None:
                continue
            key, label = (period, seg[0]), seg[1]
        groups.setdefault(key, (label, []))[1].append(c)
    return groups
