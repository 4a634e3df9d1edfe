"""All-time rankings of subjects and categories by successful heals."""

from collections import defaultdict

from .aggregator import count_outcomes, success_rate
from .config import DEFAULT_LEADERBOARD_LIMIT
from .errors import InvalidInputError
from .models import (
    CategoryLeaderboardEntry, Checkin, Leaderboards, Subject, SubjectLeaderboardEntry,
)


def validate_limit(limit: int) -> int:
    if limit < 1:
        raise InvalidInputError(f"limit must be >= 1; got {limit}")
    return limit


def top_subjects(checkins: list[Checkin], subjects: dict[int, Subject],
                 limit: int = DEFAULT_LEADERBOARD_LIMIT) -> list[SubjectLeaderboardEntry]:
    """Subjects ranked by successful heals desc, then subject id asc.

    ``limit`` is assumed already checked by ``build_leaderboards``.
    """
    per_subject: dict[int, list[Checkin]] = defaultdict(list)
    for c in checkins:
        if c.subject_id in subjects:
            per_subject[c.subject_id].append(c)

    entries = []
    for sid, rows in per_subject.items():
        s = subjects[sid]
        total, ok, _, completed = count_outcomes(rows)
        entries.append(SubjectLeaderboardEntry(
            id=s.id, name=s.name,
            type_primary=s.type_primary, type_secondary=s.type_secondary,
            total_checkins=total, successful_heals=ok,
            success_rate=success_rate(ok, completed),
        ))
    entries.sort(key=lambda e: (-e.successful_heals, e.id))
    return entries[:limit]


def top_categories(checkins: list[Checkin], subjects: dict[int, Subject],
                   limit: int = DEFAULT_LEADERBOARD_LIMIT) -> list[CategoryLeaderboardEntry]:
    """Primary categories ranked by successful heals desc, then name asc."""
    per_category: dict[str, list[Checkin]] = defaultdict(list)
    for c in checkins:
        s = subjects.get(c.subject_id)
        if s is not None:
            per_category[s.type_primary].append(c)

    entries = []
    for category, rows in per_category.items():
        total, ok, _, completed = count_outcomes(rows)
        entries.append(CategoryLeaderboardEntry(
            category=category, total_checkins=total, successful_heals=ok,
            success_rate=success_rate(ok, completed),
        ))
    entries.sort(key=lambda e: (-e.successful_heals, e.category))
    return entries[:limit]


def build_leaderboards(checkins: list[Checkin], subjects: dict[int, Subject],
                       limit: int = DEFAULT_LEADERBOARD_LIMIT) -> Leaderboards:
    validate_limit(limit)
    return Leaderboards(
        top_subjects=top_subjects(checkins, subjects, limit),
        top_categories=top_categories(checkins, subjects, limit),
    )
