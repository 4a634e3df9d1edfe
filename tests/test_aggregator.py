"""Tests for healstats.aggregator — rates, trend series, machine summaries, active list."""

from datetime import date, datetime, timedelta

import pytest

from healstats.aggregator import (
    active_checkins, build_buckets, build_trend, count_outcomes, machine_summaries,
    success_rate,
)
from healstats.errors import InvalidInputError
from tests.helpers import T0, checkin, fail, machine, ok, subject, subjects_by_id


class TestSuccessRate:
    def test_zero_completed(self):
        assert success_rate(0, 0) == 0.0

    def test_rounds_to_one_decimal(self):
        assert success_rate(2, 3) == 66.7

    def test_full(self):
        assert success_rate(4, 4) == 100.0

    @pytest.mark.parametrize("ok_count,completed", [(0, 1), (1, 7), (5, 9), (9, 9)])
    def test_bounded(self, ok_count, completed):
        assert 0.0 <= success_rate(ok_count, completed) <= 100.0


class TestCountOutcomes:
    def test_active_not_completed(self):
        rows = [ok(1), fail(2), checkin(3)]
        assert count_outcomes(rows) == (3, 1, 1, 2)


class TestBuildTrend:
    def setup_method(self):
        self.subjects = subjects_by_id(
            subject(1, "Pikachu", "Electric"),
            subject(2, "Squirtle", "Water"),
        )

    def test_same_day_two_successes_one_active(self):
        rows = [ok(1), ok(2, arrived_at=T0 + timedelta(hours=2)), checkin(3, arrived_at=T0 + timedelta(hours=5))]
        result = build_trend(rows, self.subjects, active_checkins=1)
        assert len(result.data) == 1
        bucket = result.data[0]
        assert (bucket.period, bucket.segment) == ("2024-03-05", None)
        assert (bucket.total, bucket.successful, bucket.failed) == (3, 2, 0)
        assert result.summary.success_rate == 100.0
        assert result.summary.active_checkins == 1
        assert result.summary.total_checkins == 3

    def test_hourly_buckets_sorted(self):
        rows = [
            ok(1, arrived_at=datetime(2024, 3, 5, 15, 10)),
            fail(2, arrived_at=datetime(2024, 3, 5, 9, 59)),
            ok(3, arrived_at=datetime(2024, 3, 5, 9, 1)),
        ]
        result = build_trend(rows, self.subjects, 0, group_by="hour")
        assert [b.period for b in result.data] == ["2024-03-05 09", "2024-03-05 15"]
        assert (result.data[0].successful, result.data[0].failed) == (1, 1)

    def test_bucket_counts_never_exceed_total(self):
        rows = [ok(1), fail(2), checkin(3), ok(4, arrived_at=T0 + timedelta(days=1))]
        for b in build_trend(rows, self.subjects, 1).data:
            assert b.successful + b.failed <= b.total
        day2 = build_trend(rows, self.subjects, 1).data[1]
        assert day2.successful + day2.failed == day2.total

    def test_window_filters_series_and_summary_not_active_count(self):
        rows = [ok(1), checkin(2, arrived_at=T0 - timedelta(days=3))]
        result = build_trend(rows, self.subjects, active_checkins=1,
                             start_date=date(2024, 3, 5), end_date=date(2024, 3, 5))
        assert result.summary.total_checkins == 1
        assert result.summary.active_checkins == 1
        assert result.filters.start_date == date(2024, 3, 5)

    def test_empty_window(self):
        result = build_trend([ok(1)], self.subjects, 0, start_date=date(2030, 1, 1))
        assert result.data == []
        assert result.summary.total_checkins == 0
        assert result.summary.success_rate == 0.0

    def test_segment_by_type(self):
        rows = [ok(1, subject_id=1), fail(2, subject_id=2), ok(3, subject_id=1)]
        result = build_trend(rows, self.subjects, 0, segment_by="type")
        assert [(b.segment, b.total, b.successful) for b in result.data] == [
            ("Electric", 2, 2), ("Water", 1, 0),
        ]

    def test_segment_by_subject_uses_names(self):
        rows = [ok(1, subject_id=2), ok(2, subject_id=1)]
        result = build_trend(rows, self.subjects, 0, segment_by="subject")
        assert [b.segment for b in result.data] == ["Pikachu", "Squirtle"]

    def test_orphan_excluded_from_segments_but_in_summary(self):
        rows = [ok(1, subject_id=1), ok(2, subject_id=404)]
        segmented = build_trend(rows, self.subjects, 0, segment_by="type")
        plain = build_trend(rows, self.subjects, 0)
        assert sum(b.total for b in segmented.data) == 1
        assert segmented.summary.total_checkins == 2
        assert plain.data[0].total == 2

    def test_invalid_group_by(self):
        with pytest.raises(InvalidInputError):
            build_trend([], self.subjects, 0, group_by="month")

    def test_invalid_segment_by_even_when_empty(self):
        with pytest.raises(InvalidInputError):
            build_buckets([], self.subjects, "day", "machine")


class TestMachineSummaries:
    def setup_method(self):
        self.machines = [machine(2, "Beta"), machine(1, "Alpha"), machine(3, "Idle")]
        self.subjects = subjects_by_id(subject(1, "Pikachu", "Electric", "Steel"))

    def test_counts_rate_and_average(self):
        rows = [
            ok(1, machine_id=1, minutes=30),
            fail(2, machine_id=1, minutes=60),
            checkin(3, machine_id=1),
            ok(4, machine_id=2, minutes=10),
        ]
        by_id = {s.id: s for s in machine_summaries(rows, self.machines, self.subjects)}
        alpha = by_id[1]
        assert (alpha.total_checkins, alpha.successful, alpha.failed) == (3, 1, 1)
        assert alpha.success_rate == 50.0
        assert alpha.avg_healing_time_minutes == 45.0
        assert [p.checkin_id for p in alpha.current_patients] == [3]
        assert alpha.current_patients[0].subject_name == "Pikachu"
        assert alpha.current_patients[0].type_secondary == "Steel"
        assert by_id[2].success_rate == 100.0

    def test_ordered_by_id_and_idle_machine_included(self):
        summaries = machine_summaries([], self.machines, self.subjects)
        assert [s.id for s in summaries] == [1, 2, 3]
        idle = summaries[2]
        assert idle.total_checkins == 0
        assert idle.success_rate == 0.0
        assert idle.avg_healing_time_minutes is None

    def test_only_active_has_no_average(self):
        summaries = machine_summaries([checkin(1, machine_id=3)], self.machines, self.subjects)
        assert summaries[2].avg_healing_time_minutes is None
        assert summaries[2].total_checkins == 1

    def test_unknown_machine_ignored(self):
        summaries = machine_summaries([ok(1, machine_id=77)], self.machines, self.subjects)
        assert sum(s.total_checkins for s in summaries) == 0


class TestActiveCheckins:
    def test_lists_open_checkins_oldest_first(self):
        subjects = subjects_by_id(subject(1, "Pikachu", "Electric"))
        machines = [machine(1, "Alpha", location="Ward A")]
        rows = [
            checkin(2, arrived_at=T0 + timedelta(minutes=30)),
            checkin(1, arrived_at=T0),
            ok(3),
            checkin(4, subject_id=9, machine_id=9, arrived_at=T0 + timedelta(minutes=45)),
        ]
        result = active_checkins(rows, subjects, machines, now=T0 + timedelta(minutes=90))
        assert result.count == 3
        assert [c.id for c in result.active_checkins] == [1, 2, 4]
        first = result.active_checkins[0]
        assert first.minutes_in_treatment == 90.0
        assert (first.subject_name, first.machine_name, first.machine_location) == (
            "Pikachu", "Alpha", "Ward A")
        orphan = result.active_checkins[2]
        assert orphan.subject_name is None
        assert orphan.machine_name is None

    def test_empty(self):
        result = active_checkins([ok(1)], {}, [], now=T0)
        assert result.count == 0
        assert result.active_checkins == []
