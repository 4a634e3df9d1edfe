"""Baseline-relative comparison of machine summaries."""

import logging

from .errors import NotFoundError
from .models import (
    ComparedMachineView, ComparisonEntry, ComparisonResult, MachineSummary,
    MachineViews, PlainMachineView,
)

logger = logging.getLogger(__name__)


def _find_baseline(summaries: list[MachineSummary], baseline_id: int) -> MachineSummary:
    for s in summaries:
        if s.id == baseline_id:
            return s
    raise NotFoundError(f"baseline machine {baseline_id} not found")


def compare_entry(machine: MachineSummary, baseline: MachineSummary) -> ComparisonEntry:
    if machine.id == baseline.id:
        return ComparisonEntry(
            **machine.model_dump(),
            success_rate_delta=0.0, checkins_delta=0, healing_time_delta=0.0,
            is_baseline=True,
        )
    if machine.avg_healing_time_minutes is None or baseline.avg_healing_time_minutes is None:
        time_delta = None
    else:
        time_delta = round(machine.avg_healing_time_minutes - baseline.avg_healing_time_minutes, 1)
    return ComparisonEntry(
        **machine.model_dump(),
        success_rate_delta=round(machine.success_rate - baseline.success_rate, 1),
        checkins_delta=machine.total_checkins - baseline.total_checkins,
        healing_time_delta=time_delta,
        is_baseline=False,
    )


def compare_machines(summaries: list[MachineSummary], baseline_id: int) -> ComparisonResult:
    """One entry per machine with deltas against ``baseline_id``.

    Raises ``NotFoundError`` when the baseline is not among ``summaries``.
    """
    baseline = _find_baseline(summaries, baseline_id)
    logger.debug("comparing %d machines against baseline %d", len(summaries), baseline_id)
    return ComparisonResult(
        baseline_id=baseline_id,
        machines=[compare_entry(s, baseline) for s in summaries],
    )


def machine_views(summaries: list[MachineSummary], baseline_id: int | None = None) -> MachineViews:
    if baseline_id is None:
        return MachineViews(machines=[PlainMachineView(machine=s) for s in summaries])
    result = compare_machines(summaries, baseline_id)
    return MachineViews(
        baseline_id=baseline_id,
        machines=[ComparedMachineView(machine=e) for e in result.machines],
    )
