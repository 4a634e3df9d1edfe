"""GET /api/metrics/*, /api/leaderboards, /api/checkins/active - dashboard JSON."""

from datetime import date

from fastapi import APIRouter, Query

from . import store
from .aggregator import active_checkins, build_trend, machine_summaries
from .comparison import compare_machines, machine_views
from .config import DEFAULT_LEADERBOARD_LIMIT
from .db import get_conn
from .leaderboard import build_leaderboards
from .models import (
    ActiveCheckins, ComparisonResult, Leaderboards, MachineSummary, MachineTable,
    MachineViews, TrendResult,
)

router = APIRouter(prefix="/api")


def _machine_table(conn) -> list[MachineSummary]:
    return machine_summaries(
        store.fetch_checkins(conn), store.fetch_machines(conn), store.fetch_subjects(conn),
    )


@router.get("/metrics/checkins", response_model=TrendResult)
async def checkin_metrics(
    start_date: date | None = None,
    end_date: date | None = None,
    group_by: str = "day",
    segment_by: str = "none",
):
    conn = get_conn()
    return build_trend(
        store.fetch_checkins(conn),
        store.fetch_subjects(conn),
        store.count_active_checkins(conn),
        start_date=start_date, end_date=end_date,
        group_by=group_by, segment_by=segment_by,
    )


@router.get("/leaderboards", response_model=Leaderboards)
async def leaderboards(limit: int = DEFAULT_LEADERBOARD_LIMIT):
    conn = get_conn()
    return build_leaderboards(store.fetch_checkins(conn), store.fetch_subjects(conn), limit)


@router.get("/metrics/machines", response_model=MachineTable)
async def machine_metrics():
    return MachineTable(machines=_machine_table(get_conn()))


@router.get("/metrics/machines/compare", response_model=ComparisonResult)
async def machine_comparison(baseline_id: int = Query(...)):
    return compare_machines(_machine_table(get_conn()), baseline_id)


@router.get("/metrics/machines/views", response_model=MachineViews)
async def machine_view_table(baseline_id: int | None = None):
    return machine_views(_machine_table(get_conn()), baseline_id)


@router.get("/checkins/active", response_model=ActiveCheckins)
async def active_checkin_list():
    conn = get_conn()
    return active_checkins(
        store.fetch_active_checkins(conn), store.fetch_subjects(conn), store.fetch_machines(conn),
    )
