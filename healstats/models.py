from datetime import date, datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

SUCCESSFUL = "successful"
FAILED = "failed"


class Subject(BaseModel):
    id: int
    name: str
    type_primary: str
    type_secondary: str | None = None


class Machine(BaseModel):
    id: int
    name: str
    model: str
    location: str


class Checkin(BaseModel):
    id: int
    subject_id: int
    machine_id: int
    arrived_at: datetime
    healed_at: datetime | None = None
    outcome: Literal["successful", "failed"] | None = None
    initial_hp: int = 0
    max_hp: int = 0

    @field_validator("arrived_at", "healed_at")
    @classmethod
    def _wall_clock(cls, v: datetime | None) -> datetime | None:
        # Timestamps are used as stored; an offset is dropped, not applied.
        return v.replace(tzinfo=None) if v is not None else None

    @property
    def is_active(self) -> bool:
        return self.healed_at is None

    @property
    def is_successful(self) -> bool:
        return self.healed_at is not None and self.outcome == SUCCESSFUL

    @property
    def is_failed(self) -> bool:
        return self.healed_at is not None and self.outcome == FAILED


# ── Trend output ──

class AggregatedBucket(BaseModel):
    period: str
    segment: str | None = None
    total: int = 0
    successful: int = 0
    failed: int = 0


class TrendSummary(BaseModel):
    total_checkins: int = 0
    successful: int = 0
    failed: int = 0
    success_rate: float = 0.0
    active_checkins: int = 0


class TrendFilters(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    group_by: str = "day"
    segment_by: str = "none"


class TrendResult(BaseModel):
    data: list[AggregatedBucket]
    summary: TrendSummary
    filters: TrendFilters


# ── Leaderboards ──

class SubjectLeaderboardEntry(BaseModel):
    id: int
    name: str
    type_primary: str
    type_secondary: str | None = None
    total_checkins: int
    successful_heals: int
    success_rate: float


class CategoryLeaderboardEntry(BaseModel):
    category: str
    total_checkins: int
    successful_heals: int
    success_rate: float


class Leaderboards(BaseModel):
    top_subjects: list[SubjectLeaderboardEntry]
    top_categories: list[CategoryLeaderboardEntry]


# ── Machines ──

class CurrentPatient(BaseModel):
    checkin_id: int
    subject_name: str | None = None
    type_primary: str | None = None
    type_secondary: str | None = None
    arrived_at: datetime
    initial_hp: int
    max_hp: int


class MachineSummary(BaseModel):
    id: int
    name: str
    model: str
    location: str
    total_checkins: int = 0
    successful: int = 0
    failed: int = 0
    success_rate: float = 0.0
    # None when the machine has no completed check-ins
    avg_healing_time_minutes: float | None = None
    current_patients: list[CurrentPatient] = []


class MachineTable(BaseModel):
    machines: list[MachineSummary]


class ComparisonEntry(MachineSummary):
    success_rate_delta: float = 0.0
    checkins_delta: int = 0
    # None when either side has no completed check-ins
    healing_time_delta: float | None = 0.0
    is_baseline: bool = False


class ComparisonResult(BaseModel):
    baseline_id: int
    machines: list[ComparisonEntry]


class PlainMachineView(BaseModel):
    kind: Literal["plain"] = "plain"
    machine: MachineSummary


class ComparedMachineView(BaseModel):
    kind: Literal["compared"] = "compared"
    machine: ComparisonEntry


MachineView = Annotated[
    Union[PlainMachineView, ComparedMachineView], Field(discriminator="kind")
]


class MachineViews(BaseModel):
    baseline_id: int | None = None
    machines: list[MachineView]


# ── Active check-ins ──

class ActiveCheckin(BaseModel):
    id: int
    subject_id: int
    subject_name: str | None = None
    type_primary: str | None = None
    type_secondary: str | None = None
    machine_id: int
    machine_name: str | None = None
    machine_location: str | None = None
    arrived_at: datetime
    initial_hp: int
    max_hp: int
    minutes_in_treatment: float


class ActiveCheckins(BaseModel):
    active_checkins: list[ActiveCheckin]
    count: int
