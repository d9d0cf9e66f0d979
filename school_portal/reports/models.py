"""Data models for portal reports."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from school_portal.ranker.models import RankedStudent


class PerformanceBand(str, Enum):
    """Coarse performance band used for the student's encouragement banner."""

    OUTSTANDING = "outstanding"
    GOOD = "good"
    STEADY = "steady"
    NEEDS_SUPPORT = "needs_support"


class MetricLine(BaseModel):
    """One metric row on a student report.

    Attributes:
        metric: Canonical metric name.
        label: Display label.
        value: Raw stored value, None when missing.
        averaged: Whether the metric feeds the average score.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    metric: str
    label: str
    value: float | None = None
    averaged: bool = True


class StudentReport(BaseModel):
    """Individual performance report for one student."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    student_id: str
    name: str
    rank: Annotated[int | None, Field(ge=1)] = None
    average_score: Annotated[int, Field(ge=0, le=100)]
    performance_band: PerformanceBand
    metrics: list[MetricLine] = Field(default_factory=list)


class ClassReport(BaseModel):
    """Class-wide summary for the admin dashboard and report panel.

    Attributes:
        active_students: Number of students in the snapshot.
        class_average: Mean of the per-student averages, rounded.
        top_student: Rank 1 student, if any.
        podium: Podium entries, empty for small classes.
        score_distribution: Student count per average-score bucket.
        ranking: Full ranking in order.
        output_checksum: Checksum of the ranking the report was built from.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    active_students: Annotated[int, Field(ge=0)]
    class_average: Annotated[int, Field(ge=0, le=100)]
    top_student: RankedStudent | None = None
    podium: list[RankedStudent] = Field(default_factory=list)
    score_distribution: dict[str, int] = Field(default_factory=dict)
    ranking: list[RankedStudent] = Field(default_factory=list)
    output_checksum: str = ""
