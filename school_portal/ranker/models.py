"""Data models for the student ranker."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from school_portal.ranker.constants import (
    AVERAGED_METRICS,
    ATTENDANCE_METRIC,
    LEGACY_METRIC_ALIASES,
)


_KNOWN_METRICS = frozenset((*AVERAGED_METRICS, ATTENDANCE_METRIC))


def _normalize_metrics(raw: object) -> dict[str, Any]:
    """Map stored metric names onto canonical ones, dropping unrelated keys."""
    if not isinstance(raw, dict):
        return {}
    metrics: dict[str, Any] = {}
    for key, value in raw.items():
        name = LEGACY_METRIC_ALIASES.get(key, key)
        # Canonical names win over their legacy spelling
        if name in _KNOWN_METRICS and (name == key or name not in metrics):
            metrics[name] = value
    return metrics


class StudentRecord(BaseModel):
    """A student's snapshot entry as supplied by the student directory.

    Metric values are kept exactly as received; coercion to numbers only
    happens while scoring.

    Attributes:
        id: Opaque identifier assigned by the external store.
        name: Display name.
        metrics: Metric name to raw value.
        rank: Last derived rank, if any.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1)]
    metrics: dict[str, Any] = Field(default_factory=dict)
    rank: Annotated[int | None, Field(ge=1)] = None

    @model_validator(mode="before")
    @classmethod
    def accept_profile_shape(cls, data: Any) -> Any:
        """Accept stored profile documents (`uid`, `stats`, legacy names)."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "id" not in data and "uid" in data:
            data["id"] = data.pop("uid")
        if "id" in data and not isinstance(data["id"], str):
            data["id"] = str(data["id"])

        stats = data.pop("stats", None)
        if "metrics" not in data and isinstance(stats, dict):
            data["metrics"] = stats
            ranking = stats.get("ranking")
            if "rank" not in data and isinstance(ranking, int) and ranking >= 1:
                data["rank"] = ranking
        data["metrics"] = _normalize_metrics(data.get("metrics"))
        return data


class RankedStudent(StudentRecord):
    """A StudentRecord with its freshly derived average score and rank.

    Attributes:
        average_score: Rounded average of the averaged metrics, 0-100.
        rank: 1-based position in the ranking.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    average_score: Annotated[int, Field(ge=0, le=100)]
    rank: Annotated[int, Field(ge=1)]

    def to_student_record(self) -> StudentRecord:
        """Project back onto a plain StudentRecord."""
        return StudentRecord(
            id=self.id,
            name=self.name,
            metrics=dict(self.metrics),
            rank=self.rank,
        )


class RankingResult(BaseModel):
    """Complete result of ranking one snapshot.

    Attributes:
        ranking: Students in rank order.
        students_in: Number of records in the snapshot.
        podium: Top entries shown on the podium, empty for small classes.
        score_percentiles: p50/p90/p99 of average scores.
        output_checksum: SHA-256 of the ordered (id, score, rank) triples.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ranking: list[RankedStudent] = Field(default_factory=list)
    students_in: Annotated[int, Field(ge=0)] = 0
    podium: list[RankedStudent] = Field(default_factory=list)
    score_percentiles: dict[str, float] = Field(default_factory=dict)
    output_checksum: str = ""

    def find(self, student_id: str | None) -> RankedStudent | None:
        """Look up a ranked student by id."""
        if student_id is None:
            return None
        for student in self.ranking:
            if student.id == student_id:
                return student
        return None
