"""Metrics collection for the ranker module."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import ClassVar


def score_percentiles(scores: Sequence[float]) -> dict[str, float]:
    """Calculate score percentiles (p50/p90/p99).

    Args:
        scores: Score values in any order.

    Returns:
        Dictionary with p50, p90, p99 values.
    """
    if not scores:
        return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

    sorted_scores = sorted(scores)
    n = len(sorted_scores)

    def percentile(p: float) -> float:
        idx = int(p * n / 100)
        return float(sorted_scores[min(idx, n - 1)])

    return {
        "p50": percentile(50),
        "p90": percentile(90),
        "p99": percentile(99),
    }


@dataclass
class RankerMetrics:
    """Metrics for ranker operations.

    Attributes:
        rankings_total: Number of snapshots ranked.
        students_in: Size of the most recent snapshot.
        score_values: Average scores from the most recent snapshot.
        ranking_duration_ms: Time spent on the most recent ranking.
        current_user_misses: Lookups where the current user was absent.
    """

    rankings_total: int = 0
    students_in: int = 0
    score_values: list[float] = field(default_factory=list)
    ranking_duration_ms: float = 0.0
    current_user_misses: int = 0

    _instance: ClassVar["RankerMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_ranking(
        self, students_in: int, scores: Sequence[float], duration_ms: float
    ) -> None:
        """Record a completed ranking.

        Args:
            students_in: Number of input students.
            scores: Average scores produced.
            duration_ms: Duration in milliseconds.
        """
        self.rankings_total += 1
        self.students_in = students_in
        self.score_values = list(scores)
        self.ranking_duration_ms = duration_ms

    def record_current_user_miss(self) -> None:
        """Record a current-user lookup that found nothing."""
        self.current_user_misses += 1

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "rankings_total": self.rankings_total,
            "students_in": self.students_in,
            "ranking_duration_ms": self.ranking_duration_ms,
            "current_user_misses": self.current_user_misses,
            "score_percentiles": score_percentiles(self.score_values),
        }
