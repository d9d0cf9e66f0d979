"""Student ranking engine."""

import hashlib
import json
import time
from collections.abc import Iterable, Sequence

import structlog

from school_portal.ranker.collation import collation_key
from school_portal.ranker.constants import (
    COMPONENT_RANKER,
    DEFAULT_PODIUM_SIZE,
    AveragePolicy,
)
from school_portal.ranker.metrics import RankerMetrics, score_percentiles
from school_portal.ranker.models import RankedStudent, RankingResult, StudentRecord
from school_portal.ranker.scorer import average_score


logger = structlog.get_logger()


def compute_ranking(
    students: Iterable[StudentRecord],
    policy: AveragePolicy = AveragePolicy.FIXED,
) -> list[RankedStudent]:
    """Rank a snapshot of students by average score.

    Orders by average score descending, then by name under the portal
    collation, then by id. Ranks are 1-based and never shared.

    Args:
        students: Snapshot of student records, in any order.
        policy: Denominator policy for the average score.

    Returns:
        New list of RankedStudent; the input records are left untouched.
    """
    scored = [(average_score(s.metrics, policy), s) for s in students]
    scored.sort(key=lambda pair: (-pair[0], collation_key(pair[1].name), pair[1].id))

    return [
        RankedStudent(
            id=student.id,
            name=student.name,
            metrics=dict(student.metrics),
            average_score=score,
            rank=index + 1,
        )
        for index, (score, student) in enumerate(scored)
    ]


def refresh_current_user_rank(
    ranked: Sequence[RankedStudent],
    current_user_id: str | None,
) -> RankedStudent | None:
    """Find the current user's entry in a fresh ranking.

    Args:
        ranked: Output of compute_ranking.
        current_user_id: Identity of the viewer, treated as an opaque key.

    Returns:
        The viewer's RankedStudent, or None when absent from the snapshot.
    """
    if current_user_id is None:
        return None
    for student in ranked:
        if student.id == current_user_id:
            return student
    return None


def compute_checksum(ranked: Sequence[RankedStudent]) -> str:
    """Compute SHA-256 checksum of an ordered ranking.

    Args:
        ranked: Students in rank order.

    Returns:
        SHA-256 hex digest.
    """
    data = [[s.id, s.average_score, s.rank] for s in ranked]
    json_str = json.dumps(data, separators=(",", ":"))
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()


class StudentRanker:
    """Ranks snapshots for the portal panels.

    Wraps compute_ranking with podium selection, percentiles, checksum,
    logging and metrics. Instances hold configuration only, so one ranker
    can serve any number of snapshots.
    """

    def __init__(
        self,
        policy: AveragePolicy = AveragePolicy.FIXED,
        podium_size: int = DEFAULT_PODIUM_SIZE,
        metrics: RankerMetrics | None = None,
    ) -> None:
        """Initialize the ranker.

        Args:
            policy: Denominator policy for average scores.
            podium_size: Number of top students shown on the podium.
            metrics: Optional metrics instance.
        """
        self._policy = policy
        self._podium_size = podium_size
        self._metrics = metrics or RankerMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_RANKER, policy=policy.value)

    @property
    def policy(self) -> AveragePolicy:
        """Get the denominator policy."""
        return self._policy

    def rank(self, students: Sequence[StudentRecord]) -> RankingResult:
        """Rank a snapshot and summarise it.

        Args:
            students: Snapshot of student records.

        Returns:
            RankingResult with the ordered ranking and statistics.
        """
        self._log.info("ranking_started", students_in=len(students))
        start = time.perf_counter()

        ranking = compute_ranking(students, self._policy)
        scores = [float(s.average_score) for s in ranking]

        duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_ranking(len(students), scores, duration_ms)

        podium = ranking[: self._podium_size] if len(ranking) >= self._podium_size else []

        result = RankingResult(
            ranking=ranking,
            students_in=len(students),
            podium=podium,
            score_percentiles=score_percentiles(scores),
            output_checksum=compute_checksum(ranking),
        )

        self._log.info(
            "ranking_complete",
            students_in=len(students),
            top_score=scores[0] if scores else None,
            duration_ms=round(duration_ms, 3),
            output_checksum=result.output_checksum[:12],
        )
        return result

    def find_current_user(
        self, result: RankingResult, current_user_id: str | None
    ) -> RankedStudent | None:
        """Find the current user in a result, recording misses.

        Args:
            result: Ranking result to search.
            current_user_id: Identity of the viewer.

        Returns:
            The viewer's RankedStudent, or None.
        """
        entry = refresh_current_user_rank(result.ranking, current_user_id)
        if entry is None:
            self._metrics.record_current_user_miss()
            self._log.debug("current_user_not_ranked", current_user_id=current_user_id)
        return entry


def rank_students_pure(
    students: Sequence[StudentRecord],
    policy: AveragePolicy = AveragePolicy.FIXED,
    podium_size: int = DEFAULT_PODIUM_SIZE,
) -> RankingResult:
    """Pure function API for snapshot ranking.

    Args:
        students: Snapshot of student records.
        policy: Denominator policy.
        podium_size: Podium size.

    Returns:
        RankingResult for the snapshot.
    """
    ranker = StudentRanker(policy=policy, podium_size=podium_size, metrics=RankerMetrics())
    return ranker.rank(students)
