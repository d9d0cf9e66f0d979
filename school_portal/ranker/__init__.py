"""Student ranking engine.

Computes each student's average score from the averaged metrics, orders
the snapshot by score with a locale-aware name tie-break, and assigns
contiguous 1-based ranks. Every snapshot is ranked from scratch.
"""

from school_portal.ranker.constants import AveragePolicy
from school_portal.ranker.models import RankedStudent, RankingResult, StudentRecord
from school_portal.ranker.ranker import (
    StudentRanker,
    compute_ranking,
    rank_students_pure,
    refresh_current_user_rank,
)
from school_portal.ranker.refresh import (
    InMemoryProfileCache,
    JsonProfileCache,
    ProfileCache,
    SnapshotRefresher,
)


__all__ = [
    "AveragePolicy",
    "InMemoryProfileCache",
    "JsonProfileCache",
    "ProfileCache",
    "RankedStudent",
    "RankingResult",
    "SnapshotRefresher",
    "StudentRanker",
    "StudentRecord",
    "compute_ranking",
    "rank_students_pure",
    "refresh_current_user_rank",
]
