"""Builders for class and student reports."""

from collections.abc import Sequence

from school_portal.ranker.constants import (
    ATTENDANCE_METRIC,
    AVERAGED_METRICS,
    AveragePolicy,
)
from school_portal.ranker.models import RankedStudent, RankingResult, StudentRecord
from school_portal.ranker.scorer import (
    average_score,
    is_valid_metric,
    raw_average,
    round_half_up,
)
from school_portal.reports.models import (
    ClassReport,
    MetricLine,
    PerformanceBand,
    StudentReport,
)


METRIC_LABELS: dict[str, str] = {
    "examA": "Exam A",
    "examB": "Exam B",
    "internalExams": "Internal Exams",
    "externalExams": "External Exams",
    "digitalPlatforms": "Digital Platforms",
    ATTENDANCE_METRIC: "Attendance",
}

# (label, inclusive upper bound)
SCORE_BUCKETS: tuple[tuple[str, int], ...] = (
    ("0-20", 20),
    ("21-40", 40),
    ("41-60", 60),
    ("61-80", 80),
    ("81-100", 100),
)


def performance_band(score: int) -> PerformanceBand:
    """Map an average score onto a performance band."""
    if score >= 90:
        return PerformanceBand.OUTSTANDING
    if score >= 70:
        return PerformanceBand.GOOD
    if score >= 50:
        return PerformanceBand.STEADY
    return PerformanceBand.NEEDS_SUPPORT


def score_distribution(scores: Sequence[int]) -> dict[str, int]:
    """Count average scores per bucket.

    Args:
        scores: Average scores in [0, 100].

    Returns:
        Bucket label to count, every bucket present.
    """
    counts = {label: 0 for label, _ in SCORE_BUCKETS}
    for score in scores:
        for label, upper in SCORE_BUCKETS:
            if score <= upper:
                counts[label] += 1
                break
    return counts


def class_average(
    students: Sequence[StudentRecord], policy: AveragePolicy = AveragePolicy.FIXED
) -> int:
    """Mean of the unrounded per-student averages, rounded.

    Students without recorded metrics are left out; 0 when nobody has any.
    """
    scored = [s for s in students if s.metrics]
    if not scored:
        return 0
    total = sum(raw_average(s.metrics, policy) for s in scored)
    return round_half_up(total / len(scored))


def build_class_report(
    result: RankingResult, policy: AveragePolicy = AveragePolicy.FIXED
) -> ClassReport:
    """Summarise a ranking for the admin dashboard.

    Args:
        result: Ranking of the current snapshot.
        policy: Denominator policy the ranking was computed with.

    Returns:
        ClassReport for the snapshot.
    """
    ranking = result.ranking
    return ClassReport(
        active_students=len(ranking),
        class_average=class_average(ranking, policy),
        top_student=ranking[0] if ranking else None,
        podium=list(result.podium),
        score_distribution=score_distribution([s.average_score for s in ranking]),
        ranking=list(ranking),
        output_checksum=result.output_checksum,
    )


def build_student_report(
    student: StudentRecord, policy: AveragePolicy = AveragePolicy.FIXED
) -> StudentReport:
    """Build the individual report for one student.

    Args:
        student: Student record, ranked or not.
        policy: Denominator policy for the average score.

    Returns:
        StudentReport with every tracked metric.
    """
    if isinstance(student, RankedStudent):
        score = student.average_score
    else:
        score = average_score(student.metrics, policy)

    lines: list[MetricLine] = []
    for metric in (*AVERAGED_METRICS, ATTENDANCE_METRIC):
        value = student.metrics.get(metric)
        lines.append(
            MetricLine(
                metric=metric,
                label=METRIC_LABELS[metric],
                value=float(value) if is_valid_metric(value) else None,
                averaged=metric != ATTENDANCE_METRIC,
            )
        )

    return StudentReport(
        student_id=student.id,
        name=student.name,
        rank=student.rank,
        average_score=score,
        performance_band=performance_band(score),
        metrics=lines,
    )
