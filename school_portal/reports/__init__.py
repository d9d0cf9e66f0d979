"""Class and student reports built from rankings."""

from school_portal.reports.builder import (
    SCORE_BUCKETS,
    build_class_report,
    build_student_report,
    class_average,
    performance_band,
    score_distribution,
)
from school_portal.reports.json_writer import JsonReportWriter
from school_portal.reports.models import (
    ClassReport,
    MetricLine,
    PerformanceBand,
    StudentReport,
)


__all__ = [
    "SCORE_BUCKETS",
    "ClassReport",
    "JsonReportWriter",
    "MetricLine",
    "PerformanceBand",
    "StudentReport",
    "build_class_report",
    "build_student_report",
    "class_average",
    "performance_band",
    "score_distribution",
]
