"""Average score computation for student records."""

import math
from collections.abc import Mapping

from school_portal.ranker.constants import (
    AVERAGED_METRICS,
    MAX_SCORE,
    MIN_SCORE,
    AveragePolicy,
)


def is_valid_metric(value: object) -> bool:
    """Check whether a raw metric value is a finite number.

    Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def coerce_metric(value: object) -> float:
    """Coerce a raw metric value into the [0, 100] range.

    Args:
        value: Raw stored value.

    Returns:
        The value as a float, or 0.0 when missing or malformed.
    """
    if not is_valid_metric(value):
        return 0.0
    return min(max(float(value), MIN_SCORE), MAX_SCORE)  # type: ignore[arg-type]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return math.floor(value + 0.5)


def raw_average(
    metrics: Mapping[str, object],
    policy: AveragePolicy = AveragePolicy.FIXED,
) -> float:
    """Compute the unrounded average of the averaged metrics.

    Args:
        metrics: Metric name to raw value.
        policy: Denominator policy.

    Returns:
        Mean score in [0, 100].
    """
    values = [metrics.get(name) for name in AVERAGED_METRICS]
    total = sum(coerce_metric(v) for v in values)

    if policy is AveragePolicy.VALID_COUNT:
        denominator = sum(1 for v in values if is_valid_metric(v)) or 1
    else:
        denominator = len(AVERAGED_METRICS)

    return total / denominator


def average_score(
    metrics: Mapping[str, object],
    policy: AveragePolicy = AveragePolicy.FIXED,
) -> int:
    """Compute the rounded average score for a student's metrics.

    Args:
        metrics: Metric name to raw value.
        policy: Denominator policy.

    Returns:
        Integer average score in [0, 100].
    """
    return round_half_up(raw_average(metrics, policy))
