"""Constants for the ranker module."""

from enum import Enum


class AveragePolicy(str, Enum):
    """How the denominator of a student's average score is chosen.

    FIXED divides by the number of averaged metrics, whatever their values.
    VALID_COUNT divides by how many of them hold a finite number, or by 1
    when none do.
    """

    FIXED = "fixed"
    VALID_COUNT = "valid_count"


# Metrics that feed the average score, in display order
AVERAGED_METRICS: tuple[str, ...] = (
    "examA",
    "examB",
    "internalExams",
    "externalExams",
    "digitalPlatforms",
)

# Tracked for reports, never averaged
ATTENDANCE_METRIC: str = "attendance"

# Field names used by the portal's stored student profiles
LEGACY_METRIC_ALIASES: dict[str, str] = {
    "provaParana": "examA",
    "saeb": "examB",
    "provasInternas": "internalExams",
    "provasExternas": "externalExams",
    "plataformasDigitais": "digitalPlatforms",
    "frequencia": "attendance",
}

MIN_SCORE: float = 0.0
MAX_SCORE: float = 100.0

DEFAULT_PODIUM_SIZE: int = 3

COMPONENT_RANKER = "ranker"
