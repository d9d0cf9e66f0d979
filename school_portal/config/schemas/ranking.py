"""Ranking configuration schema."""

from typing import Annotated

from pydantic import Field

from school_portal.data_model import StrictBaseModel
from school_portal.ranker.constants import DEFAULT_PODIUM_SIZE, AveragePolicy


class RankingConfig(StrictBaseModel):
    """Ranking behaviour loaded from ranking.yaml.

    Attributes:
        version: Schema version.
        average_policy: Denominator policy for average scores.
        podium_size: Number of students shown on the podium.
    """

    version: str = "1.0"
    average_policy: AveragePolicy = AveragePolicy.FIXED
    podium_size: Annotated[int, Field(ge=1, le=10)] = DEFAULT_PODIUM_SIZE
