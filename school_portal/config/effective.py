"""Effective configuration combining all validated configs."""

import hashlib
import json
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from school_portal.config.schemas.access import AccessPolicyConfig
from school_portal.config.schemas.ranking import RankingConfig


class EffectiveConfig(BaseModel):
    """Combined effective configuration for a run.

    Attributes:
        access: Validated access policy.
        ranking: Validated ranking configuration.
        file_checksums: SHA-256 checksums of source files.
        run_id: Unique identifier for the run.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    access: AccessPolicyConfig
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    file_checksums: Annotated[dict[str, str], Field(default_factory=dict)]
    run_id: str

    def to_normalized_json(self) -> str:
        """Convert to normalized JSON with stable ordering.

        Returns:
            JSON string with sorted keys.
        """
        data = self.model_dump(mode="json", exclude={"run_id", "file_checksums"})
        return json.dumps(data, sort_keys=True, separators=(",", ":"))

    def compute_checksum(self) -> str:
        """Compute SHA-256 checksum of normalized configuration.

        Returns:
            Hex-encoded SHA-256 checksum.
        """
        normalized = self.to_normalized_json()
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()

    def summary(self) -> dict[str, object]:
        """Get a summary of the effective configuration."""
        return {
            "run_id": self.run_id,
            "admins_count": len(self.access.admins),
            "students_count": len(self.access.students),
            "average_policy": self.ranking.average_policy.value,
            "podium_size": self.ranking.podium_size,
            "config_checksum": self.compute_checksum(),
            "file_checksums": self.file_checksums,
        }
