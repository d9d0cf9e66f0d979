"""Configuration schemas."""

from school_portal.config.schemas.access import AccessPolicyConfig, AdminEntry
from school_portal.config.schemas.ranking import RankingConfig


__all__ = ["AccessPolicyConfig", "AdminEntry", "RankingConfig"]
