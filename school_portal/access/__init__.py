"""Access policy: identity to role mapping loaded from configuration."""

from school_portal.access.models import (
    DENIAL_MESSAGES,
    AccessDecision,
    DenialReason,
    Role,
)
from school_portal.access.policy import AccessPolicy, normalize_email


__all__ = [
    "DENIAL_MESSAGES",
    "AccessDecision",
    "AccessPolicy",
    "DenialReason",
    "Role",
    "normalize_email",
]
