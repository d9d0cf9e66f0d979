"""Data models for access decisions."""

from enum import Enum

from school_portal.data_model import StrictBaseModel


class Role(str, Enum):
    """Portal role granted to a signed-in identity."""

    ADMIN = "admin"
    STUDENT = "student"


class DenialReason(str, Enum):
    """Why an identity was refused."""

    NOT_AUTHORIZED = "not_authorized"
    STUDENT_NOT_AUTHORIZED = "student_not_authorized"
    ADMIN_NOT_AUTHORIZED = "admin_not_authorized"


DENIAL_MESSAGES: dict[DenialReason, str] = {
    DenialReason.NOT_AUTHORIZED: (
        "This e-mail is not authorized to access the portal. "
        "Please contact the school office."
    ),
    DenialReason.STUDENT_NOT_AUTHORIZED: (
        "Student access is not authorized for this e-mail. "
        "Please contact the school office."
    ),
    DenialReason.ADMIN_NOT_AUTHORIZED: (
        "Administrator access is not authorized for this e-mail. "
        "Please contact the school office."
    ),
}


class AccessDecision(StrictBaseModel):
    """Outcome of an access check.

    Attributes:
        email: Normalized e-mail that was checked.
        granted: Whether access is allowed.
        role: Role to use when granted.
        reason: Denial reason when refused.
    """

    email: str
    granted: bool
    role: Role | None = None
    reason: DenialReason | None = None

    @property
    def message(self) -> str | None:
        """User-facing explanation for a denial."""
        return DENIAL_MESSAGES[self.reason] if self.reason else None
