"""Authorization policy built from the configured identity lists."""

from pathlib import Path

import structlog

from school_portal.access.models import AccessDecision, DenialReason, Role
from school_portal.config.loader import ConfigLoader
from school_portal.config.schemas.access import AccessPolicyConfig


logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    """Normalize an e-mail for comparison."""
    return email.strip().lower()


class AccessPolicy:
    """Maps identities to portal roles.

    Built from an AccessPolicyConfig so the allow-lists can change without
    touching code. Matching is case-insensitive.
    """

    def __init__(self, config: AccessPolicyConfig) -> None:
        """Initialize the policy.

        Args:
            config: Validated access policy configuration.
        """
        self._admins = {a.email: a for a in config.admins}
        self._students = frozenset(config.students)
        self._log = logger.bind(component="access")

    @classmethod
    def from_file(cls, path: Path, run_id: str = "access") -> "AccessPolicy":
        """Load a policy from access.yaml.

        Raises:
            ConfigValidationError: If the file fails validation.
        """
        effective = ConfigLoader(run_id=run_id).load(access_path=path)
        return cls(effective.access)

    def is_admin(self, email: str) -> bool:
        """Check whether an e-mail belongs to an administrator."""
        return normalize_email(email) in self._admins

    def is_student(self, email: str) -> bool:
        """Check whether an e-mail is an authorized student."""
        return normalize_email(email) in self._students

    def resolve_role(self, email: str) -> Role | None:
        """Resolve the role for an e-mail; admin wins over student."""
        if self.is_admin(email):
            return Role.ADMIN
        if self.is_student(email):
            return Role.STUDENT
        return None

    def authorize(
        self, email: str, existing_role: Role | None = None
    ) -> AccessDecision:
        """Decide whether an identity may enter the portal.

        Args:
            email: Login e-mail.
            existing_role: Role stored on an existing profile, None for a new user.

        Returns:
            AccessDecision; denials are values, never exceptions.
        """
        normalized = normalize_email(email)
        is_admin = self.is_admin(normalized)
        is_student = self.is_student(normalized)

        if not is_admin and not is_student:
            return self._deny(normalized, DenialReason.NOT_AUTHORIZED)

        if existing_role is Role.STUDENT and not is_student:
            return self._deny(normalized, DenialReason.STUDENT_NOT_AUTHORIZED)

        if existing_role is Role.ADMIN and not is_admin:
            return self._deny(normalized, DenialReason.ADMIN_NOT_AUTHORIZED)

        role = existing_role or (Role.ADMIN if is_admin else Role.STUDENT)

        self._log.info("access_granted", email=normalized, role=role.value)
        return AccessDecision(email=normalized, granted=True, role=role)

    def display_name(self, email: str, fallback: str | None = None) -> str:
        """Get the name shown for an identity in activity feeds.

        Args:
            email: Login e-mail.
            fallback: Name to use when no admin display name is configured.

        Returns:
            Admin display name, else fallback, else the e-mail local part.
        """
        normalized = normalize_email(email)
        admin = self._admins.get(normalized)
        if admin is not None and admin.display_name:
            return admin.display_name
        if fallback:
            return fallback
        return normalized.split("@", 1)[0]

    def _deny(self, email: str, reason: DenialReason) -> AccessDecision:
        self._log.warning("access_denied", email=email, reason=reason.value)
        return AccessDecision(email=email, granted=False, reason=reason)
