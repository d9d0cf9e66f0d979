"""Access policy configuration schema."""

from typing import Annotated

from pydantic import Field, field_validator, model_validator

from school_portal.data_model import StrictBaseModel


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class AdminEntry(StrictBaseModel):
    """An administrator allowed into the portal.

    Attributes:
        email: Login e-mail, matched case-insensitively.
        display_name: Name shown in activity feeds.
    """

    email: Annotated[str, Field(pattern=EMAIL_PATTERN, max_length=254)]
    display_name: Annotated[str | None, Field(min_length=1, max_length=100)] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: object) -> object:
        """Lowercase and trim the e-mail."""
        return _normalize_email(value) if isinstance(value, str) else value


class AccessPolicyConfig(StrictBaseModel):
    """Identity to role mapping loaded from access.yaml.

    Attributes:
        version: Schema version.
        admins: Administrators.
        students: E-mails of authorized students.
    """

    version: str = "1.0"
    admins: list[AdminEntry] = Field(default_factory=list)
    students: list[Annotated[str, Field(pattern=EMAIL_PATTERN, max_length=254)]] = (
        Field(default_factory=list)
    )

    @field_validator("students", mode="before")
    @classmethod
    def normalize_students(cls, value: object) -> object:
        """Lowercase and trim student e-mails."""
        if isinstance(value, list):
            return [_normalize_email(v) if isinstance(v, str) else v for v in value]
        return value

    @model_validator(mode="after")
    def validate_unique_emails(self) -> "AccessPolicyConfig":
        """Ensure no e-mail is listed twice within the same list."""
        admin_emails = [a.email for a in self.admins]
        if len(admin_emails) != len(set(admin_emails)):
            msg = "Duplicate admin e-mails found"
            raise ValueError(msg)
        if len(self.students) != len(set(self.students)):
            msg = "Duplicate student e-mails found"
            raise ValueError(msg)
        return self
