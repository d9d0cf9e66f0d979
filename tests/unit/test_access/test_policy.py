"""Tests for the access policy."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from school_portal.access import AccessPolicy, DenialReason, Role, normalize_email
from school_portal.config.loader import ConfigValidationError
from school_portal.config.schemas.access import AccessPolicyConfig, AdminEntry


def _make_policy() -> AccessPolicy:
    return AccessPolicy(
        AccessPolicyConfig(
            admins=[
                AdminEntry(email="director@school.org", display_name="Director Iza"),
                AdminEntry(email="both@school.org"),
            ],
            students=["ana@school.org", "Both@School.org"],
        )
    )


class TestResolveRole:
    """Tests for role resolution."""

    @pytest.mark.unit
    def test_admin(self) -> None:
        """Listed admins resolve to admin."""
        assert _make_policy().resolve_role("director@school.org") is Role.ADMIN

    @pytest.mark.unit
    def test_student(self) -> None:
        """Listed students resolve to student."""
        assert _make_policy().resolve_role("ana@school.org") is Role.STUDENT

    @pytest.mark.unit
    def test_admin_wins_when_listed_twice(self) -> None:
        """An e-mail on both lists is an admin."""
        assert _make_policy().resolve_role("both@school.org") is Role.ADMIN

    @pytest.mark.unit
    def test_unknown(self) -> None:
        """Unlisted e-mails have no role."""
        assert _make_policy().resolve_role("someone@else.org") is None

    @pytest.mark.unit
    def test_case_insensitive(self) -> None:
        """Matching ignores case and surrounding whitespace."""
        policy = _make_policy()
        assert policy.is_admin("  DIRECTOR@School.org ")
        assert policy.is_student("ANA@SCHOOL.ORG")
        assert normalize_email(" Ana@School.ORG ") == "ana@school.org"


class TestAuthorize:
    """Tests for access decisions."""

    @pytest.mark.unit
    def test_new_student_granted(self) -> None:
        """A listed student without a profile gets the student role."""
        decision = _make_policy().authorize("Ana@School.org")
        assert decision.granted
        assert decision.role is Role.STUDENT
        assert decision.email == "ana@school.org"
        assert decision.reason is None
        assert decision.message is None

    @pytest.mark.unit
    def test_new_admin_granted(self) -> None:
        """A listed admin without a profile gets the admin role."""
        decision = _make_policy().authorize("director@school.org")
        assert decision.granted
        assert decision.role is Role.ADMIN

    @pytest.mark.unit
    def test_unknown_denied(self) -> None:
        """Unlisted e-mails are refused with a message."""
        decision = _make_policy().authorize("intruder@else.org")
        assert not decision.granted
        assert decision.role is None
        assert decision.reason is DenialReason.NOT_AUTHORIZED
        assert decision.message is not None
        assert "not authorized" in decision.message

    @pytest.mark.unit
    def test_existing_student_profile_needs_student_listing(self) -> None:
        """A stored student profile is refused once off the student list."""
        decision = _make_policy().authorize(
            "director@school.org", existing_role=Role.STUDENT
        )
        assert not decision.granted
        assert decision.reason is DenialReason.STUDENT_NOT_AUTHORIZED

    @pytest.mark.unit
    def test_existing_admin_profile_needs_admin_listing(self) -> None:
        """A stored admin profile is refused once off the admin list."""
        decision = _make_policy().authorize("ana@school.org", existing_role=Role.ADMIN)
        assert not decision.granted
        assert decision.reason is DenialReason.ADMIN_NOT_AUTHORIZED

    @pytest.mark.unit
    def test_existing_profile_keeps_stored_role(self) -> None:
        """An e-mail on both lists keeps the role stored on its profile."""
        decision = _make_policy().authorize("both@school.org", existing_role=Role.STUDENT)
        assert decision.granted
        assert decision.role is Role.STUDENT

    @pytest.mark.unit
    def test_unknown_wins_over_existing_role(self) -> None:
        """A profile whose e-mail left every list gets the generic denial."""
        decision = _make_policy().authorize("gone@school.org", existing_role=Role.ADMIN)
        assert decision.reason is DenialReason.NOT_AUTHORIZED


class TestDisplayName:
    """Tests for display names."""

    @pytest.mark.unit
    def test_admin_display_name(self) -> None:
        """Configured admin names are used first."""
        assert _make_policy().display_name("director@school.org", "Ignored") == "Director Iza"

    @pytest.mark.unit
    def test_fallback(self) -> None:
        """Without an admin name the fallback is used."""
        assert _make_policy().display_name("ana@school.org", "Ana Miorini") == "Ana Miorini"

    @pytest.mark.unit
    def test_local_part(self) -> None:
        """Without any name the e-mail local part is used."""
        assert _make_policy().display_name("both@school.org") == "both"


class TestAccessPolicyConfig:
    """Tests for access configuration validation."""

    @pytest.mark.unit
    def test_normalizes_emails(self) -> None:
        """E-mails are lowercased and trimmed."""
        config = AccessPolicyConfig(
            admins=[{"email": " Dir@School.ORG "}],
            students=["  Ana@School.org"],
        )
        assert config.admins[0].email == "dir@school.org"
        assert config.students == ["ana@school.org"]

    @pytest.mark.unit
    def test_rejects_duplicate_students(self) -> None:
        """The same student twice, in any case, is invalid."""
        with pytest.raises(ValidationError, match="Duplicate student"):
            AccessPolicyConfig(students=["ana@school.org", "ANA@school.org"])

    @pytest.mark.unit
    def test_rejects_duplicate_admins(self) -> None:
        """The same admin twice is invalid."""
        with pytest.raises(ValidationError, match="Duplicate admin"):
            AccessPolicyConfig(
                admins=[{"email": "a@school.org"}, {"email": "A@school.org"}]
            )

    @pytest.mark.unit
    def test_rejects_malformed_email(self) -> None:
        """Strings that are not e-mails are invalid."""
        with pytest.raises(ValidationError):
            AccessPolicyConfig(students=["not-an-email"])

    @pytest.mark.unit
    def test_rejects_unknown_fields(self) -> None:
        """Typos in field names are caught."""
        with pytest.raises(ValidationError):
            AccessPolicyConfig.model_validate({"studnets": []})


class TestFromFile:
    """Tests for loading a policy from YAML."""

    @pytest.mark.unit
    def test_loads_yaml(self, tmp_path: Path) -> None:
        """A valid access.yaml builds a working policy."""
        path = tmp_path / "access.yaml"
        path.write_text(
            "admins:\n  - email: dir@school.org\nstudents:\n  - ana@school.org\n",
            encoding="utf-8",
        )
        policy = AccessPolicy.from_file(path)
        assert policy.resolve_role("dir@school.org") is Role.ADMIN
        assert policy.resolve_role("ana@school.org") is Role.STUDENT

    @pytest.mark.unit
    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        """Schema errors surface as ConfigValidationError."""
        path = tmp_path / "access.yaml"
        path.write_text("students:\n  - nope\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError) as exc_info:
            AccessPolicy.from_file(path)
        assert exc_info.value.file_path == str(path)
