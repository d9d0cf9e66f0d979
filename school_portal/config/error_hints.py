"""Error hints for configuration validation errors.

Provides user-friendly hints with actionable remediation steps
for common validation errors.
"""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your configuration.",
    "enum": "Check the allowed values in the documentation.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "string_type": "This field must be a text string.",
    "list_type": "This field must be a list/array.",
    "extra_forbidden": "Unknown field. Check for typos in the field name.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "string_too_short": "The text is too short. Check minimum length requirement.",
    "string_too_long": "The text is too long. Check maximum length requirement.",
    "string_pattern_mismatch": "The format is invalid. Use an address like 'name@school.org'.",
    "value_error": "Check the value. Each e-mail may appear only once per list.",
    "file_not_found": "The file does not exist. Check the file path.",
    "yaml_parse_error": "Invalid YAML syntax. Check for proper indentation and formatting.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "email": "Must be an e-mail address (e.g., 'coordinator@school.org').",
    "students": "Must be a list of student e-mail addresses.",
    "admins": "Must be a list of objects with 'email' and optional 'display_name'.",
    "average_policy": "Must be 'fixed' (always divide by 5) or 'valid_count'.",
    "podium_size": "Must be between 1 and 10.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'enum').
        field_name: Optional field name for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        # 'admins.0.email' -> 'email', 'students.3' -> 'students'
        parts = [p for p in field_name.split(".") if not p.isdigit()]
        if parts and parts[-1] in FIELD_HINTS:
            return FIELD_HINTS[parts[-1]]

    return ERROR_HINTS.get(
        error_type, "Check the configuration documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'admins.0.email').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
