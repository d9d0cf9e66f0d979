"""Observability module for structured logging."""

from school_portal.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_from_settings,
    configure_logging,
    mask_email,
)


__all__ = [
    "bind_run_context",
    "clear_run_context",
    "configure_from_settings",
    "configure_logging",
    "mask_email",
]
