"""Configuration loading and validation module."""

from school_portal.config.effective import EffectiveConfig
from school_portal.config.loader import (
    ConfigLoader,
    ConfigState,
    ConfigStateError,
    ConfigValidationError,
)


__all__ = [
    "ConfigLoader",
    "ConfigState",
    "ConfigStateError",
    "ConfigValidationError",
    "EffectiveConfig",
]
