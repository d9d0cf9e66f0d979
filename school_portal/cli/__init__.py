"""Command-line interface."""

from school_portal.cli.portal import cli


__all__ = ["cli"]
