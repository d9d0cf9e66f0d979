"""Structured logging for the portal CLI and services.

Events are snake_case and carry the run context bound by the CLI. Login
e-mails appear in access events, so they are masked before rendering.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog

from school_portal.settings import AppSettings


EMAIL_FIELDS = frozenset({"email", "current_user_email"})


def mask_email(value: str) -> str:
    """Keep the first character of the local part and the domain."""
    local, sep, domain = value.partition("@")
    if not sep or not local:
        return value
    return f"{local[0]}***@{domain}"


def mask_emails(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Processor masking e-mail fields in an event."""
    for key in EMAIL_FIELDS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = mask_email(value)
    return event_dict


def configure_logging(
    level: int = logging.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> None:
    """Configure structlog for the portal.

    Args:
        level: Minimum level emitted.
        output: Stream receiving log lines; stderr at call time when omitted.
        json_format: JSON lines when true, human-readable console output otherwise.
    """
    stream = output if output is not None else sys.stderr

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        mask_emails,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    # Modules bind loggers at import, so they must resolve config lazily
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=stream, level=level)


def configure_from_settings(
    settings: AppSettings,
    *,
    verbose: bool = False,
    json_logs: bool | None = None,
    output: TextIO | None = None,
) -> None:
    """Configure logging from LOG_LEVEL/LOG_JSON, with CLI flags taking precedence.

    Args:
        settings: Environment settings.
        verbose: Force DEBUG level.
        json_logs: Override LOG_JSON when not None.
        output: Stream receiving log lines.
    """
    level = logging.DEBUG if verbose else settings.logging_level()
    json_format = settings.log_json if json_logs is None else json_logs
    configure_logging(level=level, output=output, json_format=json_format)


def bind_run_context(run_id: str, **context: str) -> None:
    """Attach the run id (and e.g. the command name) to every later event."""
    structlog.contextvars.bind_contextvars(run_id=run_id, **context)


def clear_run_context() -> None:
    """Drop everything bound by bind_run_context."""
    structlog.contextvars.clear_contextvars()
