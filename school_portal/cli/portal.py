"""CLI commands for the school portal ranking core."""

import json
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path

import click
import structlog
import yaml
from pydantic import ValidationError

from school_portal import __version__
from school_portal.access import AccessPolicy, Role
from school_portal.config.constants import COMPONENT_CLI
from school_portal.config.error_hints import format_validation_error
from school_portal.config.loader import ConfigLoader, ConfigValidationError
from school_portal.config.schemas.ranking import RankingConfig
from school_portal.observability.logging import (
    bind_run_context,
    configure_from_settings,
    configure_logging,
)
from school_portal.ranker import (
    AveragePolicy,
    RankingResult,
    StudentRanker,
    refresh_current_user_rank,
)
from school_portal.reports import (
    JsonReportWriter,
    build_class_report,
    build_student_report,
)
from school_portal.settings import AppSettings, get_settings
from school_portal.store import SnapshotError, load_snapshot


logger = structlog.get_logger()

POLICY_CHOICES = [p.value for p in AveragePolicy]


@dataclass(frozen=True)
class _CommandContext:
    """What every command needs after startup."""

    log: structlog.typing.FilteringBoundLogger
    settings: AppSettings
    run_id: str


def _load_settings() -> AppSettings:
    """Read environment settings, exiting with hints when they are invalid."""
    try:
        return get_settings()
    except ValidationError as e:
        click.echo("Environment settings are invalid:", err=True)
        for err in e.errors():
            formatted = format_validation_error(
                location=".".join(str(loc) for loc in err["loc"]),
                message=err["msg"],
                error_type=err["type"],
            )
            click.echo(f"  - {formatted}", err=True)
        sys.exit(1)


def _setup_logging(
    command: str, json_logs: bool | None, verbose: bool
) -> _CommandContext:
    """Configure logging from settings and flags.

    Returns:
        Bound CLI logger, the settings in effect and the run id.
    """
    settings = _load_settings()
    configure_from_settings(settings, verbose=verbose, json_logs=json_logs)

    run_id = str(uuid.uuid4())
    bind_run_context(run_id, command=command)
    return _CommandContext(logger.bind(component=COMPONENT_CLI), settings, run_id)


def _echo_config_errors(errors: list[dict[str, str]]) -> None:
    click.echo("Configuration validation failed:", err=True)
    for error in errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        click.echo(f"  - {formatted}", err=True)


def _load_ranking_config(
    ranking_path: Path | None, settings: AppSettings, run_id: str
) -> RankingConfig:
    """Load ranking.yaml if given (or configured), else defaults."""
    path = ranking_path or settings.ranking_config_path
    if path is None:
        return RankingConfig()

    loader = ConfigLoader(run_id=run_id)
    try:
        return loader.load_ranking(path)
    except (ConfigValidationError, FileNotFoundError, yaml.YAMLError):
        _echo_config_errors(loader.validation_errors)
        sys.exit(1)


def _resolve_policy(
    policy: str | None, ranking_config: RankingConfig, settings: AppSettings
) -> AveragePolicy:
    """Pick the denominator policy: flag, then config file, then environment."""
    if policy is not None:
        return AveragePolicy(policy)
    if "average_policy" in ranking_config.model_fields_set:
        return ranking_config.average_policy
    return settings.average_policy


def _rank_snapshot(
    students_path: Path,
    policy: str | None,
    ranking_path: Path | None,
    context: _CommandContext,
) -> tuple[RankingResult, AveragePolicy]:
    """Load a snapshot and rank it, exiting on load failure."""
    ranking_config = _load_ranking_config(ranking_path, context.settings, context.run_id)
    resolved = _resolve_policy(policy, ranking_config, context.settings)

    try:
        students = load_snapshot(students_path)
    except SnapshotError as e:
        context.log.warning("snapshot_load_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ranker = StudentRanker(policy=resolved, podium_size=ranking_config.podium_size)
    return ranker.rank(students), resolved


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """School portal ranking CLI."""


@cli.command()
@click.option(
    "--students",
    "students_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the student snapshot JSON file.",
)
@click.option(
    "--current-user",
    "current_user_id",
    default=None,
    help="Id of the viewing user, to report their own rank.",
)
@click.option(
    "--policy",
    type=click.Choice(POLICY_CHOICES),
    default=None,
    help="Average denominator policy (default: from config or environment).",
)
@click.option(
    "--ranking-config",
    "ranking_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to ranking.yaml.",
)
@click.option("--json-output", is_flag=True, help="Print the ranking as JSON.")
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: LOG_JSON or true).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def rank(  # noqa: PLR0913
    students_path: Path,
    current_user_id: str | None,
    policy: str | None,
    ranking_path: Path | None,
    json_output: bool,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Rank a student snapshot and print the leaderboard."""
    context = _setup_logging("rank", json_logs, verbose)
    result, resolved = _rank_snapshot(students_path, policy, ranking_path, context)

    current = refresh_current_user_rank(result.ranking, current_user_id)

    if json_output:
        payload = {
            "policy": resolved.value,
            "ranking": [s.model_dump(mode="json") for s in result.ranking],
            "podium": [s.id for s in result.podium],
            "current_user": current.model_dump(mode="json") if current else None,
            "output_checksum": result.output_checksum,
        }
        click.echo(json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False))
        return

    if not result.ranking:
        click.echo("No students ranked yet.")
    else:
        click.echo(f"{'Rank':>4}  {'Score':>5}  Name")
        for student in result.ranking:
            click.echo(f"{student.rank:>4}  {student.average_score:>4}%  {student.name}")

    if current_user_id is not None:
        if current is None:
            click.echo("Your rank: N/A")
        else:
            click.echo(f"Your rank: #{current.rank} ({current.average_score}%)")


@cli.command()
@click.option(
    "--students",
    "students_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the student snapshot JSON file.",
)
@click.option(
    "--out",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for report files.",
)
@click.option(
    "--student",
    "student_ids",
    multiple=True,
    help="Also write an individual report for this student id (repeatable).",
)
@click.option(
    "--policy",
    type=click.Choice(POLICY_CHOICES),
    default=None,
    help="Average denominator policy (default: from config or environment).",
)
@click.option(
    "--ranking-config",
    "ranking_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to ranking.yaml.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: LOG_JSON or true).",
)
def report(  # noqa: PLR0913
    students_path: Path,
    output_dir: Path,
    student_ids: tuple[str, ...],
    policy: str | None,
    ranking_path: Path | None,
    json_logs: bool | None,
) -> None:
    """Write the class report and optional student reports as JSON."""
    context = _setup_logging("report", json_logs, verbose=False)
    result, resolved = _rank_snapshot(students_path, policy, ranking_path, context)

    writer = JsonReportWriter(output_dir)
    class_report = build_class_report(result, resolved)
    written = [writer.write_class_report(class_report)]

    missing: list[str] = []
    for student_id in student_ids:
        entry = result.find(student_id)
        if entry is None:
            missing.append(student_id)
            continue
        student_report = build_student_report(entry, resolved)
        written.append(writer.write_student_report(student_report, student_id))

    context.log.info("reports_written", files=len(written), missing_students=missing)
    click.echo(f"Reports written to {output_dir}:")
    for file_info in written:
        click.echo(f"  {file_info.path} ({file_info.bytes_written} bytes)")

    if missing:
        click.echo(f"Students not found: {', '.join(missing)}", err=True)
        sys.exit(1)


@cli.command("check-access")
@click.option(
    "--access",
    "access_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to access.yaml (default: ACCESS_POLICY_PATH).",
)
@click.option(
    "--existing-role",
    type=click.Choice([r.value for r in Role]),
    default=None,
    help="Role stored on the user's existing profile, if any.",
)
@click.argument("email")
def check_access(
    access_path: Path | None, existing_role: str | None, email: str
) -> None:
    """Check whether EMAIL may sign in to the portal."""
    context = _setup_logging("check-access", json_logs=False, verbose=False)

    path = access_path or context.settings.access_policy_path
    if path is None:
        click.echo("Error: pass --access or set ACCESS_POLICY_PATH.", err=True)
        sys.exit(1)

    try:
        policy = AccessPolicy.from_file(path)
    except ConfigValidationError as e:
        _echo_config_errors(e.errors)
        sys.exit(1)
    except (FileNotFoundError, yaml.YAMLError) as e:
        click.echo(f"Error: cannot read access policy {path}: {e}", err=True)
        sys.exit(1)

    decision = policy.authorize(email, Role(existing_role) if existing_role else None)
    if decision.granted and decision.role is not None:
        name = policy.display_name(decision.email)
        click.echo(f"Access granted: {decision.email} as {decision.role.value} ({name})")
        return

    click.echo(f"Access denied: {decision.email}", err=True)
    click.echo(f"  {decision.message}", err=True)
    sys.exit(1)


@cli.command()
@click.option(
    "--access",
    "access_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to access.yaml.",
)
@click.option(
    "--ranking",
    "ranking_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to ranking.yaml.",
)
def validate(access_path: Path, ranking_path: Path | None) -> None:
    """Validate configuration files."""
    run_id = str(uuid.uuid4())
    configure_logging(json_format=False)
    bind_run_context(run_id, command="validate")

    loader = ConfigLoader(run_id=run_id)
    try:
        effective = loader.load(access_path=access_path, ranking_path=ranking_path)
    except (ConfigValidationError, FileNotFoundError, yaml.YAMLError):
        _echo_config_errors(loader.validation_errors)
        sys.exit(1)

    click.echo("Configuration is valid!")
    click.echo(f"  Admins: {len(effective.access.admins)}")
    click.echo(f"  Students: {len(effective.access.students)}")
    click.echo(f"  Average policy: {effective.ranking.average_policy.value}")
    click.echo(f"  Checksum: {effective.compute_checksum()}")


if __name__ == "__main__":
    cli()
