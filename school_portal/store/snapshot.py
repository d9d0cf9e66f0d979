"""Loading student snapshots from JSON exports of the student directory."""

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from school_portal.ranker.models import StudentRecord


logger = structlog.get_logger()

STUDENT_TYPE = "student"


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialize the error.

        Args:
            path: Path of the snapshot file.
            reason: Human-readable failure reason.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load snapshot {path}: {reason}")


def parse_snapshot(data: object) -> list[StudentRecord]:
    """Convert decoded snapshot JSON into student records.

    Accepts either a list of records or an object with a `students` list.
    Profiles whose `type` is set to anything but "student" are skipped.

    Args:
        data: Decoded JSON document.

    Returns:
        Student records in file order.

    Raises:
        ValueError: If the document shape is not recognised.
        ValidationError: If a student entry is invalid.
    """
    if isinstance(data, dict):
        data = data.get("students")
    if not isinstance(data, list):
        msg = "expected a list of students or an object with a 'students' list"
        raise ValueError(msg)

    records: list[StudentRecord] = []
    for entry in data:
        if isinstance(entry, dict) and entry.get("type", STUDENT_TYPE) != STUDENT_TYPE:
            continue
        records.append(StudentRecord.model_validate(entry))
    return records


def load_snapshot(path: Path) -> list[StudentRecord]:
    """Load a student snapshot from a JSON file.

    Args:
        path: Path to the snapshot file.

    Returns:
        Student records in file order.

    Raises:
        SnapshotError: If the file is missing, not JSON, or malformed.
    """
    log = logger.bind(component="snapshot", file_path=str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        records = parse_snapshot(data)
    except FileNotFoundError as e:
        log.error("snapshot_not_found")
        raise SnapshotError(path, "file not found") from e
    except json.JSONDecodeError as e:
        log.error("snapshot_invalid_json", error=str(e))
        raise SnapshotError(path, f"invalid JSON: {e}") from e
    except ValidationError as e:
        log.error("snapshot_invalid_student", error_count=e.error_count())
        raise SnapshotError(path, f"invalid student entry: {e}") from e
    except ValueError as e:
        log.error("snapshot_invalid_shape", error=str(e))
        raise SnapshotError(path, str(e)) from e

    log.info("snapshot_loaded", students=len(records))
    return records
