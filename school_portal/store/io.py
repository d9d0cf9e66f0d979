"""Atomic file writing helpers.

Provides atomic file writing to prevent partial writes and ensure data integrity.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path

import structlog


logger = structlog.get_logger()


@dataclass(frozen=True)
class WrittenFile:
    """Record of a file written to disk.

    Attributes:
        path: Path relative to the writer's base directory.
        absolute_path: Absolute path of the file.
        bytes_written: Size of the written content.
        sha256: SHA-256 hex digest of the content.
    """

    path: str
    absolute_path: str
    bytes_written: int
    sha256: str


class AtomicWriter:
    """Provides atomic file writing operations.

    Writes content to a temporary file first, then renames to the final path.
    Readers never see partially written files.
    """

    def __init__(self, base_dir: Path, run_id: str | None = None) -> None:
        """Initialize the atomic writer.

        Args:
            base_dir: Base directory for relative path calculation.
            run_id: Optional run ID for logging context.
        """
        self._base_dir = base_dir
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str) -> WrittenFile:
        """Write content to file with atomic semantics.

        Args:
            path: Target file path.
            content: Content to write (will be encoded as UTF-8).

        Returns:
            WrittenFile with path, checksum, and size information.
        """
        content_bytes = content.encode("utf-8")
        sha256 = hashlib.sha256(content_bytes).hexdigest()

        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_bytes(content_bytes)
        temp_path.replace(path)

        try:
            relative_path = str(path.relative_to(self._base_dir))
        except ValueError:
            relative_path = str(path)

        self._log.debug(
            "file_written",
            path=relative_path,
            bytes=len(content_bytes),
            sha256=sha256[:12],
        )

        return WrittenFile(
            path=relative_path,
            absolute_path=str(path.resolve()),
            bytes_written=len(content_bytes),
            sha256=sha256,
        )
