"""JSON writer for report output."""

import json
from pathlib import Path

import structlog
from pydantic import BaseModel

from school_portal.store.io import AtomicWriter, WrittenFile


logger = structlog.get_logger()

CLASS_REPORT_FILENAME = "class_report.json"


class JsonReportWriter:
    """Writes reports as deterministic JSON files.

    Output uses sorted keys and stable indentation so identical reports
    produce byte-identical files.
    """

    def __init__(self, output_dir: Path, run_id: str | None = None) -> None:
        """Initialize the writer.

        Args:
            output_dir: Directory receiving the report files.
            run_id: Optional run ID for logging context.
        """
        self._output_dir = output_dir
        self._writer = AtomicWriter(output_dir, run_id)
        self._log = logger.bind(component="reports")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    @staticmethod
    def serialize(report: BaseModel) -> str:
        """Serialize a report with stable formatting."""
        return json.dumps(
            report.model_dump(mode="json"),
            sort_keys=True,
            indent=2,
            ensure_ascii=False,
        )

    def write(self, report: BaseModel, filename: str) -> WrittenFile:
        """Write one report.

        Args:
            report: Report model to serialize.
            filename: File name inside the output directory.

        Returns:
            WrittenFile describing the written file.
        """
        written = self._writer.write(self._output_dir / filename, self.serialize(report))
        self._log.info(
            "report_written",
            path=written.path,
            bytes=written.bytes_written,
            sha256=written.sha256[:12],
        )
        return written

    def write_class_report(self, report: BaseModel) -> WrittenFile:
        """Write the class report under its conventional name."""
        return self.write(report, CLASS_REPORT_FILENAME)

    def write_student_report(self, report: BaseModel, student_id: str) -> WrittenFile:
        """Write one student's report as student_<id>.json."""
        safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in student_id)
        return self.write(report, f"student_{safe_id}.json")
