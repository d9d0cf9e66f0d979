"""Tests for atomic file writing."""

import hashlib
from pathlib import Path

import pytest

from school_portal.store import AtomicWriter


class TestAtomicWriter:
    """Tests for AtomicWriter."""

    @pytest.mark.unit
    def test_write_creates_parents(self, tmp_path: Path) -> None:
        """Missing parent directories are created."""
        writer = AtomicWriter(tmp_path)
        target = tmp_path / "nested" / "dir" / "file.json"

        written = writer.write(target, "{}")

        assert target.read_text(encoding="utf-8") == "{}"
        assert written.path == str(Path("nested") / "dir" / "file.json")
        assert written.absolute_path == str(target.resolve())

    @pytest.mark.unit
    def test_checksum_and_size_use_utf8(self, tmp_path: Path) -> None:
        """Byte count and digest are computed over UTF-8 bytes."""
        written = AtomicWriter(tmp_path, run_id="r").write(tmp_path / "a.txt", "Zé")
        assert written.bytes_written == 3
        assert written.sha256 == hashlib.sha256("Zé".encode()).hexdigest()

    @pytest.mark.unit
    def test_overwrite_leaves_no_temp_file(self, tmp_path: Path) -> None:
        """Rewriting replaces the file and removes the temp file."""
        writer = AtomicWriter(tmp_path)
        target = tmp_path / "a.json"
        writer.write(target, "old")
        writer.write(target, "new")

        assert target.read_text(encoding="utf-8") == "new"
        assert list(tmp_path.iterdir()) == [target]

    @pytest.mark.unit
    def test_path_outside_base_dir(self, tmp_path: Path) -> None:
        """Paths outside the base directory are reported as given."""
        writer = AtomicWriter(tmp_path / "base")
        target = tmp_path / "elsewhere.txt"
        assert writer.write(target, "x").path == str(target)
