"""Snapshot loading and file persistence helpers."""

from school_portal.store.io import AtomicWriter, WrittenFile
from school_portal.store.snapshot import SnapshotError, load_snapshot, parse_snapshot


__all__ = [
    "AtomicWriter",
    "SnapshotError",
    "WrittenFile",
    "load_snapshot",
    "parse_snapshot",
]
