"""Snapshot-driven ranking refresh and current-user rank propagation."""

import json
from pathlib import Path
from typing import Any, Protocol

import structlog

from school_portal.ranker.constants import COMPONENT_RANKER
from school_portal.ranker.models import RankedStudent, RankingResult, StudentRecord
from school_portal.ranker.ranker import StudentRanker
from school_portal.store.io import AtomicWriter


logger = structlog.get_logger()


class ProfileCache(Protocol):
    """Cached copy of a user's profile, keyed by user id."""

    def get(self, user_id: str) -> dict[str, Any] | None:
        """Return the cached profile, if any."""
        ...

    def update_rank(self, user_id: str, rank: int) -> None:
        """Persist a freshly derived rank onto the cached profile."""
        ...


class InMemoryProfileCache:
    """Profile cache living in process memory."""

    def __init__(self, profiles: dict[str, dict[str, Any]] | None = None) -> None:
        self._profiles: dict[str, dict[str, Any]] = {
            uid: dict(profile) for uid, profile in (profiles or {}).items()
        }

    def get(self, user_id: str) -> dict[str, Any] | None:
        profile = self._profiles.get(user_id)
        return dict(profile) if profile is not None else None

    def update_rank(self, user_id: str, rank: int) -> None:
        self._profiles.setdefault(user_id, {})["rank"] = rank


class JsonProfileCache:
    """Profile cache persisted as one JSON document.

    The file maps user id to profile object and is rewritten atomically on
    every rank update. A file that does not parse reads as empty and is
    replaced by the next update.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the cache.

        Args:
            path: JSON file backing the cache; created on first write.
        """
        self._path = path
        self._writer = AtomicWriter(path.parent)

    def _read_all(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "profile_cache_load_failed", path=str(self._path), error=str(exc)
            )
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "profile_cache_load_failed",
                path=str(self._path),
                error=f"expected an object, got {type(data).__name__}",
            )
            return {}
        return {uid: p for uid, p in data.items() if isinstance(p, dict)}

    def get(self, user_id: str) -> dict[str, Any] | None:
        return self._read_all().get(user_id)

    def update_rank(self, user_id: str, rank: int) -> None:
        profiles = self._read_all()
        profiles.setdefault(user_id, {})["rank"] = rank
        self._writer.write(
            self._path,
            json.dumps(profiles, sort_keys=True, indent=2, ensure_ascii=False),
        )


class SnapshotRefresher:
    """Recomputes the ranking whenever a new snapshot arrives.

    Every snapshot triggers a full, stateless recompute; nothing is patched
    incrementally. When the current user appears in the snapshot, their
    fresh rank is written to the profile cache.
    """

    def __init__(
        self,
        ranker: StudentRanker,
        cache: ProfileCache,
        current_user_id: str | None = None,
    ) -> None:
        """Initialize the refresher.

        Args:
            ranker: Ranker used for every recompute.
            cache: Profile cache receiving the current user's rank.
            current_user_id: Identity of the viewer, if signed in.
        """
        self._ranker = ranker
        self._cache = cache
        self._current_user_id = current_user_id
        self._latest: RankingResult | None = None
        self._log = logger.bind(component=COMPONENT_RANKER, subcomponent="refresh")

    @property
    def latest(self) -> RankingResult | None:
        """Get the result of the most recent snapshot."""
        return self._latest

    @property
    def current_user_id(self) -> str | None:
        """Get the identity of the viewer."""
        return self._current_user_id

    def set_current_user(self, user_id: str | None) -> None:
        """Switch the viewer, e.g. after sign-in or sign-out."""
        self._current_user_id = user_id

    def on_snapshot(self, students: list[StudentRecord]) -> RankedStudent | None:
        """Handle a snapshot delivered by the student directory.

        Args:
            students: Full point-in-time copy of all student records.

        Returns:
            The current user's fresh entry, or None when absent.
        """
        previous = self._latest
        result = self._ranker.rank(students)
        self._latest = result

        if previous is not None and previous.output_checksum == result.output_checksum:
            self._log.debug("ranking_unchanged", students_in=result.students_in)

        entry = self._ranker.find_current_user(result, self._current_user_id)
        if entry is not None and self._current_user_id is not None:
            self._cache.update_rank(self._current_user_id, entry.rank)
            self._log.info(
                "current_user_rank_updated",
                current_user_id=self._current_user_id,
                rank=entry.rank,
                average_score=entry.average_score,
            )
        return entry
