"""Integration tests for the snapshot to report pipeline."""

import json
from pathlib import Path

import pytest

from school_portal.access import AccessPolicy, Role
from school_portal.config import ConfigLoader
from school_portal.ranker import JsonProfileCache, SnapshotRefresher, StudentRanker
from school_portal.ranker.metrics import RankerMetrics
from school_portal.reports import JsonReportWriter, build_class_report, build_student_report
from school_portal.store import load_snapshot


def _write_snapshot(path: Path, bruno_saeb: int) -> None:
    """Write a portal export with one admin and three students."""
    students = [
        {"uid": "admin-1", "name": "Director", "type": "admin"},
        {
            "uid": "u-ana",
            "name": "Ana",
            "type": "student",
            "stats": {"provaParana": 80, "saeb": 80, "provasInternas": 80,
                      "provasExternas": 80, "plataformasDigitais": 80, "ranking": 9},
        },
        {
            "uid": "u-bruno",
            "name": "Bruno",
            "type": "student",
            "stats": {"provaParana": 80, "saeb": bruno_saeb, "provasInternas": 80,
                      "provasExternas": 80, "plataformasDigitais": 80},
        },
        {
            "uid": "u-carla",
            "name": "Carla",
            "type": "student",
            "stats": {"provaParana": 60, "saeb": "n/a", "provasInternas": 60},
        },
    ]
    path.write_text(json.dumps({"students": students}), encoding="utf-8")


class TestRankingPipeline:
    """End-to-end flow from snapshot file to written reports."""

    @pytest.mark.integration
    def test_snapshots_refresh_cached_rank(self, tmp_path: Path) -> None:
        """Each new snapshot recomputes and moves the viewer's cached rank."""
        snapshot = tmp_path / "students.json"
        cache = JsonProfileCache(tmp_path / "profiles.json")
        refresher = SnapshotRefresher(
            StudentRanker(metrics=RankerMetrics()), cache, current_user_id="u-bruno"
        )

        _write_snapshot(snapshot, bruno_saeb=80)
        first = refresher.on_snapshot(load_snapshot(snapshot))

        _write_snapshot(snapshot, bruno_saeb=100)
        second = refresher.on_snapshot(load_snapshot(snapshot))

        assert first is not None
        assert first.rank == 2
        assert second is not None
        assert second.rank == 1
        assert second.average_score == 84
        assert cache.get("u-bruno") == {"rank": 1}

    @pytest.mark.integration
    def test_reports_from_snapshot(self, tmp_path: Path) -> None:
        """Reports are written for a loaded snapshot."""
        snapshot = tmp_path / "students.json"
        _write_snapshot(snapshot, bruno_saeb=80)
        students = load_snapshot(snapshot)

        result = StudentRanker(metrics=RankerMetrics()).rank(students)
        writer = JsonReportWriter(tmp_path / "out")
        writer.write_class_report(build_class_report(result))
        carla = result.find("u-carla")
        assert carla is not None
        writer.write_student_report(build_student_report(carla), carla.id)

        class_data = json.loads((tmp_path / "out" / "class_report.json").read_text(encoding="utf-8"))
        assert [s["id"] for s in class_data["ranking"]] == ["u-ana", "u-bruno", "u-carla"]
        assert class_data["ranking"][0]["rank"] == 1
        assert class_data["class_average"] == 61

        carla_data = json.loads(
            (tmp_path / "out" / "student_u-carla.json").read_text(encoding="utf-8")
        )
        assert carla_data["average_score"] == 24
        assert carla_data["performance_band"] == "needs_support"

    @pytest.mark.integration
    def test_access_policy_from_bundled_config(self) -> None:
        """The shipped access.yaml loads and resolves roles."""
        config_dir = Path(__file__).resolve().parents[2] / "config"
        effective = ConfigLoader(run_id="integration").load(
            config_dir / "access.yaml", config_dir / "ranking.yaml"
        )
        policy = AccessPolicy(effective.access)

        assert policy.resolve_role("director@school.example.org") is Role.ADMIN
        assert policy.resolve_role("ana.miorini@school.example.org") is Role.STUDENT
        assert policy.authorize("stranger@example.org").granted is False
