"""Shared pytest fixtures."""

from collections.abc import Iterator

import pytest

from school_portal.ranker.metrics import RankerMetrics


SETTINGS_ENV_VARS = (
    "ACCESS_POLICY_PATH",
    "RANKING_CONFIG_PATH",
    "AVERAGE_POLICY",
    "LOG_JSON",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep settings and process-wide metrics independent between tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    RankerMetrics.reset()
    yield
    RankerMetrics.reset()
