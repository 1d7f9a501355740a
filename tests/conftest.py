from __future__ import annotations

import pytest

from permflow.groups import Groups, register_builtin_groups
from permflow.logger import configure_logger, get_logger
from permflow.permission import InMemoryAnalyticsTracker, InMemoryHistoryStore, PermissionAnalytics
from permflow.testing import FakeOS


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path):
    """Send log files to a per-test directory."""
    log_dir = tmp_path / "logs"
    configure_logger(level="TRACE", log_directory=str(log_dir), session_id="test")
    yield log_dir
    get_logger().close()


@pytest.fixture
def builtin_groups():
    """Start from only the built-in groups and restore them afterwards."""
    Groups.clear()
    register_builtin_groups()
    yield Groups
    Groups.clear()
    register_builtin_groups()


@pytest.fixture
def fake_os() -> FakeOS:
    return FakeOS()


@pytest.fixture
def history() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def tracker() -> InMemoryAnalyticsTracker:
    return InMemoryAnalyticsTracker()


@pytest.fixture
def coordinator(fake_os, history, tracker):
    return fake_os.coordinator(
        history=history,
        analytics=PermissionAnalytics([tracker]),
        retry_delay_ms=0,
    )
