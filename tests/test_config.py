from __future__ import annotations

import json

import pytest

from permflow.config import (
    ConfigError,
    ConfigLoader,
    PermflowConfig,
    ProfileParser,
    build_coordinator,
    build_groups,
    configure_logging,
    load_capabilities,
    load_capability_profile,
)
from permflow.groups import Capabilities
from permflow.logger import LogLevel, get_logger
from permflow.permission import InMemoryAnalyticsTracker, InMemoryHistoryStore, JsonFileHistoryStore
from permflow.testing import FakeOS


@pytest.fixture
def clean_env(monkeypatch):
    for name in ConfigLoader.ENV_MAPPINGS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _write_json(path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


# =============================================================================
# ConfigLoader
# =============================================================================

def test_defaults_without_any_config(tmp_path, clean_env) -> None:
    config = ConfigLoader(project_root=str(tmp_path), home_dir=str(tmp_path / "home")).load()

    assert config == PermflowConfig()
    assert config.to_dict()["retry_max_attempts"] == 3


def test_project_overrides_global_and_env_overrides_both(tmp_path, clean_env) -> None:
    home = tmp_path / "home"
    project = tmp_path / "app"
    _write_json(home / ".permflow" / "config.json", {"retry_max_attempts": 1, "log_level": "debug"})
    _write_json(project / ".permflow" / "config.json", {"retry_max_attempts": 5, "history_path": "state/h.json"})
    clean_env.setenv("PERMFLOW_RETRY_DELAY_MS", "250")

    config = ConfigLoader(project_root=str(project), home_dir=str(home)).load()

    assert config.retry_max_attempts == 5
    assert config.retry_delay_ms == 250
    assert config.log_level == "DEBUG"
    assert config.history_path == str(project / "state" / "h.json")


def test_unreadable_config_file_is_skipped(tmp_path, clean_env) -> None:
    path = tmp_path / ".permflow" / "config.json"
    path.parent.mkdir(parents=True)
    path.write_text("{broken", encoding="utf-8")

    config = ConfigLoader(project_root=str(tmp_path), home_dir=str(tmp_path / "home")).load()

    assert config == PermflowConfig()


def test_config_file_with_invalid_utf8_is_skipped(tmp_path, clean_env) -> None:
    path = tmp_path / ".permflow" / "config.json"
    path.parent.mkdir(parents=True)
    path.write_bytes(b'{"retry_max_attempts": "\xff\xfe"}')

    config = ConfigLoader(project_root=str(tmp_path), home_dir=str(tmp_path / "home")).load()

    assert config == PermflowConfig()


@pytest.mark.parametrize("value", ["soon", "-1", True])
def test_invalid_numbers_raise(tmp_path, clean_env, value) -> None:
    _write_json(tmp_path / ".permflow" / "config.json", {"retry_delay_ms": value})

    with pytest.raises(ConfigError, match="retry_delay_ms"):
        ConfigLoader(project_root=str(tmp_path), home_dir=str(tmp_path / "home")).load()


# =============================================================================
# Capability profiles
# =============================================================================

def test_profile_from_api_level_with_overrides(tmp_path) -> None:
    path = tmp_path / "android13.yaml"
    path.write_text(
        "name: android13\n"
        "api_level: 33\n"
        "capabilities:\n"
        "  precise_location_choice: false\n",
        encoding="utf-8",
    )

    profile = ProfileParser().parse_file(str(path))

    assert profile.name == "android13"
    assert profile.api_level == 33
    assert profile.capabilities.granular_media is True
    assert profile.capabilities.precise_location_choice is False


def test_profile_from_markdown_frontmatter(tmp_path) -> None:
    path = tmp_path / "tablet.md"
    path.write_text(
        "---\ndescription: Old tablet\ncapabilities:\n  scoped_storage: true\n---\n\nNotes about the device.\n",
        encoding="utf-8",
    )

    profile = ProfileParser().parse_file(str(path))

    assert profile.name == "tablet"
    assert profile.description == "Old tablet"
    assert profile.capabilities == Capabilities(scoped_storage=True)


def test_empty_profile_has_no_capabilities(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_capability_profile(str(path)) == Capabilities()


@pytest.mark.parametrize(
    "content, message",
    [
        ("api_level: [33\n", "Invalid YAML"),
        ("- 33\n", "must be a mapping"),
        ("api_level: thirty\n", "api_level"),
        ("capabilities: [granular_media]\n", "capabilities"),
        ("capabilities:\n  warp_drive: true\n", "warp_drive"),
    ],
)
def test_invalid_profiles_raise(tmp_path, content, message) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_capability_profile(str(path))


def test_profile_with_invalid_utf8_raises(tmp_path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_bytes(b"api_level: 33\nname: \xff\xfe\n")

    with pytest.raises(ConfigError, match="Cannot read"):
        load_capability_profile(str(path))


def test_missing_profile_raises(tmp_path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_capability_profile(str(tmp_path / "nope.yaml"))


# =============================================================================
# Factory
# =============================================================================

def test_build_coordinator_uses_file_history_when_configured(tmp_path) -> None:
    fake = FakeOS()
    tracker = InMemoryAnalyticsTracker()
    config = PermflowConfig(history_path=str(tmp_path / "h.json"), retry_max_attempts=7, observe_interval_s=0.5)

    coordinator = build_coordinator(fake.probe, fake.launcher, config, trackers=[tracker])

    assert isinstance(coordinator.history, JsonFileHistoryStore)
    assert coordinator.retry_max_attempts == 7
    assert coordinator.observe_interval_s == 0.5
    assert coordinator.analytics.trackers == [tracker]


def test_build_coordinator_defaults_to_memory_history() -> None:
    fake = FakeOS()

    assert isinstance(build_coordinator(fake.probe, fake.launcher).history, InMemoryHistoryStore)


def test_build_groups_loads_the_profile(tmp_path, builtin_groups) -> None:
    path = tmp_path / "profile.yaml"
    path.write_text("api_level: 31\n", encoding="utf-8")
    fake = FakeOS()
    config = PermflowConfig(capability_profile=str(path))

    groups = build_groups(build_coordinator(fake.probe, fake.launcher, config), config)

    assert groups.capabilities == Capabilities.for_api_level(31)
    assert load_capabilities(PermflowConfig()) == Capabilities()


def test_configure_logging(tmp_path) -> None:
    configure_logging(PermflowConfig(log_level="WARN", log_directory=str(tmp_path / "logs")))

    logger = get_logger()
    assert logger.level == LogLevel.WARN
    assert logger.log_directory == tmp_path / "logs"
