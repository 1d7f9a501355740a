"""
Factory - Wire a coordinator and group requester from configuration.

Example:
    config = load_config()
    configure_logging(config)
    coordinator = build_coordinator(probe, launcher, config)
    groups = build_groups(coordinator, config)
"""

from typing import Iterable, Optional

from ..groups.constants import Capabilities
from ..groups.requests import PermissionGroups
from ..logger import configure_logger, get_logger
from ..permission.analytics import AnalyticsTracker, PermissionAnalytics
from ..permission.coordinator import RequestCoordinator
from ..permission.history import InMemoryHistoryStore, JsonFileHistoryStore, RequestHistoryStore
from ..permission.launcher import PermissionLauncher
from ..permission.probe import PermissionProbe
from .loader import PermflowConfig
from .profile import load_capability_profile


def configure_logging(config: PermflowConfig) -> None:
    """Apply the configured log level and directory to the global logger."""
    configure_logger(level=config.log_level, log_directory=config.log_directory)


def build_history(config: PermflowConfig) -> RequestHistoryStore:
    """JSON file history when `history_path` is set, in-memory otherwise."""
    if config.history_path:
        return JsonFileHistoryStore(config.history_path)
    return InMemoryHistoryStore()


def build_coordinator(
    probe: PermissionProbe,
    launcher: PermissionLauncher,
    config: Optional[PermflowConfig] = None,
    trackers: Iterable[AnalyticsTracker] = (),
) -> RequestCoordinator:
    """Create a RequestCoordinator from configuration.

    Args:
        probe: Live OS permission state
        launcher: Registered launch channels
        config: Loaded configuration (defaults if None)
        trackers: Analytics trackers to notify

    Returns:
        Configured RequestCoordinator
    """
    config = config if config is not None else PermflowConfig()
    history = build_history(config)

    get_logger().debug("Factory", "coordinator_built", {
        "history": type(history).__name__,
        "retry_max_attempts": config.retry_max_attempts,
        "retry_delay_ms": config.retry_delay_ms,
    })

    return RequestCoordinator(
        probe,
        launcher,
        history=history,
        analytics=PermissionAnalytics(trackers),
        retry_max_attempts=config.retry_max_attempts,
        retry_delay_ms=config.retry_delay_ms,
        observe_interval_s=config.observe_interval_s,
    )


def load_capabilities(config: PermflowConfig) -> Capabilities:
    """Capabilities from the configured profile, or none if no profile is set.

    Raises:
        ConfigError: If the configured profile is missing or invalid
    """
    if config.capability_profile:
        return load_capability_profile(config.capability_profile)
    return Capabilities()


def build_groups(
    coordinator: RequestCoordinator,
    config: Optional[PermflowConfig] = None,
    capabilities: Optional[Capabilities] = None,
) -> PermissionGroups:
    """Create a PermissionGroups; explicit `capabilities` win over the profile."""
    if capabilities is None:
        capabilities = load_capabilities(config if config is not None else PermflowConfig())
    return PermissionGroups(coordinator, capabilities)
