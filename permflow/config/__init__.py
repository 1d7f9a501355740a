"""
Configuration System - Load configs from multiple sources with precedence.

Provides:
- ConfigLoader: Load and merge configuration from files and environment
- ProfileParser: Parse YAML capability profiles
- build_coordinator / build_groups: Wire the library from a config

Configuration precedence (low → high):
1. ~/.permflow/config.json (global defaults)
2. .permflow/config.json (project config)
3. Environment variables (PERMFLOW_*)
"""

from ..permission.errors import ConfigError
from .factory import build_coordinator, build_groups, build_history, configure_logging, load_capabilities
from .loader import ConfigLoader, PermflowConfig, load_config
from .profile import CapabilityProfile, ProfileParser, load_capability_profile

__all__ = [
    "CapabilityProfile",
    "ConfigError",
    "ConfigLoader",
    "PermflowConfig",
    "ProfileParser",
    "build_coordinator",
    "build_groups",
    "build_history",
    "configure_logging",
    "load_capabilities",
    "load_capability_profile",
    "load_config",
]
