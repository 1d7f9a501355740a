"""
permflow - Runtime permission request coordination.

Requests runtime permissions through a host-supplied OS dialog and reports
one of three outcomes (Granted, Denied, PermanentlyDenied), detecting
"don't ask again" from request history. Groups of keys (location, media,
Bluetooth, ...) are requested by capability and reduced to semantic results.
"""

from .groups import Capabilities, PermissionGroups
from .permission import (
    AggregateOutcome,
    CallbackProbe,
    Denied,
    Granted,
    InMemoryHistoryStore,
    JsonFileHistoryStore,
    Outcome,
    PermanentlyDenied,
    PermissionFlowError,
    PermissionLauncher,
    PermissionStatus,
    RequestCoordinator,
)

__version__ = "0.1.0"
__all__ = [
    "AggregateOutcome",
    "CallbackProbe",
    "Capabilities",
    "Denied",
    "Granted",
    "InMemoryHistoryStore",
    "JsonFileHistoryStore",
    "Outcome",
    "PermanentlyDenied",
    "PermissionFlowError",
    "PermissionGroups",
    "PermissionLauncher",
    "PermissionStatus",
    "RequestCoordinator",
]
