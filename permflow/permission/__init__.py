"""
Permission System - Three-outcome runtime permission requests.

Provides:
- RequestCoordinator: request one or many keys, check status, retry, observe
- OutcomeClassifier: history-based detection of permanent denials
- PermissionProbe / CallbackProbe: live OS permission state
- RequestHistoryStore: in-memory and JSON file history
- PermissionLauncher: single-flight adapter over the OS dialog
- PermissionChain: sequential stop-on-first-denial requests
- PermissionAnalytics: explicit observer list for permission events

Outcomes are values (Granted / Denied / PermanentlyDenied); only caller
misuse and OS query failures raise.
"""

from .analytics import (
    AnalyticsTracker,
    EventType,
    InMemoryAnalyticsTracker,
    LoggingAnalyticsTracker,
    PermissionAnalytics,
    PermissionEvent,
)
from .chain import (
    CHAIN_ALL_GRANTED,
    ChainAllGranted,
    ChainResult,
    PermissionChain,
    StoppedAtDenied,
    StoppedAtPermanentlyDenied,
)
from .classifier import OutcomeClassifier
from .coordinator import RequestCoordinator, RequestState
from .errors import (
    ConfigError,
    InvalidKeyError,
    LaunchCancelledError,
    LaunchInProgressError,
    LauncherNotRegisteredError,
    PermissionFlowError,
)
from .history import InMemoryHistoryStore, JsonFileHistoryStore, RequestHistoryStore
from .launcher import PermissionLauncher
from .probe import CallbackProbe, PermissionProbe
from .result import (
    GRANTED,
    PERMANENTLY_DENIED,
    AggregateOutcome,
    Denied,
    Granted,
    Outcome,
    PermanentlyDenied,
    PermissionStatus,
    permission_name,
)

__all__ = [
    "AggregateOutcome",
    "AnalyticsTracker",
    "CHAIN_ALL_GRANTED",
    "CallbackProbe",
    "ChainAllGranted",
    "ChainResult",
    "ConfigError",
    "Denied",
    "EventType",
    "GRANTED",
    "Granted",
    "InMemoryAnalyticsTracker",
    "InMemoryHistoryStore",
    "InvalidKeyError",
    "JsonFileHistoryStore",
    "LaunchCancelledError",
    "LaunchInProgressError",
    "LauncherNotRegisteredError",
    "LoggingAnalyticsTracker",
    "Outcome",
    "OutcomeClassifier",
    "PERMANENTLY_DENIED",
    "PermanentlyDenied",
    "PermissionAnalytics",
    "PermissionChain",
    "PermissionEvent",
    "PermissionFlowError",
    "PermissionLauncher",
    "PermissionProbe",
    "PermissionStatus",
    "RequestCoordinator",
    "RequestHistoryStore",
    "RequestState",
    "StoppedAtDenied",
    "StoppedAtPermanentlyDenied",
    "permission_name",
]
