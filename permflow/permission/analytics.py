"""
Permission Analytics - Observer callbacks for permission events.

Trackers are passed explicitly to the coordinator that owns them; there is no
process-wide tracker list. A tracker that raises is logged and skipped, it
never changes the outcome of a request.

Example:
    memory = InMemoryAnalyticsTracker()
    analytics = PermissionAnalytics([memory])
    coordinator = RequestCoordinator(probe, launcher, analytics=analytics)
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..logger import get_logger
from .result import AggregateOutcome, Outcome


class EventType(Enum):
    """Kinds of permission events."""
    REQUESTED = "requested"
    GRANTED = "granted"
    DENIED = "denied"
    PERMANENTLY_DENIED = "permanently_denied"
    RATIONALE_SHOWN = "rationale_shown"
    SETTINGS_OPENED = "settings_opened"
    HISTORY_CLEARED = "history_cleared"


@dataclass(frozen=True)
class PermissionEvent:
    """A single analytics event.

    Attributes:
        permission: Permission key the event is about ("*" for all keys)
        event_type: What happened
        result: Classified outcome, for result events
        timestamp_ms: Wall-clock time of the event in milliseconds
        metadata: Free-form extra fields
    """
    permission: str
    event_type: EventType
    result: Optional[Outcome] = None
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    metadata: Dict[str, Any] = field(default_factory=dict)


class AnalyticsTracker:
    """Base class for analytics integrations.

    Override either method; the defaults do nothing.
    """

    def track_event(self, event: PermissionEvent) -> None:
        """Handle one permission event."""

    def track_multi_permission_event(
        self,
        permissions: Sequence[str],
        result: AggregateOutcome,
        metadata: Dict[str, Any],
    ) -> None:
        """Handle the result of a multi-permission request."""


class InMemoryAnalyticsTracker(AnalyticsTracker):
    """Tracker that records events in memory, for tests."""

    def __init__(self):
        self.events: List[PermissionEvent] = []
        self.multi_permission_events: List[Tuple[List[str], AggregateOutcome, Dict[str, Any]]] = []

    def track_event(self, event: PermissionEvent) -> None:
        self.events.append(event)

    def track_multi_permission_event(self, permissions, result, metadata) -> None:
        self.multi_permission_events.append((list(permissions), result, dict(metadata)))

    def events_for(self, permission: str) -> List[PermissionEvent]:
        return [e for e in self.events if e.permission == permission]

    def events_of_type(self, event_type: EventType) -> List[PermissionEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def clear(self) -> None:
        self.events.clear()
        self.multi_permission_events.clear()


class LoggingAnalyticsTracker(AnalyticsTracker):
    """Tracker that writes every event to the structured log."""

    COMPONENT = "PermissionAnalytics"

    def __init__(self):
        self._logger = get_logger()

    def track_event(self, event: PermissionEvent) -> None:
        self._logger.info(self.COMPONENT, f"event_{event.event_type.value}", {
            "permission": event.permission,
            "result": event.result,
            "metadata": event.metadata,
        })

    def track_multi_permission_event(self, permissions, result, metadata) -> None:
        self._logger.info(self.COMPONENT, "event_multi_permission", {
            "permissions": list(permissions),
            "result": result.to_dict(),
            "metadata": metadata,
        })


class PermissionAnalytics:
    """Fans events out to an explicit list of trackers."""

    COMPONENT = "PermissionAnalytics"

    def __init__(self, trackers: Iterable[AnalyticsTracker] = ()):
        self._trackers: List[AnalyticsTracker] = list(trackers)
        self._logger = get_logger()

    @property
    def trackers(self) -> List[AnalyticsTracker]:
        return list(self._trackers)

    def register_tracker(self, tracker: AnalyticsTracker) -> None:
        self._trackers.append(tracker)

    def unregister_tracker(self, tracker: AnalyticsTracker) -> None:
        if tracker in self._trackers:
            self._trackers.remove(tracker)

    def clear_trackers(self) -> None:
        self._trackers.clear()

    def track(
        self,
        permission: str,
        event_type: EventType,
        result: Optional[Outcome] = None,
        **metadata: Any,
    ) -> None:
        """Send one event to every tracker."""
        if not self._trackers:
            return
        event = PermissionEvent(
            permission=permission,
            event_type=event_type,
            result=result,
            metadata=metadata,
        )
        for tracker in list(self._trackers):
            try:
                tracker.track_event(event)
            except Exception as e:
                self._logger.error(self.COMPONENT, "tracker_failed", {
                    "tracker": type(tracker).__name__,
                    "error": e,
                })

    def track_multiple(
        self,
        permissions: Sequence[str],
        result: AggregateOutcome,
        **metadata: Any,
    ) -> None:
        """Send a multi-permission result to every tracker."""
        if not self._trackers:
            return
        for tracker in list(self._trackers):
            try:
                tracker.track_multi_permission_event(list(permissions), result, metadata)
            except Exception as e:
                self._logger.error(self.COMPONENT, "tracker_failed", {
                    "tracker": type(tracker).__name__,
                    "error": e,
                })
