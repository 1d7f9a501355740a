"""
Outcome Classifier - Turns a raw grant/deny signal into an Outcome.

Decision table for (key, live_granted):

    live_granted                               -> Granted (history cleared)
    was_requested and not rationale            -> PermanentlyDenied
    otherwise                                  -> Denied(rationale) (history marked)

"First ever ask" and "don't ask again" both report rationale == False. The
history flag is read before it is marked, so the first denial is always
`Denied` and only a later rationale-less denial becomes `PermanentlyDenied`.
Clearing history on every grant means a permission that is re-enabled and
later revoked in settings is measured fresh.
"""

from typing import Dict, Iterable, Mapping

from ..logger import get_logger
from .history import RequestHistoryStore
from .probe import PermissionProbe
from .result import (
    GRANTED,
    PERMANENTLY_DENIED,
    AggregateOutcome,
    Denied,
    Outcome,
    PermissionStatus,
)


class OutcomeClassifier:
    """Classifies permission results using live OS state plus history.

    The classifier is the only component that writes request history.

    Example:
        classifier = OutcomeClassifier(probe, InMemoryHistoryStore())
        outcome = classifier.classify("android.permission.CAMERA", False)
    """

    COMPONENT = "OutcomeClassifier"

    def __init__(self, probe: PermissionProbe, history: RequestHistoryStore):
        self.probe = probe
        self.history = history
        self._logger = get_logger()

    def classify(self, key: str, live_granted: bool) -> Outcome:
        """Classify the result of a launched request.

        Args:
            key: Permission key that was requested
            live_granted: Grant state reported by the OS dialog

        Returns:
            The classified Outcome
        """
        if live_granted:
            self._clear(key)
            return GRANTED

        rationale = self.probe.should_show_rationale(key)
        if self._was_requested(key) and not rationale:
            return PERMANENTLY_DENIED

        self._mark(key)
        return Denied(should_show_rationale=rationale)

    def classify_many(self, results: Mapping[str, bool]) -> AggregateOutcome:
        """Classify every key of a multi-permission launch result."""
        outcomes: Dict[str, Outcome] = {}
        for key, live_granted in results.items():
            outcomes[key] = self.classify(key, bool(live_granted))
        return AggregateOutcome.from_outcomes(outcomes)

    def is_permanently_denied(self, key: str) -> bool:
        """Pre-check: is `key` known to be permanently denied right now?

        Reads live state and history only; nothing is mutated.
        """
        return (
            self._was_requested(key)
            and not self.probe.is_granted(key)
            and not self.probe.should_show_rationale(key)
        )

    def status(self, key: str) -> PermissionStatus:
        """Current status of `key` without requesting it or touching history."""
        if self.probe.is_granted(key):
            return PermissionStatus.GRANTED
        if self.is_permanently_denied(key):
            return PermissionStatus.PERMANENTLY_DENIED
        if self.probe.should_show_rationale(key):
            return PermissionStatus.SHOULD_SHOW_RATIONALE
        return PermissionStatus.NOT_GRANTED

    def statuses(self, keys: Iterable[str]) -> Dict[str, PermissionStatus]:
        return {key: self.status(key) for key in keys}

    def _was_requested(self, key: str) -> bool:
        try:
            return self.history.was_requested(key)
        except Exception as e:
            self._logger.warn(self.COMPONENT, "history_read_failed", {"key": key, "error": e})
            return False

    def _mark(self, key: str) -> None:
        try:
            self.history.mark_requested(key)
        except Exception as e:
            self._logger.warn(self.COMPONENT, "history_write_failed", {"key": key, "error": e})

    def _clear(self, key: str) -> None:
        try:
            self.history.clear(key)
        except Exception as e:
            self._logger.warn(self.COMPONENT, "history_clear_failed", {"key": key, "error": e})
