"""
Request Coordinator - Lifecycle of single and multi-permission requests.

State machine per launch channel:

    IDLE -> CHECKING -> SHORT_CIRCUIT_GRANTED             -> IDLE
                     -> SHORT_CIRCUIT_PERMANENTLY_DENIED  -> IDLE
                     -> AWAITING_LAUNCH -> CLASSIFIED     -> IDLE

A dialog is only launched when the key is neither granted nor known to be
permanently denied; the OS would silently dismiss a dialog for a permanently
denied key. The awaited launch is the only suspension point, and the outcome
is classified strictly after the launch resolves.

Callers must not request the same channel twice concurrently; the launcher
rejects it with LaunchInProgressError.
"""

import asyncio
from enum import Enum
from typing import AsyncIterator, Dict, Iterable, Optional, Sequence

from ..logger import get_logger
from .analytics import EventType, PermissionAnalytics
from .chain import ChainResult, PermissionChain
from .classifier import OutcomeClassifier
from .history import InMemoryHistoryStore, RequestHistoryStore
from .launcher import MULTIPLE, SINGLE, PermissionLauncher
from .probe import PermissionProbe, validate_key
from .result import (
    GRANTED,
    PERMANENTLY_DENIED,
    AggregateOutcome,
    Denied,
    Granted,
    Outcome,
    PermanentlyDenied,
    PermissionStatus,
    outcome_name,
)


class RequestState(Enum):
    """Where the coordinator is in the request lifecycle."""
    IDLE = "idle"
    CHECKING = "checking"
    SHORT_CIRCUIT_GRANTED = "short_circuit_granted"
    SHORT_CIRCUIT_PERMANENTLY_DENIED = "short_circuit_permanently_denied"
    AWAITING_LAUNCH = "awaiting_launch"
    CLASSIFIED = "classified"


_EVENT_FOR_OUTCOME = {
    Granted: EventType.GRANTED,
    Denied: EventType.DENIED,
    PermanentlyDenied: EventType.PERMANENTLY_DENIED,
}


class RequestCoordinator:
    """Main API for requesting runtime permissions.

    Example:
        coordinator = RequestCoordinator(probe, launcher, JsonFileHistoryStore(path))

        outcome = await coordinator.request_one("android.permission.CAMERA")
        if isinstance(outcome, Granted):
            open_camera()
        elif isinstance(outcome, Denied) and outcome.should_show_rationale:
            show_rationale()
        elif isinstance(outcome, PermanentlyDenied):
            offer_settings()
    """

    COMPONENT = "RequestCoordinator"

    def __init__(
        self,
        probe: PermissionProbe,
        launcher: PermissionLauncher,
        history: Optional[RequestHistoryStore] = None,
        analytics: Optional[PermissionAnalytics] = None,
        retry_max_attempts: int = 3,
        retry_delay_ms: int = 1000,
        observe_interval_s: float = 1.0,
    ):
        """Initialize the coordinator.

        Args:
            probe: Live OS permission state
            launcher: Registered launch channels
            history: Request history (in-memory if not given)
            analytics: Observers for permission events
            retry_max_attempts: Default extra attempts for request_with_retry
            retry_delay_ms: Default pause between retry attempts
            observe_interval_s: Default polling interval for observe
        """
        self.probe = probe
        self.launcher = launcher
        self.history = history if history is not None else InMemoryHistoryStore()
        self.analytics = analytics if analytics is not None else PermissionAnalytics()
        self.classifier = OutcomeClassifier(probe, self.history)
        self.retry_max_attempts = retry_max_attempts
        self.retry_delay_ms = retry_delay_ms
        self.observe_interval_s = observe_interval_s
        self._states: Dict[str, RequestState] = {SINGLE: RequestState.IDLE, MULTIPLE: RequestState.IDLE}
        self._logger = get_logger()

    @property
    def state(self) -> RequestState:
        """Lifecycle state of the request in progress.

        A single and a multiple request may run at the same time; the single
        request is reported while it is active. Use `state_of` for one channel.
        """
        single = self._states[SINGLE]
        return single if single != RequestState.IDLE else self._states[MULTIPLE]

    def state_of(self, channel: str) -> RequestState:
        """Lifecycle state of the request on `channel` (SINGLE or MULTIPLE)."""
        return self._states[channel]

    # =========================================================================
    # Requests
    # =========================================================================

    async def request_one(self, key: str) -> Outcome:
        """Request a single permission.

        Args:
            key: Permission key (e.g. "android.permission.CAMERA")

        Returns:
            Granted, Denied or PermanentlyDenied

        Raises:
            InvalidKeyError: If the OS cannot answer for `key`
            LauncherNotRegisteredError: If a dialog is needed but the
                launcher is not registered
            LaunchInProgressError: If another single launch is in flight
            LaunchCancelledError: If the launcher was unregistered while
                waiting for the dialog
        """
        validate_key(key)
        self._logger.debug(self.COMPONENT, "permission_requested", {"key": key})
        self.analytics.track(key, EventType.REQUESTED)

        try:
            self._states[SINGLE] = RequestState.CHECKING

            if self.probe.is_granted(key):
                self._states[SINGLE] = RequestState.SHORT_CIRCUIT_GRANTED
                return self._emit(key, GRANTED, launched=False)

            if self.classifier.is_permanently_denied(key):
                self._states[SINGLE] = RequestState.SHORT_CIRCUIT_PERMANENTLY_DENIED
                return self._emit(key, PERMANENTLY_DENIED, launched=False)

            self._states[SINGLE] = RequestState.AWAITING_LAUNCH
            live_granted = await self.launcher.launch_single(key)

            outcome = self.classifier.classify(key, live_granted)
            self._states[SINGLE] = RequestState.CLASSIFIED
            return self._emit(key, outcome, launched=True)
        finally:
            self._states[SINGLE] = RequestState.IDLE

    async def request_many(self, keys: Iterable[str]) -> AggregateOutcome:
        """Request several permissions in one OS dialog.

        The launch is skipped when every key is already granted. Otherwise
        all keys are launched together and each is classified on its own.
        A key missing from the launch result counts as not granted.

        Args:
            keys: Permission keys; duplicates are requested once

        Returns:
            AggregateOutcome partitioning the requested keys
        """
        requested = [validate_key(k) for k in dict.fromkeys(keys)]
        self._logger.debug(self.COMPONENT, "permissions_requested", {"keys": requested})

        try:
            self._states[MULTIPLE] = RequestState.CHECKING

            if self.probe.are_all_granted(requested):
                self._states[MULTIPLE] = RequestState.SHORT_CIRCUIT_GRANTED
                result = AggregateOutcome.all_granted_for(requested)
                return self._emit_many(requested, result, launched=False)

            self._states[MULTIPLE] = RequestState.AWAITING_LAUNCH
            raw = await self.launcher.launch_multiple(requested)

            result = self.classifier.classify_many(
                {key: raw.get(key, False) for key in requested}
            )
            self._states[MULTIPLE] = RequestState.CLASSIFIED
            return self._emit_many(requested, result, launched=True)
        finally:
            self._states[MULTIPLE] = RequestState.IDLE

    async def request_with_retry(
        self,
        key: str,
        max_retries: Optional[int] = None,
        delay_ms: Optional[int] = None,
    ) -> Outcome:
        """Request a permission, asking again after plain denials.

        Only `Denied` is retried. `PermanentlyDenied` stops immediately since
        the OS would not show the dialog again.

        Args:
            key: Permission key
            max_retries: Extra attempts after the first one (coordinator default if None)
            delay_ms: Pause between attempts in milliseconds (coordinator default if None)

        Returns:
            The last outcome
        """
        if max_retries is None:
            max_retries = self.retry_max_attempts
        if delay_ms is None:
            delay_ms = self.retry_delay_ms
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

        attempt = 0
        while True:
            outcome = await self.request_one(key)

            if isinstance(outcome, Granted):
                self._logger.info(self.COMPONENT, "retry_granted", {"key": key, "attempts": attempt})
                return outcome
            if isinstance(outcome, PermanentlyDenied):
                self._logger.warn(self.COMPONENT, "retry_stopped_permanently_denied", {"key": key})
                return outcome
            if attempt >= max_retries:
                self._logger.warn(self.COMPONENT, "retry_exhausted", {
                    "key": key,
                    "max_retries": max_retries,
                })
                return outcome

            attempt += 1
            self._logger.debug(self.COMPONENT, "retry_scheduled", {
                "key": key,
                "attempt": attempt,
                "max_retries": max_retries,
            })
            await asyncio.sleep(delay_ms / 1000.0)

    def chain(self) -> PermissionChain:
        """Start a sequential chain of single-permission requests."""
        return PermissionChain(self)

    async def request_in_sequence(self, *keys: str) -> ChainResult:
        """Request keys one dialog at a time, stopping at the first denial."""
        return await self.chain().then_all(*keys).execute()

    # =========================================================================
    # Status (never launches, never mutates history)
    # =========================================================================

    def check_status(self, key: str) -> PermissionStatus:
        """Current status of a permission without requesting it."""
        validate_key(key)
        status = self.classifier.status(key)
        self._logger.trace(self.COMPONENT, "status_checked", {"key": key, "status": status.value})
        return status

    def check_statuses(self, keys: Iterable[str]) -> Dict[str, PermissionStatus]:
        """Current status of several permissions."""
        return {key: self.check_status(key) for key in keys}

    def is_granted(self, key: str) -> bool:
        return self.probe.is_granted(validate_key(key))

    def are_all_granted(self, keys: Iterable[str]) -> bool:
        return self.probe.are_all_granted(validate_key(k) for k in keys)

    async def observe(
        self,
        key: str,
        interval_s: Optional[float] = None,
    ) -> AsyncIterator[PermissionStatus]:
        """Yield the status of `key` now and again whenever it changes.

        Polls the probe every `interval_s` seconds, e.g. to notice a grant
        made in the settings screen. Stops once the launcher is unregistered.
        """
        if interval_s is None:
            interval_s = self.observe_interval_s
        last: Optional[PermissionStatus] = None
        while True:
            status = self.check_status(key)
            if status != last:
                last = status
                yield status
            if not self.launcher.is_registered:
                return
            await asyncio.sleep(interval_s)

    # =========================================================================
    # History
    # =========================================================================

    def clear_history(self, key: str) -> None:
        """Forget that `key` was requested, e.g. after a settings grant."""
        self.history.clear(key)
        self._logger.info(self.COMPONENT, "history_cleared", {"key": key})
        self.analytics.track(key, EventType.HISTORY_CLEARED)

    def clear_all_history(self) -> None:
        """Forget all request history."""
        self.history.clear_all()
        self._logger.info(self.COMPONENT, "history_cleared_all", {})
        self.analytics.track("*", EventType.HISTORY_CLEARED)

    # =========================================================================
    # Internal
    # =========================================================================

    def _emit(self, key: str, outcome: Outcome, launched: bool) -> Outcome:
        self._logger.info(self.COMPONENT, "permission_result", {
            "key": key,
            "outcome": outcome_name(outcome),
            "launched": launched,
        })
        self.analytics.track(key, _EVENT_FOR_OUTCOME[type(outcome)], result=outcome)
        return outcome

    def _emit_many(self, keys: Sequence[str], result: AggregateOutcome, launched: bool) -> AggregateOutcome:
        data = result.to_dict()
        data["launched"] = launched
        self._logger.info(self.COMPONENT, "permissions_result", data)
        self.analytics.track_multiple(list(keys), result, launched=launched)
        return result
