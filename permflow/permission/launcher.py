"""
Permission Launcher - Adapter around the host's OS permission dialog.

The host supplies two async callables, one per launch channel:

    single(key) -> bool                      # one permission
    multiple(keys) -> Mapping[str, bool]     # several permissions, one dialog

Each channel is single-shot: at most one launch may be awaiting its result at
a time, and a channel must be registered before use. Unregistering cancels
any in-flight launch so that no result is delivered into a torn-down screen.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence

from ..logger import get_logger
from .errors import LaunchCancelledError, LaunchInProgressError, LauncherNotRegisteredError

SingleLaunch = Callable[[str], Awaitable[bool]]
MultipleLaunch = Callable[[Sequence[str]], Awaitable[Mapping[str, bool]]]

SINGLE = "single"
MULTIPLE = "multiple"


@dataclass
class _InFlight:
    """A launch awaiting the OS result."""
    target: Any
    task: "asyncio.Future[Any]"
    cancelled_by_unregister: bool = field(default=False)


class PermissionLauncher:
    """Single-flight wrapper over the host's launch callables.

    Example:
        launcher = PermissionLauncher()
        launcher.register(single=show_dialog, multiple=show_dialogs)
        granted = await launcher.launch_single("android.permission.CAMERA")
        launcher.unregister()
    """

    COMPONENT = "PermissionLauncher"

    def __init__(
        self,
        single: Optional[SingleLaunch] = None,
        multiple: Optional[MultipleLaunch] = None,
    ):
        """Initialize the launcher, registering immediately if callables are given."""
        self._single: Optional[SingleLaunch] = None
        self._multiple: Optional[MultipleLaunch] = None
        self._in_flight: Dict[str, _InFlight] = {}
        self._logger = get_logger()

        if single is not None or multiple is not None:
            self.register(single=single, multiple=multiple)

    def register(
        self,
        single: Optional[SingleLaunch] = None,
        multiple: Optional[MultipleLaunch] = None,
    ) -> None:
        """Arm the launch channels.

        Args:
            single: Callable that shows the dialog for one key
            multiple: Callable that shows the dialog for several keys
        """
        self._single = single
        self._multiple = multiple
        self._logger.debug(self.COMPONENT, "registered", {
            "single": single is not None,
            "multiple": multiple is not None,
        })

    @property
    def is_registered(self) -> bool:
        """True if at least one channel is armed."""
        return self._single is not None or self._multiple is not None

    def is_busy(self, channel: str = SINGLE) -> bool:
        """True if `channel` has a launch awaiting its result."""
        return channel in self._in_flight

    def unregister(self) -> None:
        """Disarm both channels and cancel launches still in flight."""
        for channel, pending in list(self._in_flight.items()):
            pending.cancelled_by_unregister = True
            pending.task.cancel()
            self._logger.info(self.COMPONENT, "launch_cancelled", {
                "channel": channel,
                "target": pending.target,
            })

        self._single = None
        self._multiple = None
        self._logger.debug(self.COMPONENT, "unregistered", {})

    async def launch_single(self, key: str) -> bool:
        """Show the dialog for one key and wait for the user's answer.

        Raises:
            LauncherNotRegisteredError: If the single channel is not armed
            LaunchInProgressError: If a single launch is already in flight
            LaunchCancelledError: If unregistered before the answer arrived
        """
        if self._single is None:
            raise LauncherNotRegisteredError(SINGLE)
        result = await self._launch(SINGLE, self._single, key)
        return bool(result)

    async def launch_multiple(self, keys: Sequence[str]) -> Dict[str, bool]:
        """Show one dialog for several keys and wait for the answers.

        Raises:
            LauncherNotRegisteredError: If the multiple channel is not armed
            LaunchInProgressError: If a multiple launch is already in flight
            LaunchCancelledError: If unregistered before the answers arrived
        """
        if self._multiple is None:
            raise LauncherNotRegisteredError(MULTIPLE)
        result = await self._launch(MULTIPLE, self._multiple, list(keys))
        return {str(k): bool(v) for k, v in dict(result).items()}

    async def _launch(self, channel: str, launch: Callable[[Any], Awaitable[Any]], target: Any) -> Any:
        if channel in self._in_flight:
            raise LaunchInProgressError(channel, self._in_flight[channel].target)

        task = asyncio.ensure_future(launch(target))
        pending = _InFlight(target=target, task=task)
        self._in_flight[channel] = pending

        try:
            with self._logger.span(self.COMPONENT, f"launch_{channel}", {"target": target}):
                result = await task
        except asyncio.CancelledError:
            if pending.cancelled_by_unregister:
                raise LaunchCancelledError(channel) from None
            raise
        finally:
            if self._in_flight.get(channel) is pending:
                del self._in_flight[channel]

        # cancel() is a no-op once the host has answered; the flag still applies.
        if pending.cancelled_by_unregister:
            raise LaunchCancelledError(channel)
        return result

    async def __aenter__(self) -> "PermissionLauncher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.unregister()
        return False
