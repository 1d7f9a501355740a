"""
Permission Chain - Sequential single-permission requests.

Keys are requested one dialog at a time (OS dialogs cannot overlap) and the
chain stops at the first key that is not granted.

Example:
    result = await (
        coordinator.chain()
        .then(CAMERA, on_granted=enable_preview)
        .then(RECORD_AUDIO)
        .execute()
    )
    if isinstance(result, StoppedAtPermanentlyDenied):
        offer_settings(result.key)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple, Union

from .result import Denied, Granted, PermanentlyDenied

if TYPE_CHECKING:
    from .coordinator import RequestCoordinator

StepCallback = Callable[[], None]


@dataclass(frozen=True)
class ChainAllGranted:
    """Every key in the chain was granted."""


@dataclass(frozen=True)
class StoppedAtDenied:
    """The chain stopped at a denied key.

    Attributes:
        key: The key that was denied
        at_step: Index of that key in the chain (0-based)
        granted: Keys granted before stopping, in order
    """
    key: str
    at_step: int
    granted: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StoppedAtPermanentlyDenied:
    """The chain stopped at a permanently denied key.

    Attributes:
        key: The key that was permanently denied
        at_step: Index of that key in the chain (0-based)
        granted: Keys granted before stopping, in order
    """
    key: str
    at_step: int
    granted: Tuple[str, ...] = ()


ChainResult = Union[ChainAllGranted, StoppedAtDenied, StoppedAtPermanentlyDenied]

CHAIN_ALL_GRANTED = ChainAllGranted()


@dataclass
class _Step:
    key: str
    on_granted: Optional[StepCallback] = None
    on_denied: Optional[StepCallback] = None


class PermissionChain:
    """Builder for a stop-on-first-denial sequence of requests."""

    def __init__(self, coordinator: "RequestCoordinator"):
        self._coordinator = coordinator
        self._steps: List[_Step] = []

    @property
    def keys(self) -> List[str]:
        return [step.key for step in self._steps]

    def then(
        self,
        key: str,
        on_granted: Optional[StepCallback] = None,
        on_denied: Optional[StepCallback] = None,
    ) -> "PermissionChain":
        """Append a key to the chain.

        Args:
            key: Permission key to request at this step
            on_granted: Called when this key is granted
            on_denied: Called when this key is denied or permanently denied

        Returns:
            self, for chaining
        """
        self._steps.append(_Step(key, on_granted, on_denied))
        return self

    def then_all(self, *keys: str) -> "PermissionChain":
        """Append several keys, each as its own step."""
        for key in keys:
            self.then(key)
        return self

    async def execute(self) -> ChainResult:
        """Run the chain.

        Returns:
            ChainAllGranted, StoppedAtDenied or StoppedAtPermanentlyDenied
        """
        granted: List[str] = []

        for index, step in enumerate(self._steps):
            outcome = await self._coordinator.request_one(step.key)

            if isinstance(outcome, Granted):
                granted.append(step.key)
                if step.on_granted:
                    step.on_granted()
                continue

            if step.on_denied:
                step.on_denied()

            if isinstance(outcome, PermanentlyDenied):
                return StoppedAtPermanentlyDenied(step.key, index, tuple(granted))
            if isinstance(outcome, Denied):
                return StoppedAtDenied(step.key, index, tuple(granted))
            raise TypeError(f"Not a permission outcome: {outcome!r}")

        return CHAIN_ALL_GRANTED
