"""
Permission Probe - Live, read-only view of OS permission state.

The probe answers two questions about a permission key: is it granted right
now, and would the OS advise showing a rationale before asking again. It
never caches and never mutates anything.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Optional

from .errors import InvalidKeyError


class PermissionProbe(ABC):
    """Read-only access to live OS permission state."""

    @abstractmethod
    def is_granted(self, key: str) -> bool:
        """Check if a permission is granted right now.

        Raises:
            InvalidKeyError: If the OS cannot answer for this key
        """

    @abstractmethod
    def should_show_rationale(self, key: str) -> bool:
        """Check if the OS advises an explanation before re-asking.

        Returns False when no UI context is attached.

        Raises:
            InvalidKeyError: If the OS cannot answer for this key
        """

    def are_all_granted(self, keys: Iterable[str]) -> bool:
        """Check if every key in `keys` is granted."""
        return all(self.is_granted(key) for key in keys)


def validate_key(key: Any) -> str:
    """Return `key` if it is a usable permission key.

    Raises:
        InvalidKeyError: If key is not a non-empty string
    """
    if not isinstance(key, str) or not key.strip():
        raise InvalidKeyError(key, "permission keys are non-empty strings")
    return key


class CallbackProbe(PermissionProbe):
    """Probe backed by two host callables.

    Example:
        probe = CallbackProbe(
            os_is_granted=lambda key: context.check_self_permission(key),
            os_should_show_rationale=lambda activity, key: activity.rationale(key),
            context=activity,
        )
    """

    def __init__(
        self,
        os_is_granted: Callable[[str], bool],
        os_should_show_rationale: Callable[[Any, str], bool],
        context: Optional[Any] = None,
    ):
        """Initialize the probe.

        Args:
            os_is_granted: Returns the live grant state of a key
            os_should_show_rationale: Returns the rationale hint for
                (context, key)
            context: UI context handle needed for rationale queries
        """
        self._os_is_granted = os_is_granted
        self._os_should_show_rationale = os_should_show_rationale
        self._context = context

    @property
    def context(self) -> Optional[Any]:
        return self._context

    def attach(self, context: Any) -> None:
        """Attach a UI context handle."""
        self._context = context

    def detach(self) -> None:
        """Drop the UI context handle, e.g. when the screen is torn down."""
        self._context = None

    def is_granted(self, key: str) -> bool:
        validate_key(key)
        try:
            return bool(self._os_is_granted(key))
        except InvalidKeyError:
            raise
        except (LookupError, ValueError, TypeError) as e:
            raise InvalidKeyError(key, str(e)) from e

    def should_show_rationale(self, key: str) -> bool:
        validate_key(key)
        if self._context is None:
            return False
        try:
            return bool(self._os_should_show_rationale(self._context, key))
        except InvalidKeyError:
            raise
        except (LookupError, ValueError, TypeError) as e:
            raise InvalidKeyError(key, str(e)) from e
