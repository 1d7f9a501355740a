"""
Permission Results - Closed result types for runtime permission requests.

A single permission request ends in exactly one of three outcomes:
- Granted: the permission is held
- Denied: refused, but the OS will still show its dialog again
- PermanentlyDenied: refused with "don't ask again"; only settings can grant it

Status checks that must not open a dialog use PermissionStatus instead.
Requesting several keys at once yields an AggregateOutcome.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Union


@dataclass(frozen=True)
class Granted:
    """The permission has been granted."""


@dataclass(frozen=True)
class Denied:
    """The permission was denied but can be requested again.

    Attributes:
        should_show_rationale: True if an explanation should be shown
            before asking again
    """
    should_show_rationale: bool = False


@dataclass(frozen=True)
class PermanentlyDenied:
    """The permission was denied and the OS will not ask again."""


Outcome = Union[Granted, Denied, PermanentlyDenied]

GRANTED = Granted()
PERMANENTLY_DENIED = PermanentlyDenied()


def outcome_name(outcome: Outcome) -> str:
    """Short snake_case name of an outcome, used in logs and analytics."""
    if isinstance(outcome, Granted):
        return "granted"
    if isinstance(outcome, Denied):
        return "denied"
    if isinstance(outcome, PermanentlyDenied):
        return "permanently_denied"
    raise TypeError(f"Not a permission outcome: {outcome!r}")


class PermissionStatus(Enum):
    """Current status of a permission, read without requesting it."""
    GRANTED = "granted"
    NOT_GRANTED = "not_granted"
    SHOULD_SHOW_RATIONALE = "should_show_rationale"
    PERMANENTLY_DENIED = "permanently_denied"


@dataclass(frozen=True)
class AggregateOutcome:
    """Result of requesting several permissions in one OS call.

    The three key sets partition exactly the requested keys, and `per_key`
    holds one outcome per requested key. Build instances with
    `from_outcomes` so the partition always agrees with `per_key`.

    Attributes:
        granted: Keys that were granted
        denied: Keys that were denied but may be requested again
        permanently_denied: Keys that were permanently denied
        per_key: Outcome of each requested key, in request order
    """
    granted: FrozenSet[str] = frozenset()
    denied: FrozenSet[str] = frozenset()
    permanently_denied: FrozenSet[str] = frozenset()
    per_key: Mapping[str, Outcome] = field(default_factory=dict)

    @classmethod
    def from_outcomes(cls, outcomes: Mapping[str, Outcome]) -> "AggregateOutcome":
        """Fold per-key outcomes into an aggregate.

        Args:
            outcomes: Mapping of permission key to its classified outcome

        Returns:
            New AggregateOutcome
        """
        granted: List[str] = []
        denied: List[str] = []
        permanently_denied: List[str] = []

        for key, outcome in outcomes.items():
            if isinstance(outcome, Granted):
                granted.append(key)
            elif isinstance(outcome, Denied):
                denied.append(key)
            elif isinstance(outcome, PermanentlyDenied):
                permanently_denied.append(key)
            else:
                raise TypeError(f"Not a permission outcome for {key}: {outcome!r}")

        return cls(
            granted=frozenset(granted),
            denied=frozenset(denied),
            permanently_denied=frozenset(permanently_denied),
            per_key=dict(outcomes),
        )

    @classmethod
    def all_granted_for(cls, keys: Iterable[str]) -> "AggregateOutcome":
        """Aggregate in which every key is granted."""
        return cls.from_outcomes({key: GRANTED for key in keys})

    @property
    def all_granted(self) -> bool:
        """True if nothing was denied."""
        return not self.denied and not self.permanently_denied

    @property
    def any_permanently_denied(self) -> bool:
        """True if at least one key was permanently denied."""
        return bool(self.permanently_denied)

    @property
    def keys(self) -> List[str]:
        """Requested keys in request order."""
        return list(self.per_key.keys())

    def granted_in_order(self) -> List[str]:
        """Granted keys in request order."""
        return [key for key in self.per_key if key in self.granted]

    def not_granted_in_order(self) -> List[str]:
        """Denied and permanently denied keys in request order."""
        return [key for key in self.per_key if key not in self.granted]

    def any_rationale(self) -> bool:
        """True if any denied key asks for a rationale."""
        return any(
            isinstance(outcome, Denied) and outcome.should_show_rationale
            for outcome in self.per_key.values()
        )

    def to_dict(self) -> Dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "granted": sorted(self.granted),
            "denied": sorted(self.denied),
            "permanently_denied": sorted(self.permanently_denied),
            "all_granted": self.all_granted,
        }


def permission_name(key: str) -> str:
    """Display name of a permission key (text after the last dot)."""
    return key.rsplit(".", 1)[-1]
