"""
Group Results - Semantic outcomes of permission group requests.

Each group folds its per-key outcomes into one of these closed unions, e.g.
location reports which precision tier was granted rather than two raw keys.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from ..permission.result import GRANTED, Denied, Granted, Outcome, PermanentlyDenied


# =============================================================================
# Location
# =============================================================================

@dataclass(frozen=True)
class PreciseGranted:
    """Fine (GPS) location was granted."""


@dataclass(frozen=True)
class ApproximateGranted:
    """Only coarse location was granted."""


@dataclass(frozen=True)
class BackgroundGranted:
    """Background location was granted."""


@dataclass(frozen=True)
class LocationDenied:
    """Location was denied but can be requested again."""
    should_show_rationale: bool = False


@dataclass(frozen=True)
class LocationPermanentlyDenied:
    """Location was permanently denied."""


LocationOutcome = Union[
    PreciseGranted,
    ApproximateGranted,
    BackgroundGranted,
    LocationDenied,
    LocationPermanentlyDenied,
]


def location_granted(outcome: LocationOutcome) -> bool:
    """True for any of the granted location tiers."""
    return isinstance(outcome, (PreciseGranted, ApproximateGranted, BackgroundGranted))


# =============================================================================
# Media
# =============================================================================

@dataclass(frozen=True)
class MediaOutcome:
    """Per-type outcome of a media request.

    Types that were not asked for are reported as Granted, so `all_granted`
    only reflects what the caller wanted.

    Attributes:
        images: Outcome for reading images
        video: Outcome for reading video
        audio: Outcome for reading audio
    """
    images: Outcome = GRANTED
    video: Outcome = GRANTED
    audio: Outcome = GRANTED

    @property
    def all_granted(self) -> bool:
        return all(isinstance(o, Granted) for o in (self.images, self.video, self.audio))

    @property
    def any_permanently_denied(self) -> bool:
        return any(isinstance(o, PermanentlyDenied) for o in (self.images, self.video, self.audio))

    @property
    def any_rationale(self) -> bool:
        return any(
            isinstance(o, Denied) and o.should_show_rationale
            for o in (self.images, self.video, self.audio)
        )


# =============================================================================
# Bluetooth
# =============================================================================

@dataclass(frozen=True)
class BluetoothAllGranted:
    """Every requested Bluetooth permission was granted (or none was needed)."""


@dataclass(frozen=True)
class BluetoothPartiallyDenied:
    """Some Bluetooth permissions were granted and some were not.

    Attributes:
        granted: Granted keys, in request order
        denied: Denied and permanently denied keys, in request order
    """
    granted: Tuple[str, ...] = ()
    denied: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BluetoothDenied:
    """Every requested Bluetooth permission was denied."""
    should_show_rationale: bool = False


@dataclass(frozen=True)
class BluetoothPermanentlyDenied:
    """At least one Bluetooth permission was permanently denied."""


BluetoothOutcome = Union[
    BluetoothAllGranted,
    BluetoothPartiallyDenied,
    BluetoothDenied,
    BluetoothPermanentlyDenied,
]


# =============================================================================
# Body sensors
# =============================================================================

@dataclass(frozen=True)
class BodySensorsForegroundGranted:
    """Foreground body sensor access was granted."""


@dataclass(frozen=True)
class BodySensorsBackgroundGranted:
    """Background body sensor access was granted."""


@dataclass(frozen=True)
class BodySensorsDenied:
    """Body sensors were denied but can be requested again."""
    should_show_rationale: bool = False


@dataclass(frozen=True)
class BodySensorsPermanentlyDenied:
    """Body sensors were permanently denied."""


BodySensorsOutcome = Union[
    BodySensorsForegroundGranted,
    BodySensorsBackgroundGranted,
    BodySensorsDenied,
    BodySensorsPermanentlyDenied,
]
