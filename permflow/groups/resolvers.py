"""
Group Resolvers - Pure key builders and reducers for permission groups.

A group is two pure functions:

    build_keys(capabilities, **options) -> Tuple[str, ...]
    reduce(per_key) -> semantic outcome

`build_keys` decides which concrete keys to request on this platform, and
`reduce` folds the classified per-key outcomes back into the group's result.
An empty key tuple means nothing needs a runtime grant here, and `reduce({})`
is the result (a synthetic grant). Neither function touches the OS.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Tuple

from ..permission.result import GRANTED, AggregateOutcome, Denied, Granted, Outcome, PermanentlyDenied
from . import constants as keys
from .constants import Capabilities
from .results import (
    ApproximateGranted,
    BackgroundGranted,
    BluetoothAllGranted,
    BluetoothDenied,
    BluetoothOutcome,
    BluetoothPartiallyDenied,
    BluetoothPermanentlyDenied,
    BodySensorsBackgroundGranted,
    BodySensorsDenied,
    BodySensorsForegroundGranted,
    BodySensorsOutcome,
    BodySensorsPermanentlyDenied,
    LocationDenied,
    LocationOutcome,
    LocationPermanentlyDenied,
    MediaOutcome,
    PreciseGranted,
)

KeyBuilder = Callable[..., Tuple[str, ...]]
Reducer = Callable[[Mapping[str, Outcome]], Any]


@dataclass(frozen=True)
class GroupSpec:
    """Definition of a permission group.

    Attributes:
        name: Unique identifier for the group (e.g., "location")
        description: Human-readable description of the group
        build_keys: Keys to request for given capabilities and options
        reduce: Fold per-key outcomes into the group's result
        category: Group category for listing (e.g., "location", "device")
    """
    name: str
    description: str
    build_keys: KeyBuilder
    reduce: Reducer
    category: str = "general"

    def keys_for(self, capabilities: Capabilities, **options: Any) -> Tuple[str, ...]:
        return tuple(self.build_keys(capabilities, **options))


def _any_permanently_denied(per_key: Mapping[str, Outcome]) -> bool:
    return any(isinstance(o, PermanentlyDenied) for o in per_key.values())


def _any_rationale(per_key: Mapping[str, Outcome]) -> bool:
    return any(isinstance(o, Denied) and o.should_show_rationale for o in per_key.values())


def _granted(per_key: Mapping[str, Outcome], key: str) -> bool:
    return isinstance(per_key.get(key), Granted)


# =============================================================================
# Single keys
# =============================================================================

def fixed_keys(*fixed: str) -> KeyBuilder:
    """Key builder that always requests `fixed`."""
    def build(capabilities: Capabilities) -> Tuple[str, ...]:
        return fixed
    return build


def gated_key(key: str, capability: str) -> KeyBuilder:
    """Key builder that requests `key` only when `capability` is set."""
    def build(capabilities: Capabilities) -> Tuple[str, ...]:
        return (key,) if getattr(capabilities, capability) else ()
    return build


def single_outcome(key: str) -> Reducer:
    """Reducer returning the outcome of `key`, or Granted if it was not requested."""
    def reduce(per_key: Mapping[str, Outcome]) -> Outcome:
        return per_key.get(key, GRANTED)
    return reduce


def reduce_aggregate(per_key: Mapping[str, Outcome]) -> AggregateOutcome:
    return AggregateOutcome.from_outcomes(per_key)


# =============================================================================
# Location
# =============================================================================

def location_keys(capabilities: Capabilities) -> Tuple[str, ...]:
    """Fine + coarse where the user picks precision, otherwise fine only."""
    if capabilities.precise_location_choice:
        return (keys.ACCESS_FINE_LOCATION, keys.ACCESS_COARSE_LOCATION)
    return (keys.ACCESS_FINE_LOCATION,)


def background_location_keys(capabilities: Capabilities) -> Tuple[str, ...]:
    """Background key where it exists, otherwise a foreground location request."""
    if capabilities.background_location:
        return (keys.ACCESS_BACKGROUND_LOCATION,)
    return location_keys(capabilities)


def reduce_location(per_key: Mapping[str, Outcome]) -> LocationOutcome:
    """Fold location outcomes into the best granted tier.

    Fine beats coarse; with nothing granted a permanent denial of any key
    wins over a plain denial.
    """
    background = per_key.get(keys.ACCESS_BACKGROUND_LOCATION)
    if background is not None:
        if isinstance(background, Granted):
            return BackgroundGranted()
        if isinstance(background, PermanentlyDenied):
            return LocationPermanentlyDenied()
        return LocationDenied(_any_rationale(per_key))

    if _granted(per_key, keys.ACCESS_FINE_LOCATION):
        return PreciseGranted()
    if _granted(per_key, keys.ACCESS_COARSE_LOCATION):
        return ApproximateGranted()
    if _any_permanently_denied(per_key):
        return LocationPermanentlyDenied()
    return LocationDenied(_any_rationale(per_key))


# =============================================================================
# Media
# =============================================================================

def media_keys(
    capabilities: Capabilities,
    images: bool = True,
    video: bool = True,
    audio: bool = True,
) -> Tuple[str, ...]:
    """Granular media keys the caller asked for, or the legacy storage key."""
    if not capabilities.granular_media:
        return (keys.READ_EXTERNAL_STORAGE,)

    wanted = []
    if images:
        wanted.append(keys.READ_MEDIA_IMAGES)
    if video:
        wanted.append(keys.READ_MEDIA_VIDEO)
    if audio:
        wanted.append(keys.READ_MEDIA_AUDIO)
    return tuple(wanted)


def reduce_media(per_key: Mapping[str, Outcome]) -> MediaOutcome:
    """Per-type media outcome; the legacy storage key covers all three types."""
    legacy = per_key.get(keys.READ_EXTERNAL_STORAGE)
    if legacy is not None:
        return MediaOutcome(images=legacy, video=legacy, audio=legacy)

    return MediaOutcome(
        images=per_key.get(keys.READ_MEDIA_IMAGES, GRANTED),
        video=per_key.get(keys.READ_MEDIA_VIDEO, GRANTED),
        audio=per_key.get(keys.READ_MEDIA_AUDIO, GRANTED),
    )


# =============================================================================
# Bluetooth
# =============================================================================

def bluetooth_keys(
    capabilities: Capabilities,
    scan: bool = True,
    connect: bool = True,
    advertise: bool = False,
) -> Tuple[str, ...]:
    """Selected Bluetooth keys; none before runtime Bluetooth permissions."""
    if not capabilities.runtime_bluetooth:
        return ()

    wanted = []
    if scan:
        wanted.append(keys.BLUETOOTH_SCAN)
    if connect:
        wanted.append(keys.BLUETOOTH_CONNECT)
    if advertise:
        wanted.append(keys.BLUETOOTH_ADVERTISE)
    return tuple(wanted)


def reduce_bluetooth(per_key: Mapping[str, Outcome]) -> BluetoothOutcome:
    """Fold Bluetooth outcomes.

    Order matters: all granted, then any permanent denial, then a partial
    grant, then a plain denial.
    """
    granted = tuple(k for k, o in per_key.items() if isinstance(o, Granted))
    not_granted = tuple(k for k, o in per_key.items() if not isinstance(o, Granted))

    if not not_granted:
        return BluetoothAllGranted()
    if _any_permanently_denied(per_key):
        return BluetoothPermanentlyDenied()
    if granted:
        return BluetoothPartiallyDenied(granted=granted, denied=not_granted)
    return BluetoothDenied(_any_rationale(per_key))


# =============================================================================
# Camera + storage
# =============================================================================

def camera_and_storage_keys(capabilities: Capabilities) -> Tuple[str, ...]:
    """Camera alone under scoped storage, otherwise camera + write storage."""
    if capabilities.scoped_storage:
        return (keys.CAMERA,)
    return (keys.CAMERA, keys.WRITE_EXTERNAL_STORAGE)


# =============================================================================
# Body sensors
# =============================================================================

def body_sensors_keys(capabilities: Capabilities, background: bool = False) -> Tuple[str, ...]:
    """Foreground body sensors, plus background access when asked and available."""
    if background and capabilities.background_body_sensors:
        return (keys.BODY_SENSORS, keys.BODY_SENSORS_BACKGROUND)
    return (keys.BODY_SENSORS,)


def reduce_body_sensors(per_key: Mapping[str, Outcome]) -> BodySensorsOutcome:
    if _granted(per_key, keys.BODY_SENSORS_BACKGROUND):
        return BodySensorsBackgroundGranted()
    if _granted(per_key, keys.BODY_SENSORS):
        return BodySensorsForegroundGranted()
    if _any_permanently_denied(per_key):
        return BodySensorsPermanentlyDenied()
    return BodySensorsDenied(_any_rationale(per_key))
