"""
Permission Groups - Capability-gated semantic permission requests.

Provides:
- Capabilities: platform flags that decide which keys a group requests
- GroupSpec / Groups: pure key builders and reducers in a global registry
- PermissionGroups: location, media, Bluetooth, body sensors and more
"""

from . import constants
from .builtin import register_builtin_groups
from .constants import Capabilities, is_dangerous_permission
from .registry import Groups
from .requests import PermissionGroups
from .resolvers import GroupSpec
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
    location_granted,
)

__all__ = [
    "ApproximateGranted",
    "BackgroundGranted",
    "BluetoothAllGranted",
    "BluetoothDenied",
    "BluetoothOutcome",
    "BluetoothPartiallyDenied",
    "BluetoothPermanentlyDenied",
    "BodySensorsBackgroundGranted",
    "BodySensorsDenied",
    "BodySensorsForegroundGranted",
    "BodySensorsOutcome",
    "BodySensorsPermanentlyDenied",
    "Capabilities",
    "GroupSpec",
    "Groups",
    "LocationDenied",
    "LocationOutcome",
    "LocationPermanentlyDenied",
    "MediaOutcome",
    "PermissionGroups",
    "PreciseGranted",
    "constants",
    "is_dangerous_permission",
    "location_granted",
    "register_builtin_groups",
]
