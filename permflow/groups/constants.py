"""
Permission Constants - Concrete permission keys and platform capabilities.

Keys are the platform's opaque permission strings. Which of them exist on a
given device is decided by Capabilities, supplied by the host's platform layer;
nothing here queries the OS version.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, FrozenSet, Mapping

# Camera / microphone
CAMERA = "android.permission.CAMERA"
RECORD_AUDIO = "android.permission.RECORD_AUDIO"

# Location
ACCESS_FINE_LOCATION = "android.permission.ACCESS_FINE_LOCATION"
ACCESS_COARSE_LOCATION = "android.permission.ACCESS_COARSE_LOCATION"
ACCESS_BACKGROUND_LOCATION = "android.permission.ACCESS_BACKGROUND_LOCATION"

# Storage and media
READ_EXTERNAL_STORAGE = "android.permission.READ_EXTERNAL_STORAGE"
WRITE_EXTERNAL_STORAGE = "android.permission.WRITE_EXTERNAL_STORAGE"
READ_MEDIA_IMAGES = "android.permission.READ_MEDIA_IMAGES"
READ_MEDIA_VIDEO = "android.permission.READ_MEDIA_VIDEO"
READ_MEDIA_AUDIO = "android.permission.READ_MEDIA_AUDIO"

# Bluetooth
BLUETOOTH_SCAN = "android.permission.BLUETOOTH_SCAN"
BLUETOOTH_CONNECT = "android.permission.BLUETOOTH_CONNECT"
BLUETOOTH_ADVERTISE = "android.permission.BLUETOOTH_ADVERTISE"

# Contacts, calendar, phone, SMS
READ_CONTACTS = "android.permission.READ_CONTACTS"
WRITE_CONTACTS = "android.permission.WRITE_CONTACTS"
READ_CALENDAR = "android.permission.READ_CALENDAR"
WRITE_CALENDAR = "android.permission.WRITE_CALENDAR"
CALL_PHONE = "android.permission.CALL_PHONE"
SEND_SMS = "android.permission.SEND_SMS"
RECEIVE_SMS = "android.permission.RECEIVE_SMS"
READ_SMS = "android.permission.READ_SMS"

# Sensors, activity, notifications, nearby devices
BODY_SENSORS = "android.permission.BODY_SENSORS"
BODY_SENSORS_BACKGROUND = "android.permission.BODY_SENSORS_BACKGROUND"
ACTIVITY_RECOGNITION = "android.permission.ACTIVITY_RECOGNITION"
POST_NOTIFICATIONS = "android.permission.POST_NOTIFICATIONS"
NEARBY_WIFI_DEVICES = "android.permission.NEARBY_WIFI_DEVICES"

DANGEROUS_PERMISSIONS: FrozenSet[str] = frozenset({
    READ_CALENDAR,
    WRITE_CALENDAR,
    CAMERA,
    READ_CONTACTS,
    WRITE_CONTACTS,
    "android.permission.GET_ACCOUNTS",
    ACCESS_FINE_LOCATION,
    ACCESS_COARSE_LOCATION,
    RECORD_AUDIO,
    "android.permission.READ_PHONE_STATE",
    CALL_PHONE,
    "android.permission.READ_CALL_LOG",
    "android.permission.WRITE_CALL_LOG",
    "android.permission.ADD_VOICEMAIL",
    "android.permission.USE_SIP",
    "android.permission.PROCESS_OUTGOING_CALLS",
    BODY_SENSORS,
    SEND_SMS,
    RECEIVE_SMS,
    READ_SMS,
    "android.permission.RECEIVE_WAP_PUSH",
    "android.permission.RECEIVE_MMS",
    READ_EXTERNAL_STORAGE,
    WRITE_EXTERNAL_STORAGE,
})


def is_dangerous_permission(key: str) -> bool:
    """True if `key` belongs to the classic runtime ("dangerous") set."""
    return key in DANGEROUS_PERMISSIONS


# API levels at which capabilities appear
API_LEVEL_Q = 29          # Android 10
API_LEVEL_S = 31          # Android 12
API_LEVEL_TIRAMISU = 33   # Android 13


@dataclass(frozen=True)
class Capabilities:
    """Platform capability flags that gate which keys a group requests.

    Attributes:
        precise_location_choice: User can pick precise or approximate location
        background_location: Background location is a separate permission
        granular_media: Images/video/audio have their own read permissions
        runtime_bluetooth: Bluetooth scan/connect/advertise need runtime grants
        scoped_storage: Camera capture no longer needs a storage permission
        runtime_notifications: Posting notifications needs a runtime grant
        background_body_sensors: Background body sensor access is separate
        runtime_activity_recognition: Activity recognition needs a runtime grant
        nearby_wifi_devices: Nearby Wi-Fi devices needs a runtime grant
    """
    precise_location_choice: bool = False
    background_location: bool = False
    granular_media: bool = False
    runtime_bluetooth: bool = False
    scoped_storage: bool = False
    runtime_notifications: bool = False
    background_body_sensors: bool = False
    runtime_activity_recognition: bool = False
    nearby_wifi_devices: bool = False

    @classmethod
    def for_api_level(cls, level: int) -> "Capabilities":
        """Capabilities of a platform at the given API level.

        Args:
            level: Platform API level (e.g. 33 for Android 13)

        Returns:
            Capabilities with every flag the level provides set
        """
        q = level >= API_LEVEL_Q
        s = level >= API_LEVEL_S
        tiramisu = level >= API_LEVEL_TIRAMISU
        return cls(
            precise_location_choice=s,
            background_location=q,
            granular_media=tiramisu,
            runtime_bluetooth=s,
            scoped_storage=q,
            runtime_notifications=tiramisu,
            background_body_sensors=tiramisu,
            runtime_activity_recognition=q,
            nearby_wifi_devices=tiramisu,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Capabilities":
        """Build from a flag mapping; missing flags are False.

        Raises:
            ValueError: If `data` names an unknown flag or a non-bool value
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown capability flags: {', '.join(unknown)}")

        values: Dict[str, bool] = {}
        for name, value in data.items():
            if not isinstance(value, bool):
                raise ValueError(f"Capability '{name}' must be true or false, got {value!r}")
            values[name] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)
