"""
Built-in Group Definitions - Registers all standard permission groups.

This module defines and registers:
- Location groups (location, precise, approximate, background)
- Media and storage groups (media, camera_and_storage)
- Bluetooth groups (bluetooth, bluetooth_scan/connect/advertise)
- Device groups (camera, microphone, body_sensors, activity_recognition, ...)
- Personal data groups (contacts, phone, sms, calendar)

Call `register_builtin_groups()` to populate the global Groups registry.
"""

from . import constants as keys
from .registry import Groups
from .resolvers import (
    background_location_keys,
    bluetooth_keys,
    body_sensors_keys,
    camera_and_storage_keys,
    fixed_keys,
    gated_key,
    location_keys,
    media_keys,
    reduce_aggregate,
    reduce_bluetooth,
    reduce_body_sensors,
    reduce_location,
    reduce_media,
    single_outcome,
)

LOCATION = "location"
PRECISE_LOCATION = "precise_location"
APPROXIMATE_LOCATION = "approximate_location"
BACKGROUND_LOCATION = "background_location"
MEDIA = "media"
CAMERA_AND_STORAGE = "camera_and_storage"
BLUETOOTH = "bluetooth"
BLUETOOTH_SCAN = "bluetooth_scan"
BLUETOOTH_CONNECT = "bluetooth_connect"
BLUETOOTH_ADVERTISE = "bluetooth_advertise"
NOTIFICATIONS = "notifications"
ACTIVITY_RECOGNITION = "activity_recognition"
NEARBY_WIFI_DEVICES = "nearby_wifi_devices"
BODY_SENSORS = "body_sensors"
CAMERA = "camera"
MICROPHONE = "microphone"
CONTACTS = "contacts"
PHONE = "phone"
SMS = "sms"
CALENDAR = "calendar"


def register_builtin_groups() -> None:
    """Register all built-in groups in the global registry.

    This function is idempotent - calling it multiple times is safe.
    """
    # =========================================================================
    # Location
    # =========================================================================

    Groups.register(
        LOCATION,
        description="Foreground location; the user may choose precise or approximate",
        build_keys=location_keys,
        reduce=reduce_location,
        category="location",
    )

    Groups.register(
        PRECISE_LOCATION,
        description="Fine (GPS) location only",
        build_keys=fixed_keys(keys.ACCESS_FINE_LOCATION),
        reduce=reduce_location,
        category="location",
    )

    Groups.register(
        APPROXIMATE_LOCATION,
        description="Coarse location only",
        build_keys=fixed_keys(keys.ACCESS_COARSE_LOCATION),
        reduce=reduce_location,
        category="location",
    )

    Groups.register(
        BACKGROUND_LOCATION,
        description="Background location; request after foreground location is granted",
        build_keys=background_location_keys,
        reduce=reduce_location,
        category="location",
    )

    # =========================================================================
    # Media and storage
    # =========================================================================

    Groups.register(
        MEDIA,
        description="Read images, video and audio (legacy storage on older platforms)",
        build_keys=media_keys,
        reduce=reduce_media,
        category="media",
    )

    Groups.register(
        CAMERA_AND_STORAGE,
        description="Camera, plus write storage where storage is not scoped",
        build_keys=camera_and_storage_keys,
        reduce=reduce_aggregate,
        category="media",
    )

    # =========================================================================
    # Bluetooth
    # =========================================================================

    Groups.register(
        BLUETOOTH,
        description="Bluetooth scan, connect and advertise",
        build_keys=bluetooth_keys,
        reduce=reduce_bluetooth,
        category="bluetooth",
    )

    for name, key in (
        (BLUETOOTH_SCAN, keys.BLUETOOTH_SCAN),
        (BLUETOOTH_CONNECT, keys.BLUETOOTH_CONNECT),
        (BLUETOOTH_ADVERTISE, keys.BLUETOOTH_ADVERTISE),
    ):
        Groups.register(
            name,
            description=f"{key.rsplit('.', 1)[-1]} only",
            build_keys=gated_key(key, "runtime_bluetooth"),
            reduce=single_outcome(key),
            category="bluetooth",
        )

    # =========================================================================
    # Device
    # =========================================================================

    Groups.register(
        NOTIFICATIONS,
        description="Post notifications",
        build_keys=gated_key(keys.POST_NOTIFICATIONS, "runtime_notifications"),
        reduce=single_outcome(keys.POST_NOTIFICATIONS),
        category="device",
    )

    Groups.register(
        ACTIVITY_RECOGNITION,
        description="Physical activity recognition",
        build_keys=gated_key(keys.ACTIVITY_RECOGNITION, "runtime_activity_recognition"),
        reduce=single_outcome(keys.ACTIVITY_RECOGNITION),
        category="device",
    )

    Groups.register(
        NEARBY_WIFI_DEVICES,
        description="Discover nearby Wi-Fi devices",
        build_keys=gated_key(keys.NEARBY_WIFI_DEVICES, "nearby_wifi_devices"),
        reduce=single_outcome(keys.NEARBY_WIFI_DEVICES),
        category="device",
    )

    Groups.register(
        BODY_SENSORS,
        description="Body sensors, optionally with background access",
        build_keys=body_sensors_keys,
        reduce=reduce_body_sensors,
        category="device",
    )

    Groups.register(
        CAMERA,
        description="Camera",
        build_keys=fixed_keys(keys.CAMERA),
        reduce=single_outcome(keys.CAMERA),
        category="device",
    )

    Groups.register(
        MICROPHONE,
        description="Record audio",
        build_keys=fixed_keys(keys.RECORD_AUDIO),
        reduce=single_outcome(keys.RECORD_AUDIO),
        category="device",
    )

    # =========================================================================
    # Personal data
    # =========================================================================

    Groups.register(
        CONTACTS,
        description="Read contacts",
        build_keys=fixed_keys(keys.READ_CONTACTS),
        reduce=single_outcome(keys.READ_CONTACTS),
        category="personal",
    )

    Groups.register(
        PHONE,
        description="Place phone calls",
        build_keys=fixed_keys(keys.CALL_PHONE),
        reduce=single_outcome(keys.CALL_PHONE),
        category="personal",
    )

    Groups.register(
        SMS,
        description="Send, receive and read SMS",
        build_keys=fixed_keys(keys.SEND_SMS, keys.RECEIVE_SMS, keys.READ_SMS),
        reduce=reduce_aggregate,
        category="personal",
    )

    Groups.register(
        CALENDAR,
        description="Read and write calendar",
        build_keys=fixed_keys(keys.READ_CALENDAR, keys.WRITE_CALENDAR),
        reduce=reduce_aggregate,
        category="personal",
    )
