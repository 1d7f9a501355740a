"""
Permission Groups - Semantic permission requests on top of the coordinator.

Example:
    groups = PermissionGroups(coordinator, Capabilities.for_api_level(33))

    location = await groups.request_location()
    if isinstance(location, ApproximateGranted):
        suggest_precise_location()
"""

from typing import Any, Tuple

from ..logger import get_logger
from ..permission.coordinator import RequestCoordinator
from ..permission.result import AggregateOutcome, Outcome
from . import builtin
from .builtin import register_builtin_groups
from .constants import Capabilities
from .registry import Groups
from .results import BluetoothOutcome, BodySensorsOutcome, LocationOutcome, MediaOutcome


class PermissionGroups:
    """Requests permission groups through a RequestCoordinator.

    One key is requested on the single channel; several keys share one
    dialog on the multiple channel. A group that needs no keys on this
    platform returns its synthetic result without touching the OS.
    """

    COMPONENT = "PermissionGroups"

    def __init__(self, coordinator: RequestCoordinator, capabilities: Capabilities):
        """Initialize the group requester.

        Args:
            coordinator: Coordinator that performs the requests
            capabilities: What the current platform supports
        """
        self.coordinator = coordinator
        self.capabilities = capabilities
        self._logger = get_logger()
        register_builtin_groups()

    def keys_for(self, name: str, **options: Any) -> Tuple[str, ...]:
        """Keys group `name` would request on this platform."""
        return Groups.require(name).keys_for(self.capabilities, **options)

    async def resolve(self, name: str, **options: Any) -> Any:
        """Request a registered group and reduce its outcomes.

        Args:
            name: Registered group name
            **options: Options for the group's key builder

        Returns:
            The group's semantic result

        Raises:
            ValueError: If `name` is not a registered group
        """
        spec = Groups.require(name)
        keys = spec.keys_for(self.capabilities, **options)
        self._logger.debug(self.COMPONENT, "group_requested", {
            "group": name,
            "keys": list(keys),
            "options": options,
        })

        if not keys:
            result = spec.reduce({})
            self._logger.info(self.COMPONENT, "group_not_required", {
                "group": name,
                "result": type(result).__name__,
            })
            return result

        if len(keys) == 1:
            outcome = await self.coordinator.request_one(keys[0])
            per_key = {keys[0]: outcome}
        else:
            aggregate = await self.coordinator.request_many(keys)
            per_key = dict(aggregate.per_key)

        result = spec.reduce(per_key)
        self._logger.info(self.COMPONENT, "group_result", {
            "group": name,
            "result": type(result).__name__,
        })
        return result

    # =========================================================================
    # Location
    # =========================================================================

    async def request_location(self) -> LocationOutcome:
        return await self.resolve(builtin.LOCATION)

    async def request_precise_location(self) -> LocationOutcome:
        return await self.resolve(builtin.PRECISE_LOCATION)

    async def request_approximate_location(self) -> LocationOutcome:
        return await self.resolve(builtin.APPROXIMATE_LOCATION)

    async def request_background_location(self) -> LocationOutcome:
        """Request background location.

        Request this after foreground location is granted. Platforms without
        a separate background permission get a foreground location request.
        """
        return await self.resolve(builtin.BACKGROUND_LOCATION)

    # =========================================================================
    # Media and storage
    # =========================================================================

    async def request_media(
        self,
        images: bool = True,
        video: bool = True,
        audio: bool = True,
    ) -> MediaOutcome:
        """Request read access to media.

        Args:
            images: Request image access
            video: Request video access
            audio: Request audio access

        Returns:
            MediaOutcome; types not asked for report Granted
        """
        return await self.resolve(builtin.MEDIA, images=images, video=video, audio=audio)

    async def request_camera_and_storage(self) -> AggregateOutcome:
        return await self.resolve(builtin.CAMERA_AND_STORAGE)

    # =========================================================================
    # Bluetooth
    # =========================================================================

    async def request_bluetooth(
        self,
        scan: bool = True,
        connect: bool = True,
        advertise: bool = False,
    ) -> BluetoothOutcome:
        """Request Bluetooth permissions.

        Platforms without runtime Bluetooth permissions return
        BluetoothAllGranted without any OS call.
        """
        return await self.resolve(builtin.BLUETOOTH, scan=scan, connect=connect, advertise=advertise)

    async def request_bluetooth_scan(self) -> Outcome:
        return await self.resolve(builtin.BLUETOOTH_SCAN)

    async def request_bluetooth_connect(self) -> Outcome:
        return await self.resolve(builtin.BLUETOOTH_CONNECT)

    async def request_bluetooth_advertise(self) -> Outcome:
        return await self.resolve(builtin.BLUETOOTH_ADVERTISE)

    # =========================================================================
    # Device
    # =========================================================================

    async def request_notifications(self) -> Outcome:
        return await self.resolve(builtin.NOTIFICATIONS)

    async def request_activity_recognition(self) -> Outcome:
        return await self.resolve(builtin.ACTIVITY_RECOGNITION)

    async def request_nearby_wifi_devices(self) -> Outcome:
        return await self.resolve(builtin.NEARBY_WIFI_DEVICES)

    async def request_body_sensors(self, background: bool = False) -> BodySensorsOutcome:
        """Request body sensors, with background access where available."""
        return await self.resolve(builtin.BODY_SENSORS, background=background)

    async def request_camera(self) -> Outcome:
        return await self.resolve(builtin.CAMERA)

    async def request_microphone(self) -> Outcome:
        return await self.resolve(builtin.MICROPHONE)

    # =========================================================================
    # Personal data
    # =========================================================================

    async def request_contacts(self) -> Outcome:
        return await self.resolve(builtin.CONTACTS)

    async def request_phone(self) -> Outcome:
        return await self.resolve(builtin.PHONE)

    async def request_sms(self) -> AggregateOutcome:
        return await self.resolve(builtin.SMS)

    async def request_calendar(self) -> AggregateOutcome:
        return await self.resolve(builtin.CALENDAR)
