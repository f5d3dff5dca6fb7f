# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from aiohue.v1.sensors import (
    TYPE_CLIP_LIGHTLEVEL,
    TYPE_CLIP_PRESENCE,
    TYPE_CLIP_SWITCH,
    TYPE_CLIP_TEMPERATURE,
    TYPE_DAYLIGHT,
    TYPE_ZGP_SWITCH,
    TYPE_ZLL_LIGHTLEVEL,
    TYPE_ZLL_PRESENCE,
    TYPE_ZLL_ROTARY,
    TYPE_ZLL_SWITCH,
    TYPE_ZLL_TEMPERATURE,
)

from typing import TYPE_CHECKING, TypeVar

from hue2mqtt.devices.base import HueDevice
from hue2mqtt.devices.light import LightDevice
from hue2mqtt.devices.sensors import (
    AmbientLightSensorDevice,
    DaylightSensorDevice,
    PresenceSensorDevice,
    SensorDevice,
    TemperatureSensorDevice,
)
from hue2mqtt.devices.switch import SwitchDevice

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt

DeviceT = TypeVar("DeviceT", bound=HueDevice)

# bridge sensor types handled by each device class, in the order they are scanned
SENSOR_DEVICE_TYPES: list[tuple[type[SensorDevice], set[str]]] = [
    (SwitchDevice, {TYPE_ZLL_SWITCH, TYPE_ZGP_SWITCH, TYPE_ZLL_ROTARY, TYPE_CLIP_SWITCH}),
    (DaylightSensorDevice, {TYPE_DAYLIGHT}),
    (PresenceSensorDevice, {TYPE_ZLL_PRESENCE, TYPE_CLIP_PRESENCE}),
    (AmbientLightSensorDevice, {TYPE_ZLL_LIGHTLEVEL, TYPE_CLIP_LIGHTLEVEL}),
    (TemperatureSensorDevice, {TYPE_ZLL_TEMPERATURE, TYPE_CLIP_TEMPERATURE}),
]


class DeviceNotFoundError(LookupError):
    """Raised when a device id is not part of the current registry."""

    pass


class ScanMixin:
    async def scan(self: Hue2Mqtt) -> None:
        self.logger.info(f"scanning Hue bridge for devices (every {self.scan_interval} sec)")

        try:
            await self.refresh_bridge_topology()
            devices = self.build_devices()
        except Exception as err:
            self.logger.error(f"scan failed, keeping the {len(self.devices)} known devices: {err}", exc_info=True)
            return

        # readers only ever see the old or the new tuple, never a partial one
        self.devices = devices
        self.logger.info(f"scan found {len(devices)} devices")
        await self.publish_service_state()

    def build_devices(self: Hue2Mqtt) -> tuple[HueDevice, ...]:
        devices: list[HueDevice] = []
        seen: set[str] = set()

        for room in self.get_rooms():
            for light in self.get_room_lights(room):
                topic = self.unique_topic(self.get_device_topic(LightDevice.device_type, room.name, light.name), seen)
                devices.append(LightDevice(light, topic, topic, self.publish_message))

        for light in self.get_unassigned_lights():
            topic = self.unique_topic(self.get_device_topic(LightDevice.device_type, light.name), seen)
            devices.append(LightDevice(light, topic, topic, self.publish_message))

        for device_class, sensor_types in SENSOR_DEVICE_TYPES:
            for sensor in self.get_sensors(sensor_types):
                topic = self.unique_topic(self.get_device_topic(device_class.device_type, sensor.name), seen)
                devices.append(device_class(sensor, topic, sensor.id, self.publish_message))

        return tuple(devices)

    def get_device(self: Hue2Mqtt, device_id: str, device_type: type[DeviceT]) -> DeviceT:
        for device in self.devices:
            if device.id == device_id and isinstance(device, device_type):
                return device
        raise DeviceNotFoundError(f"no {device_type.__name__} with id {device_id}")
