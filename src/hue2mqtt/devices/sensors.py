# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from datetime import datetime

from typing import Any

from aiohue.v1.sensors import GenericSensor

from hue2mqtt.messages import (
    ambient_message,
    daylight_message,
    parse_last_updated,
    presence_message,
    temperature_message,
)
from .base import HueDevice, Publisher


class SensorDevice(HueDevice):
    """Base for everything backed by a bridge sensor; the marker is `state.lastupdated`."""

    def __init__(self, sensor: GenericSensor, topic: str, device_id: str, publish: Publisher) -> None:
        super().__init__(topic, device_id, publish)
        self.sensor = sensor
        self.last_updated = self.read_marker()

    def read_marker(self) -> datetime | None:
        return parse_last_updated(self.sensor.state.get("lastupdated"))


class DaylightSensorDevice(SensorDevice):
    device_type = "daylight"

    def build_message(self) -> dict[str, Any]:
        return daylight_message(self.sensor.state.get("daylight"), self.read_marker())


class PresenceSensorDevice(SensorDevice):
    device_type = "presence"

    def build_message(self) -> dict[str, Any]:
        return presence_message(self.sensor.state.get("presence"), self.read_marker())


class AmbientLightSensorDevice(SensorDevice):
    device_type = "ambient"

    def build_message(self) -> dict[str, Any]:
        state = self.sensor.state
        return ambient_message(
            bool(state.get("dark")),
            bool(state.get("daylight")),
            state.get("lightlevel"),
            self.read_marker(),
        )


class TemperatureSensorDevice(SensorDevice):
    device_type = "temperature"

    def build_message(self) -> dict[str, Any]:
        return temperature_message(self.sensor.state.get("temperature"), self.read_marker())
