# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from typing import Any

from hue2mqtt.messages import switch_message
from .sensors import SensorDevice


class SwitchDevice(SensorDevice):
    """Dimmer, tap and dial switches: publishes the latest button or dial event."""

    device_type = "switch"

    def build_message(self) -> dict[str, Any]:
        return switch_message(self.sensor.state, self.read_marker())
