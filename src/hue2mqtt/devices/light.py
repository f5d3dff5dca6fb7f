# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from typing import Any

from aiohue.v1.lights import Light

from hue2mqtt.messages import InboundMessage, MessageError, light_message, parse_light_command
from .base import HueDevice, Publisher


class LightDevice(HueDevice):
    device_type = "light"

    def __init__(self, light: Light, topic: str, device_id: str, publish: Publisher) -> None:
        super().__init__(topic, device_id, publish)
        self.light = light
        self.last_updated = self.read_marker()

    @property
    def command_topic(self) -> str:
        return f"{self.topic}/set"

    def read_marker(self) -> tuple[Any, ...]:
        # v1 lights carry no timestamp, so the published fields are the marker
        state = self.light.state
        xy = state.get("xy")
        return (state.get("on"), state.get("bri"), state.get("ct"), tuple(xy) if xy else None)

    def build_message(self) -> dict[str, Any]:
        return light_message(self.light.state)

    async def apply(self, message: InboundMessage) -> bool:
        if message.topic != self.command_topic:
            return False

        try:
            command = parse_light_command(message.payload, current_on=self.light.state.get("on"))
        except MessageError as err:
            self.logger.warning(f"ignoring command for {self.topic}: {err}")
            return True

        self.logger.info(f"setting {self.topic} to {command}")
        await self.light.set_state(**command)
        return True
