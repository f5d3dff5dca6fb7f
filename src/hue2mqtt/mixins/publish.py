# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

import asyncio
import json

import paho.mqtt.client as mqtt

from typing import TYPE_CHECKING

from hue2mqtt.messages import OutboundMessage

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt


class PublishMixin:
    def mqtt_safe_publish(self: Hue2Mqtt, topic: str, payload: str, retain: bool = False) -> None:
        info = self.mqttc.publish(topic, payload, qos=self.qos, retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self.logger.warning(f"publish to {topic} failed: {mqtt.error_string(info.rc)}")

    async def publish_message(self: Hue2Mqtt, message: OutboundMessage) -> None:
        topic = message.topic if message.absolute else f"{self.service}/{message.topic}"
        await asyncio.to_thread(self.mqtt_safe_publish, topic, message.payload, self.mqtt_config["retain"])

    async def publish_service_availability(self: Hue2Mqtt, status: str = "online") -> None:
        await asyncio.to_thread(self.mqtt_safe_publish, self.get_service_status_topic(), status, True)

    async def publish_service_state(self: Hue2Mqtt) -> None:
        devices = [{"id": device.id, "type": device.device_type, "topic": device.topic} for device in self.devices]
        await self.publish_message(OutboundMessage.relative_to_base("service/devices", json.dumps(devices)))
