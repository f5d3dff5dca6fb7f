# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from abc import ABC, abstractmethod
import logging

from typing import Any, Awaitable, Callable, ClassVar

from hue2mqtt.messages import InboundMessage, OutboundMessage, to_json

Publisher = Callable[[OutboundMessage], Awaitable[None]]


class HueDevice(ABC):
    """One Hue light, switch or sensor, published on its own topic.

    `last_updated` is the freshness marker: a new message is only published
    when the value read from the bridge differs from the stored one.
    """

    device_type: ClassVar[str]

    def __init__(self, topic: str, device_id: str, publish: Publisher) -> None:
        self.topic = topic
        self.id = device_id
        self.publish = publish
        self.logger = logging.getLogger(__name__)
        self.last_updated: Any = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} on {self.topic}>"

    @abstractmethod
    def read_marker(self) -> Any: ...

    @abstractmethod
    def build_message(self) -> dict[str, Any]: ...

    async def trigger_update(self) -> bool:
        last_updated = self.read_marker()
        if last_updated == self.last_updated:
            return False

        message = self.build_message()
        self.last_updated = last_updated

        self.logger.debug(f"{self.device_type} {self.topic} changed: {message}")
        await self.publish(OutboundMessage.at(self.topic, to_json(message)))
        return True

    async def apply(self, message: InboundMessage) -> bool:
        return False
