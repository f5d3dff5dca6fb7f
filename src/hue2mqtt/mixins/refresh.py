# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt


class RefreshMixin:
    async def poll(self: Hue2Mqtt) -> None:
        # a failure anywhere ends this tick, including for devices not yet visited;
        # the next tick starts over with fresh bridge state
        try:
            await self.refresh_bridge()

            for device in self.devices:
                await device.trigger_update()
        except Exception as err:
            self.logger.error(f"poll failed: {err}", exc_info=True)
