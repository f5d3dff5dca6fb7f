# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

import asyncio
import logging

from aiohue.v1.lights import Light

FULL_BRIGHTNESS = 254

logger = logging.getLogger(__name__)


class NotifyAndTurnOffLights:
    """Flash a light through notification colors, then put its power state back."""

    def __init__(self, light: Light, *notification_colors: tuple[float, float]) -> None:
        self.light = light
        self.notification_colors = notification_colors

    def notify(self, duration: float) -> asyncio.Task[None]:
        return asyncio.create_task(self.run(duration), name=f"notify_{self.light.id}")

    async def run(self, duration: float) -> None:
        was_on = bool(self.light.state.get("on"))
        logger.info(f"notifying on light {self.light.name} with {len(self.notification_colors)} colors")

        try:
            for color in self.notification_colors:
                await self.turn_on(color)
                await asyncio.sleep(duration)
        finally:
            await self.light.set_state(on=was_on)

    async def turn_on(self, color: tuple[float, float]) -> None:
        await self.light.set_state(on=True, bri=FULL_BRIGHTNESS, xy=list(color))
