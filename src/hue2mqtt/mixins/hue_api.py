# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from aiohttp import ClientError
from aiohue import HueBridgeV1
from aiohue.discovery import discover_nupnp
from aiohue.errors import Unauthorized
from aiohue.v1.groups import Group
from aiohue.v1.lights import Light
from aiohue.v1.sensors import GenericSensor

from typing import TYPE_CHECKING

from .helpers import ConfigError

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt

ROOM_TYPE = "Room"


class HueAPIMixin:
    async def connect_bridge(self: Hue2Mqtt) -> None:
        host = self.hue_config.get("host") or await self.discover_bridge_host()

        self.bridge = HueBridgeV1(host, self.hue_config["app_key"], websession=self.session)
        try:
            await self.bridge.initialize()
        except Unauthorized as err:
            raise ConfigError(f"Hue bridge at {host} rejected the configured app_key") from err
        except ClientError as err:
            raise ConfigError(f"cannot reach Hue bridge at {host}: {err}") from err

        self.logger.info(f"connected to Hue bridge {self.bridge.bridge_id} at {host}")

    async def discover_bridge_host(self: Hue2Mqtt) -> str:
        self.logger.info("no Hue bridge host configured, trying discovery")
        bridges = await discover_nupnp(websession=self.session)
        if not bridges:
            raise ConfigError("`hue.host` not set and no Hue bridge found via discovery")
        if len(bridges) > 1:
            self.logger.warning(f"found {len(bridges)} Hue bridges, using the first one ({bridges[0].host})")
        return bridges[0].host

    # Refresh -------------------------------------------------------------------------------------

    async def refresh_bridge(self: Hue2Mqtt) -> None:
        await self.bridge.lights.update()
        if self.bridge.sensors is not None:
            await self.bridge.sensors.update()

    async def refresh_bridge_topology(self: Hue2Mqtt) -> None:
        await self.bridge.groups.update()
        await self.refresh_bridge()

    # Enumeration ---------------------------------------------------------------------------------

    def get_rooms(self: Hue2Mqtt) -> list[Group]:
        return [group for group in self.bridge.groups.values() if group.type == ROOM_TYPE]

    def get_room_lights(self: Hue2Mqtt, room: Group) -> list[Light]:
        lights = self.bridge.lights
        return [lights[light_id] for light_id in room.lights if light_id in lights]

    def get_unassigned_lights(self: Hue2Mqtt) -> list[Light]:
        assigned = {light_id for room in self.get_rooms() for light_id in room.lights}
        return [light for light in self.bridge.lights.values() if light.id not in assigned]

    def get_sensors(self: Hue2Mqtt, types: set[str]) -> list[GenericSensor]:
        if self.bridge.sensors is None:
            return []
        return [sensor for sensor in self.bridge.sensors.values() if sensor.type in types]
