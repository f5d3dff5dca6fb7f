# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
"""Structural type of the assembled service, so each mixin can type `self`."""
from __future__ import annotations

import aiohttp
import argparse
import asyncio
from datetime import datetime
import logging
from types import FrameType

from typing import Any, Protocol, TypeVar

from aiohue import HueBridgeV1
from aiohue.v1.groups import Group
from aiohue.v1.lights import Light
from aiohue.v1.sensors import GenericSensor
from paho.mqtt.client import Client

from hue2mqtt.devices.base import HueDevice
from hue2mqtt.messages import InboundMessage, OutboundMessage

DeviceT = TypeVar("DeviceT", bound=HueDevice)


class HueServiceProtocol(Protocol):
    args: argparse.Namespace | None
    bridge: HueBridgeV1
    client_id: str
    config: dict[str, Any]
    devices: tuple[HueDevice, ...]
    effects: set[asyncio.Task]
    hue_config: dict[str, Any]
    logger: logging.Logger
    loop: asyncio.AbstractEventLoop
    mqtt_config: dict[str, Any]
    mqtt_connect_time: datetime | None
    mqttc: Client
    poll_initial_delay: float
    poll_interval: float
    qos: int
    running: bool
    scan_interval: int
    service: str
    service_name: str
    session: aiohttp.ClientSession | None
    tasks: list[asyncio.Task]

    # helpers
    def load_config(self, config_arg: Any | None = None) -> dict[str, Any]: ...
    def get_new_client_id(self) -> str: ...
    def _handle_signal(self, signum: int, frame: FrameType | None = None) -> None: ...
    def mark_ready(self) -> None: ...
    def heartbeat_ready(self) -> None: ...

    # topics
    def get_device_topic(self, segment: str, *names: str) -> str: ...
    def unique_topic(self, topic: str, seen: set[str]) -> str: ...
    def get_service_topic(self, *parts: str) -> str: ...
    def get_service_status_topic(self) -> str: ...
    def get_subscription_topic(self) -> str: ...

    # hue api
    async def connect_bridge(self) -> None: ...
    async def discover_bridge_host(self) -> str: ...
    async def refresh_bridge(self) -> None: ...
    async def refresh_bridge_topology(self) -> None: ...
    def get_rooms(self) -> list[Group]: ...
    def get_room_lights(self, room: Group) -> list[Light]: ...
    def get_unassigned_lights(self) -> list[Light]: ...
    def get_sensors(self, types: set[str]) -> list[GenericSensor]: ...

    # scan / refresh / loops
    async def scan(self) -> None: ...
    def build_devices(self) -> tuple[HueDevice, ...]: ...
    def get_device(self, device_id: str, device_type: type[DeviceT]) -> DeviceT: ...
    async def poll(self) -> None: ...
    async def poll_loop(self) -> None: ...
    async def scan_loop(self) -> None: ...
    async def heartbeat(self) -> None: ...
    def cancel_loops(self) -> None: ...
    async def main_loop(self) -> None: ...

    # publish
    def mqtt_safe_publish(self, topic: str, payload: str, retain: bool = False) -> None: ...
    async def publish_message(self, message: OutboundMessage) -> None: ...
    async def publish_service_availability(self, status: str = "online") -> None: ...
    async def publish_service_state(self) -> None: ...

    # mqtt
    def mqttc_create(self) -> None: ...
    async def handle_message(self, message: InboundMessage) -> None: ...
    async def dispatch(self, message: InboundMessage) -> bool: ...
    async def handle_service_message(self, handler: str, message: InboundMessage) -> None: ...
    def handle_notify_command(self, payload: str) -> None: ...
    def log_effect_result(self, task: asyncio.Task) -> None: ...
