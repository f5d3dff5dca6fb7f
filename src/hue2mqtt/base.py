# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

import aiohttp
import argparse
import asyncio
from datetime import datetime
import logging
from paho.mqtt.client import Client
from types import TracebackType

from typing import TYPE_CHECKING, Any, Self, cast

from aiohue import HueBridgeV1

if TYPE_CHECKING:
    from hue2mqtt.devices.base import HueDevice
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt


class Base:
    def __init__(self: Hue2Mqtt, args: argparse.Namespace | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)

        self.loop = asyncio.get_running_loop()

        self.args = args
        self.logger = logging.getLogger(__name__)

        # now load self.config right away
        cfg_arg = getattr(args, "config", None)
        self.config = self.load_config(cfg_arg)

        # down in trenches if we have to
        if self.config.get("debug"):
            logging.getLogger("hue2mqtt").setLevel(logging.DEBUG)

        self.mqtt_config = self.config["mqtt"]
        self.hue_config = self.config["hue"]

        self.service = self.mqtt_config["prefix"]
        self.service_name = f"{self.service} service"
        self.qos = self.mqtt_config["qos"]

        self.running = False

        # the registry: swapped as a whole by every scan, never mutated in place
        self.devices: tuple[HueDevice, ...] = ()
        self.tasks: list[asyncio.Task] = []
        self.effects: set[asyncio.Task] = set()

        self.session: aiohttp.ClientSession | None = None
        self.bridge: HueBridgeV1
        self.mqttc: Client | None = None
        self.mqtt_connect_time: datetime | None = None
        self.client_id = self.get_new_client_id()

        self.poll_interval = self.hue_config["poll_interval"]
        self.poll_initial_delay = self.hue_config["poll_initial_delay"]
        self.scan_interval = self.hue_config["scan_interval"]

    async def __aenter__(self: Self) -> Hue2Mqtt:
        service = cast(Any, self)
        self.logger.info(f"starting {service.service_name} {service.config['version']} (config from {service.config['config_from']})")

        timeout = aiohttp.ClientTimeout(total=15)
        service.session = aiohttp.ClientSession(timeout=timeout)

        try:
            await service.connect_bridge()
            service.mqttc_create()
            service.running = True
        except BaseException:
            await service.session.close()
            raise

        return cast("Hue2Mqtt", self)

    async def __aexit__(self: Self, exc_type: BaseException | None, exc_val: BaseException | None, exc_tb: TracebackType) -> None:
        service = cast(Any, self)
        service.running = False
        service.cancel_loops()

        if service.mqttc is not None:
            try:
                await service.publish_service_availability("offline")
            except Exception as e:
                self.logger.debug(f"publishing offline status failed: {e}")

            if service.mqttc.is_connected():
                try:
                    service.mqttc.disconnect()
                    self.logger.info("disconnected from MQTT broker")
                except Exception as e:
                    self.logger.warning(f"error during MQTT disconnect: {e}")

            service.mqttc.loop_stop()

        if service.session is not None and not service.session.closed:
            await service.session.close()

        self.logger.info("exiting gracefully")
