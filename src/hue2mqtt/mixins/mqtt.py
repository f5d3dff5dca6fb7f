# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

import asyncio
from datetime import datetime
import ssl

import paho.mqtt.client as mqtt
from paho.mqtt.client import Client, MQTTMessage

from typing import TYPE_CHECKING, Any

from hue2mqtt.devices.light import LightDevice
from hue2mqtt.effects import NotifyAndTurnOffLights
from hue2mqtt.messages import InboundMessage, MessageError, parse_notify_command
from .scan import DeviceNotFoundError

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt


class MqttError(ConnectionError):
    """Raised when the MQTT broker cannot be reached."""

    pass


class MqttMixin:

    # MQTT client ---------------------------------------------------------------------------------

    def mqttc_create(self: Hue2Mqtt) -> None:
        self.mqttc = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.client_id,
            clean_session=True,
        )

        if self.mqtt_config.get("tls_enabled"):
            self.mqttc.tls_set(
                ca_certs=self.mqtt_config.get("tls_ca_cert"),
                certfile=self.mqtt_config.get("tls_cert"),
                keyfile=self.mqtt_config.get("tls_key"),
                cert_reqs=ssl.CERT_REQUIRED,
                tls_version=ssl.PROTOCOL_TLS_CLIENT,
            )
        if self.mqtt_config.get("username"):
            self.mqttc.username_pw_set(
                username=self.mqtt_config.get("username"),
                password=self.mqtt_config.get("password"),
            )

        self.mqttc.on_connect = self.mqtt_on_connect
        self.mqttc.on_disconnect = self.mqtt_on_disconnect
        self.mqttc.on_message = self.mqtt_on_message
        self.mqttc.on_log = self.mqtt_on_log
        self.mqttc.reconnect_delay_set(min_delay=1, max_delay=30)

        self.mqttc.will_set(self.get_service_status_topic(), "offline", qos=self.qos, retain=True)

        try:
            self.mqttc.connect(self.mqtt_config["host"], port=self.mqtt_config["port"], keepalive=60)
        except (ConnectionError, OSError) as err:
            raise MqttError(f"failed to connect to MQTT host {self.mqtt_config['host']}: {err}") from err

        self.mqtt_connect_time = datetime.now()
        self.mqttc.loop_start()

    # callbacks below run on paho's network thread

    def mqtt_on_connect(self: Hue2Mqtt, client: Client, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:
        if reason_code.is_failure:
            self.logger.error(f"MQTT connection refused: {reason_code}")
            return

        self.logger.info(f"MQTT connected as {self.client_id}")
        client.subscribe(self.get_subscription_topic(), qos=self.qos)
        self.mqtt_safe_publish(self.get_service_status_topic(), "online", retain=True)

    def mqtt_on_disconnect(self: Hue2Mqtt, client: Client, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:
        if self.running:
            self.logger.warning(f"MQTT connection lost ({reason_code}), paho will reconnect")
        else:
            self.logger.info("MQTT connection closed")

    def mqtt_on_log(self: Hue2Mqtt, client: Client, userdata: Any, paho_log_level: int, msg: str) -> None:
        if paho_log_level == mqtt.LogLevel.MQTT_LOG_ERR:
            self.logger.error(f"MQTT logged: {msg}")
        if paho_log_level == mqtt.LogLevel.MQTT_LOG_WARNING:
            self.logger.warning(f"MQTT logged: {msg}")

    def mqtt_on_message(self: Hue2Mqtt, client: Client, userdata: Any, msg: MQTTMessage) -> None:
        try:
            payload = msg.payload.decode("utf-8")
        except UnicodeDecodeError:
            self.logger.warning(f"failed to decode MQTT payload on {msg.topic}")
            return

        asyncio.run_coroutine_threadsafe(self.handle_message(InboundMessage(msg.topic, payload)), self.loop)

    # Inbound messages ----------------------------------------------------------------------------

    async def handle_message(self: Hue2Mqtt, message: InboundMessage) -> None:
        components = message.topic.split("/")

        # our own state messages come back through the wildcard subscription
        if components[-1] != "set":
            return

        # the prefix may span several topic levels
        prefix = f"{self.service}/"
        rest = message.topic.removeprefix(prefix).split("/") if message.topic.startswith(prefix) else []

        try:
            if len(rest) == 3 and rest[0] == "service":
                await self.handle_service_message(rest[1], message)
            else:
                await self.dispatch(message)
        except Exception as err:
            self.logger.error(f"failed to handle message on {message.topic}: {err}", exc_info=True)

    async def dispatch(self: Hue2Mqtt, message: InboundMessage) -> bool:
        for device in self.devices:
            if await device.apply(message):
                return True

        self.logger.debug(f"no device handled message on {message.topic}")
        return False

    async def handle_service_message(self: Hue2Mqtt, handler: str, message: InboundMessage) -> None:
        match handler:
            case "scan":
                self.logger.info("rescan requested over MQTT")
                await self.scan()
            case "notify":
                self.handle_notify_command(message.payload)
            case _:
                self.logger.info(f"ignored unrecognized service command {handler}: {message.payload}")

    def handle_notify_command(self: Hue2Mqtt, payload: str) -> None:
        try:
            light_id, colors, duration = parse_notify_command(payload)
        except MessageError as err:
            self.logger.warning(f"ignoring notify command: {err}")
            return

        try:
            device = self.get_device(light_id, LightDevice)
        except DeviceNotFoundError as err:
            self.logger.warning(f"ignoring notify command: {err}")
            return

        effect = NotifyAndTurnOffLights(device.light, *colors)
        task = effect.notify(duration)
        # effects are not cancelled on shutdown, only kept alive until done
        self.effects.add(task)
        task.add_done_callback(self.effects.discard)
        task.add_done_callback(self.log_effect_result)

    def log_effect_result(self: Hue2Mqtt, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            self.logger.error(f"effect {task.get_name()} failed: {err}", exc_info=err)
