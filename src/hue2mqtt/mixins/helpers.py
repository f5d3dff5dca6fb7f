# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as pkg_version
import logging
import os
import pathlib
import random
import signal
import string
from types import FrameType
import yaml

from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt

READY_FILE = os.getenv("READY_FILE", "/tmp/hue2mqtt.ready")


class ConfigError(ValueError):
    """Raised when the configuration file is invalid."""

    pass


def package_version() -> str:
    try:
        return pkg_version("hue2mqtt")
    except PackageNotFoundError:
        return "unknown"


class HelpersMixin:
    def load_config(self: Hue2Mqtt, config_arg: Any | None = None) -> dict[str, Any]:
        version = os.getenv("APP_VERSION") or package_version()

        config_from = "env"
        config: dict[str, Any] = {}

        # Determine config file path
        config_path = config_arg or "/config"
        config_path = os.path.expanduser(config_path)
        config_path = os.path.abspath(config_path)

        if os.path.isdir(config_path):
            config_file = os.path.join(config_path, "config.yaml")
        elif os.path.isfile(config_path):
            config_file = config_path
            config_path = os.path.dirname(config_file)
        else:
            # If it's not a valid path but looks like a filename, handle gracefully
            if config_path.endswith(".yaml"):
                config_file = config_path
            else:
                config_file = os.path.join(config_path, "config.yaml")

        # Try to load from YAML
        if os.path.exists(config_file):
            try:
                with open(config_file, "r") as f:
                    config = yaml.safe_load(f) or {}
                config_from = "file"
            except (OSError, yaml.YAMLError) as e:
                logging.warning(f"Failed to load config from {config_file}: {e}")
        else:
            logging.warning(f"Config file not found at {config_file}, falling back to environment vars")

        # Merge with environment vars (env vars override nothing if file exists)
        mqtt = cast(dict[str, Any], config.get("mqtt") or {})
        hue = cast(dict[str, Any], config.get("hue") or {})

        try:
            # fmt: off
            mqtt = {
                "host":           mqtt.get("host")        or os.getenv("MQTT_HOST", "localhost"),
                "port":       int(mqtt.get("port")        or os.getenv("MQTT_PORT", 1883)),
                "qos":        int(mqtt.get("qos")         or os.getenv("MQTT_QOS", 0)),
                "username":       mqtt.get("username")    or os.getenv("MQTT_USERNAME", ""),
                "password":       mqtt.get("password")    or os.getenv("MQTT_PASSWORD", ""),
                "tls_enabled":    mqtt.get("tls_enabled") or (os.getenv("MQTT_TLS_ENABLED", "false").lower() == "true"),
                "tls_ca_cert":    mqtt.get("tls_ca_cert") or os.getenv("MQTT_TLS_CA_CERT"),
                "tls_cert":       mqtt.get("tls_cert")    or os.getenv("MQTT_TLS_CERT"),
                "tls_key":        mqtt.get("tls_key")     or os.getenv("MQTT_TLS_KEY"),
                "prefix":         mqtt.get("prefix")      or os.getenv("MQTT_PREFIX", "hue"),
                "retain":     str(mqtt.get("retain", os.getenv("MQTT_RETAIN", "false"))).lower() == "true",
            }

            hue = {
                "host":                 hue.get("host")               or os.getenv("HUE_HOST", ""),
                "app_key":              hue.get("app_key")            or os.getenv("HUE_APP_KEY"),
                "poll_interval":      float(hue.get("poll_interval")      or os.getenv("HUE_POLL_INTERVAL", 0.5)),
                "poll_initial_delay": float(hue.get("poll_initial_delay") or os.getenv("HUE_POLL_INITIAL_DELAY", 1.5)),
                "scan_interval":        int(hue.get("scan_interval")      or os.getenv("HUE_SCAN_INTERVAL", 3600)),
            }
            # fmt: on
        except (TypeError, ValueError) as err:
            raise ConfigError(f"invalid numeric value in config: {err}") from err

        config = {
            "mqtt": mqtt,
            "hue": hue,
            "debug": str(config.get("debug") or os.getenv("DEBUG", "")).lower() == "true",
            "config_from": config_from,
            "config_path": config_path,
            "version": version,
        }

        # Validate required fields
        if not hue.get("app_key"):
            raise ConfigError("`hue.app_key` required in config file or HUE_APP_KEY env var")
        if not mqtt.get("host"):
            raise ConfigError("`mqtt host` value is missing, not even the default value")
        if hue["poll_interval"] <= 0 or hue["scan_interval"] <= 0:
            raise ConfigError("`hue.poll_interval` and `hue.scan_interval` must be positive")

        return config

    def get_new_client_id(self: Hue2Mqtt) -> str:
        return self.mqtt_config["prefix"] + "-" + "".join(random.choices(string.ascii_lowercase + string.digits, k=8))

    def _handle_signal(self: Hue2Mqtt, signum: int, frame: FrameType | None = None) -> None:
        sig_name = signal.Signals(signum).name
        self.logger.warning(f"{sig_name} received - stopping service loops")
        self.running = False
        self.loop.call_soon_threadsafe(self.cancel_loops)

    def mark_ready(self: Hue2Mqtt) -> None:
        pathlib.Path(READY_FILE).touch()

    def heartbeat_ready(self: Hue2Mqtt) -> None:
        pathlib.Path(READY_FILE).touch()
