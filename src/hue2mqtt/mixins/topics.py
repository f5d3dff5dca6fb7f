# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

import re
import unicodedata

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt

TRANSLITERATIONS = {"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"}
UNSAFE_CHARACTERS = re.compile(r"[^a-z0-9_-]+")
REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def clean_topic(name: str) -> str:
    """Make a device or room name safe to use as a single MQTT topic level.

    Lowercases, transliterates umlauts, and collapses everything else that is
    not [a-z0-9_-] (spaces, slashes, + and #) into single underscores.
    """
    value = name.strip().lower()
    for char, replacement in TRANSLITERATIONS.items():
        value = value.replace(char, replacement)
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = UNSAFE_CHARACTERS.sub("_", value)
    value = REPEATED_UNDERSCORES.sub("_", value).strip("_")
    return value or "unnamed"


class TopicsMixin:

    # Device topics -------------------------------------------------------------------------------

    def get_device_topic(self: Hue2Mqtt, segment: str, *names: str) -> str:
        return "/".join([self.service, segment, *(clean_topic(name) for name in names)])

    def unique_topic(self: Hue2Mqtt, topic: str, seen: set[str]) -> str:
        candidate = topic
        suffix = 2
        # a state topic must not collide with another device's command topic either
        while candidate in seen or f"{candidate}/set" in seen:
            candidate = f"{topic}_{suffix}"
            suffix += 1
        if candidate != topic:
            self.logger.warning(f"topic {topic} is already taken, using {candidate}")
        seen.update((candidate, f"{candidate}/set"))
        return candidate

    # Service topics ------------------------------------------------------------------------------

    def get_service_topic(self: Hue2Mqtt, *parts: str) -> str:
        return "/".join([self.service, "service", *parts])

    def get_service_status_topic(self: Hue2Mqtt) -> str:
        return self.get_service_topic("status")

    def get_subscription_topic(self: Hue2Mqtt) -> str:
        return f"{self.service}/#"
