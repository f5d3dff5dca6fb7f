# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
"""JSON payloads published for each Hue device type, and parsers for inbound commands."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json

from typing import Any, Mapping

MIN_BRIGHTNESS = 1
MAX_BRIGHTNESS = 254
MIN_COLOR_TEMP = 153
MAX_COLOR_TEMP = 500

# ZLL dimmer switches report buttonevent as <button><000..003>
ZLL_SWITCH_ACTIONS = {
    0: "INITIAL_PRESS",
    1: "HOLD",
    2: "SHORT_RELEASED",
    3: "LONG_RELEASED",
}

# ZGP (tap) switches report a fixed code per button
ZGP_SWITCH_BUTTONS = {34: 1, 16: 2, 17: 3, 18: 4}

ROTARY_ACTIONS = {1: "START", 2: "REPEAT"}

DEFAULT_NOTIFY_COLOR = (0.675, 0.322)
DEFAULT_NOTIFY_DURATION = 1.0


class MessageError(ValueError):
    """Raised when an inbound payload cannot be turned into a command."""

    pass


@dataclass(frozen=True)
class OutboundMessage:
    topic: str
    payload: str
    absolute: bool = False

    @classmethod
    def relative_to_base(cls, topic: str, payload: str) -> OutboundMessage:
        return cls(topic, payload, absolute=False)

    @classmethod
    def at(cls, topic: str, payload: str) -> OutboundMessage:
        return cls(topic, payload, absolute=True)


@dataclass(frozen=True)
class InboundMessage:
    topic: str
    payload: str


# Timestamps ----------------------------------------------------------------------------------


def parse_last_updated(value: str | None) -> datetime | None:
    """Turn a bridge `lastupdated` string into an aware UTC datetime.

    The bridge reports "none" for sensors that never fired.
    """
    if value is None or value == "none":
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# Outbound payloads ---------------------------------------------------------------------------


def light_state(on: bool | None) -> str:
    return "ON" if on else "OFF"


def light_message(state: Mapping[str, Any]) -> dict[str, Any]:
    xy = state.get("xy")
    color = None
    if xy is not None and len(xy) == 2:
        color = {"x": xy[0], "y": xy[1]}

    return {
        "state": light_state(state.get("on")),
        "brightness": state.get("bri"),
        "color_temp": state.get("ct"),
        "color": color,
    }


def ambient_message(dark: bool, daylight: bool, light_level: int | None, last_updated: datetime | None) -> dict[str, Any]:
    return {
        "dark": dark,
        "daylight": daylight,
        "lightLevel": light_level,
        "lastUpdated": format_timestamp(last_updated),
    }


def daylight_message(daylight: bool | None, last_updated: datetime | None) -> dict[str, Any]:
    return {"daylight": daylight, "lastUpdated": format_timestamp(last_updated)}


def presence_message(presence: bool | None, last_updated: datetime | None) -> dict[str, Any]:
    return {"presence": presence, "lastUpdated": format_timestamp(last_updated)}


def temperature_message(temperature: int | None, last_updated: datetime | None) -> dict[str, Any]:
    # the bridge reports hundredths of a degree celsius
    celsius = temperature / 100 if temperature is not None else None
    return {"temperature": celsius, "lastUpdated": format_timestamp(last_updated)}


def decode_button_event(code: int | None) -> tuple[int | None, str | None]:
    if code is None:
        return None, None
    if code in ZGP_SWITCH_BUTTONS:
        return ZGP_SWITCH_BUTTONS[code], "PRESS"
    if code >= 1000:
        return code // 1000, ZLL_SWITCH_ACTIONS.get(code % 1000, "UNKNOWN")
    return None, "UNKNOWN"


def switch_message(state: Mapping[str, Any], last_updated: datetime | None) -> dict[str, Any]:
    if "expectedrotation" in state:
        return {
            "rotation": state.get("expectedrotation"),
            "action": ROTARY_ACTIONS.get(state.get("rotaryevent"), "UNKNOWN"),
            "lastUpdated": format_timestamp(last_updated),
        }

    button, action = decode_button_event(state.get("buttonevent"))
    return {
        "button": button,
        "action": action,
        "lastUpdated": format_timestamp(last_updated),
    }


def to_json(message: Mapping[str, Any]) -> str:
    return json.dumps(message, separators=(",", ":"))


# Inbound commands ----------------------------------------------------------------------------


def _load_object(payload: str | bytes) -> dict[str, Any]:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as err:
        raise MessageError(f"payload is not valid JSON: {err}") from err
    if not isinstance(data, dict):
        raise MessageError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MessageError(f"`{key}` must be a number, got {value!r}")
    return value


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def parse_light_command(payload: str | bytes, current_on: bool | None = None) -> dict[str, Any]:
    """Translate a (partial) light payload into keyword arguments for `Light.set_state`.

    Only non-null fields end up in the result, so absent or null fields leave
    the light untouched; a light's own state payload is a valid command.
    `current_on` is needed to resolve TOGGLE.
    """
    data = _load_object(payload)
    command: dict[str, Any] = {}

    if "state" in data:
        state = str(data["state"]).upper()
        match state:
            case "ON":
                command["on"] = True
            case "OFF":
                command["on"] = False
            case "TOGGLE":
                command["on"] = not current_on
            case _:
                raise MessageError(f"unknown light state {data['state']!r}")

    if data.get("brightness") is not None:
        command["bri"] = int(_clamp(round(_number(data, "brightness")), MIN_BRIGHTNESS, MAX_BRIGHTNESS))

    if data.get("color_temp") is not None:
        command["ct"] = int(_clamp(round(_number(data, "color_temp")), MIN_COLOR_TEMP, MAX_COLOR_TEMP))

    if data.get("color") is not None:
        color = data["color"]
        if not isinstance(color, dict) or "x" not in color or "y" not in color:
            raise MessageError(f"`color` must be an object with x and y, got {color!r}")
        command["xy"] = [_clamp(_number(color, "x"), 0.0, 1.0), _clamp(_number(color, "y"), 0.0, 1.0)]

    if data.get("transition") is not None:
        # hue counts transitions in steps of 100ms
        command["transitiontime"] = max(0, round(_number(data, "transition") * 10))

    if not command:
        raise MessageError(f"no light fields found in {data!r}")

    return command


def parse_notify_command(payload: str | bytes) -> tuple[str, list[tuple[float, float]], float]:
    data = _load_object(payload)

    light = data.get("light")
    if not isinstance(light, str) or not light:
        raise MessageError("`light` must name a light id or topic")

    raw_colors = data.get("colors") or [DEFAULT_NOTIFY_COLOR]
    if not isinstance(raw_colors, list):
        raise MessageError(f"`colors` must be a list of [x, y] pairs, got {raw_colors!r}")
    colors: list[tuple[float, float]] = []
    for raw in raw_colors:
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            raise MessageError(f"color {raw!r} is not an [x, y] pair")
        x, y = raw
        if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in (x, y)):
            raise MessageError(f"color {raw!r} is not numeric")
        colors.append((float(x), float(y)))

    duration = data.get("duration", DEFAULT_NOTIFY_DURATION)
    if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration < 0:
        raise MessageError(f"`duration` must be a non-negative number, got {duration!r}")

    return light, colors, float(duration)
