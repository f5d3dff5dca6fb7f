# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from datetime import datetime, timezone
import json

import pytest

from hue2mqtt.messages import (
    MessageError,
    OutboundMessage,
    ambient_message,
    decode_button_event,
    light_message,
    parse_last_updated,
    parse_light_command,
    parse_notify_command,
    switch_message,
    temperature_message,
    to_json,
)


# ===========================================================================
# Light payloads
# ===========================================================================
class TestLightMessage:
    def test_full_state_wire_format(self) -> None:
        message = light_message({"on": True, "bri": 200, "xy": [0.3, 0.4], "ct": 300})
        assert to_json(message) == '{"state":"ON","brightness":200,"color_temp":300,"color":{"x":0.3,"y":0.4}}'

    def test_on_null_is_off(self) -> None:
        message = light_message({"on": None, "bri": 10})
        assert message["state"] == "OFF"

    def test_missing_fields_are_null(self) -> None:
        message = light_message({"on": False})
        assert message == {"state": "OFF", "brightness": None, "color_temp": None, "color": None}

    def test_xy_with_wrong_length_has_no_color(self) -> None:
        assert light_message({"on": True, "xy": [0.1]})["color"] is None


# ===========================================================================
# Sensor payloads
# ===========================================================================
class TestSensorMessages:
    def test_ambient_field_names(self) -> None:
        ts = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
        message = ambient_message(True, False, 12000, ts)
        assert message == {"dark": True, "daylight": False, "lightLevel": 12000, "lastUpdated": "2025-03-01T12:00:00+00:00"}

    def test_temperature_is_celsius(self) -> None:
        assert temperature_message(2150, None) == {"temperature": 21.5, "lastUpdated": None}

    def test_parse_last_updated_none(self) -> None:
        assert parse_last_updated("none") is None
        assert parse_last_updated(None) is None

    def test_parse_last_updated_is_utc(self) -> None:
        assert parse_last_updated("2025-03-01T12:00:00") == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestSwitchMessage:
    @pytest.mark.parametrize(
        "code, expected",
        [
            (1002, (1, "SHORT_RELEASED")),
            (4001, (4, "HOLD")),
            (2003, (2, "LONG_RELEASED")),
            (34, (1, "PRESS")),
            (18, (4, "PRESS")),
            (None, (None, None)),
            (7, (None, "UNKNOWN")),
        ],
    )
    def test_decode_button_event(self, code, expected) -> None:
        assert decode_button_event(code) == expected

    def test_button_message(self) -> None:
        message = switch_message({"buttonevent": 3000}, None)
        assert message == {"button": 3, "action": "INITIAL_PRESS", "lastUpdated": None}

    def test_rotary_message(self) -> None:
        message = switch_message({"rotaryevent": 2, "expectedrotation": -45}, None)
        assert message == {"rotation": -45, "action": "REPEAT", "lastUpdated": None}


# ===========================================================================
# Light commands
# ===========================================================================
class TestParseLightCommand:
    def test_full_command(self) -> None:
        payload = json.dumps({"state": "ON", "brightness": 120, "color": {"x": 0.5, "y": 0.4}, "color_temp": 250})
        assert parse_light_command(payload) == {"on": True, "bri": 120, "xy": [0.5, 0.4], "ct": 250}

    def test_partial_command_leaves_other_fields_out(self) -> None:
        assert parse_light_command('{"brightness": 10}') == {"bri": 10}

    def test_state_is_case_insensitive(self) -> None:
        assert parse_light_command('{"state": "off"}') == {"on": False}

    def test_toggle_uses_current_state(self) -> None:
        assert parse_light_command('{"state": "TOGGLE"}', current_on=True) == {"on": False}
        assert parse_light_command('{"state": "TOGGLE"}', current_on=None) == {"on": True}

    def test_values_are_clamped(self) -> None:
        command = parse_light_command('{"brightness": 999, "color_temp": 10}')
        assert command == {"bri": 254, "ct": 153}

    def test_transition_in_tenths(self) -> None:
        assert parse_light_command('{"state": "ON", "transition": 1.5}') == {"on": True, "transitiontime": 15}

    def test_null_fields_are_ignored(self) -> None:
        assert parse_light_command('{"state": "ON", "brightness": null, "color": null, "transition": null}') == {"on": True}

    def test_own_state_payload_is_a_valid_command(self) -> None:
        assert parse_light_command(to_json(light_message({"on": True}))) == {"on": True}

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[1, 2]",
            "{}",
            '{"state": "BLINK"}',
            '{"brightness": "high"}',
            '{"brightness": true}',
            '{"color": [0.1, 0.2]}',
        ],
    )
    def test_malformed_payloads_raise(self, payload: str) -> None:
        with pytest.raises(MessageError):
            parse_light_command(payload)


class TestParseNotifyCommand:
    def test_full_command(self) -> None:
        payload = json.dumps({"light": "hue/light/kitchen", "colors": [[0.1, 0.2], [0.3, 0.4]], "duration": 2})
        assert parse_notify_command(payload) == ("hue/light/kitchen", [(0.1, 0.2), (0.3, 0.4)], 2.0)

    def test_defaults(self) -> None:
        light, colors, duration = parse_notify_command('{"light": "hue/light/kitchen"}')
        assert light == "hue/light/kitchen"
        assert len(colors) == 1
        assert duration == 1.0

    def test_missing_light_raises(self) -> None:
        with pytest.raises(MessageError):
            parse_notify_command('{"colors": [[0.1, 0.2]]}')

    def test_bad_color_raises(self) -> None:
        with pytest.raises(MessageError):
            parse_notify_command('{"light": "x", "colors": [[0.1]]}')


class TestOutboundMessage:
    def test_constructors(self) -> None:
        assert OutboundMessage.at("hue/light/a", "{}").absolute is True
        assert OutboundMessage.relative_to_base("service/devices", "[]").absolute is False
