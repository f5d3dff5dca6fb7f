# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
import json
from unittest.mock import AsyncMock

import pytest

from fakes import FakeLight, FakeSensor
from hue2mqtt.devices.light import LightDevice
from hue2mqtt.devices.sensors import AmbientLightSensorDevice, PresenceSensorDevice, TemperatureSensorDevice
from hue2mqtt.devices.switch import SwitchDevice
from hue2mqtt.messages import InboundMessage


def _light_device(**state):
    light = FakeLight("1", "Ceiling", **state)
    publish = AsyncMock()
    return LightDevice(light, "hue/light/kitchen/ceiling", "hue/light/kitchen/ceiling", publish), light, publish


# ===========================================================================
# Change detection
# ===========================================================================
class TestLightTriggerUpdate:
    @pytest.mark.asyncio
    async def test_unchanged_state_does_not_publish(self):
        device, _, publish = _light_device(on=True, bri=100)

        assert await device.trigger_update() is False
        publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_changed_state_publishes_once(self):
        device, light, publish = _light_device(on=False, bri=100)
        light.state.update(on=True, bri=200, xy=[0.3, 0.4], ct=300)

        assert await device.trigger_update() is True
        assert await device.trigger_update() is False

        publish.assert_awaited_once()
        message = publish.await_args.args[0]
        assert message.topic == "hue/light/kitchen/ceiling"
        assert message.absolute is True
        assert json.loads(message.payload) == {"state": "ON", "brightness": 200, "color_temp": 300, "color": {"x": 0.3, "y": 0.4}}

    @pytest.mark.asyncio
    async def test_xy_list_compares_structurally(self):
        device, light, publish = _light_device(on=True, xy=[0.3, 0.4])
        light.state["xy"] = [0.3, 0.4]

        await device.trigger_update()
        publish.assert_not_awaited()


class TestSensorTriggerUpdate:
    @pytest.mark.asyncio
    async def test_never_updated_sensor_stays_quiet(self):
        sensor = FakeSensor("7", "Hall", "ZLLPresence", presence=False)
        publish = AsyncMock()
        device = PresenceSensorDevice(sensor, "hue/presence/hall", "7", publish)

        await device.trigger_update()
        publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_new_timestamp_publishes_once(self):
        sensor = FakeSensor("8", "Hall", "ZLLLightLevel", lastupdated="2025-03-01T12:00:00", dark=True, daylight=False, lightlevel=5000)
        publish = AsyncMock()
        device = AmbientLightSensorDevice(sensor, "hue/ambient/hall", "8", publish)

        sensor.state.update(lastupdated="2025-03-01T12:05:00", dark=False, daylight=True, lightlevel=21000)
        await device.trigger_update()
        await device.trigger_update()

        publish.assert_awaited_once()
        payload = json.loads(publish.await_args.args[0].payload)
        assert payload == {"dark": False, "daylight": True, "lightLevel": 21000, "lastUpdated": "2025-03-01T12:05:00+00:00"}

    @pytest.mark.asyncio
    async def test_switch_publishes_latest_button_event(self):
        sensor = FakeSensor("3", "Dimmer", "ZLLSwitch", buttonevent=1002, lastupdated="2025-03-01T12:00:00")
        publish = AsyncMock()
        device = SwitchDevice(sensor, "hue/switch/dimmer", "3", publish)

        sensor.state.update(buttonevent=4003, lastupdated="2025-03-01T12:00:01")
        await device.trigger_update()

        payload = json.loads(publish.await_args.args[0].payload)
        assert payload == {"button": 4, "action": "LONG_RELEASED", "lastUpdated": "2025-03-01T12:00:01+00:00"}

    @pytest.mark.asyncio
    async def test_temperature_payload(self):
        sensor = FakeSensor("9", "Hall", "ZLLTemperature", temperature=1900, lastupdated="2025-03-01T12:00:00")
        publish = AsyncMock()
        device = TemperatureSensorDevice(sensor, "hue/temperature/hall", "9", publish)

        sensor.state.update(temperature=2000, lastupdated="2025-03-01T12:10:00")
        await device.trigger_update()

        assert json.loads(publish.await_args.args[0].payload)["temperature"] == 20.0


# ===========================================================================
# Commands
# ===========================================================================
class TestLightApply:
    @pytest.mark.asyncio
    async def test_handles_own_set_topic(self):
        device, light, _ = _light_device(on=False)

        handled = await device.apply(InboundMessage("hue/light/kitchen/ceiling/set", '{"state": "ON", "brightness": 50}'))

        assert handled is True
        assert light.calls == [{"on": True, "bri": 50}]

    @pytest.mark.asyncio
    async def test_ignores_other_topics(self):
        device, light, _ = _light_device(on=False)

        assert await device.apply(InboundMessage("hue/light/kitchen/other/set", '{"state": "ON"}')) is False
        assert await device.apply(InboundMessage("hue/light/kitchen/ceiling", '{"state": "ON"}')) is False
        assert light.calls == []

    @pytest.mark.asyncio
    async def test_malformed_payload_is_claimed_and_dropped(self):
        device, light, _ = _light_device(on=False)

        handled = await device.apply(InboundMessage("hue/light/kitchen/ceiling/set", "garbage"))

        assert handled is True
        assert light.calls == []

    @pytest.mark.asyncio
    async def test_sensors_never_handle_commands(self):
        sensor = FakeSensor("7", "Hall", "ZLLPresence")
        device = PresenceSensorDevice(sensor, "hue/presence/hall", "7", AsyncMock())

        assert await device.apply(InboundMessage("hue/presence/hall/set", '{"presence": true}')) is False
