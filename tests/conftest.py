# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from typing import Any

import pytest


@pytest.fixture
def sample_hue_config() -> dict[str, Any]:
    """Return a minimal valid config dict for hue2mqtt."""
    return {
        "mqtt": {
            "host": "localhost",
            "port": 1883,
            "qos": 0,
            "username": "testuser",
            "password": "testpass",
            "tls_enabled": False,
            "prefix": "hue",
            "retain": False,
        },
        "hue": {
            "host": "192.168.1.2",
            "app_key": "test-app-key-12345",
            "poll_interval": 0.5,
            "poll_initial_delay": 1.5,
            "scan_interval": 3600,
        },
        "debug": False,
        "config_from": "test",
        "config_path": "/tmp",
        "version": "0.0.0-test",
    }
