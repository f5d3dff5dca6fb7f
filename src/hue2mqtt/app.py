# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
#!/usr/bin/env python3
import asyncio
import argparse
import logging
from .mixins.helpers import ConfigError
from .mixins.mqtt import MqttError
from .core import Hue2Mqtt


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hue2mqtt", exit_on_error=True)
    p.add_argument(
        "-c",
        "--config",
        help="Directory or file path for config.yaml (defaults to /config/config.yaml)",
    )
    return p


def setup_logging() -> None:
    logging.basicConfig(
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=logging.INFO,
    )


async def async_main() -> int:
    setup_logging()
    logger = logging.getLogger(__name__)

    parser = build_parser()
    args = parser.parse_args()

    try:
        async with Hue2Mqtt(args=args) as hue2mqtt:
            await hue2mqtt.main_loop()
    except ConfigError as err:
        logger.error(f"Fatal config error was found: {err}")
        return 1
    except MqttError as err:
        logger.error(f"MQTT service problems: {err}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Shutdown requested (Ctrl+C). Exiting gracefully...")
        return 1
    except asyncio.CancelledError:
        logger.warning("Main loop cancelled.")
        return 1
    except Exception as err:
        logger.error(f"Unhandled exception: {err}", exc_info=True)
        return 1
    finally:
        logger.info("hue2mqtt stopped.")

    return 0


def main() -> int:
    return asyncio.run(async_main())
