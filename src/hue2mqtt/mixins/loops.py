# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
from __future__ import annotations

import asyncio
import signal

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hue2mqtt.interface import HueServiceProtocol as Hue2Mqtt


class LoopsMixin:
    async def poll_loop(self: Hue2Mqtt) -> None:
        try:
            await asyncio.sleep(self.poll_initial_delay)
        except asyncio.CancelledError:
            self.logger.debug("poll_loop cancelled before first poll")
            return

        while self.running:
            await self.poll()
            try:
                await asyncio.sleep(self.poll_interval)
            except asyncio.CancelledError:
                self.logger.debug("poll_loop cancelled during sleep")
                break

    async def scan_loop(self: Hue2Mqtt) -> None:
        # the first scan already happened in main_loop
        while self.running:
            try:
                await asyncio.sleep(self.scan_interval)
            except asyncio.CancelledError:
                self.logger.debug("scan_loop cancelled during sleep")
                break
            if self.running:
                await self.scan()

    async def heartbeat(self: Hue2Mqtt) -> None:
        while self.running:
            self.heartbeat_ready()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                self.logger.debug("heartbeat cancelled during sleep")
                break

    def cancel_loops(self: Hue2Mqtt) -> None:
        for task in self.tasks:
            if not task.done():
                task.cancel()

    # main loop
    async def main_loop(self: Hue2Mqtt) -> None:
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                signal.signal(sig, self._handle_signal)
            except Exception:
                self.logger.debug(f"cannot install handler for {sig}")

        await self.scan()
        self.running = True
        self.mark_ready()

        self.tasks = [
            asyncio.create_task(self.poll_loop(), name="poll_loop"),
            asyncio.create_task(self.scan_loop(), name="scan_loop"),
            asyncio.create_task(self.heartbeat(), name="heartbeat"),
        ]

        try:
            await asyncio.gather(*self.tasks)
        except asyncio.CancelledError:
            self.logger.warning("main loop cancelled - shutting down...")
        except Exception as err:
            self.logger.exception(f"unhandled exception in main loop: {err}")
            self.running = False
        finally:
            self.logger.info("all loops terminated - cleanup complete.")
