"""
Keepalive Monitor

Periodically checks the WebSocket and pings it while it is open. When the
transport reports itself closed at probe time, the monitor stops and calls
its failure handler so the connection manager can reconnect.

Pong replies are not timed: a connection that stays open at the transport
level but never answers is not detected here.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from core.logging import get_logger


class KeepaliveMonitor:
    """
    Fixed-period liveness probe.

    Args:
        interval: Seconds between probes
        is_open: Returns True while the transport is open
        ping: Sends one ping frame
        on_failure: Called once when a probe finds the transport closed
    """

    def __init__(
        self,
        interval: float,
        is_open: Callable[[], bool],
        ping: Callable[[], Awaitable[None]],
        on_failure: Callable[[], None],
    ) -> None:
        self.interval = interval
        self._is_open = is_open
        self._ping = ping
        self._on_failure = on_failure
        self._task: Optional[asyncio.Task] = None
        self.pings_sent = 0
        self.logger = get_logger(__name__)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="gateio_keepalive")

    def stop(self) -> None:
        """Cancel the probe task. Safe to call repeatedly."""
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)

            if not self._is_open():
                self.logger.warning("Keepalive found the connection closed; forcing reconnect")
                self._task = None
                self._on_failure()
                return

            try:
                await self._ping()
                self.pings_sent += 1
            except (ConnectionError, RuntimeError) as e:
                # The reader notices a dead transport on its own
                self.logger.warning(f"Keepalive ping failed: {e}")
