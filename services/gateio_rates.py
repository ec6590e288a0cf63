"""
Gate.io Rate Service

Wires the Gate.io ticker client to the application event bus: rates are
published under topic 'updateRate' with source id 'gateio', and the
service keeps the latest rate per pair (in memory only) for the REST API.
"""

import asyncio
from typing import Any, Dict, Optional

from core.config import settings
from core.logging import get_logger
from core.rate_publisher import UPDATE_RATE_EVENT, RatePublisher, build_rate_sink
from exchanges.gateio import GateioTickerClient
from services.event_bus import EventBus, bus


class GateioRateService:
    """
    Background service running the Gate.io rate stream in bus mode.
    """

    def __init__(self, event_bus: Optional[EventBus] = None, client: Optional[GateioTickerClient] = None) -> None:
        self._logger = get_logger(__name__)
        self._bus = event_bus or bus
        self.publisher = RatePublisher(build_rate_sink(bus=self._bus), source_id=settings.rate_source_id)
        self.client = client or GateioTickerClient(self.publisher)
        self._latest: Dict[str, Dict[str, Any]] = {}
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def latest_rates(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._latest)

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._logger.info("Starting Gate.io rate service...")
        self._queue = await self._bus.subscribe(UPDATE_RATE_EVENT)
        self._task = asyncio.create_task(self._track_latest(self._queue), name="gateio_latest_rates")
        await self.client.start()

    async def stop(self) -> None:
        if not self._running:
            return
        self._logger.info("Stopping Gate.io rate service...")
        self._running = False
        await self.client.stop()
        if self._task:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        if self._queue is not None:
            await self._bus.unsubscribe(UPDATE_RATE_EVENT, self._queue)
            self._queue = None

    async def _track_latest(self, queue: asyncio.Queue) -> None:
        while True:
            event = await queue.get()
            if event.get("source") != self.publisher.source_id:
                continue
            rate = event["rate"]
            self._latest[f"{rate['from']}_{rate['to']}"] = rate


# Singleton access
_service: Optional[GateioRateService] = None


def get_gateio_rate_service() -> GateioRateService:
    global _service
    if _service is None:
        _service = GateioRateService()
        get_logger(__name__).debug("Created GateioRateService singleton")
    return _service
