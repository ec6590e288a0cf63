"""
Rate Publisher: Pluggable Delivery of Normalized Rates

Every normalized rate leaves the streamer through exactly one RateSink,
chosen once when the publisher is built:

    - EventBusSink: publishes {"type": "updateRate", "source", "rate"} on the
      shared EventBus (topic "updateRate")
    - CallbackSink: calls callback("updateRate", source, rate)
    - NullSink: nothing configured; publishing is a silent no-op

Bus and callback consumers both receive the rate as
{"from", "to", "buy", "sell"}.

Delivery is synchronous and unbuffered. A slow or failing consumer is the
consumer's problem; exceptions from a sink propagate to the caller.

Example:
    publisher = RatePublisher(build_rate_sink(bus=bus), source_id="gateio")
    publisher.publish(rate)
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from core.logging import get_logger
from core.schemas import NormalizedRate

UPDATE_RATE_EVENT = "updateRate"

# Callbacks get the same {"from", "to", "buy", "sell"} payload bus subscribers see
RateCallback = Callable[[str, str, Dict[str, Any]], None]


class RateSink(ABC):
    """Destination for `updateRate` events."""

    @abstractmethod
    def emit(self, event: str, source_id: str, rate: NormalizedRate) -> None:
        ...


class EventBusSink(RateSink):
    """
    Publish rates on an EventBus.

    The event name doubles as the topic, so subscribers call
    `bus.subscribe("updateRate")`.
    """

    def __init__(self, bus) -> None:
        self.bus = bus

    def emit(self, event: str, source_id: str, rate: NormalizedRate) -> None:
        self.bus.publish_nowait(event, {
            "type": event,
            "source": source_id,
            "rate": rate.model_dump(by_alias=True),
        })


class CallbackSink(RateSink):
    """Hand rates to a caller-supplied function."""

    def __init__(self, callback: RateCallback) -> None:
        if not callable(callback):
            raise TypeError("callback must be callable")
        self.callback = callback

    def emit(self, event: str, source_id: str, rate: NormalizedRate) -> None:
        self.callback(event, source_id, rate.model_dump(by_alias=True))


class NullSink(RateSink):
    """Drop every rate."""

    def emit(self, event: str, source_id: str, rate: NormalizedRate) -> None:
        return None


def build_rate_sink(bus=None, callback: Optional[RateCallback] = None) -> RateSink:
    """
    Pick the sink for a publisher.

    Raises:
        ValueError: If both a bus and a callback are given
    """
    if bus is not None and callback is not None:
        raise ValueError("Configure either an event bus or a callback, not both")
    if bus is not None:
        return EventBusSink(bus)
    if callback is not None:
        return CallbackSink(callback)
    return NullSink()


class RatePublisher:
    """
    Deliver normalized rates tagged with a fixed source identifier.

    Attributes:
        sink: Where rates go
        source_id: Identifier attached to every event (e.g. "gateio")
        published: Number of rates handed to the sink
    """

    def __init__(self, sink: RateSink, source_id: str) -> None:
        self.sink = sink
        self.source_id = source_id
        self.published = 0
        self.logger = get_logger(__name__)
        self.logger.debug(f"RatePublisher for '{source_id}' using {type(sink).__name__}")

    def publish(self, rate: NormalizedRate) -> None:
        self.sink.emit(UPDATE_RATE_EVENT, self.source_id, rate)
        self.published += 1
