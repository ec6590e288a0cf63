"""
Unit Tests for the Event Bus

Run with:
    pytest tests/unit/test_event_bus.py -v
"""

import pytest

from services.event_bus import EventBus


class TestEventBus:
    """Tests for topic-based pub/sub"""

    @pytest.mark.asyncio
    async def test_subscribe_and_publish(self):
        bus = EventBus()
        queue = await bus.subscribe("updateRate")

        await bus.publish("updateRate", {"n": 1})

        assert await queue.get() == {"n": 1}

    @pytest.mark.asyncio
    async def test_topics_are_isolated(self):
        bus = EventBus()
        queue = await bus.subscribe("updateRate")

        bus.publish_nowait("other", {"n": 1})

        assert queue.empty()

    @pytest.mark.asyncio
    async def test_full_queue_drops_event(self):
        bus = EventBus(max_queue_size=1)
        queue = await bus.subscribe("updateRate")

        assert bus.publish_nowait("updateRate", {"n": 1}) == 1
        assert bus.publish_nowait("updateRate", {"n": 2}) == 0
        assert queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_unsubscribe_drains_queue(self):
        bus = EventBus()
        queue = await bus.subscribe("updateRate")
        bus.publish_nowait("updateRate", {"n": 1})

        await bus.unsubscribe("updateRate", queue)

        assert queue.empty()
        assert bus.subscriber_count("updateRate") == 0
        assert bus.publish_nowait("updateRate", {"n": 2}) == 0
