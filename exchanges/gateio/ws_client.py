"""
Gate.io Ticker WebSocket Client

This module owns the single streaming connection to the Gate.io spot
`spot.tickers` channel and turns its frames into `updateRate` events.

It handles:
- Loading the pair list once at startup (with a fixed fallback list)
- Connecting, subscribing and keeping the connection alive
- Two-tier reconnect backoff (short delay, then long delay), forever
- Normalizing ticker frames and tracking per-pair price deltas
- Publishing normalized rates through the configured sink
- Idempotent shutdown

Connection lifecycle:
    CLOSED -> CONNECTING -> OPEN -> CLOSING -> CLOSED -> (delay) -> CONNECTING ...

WebSocket Documentation:
    https://www.gate.io/docs/developers/apiv4/ws/en/#tickers-channel

Usage:
    publisher = RatePublisher(build_rate_sink(bus=bus), source_id="gateio")
    async with GateioTickerClient(publisher) as client:
        await asyncio.sleep(60)
"""

import aiohttp
import asyncio
import json
from typing import Any, Dict, Iterable, List, Optional

from core.config import settings
from core.logging import get_logger, log_websocket_event
from core.rate_publisher import RatePublisher
from core.schemas import ConnectionState
from core.utils.time import current_utc_timestamp
from exchanges.gateio.api_client import GateioAPIClient
from exchanges.gateio.display import format_price_line, table_header
from exchanges.gateio.keepalive import KeepaliveMonitor
from exchanges.gateio.normalizer import TICKER_CHANNEL, TickerNormalizer


class ReconnectBackoff:
    """
    Two-tier reconnect delay.

    The attempt counter starts at 1, is bumped before every reconnect
    (saturating at `max_attempts`) and goes back to 1 on every successful
    open. Attempts up to `short_attempts` wait `short_delay`; later ones
    wait `long_delay`.

    Example:
        >>> backoff = ReconnectBackoff()
        >>> [backoff.next_delay() for _ in range(4)]
        [2.0, 2.0, 2.0, 30.0]
    """

    MIN_ATTEMPTS = 1

    def __init__(
        self,
        short_delay: Optional[float] = None,
        long_delay: Optional[float] = None,
        short_attempts: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        self.short_delay = short_delay if short_delay is not None else settings.reconnect_short_delay
        self.long_delay = long_delay if long_delay is not None else settings.reconnect_long_delay
        self.short_attempts = short_attempts if short_attempts is not None else settings.reconnect_short_attempts
        self.max_attempts = max_attempts if max_attempts is not None else settings.reconnect_max_attempts
        self.attempts = self.MIN_ATTEMPTS

    def reset(self) -> None:
        self.attempts = self.MIN_ATTEMPTS

    def delay_for(self, attempt: int) -> float:
        return self.short_delay if attempt <= self.short_attempts else self.long_delay

    def next_delay(self) -> float:
        """Record one more failure and return how long to wait."""
        self.attempts = min(self.attempts + 1, self.max_attempts)
        return self.delay_for(self.attempts)


def build_subscribe_message(symbols: List[str]) -> Dict[str, Any]:
    """
    Build the `spot.tickers` subscription request.

    Example:
        >>> build_subscribe_message(["BTC_USDT"])["payload"]
        ['BTC_USDT']
    """
    return {
        "time": current_utc_timestamp(milliseconds=True),
        "channel": TICKER_CHANNEL,
        "event": "subscribe",
        "payload": list(symbols),
    }


class GateioTickerClient:
    """
    Connection manager for the Gate.io ticker stream.

    Attributes:
        publisher: Destination for normalized rates
        symbols: Pairs to subscribe to (loaded once by start())
        ignore_symbols: Pairs filtered out of every subscription
        state: Current ConnectionState
        backoff: Reconnect attempt counter and delay policy
        normalizer: Frame parser holding the per-pair previous price
        keepalive: Liveness probe, running only while OPEN

    Notes:
        - One transport at a time; a reconnect tears down keepalive and the
          old socket before the next connect
        - Nothing on the connection path raises to the caller
        - stop() may be called any number of times
    """

    EXCHANGE = "gateio"

    def __init__(
        self,
        publisher: RatePublisher,
        symbols: Optional[Iterable[str]] = None,
        ignore_symbols: Optional[Iterable[str]] = None,
        ws_url: Optional[str] = None,
        keepalive_interval: Optional[float] = None,
        backoff: Optional[ReconnectBackoff] = None,
        print_updates: Optional[bool] = None,
    ):
        self.publisher = publisher
        self.symbols: List[str] = list(symbols) if symbols is not None else []
        self.ignore_symbols = set(ignore_symbols if ignore_symbols is not None else settings.ignore_symbols_list)
        self.ws_url = ws_url or settings.gateio_ws_url
        self.print_updates = settings.print_price_updates if print_updates is None else print_updates

        self.backoff = backoff or ReconnectBackoff()
        self.normalizer = TickerNormalizer()
        self.keepalive = KeepaliveMonitor(
            interval=keepalive_interval or settings.keepalive_interval,
            is_open=self._transport_open,
            ping=self._ping,
            on_failure=self._on_keepalive_failure,
        )

        # Connection state
        self.state = ConnectionState.CLOSED
        self.session: Optional[aiohttp.ClientSession] = None
        self.ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._running = False
        self._run_task: Optional[asyncio.Task] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._skip_backoff = False

        # Stats
        self.updates_received = 0
        self.reconnects = 0

        self.logger = get_logger(__name__)

    # ============================================
    # Context Manager
    # ============================================

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    @property
    def is_running(self) -> bool:
        return self._running

    # ============================================
    # Startup / Shutdown
    # ============================================

    async def load_symbols(self) -> List[str]:
        """
        Fetch tradable pairs, falling back to the configured defaults.

        The fallback is used when the request fails or the endpoint does
        not answer with a usable JSON array of pair strings.
        """
        try:
            async with GateioAPIClient() as api:
                self.symbols = await api.get_trading_pairs()
        except (RuntimeError, ValueError, aiohttp.ClientError) as e:
            self.logger.error(f"Failed to fetch trading pairs: {e}")
            self.symbols = settings.default_symbols_list
            self.logger.info(f"Using default trading pairs: {', '.join(self.symbols)}")
        return self.symbols

    async def start(self) -> None:
        """
        Load pairs (unless given) and launch the connection loop.

        Only the pairs request is awaited; connecting happens in the background.
        """
        if self._running:
            return
        self._running = True
        try:
            if not self.symbols:
                await self.load_symbols()
            self.session = aiohttp.ClientSession()
            self._run_task = asyncio.create_task(self._run(), name="gateio_ticker")
        except Exception as e:
            self.logger.error(f"Failed to initialize Gate.io ticker client: {e}")
            await self.stop()

    async def stop(self) -> None:
        """
        Cancel keepalive and any pending reconnect, close socket and session.

        Safe to call from startup failure, explicit shutdown and __aexit__.
        """
        self._running = False
        self.keepalive.stop()

        task, self._run_task = self._run_task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        if self.ws is not None and not self.ws.closed:
            await self.ws.close()
        self.ws = None

        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None

        self._set_state(ConnectionState.CLOSED)
        self.logger.debug("Gate.io ticker client stopped")

    # ============================================
    # Connection Loop
    # ============================================

    async def _run(self) -> None:
        while self._running:
            await self._connect_once()
            if not self._running:
                break

            if self._skip_backoff:
                self._skip_backoff = False
                self.reconnects += 1
                continue

            delay = self.backoff.next_delay()
            log_websocket_event(
                self.EXCHANGE, "reconnecting",
                details=f"in {delay:g}s (attempt {self.backoff.attempts})"
            )
            await self._wait_before_reconnect(delay)
            self.reconnects += 1

        self.logger.info("Gate.io ticker loop stopped")

    async def _wait_before_reconnect(self, delay: float) -> None:
        await asyncio.sleep(delay)

    async def _connect_once(self) -> None:
        """One CONNECTING -> OPEN -> CLOSED cycle. Never raises except on cancel."""
        self._set_state(ConnectionState.CONNECTING)
        self.logger.info(f"Connecting to {self.ws_url}")

        try:
            self.ws = await self.session.ws_connect(self.ws_url, autoping=True)
        except asyncio.CancelledError:
            self._set_state(ConnectionState.CLOSED)
            raise
        except Exception as e:
            log_websocket_event(self.EXCHANGE, "error", details=f"Failed to connect: {e}")
            self.ws = None
            self._set_state(ConnectionState.CLOSED)
            return

        try:
            await self._handle_open()
            reader = asyncio.create_task(self._read_frames(self.ws), name="gateio_reader")
            self._reader_task = reader
            try:
                await asyncio.wait({reader})
            finally:
                if not reader.done():
                    reader.cancel()
                self._reader_task = None
        except Exception as e:
            log_websocket_event(self.EXCHANGE, "error", details=str(e))
        finally:
            await self._handle_close()

    async def _read_frames(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        try:
            async for msg in ws:
                if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                    self.handle_message(msg.data)

                elif msg.type == aiohttp.WSMsgType.CLOSED:
                    break

                elif msg.type == aiohttp.WSMsgType.ERROR:
                    log_websocket_event(self.EXCHANGE, "error", details=str(ws.exception() or msg.data))
                    break

                # Ping/Pong handled by aiohttp
                else:
                    self.logger.debug(f"Received message type: {msg.type}")

        except Exception as e:
            log_websocket_event(self.EXCHANGE, "error", details=str(e))

    async def _handle_open(self) -> None:
        self._set_state(ConnectionState.OPEN)
        log_websocket_event(self.EXCHANGE, "connected")
        self.backoff.reset()
        self.keepalive.start()
        await self.subscribe()

        if self.print_updates:
            for line in table_header():
                self.logger.info(line)

    async def _handle_close(self) -> None:
        if self.state == ConnectionState.CLOSED:
            return
        self._set_state(ConnectionState.CLOSING)
        self.keepalive.stop()

        ws = self.ws
        if ws is not None and not ws.closed:
            try:
                await ws.close()
            except Exception as e:
                self.logger.debug(f"Error while closing WebSocket: {e}")
        self.ws = None

        self._set_state(ConnectionState.CLOSED)
        log_websocket_event(self.EXCHANGE, "closed")

    def _set_state(self, state: ConnectionState) -> None:
        if state != self.state:
            self.logger.debug(f"Connection state {self.state.value} -> {state.value}")
            self.state = state

    # ============================================
    # Keepalive Hooks
    # ============================================

    def _transport_open(self) -> bool:
        return self.ws is not None and not self.ws.closed

    async def _ping(self) -> None:
        if self.ws is not None:
            await self.ws.ping()

    def _on_keepalive_failure(self) -> None:
        """Reconnect right away; the attempt counter is left alone."""
        # A finished reader is already on the normal close path
        if self._reader_task is not None and not self._reader_task.done():
            self._skip_backoff = True
            self._reader_task.cancel()

    # ============================================
    # Subscription and Messages
    # ============================================

    def subscription_symbols(self) -> List[str]:
        return [s for s in self.symbols if s not in self.ignore_symbols]

    async def subscribe(self) -> None:
        """Send one subscription request for every non-ignored pair."""
        valid_symbols = self.subscription_symbols()

        if not valid_symbols:
            self.logger.error("No valid symbols to subscribe to.")
            return

        await self.ws.send_str(json.dumps(build_subscribe_message(valid_symbols)))
        self.logger.info(f"Subscribed to price updates for {len(valid_symbols)} pairs")

    def handle_message(self, data) -> None:
        """Normalize one frame and publish its rate. Never raises."""
        try:
            update = self.normalizer.normalize(data)
            if update is None:
                return

            self.updates_received += 1
            if self.print_updates:
                self.logger.info(format_price_line(update))

            self.publisher.publish(update.rate)
        except Exception as e:
            self.logger.error(f"Error processing message: {e}")
