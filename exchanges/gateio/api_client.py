"""
Gate.io REST API Client

This module provides an async HTTP client for the one Gate.io REST call
the rate streamer needs: the list of tradable spot pairs used to build the
ticker subscription.

It handles:
- HTTP requests with retry logic
- Rate limit handling (429, 418, 503 errors)
- Error handling and logging
- Pair normalization to Gate.io spot notation (BASE_QUOTE)

Usage:
    async with GateioAPIClient() as client:
        pairs = await client.get_trading_pairs()
"""

import aiohttp
import asyncio
import time
from typing import Any, Dict, List, Optional
from core.config import settings
from core.logging import get_logger, log_api_request, log_api_response
from core.utils.pairs import is_valid_pair, normalize_pair


class GateioAPIClient:
    """
    Async HTTP client for the Gate.io pairs endpoint.

    Attributes:
        pairs_url: Endpoint returning a JSON array of pair strings
        timeout: Per-request timeout in seconds
        session: aiohttp ClientSession for HTTP requests

    Example:
        >>> async with GateioAPIClient() as client:
        ...     pairs = await client.get_trading_pairs()
        ...     print(f"Fetched {len(pairs)} pairs")
    """

    def __init__(self, pairs_url: Optional[str] = None, timeout: Optional[int] = None):
        self.pairs_url = pairs_url or settings.gateio_pairs_url
        self.timeout = timeout or settings.request_timeout
        self.logger = get_logger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    # ============================================
    # Context Manager for Session Management
    # ============================================

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        self.logger.debug("GateioAPIClient session created")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.logger.debug("GateioAPIClient session closed")

    # ============================================
    # HTTP Request Handler with Retry Logic
    # ============================================

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make GET request with retry logic (max 3 attempts).

        Rate Limit Handling:
            - 429 / 418 / 503: retry after 1.5s * (attempt + 1)
            - Timeouts and network errors: retry after 1.0s * (attempt + 1)
            - Any other status: give up immediately

        Returns:
            Decoded JSON response

        Raises:
            RuntimeError: If session not initialized or all attempts failed
        """
        if not self.session:
            raise RuntimeError("Client session not initialized. Use 'async with' statement.")

        for attempt in range(3):
            log_api_request("gateio", url, params)
            started = time.monotonic()
            try:
                async with self.session.get(
                    url,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    log_api_response("gateio", url, resp.status, time.monotonic() - started)

                    if resp.status == 200:
                        # The pairs endpoint does not always send application/json
                        return await resp.json(content_type=None)

                    elif resp.status in (429, 418, 503):
                        delay = 1.5 * (attempt + 1)
                        self.logger.warning(
                            f"Rate limited (HTTP {resp.status}) on {url}. "
                            f"Retrying in {delay:.1f}s... (attempt {attempt + 1}/3)"
                        )
                        await asyncio.sleep(delay)
                        continue

                    else:
                        text = await resp.text()
                        self.logger.error(f"HTTP {resp.status} on {url}: {text[:200]}")
                        break

            except asyncio.TimeoutError:
                self.logger.error(f"Timeout on {url} (attempt {attempt + 1}/3)")
                await asyncio.sleep(1.0 * (attempt + 1))

            except aiohttp.ClientError as e:
                self.logger.error(f"Request failed on {url}: {e} (attempt {attempt + 1}/3)")
                await asyncio.sleep(1.0 * (attempt + 1))

        raise RuntimeError(f"Failed to fetch {url} after 3 attempts")

    # ============================================
    # API Methods
    # ============================================

    async def get_trading_pairs(self) -> List[str]:
        """
        Fetch every tradable spot pair.

        Returns:
            Pairs in BASE_QUOTE notation, invalid entries dropped

        Raises:
            RuntimeError: If the request fails
            ValueError: If the response is not a JSON array of strings, or
                none of a non-empty array's entries is a valid pair
        """
        data = await self._get(self.pairs_url)

        if not isinstance(data, list):
            raise ValueError("Invalid response format from pairs API")

        pairs = []
        for raw in data:
            if not isinstance(raw, str):
                raise ValueError(f"Invalid pair entry from pairs API: {raw!r}")
            pair = normalize_pair(raw)
            if is_valid_pair(pair):
                pairs.append(pair)
            else:
                self.logger.debug(f"Skipping malformed pair from pairs API: {raw!r}")

        if data and not pairs:
            raise ValueError("No valid pairs in response from pairs API")

        self.logger.info(f"Fetched {len(pairs)} trading pairs")
        return pairs
