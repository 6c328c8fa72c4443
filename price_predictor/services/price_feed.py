#!/usr/bin/env python3
"""
Price Feed Client and Poller
Fetches the current price of one asset from the CoinGecko simple price API
and republishes it on a fixed cadence until the polling handle is disposed
"""

import asyncio
import logging
import math
import time
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from price_predictor.config import get_feed_config
from price_predictor.exceptions import FeedUnavailable
from price_predictor.schemas import Action, FeedFailed, PriceReceived, PriceSample

FEED_ERROR_MESSAGE = "Could not fetch {symbol} price."


class CoinGeckoPriceClient:
    """Async client for the CoinGecko simple price endpoint"""

    def __init__(self, api_url: Optional[str] = None, asset_id: Optional[str] = None,
                 vs_currency: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        config = get_feed_config()
        self.api_url = api_url or config["api_url"]
        self.asset_id = asset_id or config["asset_id"]
        self.vs_currency = vs_currency or config["vs_currency"]
        self.timeout = timeout if timeout is not None else config["request_timeout"]
        self.logger = logging.getLogger("price_feed")
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_price(self) -> PriceSample:
        """Fetch the current price; raises FeedUnavailable on any failure"""
        params = {"ids": self.asset_id, "vs_currencies": self.vs_currency}
        start_time = time.time()

        try:
            self.logger.debug(f"🌐 GET {self.api_url} {params}")
            response = await self._client.get(self.api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            self.logger.error(f"❌ HTTP error {e.response.status_code} fetching {self.asset_id}")
            raise FeedUnavailable(f"HTTP {e.response.status_code}", e) from e
        except httpx.RequestError as e:
            self.logger.error(f"❌ Network error fetching {self.asset_id}: {e}")
            raise FeedUnavailable(f"Network error: {e}", e) from e
        except ValueError as e:
            self.logger.error(f"❌ Invalid JSON for {self.asset_id}: {e}")
            raise FeedUnavailable("Malformed response body", e) from e

        value = self._extract_price(payload)
        try:
            sample = PriceSample(value=value, observed_at=datetime.now(timezone.utc))
        except ValidationError as e:
            raise FeedUnavailable(f"Invalid price: {value!r}", e) from e

        execution_time = time.time() - start_time
        self.logger.info(f"✅ {self.asset_id}: ${value:,.4f} (Time: {execution_time:.3f}s)")
        return sample

    def _extract_price(self, payload) -> float:
        """Pull payload[asset][currency] out as a positive number"""
        try:
            value = payload[self.asset_id][self.vs_currency]
        except (KeyError, TypeError) as e:
            self.logger.error(f"❌ Unexpected payload shape: {str(payload)[:200]}")
            raise FeedUnavailable("Unexpected response shape", e) from e

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise FeedUnavailable(f"Price is not a number: {value!r}")
        if not math.isfinite(value):
            raise FeedUnavailable(f"Price is not finite: {value!r}")
        if value <= 0:
            raise FeedUnavailable(f"Price is not positive: {value!r}")
        return float(value)


class PollingHandle:
    """Owns a running poll loop; disposing it stops all further updates"""

    def __init__(self):
        self._task: Optional[asyncio.Task] = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def dispose(self) -> None:
        """Stop the timer and drop any in-flight result"""
        if self._disposed:
            return
        self._disposed = True
        if self._task and not self._task.done():
            self._task.cancel()

    async def aclose(self) -> None:
        """Dispose and wait for the loop to finish"""
        self.dispose()
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass


class PriceFeedPoller:
    """Polls the price client on a fixed interval and dispatches actions"""

    def __init__(self, client: CoinGeckoPriceClient, dispatch: Callable[[Action], object],
                 interval: Optional[float] = None, symbol: str = "EGLD"):
        self.client = client
        self.dispatch = dispatch
        self.interval = interval if interval is not None else get_feed_config()["poll_interval"]
        self.error_message = FEED_ERROR_MESSAGE.format(symbol=symbol)
        self.logger = logging.getLogger("price_poller")

        # Statistics
        self.success_count = 0
        self.failure_count = 0

    def start(self) -> PollingHandle:
        """Poll immediately, then every interval; must be called inside a running loop"""
        handle = PollingHandle()
        handle._task = asyncio.get_running_loop().create_task(self._run(handle))
        self.logger.info(f"🔄 Price polling started ({self.interval:g}s interval)")
        return handle

    async def poll_once(self, handle: Optional[PollingHandle] = None) -> Optional[Action]:
        """Fetch one price and dispatch the outcome unless the handle was disposed"""
        try:
            sample = await self.client.fetch_price()
            action = PriceReceived(sample=sample)
        except FeedUnavailable as e:
            self.logger.warning(f"⚠️ Price feed unavailable: {e}")
            action = FeedFailed(message=self.error_message)

        if handle is not None and handle.disposed:
            self.logger.debug("🛑 Poll result dropped after disposal")
            return None

        if isinstance(action, PriceReceived):
            self.success_count += 1
        else:
            self.failure_count += 1
        self.dispatch(action)
        return action

    async def _run(self, handle: PollingHandle) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        try:
            while not handle.disposed:
                await self.poll_once(handle)
                next_tick += self.interval
                # Skip ticks missed by a slow request instead of bursting
                while next_tick <= loop.time():
                    next_tick += self.interval
                await asyncio.sleep(next_tick - loop.time())
        except asyncio.CancelledError:
            self.logger.info("🛑 Price polling stopped")
            raise

    def get_stats(self) -> dict:
        return {
            "interval": self.interval,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
        }
