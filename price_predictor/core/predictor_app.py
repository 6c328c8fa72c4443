"""
Price Predictor Application
Wires the price poller, the session store and the console UI onto one event loop
"""

import asyncio
import logging
import random
import time
from typing import Optional

from price_predictor.config import Settings, get_settings
from price_predictor.core.session import SessionStore
from price_predictor.schemas import AppState, BucketSelected, ReselectRequested, Screen
from price_predictor.services.price_feed import CoinGeckoPriceClient, PollingHandle, PriceFeedPoller
from price_predictor.ui.console import ConsoleUI
from price_predictor.ui.input_reader import StdinReader

QUIT_COMMANDS = {"q", "quit", "exit"}
RESELECT_COMMANDS = {"r", "reselect"}


class PredictorApp:
    """Interactive price predictor session"""

    def __init__(self, settings: Optional[Settings] = None,
                 client: Optional[CoinGeckoPriceClient] = None,
                 ui: Optional[ConsoleUI] = None,
                 reader: Optional[StdinReader] = None,
                 rng: Optional[random.Random] = None):
        self.settings = settings or get_settings()
        self.logger = logging.getLogger("predictor_app")
        self.store = SessionStore(self.settings.TIMEFRAMES, rng=rng)
        self.client = client or CoinGeckoPriceClient(
            api_url=self.settings.PRICE_API_URL,
            asset_id=self.settings.ASSET_ID,
            vs_currency=self.settings.VS_CURRENCY,
            timeout=self.settings.REQUEST_TIMEOUT,
        )
        self.poller = PriceFeedPoller(
            self.client,
            self.store.dispatch,
            interval=self.settings.POLL_INTERVAL,
            symbol=self.settings.ASSET_SYMBOL,
        )
        self.ui = ui or ConsoleUI(self.settings)
        self.reader = reader or StdinReader()
        self._handle: Optional[PollingHandle] = None
        self._running = False

    @property
    def state(self) -> AppState:
        return self.store.state

    def resolve_bucket_key(self, text: str) -> Optional[str]:
        """Map a typed number or key to a bucket key"""
        buckets = self.store.buckets
        if text.isdecimal():
            index = int(text)
            if 1 <= index <= len(buckets):
                return buckets[index - 1].key
            return None
        for bucket in buckets:
            if text == bucket.key:
                return bucket.key
        return None

    def handle_command(self, line: str) -> bool:
        """Apply one line of user input; returns False when the user quits"""
        text = line.strip().lower()
        if not text:
            return True
        if text in QUIT_COMMANDS:
            return False

        state = self.store.state
        if state.screen == Screen.PREDICTION:
            if text in RESELECT_COMMANDS:
                self.store.dispatch(ReselectRequested())
            else:
                self.ui.print_warning(f"Unknown option '{line.strip()}'. Type 'r' to reselect or 'q' to quit.")
            return True

        if state.price is None:
            self.ui.print_warning("Price not available yet, please wait.")
            return True

        key = self.resolve_bucket_key(text)
        if key is None:
            self.ui.print_warning(f"Unknown timeframe '{line.strip()}'.")
            return True

        self.store.dispatch(BucketSelected(key=key))
        return True

    def _render(self, state: AppState) -> None:
        self.ui.render(state, self.store.buckets)

    async def start(self) -> None:
        self.logger.info("🚀 Starting price predictor")
        self._running = True
        self.store.subscribe(self._render)
        self._render(self.store.state)
        self._handle = self.poller.start()
        self.reader.start()

    async def stop(self) -> None:
        if not self._running:
            return
        stop_start = time.time()
        self._running = False
        self.reader.stop()
        try:
            if self._handle is not None:
                await self._handle.aclose()
        finally:
            await self.client.aclose()
        self.logger.info(
            f"✅ Price predictor stopped (Time: {time.time() - stop_start:.3f}s) | {self.poller.get_stats()}"
        )

    async def run(self) -> None:
        """Run until the user quits or input ends"""
        await self.start()
        try:
            while self._running:
                line = await self.reader.readline()
                if line is None:
                    self.logger.info("🛑 End of input")
                    break
                if not self.handle_command(line):
                    break
        finally:
            await self.stop()


async def fetch_once(settings: Optional[Settings] = None,
                     client: Optional[CoinGeckoPriceClient] = None):
    """Fetch a single price sample; raises FeedUnavailable on failure"""
    settings = settings or get_settings()
    client = client or CoinGeckoPriceClient(
        api_url=settings.PRICE_API_URL,
        asset_id=settings.ASSET_ID,
        vs_currency=settings.VS_CURRENCY,
        timeout=settings.REQUEST_TIMEOUT,
    )
    async with client:
        return await client.fetch_price()
