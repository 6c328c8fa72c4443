"""
Background stdin reader feeding lines into the asyncio loop
"""

import asyncio
import logging
import sys
import threading
from typing import Optional, TextIO


class StdinReader:
    """Reads lines on a daemon thread so the event loop never blocks on input"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin
        self.logger = logging.getLogger("input")
        self._queue: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._read_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        # The thread may stay blocked in readline(); it is a daemon and exits with the process
        self._stop_event.set()

    async def readline(self) -> Optional[str]:
        """Next stripped line, or None at end of input"""
        return await self._queue.get()

    def _read_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                line = self.stream.readline()
            except (OSError, ValueError) as e:
                self.logger.error(f"❌ Error reading input: {e}")
                line = ""

            if self._stop_event.is_set():
                break
            if not line:
                self._push(None)
                break
            self._push(line.strip())

    def _push(self, item: Optional[str]) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed
            self._stop_event.set()
