# Filename: forwarder.py

import asyncio
import logging
from typing import Optional, Set

import aiohttp

from models import PumpBuyRequest

logger = logging.getLogger("Forwarder")


class ForwardError(Exception):
    """The sniper could not be reached or answered with a non-success status."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class Forwarder:
    """
    Fire-and-forget delivery of accepted listings to the sniper's /pump-buy.

    `forward()` schedules the POST on the running loop and returns at once.
    Failures are logged with the target URL and dropped: no retry.
    """

    def __init__(self, base_url: str, timeout: float = 5.0,
                 session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip("/")
        self.url = f"{self.base_url}/pump-buy"
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._tasks: Set[asyncio.Task] = set()
        self.sent = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def forward(self, request: PumpBuyRequest) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._deliver(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, request: PumpBuyRequest):
        try:
            await self._post(request)
            self.sent += 1
            logger.info(f"[FORWARD] {request.mint} sent to {self.url}")
        except ForwardError as e:
            self.failed += 1
            logger.error(f"[FORWARD] {e.url} {e.reason}")

    async def _post(self, request: PumpBuyRequest):
        session = self._get_session()
        try:
            async with session.post(self.url, json=request.to_dict(), timeout=self.timeout) as response:
                if response.status >= 400:
                    raise ForwardError(self.url, f"HTTP {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ForwardError(self.url, repr(e)) from e

    async def close(self):
        """Wait for in-flight deliveries, then release the HTTP session we opened."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
