"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Dict, List

import pytest

NOW = 1_700_000_000.25


def make_frame(event: str, payload: Dict[str, Any]) -> str:
    return f'42["{event}",{json.dumps(payload)}]'


class FakeConnection:
    """Stands in for a websockets client connection."""

    def __init__(self, frames: List[Any], error: Exception = None):
        self._frames = list(frames)
        self._error = error
        self.sent: List[str] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def send(self, message: str):
        self.sent.append(message)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self._frames:
            yield frame
        if self._error is not None:
            raise self._error


class FakeResponse:
    def __init__(self, status: int):
        self.status = status

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeHTTPSession:
    """Records POSTs the way aiohttp.ClientSession.post would receive them."""

    def __init__(self, status: int = 200, error: Exception = None):
        self.status = status
        self.error = error
        self.posts: List[Dict[str, Any]] = []

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status)


@pytest.fixture
def listing_payload() -> Dict[str, Any]:
    return {
        "mint": "M1",
        "name": "Moon",
        "symbol": "MOON",
        "bonding_curve": "BC1",
        "associated_bonding_curve": "ABC1",
        "virtual_token_reserves": 1073000000000000,
        "virtual_sol_reserves": 30000000000,
        "real_token_reserves": 793100000000000,
        "real_sol_reserves": 0,
        "website": "w",
        "telegram": "t",
        "twitter": "x",
        "created_timestamp": int(NOW * 1000),
        "creator": "ignored-extra-field",
    }


@pytest.fixture
def trade_payload() -> Dict[str, Any]:
    return {
        "mint": "A",
        "signature": "sig-1",
        "sol_amount": 2_000_000_000,
        "token_amount": 35_000_000_000,
        "is_buy": True,
        "user": "ignored-extra-field",
        "timestamp": 1_700_000_000,
        "symbol": "AAA",
        "name": "Token A",
        "usd_market_cap": 100.0,
    }


@pytest.fixture
def connect_with():
    """Build a `connect` callable that hands out a prepared FakeConnection."""
    def factory(frames, error=None):
        conn = FakeConnection(frames, error)

        def connect(uri):
            conn.uri = uri
            return conn
        return conn, connect
    return factory
