import logging
from typing import AsyncIterator, Callable, Optional

import websockets
from websockets.exceptions import WebSocketException

from config import DEFAULT_CONFIG

logger = logging.getLogger("WebSocketListener")

# socket.io control frames
HANDSHAKE_FRAME = "40"
PING_FRAME = "2"
PONG_FRAME = "3"


class TransportError(Exception):
    """The feed connection failed or was closed abnormally."""


class FeedSession:
    """
    One connection to the pump.fun socket.io feed.

    `frames()` acks the handshake, answers heartbeats and yields every other
    text frame verbatim. It ends on a clean close and raises TransportError on
    anything else. Reconnecting is the caller's business: build a new session.
    """

    def __init__(self, uri: Optional[str] = None, connect: Callable = websockets.connect):
        self.uri = uri or DEFAULT_CONFIG["FEED_URL"]
        self._connect = connect
        self.heartbeats = 0

    async def frames(self) -> AsyncIterator[str]:
        try:
            async with self._connect(self.uri) as ws:
                logger.info("[WS] Connection established")
                await ws.send(HANDSHAKE_FRAME)
                async for raw_msg in ws:
                    if isinstance(raw_msg, bytes):
                        raw_msg = raw_msg.decode("utf-8", errors="replace")
                    if raw_msg == PING_FRAME:
                        await ws.send(PONG_FRAME)
                        self.heartbeats += 1
                        logger.debug("[WS] Heartbeat sent")
                        continue
                    yield raw_msg
        except (WebSocketException, OSError) as e:
            logger.error(f"[WS] Connection error: {e}")
            raise TransportError(str(e)) from e
        logger.info("[WS] Connection closed")
