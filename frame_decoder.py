# Filename: frame_decoder.py

import json
import logging
from enum import Enum
from typing import Optional, Union

from pydantic import ValidationError

from models import NewListingEvent, TradeEvent
from websocket_listener import PING_FRAME

logger = logging.getLogger("FrameDecoder")

NEW_COIN_EVENT = "newCoinCreated"
TRADE_EVENT = "tradeCreated"

# 42["<event>", <json>]
NEW_COIN_PREFIX = f'42["{NEW_COIN_EVENT}"'
TRADE_PREFIX = f'42["{TRADE_EVENT}"'

FeedEvent = Union[NewListingEvent, TradeEvent]


class FrameKind(Enum):
    HEARTBEAT = "heartbeat"
    NEW_LISTING = "new_listing"
    TRADE = "trade"
    UNKNOWN = "unknown"


class DecodeError(Exception):
    """A recognised event frame whose payload is malformed or fails validation."""

    def __init__(self, event: str, reason: str):
        super().__init__(f"{event}: {reason}")
        self.event = event
        self.reason = reason


def classify(frame: str) -> FrameKind:
    if frame == PING_FRAME:
        return FrameKind.HEARTBEAT
    if frame.startswith(NEW_COIN_PREFIX):
        return FrameKind.NEW_LISTING
    if frame.startswith(TRADE_PREFIX):
        return FrameKind.TRADE
    return FrameKind.UNKNOWN


def _extract_payload(frame: str, prefix: str, event: str) -> str:
    """Strip `42["<event>",` and the closing `]`, leaving the JSON object."""
    body = frame[len(prefix):].strip()
    if not body.startswith(",") or not body.endswith("]"):
        raise DecodeError(event, "malformed envelope")
    return body[1:-1]


def _parse(frame: str, prefix: str, event: str, schema):
    payload = _extract_payload(frame, prefix, event)
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise DecodeError(event, f"invalid JSON: {e}") from e
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise DecodeError(event, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e


def decode(frame: str) -> Optional[FeedEvent]:
    """
    Turn one raw frame into a typed event.

    Returns None for frames that are not listing or trade events (heartbeats,
    socket.io control frames, other event names). Raises DecodeError when a
    listing or trade frame can't be parsed or validated.
    """
    kind = classify(frame)
    if kind is FrameKind.NEW_LISTING:
        return _parse(frame, NEW_COIN_PREFIX, NEW_COIN_EVENT, NewListingEvent)
    if kind is FrameKind.TRADE:
        return _parse(frame, TRADE_PREFIX, TRADE_EVENT, TradeEvent)
    return None
