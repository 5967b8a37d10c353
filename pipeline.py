# pipeline.py

import logging
from typing import Optional

from filters import ListingFilter, build_buy_request
from forwarder import Forwarder
from frame_decoder import DecodeError, FrameKind, classify, decode
from leaderboard import Leaderboard
from models import NewListingEvent, TradeEvent
from websocket_listener import FeedSession

logger = logging.getLogger("FeedPipeline")


class FeedPipeline:
    """
    Routes feed frames one at a time: listings go through the filter to the
    forwarder, trades go to the leaderboard (or to the log in raw mode).
    """

    def __init__(self, session: FeedSession,
                 forwarder: Optional[Forwarder] = None,
                 leaderboard: Optional[Leaderboard] = None,
                 listing_filter: Optional[ListingFilter] = None,
                 filter_enabled: bool = True,
                 leaderboard_mode: bool = False,
                 handle_listings: bool = True,
                 handle_trades: bool = True):
        self.session = session
        self.forwarder = forwarder
        self.leaderboard = leaderboard if leaderboard is not None else Leaderboard()
        self.listing_filter = listing_filter or ListingFilter()
        self.filter_enabled = filter_enabled
        self.leaderboard_mode = leaderboard_mode
        self.handle_listings = handle_listings
        self.handle_trades = handle_trades
        self.stats = {
            "frames": 0,
            "listings": 0,
            "trades": 0,
            "forwarded": 0,
            "decode_errors": 0,
            "ignored": 0,
        }

    def wants(self, kind: FrameKind) -> bool:
        """Listing or trade frames this pipeline is not set up for are dropped undecoded."""
        if kind is FrameKind.NEW_LISTING:
            return self.handle_listings
        if kind is FrameKind.TRADE:
            return self.handle_trades
        return False

    async def run(self):
        """Consume the session until it closes. TransportError propagates."""
        async for frame in self.session.frames():
            self.handle_frame(frame)

    def handle_frame(self, frame: str):
        self.stats["frames"] += 1
        if not self.wants(classify(frame)):
            self.stats["ignored"] += 1
            return
        try:
            event = decode(frame)
        except DecodeError as e:
            self.stats["decode_errors"] += 1
            logger.warning(f"Skipping malformed {e.event} frame: {e.reason}")
            return

        if isinstance(event, NewListingEvent):
            self.stats["listings"] += 1
            self.handle_listing(event)
        elif isinstance(event, TradeEvent):
            self.stats["trades"] += 1
            self.handle_trade(event)

    def handle_listing(self, coin: NewListingEvent):
        if not self.filter_enabled:
            logger.info(f"New listing {coin.mint} (website={coin.website}, telegram={coin.telegram}, x={coin.twitter})")
            return

        decision = self.listing_filter.evaluate(coin)
        if not decision.accepted:
            return

        if self.forwarder is None:
            logger.info(f"Accepted {coin.mint}, no sniper configured")
            return

        self.forwarder.forward(build_buy_request(coin))
        self.stats["forwarded"] += 1

    def handle_trade(self, trade: TradeEvent):
        if self.leaderboard_mode:
            self.leaderboard.update(trade)
            return

        logger.info({
            "signature": trade.signature,
            "sol_amount": trade.sol_amount,
            "token_amount": trade.token_amount,
            "is_buy": trade.is_buy,
            "timestamp": trade.timestamp,
            "name": trade.name,
            "symbol": trade.symbol,
            "usd_market_cap": trade.usd_market_cap,
        })
