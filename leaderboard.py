# Filename: leaderboard.py

import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Dict, List, Optional

from models import LeaderboardEntry, TradeEvent

logger = logging.getLogger("Leaderboard")


class Leaderboard:
    """
    Per-mint running stats built from the trade stream.

    Entries are kept in least-recently-updated order so that, when
    `max_entries` is set, the stalest mint is the one dropped.
    Readers only ever get copies.
    """

    def __init__(self, max_entries: Optional[int] = None):
        # zero or negative means no bound
        self.max_entries = max_entries if max_entries and max_entries > 0 else None
        self._entries: "OrderedDict[str, LeaderboardEntry]" = OrderedDict()
        self.evicted = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, mint: str) -> bool:
        return mint in self._entries

    def update(self, trade: TradeEvent):
        if trade.usd_market_cap is None:
            return

        entry = self._entries.get(trade.mint)
        if entry is None:
            entry = LeaderboardEntry(
                mint=trade.mint,
                symbol=trade.symbol,
                name=trade.name,
                market_cap=trade.usd_market_cap,
            )
            self._entries[trade.mint] = entry
            self._evict()
        else:
            self._entries.move_to_end(trade.mint)

        entry.symbol = trade.symbol
        entry.name = trade.name
        entry.market_cap = trade.usd_market_cap
        entry.last_updated = trade.timestamp
        entry.net_buy_volume += trade.signed_sol

    def _evict(self):
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            mint, _ = self._entries.popitem(last=False)
            self.evicted += 1
            logger.debug(f"[LEADERBOARD] Evicted stale token {mint}")

    def get(self, mint: str) -> Optional[LeaderboardEntry]:
        entry = self._entries.get(mint)
        return replace(entry) if entry is not None else None

    def snapshot(self, n: int) -> List[LeaderboardEntry]:
        """Top `n` mints by net buy volume, highest first."""
        if n <= 0:
            return []
        ranked = sorted(self._entries.values(), key=lambda e: e.net_buy_volume, reverse=True)
        return [replace(entry) for entry in ranked[:n]]

    def get_statistics(self) -> Dict[str, int]:
        return {"tracked": len(self._entries), "evicted": self.evicted}
