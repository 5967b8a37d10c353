# Filename: leaderboard_display.py

import asyncio
import logging
import sys
from typing import List, TextIO

from leaderboard import Leaderboard
from models import LeaderboardEntry

logger = logging.getLogger("LeaderboardDisplay")

CLEAR_SCREEN = "\033[2J\033[H"


def format_leaderboard(entries: List[LeaderboardEntry]) -> str:
    lines = [
        "📊 Top tokens by net buy volume",
        f"{'#':>3}  {'Symbol':<12} {'Name':<24} {'Market Cap':>14} {'Net Buy SOL':>12}",
    ]
    for rank, entry in enumerate(entries, start=1):
        lines.append(
            f"{rank:>3}  {entry.symbol[:12]:<12} {entry.name[:24]:<24} "
            f"${entry.market_cap:>13,.0f} {entry.net_buy_volume:>+12.3f}"
        )
    if not entries:
        lines.append("  (waiting for trades)")
    return "\n".join(lines)


class LeaderboardDisplay:
    """Redraws the top of the leaderboard on its own cadence; read-only."""

    def __init__(self, leaderboard: Leaderboard, size: int = 20, interval: float = 1.0,
                 out: TextIO = sys.stdout):
        self.leaderboard = leaderboard
        self.size = size
        self.interval = interval
        self.out = out

    def render(self):
        self.out.write(CLEAR_SCREEN + format_leaderboard(self.leaderboard.snapshot(self.size)) + "\n")
        self.out.flush()

    async def run(self):
        while True:
            try:
                self.render()
            except OSError as e:
                logger.error(f"[Display Error] {e}")
            await asyncio.sleep(self.interval)
