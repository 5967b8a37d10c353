# Filename: filters.py

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger

from models import NewListingEvent, PumpBuyRequest

# Rendering used to decide whether a listing arrived "on time"
FRESHNESS_FORMAT = "%Y-%m-%d %H:%M:%S"

ACCEPTED = "accepted"
INCOMPLETE = "incomplete"
DUPLICATE_LINKS = "duplicate_links"


@dataclass(frozen=True)
class FilterDecision:
    accepted: bool
    reason: str
    late: bool = False


class ListingFilter:
    def __init__(self):
        self.filter_stats = {
            INCOMPLETE: 0,
            DUPLICATE_LINKS: 0,
            "late": 0,
        }

    def evaluate(self, coin: NewListingEvent, now: Optional[float] = None) -> FilterDecision:
        """
        Decide whether a new listing should be sent to the sniper.

        Checks run in order; the first failing one discards the listing.
        Lateness is only reported, it never discards on its own.
        """
        now = time.time() if now is None else now

        late = not self.freshness_filter(coin, now)
        if late:
            self.filter_stats["late"] += 1

        if not self.completeness_filter(coin):
            self.filter_stats[INCOMPLETE] += 1
            return FilterDecision(False, INCOMPLETE, late)

        if not self.diversity_filter(coin):
            self.filter_stats[DUPLICATE_LINKS] += 1
            return FilterDecision(False, DUPLICATE_LINKS, late)

        logger.info(f"[FILTER ✅] {coin.mint}: has telegram, twitter and website{'' if late else ', on time too!'}")
        return FilterDecision(True, ACCEPTED, late)

    def freshness_filter(self, coin: NewListingEvent, now: float) -> bool:
        created_at = datetime.fromtimestamp(coin.created_timestamp / 1000).strftime(FRESHNESS_FORMAT)
        current = datetime.fromtimestamp(now).strftime(FRESHNESS_FORMAT)
        logger.debug(f"[FILTER] {coin.mint}: got info {int(now * 1000) - coin.created_timestamp} ms after creation")
        if created_at != current:
            logger.debug(f"[FILTER ❌] {coin.mint}: Too late (created {created_at}, now {current})")
            return False
        return True

    def completeness_filter(self, coin: NewListingEvent) -> bool:
        if not coin.website or not coin.telegram or not coin.twitter:
            logger.debug(f"[FILTER ❌] {coin.mint}: No telegram or twitter or website, skipping")
            return False
        return True

    def diversity_filter(self, coin: NewListingEvent) -> bool:
        if len({coin.website, coin.telegram, coin.twitter}) == 1:
            logger.debug(f"[FILTER ❌] {coin.mint}: Website, telegram and twitter are the same, skipping")
            return False
        return True

    def get_filter_statistics(self):
        return dict(self.filter_stats)

    def reset_filter_statistics(self):
        for key in self.filter_stats:
            self.filter_stats[key] = 0


def build_buy_request(coin: NewListingEvent) -> PumpBuyRequest:
    return PumpBuyRequest(
        mint=coin.mint,
        bonding_curve=coin.bonding_curve,
        associated_bonding_curve=coin.associated_bonding_curve,
        virtual_token_reserves=str(coin.virtual_token_reserves),
        virtual_sol_reserves=str(coin.virtual_sol_reserves),
        real_token_reserves=str(coin.real_token_reserves),
        real_sol_reserves=str(coin.real_sol_reserves),
    )
