# Filename: models.py

from dataclasses import dataclass, asdict
from typing import Optional

from pydantic import BaseModel, ConfigDict

LAMPORTS_PER_SOL = 1_000_000_000


class FeedEvent(BaseModel):
    """
    Base schema for payloads decoded from the pump.fun feed.
    Strict: values are never coerced, a mismatched type is a validation error.
    Keys the feed sends that we don't model are ignored.
    """
    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")


class NewListingEvent(FeedEvent):
    """A freshly created token announced on `newCoinCreated`."""
    mint: str
    bonding_curve: str
    associated_bonding_curve: str
    virtual_token_reserves: int      # smallest unit, arbitrary precision
    virtual_sol_reserves: int        # lamports
    real_token_reserves: int
    real_sol_reserves: int
    created_timestamp: int           # ms since epoch
    website: Optional[str] = None
    telegram: Optional[str] = None
    twitter: Optional[str] = None
    name: Optional[str] = None
    symbol: Optional[str] = None


class TradeEvent(FeedEvent):
    """A single buy or sell announced on `tradeCreated`."""
    mint: str
    signature: str
    sol_amount: int                  # lamports
    token_amount: int
    is_buy: bool
    timestamp: int                   # seconds since epoch
    symbol: str
    name: str
    usd_market_cap: Optional[float] = None

    @property
    def signed_sol(self) -> float:
        """SOL amount, positive for a buy and negative for a sell."""
        sol = self.sol_amount / LAMPORTS_PER_SOL
        return sol if self.is_buy else -sol


@dataclass(frozen=True)
class PumpBuyRequest:
    """
    Body of the POST sent to the sniper's /pump-buy endpoint.
    Reserves travel as decimal strings so no precision is lost on the other side.
    """
    mint: str
    bonding_curve: str
    associated_bonding_curve: str
    virtual_token_reserves: str
    virtual_sol_reserves: str
    real_token_reserves: str
    real_sol_reserves: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LeaderboardEntry:
    mint: str                        # Token mint address (key)
    symbol: str
    name: str
    market_cap: float                # latest USD market cap seen
    net_buy_volume: float = 0.0      # SOL, buys minus sells
    last_updated: int = 0            # trade timestamp, seconds
