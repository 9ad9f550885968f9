"""
Trade Log Module

Session list of confirmed trades. Trades are immutable and the list only
grows until it is cleared.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from fxrisk.risk.calculator import RiskResult, TradeSetup
from fxrisk.risk.portfolio_analytics import PendingTrade


@dataclass(frozen=True)
class Trade:
    """A confirmed, recorded trade."""
    id: int  # Creation time in milliseconds
    pair: str
    direction: str
    risk_dollars: float
    position_size: float
    timestamp: str  # Display time, HH:MM:SS

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "pair": self.pair,
            "direction": self.direction,
            "risk_dollars": self.risk_dollars,
            "position_size": self.position_size,
            "timestamp": self.timestamp,
        }


def _direction(setup: TradeSetup) -> str:
    return "buy" if setup.is_buy else "sell"


def pending_from(setup: TradeSetup, result: RiskResult) -> Optional[PendingTrade]:
    """Build a pending trade from a calculation, or None if it is invalid."""
    if not result.is_valid:
        return None

    return PendingTrade(
        pair=setup.currency_pair,
        direction=_direction(setup),
        risk_dollars=result.risk_dollars,
    )


class TradeLog:
    """
    Append-only list of trades for one session.

    Usage:
        log = TradeLog()
        trade = log.record(setup, calculator.compute(setup))
        analytics.analyze(log.trades, setup.account_balance)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize trade log.

        Args:
            clock: Returns the current time (datetime.now if None)
        """
        self.clock = clock or datetime.now
        self._trades: List[Trade] = []
        self._last_id = 0

    @property
    def trades(self) -> Tuple[Trade, ...]:
        return tuple(self._trades)

    def __len__(self) -> int:
        return len(self._trades)

    def _next_id(self, now: datetime) -> int:
        trade_id = int(now.timestamp() * 1000)
        # Keep ids unique when two trades land in the same millisecond
        if trade_id <= self._last_id:
            trade_id = self._last_id + 1
        self._last_id = trade_id
        return trade_id

    def record(self, setup: TradeSetup, result: RiskResult) -> Trade:
        """
        Record a calculated trade.

        Args:
            setup: Trade parameters
            result: Calculation result for the setup

        Returns:
            The recorded Trade

        Raises:
            ValueError: If the result is not valid
        """
        if not result.is_valid:
            raise ValueError(f"Cannot record invalid trade: {'; '.join(result.errors)}")

        now = self.clock()
        trade = Trade(
            id=self._next_id(now),
            pair=setup.currency_pair,
            direction=_direction(setup),
            risk_dollars=result.risk_dollars,
            position_size=result.position_size,
            timestamp=now.strftime("%H:%M:%S"),
        )
        self._trades.append(trade)

        logger.info(
            f"Recorded {trade.direction} {trade.pair}: "
            f"{trade.position_size:.2f} lots, ${trade.risk_dollars:.2f} at risk"
        )
        return trade

    def clear(self):
        """Replace the trade list with an empty one."""
        logger.info(f"Cleared {len(self._trades)} trades")
        self._trades = []
