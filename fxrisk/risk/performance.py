"""
Performance Metrics Module

Statistics over a history of closed trades.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable

import numpy as np
import pandas as pd
from loguru import logger


@dataclass
class ClosedTrade:
    """Outcome of a closed trade."""
    outcome: str  # win or loss
    profit: float  # Negative for losses


@dataclass
class PerformanceSummary:
    """Closed-trade statistics."""
    win_rate: float = 0.0  # Percent
    average_win: float = 0.0
    average_loss: float = 0.0  # Absolute value
    profit_factor: float = 0.0
    expectancy: float = 0.0
    total_trades: int = 0
    gross_profit: float = 0.0
    gross_loss: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "win_rate": self.win_rate,
            "average_win": self.average_win,
            "average_loss": self.average_loss,
            "profit_factor": self.profit_factor,
            "expectancy": self.expectancy,
            "total_trades": self.total_trades,
            "gross_profit": self.gross_profit,
            "gross_loss": self.gross_loss,
        }


def _to_frame(history: Iterable[Any]) -> pd.DataFrame:
    rows = []
    for trade in history:
        if isinstance(trade, dict):
            rows.append({"outcome": trade["outcome"], "profit": trade["profit"]})
        else:
            rows.append({"outcome": trade.outcome, "profit": trade.profit})
    return pd.DataFrame(rows, columns=["outcome", "profit"])


def _mean_or_zero(values: pd.Series) -> float:
    if len(values) == 0:
        return 0.0
    mean = values.mean()
    return 0.0 if np.isnan(mean) else float(mean)


def performance_metrics(history: Iterable[Any]) -> PerformanceSummary:
    """
    Calculate win rate, averages, profit factor and expectancy.

    Trades with an outcome other than win or loss count towards the total
    but not towards wins or losses.

    Args:
        history: ClosedTrade records or dicts with outcome and profit

    Returns:
        PerformanceSummary (all zeros for an empty history)
    """
    df = _to_frame(history)
    if df.empty:
        return PerformanceSummary()

    wins = df.loc[df["outcome"] == "win", "profit"].astype(float)
    losses = df.loc[df["outcome"] == "loss", "profit"].astype(float)

    total_trades = len(df)
    win_rate = len(wins) / total_trades * 100

    average_win = _mean_or_zero(wins)
    average_loss = abs(_mean_or_zero(losses))

    gross_profit = float(wins.sum())
    gross_loss = abs(float(losses.sum()))

    profit_factor = gross_profit / gross_loss if gross_loss > 0 else 0.0
    expectancy = (win_rate / 100) * average_win - ((100 - win_rate) / 100) * average_loss

    logger.debug(
        f"Performance over {total_trades} trades: {win_rate:.1f}% win rate, "
        f"profit factor {profit_factor:.2f}"
    )

    return PerformanceSummary(
        win_rate=win_rate,
        average_win=average_win,
        average_loss=average_loss,
        profit_factor=profit_factor,
        expectancy=expectancy,
        total_trades=total_trades,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
    )
