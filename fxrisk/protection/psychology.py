"""
Trading Psychology Helpers

Deterministic stress and break heuristics from the trader's recent history,
plus a behaviour review (losing streaks, revenge trading, overtrading).

History records are dicts or objects with ``outcome`` (win/loss),
``risk_percentage`` and ``timestamp`` (datetime or ISO 8601 string), oldest
first.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence


# Weight of each factor in the stress level (factor values are 0-100)
STRESS_WEIGHTS: Dict[str, float] = {
    "consecutive_losses": 15,
    "high_risk": 20,
    "overtrading": 10,
    "long_session": 5,
    "market_volatility": 10,
    "news_events": 15,
    "drawdown": 25,
}

RECENT_TRADES = 10
LOSING_STREAK = 3
REVENGE_RISK_MULTIPLIER = 1.5
OVERTRADING_DAILY_LIMIT = 5


@dataclass(frozen=True)
class BreakRecommendation:
    """Suggested pause from trading."""
    type: str  # mandatory or recommended
    duration_minutes: int
    message: str


@dataclass(frozen=True)
class TradingFrequency:
    """Trades taken since midnight and over the last seven days."""
    daily: int = 0
    weekly: int = 0


@dataclass(frozen=True)
class PsychologyRecommendation:
    type: str
    message: str
    priority: str  # critical, high or medium


@dataclass
class PsychologyAnalysis:
    """Behaviour review of the recent trading history."""
    emotional_state: str = "neutral"  # neutral or frustrated
    risk_tolerance: str = "normal"  # normal or revenge_trading
    trading_pattern: str = "disciplined"  # disciplined or overtrading
    recommendations: List[PsychologyRecommendation] = field(default_factory=list)
    average_risk: float = 1.0
    frequency: TradingFrequency = field(default_factory=TradingFrequency)

    def to_dict(self) -> Dict:
        return {
            "emotional_state": self.emotional_state,
            "risk_tolerance": self.risk_tolerance,
            "trading_pattern": self.trading_pattern,
            "recommendations": [
                {"type": r.type, "message": r.message, "priority": r.priority}
                for r in self.recommendations
            ],
            "average_risk": self.average_risk,
            "frequency": {"daily": self.frequency.daily, "weekly": self.frequency.weekly},
        }


def _field(trade: Any, name: str) -> Any:
    return trade[name] if isinstance(trade, dict) else getattr(trade, name)


def _timestamp(trade: Any) -> datetime:
    value = _field(trade, "timestamp")
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def consecutive_losses(history: Sequence[Any]) -> int:
    """Count losses at the end of the history, newest last."""
    count = 0
    for trade in reversed(history):
        if _field(trade, "outcome") != "loss":
            break
        count += 1
    return count


def average_risk(history: Sequence[Any]) -> float:
    """Mean risk percentage, 1 for an empty history."""
    if not history:
        return 1.0
    return sum(_field(t, "risk_percentage") for t in history) / len(history)


def trading_frequency(history: Sequence[Any], now: Optional[datetime] = None) -> TradingFrequency:
    """Count trades since midnight and since midnight seven days ago."""
    now = now or datetime.now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today - timedelta(days=7)

    timestamps = [_timestamp(t) for t in history]
    return TradingFrequency(
        daily=sum(1 for ts in timestamps if ts >= today),
        weekly=sum(1 for ts in timestamps if ts >= week_start),
    )


def analyze_trading_psychology(
    history: Sequence[Any],
    risk_percentage: float,
    now: Optional[datetime] = None,
) -> PsychologyAnalysis:
    """
    Review recent behaviour before the next trade.

    Streak and average risk use the last 10 trades; frequency uses the
    whole history.

    Args:
        history: Closed trades, oldest first
        risk_percentage: Risk of the trade about to be placed
        now: Reference time for the frequency counts (datetime.now if None)

    Returns:
        PsychologyAnalysis
    """
    history = list(history)
    recent = history[-RECENT_TRADES:]
    analysis = PsychologyAnalysis(
        average_risk=average_risk(recent),
        frequency=trading_frequency(history, now),
    )

    if consecutive_losses(recent) >= LOSING_STREAK:
        analysis.emotional_state = "frustrated"
        analysis.recommendations.append(PsychologyRecommendation(
            type="break",
            message="Take a break after 3+ consecutive losses",
            priority="high",
        ))

    if risk_percentage > analysis.average_risk * REVENGE_RISK_MULTIPLIER:
        analysis.risk_tolerance = "revenge_trading"
        analysis.recommendations.append(PsychologyRecommendation(
            type="risk_reduction",
            message="Risk increased significantly - possible revenge trading",
            priority="critical",
        ))

    if analysis.frequency.daily > OVERTRADING_DAILY_LIMIT:
        analysis.trading_pattern = "overtrading"
        analysis.recommendations.append(PsychologyRecommendation(
            type="frequency_limit",
            message="Reduce trading frequency for better results",
            priority="medium",
        ))

    return analysis


def stress_level(factors: Dict[str, float]) -> float:
    """
    Weighted stress level from 0 to 100.

    Unknown or zero factors are ignored.
    """
    stress = 0.0
    for factor, value in factors.items():
        weight = STRESS_WEIGHTS.get(factor)
        if weight and value:
            stress += weight * (value / 100)
    return min(100.0, max(0.0, stress))


def break_recommendation(stress: float, trading_hours: float = 0) -> Optional[BreakRecommendation]:
    if stress > 70:
        return BreakRecommendation(
            type="mandatory",
            duration_minutes=60,
            message="High stress detected. Mandatory 1-hour break required.",
        )

    if stress > 50 or trading_hours > 4:
        return BreakRecommendation(
            type="recommended",
            duration_minutes=30,
            message="Consider taking a 30-minute break to refresh your mind.",
        )

    return None
