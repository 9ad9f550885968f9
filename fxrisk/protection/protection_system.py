"""
Protection System Module

Advisory checks layered on top of a calculated trade:
- Beginner risk limit during the first months of an account
- Drawdown circuit breaker
- Daily and weekly trade limits
- Correlated open positions
- Low-liquidity hours and high-impact news hours
- Account risk score and health status

Checks never change the trade. Blocking a submission or adjusting the risk
is left to the caller, using the report.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from loguru import logger

from fxrisk.config import ProtectionLimits
from fxrisk.risk.calculator import TradeSetup


class CheckLevel(Enum):
    """How serious an active check is."""
    INFO = "info"
    WARNING = "warning"
    BLOCKING = "blocking"


class HealthStatus(Enum):
    """Account health derived from the risk score."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    CAUTION = "Caution"
    DANGER = "Danger"


@dataclass
class AccountState:
    """Trading history facts the checks rely on."""
    account_age_days: int = 0
    current_drawdown: float = 0.0  # Percent
    consecutive_losses: int = 0
    today_trade_count: int = 0
    weekly_trade_count: int = 0


@dataclass
class ProtectionCheck:
    """Result of a single protection check."""
    name: str
    active: bool
    level: CheckLevel
    message: str = ""

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "active": self.active,
            "level": self.level.value,
            "message": self.message,
        }


@dataclass
class ProtectionReport:
    """Consolidated protection assessment."""
    checks: List[ProtectionCheck]
    risk_score: float
    health_status: HealthStatus
    circuit_breaker: bool = False
    suggested_risk_percentage: Optional[float] = None
    psychology_message: Optional[str] = None
    evaluated_at: datetime = field(default_factory=datetime.now)

    @property
    def active_checks(self) -> List[ProtectionCheck]:
        return [c for c in self.checks if c.active]

    @property
    def blocked(self) -> bool:
        return any(c.level == CheckLevel.BLOCKING for c in self.active_checks)

    @property
    def block_reasons(self) -> List[str]:
        return [c.message for c in self.active_checks if c.level == CheckLevel.BLOCKING]

    def is_active(self, name: str) -> bool:
        return any(c.name == name and c.active for c in self.checks)

    def to_dict(self) -> Dict:
        return {
            "checks": [c.to_dict() for c in self.checks],
            "risk_score": self.risk_score,
            "health_status": self.health_status.value,
            "circuit_breaker": self.circuit_breaker,
            "blocked": self.blocked,
            "block_reasons": self.block_reasons,
            "suggested_risk_percentage": self.suggested_risk_percentage,
            "psychology_message": self.psychology_message,
            "evaluated_at": self.evaluated_at.isoformat(),
        }


def calculate_risk_score(
    current_drawdown: float,
    consecutive_losses: int,
    risk_percentage: float,
) -> float:
    """
    Account risk score from 0 (danger) to 100.

    -5 points per 1% drawdown, -10 per consecutive loss and -20 per
    percentage point of risk above 1%.
    """
    score = 100.0
    score -= current_drawdown * 5
    score -= consecutive_losses * 10
    if risk_percentage > 1:
        score -= (risk_percentage - 1) * 20
    return max(0.0, min(100.0, score))


def get_health_status(risk_score: float) -> HealthStatus:
    if risk_score >= 80:
        return HealthStatus.EXCELLENT
    if risk_score >= 60:
        return HealthStatus.GOOD
    if risk_score >= 40:
        return HealthStatus.CAUTION
    return HealthStatus.DANGER


class ProtectionSystem:
    """
    Evaluates beginner protection rules for a trade setup.

    Time-of-day checks use the injected clock so they can be tested.
    """

    def __init__(
        self,
        limits: Optional[ProtectionLimits] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize protection system.

        Args:
            limits: Protection limits (defaults if None)
            clock: Returns the current time (datetime.now if None)
        """
        self.limits = limits or ProtectionLimits()
        self.clock = clock or datetime.now

        logger.info(
            f"Protection system initialized: {self.limits.max_drawdown_pct:g}% circuit breaker, "
            f"{self.limits.daily_trade_limit} trades/day"
        )

    def is_low_liquidity(self, now: datetime) -> bool:
        """Weekend, early morning or late evening."""
        start, end = self.limits.liquid_hours
        return now.weekday() >= 5 or now.hour < start or now.hour > end

    def is_news_hour(self, now: datetime) -> bool:
        return now.hour in self.limits.news_hours

    def has_correlated_positions(self, currency_pair: str, open_trades: Iterable[Any]) -> bool:
        correlated = self.limits.correlated_pairs.get(currency_pair, [])
        return any(trade.pair in correlated for trade in open_trades)

    def _psychology_message(self, account: AccountState) -> Optional[str]:
        if account.consecutive_losses >= 3:
            return (
                "Take a break! Consecutive losses can cloud judgment. "
                "Come back tomorrow with fresh eyes."
            )
        if account.current_drawdown > 5:
            return (
                "Your account is in drawdown. Focus on capital preservation "
                "over profit generation."
            )
        if account.today_trade_count >= 2:
            return (
                f"You've already taken {account.today_trade_count} trades today. "
                "Quality over quantity always wins."
            )
        return None

    def evaluate(
        self,
        setup: TradeSetup,
        account: AccountState,
        open_trades: Iterable[Any] = (),
        now: Optional[datetime] = None,
    ) -> ProtectionReport:
        """
        Run all protection checks.

        Args:
            setup: Trade parameters about to be submitted
            account: Account history facts
            open_trades: Trades already taken (objects with a pair attribute)
            now: Evaluation time (clock if None)

        Returns:
            ProtectionReport
        """
        limits = self.limits
        now = now or self.clock()
        risk_percentage = setup.risk_percentage or 0

        in_beginner_period = account.account_age_days < limits.beginner_period_days
        beginner_limit = in_beginner_period and risk_percentage > limits.max_beginner_risk_pct
        circuit_breaker = account.current_drawdown >= limits.max_drawdown_pct

        checks = [
            ProtectionCheck(
                name="beginner_risk_limit",
                active=beginner_limit,
                level=CheckLevel.WARNING,
                message=(
                    f"Risk limited to {limits.max_beginner_risk_pct:g}% for your first "
                    f"{limits.beginner_period_days} days"
                ),
            ),
            ProtectionCheck(
                name="drawdown_limit",
                active=circuit_breaker,
                level=CheckLevel.BLOCKING,
                message=(
                    f"Account has reached a {limits.max_drawdown_pct:g}% drawdown. "
                    "Trading is suspended to protect your capital"
                ),
            ),
            ProtectionCheck(
                name="daily_trade_limit",
                active=account.today_trade_count >= limits.daily_trade_limit,
                level=CheckLevel.BLOCKING,
                message=f"Daily limit of {limits.daily_trade_limit} trades reached",
            ),
            ProtectionCheck(
                name="weekly_trade_limit",
                active=account.weekly_trade_count >= limits.weekly_trade_limit,
                level=CheckLevel.BLOCKING,
                message=f"Weekly limit of {limits.weekly_trade_limit} trades reached",
            ),
            ProtectionCheck(
                name="low_liquidity",
                active=self.is_low_liquidity(now),
                level=CheckLevel.INFO,
                message="Low liquidity period: wider spreads and erratic moves are likely",
            ),
            ProtectionCheck(
                name="correlated_positions",
                active=self.has_correlated_positions(setup.currency_pair, open_trades),
                level=CheckLevel.WARNING,
                message=f"Open positions are correlated with {setup.currency_pair}",
            ),
            ProtectionCheck(
                name="news_risk",
                active=self.is_news_hour(now),
                level=CheckLevel.WARNING,
                message="High-impact news is typically released at this hour",
            ),
        ]

        risk_score = calculate_risk_score(
            account.current_drawdown, account.consecutive_losses, risk_percentage
        )

        report = ProtectionReport(
            checks=checks,
            risk_score=risk_score,
            health_status=get_health_status(risk_score),
            circuit_breaker=circuit_breaker,
            suggested_risk_percentage=limits.max_beginner_risk_pct if beginner_limit else None,
            psychology_message=self._psychology_message(account),
            evaluated_at=now,
        )

        for check in report.active_checks:
            logger.warning(f"Protection check {check.name}: {check.message}")

        if report.blocked:
            logger.warning(f"Trade on {setup.currency_pair} blocked: {'; '.join(report.block_reasons)}")

        return report
