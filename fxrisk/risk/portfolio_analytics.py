"""
Portfolio Analytics Module

Aggregate risk over a set of recorded trades (plus an optional pending one):
- Net directional exposure per currency
- Concentration risk (largest single-currency exposure)
- Correlation risk from a fixed base-currency correlation table
- Diversification score
- Threshold warnings

Also provides market-condition position sizing, drawdown impact notes and
the per-currency heat map. Every call is a fresh recomputation over its
arguments.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from fxrisk.config import PortfolioRules


# Placeholder daily expense figure for the drawdown reality check
DAILY_EXPENSES = 50


class WarningSeverity(Enum):
    """Severity of a portfolio warning or impact note."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


def split_pair(pair: str) -> Tuple[str, str]:
    """
    Split a currency pair into base and quote.

    Accepts "EUR/USD" as well as "EURUSD".
    """
    if "/" in pair:
        base, quote = pair.split("/", 1)
        return base, quote
    return pair[:3], pair[3:]


@dataclass(frozen=True)
class PendingTrade:
    """A calculated trade that has not been recorded yet."""
    pair: str
    direction: str
    risk_dollars: float


@dataclass(frozen=True)
class PortfolioWarning:
    """Portfolio-level warning with a recommendation."""
    type: str
    severity: WarningSeverity
    message: str
    recommendation: str

    def to_dict(self) -> Dict:
        return {
            "type": self.type,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
        }


@dataclass
class AnalyticsResult:
    """Aggregate portfolio risk metrics."""
    total_exposure: float = 0.0
    currency_exposure: Dict[str, float] = field(default_factory=dict)
    concentration_risk: float = 0.0
    correlation_risk: float = 0.0
    diversification_score: float = 0.0
    warnings: List[PortfolioWarning] = field(default_factory=list)

    @property
    def most_exposed_currency(self) -> Optional[str]:
        if not self.currency_exposure:
            return None
        return max(self.currency_exposure, key=lambda c: abs(self.currency_exposure[c]))

    def to_dict(self) -> Dict:
        return {
            "total_exposure": self.total_exposure,
            "currency_exposure": dict(self.currency_exposure),
            "concentration_risk": self.concentration_risk,
            "correlation_risk": self.correlation_risk,
            "diversification_score": self.diversification_score,
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class HeatmapRow:
    """Exposure of one currency for the risk heat map."""
    currency: str
    exposure: float
    direction: str  # long or short
    percentage: float
    risk_level: str


@dataclass(frozen=True)
class MarketConditions:
    """Market condition scores (0-100). Missing scores never adjust risk."""
    volatility: Optional[float] = None
    news_risk: Optional[float] = None
    liquidity: Optional[float] = None


@dataclass(frozen=True)
class OptimalSizing:
    """Position size after market-condition risk haircuts."""
    original_risk: float
    adjusted_risk: float
    risk_dollars: float
    position_size: float
    adjustments: Dict[str, bool]


@dataclass(frozen=True)
class DrawdownImpact:
    """One note on the consequences of a drawdown."""
    type: str
    message: str
    severity: WarningSeverity


class PortfolioAnalytics:
    """
    Computes aggregate exposure and correlation metrics.

    Any object with pair, direction and risk_dollars attributes can be
    analysed: recorded Trades, PendingTrades or custom records.
    """

    def __init__(self, rules: Optional[PortfolioRules] = None):
        """
        Initialize portfolio analytics.

        Args:
            rules: Warning thresholds and correlation table (defaults if None)
        """
        self.rules = rules or PortfolioRules()

        logger.info(
            f"Portfolio analytics initialized: {self.rules.max_exposure_pct:g}% max exposure, "
            f"{len(self.rules.correlations)} correlated currencies"
        )

    def get_correlation(self, base1: str, base2: str) -> float:
        """Correlation between two base currencies (0 if not tabulated)."""
        return self.rules.correlations.get(base1, {}).get(base2, 0)

    def calculate_exposure(self, trades: Sequence[Any]) -> Tuple[float, Dict[str, float]]:
        """
        Calculate total and per-currency exposure.

        Returns:
            Tuple of (total_exposure, currency_exposure)
        """
        total = 0.0
        exposure: Dict[str, float] = {}

        for trade in trades:
            base, quote = split_pair(trade.pair)
            signed = trade.risk_dollars if trade.direction == "buy" else -trade.risk_dollars

            exposure[base] = exposure.get(base, 0) + signed
            exposure[quote] = exposure.get(quote, 0) - signed
            total += trade.risk_dollars

        return total, exposure

    def calculate_correlation_risk(self, trades: Sequence[Any]) -> float:
        """
        Average correlation (0-100) over all correlated pairs of trades.

        Only trade pairs whose base currencies are tabulated count towards
        the average.
        """
        total_correlation = 0.0
        pair_count = 0

        for first, second in combinations(trades, 2):
            base1, _ = split_pair(first.pair)
            base2, _ = split_pair(second.pair)

            correlation = self.get_correlation(base1, base2)
            if correlation > 0:
                total_correlation += correlation
                pair_count += 1

        return (total_correlation / pair_count) * 100 if pair_count > 0 else 0

    def analyze(
        self,
        trades: Iterable[Any],
        account_balance: float,
        pending_trade: Optional[Any] = None,
    ) -> AnalyticsResult:
        """
        Analyse portfolio risk.

        Args:
            trades: Recorded trades
            account_balance: Account balance
            pending_trade: Calculated trade not yet recorded

        Returns:
            AnalyticsResult with metrics and warnings
        """
        all_trades = list(trades)
        if pending_trade is not None:
            all_trades.append(pending_trade)

        result = AnalyticsResult()
        if not all_trades:
            return result

        result.total_exposure, result.currency_exposure = self.calculate_exposure(all_trades)

        if account_balance and account_balance > 0:
            max_exposure = max(abs(v) for v in result.currency_exposure.values())
            result.concentration_risk = max_exposure / account_balance * 100

        result.correlation_risk = self.calculate_correlation_risk(all_trades)
        result.diversification_score = min(
            100, len(result.currency_exposure) * self.rules.diversification_per_currency
        )
        result.warnings = self.generate_warnings(result, account_balance)

        logger.debug(
            f"Analysed {len(all_trades)} trades: exposure ${result.total_exposure:.2f}, "
            f"concentration {result.concentration_risk:.1f}%, "
            f"correlation {result.correlation_risk:.1f}%"
        )

        return result

    def generate_warnings(
        self,
        analytics: AnalyticsResult,
        account_balance: float,
    ) -> List[PortfolioWarning]:
        """Turn metric thresholds into warnings."""
        if not analytics.currency_exposure:
            return []

        warnings = []
        rules = self.rules

        exposure_pct = 0.0
        if account_balance and account_balance > 0:
            exposure_pct = analytics.total_exposure / account_balance * 100

        if exposure_pct > rules.max_exposure_pct:
            warnings.append(PortfolioWarning(
                type="high_exposure",
                severity=WarningSeverity.HIGH,
                message=f"Total portfolio exposure is {exposure_pct:.1f}% of account",
                recommendation="Consider reducing overall position sizes",
            ))

        if analytics.concentration_risk > rules.max_concentration_pct:
            warnings.append(PortfolioWarning(
                type="concentration",
                severity=WarningSeverity.MEDIUM,
                message=(
                    f"High concentration risk: {analytics.concentration_risk:.1f}% "
                    f"in {analytics.most_exposed_currency}"
                ),
                recommendation="Diversify across more currency pairs",
            ))

        if analytics.correlation_risk > rules.max_correlation_pct:
            warnings.append(PortfolioWarning(
                type="correlation",
                severity=WarningSeverity.MEDIUM,
                message=(
                    f"High correlation risk: {analytics.correlation_risk:.1f}% "
                    "average correlation"
                ),
                recommendation="Reduce positions in correlated pairs",
            ))

        if analytics.diversification_score < rules.min_diversification:
            warnings.append(PortfolioWarning(
                type="diversification",
                severity=WarningSeverity.LOW,
                message=(
                    f"Low diversification score: {analytics.diversification_score:.0f}%"
                ),
                recommendation="Consider trading more currency pairs",
            ))

        for warning in warnings:
            logger.warning(f"Portfolio {warning.type}: {warning.message}")

        return warnings

    def _risk_level(self, percentage: float) -> str:
        low, medium, high = self.rules.heatmap_levels
        if percentage < low:
            return "low"
        if percentage < medium:
            return "medium"
        if percentage < high:
            return "high"
        return "critical"

    def currency_heatmap(
        self,
        trades: Iterable[Any],
        account_balance: float,
        pending_trade: Optional[Any] = None,
    ) -> List[HeatmapRow]:
        """
        Per-currency exposure rows, largest exposure first.

        Args:
            trades: Recorded trades
            account_balance: Account balance
            pending_trade: Calculated trade not yet recorded

        Returns:
            List of HeatmapRow
        """
        all_trades = list(trades)
        if pending_trade is not None:
            all_trades.append(pending_trade)

        _, exposure = self.calculate_exposure(all_trades)

        rows = []
        for currency, value in exposure.items():
            percentage = 0.0
            if account_balance and account_balance > 0:
                percentage = abs(value) / account_balance * 100

            rows.append(HeatmapRow(
                currency=currency,
                exposure=abs(value),
                direction="long" if value > 0 else "short",
                percentage=percentage,
                risk_level=self._risk_level(percentage),
            ))

        return sorted(rows, key=lambda r: r.exposure, reverse=True)

    def heatmap_warnings(
        self,
        trades: Iterable[Any],
        account_balance: float,
        pending_trade: Optional[Any] = None,
    ) -> List[str]:
        """
        Concentration and correlation notes shown under the heat map.

        - Every currency above the concentration limit, largest first
        - Total exposure above the exposure limit
        - Currencies above the correlated exposure threshold that share a
          direction with a correlated currency (each pair reported once)

        Returns:
            List of warning messages (empty for a non-positive balance)
        """
        if not account_balance or account_balance <= 0:
            return []

        rules = self.rules
        all_trades = list(trades)
        if pending_trade is not None:
            all_trades.append(pending_trade)

        total, exposure = self.calculate_exposure(all_trades)
        warnings = []

        for row in self.currency_heatmap(all_trades, account_balance):
            if row.percentage > rules.max_concentration_pct:
                warnings.append(f"High concentration in {row.currency}: {row.percentage:.1f}%")

        total_pct = total / account_balance * 100
        if total_pct > rules.max_exposure_pct:
            warnings.append(
                f"Total portfolio risk is {total_pct:.1f}% - consider reducing exposure"
            )

        threshold = account_balance * rules.correlated_exposure_pct / 100
        reported = set()
        for currency, value in exposure.items():
            if abs(value) <= threshold:
                continue
            for other in rules.correlations.get(currency, {}):
                other_value = exposure.get(other, 0)
                if not other_value or (other_value > 0) != (value > 0):
                    continue
                key = frozenset((currency, other))
                if key not in reported:
                    reported.add(key)
                    warnings.append(f"{currency} and {other} positions are correlated")

        for warning in warnings:
            logger.warning(f"Heat map: {warning}")

        return warnings


def optimal_position_size(
    account_balance: float,
    risk_percentage: float,
    stop_loss_pips: float,
    pip_value: float,
    market_conditions: Optional[MarketConditions] = None,
) -> OptimalSizing:
    """
    Position size after haircuts for adverse market conditions.

    Haircuts stack multiplicatively:
    - Volatility > 70: risk * 0.7
    - News risk > 60: risk * 0.5
    - Liquidity < 50: risk * 0.8

    Args:
        account_balance: Account balance
        risk_percentage: Requested risk (1 = 1%)
        stop_loss_pips: Stop distance in pips
        pip_value: Value of one pip per lot
        market_conditions: Condition scores

    Returns:
        OptimalSizing
    """
    conditions = market_conditions or MarketConditions()

    adjustments = {
        "volatility": conditions.volatility is not None and conditions.volatility > 70,
        "news_risk": conditions.news_risk is not None and conditions.news_risk > 60,
        "liquidity": conditions.liquidity is not None and conditions.liquidity < 50,
    }

    adjusted_risk = risk_percentage
    if adjustments["volatility"]:
        adjusted_risk *= 0.7
    if adjustments["news_risk"]:
        adjusted_risk *= 0.5
    if adjustments["liquidity"]:
        adjusted_risk *= 0.8

    risk_dollars = account_balance * adjusted_risk / 100

    denominator = stop_loss_pips * pip_value
    position_size = risk_dollars / denominator if denominator > 0 else 0.0

    if adjusted_risk != risk_percentage:
        logger.info(f"Risk reduced from {risk_percentage:g}% to {adjusted_risk:g}% for market conditions")

    return OptimalSizing(
        original_risk=risk_percentage,
        adjusted_risk=adjusted_risk,
        risk_dollars=risk_dollars,
        position_size=max(0.0, position_size),
        adjustments=adjustments,
    )


def required_recovery_gain(current_drawdown: float) -> float:
    """Gain (in percent) needed to recover from a drawdown."""
    if current_drawdown >= 100:
        return math.inf
    return current_drawdown / (100 - current_drawdown) * 100


def drawdown_impact(current_drawdown: float, account_balance: float) -> List[DrawdownImpact]:
    """
    Describe what a drawdown means for recovery and in real-world terms.

    Args:
        current_drawdown: Drawdown in percent
        account_balance: Account balance

    Returns:
        List of DrawdownImpact (empty when there is no drawdown)
    """
    if current_drawdown <= 0:
        return []

    loss_amount = account_balance * current_drawdown / 100

    required_gain = required_recovery_gain(current_drawdown)
    if math.isinf(required_gain):
        recovery_message = f"Recovery is not possible from a {current_drawdown:.1f}% drawdown"
    else:
        recovery_message = (
            f"{required_gain:.1f}% gain needed to recover from "
            f"{current_drawdown:.1f}% drawdown"
        )

    if current_drawdown > 10:
        severity = WarningSeverity.HIGH
    elif current_drawdown > 5:
        severity = WarningSeverity.MEDIUM
    else:
        severity = WarningSeverity.LOW

    expense_days = math.floor(loss_amount / DAILY_EXPENSES + 0.5)

    return [
        DrawdownImpact(type="recovery", message=recovery_message, severity=severity),
        DrawdownImpact(
            type="real_world",
            message=(
                f"${loss_amount:.2f} loss equals approximately "
                f"{expense_days} days of average expenses"
            ),
            severity=WarningSeverity.INFO,
        ),
    ]
