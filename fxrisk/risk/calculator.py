"""
Risk Calculator Module

Turns a single trade setup into position sizing and pip economics:
- Input validation (required fields, stop-loss side)
- Stop distance in pips and simplified pip value
- Position size in lots for a fixed risk percentage
- Break-even price and 1:1 / 1:2 / 1:3 profit targets
- Human-readable warnings

Invalid setups are reported as results, never raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from loguru import logger

from fxrisk.config import PIP_SIZE_DEFAULT, PIP_SIZE_JPY, TradeRules


MISSING_FIELDS_ERROR = "Please fill in all required fields with valid values"
BUY_STOP_ERROR = "For a Buy trade, stop loss must be below entry price"
SELL_STOP_ERROR = "For a Sell trade, stop loss must be above entry price"


class TradeDirection(str, Enum):
    """Trade directions."""
    BUY = "buy"
    SELL = "sell"


class StopLossDirection(str, Enum):
    """Side of entry the stop loss sits on."""
    POSITIVE = "positive"
    NEGATIVE = "negative"


def is_jpy_pair(currency_pair: str) -> bool:
    return "JPY" in (currency_pair or "")


def pip_size(currency_pair: str) -> float:
    """Smallest standard price increment for a pair."""
    return PIP_SIZE_JPY if is_jpy_pair(currency_pair) else PIP_SIZE_DEFAULT


@dataclass(frozen=True)
class TradeSetup:
    """User-entered trade parameters."""
    account_balance: Optional[float]
    entry_price: Optional[float]
    stop_loss_price: Optional[float]
    risk_percentage: float = 1.0
    currency_pair: str = "EUR/USD"
    trade_direction: str = TradeDirection.BUY

    @property
    def is_buy(self) -> bool:
        return self.trade_direction == TradeDirection.BUY


@dataclass(frozen=True)
class ProfitTargets:
    """Take-profit prices at fixed reward:risk multiples."""
    one_to_one: float
    one_to_two: float
    one_to_three: float

    def to_dict(self) -> Dict:
        return {
            "one_to_one": self.one_to_one,
            "one_to_two": self.one_to_two,
            "one_to_three": self.one_to_three,
        }


@dataclass(frozen=True)
class RiskResult:
    """Result of a risk calculation."""
    is_valid: bool
    errors: Tuple[str, ...] = ()

    # Populated only when valid
    risk_dollars: Optional[float] = None
    stop_distance_pips: Optional[float] = None
    stop_loss_direction: Optional[StopLossDirection] = None
    pip_value: Optional[float] = None
    position_size: Optional[float] = None
    break_even_price: Optional[float] = None
    profit_targets: Optional[ProfitTargets] = None
    warnings: Tuple[str, ...] = ()

    @classmethod
    def invalid(cls, error: str) -> "RiskResult":
        return cls(is_valid=False, errors=(error,))

    def to_dict(self) -> Dict:
        if not self.is_valid:
            return {"is_valid": False, "errors": list(self.errors)}

        return {
            "is_valid": True,
            "risk_dollars": self.risk_dollars,
            "stop_distance_pips": self.stop_distance_pips,
            "stop_loss_direction": self.stop_loss_direction.value,
            "pip_value": self.pip_value,
            "position_size": self.position_size,
            "break_even_price": self.break_even_price,
            "profit_targets": self.profit_targets.to_dict(),
            "warnings": list(self.warnings),
        }


class RiskCalculator:
    """
    Calculates position size and trade economics for one setup.

    Pip value is a simplified model scaled to account size rather than a
    cross-rate calculation:
    - Standard pairs: balance * 0.1 * 0.0001
    - JPY pairs: balance * 0.01 * 0.0001
    """

    def __init__(self, rules: Optional[TradeRules] = None):
        """
        Initialize risk calculator.

        Args:
            rules: Warning thresholds (defaults if None)
        """
        self.rules = rules or TradeRules()

        logger.info(
            f"Risk calculator initialized: {self.rules.max_lots:g} lot limit, "
            f"{self.rules.high_risk_pct:g}% risk warning"
        )

    def validate(self, setup: TradeSetup) -> List[str]:
        """
        Validate a setup.

        Returns:
            List holding the first validation error, or empty if valid
        """
        if (
            not setup.account_balance
            or not setup.entry_price
            or not setup.stop_loss_price
            or setup.entry_price == setup.stop_loss_price
        ):
            return [MISSING_FIELDS_ERROR]

        if setup.is_buy:
            if not setup.stop_loss_price < setup.entry_price:
                return [BUY_STOP_ERROR]
        elif not setup.stop_loss_price > setup.entry_price:
            return [SELL_STOP_ERROR]

        return []

    def compute(self, setup: TradeSetup) -> RiskResult:
        """
        Compute position sizing for a trade setup.

        Args:
            setup: Trade parameters

        Returns:
            RiskResult; is_valid is False with errors on bad input
        """
        errors = self.validate(setup)
        if errors:
            logger.warning(f"Rejected {setup.currency_pair} setup: {errors[0]}")
            return RiskResult.invalid(errors[0])

        balance = setup.account_balance
        entry = setup.entry_price
        stop = setup.stop_loss_price
        jpy = is_jpy_pair(setup.currency_pair)

        risk_percentage = setup.risk_percentage or 0
        risk_dollars = balance * risk_percentage / 100

        pip_multiplier = 100 if jpy else 10000
        stop_distance = abs(entry - stop)
        stop_distance_pips = stop_distance * pip_multiplier

        if setup.is_buy:
            stop_loss_direction = (
                StopLossDirection.NEGATIVE if stop < entry else StopLossDirection.POSITIVE
            )
        else:
            stop_loss_direction = (
                StopLossDirection.POSITIVE if stop > entry else StopLossDirection.NEGATIVE
            )

        pip_value = balance * (0.01 if jpy else 0.1) * 0.0001

        if stop_distance_pips > 0:
            position_size = risk_dollars / (stop_distance_pips * pip_value)
        else:
            position_size = 0.0
        position_size = max(0.0, position_size)

        # Assumes a one pip spread
        sign = 1 if setup.is_buy else -1
        break_even_price = entry + sign * pip_size(setup.currency_pair)

        profit_targets = ProfitTargets(
            one_to_one=entry + sign * stop_distance,
            one_to_two=entry + sign * stop_distance * 2,
            one_to_three=entry + sign * stop_distance * 3,
        )

        warnings = self._generate_warnings(
            position_size, stop_distance_pips, risk_percentage
        )

        logger.debug(
            f"{setup.currency_pair} {'buy' if setup.is_buy else 'sell'}: "
            f"{stop_distance_pips:.1f} pips, {position_size:.2f} lots, "
            f"${risk_dollars:.2f} at risk"
        )

        return RiskResult(
            is_valid=True,
            risk_dollars=risk_dollars,
            stop_distance_pips=stop_distance_pips,
            stop_loss_direction=stop_loss_direction,
            pip_value=pip_value,
            position_size=position_size,
            break_even_price=break_even_price,
            profit_targets=profit_targets,
            warnings=tuple(warnings),
        )

    def _generate_warnings(
        self,
        position_size: float,
        stop_distance_pips: float,
        risk_percentage: float,
    ) -> List[str]:
        warnings = []

        if position_size > self.rules.max_lots:
            warnings.append(
                f"Position size exceeds {self.rules.max_lots:g} lot - consider reducing risk"
            )

        if stop_distance_pips < self.rules.tight_stop_pips:
            warnings.append(
                f"Stop distance is very tight (< {self.rules.tight_stop_pips:g} pips) - "
                "may get stopped out by noise"
            )

        if stop_distance_pips > self.rules.wide_stop_pips:
            warnings.append(
                f"Stop distance is very wide (> {self.rules.wide_stop_pips:g} pips) - "
                "consider tighter stop loss"
            )

        if risk_percentage > self.rules.high_risk_pct:
            warnings.append(
                f"Risk percentage is high (> {self.rules.high_risk_pct:g}%) - "
                "consider reducing position size"
            )

        return warnings


_default_calculator: Optional[RiskCalculator] = None


def calculate_forex_risk(setup: TradeSetup) -> RiskResult:
    """
    Compute a setup with the default thresholds.

    Args:
        setup: Trade parameters

    Returns:
        RiskResult
    """
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = RiskCalculator()
    return _default_calculator.compute(setup)
