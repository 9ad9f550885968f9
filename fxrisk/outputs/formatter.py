"""
Risk Report Formatter Module

Formats calculation and portfolio results for display:
- Currency, percentage and price strings
- Markdown and plain-text risk cards for a single trade
- Plain-text portfolio summary
"""

from typing import List, Optional

from fxrisk.risk.calculator import RiskResult, TradeSetup, is_jpy_pair
from fxrisk.risk.portfolio_analytics import AnalyticsResult, WarningSeverity


SEVERITY_EMOJI = {
    WarningSeverity.HIGH: "🔴",
    WarningSeverity.MEDIUM: "🟠",
    WarningSeverity.LOW: "🟡",
    WarningSeverity.INFO: "⚪",
}


def format_currency(amount: float) -> str:
    """Format as US dollars, e.g. $1,234.56 or -$12.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(percentage: float) -> str:
    """Format a percent value (1 = 1%) with two decimals."""
    return f"{percentage:,.2f}%"


def format_price(price: Optional[float], currency_pair: str = "", decimals: int = 5) -> Optional[str]:
    """Format a price; JPY pairs use 3 decimals."""
    if price is None:
        return None

    if is_jpy_pair(currency_pair):
        return f"{price:.3f}"

    return f"{price:.{decimals}f}"


class RiskReportFormatter:
    """
    Formats risk results for text and markdown output.
    """

    def __init__(self, price_decimals: int = 5):
        """
        Initialize formatter.

        Args:
            price_decimals: Decimal places for non-JPY prices
        """
        self.price_decimals = price_decimals

    def _price(self, price: float, pair: str) -> str:
        return format_price(price, pair, self.price_decimals)

    def format_markdown(self, setup: TradeSetup, result: RiskResult) -> str:
        """
        Format a single-trade calculation as markdown.

        Args:
            setup: Trade parameters
            result: Calculation result

        Returns:
            Markdown string
        """
        direction = "BUY" if setup.is_buy else "SELL"
        emoji = "🟢" if setup.is_buy else "🔴"
        pair = setup.currency_pair

        if not result.is_valid:
            lines = [f"## ❌ {direction} {pair}", ""]
            lines.extend(f"- {error}" for error in result.errors)
            return "\n".join(lines)

        targets = result.profit_targets
        lines = [
            f"## {emoji} {direction} {pair}",
            "",
            f"**Risk:** {format_currency(result.risk_dollars)} "
            f"({format_percentage(setup.risk_percentage)} of {format_currency(setup.account_balance)})",
            f"**Position Size:** {result.position_size:.2f} lots",
            f"**Stop Distance:** {result.stop_distance_pips:.1f} pips",
            f"**Pip Value:** {format_currency(result.pip_value)}",
            "",
            "| Level | Price |",
            "|-------|-------|",
            f"| Entry | {self._price(setup.entry_price, pair)} |",
            f"| Stop Loss | {self._price(setup.stop_loss_price, pair)} |",
            f"| Break Even | {self._price(result.break_even_price, pair)} |",
            f"| Target 1:1 | {self._price(targets.one_to_one, pair)} |",
            f"| Target 1:2 | {self._price(targets.one_to_two, pair)} |",
            f"| Target 1:3 | {self._price(targets.one_to_three, pair)} |",
            "",
        ]

        if result.warnings:
            lines.append("**Warnings:**")
            for warning in result.warnings:
                lines.append(f"- ⚠️ {warning}")
            lines.append("")

        return "\n".join(lines).rstrip("\n")

    def format_text(self, setup: TradeSetup, result: RiskResult) -> str:
        """
        Format a single-trade calculation as plain text.

        Args:
            setup: Trade parameters
            result: Calculation result

        Returns:
            Plain text string
        """
        direction = "BUY" if setup.is_buy else "SELL"
        emoji = "🟢" if setup.is_buy else "🔴"
        pair = setup.currency_pair

        if not result.is_valid:
            lines = [f"❌ {direction} {pair}"]
            lines.extend(f"   {error}" for error in result.errors)
            return "\n".join(lines)

        targets = result.profit_targets
        lines = [
            f"{emoji} {direction} {pair}",
            f"   Risk: {format_currency(result.risk_dollars)} ({format_percentage(setup.risk_percentage)})",
            f"   Size: {result.position_size:.2f} lots",
            f"   Entry: {self._price(setup.entry_price, pair)}",
            f"   Stop: {self._price(setup.stop_loss_price, pair)} ({result.stop_distance_pips:.1f} pips)",
            f"   Break even: {self._price(result.break_even_price, pair)}",
            f"   Targets: {self._price(targets.one_to_one, pair)} / "
            f"{self._price(targets.one_to_two, pair)} / {self._price(targets.one_to_three, pair)}",
        ]

        for warning in result.warnings:
            lines.append(f"   ⚠️ {warning}")

        return "\n".join(lines)

    def format_portfolio_text(self, analytics: AnalyticsResult) -> str:
        """
        Format portfolio analytics as plain text.

        Args:
            analytics: Portfolio analytics result

        Returns:
            Plain text string
        """
        lines = [
            f"Total exposure: {format_currency(analytics.total_exposure)}",
            f"Concentration risk: {format_percentage(analytics.concentration_risk)}",
            f"Correlation risk: {format_percentage(analytics.correlation_risk)}",
            f"Diversification score: {analytics.diversification_score:.0f}/100",
        ]

        if analytics.currency_exposure:
            lines.append("Currency exposure:")
            for currency, exposure in analytics.currency_exposure.items():
                lines.append(f"   {currency}: {format_currency(exposure)}")

        for warning in analytics.warnings:
            lines.append(f"{SEVERITY_EMOJI[warning.severity]} {warning.message}")
            lines.append(f"   → {warning.recommendation}")

        return "\n".join(lines)


def format_risk_summary(setup: TradeSetup, result: RiskResult) -> str:
    """Plain-text summary of one calculation with default formatting."""
    return RiskReportFormatter().format_text(setup, result)
