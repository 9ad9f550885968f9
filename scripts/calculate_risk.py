#!/usr/bin/env python3
"""
Forex Risk Calculator

Computes position size and profit targets for one trade setup, runs the
protection checks and shows the portfolio impact of adding it.

Usage:
    python -m scripts.calculate_risk --balance 10000 --risk 1 --pair EUR/USD \\
        --direction buy --entry 1.0850 --stop 1.0800
    python -m scripts.calculate_risk ... --config config/risk_rules.yaml --verbose
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fxrisk.config import load_config
from fxrisk.outputs import RiskReportFormatter
from fxrisk.protection import AccountState, ProtectionSystem
from fxrisk.risk import (
    PortfolioAnalytics,
    RiskCalculator,
    TradeSetup,
    drawdown_impact,
    pending_from,
)


def main():
    parser = argparse.ArgumentParser(description="Calculate forex position size and risk")
    parser.add_argument("--balance", type=float, required=True, help="Account balance")
    parser.add_argument("--risk", type=float, default=1.0, help="Risk per trade in percent")
    parser.add_argument("--pair", type=str, default="EUR/USD", help="Currency pair, e.g. EUR/USD")
    parser.add_argument("--direction", choices=["buy", "sell"], default="buy")
    parser.add_argument("--entry", type=float, required=True, help="Entry price")
    parser.add_argument("--stop", type=float, required=True, help="Stop loss price")
    parser.add_argument("--account-age", type=int, default=0, help="Account age in days")
    parser.add_argument("--drawdown", type=float, default=0.0, help="Current drawdown in percent")
    parser.add_argument("--config", type=Path, help="Risk rules YAML")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING",
               format="<green>{time:HH:mm:ss}</green> | <level>{level:<8}</level> | {message}")

    config = load_config(args.config)

    setup = TradeSetup(
        account_balance=args.balance,
        risk_percentage=args.risk,
        currency_pair=args.pair.upper(),
        trade_direction=args.direction,
        entry_price=args.entry,
        stop_loss_price=args.stop,
    )
    result = RiskCalculator(config.trade_rules).compute(setup)

    formatter = RiskReportFormatter()
    print(formatter.format_markdown(setup, result))

    if not result.is_valid:
        sys.exit(1)

    portfolio = PortfolioAnalytics(config.portfolio_rules)
    pending = pending_from(setup, result)
    analytics = portfolio.analyze([], setup.account_balance, pending_trade=pending)
    print(f"\n{'='*60}\nPORTFOLIO IMPACT\n{'='*60}")
    print(formatter.format_portfolio_text(analytics))
    for warning in portfolio.heatmap_warnings([], setup.account_balance, pending_trade=pending):
        print(f"⚠️ {warning}")

    account = AccountState(account_age_days=args.account_age, current_drawdown=args.drawdown)
    report = ProtectionSystem(config.protection_limits).evaluate(setup, account)

    print(f"\n{'='*60}\nPROTECTION\n{'='*60}")
    print(f"Health: {report.health_status.value} ({report.risk_score:.0f}/100)")
    for check in report.active_checks:
        print(f"  [{check.level.value}] {check.message}")
    if report.suggested_risk_percentage is not None:
        print(f"  Suggested risk: {report.suggested_risk_percentage:g}%")
    for impact in drawdown_impact(args.drawdown, setup.account_balance):
        print(f"  {impact.message}")

    sys.exit(2 if report.blocked else 0)


if __name__ == "__main__":
    main()
