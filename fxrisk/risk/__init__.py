"""
Risk Module

Provides position sizing and portfolio risk analytics for forex trades.

Components:
- RiskCalculator: Position size, pip economics and profit targets
- PortfolioAnalytics: Currency exposure, concentration and correlation risk
- TradeLog: Session list of recorded trades
- Performance metrics over closed trades

Usage:
    from fxrisk.risk import RiskCalculator, TradeSetup, PortfolioAnalytics, TradeLog

    # Position sizing
    calculator = RiskCalculator()
    setup = TradeSetup(
        account_balance=10000,
        risk_percentage=1,
        currency_pair="EUR/USD",
        trade_direction="buy",
        entry_price=1.0850,
        stop_loss_price=1.0800,
    )
    result = calculator.compute(setup)
    print(f"Size: {result.position_size:.2f} lots, Risk: ${result.risk_dollars}")

    # Portfolio risk
    log = TradeLog()
    log.record(setup, result)
    analytics = PortfolioAnalytics().analyze(log.trades, setup.account_balance)
"""

from .calculator import (
    TradeDirection,
    StopLossDirection,
    TradeSetup,
    ProfitTargets,
    RiskResult,
    RiskCalculator,
    calculate_forex_risk,
    is_jpy_pair,
    pip_size,
)

from .portfolio_analytics import (
    WarningSeverity,
    PendingTrade,
    PortfolioWarning,
    AnalyticsResult,
    HeatmapRow,
    MarketConditions,
    OptimalSizing,
    DrawdownImpact,
    PortfolioAnalytics,
    optimal_position_size,
    drawdown_impact,
    required_recovery_gain,
    split_pair,
)

from .trade_log import (
    Trade,
    TradeLog,
    pending_from,
)

from .performance import (
    ClosedTrade,
    PerformanceSummary,
    performance_metrics,
)


__all__ = [
    # Single trade
    "TradeDirection",
    "StopLossDirection",
    "TradeSetup",
    "ProfitTargets",
    "RiskResult",
    "RiskCalculator",
    "calculate_forex_risk",
    "is_jpy_pair",
    "pip_size",

    # Portfolio
    "WarningSeverity",
    "PendingTrade",
    "PortfolioWarning",
    "AnalyticsResult",
    "HeatmapRow",
    "MarketConditions",
    "OptimalSizing",
    "DrawdownImpact",
    "PortfolioAnalytics",
    "optimal_position_size",
    "drawdown_impact",
    "required_recovery_gain",
    "split_pair",

    # Trade log
    "Trade",
    "TradeLog",
    "pending_from",

    # Performance
    "ClosedTrade",
    "PerformanceSummary",
    "performance_metrics",
]
