"""
Protection Module

Beginner protection checks and trading psychology heuristics.

Usage:
    from fxrisk.protection import ProtectionSystem, AccountState

    system = ProtectionSystem()
    report = system.evaluate(setup, AccountState(account_age_days=15), log.trades)
    if report.blocked:
        print(report.block_reasons)
"""

from .protection_system import (
    CheckLevel,
    HealthStatus,
    AccountState,
    ProtectionCheck,
    ProtectionReport,
    ProtectionSystem,
    calculate_risk_score,
    get_health_status,
)

from .psychology import (
    STRESS_WEIGHTS,
    BreakRecommendation,
    TradingFrequency,
    PsychologyRecommendation,
    PsychologyAnalysis,
    consecutive_losses,
    average_risk,
    trading_frequency,
    analyze_trading_psychology,
    stress_level,
    break_recommendation,
)


__all__ = [
    "CheckLevel",
    "HealthStatus",
    "AccountState",
    "ProtectionCheck",
    "ProtectionReport",
    "ProtectionSystem",
    "calculate_risk_score",
    "get_health_status",
    "STRESS_WEIGHTS",
    "BreakRecommendation",
    "TradingFrequency",
    "PsychologyRecommendation",
    "PsychologyAnalysis",
    "consecutive_losses",
    "average_risk",
    "trading_frequency",
    "analyze_trading_psychology",
    "stress_level",
    "break_recommendation",
]
