"""
Risk Rules Configuration

Bundled constant tables and thresholds used by the calculators, with
optional overrides loaded from a YAML file:
- Currency correlation table (keyed by base currency)
- Correlated pair map used by the protection system
- Trade warning thresholds
- Portfolio warning thresholds
- Beginner protection limits

Usage:
    from fxrisk.config import load_config

    config = load_config(Path("config/risk_rules.yaml"))
    rules = config.trade_rules
"""

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger


# Symmetric correlation scores between base currencies. Only these pairs are
# scored; everything else counts as uncorrelated.
CURRENCY_CORRELATIONS: Dict[str, Dict[str, float]] = {
    "EUR": {"GBP": 0.7, "AUD": 0.6, "NZD": 0.5},
    "GBP": {"EUR": 0.7, "AUD": 0.5, "NZD": 0.4},
    "AUD": {"EUR": 0.6, "GBP": 0.5, "NZD": 0.8},
    "NZD": {"EUR": 0.5, "GBP": 0.4, "AUD": 0.8},
    "USD": {"CAD": 0.3},
    "CAD": {"USD": 0.3},
}

CORRELATED_PAIRS: Dict[str, List[str]] = {
    "EUR/USD": ["GBP/USD", "AUD/USD"],
    "GBP/USD": ["EUR/USD", "AUD/USD"],
    "USD/JPY": ["EUR/JPY", "GBP/JPY"],
    "AUD/USD": ["EUR/USD", "GBP/USD", "NZD/USD"],
    "NZD/USD": ["AUD/USD"],
}

# Pip size doubles as the assumed one-pip spread
PIP_SIZE_JPY = 0.01
PIP_SIZE_DEFAULT = 0.0001


@dataclass
class TradeRules:
    """Thresholds for single-trade warnings."""
    max_lots: float = 1.0
    tight_stop_pips: float = 10.0
    wide_stop_pips: float = 200.0
    high_risk_pct: float = 2.0


@dataclass
class PortfolioRules:
    """Thresholds for portfolio warnings and the heat map."""
    max_exposure_pct: float = 10.0
    max_concentration_pct: float = 5.0
    max_correlation_pct: float = 50.0
    min_diversification: float = 50.0
    diversification_per_currency: float = 12.5
    heatmap_levels: List[float] = field(default_factory=lambda: [1.0, 3.0, 5.0])
    correlated_exposure_pct: float = 2.0
    correlations: Dict[str, Dict[str, float]] = field(
        default_factory=lambda: copy.deepcopy(CURRENCY_CORRELATIONS)
    )


@dataclass
class ProtectionLimits:
    """Beginner protection limits."""
    max_beginner_risk_pct: float = 0.5
    beginner_period_days: int = 90
    max_drawdown_pct: float = 10.0
    daily_trade_limit: int = 3
    weekly_trade_limit: int = 15
    news_hours: List[int] = field(default_factory=lambda: [8, 10, 14])
    liquid_hours: List[int] = field(default_factory=lambda: [6, 20])
    correlated_pairs: Dict[str, List[str]] = field(
        default_factory=lambda: copy.deepcopy(CORRELATED_PAIRS)
    )


@dataclass
class RiskConfig:
    """Resolved configuration for all components."""
    trade_rules: TradeRules = field(default_factory=TradeRules)
    portfolio_rules: PortfolioRules = field(default_factory=PortfolioRules)
    protection_limits: ProtectionLimits = field(default_factory=ProtectionLimits)


_SECTIONS = {
    "trade_rules": TradeRules,
    "portfolio_rules": PortfolioRules,
    "protection_limits": ProtectionLimits,
}


def default_config() -> Dict[str, Any]:
    """Return the bundled configuration as a plain dictionary."""
    return {
        "trade_rules": {
            "max_lots": 1.0,
            "tight_stop_pips": 10.0,
            "wide_stop_pips": 200.0,
            "high_risk_pct": 2.0,
        },
        "portfolio_rules": {
            "max_exposure_pct": 10.0,
            "max_concentration_pct": 5.0,
            "max_correlation_pct": 50.0,
            "min_diversification": 50.0,
            "diversification_per_currency": 12.5,
            "heatmap_levels": [1.0, 3.0, 5.0],
            "correlated_exposure_pct": 2.0,
            "correlations": copy.deepcopy(CURRENCY_CORRELATIONS),
        },
        "protection_limits": {
            "max_beginner_risk_pct": 0.5,
            "beginner_period_days": 90,
            "max_drawdown_pct": 10.0,
            "daily_trade_limit": 3,
            "weekly_trade_limit": 15,
            "news_hours": [8, 10, 14],
            "liquid_hours": [6, 20],
            "correlated_pairs": copy.deepcopy(CORRELATED_PAIRS),
        },
    }


def build_config(raw: Optional[Dict[str, Any]] = None) -> RiskConfig:
    """
    Build a RiskConfig from a (partial) configuration dictionary.

    Sections and keys not present fall back to the bundled defaults.

    Args:
        raw: Configuration dictionary, e.g. parsed YAML

    Returns:
        Resolved RiskConfig

    Raises:
        ValueError: On an unknown section or key, or a section that is not a mapping
    """
    merged = default_config()

    raw = raw or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config must be a mapping, got {type(raw).__name__}")

    for section, values in raw.items():
        if section not in _SECTIONS:
            raise ValueError(f"Unknown config section: {section}")
        values = values or {}
        if not isinstance(values, dict):
            raise ValueError(f"Config section {section} must be a mapping")
        for key, value in values.items():
            if key not in merged[section]:
                raise ValueError(f"Unknown config key: {section}.{key}")
            merged[section][key] = value

    return RiskConfig(
        trade_rules=TradeRules(**merged["trade_rules"]),
        portfolio_rules=PortfolioRules(**merged["portfolio_rules"]),
        protection_limits=ProtectionLimits(**merged["protection_limits"]),
    )


def load_config(config_path: Optional[Path] = None) -> RiskConfig:
    """
    Load configuration from a YAML file.

    A missing file is not an error: defaults are used instead.

    Args:
        config_path: Path to YAML config

    Returns:
        Resolved RiskConfig
    """
    if config_path is None:
        return build_config()

    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Config not found: {config_path}, using defaults")
        return build_config()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    logger.debug(f"Loaded risk rules from {config_path}")
    return build_config(raw)
