"""
Unit Tests for Portfolio Analytics

Tests currency exposure, concentration, correlation, diversification,
warnings, the heat map, market-condition sizing and drawdown impact.
"""

import math
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fxrisk.config import PortfolioRules
from fxrisk.risk import (
    AnalyticsResult,
    MarketConditions,
    PendingTrade,
    PortfolioAnalytics,
    WarningSeverity,
    drawdown_impact,
    optimal_position_size,
    required_recovery_gain,
    split_pair,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def analytics():
    return PortfolioAnalytics()


@pytest.fixture
def two_usd_buys():
    """EUR/USD and GBP/USD buys risking $50 each."""
    return [
        PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=50),
        PendingTrade(pair="GBP/USD", direction="buy", risk_dollars=50),
    ]


# =============================================================================
# Exposure Tests
# =============================================================================

class TestExposure:
    """Tests for per-currency exposure."""

    def test_two_usd_buys(self, analytics, two_usd_buys):
        """Buying two USD crosses doubles the short USD exposure."""
        result = analytics.analyze(two_usd_buys, 10000)

        assert result.total_exposure == 100
        assert result.currency_exposure == {"EUR": 50, "USD": -100, "GBP": 50}
        assert result.concentration_risk == pytest.approx(1.0)
        assert result.correlation_risk == pytest.approx(70)

    def test_sell_reverses_exposure(self, analytics):
        result = analytics.analyze(
            [PendingTrade(pair="USD/JPY", direction="sell", risk_dollars=80)], 10000
        )

        assert result.currency_exposure == {"USD": -80, "JPY": 80}
        assert result.total_exposure == 80

    def test_pending_trade_included(self, analytics, two_usd_buys):
        """A pending trade counts like a recorded one."""
        with_pending = analytics.analyze(two_usd_buys[:1], 10000, pending_trade=two_usd_buys[1])
        recorded = analytics.analyze(two_usd_buys, 10000)

        assert with_pending.to_dict() == recorded.to_dict()

    def test_exposure_balances(self, analytics):
        """Each trade adds equal and opposite amounts to base and quote."""
        trades = [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=120),
            PendingTrade(pair="USD/JPY", direction="sell", risk_dollars=45),
            PendingTrade(pair="AUD/NZD", direction="buy", risk_dollars=30),
            PendingTrade(pair="EUR/GBP", direction="sell", risk_dollars=75),
        ]
        result = analytics.analyze(trades, 10000)

        assert sum(result.currency_exposure.values()) == pytest.approx(0)
        assert all(abs(v) <= result.total_exposure for v in result.currency_exposure.values())

    def test_compact_pair_format(self, analytics):
        """Pairs without a slash are split after three letters."""
        result = analytics.analyze([PendingTrade(pair="EURUSD", direction="buy", risk_dollars=10)], 1000)

        assert result.currency_exposure == {"EUR": 10, "USD": -10}

    def test_split_pair(self):
        assert split_pair("GBP/JPY") == ("GBP", "JPY")
        assert split_pair("AUDCAD") == ("AUD", "CAD")


# =============================================================================
# Empty and Purity Tests
# =============================================================================

class TestEmptyPortfolio:
    """Tests for degenerate inputs."""

    def test_empty_trades(self, analytics):
        result = analytics.analyze([], 10000)

        assert isinstance(result, AnalyticsResult)
        assert result.total_exposure == 0
        assert result.currency_exposure == {}
        assert result.concentration_risk == 0
        assert result.correlation_risk == 0
        assert result.diversification_score == 0
        assert result.warnings == []

    def test_zero_balance_never_fails(self, analytics, two_usd_buys):
        result = analytics.analyze(two_usd_buys, 0)

        assert result.concentration_risk == 0
        assert result.total_exposure == 100

    def test_repeatable(self, analytics, two_usd_buys):
        """Identical inputs give identical output."""
        first = analytics.analyze(two_usd_buys, 10000).to_dict()
        second = analytics.analyze(two_usd_buys, 10000).to_dict()

        assert first == second


# =============================================================================
# Correlation and Diversification Tests
# =============================================================================

class TestCorrelationRisk:
    """Tests for correlation scoring."""

    def test_same_base_not_correlated(self, analytics):
        trades = [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=50),
            PendingTrade(pair="EUR/JPY", direction="buy", risk_dollars=50),
        ]

        assert analytics.analyze(trades, 10000).correlation_risk == 0

    def test_usd_cad(self, analytics):
        trades = [
            PendingTrade(pair="USD/CAD", direction="buy", risk_dollars=50),
            PendingTrade(pair="CAD/JPY", direction="buy", risk_dollars=50),
        ]

        assert analytics.analyze(trades, 10000).correlation_risk == pytest.approx(30)

    def test_uncorrelated_pairs_excluded_from_average(self, analytics):
        """Only scored pairs enter the average."""
        trades = [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=10),
            PendingTrade(pair="AUD/USD", direction="buy", risk_dollars=10),
            PendingTrade(pair="USD/JPY", direction="buy", risk_dollars=10),
        ]

        # EUR-AUD 0.6 is the only scored pair
        assert analytics.analyze(trades, 10000).correlation_risk == pytest.approx(60)

    def test_average_over_pairs(self, analytics):
        trades = [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=10),
            PendingTrade(pair="GBP/USD", direction="buy", risk_dollars=10),
            PendingTrade(pair="NZD/USD", direction="buy", risk_dollars=10),
        ]

        # EUR-GBP 0.7, EUR-NZD 0.5, GBP-NZD 0.4
        assert analytics.analyze(trades, 10000).correlation_risk == pytest.approx(160 / 3)

    def test_diversification_score(self, analytics, two_usd_buys):
        assert analytics.analyze(two_usd_buys, 10000).diversification_score == 37.5

    def test_diversification_capped(self, analytics):
        pairs = ["EUR/USD", "GBP/JPY", "AUD/CAD", "NZD/CHF", "SEK/NOK"]
        trades = [PendingTrade(pair=p, direction="buy", risk_dollars=1) for p in pairs]

        assert analytics.analyze(trades, 10000).diversification_score == 100


# =============================================================================
# Warning Tests
# =============================================================================

class TestPortfolioWarnings:
    """Tests for warning generation."""

    def test_concentration_and_diversification(self, analytics):
        result = analytics.analyze(
            [PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=600)], 10000
        )

        assert [w.type for w in result.warnings] == ["concentration", "diversification"]
        concentration = result.warnings[0]
        assert concentration.severity == WarningSeverity.MEDIUM
        assert "6.0%" in concentration.message
        assert "EUR" in concentration.message
        assert concentration.recommendation == "Diversify across more currency pairs"
        assert result.warnings[1].severity == WarningSeverity.LOW

    def test_high_exposure(self, analytics):
        trades = [
            PendingTrade(pair=pair, direction="buy", risk_dollars=300)
            for pair in ["EUR/USD", "GBP/JPY", "AUD/CAD", "NZD/CHF", "SEK/NOK"]
        ]
        result = analytics.analyze(trades, 10000)

        high = [w for w in result.warnings if w.type == "high_exposure"]
        assert len(high) == 1
        assert high[0].severity == WarningSeverity.HIGH
        assert high[0].message == "Total portfolio exposure is 15.0% of account"

    def test_correlation_warning(self, analytics, two_usd_buys):
        result = analytics.analyze(two_usd_buys, 10000)

        types = [w.type for w in result.warnings]
        assert "correlation" in types
        assert "high_exposure" not in types

    def test_warning_to_dict(self, analytics, two_usd_buys):
        warning = analytics.analyze(two_usd_buys, 10000).warnings[0]

        assert set(warning.to_dict()) == {"type", "severity", "message", "recommendation"}
        assert warning.to_dict()["severity"] in {"high", "medium", "low"}

    def test_custom_rules(self, two_usd_buys):
        analytics = PortfolioAnalytics(PortfolioRules(max_correlation_pct=80, min_diversification=0))

        assert analytics.analyze(two_usd_buys, 10000).warnings == []


# =============================================================================
# Heat Map Tests
# =============================================================================

class TestCurrencyHeatmap:
    """Tests for the per-currency heat map."""

    def test_rows_sorted_by_exposure(self, analytics, two_usd_buys):
        rows = analytics.currency_heatmap(two_usd_buys, 10000)

        assert rows[0].currency == "USD"
        assert rows[0].exposure == 100
        assert rows[0].direction == "short"
        assert rows[0].percentage == pytest.approx(1.0)
        assert rows[0].risk_level == "medium"
        assert {r.currency for r in rows[1:]} == {"EUR", "GBP"}
        assert all(r.risk_level == "low" and r.direction == "long" for r in rows[1:])

    def test_risk_levels(self, analytics):
        rows = analytics.currency_heatmap(
            [PendingTrade(pair="EUR/USD", direction="sell", risk_dollars=400)], 10000
        )

        assert [r.risk_level for r in rows] == ["high", "high"]
        assert rows[0].direction == "short"

    def test_critical(self, analytics):
        rows = analytics.currency_heatmap(
            [], 1000, pending_trade=PendingTrade(pair="GBP/USD", direction="buy", risk_dollars=50)
        )

        assert {r.risk_level for r in rows} == {"critical"}


class TestHeatmapWarnings:
    """Tests for the notes shown under the heat map."""

    @pytest.fixture
    def eur_gbp_longs(self):
        return [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=300),
            PendingTrade(pair="GBP/USD", direction="buy", risk_dollars=300),
        ]

    def test_concentration_and_correlation(self, analytics, eur_gbp_longs):
        """Correlated currencies are reported once per pair."""
        assert analytics.heatmap_warnings(eur_gbp_longs, 10000) == [
            "High concentration in USD: 6.0%",
            "EUR and GBP positions are correlated",
        ]

    def test_pending_trade_included(self, analytics, eur_gbp_longs):
        warnings = analytics.heatmap_warnings(eur_gbp_longs[:1], 10000, pending_trade=eur_gbp_longs[1])

        assert "EUR and GBP positions are correlated" in warnings

    def test_total_exposure(self, analytics):
        trades = [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=600),
            PendingTrade(pair="USD/JPY", direction="buy", risk_dollars=600),
        ]

        assert analytics.heatmap_warnings(trades, 10000) == [
            "High concentration in EUR: 6.0%",
            "High concentration in JPY: 6.0%",
            "Total portfolio risk is 12.0% - consider reducing exposure",
        ]

    def test_usd_cad_group(self, analytics):
        trades = [
            PendingTrade(pair="USD/JPY", direction="buy", risk_dollars=300),
            PendingTrade(pair="CAD/JPY", direction="buy", risk_dollars=300),
        ]

        assert analytics.heatmap_warnings(trades, 10000) == [
            "High concentration in JPY: 6.0%",
            "USD and CAD positions are correlated",
        ]

    def test_opposite_directions_not_correlated(self, analytics):
        trades = [
            PendingTrade(pair="EUR/USD", direction="buy", risk_dollars=300),
            PendingTrade(pair="GBP/USD", direction="sell", risk_dollars=300),
        ]

        assert analytics.heatmap_warnings(trades, 10000) == []

    def test_small_exposure_quiet(self, analytics, two_usd_buys):
        assert analytics.heatmap_warnings(two_usd_buys, 10000) == []

    def test_correlated_threshold_from_rules(self, two_usd_buys):
        analytics = PortfolioAnalytics(PortfolioRules(correlated_exposure_pct=0.25))

        assert analytics.heatmap_warnings(two_usd_buys, 10000) == ["EUR and GBP positions are correlated"]

    def test_non_positive_balance(self, analytics, eur_gbp_longs):
        assert analytics.heatmap_warnings(eur_gbp_longs, 0) == []


# =============================================================================
# Market Condition Sizing Tests
# =============================================================================

class TestOptimalPositionSize:
    """Tests for market-condition haircuts."""

    def test_no_conditions(self):
        sizing = optimal_position_size(10000, 1, 50, 0.1)

        assert sizing.adjusted_risk == 1
        assert sizing.risk_dollars == 100
        assert sizing.position_size == pytest.approx(20)
        assert sizing.adjustments == {"volatility": False, "news_risk": False, "liquidity": False}

    def test_all_haircuts_stack(self):
        conditions = MarketConditions(volatility=80, news_risk=70, liquidity=40)
        sizing = optimal_position_size(10000, 1, 50, 0.1, conditions)

        assert sizing.original_risk == 1
        assert sizing.adjusted_risk == pytest.approx(0.28)
        assert sizing.risk_dollars == pytest.approx(28)
        assert sizing.position_size == pytest.approx(5.6)
        assert all(sizing.adjustments.values())

    def test_single_haircut(self):
        sizing = optimal_position_size(10000, 2, 50, 0.1, MarketConditions(news_risk=61))

        assert sizing.adjusted_risk == pytest.approx(1.0)
        assert sizing.adjustments["news_risk"] == True
        assert sizing.adjustments["volatility"] == False

    def test_thresholds_are_strict(self):
        conditions = MarketConditions(volatility=70, news_risk=60, liquidity=50)

        assert optimal_position_size(10000, 1, 50, 0.1, conditions).adjusted_risk == 1

    def test_zero_stop(self):
        assert optimal_position_size(10000, 1, 0, 0.1).position_size == 0


# =============================================================================
# Drawdown Impact Tests
# =============================================================================

class TestDrawdownImpact:
    """Tests for drawdown impact notes."""

    def test_no_drawdown(self):
        assert drawdown_impact(0, 10000) == []

    def test_twenty_percent(self):
        impacts = drawdown_impact(20, 10000)

        assert [i.type for i in impacts] == ["recovery", "real_world"]
        assert impacts[0].message == "25.0% gain needed to recover from 20.0% drawdown"
        assert impacts[0].severity == WarningSeverity.HIGH
        assert impacts[1].message == "$2000.00 loss equals approximately 40 days of average expenses"
        assert impacts[1].severity == WarningSeverity.INFO

    @pytest.mark.parametrize("drawdown,severity", [
        (3, WarningSeverity.LOW),
        (5, WarningSeverity.LOW),
        (7.5, WarningSeverity.MEDIUM),
        (10, WarningSeverity.MEDIUM),
        (10.5, WarningSeverity.HIGH),
    ])
    def test_severity(self, drawdown, severity):
        assert drawdown_impact(drawdown, 10000)[0].severity == severity

    def test_required_gain(self):
        assert required_recovery_gain(50) == pytest.approx(100)
        assert math.isinf(required_recovery_gain(100))

    def test_total_loss(self):
        impacts = drawdown_impact(100, 10000)

        assert impacts[0].severity == WarningSeverity.HIGH
        assert "not possible" in impacts[0].message


# =============================================================================
# Run Tests
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
