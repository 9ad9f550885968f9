"""
Outputs Module

Display formatting for risk calculations and portfolio analytics.
"""

from .formatter import (
    RiskReportFormatter,
    format_currency,
    format_percentage,
    format_price,
    format_risk_summary,
)


__all__ = [
    "RiskReportFormatter",
    "format_currency",
    "format_percentage",
    "format_price",
    "format_risk_summary",
]
