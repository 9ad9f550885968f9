"""
fxrisk: forex position sizing and portfolio risk analytics.

Subpackages:
- fxrisk.risk: Position sizing, portfolio analytics, trade log, performance
- fxrisk.protection: Beginner protection checks and psychology heuristics
- fxrisk.outputs: Display formatting
"""

__version__ = "0.1.0"
