"""
QuantPyTrader Performance Analytics

Turns a chronological log of closed trades into a portfolio performance
analysis: overall and per-period risk/return statistics, an equity curve,
drawdown events and P&L / drawdown distributions.

Quick Start:
    from datetime import datetime
    from analytics import PerformanceAnalyzer, AnalysisConfig, Trade

    trades = [
        Trade(datetime(2024, 1, 2, 10, 30), pnl=0.0, pnl_percent=10.0),
        Trade(datetime(2024, 1, 3, 14, 0), pnl=0.0, pnl_percent=-5.0),
    ]

    config = AnalysisConfig(initial_capital=10000, position_size_type="fixed", position_size=100)
    results = PerformanceAnalyzer(config).analyze(trades)

    print(f"Sharpe Ratio: {results.overall_stats.sharpe_ratio:.3f}")
    print(f"Max Drawdown: {results.overall_stats.max_drawdown_pct:.2f}%")
"""

import logging

from .core import (
    PerformanceAnalyzer,
    analyze_trades,
    AnalysisConfig,
    AnalysisResults,
    AnalyticsError,
    ConfigurationError,
    InputDataError,
    Trade,
    PerformanceStats,
    DrawdownEvent,
    DistributionBin,
    get_architecture_info
)

__version__ = "1.0.0"
__author__ = "QuantPyTrader Team"
__description__ = "Trade log performance analytics"

__all__ = [
    "PerformanceAnalyzer",
    "analyze_trades",
    "AnalysisConfig",
    "AnalysisResults",
    "AnalyticsError",
    "ConfigurationError",
    "InputDataError",
    "Trade",
    "PerformanceStats",
    "DrawdownEvent",
    "DistributionBin",
    "get_architecture_info"
]

logger = logging.getLogger(__name__)
logger.debug(f"Initialized QuantPyTrader Performance Analytics v{__version__}")
