"""
Core Analytics Pipeline

This package provides the stages of the trade performance pipeline: position
sizing, daily aggregation, period segmentation, statistics, drawdown
detection and distribution binning, plus the engine that runs them in order.

Usage:
    from analytics.core import PerformanceAnalyzer, AnalysisConfig, Trade

    config = AnalysisConfig(
        initial_capital=10000.0,
        position_size_type="percentage",
        position_size=10.0,
        period_unit="week",
        period_length=1
    )

    results = PerformanceAnalyzer(config).analyze(trades)
"""

from .engine import PerformanceAnalyzer, analyze_trades
from .interfaces import (
    # Errors
    AnalyticsError,
    ConfigurationError,
    InputDataError,

    # Configuration and results
    AnalysisConfig,
    AnalysisResults,
    PositionSizeType,
    PeriodUnit,

    # Records
    Trade,
    CashFlow,
    EquityPoint,
    DailyRecord,
    Period,
    PeriodResult,
    DrawdownEvent,
    DistributionBin
)
from .position_sizing import PositionSizer, equity_trajectory
from .daily_aggregator import aggregate_daily
from .periods import segment_periods, period_interval
from .performance_metrics import PerformanceCalculator, PerformanceStats, RatioOutcome, calculate_stats
from .drawdown import DrawdownDetector, drawdown_depths
from .distribution import DistributionBinner, visible_bins
from .heatmap import METRIC_PROPERTIES, build_heatmap_matrix, summarize_periods

__version__ = "1.0.0"

__all__ = [
    # Engine
    "PerformanceAnalyzer",
    "analyze_trades",

    # Errors
    "AnalyticsError",
    "ConfigurationError",
    "InputDataError",

    # Configuration and results
    "AnalysisConfig",
    "AnalysisResults",
    "PositionSizeType",
    "PeriodUnit",

    # Records
    "Trade",
    "CashFlow",
    "EquityPoint",
    "DailyRecord",
    "Period",
    "PeriodResult",
    "DrawdownEvent",
    "DistributionBin",

    # Stages
    "PositionSizer",
    "equity_trajectory",
    "aggregate_daily",
    "segment_periods",
    "period_interval",
    "PerformanceCalculator",
    "PerformanceStats",
    "RatioOutcome",
    "calculate_stats",
    "DrawdownDetector",
    "drawdown_depths",
    "DistributionBinner",
    "visible_bins",

    # Heatmap data
    "METRIC_PROPERTIES",
    "build_heatmap_matrix",
    "summarize_periods"
]

PIPELINE_DESCRIPTION = """
Trade Performance Pipeline:

1. Normalizer: raw rows -> time-ordered Trade records
2. Position Sizer: trades -> cash flows under a fixed or percentage stake
3. Daily Aggregator: cash flows -> one equity record per trading day
4. Period Segmenter: fixed-length windows anchored at the first trade
5. Statistics: Sharpe, Sortino, Calmar, Omega, MDD, VaR/CVaR, win rate
6. Drawdown Detector: peak -> trough -> recovery events
7. Distribution Binner: standard-deviation scaled histograms
"""


def get_architecture_info() -> dict:
    """Get information about the analytics pipeline."""
    return {
        "version": __version__,
        "description": PIPELINE_DESCRIPTION,
        "core_components": [
            "PerformanceAnalyzer - Pipeline orchestration",
            "PositionSizer - Stake and commission per trade",
            "PerformanceCalculator - Metric set per window",
            "DrawdownDetector - Drawdown events",
            "DistributionBinner - Adaptive histograms"
        ]
    }
