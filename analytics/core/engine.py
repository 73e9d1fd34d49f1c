"""
Performance Analysis Engine

This module implements the PerformanceAnalyzer that runs the full analysis
pipeline over a closed-trade log:

    trades -> position sizing -> daily aggregation -> {periods, drawdowns}
           -> statistics / distributions

Each stage consumes the complete output of the previous one. The analyzer
keeps no state between runs.
"""

from typing import Any, Dict, Iterable, List, Union
from datetime import datetime
import logging
import pandas as pd

from .interfaces import (
    AnalysisConfig, AnalysisResults, ConfigurationError, EquityPoint,
    InputDataError, PeriodResult, Trade
)
from .position_sizing import PositionSizer
from .daily_aggregator import aggregate_daily
from .periods import period_interval, segment_periods
from .performance_metrics import PerformanceCalculator
from .drawdown import DrawdownDetector, drawdown_depths
from .distribution import DistributionBinner

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25


def _years_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 86400 / DAYS_PER_YEAR


class PerformanceAnalyzer:
    """
    Main analysis engine coordinating all pipeline stages.

    Example:
        analyzer = PerformanceAnalyzer(AnalysisConfig(initial_capital=10000))
        results = analyzer.analyze(trades)
        print(results.overall_stats.sharpe_ratio)
    """

    def __init__(self, config: AnalysisConfig):
        """
        Initialize analysis engine.

        Args:
            config: Analysis configuration
        """
        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(f"Invalid configuration: {config_errors}")

        # raises ConfigurationError for unknown units
        self.interval = period_interval(config.period_unit, config.period_length)
        self.config = config
        self.calculator = PerformanceCalculator()
        self.detector = DrawdownDetector()
        self.binner = DistributionBinner(config.bin_size_in_std_dev)

    def analyze(self, trades: List[Trade]) -> AnalysisResults:
        """
        Run the full analysis.

        Args:
            trades: Closed trades, sorted here by timestamp

        Returns:
            AnalysisResults with overall and per-period statistics
        """
        if not trades:
            raise InputDataError("No trades supplied for analysis")

        config = self.config
        ordered = sorted(trades, key=lambda trade: trade.timestamp)
        logger.info(f"Analyzing {len(ordered)} trades from {ordered[0].timestamp} to {ordered[-1].timestamp}")

        flows = PositionSizer.from_config(config).convert(ordered)
        equity_curve = [EquityPoint(ordered[0].timestamp, config.initial_capital)]
        equity_curve.extend(EquityPoint(flow.timestamp, flow.equity_after) for flow in flows)

        daily_records = aggregate_daily(flows)

        overall_stats = self.calculator.calculate_for_days(
            daily_records,
            elapsed_years=_years_between(ordered[0].timestamp, ordered[-1].timestamp),
            initial_capital=config.initial_capital,
            num_trades=len(flows),
        )

        period_results = []
        for period in segment_periods(flows, config.period_unit, config.period_length):
            period_days = aggregate_daily(period.trades)
            stats = self.calculator.calculate_for_days(
                period_days,
                elapsed_years=_years_between(period.start, period.end),
                initial_capital=period.trades[0].equity_before,
                num_trades=period.num_trades,
            )
            period_results.append(PeriodResult(period=period, stats=stats))

        drawdown_events = self.detector.detect(daily_records)
        pnl_distribution = self.binner.build([flow.net_pnl for flow in flows])
        drawdown_distribution = self.binner.build(drawdown_depths(drawdown_events))

        results = AnalysisResults(
            config=config,
            overall_stats=overall_stats,
            period_results=period_results,
            equity_curve=equity_curve,
            daily_records=daily_records,
            drawdown_events=drawdown_events,
            pnl_distribution=pnl_distribution,
            drawdown_distribution=drawdown_distribution,
            trading_date_range=(f"{ordered[0].timestamp.date().isoformat()} ~ "
                                f"{ordered[-1].timestamp.date().isoformat()}"),
        )

        logger.info(f"Analysis complete: final equity {results.final_equity:.2f}, "
                    f"Sharpe {overall_stats.sharpe_ratio:.3f}, MDD {overall_stats.max_drawdown_pct:.2f}%, "
                    f"{len(period_results)} periods, {len(drawdown_events)} drawdowns")
        return results

    def analyze_records(self, records: Union[pd.DataFrame, Iterable[Dict[str, Any]]]) -> AnalysisResults:
        """Normalize raw trade log rows, then analyze them."""
        from data.preprocessors.trade_normalizer import TradeNormalizer

        normalized = TradeNormalizer().normalize(records)
        return self.analyze(normalized.trades)


def analyze_trades(trades: List[Trade], config: AnalysisConfig = None) -> AnalysisResults:
    """
    Analyze trades with the given or default configuration.

    Args:
        trades: Closed trades
        config: Analysis configuration, defaults to AnalysisConfig()

    Returns:
        AnalysisResults
    """
    return PerformanceAnalyzer(config or AnalysisConfig()).analyze(trades)
