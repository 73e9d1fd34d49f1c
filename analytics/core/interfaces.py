"""
Core Types, Configuration and Errors for the Analytics Engine

This module defines the records that flow between the stages of the trade
performance pipeline, the per-run configuration, and the exception hierarchy
raised when an analysis cannot be performed.
"""

from typing import Dict, List, Optional, Any
from datetime import datetime, date
from dataclasses import dataclass, field, asdict
from enum import Enum
import pandas as pd


# =============================================================================
# Errors
# =============================================================================

class AnalyticsError(ValueError):
    """Base class for errors that stop an analysis run."""


class ConfigurationError(AnalyticsError):
    """Raised when the analysis configuration is invalid."""


class InputDataError(AnalyticsError):
    """Raised when the trade input cannot be analysed at all."""


# =============================================================================
# Enumerations
# =============================================================================

class PositionSizeType(Enum):
    """Capital allocation policies."""
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class PeriodUnit(Enum):
    """Period window units."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# =============================================================================
# Pipeline Records
# =============================================================================

@dataclass(frozen=True)
class Trade:
    """A closed trade as consumed by the engine."""
    timestamp: datetime
    pnl: float
    pnl_percent: Optional[float] = None

    @property
    def has_percent_pnl(self) -> bool:
        return self.pnl_percent is not None and self.pnl_percent != 0


@dataclass(frozen=True)
class CashFlow:
    """A trade decorated with its sizing and the equity it produced."""
    trade: Trade
    stake: float
    gross_pnl: float
    commission: float
    net_pnl: float
    equity_before: float
    equity_after: float

    @property
    def timestamp(self) -> datetime:
        return self.trade.timestamp


@dataclass(frozen=True)
class EquityPoint:
    """Single point of the equity curve."""
    timestamp: datetime
    equity: float


@dataclass(frozen=True)
class DailyRecord:
    """Equity snapshot for one calendar day with at least one trade."""
    date: date
    start_equity: float
    end_equity: float
    daily_pnl: float
    trade_count: int
    daily_return: float  # fraction, (end - start) / start


@dataclass(frozen=True)
class Period:
    """Half-open window [start, end) holding at least one trade."""
    index: int
    start: datetime
    end: datetime
    trades: List[CashFlow] = field(default_factory=list)

    @property
    def num_trades(self) -> int:
        return len(self.trades)


@dataclass(frozen=True)
class DrawdownEvent:
    """Peak-to-trough-to-recovery cycle of the daily equity series."""
    start_date: date
    peak_equity: float
    trough_date: date
    trough_equity: float
    end_date: date
    recovery_equity: float
    recovered: bool
    depth_usd: float
    depth_pct: float
    to_trough_days: int
    full_duration_days: int


@dataclass(frozen=True)
class DistributionBin:
    """Histogram bin positioned in standard-deviation units."""
    bin_start: float
    bin_end: float
    bin_center: float
    count: int
    percentage: float
    std_dev_position: float


# =============================================================================
# Configuration and Results
# =============================================================================

@dataclass
class AnalysisConfig:
    """Configuration for a single analysis run."""

    # Capital and position sizing
    initial_capital: float = 10000.0
    position_size_type: str = "fixed"  # fixed, percentage
    position_size: float = 100.0  # dollars for fixed, percent of equity for percentage
    commission_rate: float = 0.0  # round-trip rate applied to the stake

    # Period segmentation
    period_unit: str = "day"  # day, week, month
    period_length: int = 1

    # Distributions
    bin_size_in_std_dev: float = 0.5
    distribution_display_range_sd: float = 3.0

    @property
    def sizing(self) -> PositionSizeType:
        return PositionSizeType(self.position_size_type.lower())

    def validate(self) -> List[str]:
        """Validate configuration parameters."""
        errors = []

        if not self.initial_capital > 0:
            errors.append("Initial capital must be positive")

        if self.position_size_type.lower() not in [t.value for t in PositionSizeType]:
            errors.append("Position size type must be 'fixed' or 'percentage'")

        if self.position_size < 0:
            errors.append("Position size cannot be negative")

        if not 0 <= self.commission_rate < 1:
            errors.append("Commission rate must be in [0, 1)")

        if not isinstance(self.period_length, int) or self.period_length <= 0:
            errors.append("Period length must be a positive integer")

        if not self.bin_size_in_std_dev > 0:
            errors.append("Bin size in standard deviations must be positive")

        if not self.distribution_display_range_sd > 0:
            errors.append("Distribution display range must be positive")

        return errors


@dataclass(frozen=True)
class PeriodResult:
    """Statistics of one emitted period."""
    period: Period
    stats: Any  # PerformanceStats

    def to_row(self) -> Dict[str, Any]:
        row = {
            'period': self.period.index,
            'start_date': self.period.start.date().isoformat(),
            'end_date': self.period.end.date().isoformat(),
        }
        row.update(self.stats.to_dict())
        return row


@dataclass
class AnalysisResults:
    """Container for the full output of an analysis run."""

    config: AnalysisConfig
    overall_stats: Any  # PerformanceStats
    period_results: List[PeriodResult]
    equity_curve: List[EquityPoint]
    daily_records: List[DailyRecord]
    drawdown_events: List[DrawdownEvent]
    pnl_distribution: List[DistributionBin]
    drawdown_distribution: List[DistributionBin]
    trading_date_range: str = ""

    @property
    def final_equity(self) -> float:
        return self.equity_curve[-1].equity if self.equity_curve else self.config.initial_capital

    def visible_pnl_distribution(self) -> List[DistributionBin]:
        """P&L bins within +/- distribution_display_range_sd of the mean."""
        from .distribution import visible_bins

        return visible_bins(self.pnl_distribution, self.config.distribution_display_range_sd)

    def visible_drawdown_distribution(self) -> List[DistributionBin]:
        """Drawdown depth bins within +/- distribution_display_range_sd of the mean."""
        from .distribution import visible_bins

        return visible_bins(self.drawdown_distribution, self.config.distribution_display_range_sd)

    def period_table(self) -> pd.DataFrame:
        """Tabular per-period statistics, one row per emitted period."""
        columns = ['period', 'start_date', 'end_date', 'sharpe_ratio', 'sortino_ratio',
                   'calmar_ratio', 'max_drawdown_pct', 'win_rate', 'omega_ratio',
                   'var_95', 'cvar_95', 'total_return', 'num_trades']
        rows = [result.to_row() for result in self.period_results]
        return pd.DataFrame(rows, columns=columns) if rows else pd.DataFrame(columns=columns)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of key results."""
        return {
            'trading_date_range': self.trading_date_range,
            'initial_capital': self.config.initial_capital,
            'final_equity': self.final_equity,
            'overall': self.overall_stats.to_dict(),
            'num_periods': len(self.period_results),
            'num_drawdowns': len(self.drawdown_events),
            'unrecovered_drawdown': bool(self.drawdown_events) and not self.drawdown_events[-1].recovered,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert results to plain python structures."""
        return {
            'summary': self.get_summary(),
            'periods': [result.to_row() for result in self.period_results],
            'equity_curve': [asdict(point) for point in self.equity_curve],
            'drawdown_events': [asdict(event) for event in self.drawdown_events],
            'pnl_distribution': [asdict(b) for b in self.pnl_distribution],
            'drawdown_distribution': [asdict(b) for b in self.drawdown_distribution],
        }
