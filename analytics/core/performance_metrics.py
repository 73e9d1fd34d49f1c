"""
Standard Performance Metrics Calculator

This module computes the canonical risk/return metric set for any ordered
sequence of daily returns and daily dollar P&L, whether it covers a single
period or the whole trading history. Every ratio has an explicit fallback for
degenerate input and every reported value is finite.
"""

from typing import Dict, List, Optional, Any, Sequence
from dataclasses import dataclass, asdict
from enum import Enum
import numpy as np
import logging

from .interfaces import DailyRecord

logger = logging.getLogger(__name__)

VAR_CONFIDENCE_TAIL = 0.05


class RatioKind(Enum):
    """Outcome of a ratio whose denominator may vanish."""
    FINITE = "finite"
    UNBOUNDED_POSITIVE = "unbounded_positive"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class RatioOutcome:
    """Tagged ratio result, resolved to a reportable number at the boundary."""
    kind: RatioKind
    value: float = 0.0

    def resolve(self, unbounded: float = 0.0, undefined: float = 0.0) -> float:
        if self.kind == RatioKind.FINITE:
            return self.value
        if self.kind == RatioKind.UNBOUNDED_POSITIVE:
            return unbounded
        return undefined


def ratio(numerator: float, denominator: float,
          sign_reference: Optional[float] = None) -> RatioOutcome:
    """
    Divide, tagging a zero denominator instead of producing inf/NaN.

    With a zero denominator the outcome is unbounded when the sign reference
    (the numerator unless given) is positive, undefined otherwise.
    """
    if denominator == 0:
        reference = numerator if sign_reference is None else sign_reference
        if reference > 0:
            return RatioOutcome(RatioKind.UNBOUNDED_POSITIVE)
        return RatioOutcome(RatioKind.UNDEFINED)
    return RatioOutcome(RatioKind.FINITE, numerator / denominator)


def _finite(value: Any) -> float:
    value = float(value)
    return value if np.isfinite(value) else 0.0


@dataclass(frozen=True)
class PerformanceStats:
    """Container for the metric set of one window."""

    # Activity
    num_trades: int = 0
    num_days: int = 0

    # Returns
    total_return: float = 0.0  # dollars
    total_return_pct: float = 0.0
    annualized_return: float = 0.0  # percent
    mean_daily_return: float = 0.0
    std_daily_return: float = 0.0
    downside_deviation: float = 0.0

    # Risk-adjusted ratios
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    calmar_ratio: float = 0.0
    omega_ratio: float = 0.0

    # Risk
    max_drawdown_pct: float = 0.0
    max_drawdown_usd: float = 0.0
    var_95: float = 0.0
    cvar_95: float = 0.0

    # Consistency
    win_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to a flat dictionary."""
        return asdict(self)


class PerformanceCalculator:
    """
    Metric calculator for daily return series.

    Stateless: every call is a pure function of its arguments, so the same
    input always yields identical PerformanceStats.
    """

    def calculate_stats(self,
                        daily_returns: Sequence[float],
                        daily_pnl: Sequence[float],
                        elapsed_years: float,
                        initial_capital: float,
                        final_equity: float,
                        num_trades: int = 0) -> PerformanceStats:
        """
        Calculate the metric set for one window.

        Args:
            daily_returns: Daily returns as fractions, in date order
            daily_pnl: Daily dollar P&L, aligned with daily_returns
            elapsed_years: Length of the window in years
            initial_capital: Equity at the start of the window
            final_equity: Equity at the end of the window
            num_trades: Number of trades in the window

        Returns:
            PerformanceStats with every field finite
        """
        returns = np.asarray(daily_returns, dtype=float)
        pnl = np.asarray(daily_pnl, dtype=float)

        if len(returns) != len(pnl):
            raise ValueError("daily_returns and daily_pnl must have the same length")

        total_return = final_equity - initial_capital
        total_return_pct = ratio(total_return, initial_capital).resolve() * 100
        annualized = self._annualized_return(initial_capital, final_equity, elapsed_years)

        if len(returns) == 0:
            logger.warning("No trading days in window, reporting return metrics only")
            return PerformanceStats(
                num_trades=num_trades,
                total_return=_finite(total_return),
                total_return_pct=_finite(total_return_pct),
                annualized_return=_finite(annualized),
                omega_ratio=1.0,
            )

        mean_return = float(np.mean(returns))
        std_return = float(np.std(returns))
        downside_dev = self._downside_deviation(returns)

        sharpe = ratio(mean_return, std_return).resolve()
        sortino = ratio(mean_return, downside_dev).resolve()

        max_dd_pct, max_dd_usd = self._max_drawdown(pnl, initial_capital)
        calmar = ratio(annualized, max_dd_pct, sign_reference=total_return).resolve()

        gains = float(np.sum(pnl[pnl > 0]))
        losses = abs(float(np.sum(pnl[pnl < 0])))
        omega = ratio(gains, losses).resolve(unbounded=0.0, undefined=1.0)

        var_95, cvar_95 = self._value_at_risk(pnl)
        win_rate = np.count_nonzero(pnl > 0) / len(pnl) * 100

        return PerformanceStats(
            num_trades=num_trades,
            num_days=len(returns),
            total_return=_finite(total_return),
            total_return_pct=_finite(total_return_pct),
            annualized_return=_finite(annualized),
            mean_daily_return=_finite(mean_return),
            std_daily_return=_finite(std_return),
            downside_deviation=_finite(downside_dev),
            sharpe_ratio=_finite(sharpe),
            sortino_ratio=_finite(sortino),
            calmar_ratio=_finite(calmar),
            omega_ratio=_finite(omega),
            max_drawdown_pct=_finite(max_dd_pct),
            max_drawdown_usd=_finite(max_dd_usd),
            var_95=_finite(var_95),
            cvar_95=_finite(cvar_95),
            win_rate=_finite(win_rate),
        )

    def calculate_for_days(self,
                           records: List[DailyRecord],
                           elapsed_years: float,
                           initial_capital: Optional[float] = None,
                           num_trades: Optional[int] = None) -> PerformanceStats:
        """Calculate stats straight from daily records."""
        if initial_capital is None:
            initial_capital = records[0].start_equity if records else 0.0
        final_equity = records[-1].end_equity if records else initial_capital
        if num_trades is None:
            num_trades = sum(record.trade_count for record in records)

        return self.calculate_stats(
            daily_returns=[record.daily_return for record in records],
            daily_pnl=[record.daily_pnl for record in records],
            elapsed_years=elapsed_years,
            initial_capital=initial_capital,
            final_equity=final_equity,
            num_trades=num_trades,
        )

    def _downside_deviation(self, returns: np.ndarray) -> float:
        """Population RMS of the negative returns only."""
        negative = returns[returns < 0]
        if len(negative) == 0:
            return 0.0
        return float(np.sqrt(np.mean(negative ** 2)))

    def _max_drawdown(self, pnl: np.ndarray, initial_capital: float) -> tuple:
        """
        Largest peak-to-trough dollar decline, as (percent of its peak, dollars).

        Both values describe the same drop: the percentage is taken against
        the peak in force when the largest dollar drop occurred.
        """
        equity = initial_capital + np.cumsum(pnl)
        peaks = np.maximum.accumulate(np.concatenate(([initial_capital], equity)))[1:]
        drops = peaks - equity

        worst = int(np.argmax(drops))
        max_drop, peak = float(drops[worst]), float(peaks[worst])
        if max_drop <= 0 or peak <= 0:
            return 0.0, max(max_drop, 0.0)
        return max_drop / peak * 100, max_drop

    def _value_at_risk(self, pnl: np.ndarray) -> tuple:
        """Historical 95% VaR and CVaR of daily dollar P&L."""
        n = len(pnl)
        if n == 0:
            return 0.0, 0.0

        ordered = np.sort(pnl)
        index = int(np.floor(n * VAR_CONFIDENCE_TAIL))
        return float(ordered[index]), float(np.mean(ordered[:index + 1]))

    def _annualized_return(self, initial_capital: float, final_equity: float,
                           elapsed_years: float) -> float:
        """Compound annual growth rate in percent."""
        if elapsed_years <= 0 or initial_capital <= 0:
            return 0.0
        if final_equity <= 0:
            return -100.0

        with np.errstate(over='ignore', divide='ignore', invalid='ignore'):
            growth = np.power(final_equity / initial_capital, 1.0 / elapsed_years)
        return _finite((growth - 1.0) * 100)


def calculate_stats(daily_returns: Sequence[float],
                    daily_pnl: Sequence[float],
                    elapsed_years: float,
                    initial_capital: float,
                    final_equity: float,
                    num_trades: int = 0) -> PerformanceStats:
    """Module-level shortcut for PerformanceCalculator.calculate_stats."""
    return PerformanceCalculator().calculate_stats(
        daily_returns, daily_pnl, elapsed_years, initial_capital, final_equity, num_trades
    )
