"""
Period Heatmap Data

Lays period statistics out as a fixed-width grid and summarises them across
periods. Rendering and coloring belong to the presentation layer.
"""

from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import math
import numpy as np

from .interfaces import PeriodResult


@dataclass(frozen=True)
class MetricProperty:
    """Display metadata for a period metric."""
    display_name: str
    higher_is_better: bool
    decimals: int = 3

    def format(self, value: Optional[float]) -> str:
        if value is None or not math.isfinite(value):
            return "N/A"
        return f"{value:.{self.decimals}f}"


METRIC_PROPERTIES: Dict[str, MetricProperty] = {
    'sharpe_ratio': MetricProperty('Sharpe Ratio', True, 3),
    'sortino_ratio': MetricProperty('Sortino Ratio', True, 3),
    'calmar_ratio': MetricProperty('Calmar Ratio', True, 3),
    'max_drawdown_pct': MetricProperty('Max Drawdown (%)', False, 2),
    'win_rate': MetricProperty('Win Rate (%)', True, 1),
    'omega_ratio': MetricProperty('Omega Ratio', True, 3),
    'var_95': MetricProperty('VaR 95%', False, 2),
    'cvar_95': MetricProperty('CVaR 95%', False, 2),
    'total_return': MetricProperty('Total Return', True, 2),
}

DEFAULT_COLUMNS = 20


@dataclass(frozen=True)
class HeatmapCell:
    """One grid cell; period is None for padding cells after the last period."""
    position: int
    row: int
    col: int
    period: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    num_trades: int = 0
    values: Dict[str, Optional[float]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.period is None


@dataclass(frozen=True)
class HeatmapMatrix:
    rows: int
    cols: int
    total_periods: int
    cells: List[HeatmapCell]


def build_heatmap_matrix(period_results: List[PeriodResult],
                         columns: int = DEFAULT_COLUMNS) -> HeatmapMatrix:
    """Arrange period results row-major into a grid `columns` cells wide."""
    if columns <= 0:
        raise ValueError("Heatmap needs at least one column")

    total = len(period_results)
    rows = math.ceil(total / columns)
    cells = []

    for index in range(rows * columns):
        row, col = divmod(index, columns)
        if index < total:
            result = period_results[index]
            stats = result.stats.to_dict()
            cells.append(HeatmapCell(
                position=index + 1, row=row + 1, col=col + 1,
                period=result.period.index,
                start_date=result.period.start.date().isoformat(),
                end_date=result.period.end.date().isoformat(),
                num_trades=result.period.num_trades,
                values={key: stats[key] for key in METRIC_PROPERTIES},
            ))
        else:
            cells.append(HeatmapCell(
                position=index + 1, row=row + 1, col=col + 1,
                values={key: None for key in METRIC_PROPERTIES},
            ))

    return HeatmapMatrix(rows=rows, cols=columns, total_periods=total, cells=cells)


def summarize_periods(period_results: List[PeriodResult]) -> Dict[str, Any]:
    """Average of each metric across periods plus the total trade count."""
    summary: Dict[str, Any] = {}
    for key in METRIC_PROPERTIES:
        values = np.array([getattr(result.stats, key) for result in period_results], dtype=float)
        values = values[np.isfinite(values)]
        summary[key] = float(np.mean(values)) if len(values) else None

    summary['num_trades'] = sum(result.stats.num_trades for result in period_results)
    return summary
