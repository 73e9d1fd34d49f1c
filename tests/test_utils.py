"""
Test Utilities

Common helpers for building trade sequences in the analytics tests.
"""

import numpy as np
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from analytics.core.interfaces import Trade


def make_trades(pnl_percents: Sequence[float],
                start: datetime = datetime(2024, 1, 1, 10, 0),
                step: timedelta = timedelta(days=1)) -> List[Trade]:
    """One percentage-P&L trade per step, starting at `start`."""
    return [Trade(timestamp=start + i * step, pnl=0.0, pnl_percent=pct)
            for i, pct in enumerate(pnl_percents)]


def make_dollar_trades(pnls: Sequence[float],
                       start: datetime = datetime(2024, 1, 1, 10, 0),
                       step: timedelta = timedelta(days=1)) -> List[Trade]:
    """One dollar-P&L trade per step, starting at `start`."""
    return [Trade(timestamp=start + i * step, pnl=pnl) for i, pnl in enumerate(pnls)]


def create_test_trades(n_trades: int = 200,
                       start: datetime = datetime(2023, 1, 2, 9, 30),
                       seed: Optional[int] = 42) -> List[Trade]:
    """
    Create a realistic random trade log.

    Trades land at irregular intraday times, several per day on some days,
    with both dollar and percentage P&L populated.

    Args:
        n_trades: Number of trades
        start: Timestamp of the first trade
        seed: Random seed for reproducible logs

    Returns:
        Trades in ascending timestamp order
    """
    rng = np.random.default_rng(seed)
    gaps_hours = rng.exponential(scale=10.0, size=n_trades)
    gaps_hours[0] = 0.0
    offsets = np.cumsum(gaps_hours)
    percents = rng.normal(0.3, 2.0, n_trades)

    return [Trade(timestamp=start + timedelta(hours=float(offset)),
                  pnl=float(pct) * 10,
                  pnl_percent=float(pct))
            for offset, pct in zip(offsets, percents)]
