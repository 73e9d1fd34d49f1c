"""
Daily Equity Aggregation

Folds a chronological cash-flow sequence into one DailyRecord per calendar
day that saw at least one trade.
"""

from typing import List
from itertools import groupby
import logging

from .interfaces import CashFlow, DailyRecord

logger = logging.getLogger(__name__)


def _daily_return(start_equity: float, end_equity: float) -> float:
    if start_equity == 0:
        return 0.0
    return (end_equity - start_equity) / start_equity


def aggregate_daily(flows: List[CashFlow]) -> List[DailyRecord]:
    """
    Aggregate cash flows into daily records.

    Each day starts at the equity before its first trade and ends at the
    equity after its last trade, so consecutive days always chain:
    start_equity(day N) == end_equity(day N-1).

    Args:
        flows: Cash flows sorted by ascending timestamp

    Returns:
        Daily records in ascending date order
    """
    records = []

    for day, day_flows in groupby(flows, key=lambda flow: flow.timestamp.date()):
        day_flows = list(day_flows)
        start_equity = day_flows[0].equity_before
        end_equity = day_flows[-1].equity_after

        records.append(DailyRecord(
            date=day,
            start_equity=start_equity,
            end_equity=end_equity,
            daily_pnl=end_equity - start_equity,
            trade_count=len(day_flows),
            daily_return=_daily_return(start_equity, end_equity),
        ))

    if records:
        logger.debug(f"Aggregated {len(flows)} trades into {len(records)} trading days "
                     f"({records[0].date} to {records[-1].date})")
    return records
