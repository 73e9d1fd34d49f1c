"""
Period Segmentation

Partitions the traded date range into fixed-length, non-overlapping windows
anchored at the first trade's timestamp. A "month" is a fixed 30 days, not a
calendar month, so long month windows drift against the calendar.
"""

from typing import List
from datetime import timedelta
import bisect
import logging

from .interfaces import CashFlow, ConfigurationError, Period, PeriodUnit

logger = logging.getLogger(__name__)


UNIT_ALIASES = {
    'day': PeriodUnit.DAY, 'days': PeriodUnit.DAY, '日': PeriodUnit.DAY,
    'week': PeriodUnit.WEEK, 'weeks': PeriodUnit.WEEK, '週': PeriodUnit.WEEK, '周': PeriodUnit.WEEK,
    'month': PeriodUnit.MONTH, 'months': PeriodUnit.MONTH, '月': PeriodUnit.MONTH,
}

UNIT_DAYS = {
    PeriodUnit.DAY: 1,
    PeriodUnit.WEEK: 7,
    PeriodUnit.MONTH: 30,
}


def parse_period_unit(unit: str) -> PeriodUnit:
    """Resolve a period unit name or alias."""
    try:
        return UNIT_ALIASES[str(unit).strip().lower()]
    except KeyError:
        raise ConfigurationError(f"Unsupported period unit: {unit!r}") from None


def period_interval(unit: str, length: int) -> timedelta:
    """Length of one window."""
    if length <= 0:
        raise ConfigurationError("Period length must be a positive integer")

    period_unit = parse_period_unit(unit)
    if period_unit == PeriodUnit.MONTH:
        logger.debug("Month periods use a fixed 30-day window")
    return timedelta(days=UNIT_DAYS[period_unit] * length)


def segment_periods(flows: List[CashFlow], unit: str = "day", length: int = 1) -> List[Period]:
    """
    Split cash flows into consecutive windows.

    Args:
        flows: Cash flows sorted by ascending timestamp
        unit: Window unit (day, week or month)
        length: Number of units per window

    Returns:
        Non-empty periods with 1-based indexes, in chronological order
    """
    interval = period_interval(unit, length)
    if not flows:
        return []

    timestamps = [flow.timestamp for flow in flows]
    last_timestamp = timestamps[-1]

    periods = []
    window_start = timestamps[0]
    while window_start <= last_timestamp:
        window_end = window_start + interval
        lo = bisect.bisect_left(timestamps, window_start)
        hi = bisect.bisect_left(timestamps, window_end)

        if hi > lo:
            periods.append(Period(
                index=len(periods) + 1,
                start=window_start,
                end=window_end,
                trades=flows[lo:hi],
            ))
        window_start = window_end

    logger.info(f"Segmented {len(flows)} trades into {len(periods)} periods of {length} {unit}")
    return periods
