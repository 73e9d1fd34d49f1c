"""
Drawdown Event Detection

Scans the daily equity series for peak -> trough -> recovery cycles. An
event opens on the first close below the running peak, follows the running
minimum as its trough, and closes as soon as equity gets back to the peak.
A drawdown still open on the last day is reported as unrecovered.
"""

from typing import List, Optional
from dataclasses import dataclass
from datetime import date
from enum import Enum
import logging

from .interfaces import DailyRecord, DrawdownEvent

logger = logging.getLogger(__name__)


class DrawdownState(Enum):
    AT_PEAK = "at_peak"
    IN_DRAWDOWN = "in_drawdown"


@dataclass
class _OpenDrawdown:
    start_date: date
    peak_equity: float
    trough_date: date
    trough_equity: float

    def close(self, end_date: date, recovery_equity: float, recovered: bool) -> DrawdownEvent:
        depth_usd = self.peak_equity - self.trough_equity
        depth_pct = depth_usd / self.peak_equity * 100 if self.peak_equity > 0 else 0.0
        return DrawdownEvent(
            start_date=self.start_date,
            peak_equity=self.peak_equity,
            trough_date=self.trough_date,
            trough_equity=self.trough_equity,
            end_date=end_date,
            recovery_equity=recovery_equity,
            recovered=recovered,
            depth_usd=depth_usd,
            depth_pct=depth_pct,
            to_trough_days=max((self.trough_date - self.start_date).days, 0),
            full_duration_days=max((end_date - self.start_date).days, 0),
        )


class DrawdownDetector:
    """Peak/trough/recovery state machine over daily records."""

    def detect(self, records: List[DailyRecord]) -> List[DrawdownEvent]:
        """
        Detect drawdown events.

        Args:
            records: Daily records in ascending date order

        Returns:
            Chronological, non-overlapping drawdown events
        """
        if not records:
            return []

        events = []
        state = DrawdownState.AT_PEAK
        peak_equity = records[0].start_equity
        peak_date = records[0].date
        current: Optional[_OpenDrawdown] = None

        for record in records:
            equity = record.end_equity

            if state == DrawdownState.AT_PEAK:
                if equity >= peak_equity:
                    peak_equity, peak_date = equity, record.date
                else:
                    current = _OpenDrawdown(start_date=peak_date, peak_equity=peak_equity,
                                            trough_date=record.date, trough_equity=equity)
                    state = DrawdownState.IN_DRAWDOWN
                continue

            if equity < current.trough_equity:
                current.trough_equity, current.trough_date = equity, record.date
            elif equity >= current.peak_equity:
                events.append(current.close(record.date, equity, recovered=True))
                current = None
                peak_equity, peak_date = equity, record.date
                state = DrawdownState.AT_PEAK

        if state == DrawdownState.IN_DRAWDOWN:
            last = records[-1]
            events.append(current.close(last.date, last.end_equity, recovered=False))
            logger.info(f"Drawdown from {current.start_date} is still open at {last.date} "
                        f"({events[-1].depth_pct:.2f}% deep)")

        logger.debug(f"Detected {len(events)} drawdown events over {len(records)} days")
        return events


def drawdown_depths(events: List[DrawdownEvent]) -> List[float]:
    """Signed depths (negative percent) used for the drawdown distribution."""
    return [-event.depth_pct for event in events]
