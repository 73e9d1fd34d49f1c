"""
Trade Log Normalization

Turns loosely-typed trade log rows (as read from broker CSV/Excel exports)
into a chronologically sorted list of Trade records. Column names differ
between brokers, so the timestamp and P&L columns are detected by keyword.

Parsing is lenient per record: an unreadable P&L counts as 0 and a row with
an unreadable timestamp is dropped. Only a log that cannot be analysed at all
raises InputDataError.
"""

import logging
import re
import pandas as pd
import numpy as np
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

from analytics.core.interfaces import InputDataError, Trade

logger = logging.getLogger(__name__)


DATE_KEYWORDS = ('date', 'time', 'timestamp', '日期', '時間', 'created', 'open', 'close')
PNL_KEYWORDS = ('p&l', 'pnl', 'profit', 'return', '損益', '獲利', '盈虧', 'pl', 'net', 'realized')
PERCENT_MARKERS = ('%', 'percent', 'pct')

EXCEL_EPOCH = datetime(1899, 12, 30)
_ISO_MINUTE = re.compile(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}')


@dataclass
class ColumnMapping:
    """Columns used for one normalization run."""
    date_column: str
    pnl_column: Optional[str] = None
    pnl_percent_column: Optional[str] = None


@dataclass
class NormalizationReport:
    """Record-level data loss of a normalization run."""
    total_records: int = 0
    parsed_trades: int = 0
    dropped_timestamps: int = 0
    unparsable_pnl: int = 0

    @property
    def completeness(self) -> float:
        """Share of input rows that became trades."""
        if self.total_records == 0:
            return 0.0
        return self.parsed_trades / self.total_records


@dataclass
class NormalizationResult:
    trades: List[Trade]
    mapping: ColumnMapping
    report: NormalizationReport = field(default_factory=NormalizationReport)

    @property
    def date_range(self) -> str:
        if not self.trades:
            return ""
        return f"{self.trades[0].timestamp.date().isoformat()} ~ {self.trades[-1].timestamp.date().isoformat()}"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and np.isnan(value):
        return True
    return value is pd.NaT


def _is_percent_column(name: str) -> bool:
    lowered = name.lower()
    return any(marker in lowered for marker in PERCENT_MARKERS)


def _from_excel_serial(days: float) -> Optional[datetime]:
    if not np.isfinite(days):
        return None
    try:
        return EXCEL_EPOCH + timedelta(days=days)
    except OverflowError:
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a trade timestamp.

    Accepts datetime objects, 'YYYY-MM-DD HH:MM' style strings, Excel serial
    day numbers and anything pandas can coerce. Returns None when unparseable.
    """
    if _is_missing(value):
        return None

    if isinstance(value, (pd.Timestamp, datetime)):
        timestamp = pd.Timestamp(value)
    elif isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        return _from_excel_serial(float(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        if not _ISO_MINUTE.match(text):
            try:
                return _from_excel_serial(float(text))
            except ValueError:
                pass
        timestamp = pd.to_datetime(text, errors='coerce')

    if pd.isna(timestamp):
        return None
    if timestamp.tzinfo is not None:
        # keep the wall-clock time so the trade's local date is preserved
        timestamp = timestamp.tz_localize(None)
    return timestamp.to_pydatetime()


def parse_pnl(value: Any) -> Tuple[float, bool]:
    """
    Parse a P&L cell.

    Returns:
        Tuple of (value, parsed); unparseable cells give (0.0, False)
    """
    if _is_missing(value):
        return 0.0, False

    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        number = float(value)
    else:
        text = str(value).replace(',', '').strip().rstrip('%').strip()
        try:
            number = float(text)
        except ValueError:
            return 0.0, False

    if not np.isfinite(number):
        return 0.0, False
    return number, True


class TradeNormalizer:
    """
    Normalizer for tabular trade logs.

    Column detection runs once per call to normalize() and is returned on the
    result; nothing is cached on the instance between runs.
    """

    def __init__(self,
                 date_column: Optional[str] = None,
                 pnl_column: Optional[str] = None,
                 pnl_percent_column: Optional[str] = None):
        """
        Initialize TradeNormalizer.

        Args:
            date_column: Explicit timestamp column, detected when omitted
            pnl_column: Explicit dollar P&L column, detected when omitted
            pnl_percent_column: Explicit percentage P&L column, detected when omitted
        """
        self.date_column = date_column
        self.pnl_column = pnl_column
        self.pnl_percent_column = pnl_percent_column

    def detect_columns(self, columns: Sequence[str]) -> ColumnMapping:
        """Pick the timestamp and P&L columns by keyword."""
        names = [str(column) for column in columns]

        date_column = self.date_column
        if date_column is None:
            date_candidates = [n for n in names if any(k in n.lower() for k in DATE_KEYWORDS)]
            if not date_candidates:
                raise InputDataError("No date column found in trade data")
            date_column = date_candidates[0]

        pnl_column, percent_column = self.pnl_column, self.pnl_percent_column
        if pnl_column is None and percent_column is None:
            pnl_candidates = [n for n in names
                              if n != date_column and any(k in n.lower() for k in PNL_KEYWORDS)]
            pnl_column = next((n for n in pnl_candidates if not _is_percent_column(n)), None)
            percent_column = next((n for n in pnl_candidates if _is_percent_column(n)), None)

        if pnl_column is None and percent_column is None:
            raise InputDataError("No P&L column found in trade data")

        mapping = ColumnMapping(date_column=date_column, pnl_column=pnl_column,
                                pnl_percent_column=percent_column)
        logger.info(f"Using date column {mapping.date_column!r}, P&L column {mapping.pnl_column!r}, "
                    f"percentage P&L column {mapping.pnl_percent_column!r}")
        return mapping

    def normalize(self, records: Union[pd.DataFrame, Iterable[Dict[str, Any]]]) -> NormalizationResult:
        """
        Normalize raw trade rows.

        Args:
            records: DataFrame or iterable of row dictionaries

        Returns:
            NormalizationResult with trades sorted by timestamp
        """
        df = records if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records))
        if df.empty:
            raise InputDataError("No trade records supplied")

        mapping = self.detect_columns(list(df.columns))
        for column in (mapping.date_column, mapping.pnl_column, mapping.pnl_percent_column):
            if column is not None and column not in df.columns:
                raise InputDataError(f"Column {column!r} not present in trade data")

        report = NormalizationReport(total_records=len(df))
        dates = df[mapping.date_column].tolist()
        pnls = df[mapping.pnl_column].tolist() if mapping.pnl_column else [None] * len(df)
        percents = (df[mapping.pnl_percent_column].tolist()
                    if mapping.pnl_percent_column else [None] * len(df))

        trades = []
        resolved_pnl = 0
        for row, (raw_date, raw_pnl, raw_percent) in enumerate(zip(dates, pnls, percents)):
            timestamp = parse_timestamp(raw_date)
            if timestamp is None:
                report.dropped_timestamps += 1
                logger.warning(f"Dropping row {row}: cannot parse timestamp {raw_date!r}")
                continue

            pnl, pnl_parsed = 0.0, False
            if mapping.pnl_column:
                pnl, pnl_parsed = parse_pnl(raw_pnl)
                if not pnl_parsed:
                    report.unparsable_pnl += 1

            pnl_percent = None
            if mapping.pnl_percent_column:
                percent, percent_parsed = parse_pnl(raw_percent)
                pnl_percent = percent if percent_parsed else None

            if pnl_parsed or pnl_percent is not None:
                resolved_pnl += 1

            trades.append(Trade(timestamp=timestamp, pnl=pnl, pnl_percent=pnl_percent))

        if not trades:
            raise InputDataError("No trade has a parseable timestamp")
        if resolved_pnl == 0:
            raise InputDataError("No trade has a parseable P&L value")

        trades.sort(key=lambda trade: trade.timestamp)
        report.parsed_trades = len(trades)

        if report.unparsable_pnl:
            logger.warning(f"{report.unparsable_pnl} P&L values could not be parsed and count as 0")
        logger.info(f"Normalized {report.parsed_trades}/{report.total_records} trade records")

        return NormalizationResult(trades=trades, mapping=mapping, report=report)


def normalize_trades(records: Union[pd.DataFrame, Iterable[Dict[str, Any]]]) -> List[Trade]:
    """Normalize rows with automatic column detection and return the trades."""
    return TradeNormalizer().normalize(records).trades
