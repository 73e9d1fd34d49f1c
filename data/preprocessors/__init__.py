"""
Data Preprocessors Package

Contains trade log preprocessing components:
- TradeNormalizer: Column detection, lenient parsing and sorting of trade rows
- ColumnMapping: Columns chosen for one normalization run
- NormalizationReport: Record-level data loss of a run
"""

from .trade_normalizer import (
    TradeNormalizer, ColumnMapping, NormalizationReport, NormalizationResult,
    normalize_trades, parse_pnl, parse_timestamp
)

__all__ = ["TradeNormalizer", "ColumnMapping", "NormalizationReport", "NormalizationResult",
           "normalize_trades", "parse_pnl", "parse_timestamp"]
