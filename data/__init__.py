"""
QuantPyTrader Trade Data Package

Prepares trade logs for the analytics engine. Files are read by the caller;
this package only normalizes the loaded rows.

Key Components:
- preprocessors/: Trade log normalization
"""

__version__ = "1.0.0"
__author__ = "QuantPyTrader Team"

from .preprocessors import TradeNormalizer, normalize_trades

__all__ = [
    "TradeNormalizer",
    "normalize_trades"
]
