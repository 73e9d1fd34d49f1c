"""
Tests for Position Sizing and Cash-Flow Conversion

Covers fixed and compounding percentage stakes, percentage-vs-dollar P&L
precedence, commissions and the sequential equity recurrence.
"""

import unittest
from datetime import datetime, timedelta
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from analytics.core.position_sizing import PositionSizer, equity_trajectory
from analytics.core.interfaces import AnalysisConfig, PositionSizeType, Trade
from tests.test_utils import make_trades, make_dollar_trades


class TestFixedSizing(unittest.TestCase):
    """Test constant dollar stakes."""

    def setUp(self):
        """Set up test fixtures."""
        self.sizer = PositionSizer(initial_capital=10000.0,
                                   position_size_type=PositionSizeType.FIXED,
                                   position_size=100.0)

    def test_percent_pnl_applied_to_stake(self):
        """Test the three-trade fixed stake scenario."""
        flows = self.sizer.convert(make_trades([10, -5, 10]))

        self.assertEqual([f.stake for f in flows], [100.0, 100.0, 100.0])
        self.assertAlmostEqual(flows[0].net_pnl, 10.0)
        self.assertAlmostEqual(flows[1].net_pnl, -5.0)
        self.assertAlmostEqual(flows[0].equity_after, 10010.0)

    def test_equity_chain(self):
        """Test each trade starts from the previous trade's equity."""
        flows = self.sizer.convert(make_trades([10, -5, 10, 3, -7]))

        self.assertEqual(flows[0].equity_before, 10000.0)
        for previous, current in zip(flows, flows[1:]):
            self.assertEqual(current.equity_before, previous.equity_after)

    def test_dollar_pnl_used_without_percent(self):
        """Test raw dollar P&L is used for fixed sizing."""
        flows = self.sizer.convert(make_dollar_trades([100.0, -50.0]))

        self.assertEqual(flows[0].gross_pnl, 100.0)
        self.assertEqual(flows[1].gross_pnl, -50.0)
        self.assertEqual(flows[-1].equity_after, 10050.0)

    def test_zero_percent_falls_back_to_dollar(self):
        """Test a zero percentage field does not override the dollar field."""
        trade = Trade(timestamp=datetime(2024, 1, 1), pnl=42.0, pnl_percent=0.0)
        flows = self.sizer.convert([trade])

        self.assertEqual(flows[0].gross_pnl, 42.0)

    def test_percent_takes_precedence_over_dollar(self):
        """Test a nonzero percentage field wins over the dollar field."""
        trade = Trade(timestamp=datetime(2024, 1, 1), pnl=999.0, pnl_percent=2.0)
        flows = self.sizer.convert([trade])

        self.assertAlmostEqual(flows[0].gross_pnl, 2.0)


class TestPercentageSizing(unittest.TestCase):
    """Test compounding stakes."""

    def setUp(self):
        """Set up test fixtures."""
        self.sizer = PositionSizer(initial_capital=10000.0,
                                   position_size_type=PositionSizeType.PERCENTAGE,
                                   position_size=10.0)

    def test_recursive_stake_dependency(self):
        """Test the 10% compounding scenario."""
        flows = self.sizer.convert(make_trades([10, -5, 10]))

        self.assertAlmostEqual(flows[0].stake, 1000.0)
        self.assertAlmostEqual(flows[0].net_pnl, 100.0)
        self.assertAlmostEqual(flows[0].equity_after, 10100.0)

        self.assertAlmostEqual(flows[1].stake, 1010.0)
        self.assertAlmostEqual(flows[1].net_pnl, -50.5)
        self.assertAlmostEqual(flows[1].equity_after, 10049.5)

        self.assertAlmostEqual(flows[2].stake, 1004.95)
        self.assertAlmostEqual(flows[2].net_pnl, 100.495)
        self.assertAlmostEqual(flows[2].equity_after, 10149.995)

    def test_dollar_pnl_ignored(self):
        """Test dollar-only trades book nothing under percentage sizing."""
        flows = self.sizer.convert(make_dollar_trades([100.0, -50.0]))

        self.assertEqual([f.gross_pnl for f in flows], [0.0, 0.0])
        self.assertEqual(flows[-1].equity_after, 10000.0)

    def test_no_stake_once_equity_is_gone(self):
        """Test stakes stop once equity is non-positive."""
        sizer = PositionSizer(initial_capital=100.0,
                              position_size_type=PositionSizeType.PERCENTAGE,
                              position_size=100.0)
        flows = sizer.convert(make_trades([-100, 50]))

        self.assertAlmostEqual(flows[0].equity_after, 0.0)
        self.assertEqual(flows[1].stake, 0.0)
        self.assertEqual(flows[1].net_pnl, 0.0)


class TestCommissions(unittest.TestCase):
    """Test commission handling."""

    def test_commission_on_stake(self):
        """Test commission = stake x round-trip rate."""
        sizer = PositionSizer(initial_capital=10000.0,
                              position_size_type=PositionSizeType.FIXED,
                              position_size=1000.0,
                              commission_rate=0.001)
        flows = sizer.convert(make_trades([1.0]))

        self.assertAlmostEqual(flows[0].commission, 1.0)
        self.assertAlmostEqual(flows[0].gross_pnl, 10.0)
        self.assertAlmostEqual(flows[0].net_pnl, 9.0)
        self.assertAlmostEqual(flows[0].equity_after, 10009.0)

    def test_commission_charged_on_flat_trade(self):
        """Test a zero-P&L trade still pays commission."""
        sizer = PositionSizer(initial_capital=10000.0, position_size=500.0, commission_rate=0.002)
        flows = sizer.convert(make_dollar_trades([0.0]))

        self.assertAlmostEqual(flows[0].net_pnl, -1.0)


class TestSizerHelpers(unittest.TestCase):
    """Test construction helpers and ordering checks."""

    def test_from_config(self):
        """Test building a sizer from AnalysisConfig."""
        config = AnalysisConfig(initial_capital=5000.0, position_size_type="Percentage",
                                position_size=20.0, commission_rate=0.01)
        sizer = PositionSizer.from_config(config)

        self.assertEqual(sizer.initial_capital, 5000.0)
        self.assertEqual(sizer.position_size_type, PositionSizeType.PERCENTAGE)
        self.assertEqual(sizer.calculate_stake(5000.0), 1000.0)

    def test_unsorted_trades_rejected(self):
        """Test out-of-order trades are refused."""
        trades = make_trades([1, 2])
        sizer = PositionSizer(initial_capital=1000.0)

        with self.assertRaises(ValueError):
            sizer.convert(list(reversed(trades)))

    def test_equity_trajectory(self):
        """Test trajectory is seeded by the initial capital."""
        sizer = PositionSizer(initial_capital=10000.0, position_size=100.0)
        flows = sizer.convert(make_trades([10, -5, 10]))
        trajectory = equity_trajectory(flows, 10000.0)

        self.assertEqual(len(trajectory), 4)
        self.assertEqual(trajectory[0], 10000.0)
        self.assertAlmostEqual(trajectory[-1], 10015.0)

    def test_empty_input(self):
        """Test no trades gives no cash flows."""
        self.assertEqual(PositionSizer(initial_capital=1000.0).convert([]), [])


if __name__ == '__main__':
    import logging
    logging.basicConfig(level=logging.WARNING)

    unittest.main(verbosity=2)
