"""
Tests for Period Heatmap Data
"""

import unittest
from datetime import datetime, timedelta
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from analytics.core.heatmap import (
    METRIC_PROPERTIES, MetricProperty, build_heatmap_matrix, summarize_periods
)
from analytics.core.interfaces import Period, PeriodResult
from analytics.core.performance_metrics import PerformanceStats


def _period_results(sharpes, start=datetime(2024, 1, 1, 9, 0)):
    results = []
    for i, sharpe in enumerate(sharpes):
        period = Period(index=i + 1,
                        start=start + timedelta(days=i),
                        end=start + timedelta(days=i + 1))
        results.append(PeriodResult(period=period,
                                    stats=PerformanceStats(num_trades=2, sharpe_ratio=sharpe,
                                                           win_rate=50.0 + i)))
    return results


class TestMetricProperties(unittest.TestCase):
    """Test metric display metadata."""

    def test_catalogue(self):
        """Test direction flags of the risk metrics."""
        self.assertTrue(METRIC_PROPERTIES['sharpe_ratio'].higher_is_better)
        self.assertFalse(METRIC_PROPERTIES['max_drawdown_pct'].higher_is_better)
        self.assertEqual(len(METRIC_PROPERTIES), 9)

    def test_format(self):
        """Test formatting with the configured precision."""
        prop = MetricProperty('Win Rate (%)', True, 1)

        self.assertEqual(prop.format(12.34), '12.3')
        self.assertEqual(prop.format(55.0), '55.0')
        self.assertEqual(prop.format(None), 'N/A')
        self.assertEqual(prop.format(float('nan')), 'N/A')
        self.assertEqual(MetricProperty('Sharpe Ratio', True, 3).format(1.23456), '1.235')


class TestHeatmapMatrix(unittest.TestCase):
    """Test grid layout."""

    def test_row_major_layout(self):
        """Test cells fill rows left to right and pad the last row."""
        matrix = build_heatmap_matrix(_period_results([0.1 * i for i in range(7)]), columns=3)

        self.assertEqual(matrix.rows, 3)
        self.assertEqual(matrix.cols, 3)
        self.assertEqual(matrix.total_periods, 7)
        self.assertEqual(len(matrix.cells), 9)

        fifth = matrix.cells[4]
        self.assertEqual((fifth.row, fifth.col, fifth.position), (2, 2, 5))
        self.assertEqual(fifth.period, 5)
        self.assertEqual(fifth.start_date, '2024-01-05')
        self.assertAlmostEqual(fifth.values['sharpe_ratio'], 0.4)

        self.assertTrue(matrix.cells[7].is_empty)
        self.assertIsNone(matrix.cells[8].values['win_rate'])
        self.assertFalse(matrix.cells[6].is_empty)

    def test_default_width(self):
        """Test the default grid is 20 columns wide."""
        matrix = build_heatmap_matrix(_period_results([1.0] * 25))

        self.assertEqual(matrix.cols, 20)
        self.assertEqual(matrix.rows, 2)

    def test_no_periods(self):
        """Test an empty period list gives an empty grid."""
        matrix = build_heatmap_matrix([])

        self.assertEqual(matrix.rows, 0)
        self.assertEqual(matrix.cells, [])

    def test_invalid_columns(self):
        """Test a grid needs at least one column."""
        with self.assertRaises(ValueError):
            build_heatmap_matrix(_period_results([1.0]), columns=0)


class TestSummarizePeriods(unittest.TestCase):
    """Test cross-period averages."""

    def test_averages(self):
        """Test each metric is averaged across periods."""
        summary = summarize_periods(_period_results([1.0, 2.0, 3.0]))

        self.assertAlmostEqual(summary['sharpe_ratio'], 2.0)
        self.assertAlmostEqual(summary['win_rate'], 51.0)
        self.assertEqual(summary['num_trades'], 6)

    def test_empty(self):
        """Test no periods gives no averages."""
        summary = summarize_periods([])

        self.assertIsNone(summary['sharpe_ratio'])
        self.assertEqual(summary['num_trades'], 0)


if __name__ == '__main__':
    import logging
    logging.basicConfig(level=logging.WARNING)

    unittest.main(verbosity=2)
