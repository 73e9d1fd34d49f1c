"""
Adaptive Distribution Binning

Builds histograms whose bin width is a multiple of the sample standard
deviation, so every bin edge sits at a fixed number of standard deviations
from the mean. Used for per-trade P&L and drawdown depth distributions.
"""

from typing import List, Sequence
import numpy as np
import logging

from .interfaces import DistributionBin

logger = logging.getLogger(__name__)

STD_DEV_EPSILON = 1e-9


class DistributionBinner:
    """Standard-deviation scaled histogram builder."""

    def __init__(self, bin_size_in_std_dev: float = 0.5):
        """
        Initialize binner.

        Args:
            bin_size_in_std_dev: Bin width expressed in standard deviations
        """
        if bin_size_in_std_dev <= 0:
            raise ValueError("Bin size must be positive")
        self.bin_size = bin_size_in_std_dev

    def build(self, sample: Sequence[float]) -> List[DistributionBin]:
        """
        Bin a sample.

        Args:
            sample: Numeric observations

        Returns:
            Contiguous bins sorted by center, empty bins included
        """
        values = np.asarray(sample, dtype=float)
        n = len(values)
        if n == 0:
            return []

        mean = float(np.mean(values))
        std = float(np.std(values))

        if std < STD_DEV_EPSILON:
            return [DistributionBin(bin_start=mean, bin_end=mean, bin_center=mean,
                                    count=n, percentage=100.0, std_dev_position=0.0)]

        positions = (values - mean) / std
        min_pos = float(np.floor(positions.min() / self.bin_size) * self.bin_size)
        max_pos = float(np.ceil(positions.max() / self.bin_size) * self.bin_size)
        num_bins = max(int(round((max_pos - min_pos) / self.bin_size)), 1)

        indexes = np.floor((positions - min_pos) / self.bin_size).astype(int)
        counts = np.bincount(np.clip(indexes, 0, num_bins - 1), minlength=num_bins)

        bins = []
        for i in range(num_bins):
            start_pos = min_pos + i * self.bin_size
            center_pos = start_pos + self.bin_size / 2
            bins.append(DistributionBin(
                bin_start=mean + start_pos * std,
                bin_end=mean + (start_pos + self.bin_size) * std,
                bin_center=mean + center_pos * std,
                count=int(counts[i]),
                percentage=float(counts[i] / n * 100),
                std_dev_position=float(center_pos),
            ))

        logger.debug(f"Binned {n} values into {num_bins} bins of {self.bin_size} SD "
                     f"(mean={mean:.4f}, std={std:.4f})")
        return bins


def visible_bins(bins: List[DistributionBin], display_range_sd: float) -> List[DistributionBin]:
    """Bins whose center lies within +/- display_range_sd of the mean."""
    return [b for b in bins if abs(b.std_dev_position) <= display_range_sd]
