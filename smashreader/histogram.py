"""A fixed-binning one-dimensional histogram."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

__all__ = ["Histogram1D"]


class Histogram1D:
    """Histogram with ``bins`` equal bins covering ``[low, high)``."""

    def __init__(self, low: float, high: float, bins: int) -> None:
        if high <= low or bins <= 0:
            raise ValueError("Invalid histogram range or bin count.")
        self.low = float(low)
        self.high = float(high)
        self.bins = int(bins)
        self.bin_width = (self.high - self.low) / self.bins
        self._counts: List[float] = [0.0] * self.bins

    def fill(self, value: float, weight: float = 1.0) -> None:
        """Add ``weight`` to the bin holding ``value``; out-of-range is ignored."""
        if value < self.low or value >= self.high:
            return
        index = min(int((value - self.low) / self.bin_width), self.bins - 1)
        self._counts[index] += weight

    def _check(self, index: int) -> None:
        if not 0 <= index < self.bins:
            raise IndexError("Invalid bin index")

    def bin_center(self, index: int) -> float:
        self._check(index)
        return self.low + (index + 0.5) * self.bin_width

    def bin_count(self, index: int) -> float:
        self._check(index)
        return self._counts[index]

    @property
    def counts(self) -> tuple:
        return tuple(self._counts)

    def __len__(self) -> int:
        return self.bins

    def write(self, out: Optional[TextIO] = None) -> None:
        """Write one ``center<TAB>count`` line per bin, four decimals each."""
        out = sys.stdout if out is None else out
        for index, count in enumerate(self._counts):
            out.write(f"{self.bin_center(index):.4f}\t{count:.4f}\n")

    def merge(self, other: "Histogram1D") -> None:
        """Add the counts of a histogram with identical binning."""
        if (self.bins, self.low, self.high) != (other.bins, other.low, other.high):
            raise ValueError("Cannot merge histograms with different binning.")
        self._counts = [a + b for a, b in zip(self._counts, other._counts)]