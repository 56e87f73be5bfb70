"""Rapidity distribution of all particles."""

from __future__ import annotations

import math
from pathlib import Path

from .analysis import Analysis, register_analysis
from .histogram import Histogram1D
from .reader import Accessor, ParticleBlock

__all__ = ["Rapidity"]


@register_analysis("simple")
class Rapidity(Analysis):
    """Histograms the rapidity of every particle in 100 bins over [-5, 5)."""

    def __init__(self) -> None:
        self.histogram = Histogram1D(-5.0, 5.0, 100)

    def analyze_particle_block(self, block: ParticleBlock, accessor: Accessor) -> None:
        for index in range(block.npart):
            pz = accessor.get_double("pz", block, index)
            energy = accessor.get_double("p0", block, index)
            if energy <= abs(pz):
                continue
            self.histogram.fill(0.5 * math.log((energy + pz) / (energy - pz)))

    def finalize(self) -> None:
        """Nothing to do after the last block."""

    def save(self, save_dir_path: str) -> None:
        """Write the histogram to ``rap.dat`` in ``save_dir_path``."""
        path = Path(save_dir_path or ".") / "rap.dat"
        try:
            out = open(path, "w", encoding="ascii")
        except OSError as exc:
            raise OSError(f"Could not open file: {path}") from exc
        with out:
            self.histogram.write(out)