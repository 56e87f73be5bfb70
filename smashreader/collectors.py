"""Accessors that collect particle quantities for later use."""

from __future__ import annotations

import struct
from typing import Dict, List, Union

import numpy as np

from .reader import QUANTITIES, Accessor, BinaryReaderError, ParticleBlock, QuantityType

__all__ = ["CollectorAccessor", "DictCollectorAccessor"]

_NAMES = {info.quantity: name for name, info in QUANTITIES.items()}


class CollectorAccessor(Accessor):
    """Collects each selected quantity of every particle into flat arrays."""

    def __init__(self) -> None:
        super().__init__()
        self.doubles: Dict[str, List[float]] = {}
        self.ints: Dict[str, List[int]] = {}
        self.event_sizes: List[int] = []

    def on_particle_block(self, block: ParticleBlock) -> None:
        self.event_sizes.append(block.npart)
        particles = block.particles[: block.npart]
        if particles and self.layout is None:
            raise BinaryReaderError("Layout not set")
        for particle in particles:
            for name, info in QUANTITIES.items():
                offset = self.layout.get(info.quantity)
                if offset is None:
                    continue
                (value,) = struct.unpack_from(info.type.fmt, particle, offset)
                target = self.doubles if info.type is QuantityType.DOUBLE else self.ints
                target.setdefault(name, []).append(value)

    def get_double_array(self, name: str) -> np.ndarray:
        """Return every collected value of a double quantity."""
        return np.array(self.doubles[name], dtype=np.float64)

    def get_int_array(self, name: str) -> np.ndarray:
        """Return every collected value of an int32 quantity."""
        return np.array(self.ints[name], dtype=np.int32)

    def get_event_sizes(self) -> np.ndarray:
        """Return the particle count of each dispatched block."""
        return np.array(self.event_sizes, dtype=np.int64)


class DictCollectorAccessor(Accessor):
    """Collects one dictionary of selected quantities per particle."""

    def __init__(self) -> None:
        super().__init__()
        self.collected_particles: List[Dict[str, Union[int, float]]] = []

    def on_particle_block(self, block: ParticleBlock) -> None:
        particles = block.particles[: block.npart]
        if particles and self.layout is None:
            raise BinaryReaderError("Layout not set")
        for particle in particles:
            record: Dict[str, Union[int, float]] = {}
            for quantity, offset in self.layout.items():
                name = _NAMES.get(quantity)
                if name is None:
                    continue
                (record[name],) = struct.unpack_from(
                    QUANTITIES[name].type.fmt, particle, offset
                )
            self.collected_particles.append(record)

    def get_particle_dicts(self) -> List[Dict[str, Union[int, float]]]:
        """Return the collected particle dictionaries."""
        return list(self.collected_particles)