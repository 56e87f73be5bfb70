"""Reading of SMASH binary particle output files."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Iterable, List, Mapping, Optional, Union

__all__ = [
    "BinaryReaderError",
    "Quantity",
    "QuantityType",
    "QuantityInfo",
    "QUANTITIES",
    "type_size",
    "compute_quantity_layout",
    "Header",
    "EndBlock",
    "ParticleBlock",
    "Accessor",
    "BinaryReader",
]


class BinaryReaderError(RuntimeError):
    """Raised when a binary file or a quantity request cannot be handled."""


class Quantity(Enum):
    """Per-particle quantities that may appear in a particle record."""

    MASS = "mass"
    P0 = "p0"
    PX = "px"
    PY = "py"
    PZ = "pz"
    PDG = "pdg"
    NCOLL = "ncoll"
    CHARGE = "charge"


class QuantityType(Enum):
    """Storage type of a quantity, with its little-endian struct format."""

    DOUBLE = ("<d", "double")
    INT32 = ("<i", "int32")

    @property
    def fmt(self) -> str:
        return self.value[0]

    @property
    def label(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class QuantityInfo:
    """Which quantity a name refers to and how it is stored."""

    quantity: Quantity
    type: QuantityType


QUANTITIES: Mapping[str, QuantityInfo] = {
    "mass": QuantityInfo(Quantity.MASS, QuantityType.DOUBLE),
    "p0": QuantityInfo(Quantity.P0, QuantityType.DOUBLE),
    "px": QuantityInfo(Quantity.PX, QuantityType.DOUBLE),
    "py": QuantityInfo(Quantity.PY, QuantityType.DOUBLE),
    "pz": QuantityInfo(Quantity.PZ, QuantityType.DOUBLE),
    "pdg": QuantityInfo(Quantity.PDG, QuantityType.INT32),
    "ncoll": QuantityInfo(Quantity.NCOLL, QuantityType.INT32),
    "charge": QuantityInfo(Quantity.CHARGE, QuantityType.INT32),
}

Layout = Dict[Quantity, int]
Value = Union[int, float]


def _info(name: str) -> QuantityInfo:
    try:
        return QUANTITIES[name]
    except KeyError:
        raise BinaryReaderError(f"Unknown quantity: {name}") from None


def type_size(qtype: QuantityType) -> int:
    """Return the number of bytes a value of ``qtype`` occupies."""
    if not isinstance(qtype, QuantityType):
        raise ValueError("Unknown QuantityType")
    return struct.calcsize(qtype.fmt)


def compute_quantity_layout(names: Iterable[str]) -> Layout:
    """Map each named quantity to its byte offset inside a particle record."""
    layout: Layout = {}
    offset = 0
    for name in names:
        info = _info(name)
        layout[info.quantity] = offset
        offset += type_size(info.type)
    return layout


def _read_chunk(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise BinaryReaderError("Read failed")
    return data


_HEADER_FIXED = struct.Struct("<4sHHI")
_END_BLOCK = struct.Struct("<Iidc")
_PARTICLE_HEADER = struct.Struct("<iiI")
_BLOCK_MARKERS = (b"p", b"f", b"i")


@dataclass
class Header:
    """File header: magic number, format version and variant, SMASH version."""

    magic_number: str = ""
    format_version: int = 0
    format_variant: int = 0
    smash_version: str = ""

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "Header":
        fixed = stream.read(_HEADER_FIXED.size)
        if len(fixed) < _HEADER_FIXED.size:
            raise BinaryReaderError("Failed to read header from binary file")
        magic, version, variant, length = _HEADER_FIXED.unpack(fixed)
        smash_version = stream.read(length)
        if len(smash_version) < length:
            raise BinaryReaderError("Failed to read header from binary file")
        return cls(
            magic_number=magic.decode("latin-1"),
            format_version=version,
            format_variant=variant,
            smash_version=smash_version.decode("latin-1"),
        )

    def format(self) -> str:
        """Return a human-readable description of the header."""
        return (
            f"Magic Number:   {self.magic_number}\n"
            f"Format Version: {self.format_version}\n"
            f"Format Variant: {self.format_variant}\n"
            f"Smash Version:  {self.smash_version}\n"
        )


@dataclass
class EndBlock:
    """Block closing an event."""

    event_number: int
    ensamble_number: int
    impact_parameter: float
    empty: bytes = b"\x00"

    SIZE = _END_BLOCK.size

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "EndBlock":
        event, ensemble, impact, empty = _END_BLOCK.unpack(
            _read_chunk(stream, _END_BLOCK.size)
        )
        return cls(event, ensemble, impact, empty)


@dataclass
class ParticleBlock:
    """Block of particle records, each kept as raw bytes."""

    event_number: int
    ensamble_number: int
    npart: int
    particles: List[bytes] = field(default_factory=list)

    @classmethod
    def from_stream(cls, stream: BinaryIO, particle_size: int) -> "ParticleBlock":
        event, ensemble, npart = _PARTICLE_HEADER.unpack(
            _read_chunk(stream, _PARTICLE_HEADER.size)
        )
        flat = _read_chunk(stream, npart * particle_size)
        particles = [
            flat[k * particle_size : (k + 1) * particle_size] for k in range(npart)
        ]
        return cls(event, ensemble, npart, particles)


class Accessor:
    """Receives blocks from a reader and decodes particle quantities.

    The base implementation remembers the most recent block of each kind.
    """

    def __init__(self) -> None:
        self.layout: Optional[Layout] = None
        self.last_particle_block: Optional[ParticleBlock] = None
        self.last_end_block: Optional[EndBlock] = None

    def on_particle_block(self, block: ParticleBlock) -> None:
        """Called for every dispatched particle block."""
        self.last_particle_block = block

    def on_end_block(self, block: EndBlock) -> None:
        """Called for every dispatched end-of-event block."""
        self.last_end_block = block

    def set_layout(self, layout: Optional[Layout]) -> None:
        self.layout = layout

    def _lookup(
        self,
        name: str,
        block: ParticleBlock,
        index: int,
        expected: Optional[QuantityType],
    ) -> Value:
        if self.layout is None:
            raise BinaryReaderError("Layout not set in Accessor")
        if not 0 <= index < len(block.particles):
            raise IndexError("Invalid particle index")
        info = _info(name)
        if expected is not None and info.type is not expected:
            raise BinaryReaderError(
                f"Requested {expected.label}, but quantity is not {expected.label}"
            )
        offset = self.layout.get(info.quantity)
        if offset is None:
            raise BinaryReaderError(f"Quantity not in layout: {name}")
        (value,) = struct.unpack_from(info.type.fmt, block.particles[index], offset)
        return value

    def quantity(self, name: str, block: ParticleBlock, index: int) -> Value:
        """Return the named quantity of one particle, whatever its type."""
        return self._lookup(name, block, index, None)

    def get_int(self, name: str, block: ParticleBlock, index: int) -> int:
        """Return an int32 quantity of one particle."""
        return int(self._lookup(name, block, index, QuantityType.INT32))

    def get_double(self, name: str, block: ParticleBlock, index: int) -> float:
        """Return a double quantity of one particle."""
        return float(self._lookup(name, block, index, QuantityType.DOUBLE))


class BinaryReader:
    """Reads a binary file block by block and hands blocks to an accessor."""

    def __init__(self, filename, selected: Iterable[str], accessor: Accessor) -> None:
        try:
            self._file: BinaryIO = open(filename, "rb")
        except OSError as exc:
            raise BinaryReaderError(f"Could not open file: {filename}") from exc
        try:
            selected = list(selected)
            self.layout: Layout = compute_quantity_layout(selected)
            self.particle_size = sum(type_size(_info(n).type) for n in selected)
            if accessor is None:
                raise BinaryReaderError("An accessor is needed!")
        except BaseException:
            self._file.close()
            raise
        self.accessor = accessor
        self.header: Optional[Header] = None
        accessor.set_layout(self.layout)

    def read(self) -> Header:
        """Read the whole file, dispatching blocks; return the header."""
        stream = self._file
        self.header = Header.from_stream(stream)
        while marker := stream.read(1):
            if marker == b"p":
                block = ParticleBlock.from_stream(stream, self.particle_size)
                if self._check_next():
                    self.accessor.on_particle_block(block)
            elif marker == b"f":
                end = EndBlock.from_stream(stream)
                if self._check_next():
                    self.accessor.on_end_block(end)
        return self.header

    def _check_next(self) -> bool:
        """Peek at the next marker; a block is only dispatched if one follows."""
        marker = self._file.read(1)
        if marker in _BLOCK_MARKERS:
            self._file.seek(-1, 1)
            return True
        return False

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "BinaryReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()