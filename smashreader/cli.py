"""Command line entry point: run the rapidity analysis on a binary file."""

from __future__ import annotations

import sys
from typing import List, Optional

from . import rapidity as _rapidity  # registers the "simple" analysis
from .analysis import DispatchingAccessor, registry
from .reader import BinaryReader, BinaryReaderError

__all__ = ["main"]

SELECTED = ["p0", "px", "py", "pz", "pdg", "charge"]
ANALYSIS = "simple"


def main(argv: Optional[List[str]] = None) -> int:
    """Read the given file, run the default analysis and save its output."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: smashreader <binary file path>", file=sys.stderr)
        return 1

    dispatcher = DispatchingAccessor()
    analysis = registry().create(ANALYSIS)
    dispatcher.register_analysis(analysis)
    try:
        with BinaryReader(args[0], SELECTED, dispatcher) as reader:
            reader.read()
        analysis.finalize()
        analysis.save("")
    except (BinaryReaderError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())