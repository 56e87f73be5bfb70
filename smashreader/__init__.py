"""Reader, accessors, histogram and analyses for SMASH binary particle output."""

__version__ = "0.1.0"