"""Analyses, the accessor that feeds them, and the registry that names them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Type, TypeVar

from .reader import Accessor, EndBlock, ParticleBlock

__all__ = [
    "Analysis",
    "DispatchingAccessor",
    "AnalysisRegistry",
    "registry",
    "register_analysis",
]


class Analysis(ABC):
    """Base class for all analyses."""

    @abstractmethod
    def analyze_particle_block(self, block: ParticleBlock, accessor: Accessor) -> None:
        """Process one particle block, reading quantities through ``accessor``."""

    @abstractmethod
    def finalize(self) -> None:
        """Finish the analysis once all blocks have been seen."""

    @abstractmethod
    def save(self, save_dir_path: str) -> None:
        """Write the results into the directory ``save_dir_path``."""


class DispatchingAccessor(Accessor):
    """Accessor that forwards every particle block to registered analyses."""

    def __init__(self) -> None:
        super().__init__()
        self.analyses: List[Analysis] = []

    def register_analysis(self, analysis: Analysis) -> None:
        self.analyses.append(analysis)

    def on_particle_block(self, block: ParticleBlock) -> None:
        for analysis in self.analyses:
            analysis.analyze_particle_block(block, self)

    def on_end_block(self, block: EndBlock) -> None:
        """End-of-event blocks are not forwarded."""


Factory = Callable[[], Analysis]


class AnalysisRegistry:
    """Maps analysis names to factories that create fresh instances."""

    def __init__(self) -> None:
        self._factories: Dict[str, Factory] = {}

    def register_factory(self, name: str, factory: Factory) -> None:
        """Register ``factory`` under ``name``, replacing any earlier one."""
        self._factories[name] = factory

    def create(self, name: str) -> Analysis:
        """Create a new instance of the analysis registered as ``name``."""
        try:
            factory = self._factories[name]
        except KeyError:
            raise KeyError(f"No such analysis: {name}") from None
        return factory()

    def list_registered(self) -> List[str]:
        """Return the registered names, sorted."""
        return sorted(self._factories)


_REGISTRY = AnalysisRegistry()


def registry() -> AnalysisRegistry:
    """Return the process-wide analysis registry."""
    return _REGISTRY


A = TypeVar("A", bound=Type[Analysis])


def register_analysis(name: str) -> Callable[[A], A]:
    """Class decorator registering an analysis class under ``name``."""

    def decorate(cls: A) -> A:
        _REGISTRY.register_factory(name, cls)
        return cls

    return decorate