"""Abstract base class for molecular representations."""

from __future__ import annotations
from abc import ABC, abstractmethod

import numpy as np

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.structure.models import Structure


class Representation(ABC):
    """Common contract: build once, then recolour / show-hide in place."""

    def __init__(self, structure: Structure, config: CartoonConfig = DEFAULT_CONFIG) -> None:
        self.structure = structure
        self.config = config

    @abstractmethod
    def build(self, verbose: bool = False) -> "Representation":
        """Generate geometry for the whole structure."""
        ...

    @abstractmethod
    def apply_colors(self, atom_colors: np.ndarray) -> None:
        """Apply an ``(n_atoms, 3)`` per-atom colour array."""
        ...

    @abstractmethod
    def apply_visibility(
        self,
        atom_visible: np.ndarray,
        scale_multipliers: np.ndarray | None = None,
    ) -> None:
        """Apply an ``(n_atoms,)`` per-atom visibility mask."""
        ...

    @abstractmethod
    def dispose(self) -> None:
        """Release all generated geometry."""
        ...
