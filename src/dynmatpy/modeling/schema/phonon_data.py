"""Schema for the harmonic crystal handed to the dynamical-matrix builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from dynmatpy.core.types import AtomMaps, PeriodicImages


Array = np.ndarray


@dataclass(frozen=True)
class PhononData:
    """Primitive cell, masses and supercell force constants.

    - ``lattice``: primitive lattice vectors as rows, Cartesian.
    - ``positions``: primitive-cell atoms in fractional coordinates.
    - ``force_constants``: (S, S, 3, 3) full or (P, S, 3, 3) compact.
    """

    lattice: Array
    positions: Array
    masses: Array
    force_constants: Array
    maps: AtomMaps
    images: PeriodicImages
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_atoms(self) -> int:
        return int(np.asarray(self.masses).size)

    @property
    def n_supercell_atoms(self) -> int:
        return self.maps.n_supercell

    @property
    def n_cells(self) -> int:
        return self.n_supercell_atoms // self.n_atoms

    @property
    def volume(self) -> float:
        return float(abs(np.linalg.det(np.asarray(self.lattice, dtype=float))))

    @property
    def reciprocal_lattice(self) -> Array:
        """Reciprocal vectors as rows, without the 2*pi factor."""

        return np.linalg.inv(np.asarray(self.lattice, dtype=float)).T

    @property
    def cartesian_positions(self) -> Array:
        return np.asarray(self.positions, dtype=float) @ np.asarray(self.lattice, dtype=float)
