"""Core data structures for dynamical-matrix construction."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


Array = np.ndarray


class ScratchAllocationError(MemoryError):
    """Raised when a transient work array cannot be allocated."""


def scratch_zeros(shape: tuple[int, ...], dtype=np.complex128) -> Array:
    """Allocate a zeroed work array, surfacing failure as ``ScratchAllocationError``."""

    try:
        return np.zeros(shape, dtype=dtype)
    except MemoryError as exc:
        raise ScratchAllocationError(f"Could not allocate scratch array of shape {shape}.") from exc


@dataclass(frozen=True)
class AtomMaps:
    """Supercell <-> primitive atom index maps.

    - ``s2p[k]``: primitive index of supercell atom ``k``.
    - ``p2s[i]``: representative supercell index of primitive atom ``i``.
    """

    s2p: Array
    p2s: Array

    def __post_init__(self) -> None:
        s2p = np.asarray(self.s2p)
        p2s = np.asarray(self.p2s)
        if s2p.ndim != 1 or s2p.size == 0:
            raise ValueError("s2p must be a non-empty 1D array.")
        if p2s.ndim != 1 or p2s.size == 0:
            raise ValueError("p2s must be a non-empty 1D array.")
        if np.any(s2p < 0) or np.any(s2p >= p2s.size):
            raise ValueError("s2p entries must be primitive indices in [0, n_primitive).")
        if np.any(p2s < 0) or np.any(p2s >= s2p.size):
            raise ValueError("p2s entries must be supercell indices in [0, n_supercell).")
        if not np.array_equal(s2p[p2s], np.arange(p2s.size)):
            raise ValueError("p2s must be a right inverse of s2p (s2p[p2s[i]] == i).")

    @property
    def n_primitive(self) -> int:
        return int(np.asarray(self.p2s).size)

    @property
    def n_supercell(self) -> int:
        return int(np.asarray(self.s2p).size)


@dataclass(frozen=True)
class PeriodicImages:
    """Equivalent lattice translations between primitive and supercell atoms.

    ``vectors[k, i, :multiplicity[k, i]]`` are the shortest translations from
    primitive atom ``i`` to supercell atom ``k`` in primitive fractional
    coordinates. Entries past the multiplicity are padding.
    """

    vectors: Array
    multiplicity: Array

    def __post_init__(self) -> None:
        vectors = np.asarray(self.vectors)
        multi = np.asarray(self.multiplicity)
        if vectors.ndim != 4 or vectors.shape[-1] != 3:
            raise ValueError("vectors must have shape (n_supercell, n_primitive, n_images, 3).")
        if multi.shape != vectors.shape[:2]:
            raise ValueError("multiplicity must have shape (n_supercell, n_primitive).")
        if np.any(multi < 1):
            raise ValueError("All multiplicities must be at least 1.")
        if np.any(multi > vectors.shape[2]):
            raise ValueError("multiplicity exceeds the number of stored image vectors.")

    @property
    def max_images(self) -> int:
        return int(np.asarray(self.vectors).shape[2])


@dataclass(frozen=True)
class EwaldParams:
    """Reciprocal-space summation parameters chosen by the caller.

    - ``g_list``: Cartesian reciprocal-lattice vectors (no 2*pi factor), shape (G, 3).
    - ``damping``: Ewald splitting parameter (lambda).
    - ``tolerance``: |G + q| below this is treated as the zero vector.
    """

    g_list: Array
    damping: float
    tolerance: float

    def __post_init__(self) -> None:
        g_list = np.asarray(self.g_list)
        if g_list.ndim != 2 or g_list.shape[1] != 3 or g_list.shape[0] == 0:
            raise ValueError("g_list must be a non-empty array of shape (n_G, 3).")
        if self.damping <= 0.0:
            raise ValueError("damping must be positive.")
        if self.tolerance <= 0.0:
            raise ValueError("tolerance must be positive.")
