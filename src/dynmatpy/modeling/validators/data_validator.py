"""Validation helpers for phonon input data."""

from __future__ import annotations

import numpy as np

from dynmatpy.modeling.schema import NACParams, PhononData


def validate_phonon_data(data: PhononData) -> None:
    masses = np.asarray(data.masses, dtype=float)
    if masses.ndim != 1 or masses.size == 0:
        raise ValueError("PhononData.masses must be a non-empty 1D array.")
    if np.any(masses <= 0.0):
        raise ValueError("All PhononData masses must be positive.")
    if np.asarray(data.lattice).shape != (3, 3):
        raise ValueError("PhononData.lattice must have shape (3, 3).")
    if abs(np.linalg.det(np.asarray(data.lattice, dtype=float))) == 0.0:
        raise ValueError("PhononData.lattice must be non-singular.")

    n_prim = masses.size
    if np.asarray(data.positions).shape != (n_prim, 3):
        raise ValueError("PhononData.positions must have shape (n_atoms, 3).")
    if data.maps.n_primitive != n_prim:
        raise ValueError("AtomMaps primitive size does not match the number of masses.")

    n_super = data.maps.n_supercell
    if n_super % n_prim != 0:
        raise ValueError("Supercell atom count must be a multiple of the primitive atom count.")
    fc_shape = np.asarray(data.force_constants).shape
    if fc_shape not in {(n_super, n_super, 3, 3), (n_prim, n_super, 3, 3)}:
        raise ValueError("force_constants must have shape (S, S, 3, 3) or (P, S, 3, 3).")
    if np.asarray(data.images.multiplicity).shape != (n_super, n_prim):
        raise ValueError("PeriodicImages must have shape (n_supercell, n_primitive).")


def validate_nac_params(params: NACParams, n_atoms: int) -> None:
    if np.asarray(params.born).shape[0] != n_atoms:
        raise ValueError("NACParams.born must hold one 3x3 tensor per primitive atom.")
    eps = np.asarray(params.dielectric, dtype=float)
    if not np.allclose(eps, eps.T):
        raise ValueError("NACParams.dielectric must be symmetric.")
    if np.any(np.linalg.eigvalsh(eps) <= 0.0):
        raise ValueError("NACParams.dielectric must be positive definite.")
