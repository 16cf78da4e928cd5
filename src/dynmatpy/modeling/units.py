"""Unit constants and prefactors for the long-range dipole correction."""

from __future__ import annotations

import numpy as np


# CODATA 2018 constants (SI).
RYDBERG_J = 2.1798723611035e-18
BOHR_M = 5.29177210903e-11
EV_J = 1.602176634e-19

HARTREE_EV = 2.0 * RYDBERG_J / EV_J
BOHR_ANGSTROM = BOHR_M * 1.0e10

# Square of the electron charge, e^2/(4*pi*eps0), in common unit systems.
E2_HARTREE = 1.0  # Hartree * bohr
E2_RYDBERG = 2.0  # Ry * bohr
E2_EV_ANGSTROM = HARTREE_EV * BOHR_ANGSTROM  # eV * Angstrom


def dipole_dipole_factor(volume: float, e2: float = E2_HARTREE) -> float:
    """Return 4*pi*e^2/V, the prefactor of the Ewald dipole-dipole tensor."""

    if volume <= 0.0:
        raise ValueError("Cell volume must be positive.")
    return float(4.0 * np.pi * e2 / volume)


def charge_sum_factor(
    q_cart: np.ndarray,
    dielectric: np.ndarray,
    volume: float,
    n_cells: int,
    e2: float = E2_HARTREE,
) -> float:
    """Return 4*pi*e^2 / (V * q.eps.q * n_cells) for the charge-sum correction.

    The charge-sum tensor is added once per supercell lattice point, hence the
    division by ``n_cells``.
    """

    if n_cells <= 0:
        raise ValueError("n_cells must be positive.")
    q = np.asarray(q_cart, dtype=float)
    denominator = float(q @ np.asarray(dielectric, dtype=float) @ q)
    if denominator <= 0.0:
        raise ValueError("q.eps.q must be positive; check q and the dielectric tensor.")
    return dipole_dipole_factor(volume, e2) / denominator / n_cells
