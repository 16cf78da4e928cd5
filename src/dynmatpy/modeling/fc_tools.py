"""Sum-rule corrections for force constants and Born charges."""

from __future__ import annotations

import logging

import numpy as np

from dynmatpy.core.types import AtomMaps


logger = logging.getLogger(__name__)


def enforce_translational_asr(force_constants: np.ndarray, maps: AtomMaps) -> tuple[np.ndarray, float]:
    """Enforce translational ASR by correcting only the self-interaction blocks.

    Works on full (S, S, 3, 3) and compact (P, S, 3, 3) layouts; the self block
    of row ``r`` is column ``r`` (full) or ``p2s[r]`` (compact).

    Returns:
        (corrected_force_constants, max_residual_before_correction)
    """

    fc = np.asarray(force_constants, dtype=float)
    if fc.ndim != 4 or fc.shape[2:] != (3, 3):
        raise ValueError("force_constants must have shape (n_rows, n_supercell, 3, 3).")
    if fc.shape[1] != maps.n_supercell:
        raise ValueError("force_constants column count must match the supercell size.")

    if fc.shape[0] == fc.shape[1]:
        self_cols = np.arange(fc.shape[0])
    elif fc.shape[0] == maps.n_primitive:
        self_cols = np.asarray(maps.p2s, dtype=int)
    else:
        raise ValueError("force_constants rows must match the supercell or primitive size.")

    residual = fc.sum(axis=1)
    residual_max = float(np.max(np.abs(residual)))

    corrected = fc.copy()
    rows = np.arange(fc.shape[0])
    corrected[rows, self_cols] -= residual
    logger.info("Translational ASR residual before correction: %.3e", residual_max)
    return corrected, residual_max


def enforce_charge_neutrality(born: np.ndarray) -> tuple[np.ndarray, float]:
    """Shift Born charges by their mean so that they sum to zero over atoms.

    Returns:
        (corrected_born, max_residual_before_correction)
    """

    z = np.asarray(born, dtype=float)
    if z.ndim != 3 or z.shape[1:] != (3, 3):
        raise ValueError("born must have shape (n_atoms, 3, 3).")
    residual_max = float(np.max(np.abs(z.sum(axis=0))))
    corrected = z - z.mean(axis=0)
    logger.info("Born charge neutrality residual before correction: %.3e", residual_max)
    return corrected, residual_max
