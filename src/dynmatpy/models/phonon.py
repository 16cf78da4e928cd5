"""Dynamical matrices of (polar) crystals from supercell force constants."""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Iterable

import numpy as np

from dynmatpy.core import (
    add_dipole_dipole,
    charge_sum,
    dipole_dipole,
    dynamical_matrix_at_q,
    symmetrize_hermitian,
)
from dynmatpy.modeling.schema import NACParams, PhononData
from dynmatpy.modeling.units import charge_sum_factor, dipole_dipole_factor
from dynmatpy.modeling.validators import validate_nac_params, validate_phonon_data


Array = np.ndarray

logger = logging.getLogger(__name__)


def _to_cartesian(vec: Iterable[float], data: PhononData) -> Array:
    return np.asarray(vec, dtype=float) @ data.reciprocal_lattice


def _wang_charge_sum(
    data: PhononData,
    q: Array,
    nac: NACParams,
    q_direction: Array | None,
) -> Array | None:
    q_cart = _to_cartesian(q, data)
    if np.linalg.norm(q_cart) < nac.q_tolerance:
        if q_direction is None:
            logger.debug("q at Gamma without a direction; charge-sum correction skipped.")
            return None
        q_cart = _to_cartesian(q_direction, data)
    factor = charge_sum_factor(
        q_cart=q_cart,
        dielectric=nac.dielectric,
        volume=data.volume,
        n_cells=data.n_cells,
        e2=nac.e2,
    )
    return charge_sum(q_cart, nac.born, factor)


def _gonze_dipole_dipole(
    data: PhononData,
    q: Array,
    nac: NACParams,
    q_direction: Array | None,
) -> Array:
    ewald = nac.ewald
    q_cart = _to_cartesian(q, data)
    positions = data.cartesian_positions
    dd = dipole_dipole(
        q=q_cart,
        g_list=ewald.g_list,
        born=nac.born,
        dielectric=nac.dielectric,
        positions=positions,
        factor=dipole_dipole_factor(data.volume, nac.e2),
        damping=ewald.damping,
        tolerance=ewald.tolerance,
        q_direction=None if q_direction is None else _to_cartesian(q_direction, data),
    )
    # The reciprocal sum is periodic in q; the builder phases follow atom
    # positions, so bring dd[i, j] into that gauge with exp(2*pi*i*q.(r_j - r_i)).
    shift = np.exp(2j * np.pi * (positions @ q_cart))
    dd *= np.conj(shift)[:, None, None, None] * shift[None, :, None, None]
    return dd


def phonon_dynamical_matrix(
    data: PhononData,
    q: Iterable[float],
    *,
    nac: NACParams | None = None,
    q_direction: Iterable[float] | None = None,
    executor: Executor | None = None,
) -> Array:
    """Return D(q) with shape (3P, 3P), optionally with the long-range correction.

    ``q`` and ``q_direction`` are fractional in the primitive reciprocal basis.
    ``q_direction`` only matters at Gamma, where it selects the LO-TO limit.
    """

    validate_phonon_data(data)
    qv = np.asarray(list(q), dtype=float)
    if qv.shape != (3,):
        raise ValueError("q must have three components.")
    qdir = None if q_direction is None else np.asarray(list(q_direction), dtype=float)

    build_args = (data.force_constants, qv, data.images, data.masses, data.maps)
    if nac is None:
        return dynamical_matrix_at_q(*build_args, executor=executor)

    validate_nac_params(nac, data.n_atoms)
    if nac.method == "wang":
        return dynamical_matrix_at_q(
            *build_args,
            charge_sum=_wang_charge_sum(data, qv, nac, qdir),
            executor=executor,
        )
    if nac.method == "gonze":
        dmat = dynamical_matrix_at_q(*build_args, executor=executor)
        add_dipole_dipole(dmat, _gonze_dipole_dipole(data, qv, nac, qdir), data.masses)
        return symmetrize_hermitian(dmat)
    raise ValueError(f"Unknown NAC method '{nac.method}'.")


def phonon_dynamical_matrices(
    data: PhononData,
    qpoints: Iterable[Iterable[float]],
    *,
    nac: NACParams | None = None,
    q_direction: Iterable[float] | None = None,
    executor: Executor | None = None,
) -> Array:
    """Return D(q) for every q-point, shape (n_q, 3P, 3P)."""

    qpts = np.asarray([list(q) for q in qpoints], dtype=float)
    if qpts.ndim != 2 or qpts.shape[1] != 3 or qpts.shape[0] == 0:
        raise ValueError("qpoints must be a non-empty list of 3-component q-points.")

    ndof = 3 * data.n_atoms
    out = np.zeros((qpts.shape[0], ndof, ndof), dtype=np.complex128)
    for iq, q in enumerate(qpts):
        out[iq] = phonon_dynamical_matrix(
            data,
            q,
            nac=nac,
            q_direction=q_direction,
            executor=executor,
        )
    return out
