"""Fourier transform of real-space force constants into the dynamical matrix."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ProcessPoolExecutor
from itertools import product

import numpy as np

from .types import Array, AtomMaps, PeriodicImages, scratch_zeros


logger = logging.getLogger(__name__)


def _force_constant_rows(force_constants: Array, maps: AtomMaps) -> Array:
    # Full fc is (S, S, 3, 3) and read at the representative atom;
    # compact fc is (P, S, 3, 3) and already indexed by primitive atom.
    if force_constants.shape[0] == force_constants.shape[1]:
        return np.asarray(maps.p2s, dtype=int)
    return np.arange(maps.n_primitive, dtype=int)


def _averaged_phases(q: Array, images: PeriodicImages, satoms: Array, i: int) -> Array:
    """Return exp(2*pi*i*q.t) averaged over the image set of each supercell atom."""

    multi = np.asarray(images.multiplicity)[satoms, i]
    vecs = np.asarray(images.vectors, dtype=float)[satoms, i]
    valid = np.arange(vecs.shape[1])[None, :] < multi[:, None]
    phases = np.exp(2j * np.pi * (vecs @ q))
    return np.where(valid, phases, 0.0).sum(axis=1) / multi


def symmetrize_hermitian(dm: Array) -> Array:
    """Force exact Hermiticity of ``dm`` in place.

    Real parts become (D[m,n] + D[n,m]) / 2, imaginary parts
    (D[m,n] - D[n,m]) / 2, so D[n,m] is bitwise the conjugate of D[m,n].
    """

    re = 0.5 * (dm.real + dm.real.T)
    im = 0.5 * (dm.imag - dm.imag.T)
    dm.real = re
    dm.imag = im
    return dm


def add_dipole_dipole(dm: Array, dd: Array, masses: Array) -> Array:
    """Add a (P, P, 3, 3) dipole-dipole tensor to ``dm`` in place, mass-weighted."""

    m = np.asarray(masses, dtype=float)
    n_atoms = m.size
    weighted = dd / np.sqrt(np.outer(m, m))[:, :, None, None]
    dm += weighted.transpose(0, 2, 1, 3).reshape(3 * n_atoms, 3 * n_atoms)
    return dm


def dynamical_matrix_at_q(
    force_constants: Array,
    q: Array,
    images: PeriodicImages,
    masses: Array,
    maps: AtomMaps,
    *,
    charge_sum: Array | None = None,
    executor: Executor | None = None,
    out: Array | None = None,
) -> Array:
    """Return the Hermitian dynamical matrix D(q) of shape (3P, 3P).

    ``q`` is fractional in the primitive reciprocal basis. ``charge_sum`` is an
    optional (P, P, 3, 3) long-range tensor added to every force-constant
    element before the phase sum. When ``executor`` is given, atom pairs are
    dispatched through ``executor.map``; every pair writes its own 3x3 block
    of ``out``, and all blocks are in place before the Hermitian pass. The
    executor must share memory with the caller (a thread pool); process pools
    are rejected with ``TypeError``.
    """

    if isinstance(executor, ProcessPoolExecutor):
        raise TypeError("executor must share memory with the caller; use a thread pool.")

    qv = np.asarray(q, dtype=float)
    m = np.asarray(masses, dtype=float)
    s2p = np.asarray(maps.s2p)
    n_atoms = maps.n_primitive
    rows = _force_constant_rows(force_constants, maps)

    if out is None:
        out = scratch_zeros((3 * n_atoms, 3 * n_atoms))

    def _fill_pair(pair: tuple[int, int]) -> None:
        i, j = pair
        satoms = np.flatnonzero(s2p == j)
        phases = _averaged_phases(qv, images, satoms, i)
        fc_elems = np.asarray(force_constants[rows[i], satoms], dtype=float)
        if charge_sum is not None:
            fc_elems = fc_elems + charge_sum[i, j]
        block = np.einsum("k,kab->ab", phases, fc_elems) / np.sqrt(m[i] * m[j])
        out[3 * i : 3 * i + 3, 3 * j : 3 * j + 3] = block

    pairs = list(product(range(n_atoms), repeat=2))
    if executor is None:
        pair_map = map
    else:
        logger.debug("Dispatching %d atom pairs through %s", len(pairs), type(executor).__name__)
        pair_map = executor.map
    # Draining the map waits for every block and re-raises worker errors.
    for _ in pair_map(_fill_pair, pairs):
        pass

    return symmetrize_hermitian(out)
