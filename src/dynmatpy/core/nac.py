"""Long-range dipole-dipole corrections for polar crystals.

Two independent strategies are provided:

- ``dipole_dipole``: Ewald reciprocal sum with charge-neutrality correction,
  contracted through Born effective charges. Added to D(q) after the
  short-range transform.
- ``charge_sum``: the cheaper (q.Z_i)(q.Z_j) tensor, added to the force
  constants inside the short-range transform.

A caller uses one or the other for a given q, never both.
"""

from __future__ import annotations

import logging

import numpy as np

from .ewald import ReciprocalSum
from .types import Array, ScratchAllocationError


logger = logging.getLogger(__name__)


def neutralize_self_term(kernel: Array, self_kernel: Array) -> Array:
    """Return a copy of ``kernel`` with the q=0 self term removed from its diagonal.

    The real part of ``self_kernel`` summed over the second atom is subtracted
    from each same-atom block, so a rigid translation of all atoms feels no net
    long-range force.
    """

    corrected = np.array(kernel, dtype=np.complex128, copy=True)
    onsite = self_kernel.real.sum(axis=1)
    idx = np.arange(corrected.shape[0])
    corrected[idx, idx] -= onsite
    return corrected


def contract_born(tensor: Array, born: Array, out: Array | None = None) -> Array:
    """Return born[i].T @ tensor[i, j] @ born[j] for every atom pair."""

    z = np.asarray(born, dtype=float)
    return np.einsum("ima,ijmn,jnb->ijab", z, tensor, z, out=out)


def screened_kernel(
    q: Array,
    g_list: Array,
    dielectric: Array,
    positions: Array,
    factor: float,
    damping: float,
    tolerance: float,
    q_direction: Array | None = None,
) -> Array:
    """Return the neutralised, scaled Ewald kernel before Born-charge contraction."""

    n_atoms = np.asarray(positions).shape[0]
    try:
        at_q = ReciprocalSum(n_atoms).add(
            q, g_list, dielectric, positions, damping, tolerance, q_direction=q_direction
        )
        at_gamma = ReciprocalSum(n_atoms).add(
            np.zeros(3), g_list, dielectric, positions, damping, tolerance
        )
        tensor = neutralize_self_term(at_q.values, at_gamma.values)
    except ScratchAllocationError:
        raise
    except MemoryError as exc:
        raise ScratchAllocationError("Out of memory while summing the reciprocal-space kernel.") from exc
    tensor *= factor
    return tensor


def dipole_dipole(
    q: Array,
    g_list: Array,
    born: Array,
    dielectric: Array,
    positions: Array,
    factor: float,
    damping: float,
    tolerance: float,
    q_direction: Array | None = None,
    out: Array | None = None,
) -> Array:
    """Return the (P, P, 3, 3) complex dipole-dipole tensor at ``q``.

    ``q``, ``g_list``, ``positions`` and ``q_direction`` are Cartesian.
    ``factor`` is the physical prefactor, typically 4*pi*e^2/V.
    """

    logger.debug(
        "Dipole-dipole sum over %d G vectors at q=%s (direction=%s)",
        np.asarray(g_list).shape[0],
        np.asarray(q).tolist(),
        None if q_direction is None else np.asarray(q_direction).tolist(),
    )
    tensor = screened_kernel(
        q=q,
        g_list=g_list,
        dielectric=dielectric,
        positions=positions,
        factor=factor,
        damping=damping,
        tolerance=tolerance,
        q_direction=q_direction,
    )
    try:
        return contract_born(tensor, born, out=out)
    except MemoryError as exc:
        raise ScratchAllocationError("Out of memory while contracting with Born charges.") from exc


def charge_sum(q: Array, born: Array, factor: float, out: Array | None = None) -> Array:
    """Return factor * (q.Z_i)_a * (q.Z_j)_b with shape (P, P, 3, 3)."""

    try:
        q_born = np.einsum("m,ima->ia", np.asarray(q, dtype=float), np.asarray(born, dtype=float))
        tensor = factor * np.einsum("ia,jb->ijab", q_born, q_born)
    except MemoryError as exc:
        raise ScratchAllocationError("Out of memory while building the charge-sum tensor.") from exc
    if out is None:
        return tensor
    out[...] = tensor
    return out
