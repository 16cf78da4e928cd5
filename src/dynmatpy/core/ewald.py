"""Reciprocal-space (Ewald) sum of the screened dipole-dipole kernel."""

from __future__ import annotations

import numpy as np

from .types import Array, scratch_zeros


def _dielectric_part(vec: Array, dielectric: Array) -> Array:
    return np.einsum("...a,ab,...b->...", vec, dielectric, vec)


def _kernel_terms(
    q: Array,
    g_list: Array,
    dielectric: Array,
    damping: float,
    tolerance: float,
    q_direction: Array | None,
) -> tuple[Array, Array]:
    """Return K = G + q vectors and their 3x3 kernels, dropping excluded G."""

    k_vecs = np.asarray(g_list, dtype=float) + q[None, :]
    near_zero = np.linalg.norm(k_vecs, axis=1) < tolerance

    kernels = np.zeros((k_vecs.shape[0], 3, 3), dtype=float)
    regular = ~near_zero
    if np.any(regular):
        kr = k_vecs[regular]
        eps_part = _dielectric_part(kr, dielectric)
        damp = np.exp(-eps_part / (4.0 * damping * damping))
        kernels[regular] = np.einsum("ga,gb->gab", kr, kr) * (damp / eps_part)[:, None, None]

    if q_direction is None:
        keep = regular
    else:
        d = np.asarray(q_direction, dtype=float)
        kernels[near_zero] = np.outer(d, d) / _dielectric_part(d, dielectric)
        keep = np.ones(k_vecs.shape[0], dtype=bool)
    return k_vecs[keep], kernels[keep]


def reciprocal_kernel_sum(
    q: Array,
    g_list: Array,
    dielectric: Array,
    positions: Array,
    damping: float,
    tolerance: float,
    q_direction: Array | None = None,
    out: Array | None = None,
) -> Array:
    """Accumulate sum_G kernel(G+q) * exp(2*pi*i*(G+q).(r_p - r_r)) into ``out``.

    All vectors are Cartesian in the same units (reciprocal vectors without
    the 2*pi factor). ``out`` has shape (P, P, 3, 3) and is added to, never
    reset; a zeroed array is allocated when it is omitted.

    A G with |G + q| < ``tolerance`` is skipped unless ``q_direction`` is
    given, in which case it contributes the direction-dependent limit
    (d x d) / (d.eps.d) without damping.
    """

    qv = np.asarray(q, dtype=float)
    pos = np.asarray(positions, dtype=float)
    eps = np.asarray(dielectric, dtype=float)
    n_atoms = pos.shape[0]
    if out is None:
        out = scratch_zeros((n_atoms, n_atoms, 3, 3))

    k_vecs, kernels = _kernel_terms(qv, g_list, eps, damping, tolerance, q_direction)
    if k_vecs.shape[0] == 0:
        return out

    dr = pos[:, None, :] - pos[None, :, :]
    phases = np.exp(2j * np.pi * np.einsum("gc,prc->gpr", k_vecs, dr))
    out += np.einsum("gpr,gab->prab", phases, kernels)
    return out


class ReciprocalSum:
    """Zero-initialised accumulator fed by one or more reciprocal kernel passes.

    A caller-provided ``out`` buffer is reset once here; every ``add`` call
    then accumulates into ``values``.
    """

    def __init__(self, n_atoms: int, out: Array | None = None) -> None:
        if n_atoms <= 0:
            raise ValueError("n_atoms must be positive.")
        if out is None:
            out = scratch_zeros((n_atoms, n_atoms, 3, 3))
        else:
            if out.shape != (n_atoms, n_atoms, 3, 3):
                raise ValueError("out must have shape (n_atoms, n_atoms, 3, 3).")
            out[...] = 0.0
        self.values = out

    @property
    def n_atoms(self) -> int:
        return int(self.values.shape[0])

    def add(
        self,
        q: Array,
        g_list: Array,
        dielectric: Array,
        positions: Array,
        damping: float,
        tolerance: float,
        q_direction: Array | None = None,
    ) -> ReciprocalSum:
        reciprocal_kernel_sum(
            q=q,
            g_list=g_list,
            dielectric=dielectric,
            positions=positions,
            damping=damping,
            tolerance=tolerance,
            q_direction=q_direction,
            out=self.values,
        )
        return self
