"""Supercell geometry helpers: atom maps, periodic images, reciprocal vectors.

Conventions: lattices hold vectors as rows; the supercell lattice is
``supercell_matrix @ primitive_lattice``, so supercell fractional coordinates
convert to primitive ones by ``x @ supercell_matrix``.
"""

from __future__ import annotations

from itertools import product

import numpy as np

from dynmatpy.core.types import AtomMaps, PeriodicImages


Array = np.ndarray

_NEIGHBOR_SHIFTS = np.asarray(list(product((-1, 0, 1), repeat=3)), dtype=float)


def _as_supercell_matrix(supercell_matrix: Array) -> Array:
    smat = np.asarray(supercell_matrix, dtype=float)
    if smat.shape == (3,):
        smat = np.diag(smat)
    if smat.shape != (3, 3):
        raise ValueError("supercell_matrix must be a 3-vector of repeats or a 3x3 matrix.")
    return smat


def _n_cells(smat: Array) -> int:
    n = int(round(abs(float(np.linalg.det(smat)))))
    if n == 0:
        raise ValueError("supercell_matrix must be non-singular.")
    return n


def atom_maps_from_supercell(
    supercell_positions: Array,
    supercell_matrix: Array,
    symprec: float = 1e-5,
) -> AtomMaps:
    """Map supercell atoms onto primitive atoms.

    Primitive atoms are numbered in order of first appearance in the supercell,
    and that first supercell atom is their representative.
    """

    frac = np.asarray(supercell_positions, dtype=float)
    if frac.ndim != 2 or frac.shape[1] != 3:
        raise ValueError("supercell_positions must have shape (n_atoms, 3).")
    smat = _as_supercell_matrix(supercell_matrix)
    n_cells = _n_cells(smat)
    n_super = frac.shape[0]
    if n_super % n_cells != 0:
        raise ValueError(f"nat_super={n_super} is not divisible by the number of cells {n_cells}.")
    n_prim = n_super // n_cells

    prim = frac @ smat
    reduced = prim - np.floor(prim + symprec)

    basis: list[Array] = []
    p2s: list[int] = []
    s2p = np.full(n_super, -1, dtype=int)
    for k in range(n_super):
        for j, ref in enumerate(basis):
            dr = reduced[k] - ref
            dr -= np.rint(dr)
            if float(np.linalg.norm(dr)) < symprec:
                s2p[k] = j
                break
        else:
            s2p[k] = len(basis)
            basis.append(reduced[k])
            p2s.append(k)

    if len(basis) != n_prim:
        raise ValueError(
            "Could not identify primitive atoms from supercell mapping. "
            f"Expected {n_prim}, found {len(basis)}."
        )
    if np.any(np.bincount(s2p, minlength=n_prim) != n_cells):
        raise ValueError("Every primitive atom must appear once per supercell lattice point.")
    return AtomMaps(s2p=s2p, p2s=np.asarray(p2s, dtype=int))


def periodic_images(
    supercell_lattice: Array,
    supercell_positions: Array,
    p2s: Array,
    supercell_matrix: Array,
    symprec: float = 1e-5,
) -> PeriodicImages:
    """Return shortest translations from each representative to each supercell atom.

    All candidates among the 27 neighbouring supercell images whose Cartesian
    length is within ``symprec`` of the shortest one are kept, so atoms on the
    Wigner-Seitz boundary get a multiplicity above one.
    """

    lat = np.asarray(supercell_lattice, dtype=float)
    frac = np.asarray(supercell_positions, dtype=float)
    smat = _as_supercell_matrix(supercell_matrix)
    reps = np.asarray(p2s, dtype=int)

    diff = frac[:, None, :] - frac[reps][None, :, :]
    diff -= np.rint(diff)
    candidates = diff[:, :, None, :] + _NEIGHBOR_SHIFTS[None, None, :, :]
    lengths = np.linalg.norm(candidates @ lat, axis=-1)
    is_image = (lengths - lengths.min(axis=-1, keepdims=True)) < symprec
    multiplicity = is_image.sum(axis=-1)

    # Bring the kept images to the front, then drop columns nobody uses.
    order = np.argsort(~is_image, axis=-1, kind="stable")
    n_images = int(multiplicity.max())
    picked = np.take_along_axis(candidates, order[..., None], axis=2)[:, :, :n_images]
    vectors = picked @ smat
    valid = np.arange(n_images)[None, None, :] < multiplicity[..., None]
    vectors = np.where(valid[..., None], vectors, 0.0)
    return PeriodicImages(vectors=vectors, multiplicity=multiplicity)


def reciprocal_vectors(lattice: Array, cutoff: float) -> Array:
    """Return all Cartesian G (no 2*pi) with |G| < ``cutoff``, G = 0 included."""

    if cutoff <= 0.0:
        raise ValueError("cutoff must be positive.")
    lat = np.asarray(lattice, dtype=float)
    rec = np.linalg.inv(lat).T
    # Integer coordinates satisfy |n_i| = |G . a_i| <= cutoff * |a_i|.
    n_max = np.floor(cutoff * np.linalg.norm(lat, axis=1)).astype(int)
    grid = np.asarray(
        list(product(*(range(-n, n + 1) for n in n_max))),
        dtype=float,
    )
    g_list = grid @ rec
    return g_list[np.linalg.norm(g_list, axis=1) < cutoff]
