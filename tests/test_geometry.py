import numpy as np
import pytest

from dynmatpy.modeling import atom_maps_from_supercell, periodic_images, reciprocal_vectors


def _two_atom_chain(n_cells: int) -> np.ndarray:
    basis = np.array([[0.0, 0.0, 0.0], [0.5, 0.3, 0.2]])
    return np.asarray([(b + [c, 0.0, 0.0]) / [n_cells, 1.0, 1.0] for c in range(n_cells) for b in basis])


def test_atom_maps_follow_first_appearance() -> None:
    maps = atom_maps_from_supercell(_two_atom_chain(3), [3, 1, 1])

    assert maps.s2p.tolist() == [0, 1, 0, 1, 0, 1]
    assert maps.p2s.tolist() == [0, 1]


def test_atom_maps_handle_shuffled_supercell() -> None:
    positions = _two_atom_chain(3)
    order = np.array([3, 0, 5, 2, 1, 4])
    shuffled = positions[order]

    maps = atom_maps_from_supercell(shuffled, np.diag([3, 1, 1]))

    assert np.array_equal(maps.s2p[maps.p2s], np.arange(2))
    assert np.all(np.bincount(maps.s2p) == 3)
    basis_of = order % 2
    for k in range(6):
        assert maps.s2p[k] == maps.s2p[np.flatnonzero(basis_of == basis_of[k])[0]]


def test_atom_maps_reject_inconsistent_counts() -> None:
    with pytest.raises(ValueError):
        atom_maps_from_supercell(_two_atom_chain(3)[:5], [3, 1, 1])
    with pytest.raises(ValueError):
        atom_maps_from_supercell(_two_atom_chain(3), [2, 1, 1])
    with pytest.raises(ValueError):
        atom_maps_from_supercell(_two_atom_chain(3), np.zeros((3, 3)))


def test_boundary_atom_has_two_images() -> None:
    positions = np.array([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]])
    smat = np.diag([2, 1, 1])
    maps = atom_maps_from_supercell(positions, smat)

    images = periodic_images(np.diag([2.0, 1.0, 1.0]), positions, maps.p2s, smat)

    assert images.multiplicity[:, 0].tolist() == [1, 2]
    assert np.allclose(images.vectors[0, 0, 0], 0.0)
    shifts = sorted(images.vectors[1, 0, :2, 0].tolist())
    assert np.allclose(shifts, [-1.0, 1.0])
    assert np.allclose(images.vectors[1, 0, :2, 1:], 0.0)


def test_body_centre_has_eight_images() -> None:
    positions = np.array([[0.0, 0.0, 0.0], [0.5, 0.5, 0.5]])
    smat = np.eye(3)
    maps = atom_maps_from_supercell(positions, smat)

    images = periodic_images(3.0 * np.eye(3), positions, maps.p2s, smat)

    assert images.max_images == 8
    assert images.multiplicity.tolist() == [[1, 8], [8, 1]]
    vecs = images.vectors[1, 0]
    assert np.allclose(np.abs(vecs), 0.5)
    assert len({tuple(v) for v in vecs.tolist()}) == 8


def test_reciprocal_vectors_cover_sphere() -> None:
    g_list = reciprocal_vectors(np.eye(3), cutoff=1.5)

    norms = np.linalg.norm(g_list, axis=1)
    assert g_list.shape == (19, 3)
    assert np.any(norms == 0.0)
    assert np.all(norms < 1.5)
    as_set = {tuple(np.round(g, 12)) for g in g_list}
    assert all(tuple(np.round(-g, 12)) in as_set for g in g_list)


def test_reciprocal_vectors_use_inverse_lattice() -> None:
    lattice = np.array([[2.0, 0.0, 0.0], [1.0, 2.0, 0.0], [0.0, 0.0, 4.0]])

    g_list = reciprocal_vectors(lattice, cutoff=0.8)

    integer_coords = g_list @ lattice.T
    assert np.allclose(integer_coords, np.rint(integer_coords))
    with pytest.raises(ValueError):
        reciprocal_vectors(lattice, cutoff=0.0)
