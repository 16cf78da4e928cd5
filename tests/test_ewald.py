import numpy as np
import pytest

from dynmatpy.core import ReciprocalSum, reciprocal_kernel_sum


EPS = np.diag([2.0, 3.0, 4.0])
POSITIONS = np.array([[0.0, 0.0, 0.0], [0.3, 0.4, 0.5]])
G_LIST = np.array(
    [
        [0.0, 0.0, 0.0],
        [0.5, 0.0, 0.0],
        [-0.5, 0.0, 0.0],
        [0.0, 0.5, 0.0],
        [0.0, -0.5, 0.0],
        [0.0, 0.0, 0.5],
        [0.0, 0.0, -0.5],
    ]
)


def test_single_vector_matches_damped_kernel() -> None:
    q = np.array([0.2, 0.1, 0.0])
    damping = 0.7

    out = reciprocal_kernel_sum(q, np.array([[1.0, 0.0, 0.0]]), EPS, POSITIONS, damping, 1e-8)

    k = np.array([1.2, 0.1, 0.0])
    keps = k @ EPS @ k
    kernel = np.outer(k, k) / keps * np.exp(-keps / (4.0 * damping**2))
    for p in range(2):
        for r in range(2):
            phase = np.exp(2j * np.pi * k @ (POSITIONS[p] - POSITIONS[r]))
            assert np.allclose(out[p, r], kernel * phase, atol=1e-14)


def test_zero_vector_without_direction_is_skipped() -> None:
    q = np.array([0.1, 0.0, 0.0])
    with_zero = np.vstack([G_LIST[1:4], [[-0.1, 0.0, 0.0]], G_LIST[4:]])

    base = reciprocal_kernel_sum(q, G_LIST[1:], EPS, POSITIONS, 1.0, 1e-8)
    extended = reciprocal_kernel_sum(q, with_zero, EPS, POSITIONS, 1.0, 1e-8)

    assert np.array_equal(base, extended)
    assert np.all(np.isfinite(extended))


def test_direction_limit_at_zero_vector() -> None:
    direction = np.array([1.0, 1.0, 0.0])

    out = reciprocal_kernel_sum(np.zeros(3), np.zeros((1, 3)), EPS, POSITIONS, 1.0, 1e-8, q_direction=direction)

    expected = np.outer(direction, direction) / 5.0
    for p in range(2):
        for r in range(2):
            assert np.allclose(out[p, r], expected, atol=1e-14)


def test_direction_is_ignored_away_from_zero() -> None:
    q = np.array([0.1, 0.2, 0.0])

    plain = reciprocal_kernel_sum(q, G_LIST, EPS, POSITIONS, 1.0, 1e-8)
    directed = reciprocal_kernel_sum(q, G_LIST, EPS, POSITIONS, 1.0, 1e-8, q_direction=np.array([0.0, 0.0, 1.0]))

    assert np.array_equal(plain, directed)


def test_sum_accumulates_into_existing_buffer() -> None:
    q = np.array([0.05, -0.1, 0.2])
    fresh = reciprocal_kernel_sum(q, G_LIST, EPS, POSITIONS, 1.0, 1e-8)

    out = np.full((2, 2, 3, 3), 1.0 + 1.0j)
    result = reciprocal_kernel_sum(q, G_LIST, EPS, POSITIONS, 1.0, 1e-8, out=out)

    assert result is out
    assert np.allclose(out, fresh + (1.0 + 1.0j))


def test_kernel_is_hermitian_in_atom_pairs() -> None:
    out = reciprocal_kernel_sum(np.array([0.13, 0.07, -0.21]), G_LIST, EPS, POSITIONS, 0.9, 1e-8)

    swapped = np.conj(out.transpose(1, 0, 3, 2))
    assert np.allclose(out, swapped, atol=1e-13)


def test_accumulator_adds_successive_passes() -> None:
    q1 = np.array([0.1, 0.0, 0.0])
    q2 = np.zeros(3)

    acc = ReciprocalSum(2)
    acc.add(q1, G_LIST, EPS, POSITIONS, 1.0, 1e-8).add(q2, G_LIST, EPS, POSITIONS, 1.0, 1e-8)

    expected = reciprocal_kernel_sum(q1, G_LIST, EPS, POSITIONS, 1.0, 1e-8) + reciprocal_kernel_sum(
        q2, G_LIST, EPS, POSITIONS, 1.0, 1e-8
    )
    assert acc.n_atoms == 2
    assert np.allclose(acc.values, expected)


def test_accumulator_resets_provided_buffer() -> None:
    buf = np.full((2, 2, 3, 3), 7.0 + 0.0j)

    acc = ReciprocalSum(2, out=buf)

    assert acc.values is buf
    assert np.all(buf == 0.0)


def test_accumulator_rejects_bad_buffer() -> None:
    with pytest.raises(ValueError):
        ReciprocalSum(2, out=np.zeros((3, 3, 3, 3), dtype=complex))
    with pytest.raises(ValueError):
        ReciprocalSum(0)
