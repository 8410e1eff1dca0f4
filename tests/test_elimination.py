# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from denserank.elimination import (
    back_substitute,
    forward_eliminate,
    solve,
    solve_singular,
    solve_tridiagonal,
)
from denserank.utils import (
    PIVOT_TOLERANCE,
    matrix_vector_mult,
    random_nonsingular_upper,
    random_rank_deficient,
)

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def test_back_substitute_example():
    R = np.array([[2.0, 1.0], [0.0, 4.0]])
    b = np.array([5.0, 8.0])
    x = back_substitute(R, b)
    np.testing.assert_allclose(x, [1.5, 2.0])


def test_back_substitute_ignores_below_diagonal():
    R = np.array([[2.0, 1.0], [99.0, 4.0]])
    np.testing.assert_allclose(back_substitute(R, [5.0, 8.0]), [1.5, 2.0])


def test_back_substitute_random_upper():
    for seed in range(TEST_ITERATIONS):
        U = random_nonsingular_upper(20, seed=seed)
        b = np.random.default_rng(seed).normal(size=20)
        x = back_substitute(U, b)
        # triangular solves are backward stable, even when U is badly
        # conditioned and x itself is far from accurate
        scale = np.linalg.norm(U, np.inf) * np.linalg.norm(x, np.inf)
        assert np.linalg.norm(U @ x - b, np.inf) <= 1e-12 * scale


def test_back_substitute_zero_diagonal_degrades():
    R = np.array([[1.0, 1.0], [0.0, 0.0]])
    x = back_substitute(R, [1.0, 1.0])
    assert not np.all(np.isfinite(x))


def test_matrix_vector_mult():
    y = matrix_vector_mult([[1, 2], [3, 4]], [1, 1])
    np.testing.assert_allclose(y, [3.0, 7.0])


def test_matrix_vector_mult_rectangular():
    A = np.arange(6.0).reshape(2, 3)
    np.testing.assert_allclose(matrix_vector_mult(A, [1, 0, 2]), A @ [1, 0, 2])
    with pytest.raises(ValueError):
        matrix_vector_mult(A, [1, 2])


def test_forward_eliminate_upper_triangular():
    rng = np.random.default_rng(0)
    A = rng.normal(size=(8, 8))
    result = forward_eliminate(A, rng.normal(size=8))
    assert not result.is_deficient
    assert np.allclose(np.tril(result.U, -1), 0, atol=1e-12)
    assert sorted(result.perm) == list(range(8))


def test_forward_eliminate_picks_largest_pivot():
    A = np.array([[1.0, 2.0], [-5.0, 1.0]])
    result = forward_eliminate(A, [1.0, 2.0])
    assert result.U[0, 0] == -5.0
    assert result.c[0] == 2.0
    assert result.perm == [1, 0]


def test_forward_eliminate_probe_reports_vanishing_column():
    A = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 7.0], [1.0, 2.0, 1.0]])
    result = forward_eliminate(A, stop_on_singular=True)
    assert result.deficient_at == 1


def test_solve_basic_n_by_n():
    n = 200
    rng = np.random.default_rng(n)
    A = rng.normal(size=(n, n))
    x0 = rng.normal(size=n)
    b = A @ x0

    x = solve(A, b)
    assert np.allclose(x, x0, rtol=1e-8, atol=1e-8)


def test_solve_residual_random():
    for i in range(TEST_ITERATIONS):
        rng = np.random.default_rng(i)
        n = rng.integers(2, 30)
        A = rng.normal(size=(n, n))
        b = rng.normal(size=n)
        x = solve(A, b)
        logger.debug(
            f"\n==== Results ====\nOurs:\n{x}\nNumpy:\n{np.linalg.solve(A, b)}"
        )
        # Compare the residual (r = b - Ax), which is independent of
        # conditioning and scaling, in the infinity norm
        res = np.linalg.norm(A @ x - b, ord=np.inf)
        assert res < 1e-9 * max(1.0, np.linalg.norm(x, np.inf))


def test_solve_independent_of_row_order():
    rng = np.random.default_rng(7)
    A = rng.normal(size=(6, 6))
    b = rng.normal(size=6)
    order = rng.permutation(6)
    np.testing.assert_allclose(solve(A[order], b[order]), solve(A, b), atol=1e-10)


def test_solve_needs_pivoting():
    # naive elimination loses everything with the tiny leading pivot
    A = np.array([[1e-20, 1.0], [1.0, 1.0]])
    b = np.array([1.0, 2.0])
    np.testing.assert_allclose(solve(A, b), [1.0, 1.0], rtol=1e-12)


def test_solve_examples():
    A = [[1, 1, 1], [2, 3, 3], [3, 5, 8]]
    x = solve(A, [-1, 1, 0])
    np.testing.assert_allclose(matrix_vector_mult(A, x), [-1, 1, 0], atol=1e-12)

    A = [[-0.001, 1], [2, 1]]
    x = solve(A, [1, 0])
    np.testing.assert_allclose(np.dot(A, x), [1, 0], atol=1e-12)


def test_solve_does_not_mutate_inputs():
    A = np.array([[0.0, 2.0, 1.0], [1.0, -2.0, -3.0], [-1.0, 1.0, 2.0]])
    b = np.array([-8.0, 0.0, 3.0])
    A_before, b_before = A.copy(), b.copy()
    solve(A, b)
    np.testing.assert_array_equal(A, A_before)
    np.testing.assert_array_equal(b, b_before)


def test_solve_singular_matrix_degrades_silently():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    x = solve(A, [1.0, 1.0])
    assert not np.all(np.isfinite(x))


def test_solve_shape_checks():
    with pytest.raises(ValueError):
        solve(np.ones((2, 3)), np.ones(2))
    with pytest.raises(ValueError):
        solve(np.eye(3), np.ones(2))


def test_solve_singular_example():
    C = np.array([[1.0, -2.0, 1.0], [0.0, 1.0, -2.0], [0.0, 1.0, -2.0]])
    p = solve_singular(C)
    assert np.linalg.norm(p) > 0
    assert np.allclose(C @ p, 0, atol=1e-10)
    np.testing.assert_allclose(p, [3.0, 2.0, 1.0])


def test_solve_singular_random_rank_deficient():
    for seed in range(TEST_ITERATIONS):
        A = random_rank_deficient(10, seed=seed)
        p = solve_singular(A)
        assert np.linalg.norm(p, np.inf) >= 1.0
        assert np.linalg.norm(A @ p, np.inf) < 1e-9


def test_solve_singular_dependent_row():
    rng = np.random.default_rng(3)
    A = rng.normal(size=(5, 5))
    A[4] = 2.0 * A[0] - A[2]
    p = solve_singular(A)
    assert np.linalg.norm(p) > 0
    assert np.linalg.norm(A @ p, np.inf) < 1e-9


def test_solve_singular_zero_first_column():
    A = np.array([[0.0, 1.0], [0.0, 3.0]])
    np.testing.assert_array_equal(solve_singular(A), [1.0, 0.0])


def test_solve_singular_diagonal():
    A = np.diag([1.0, 2.0, 0.0])
    np.testing.assert_allclose(solve_singular(A), [0.0, 0.0, 1.0])


def test_solve_singular_invertible_returns_zero():
    rng = np.random.default_rng(11)
    A = rng.normal(size=(6, 6))
    p = solve_singular(A)
    np.testing.assert_array_equal(p, np.zeros(6))


def test_solve_singular_does_not_mutate():
    A = random_rank_deficient(4, seed=1)
    before = A.copy()
    solve_singular(A)
    np.testing.assert_array_equal(A, before)


@pytest.mark.parametrize("tol,expected_deficient", [(PIVOT_TOLERANCE, False), (1e-3, True)])
def test_tolerance_is_overridable(tol, expected_deficient):
    A = np.array([[1.0, 0.0], [0.0, 1e-6]])
    p = solve_singular(A, tol=tol)
    assert bool(np.any(p)) == expected_deficient


def test_solve_singular_zero_diagonal_during_elimination():
    # invertible, but the (1, 1) entry is zero after the first step; a
    # row swap recovers the pivot, so no null vector may be reported
    A = np.array([[1.0, 1.0, 0.0], [1.0, 1.0, 1.0], [0.0, 1.0, 1.0]])
    np.testing.assert_array_equal(solve_singular(A), np.zeros(3))


def test_solve_tridiagonal_matches_dense_solve():
    rng = np.random.default_rng(5)
    n = 12
    lower = rng.uniform(-1, 1, size=n - 1)
    upper = rng.uniform(-1, 1, size=n - 1)
    diag = 4.0 + rng.uniform(0, 1, size=n)
    b = rng.normal(size=n)
    T = np.diag(diag) + np.diag(lower, k=-1) + np.diag(upper, k=1)

    x = solve_tridiagonal(lower, diag, upper, b)
    np.testing.assert_allclose(x, solve(T, b), atol=1e-12)
    np.testing.assert_allclose(T @ x, b, atol=1e-12)


def test_solve_tridiagonal_small_and_inputs_untouched():
    np.testing.assert_allclose(solve_tridiagonal([], [4.0], [], [8.0]), [2.0])
    diag = np.array([4.0, 4.0])
    b = np.array([5.0, 5.0])
    np.testing.assert_allclose(solve_tridiagonal([1.0], diag, [1.0], b), [1.0, 1.0])
    np.testing.assert_array_equal(diag, [4.0, 4.0])
    np.testing.assert_array_equal(b, [5.0, 5.0])


def test_solve_tridiagonal_shape_checks():
    with pytest.raises(ValueError):
        solve_tridiagonal([1.0, 1.0], [4.0, 4.0], [1.0], [1.0, 1.0])
