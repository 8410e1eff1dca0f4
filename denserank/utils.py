# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Optional

import numpy as np

# Anything smaller than this in magnitude is treated as zero by the
# elimination routines.
PIVOT_TOLERANCE: float = 1e-10


def as_square_matrix(A, name: str = "A") -> np.ndarray:
    """Return a float64 view/copy of A, raising if A is not square."""
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"{name} must be a square matrix, got shape {A.shape}")
    return A


def as_vector(b, n: int, name: str = "b") -> np.ndarray:
    """Return b as a float64 vector of length n."""
    b = np.asarray(b, dtype=float)
    if b.shape != (n,):
        raise ValueError(f"{name} must have shape ({n},), got {b.shape}")
    return b


def matrix_vector_mult(A, x) -> np.ndarray:
    """
    Product A x for an (n, m) matrix A and a vector x of length m.

    Handy for checking residuals of the solvers.
    """
    A = np.asarray(A, dtype=float)
    x = np.asarray(x, dtype=float)
    if A.ndim != 2:
        raise ValueError("A must be a 2-D matrix")
    if x.shape != (A.shape[1],):
        raise ValueError(
            f"x must have length {A.shape[1]} to multiply a {A.shape} matrix"
        )
    return A @ x


def random_nonsingular_upper(n, low=-100, high=100, seed=None) -> np.ndarray:
    """
    Build a matrix U that is upper-triangular with random entries
    everywhere and put only non-zero values on its diagonal

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    U = rng.uniform(low, high, size=(n, n))
    U = np.triu(U)
    # keep the diagonal well away from zero
    diag = rng.uniform(1, high, size=n) * rng.choice([-1.0, 1.0], size=n)
    U[np.diag_indices(n)] = diag
    return np.asarray(U)


def random_rank_deficient(n: int, seed: Optional[int] = None) -> np.ndarray:
    """
    Random n by n matrix of rank n - 1: the last column is a random
    linear combination of the others, so a null vector always exists.
    """
    rng = np.random.default_rng(seed)
    A = rng.normal(size=(n, n))
    weights = rng.normal(size=n - 1)
    A[:, -1] = A[:, :-1] @ weights
    return A
