# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .utils import PIVOT_TOLERANCE, as_square_matrix, as_vector

logger = logging.getLogger(__name__)


@dataclass
class EliminationResult:
    """
    Outcome of `forward_eliminate`.

    Attributes
    ----------
    U : (n, n) ndarray
        Working matrix. Upper-triangular in its first `deficient_at`
        columns (all of them for a complete reduction).
    c : (n,) ndarray
        Right-hand side after the identical row operations.
    perm : list[int]
        Final row order: row i of U comes from original row perm[i].
    deficient_at : int | None
        None when every pivot was usable. Otherwise the column whose
        pivot candidates all fell below the tolerance; equivalently the
        size of the triangular block formed before stopping.
    """

    U: np.ndarray
    c: np.ndarray
    perm: List[int]
    deficient_at: Optional[int] = None

    @property
    def is_deficient(self) -> bool:
        return self.deficient_at is not None


def back_substitute(R, b) -> np.ndarray:
    """
    Solve R x = b for an upper-triangular R, last row first.

    Parameters
    ----------
    R : (n, n) array_like
        Upper-triangular matrix with a nonzero diagonal. Entries below
        the diagonal are never read.
    b : (n,) array_like
        Right-hand side.

    Returns
    -------
    x : (n,) ndarray

    A zero diagonal entry is not checked for; it shows up as inf/NaN
    in x.
    """
    R = as_square_matrix(R, "R")
    n = R.shape[0]
    b = as_vector(b, n)
    x = np.zeros(n, dtype=float)
    if n == 0:
        return x

    with np.errstate(divide="ignore", invalid="ignore"):
        x[n - 1] = b[n - 1] / R[n - 1, n - 1]
        for i in range(n - 2, -1, -1):
            s = b[i] - R[i, i + 1 :] @ x[i + 1 :]
            x[i] = s / R[i, i]
    return x


def forward_eliminate(
    A,
    b=None,
    stop_on_singular: bool = False,
    tol: float = PIVOT_TOLERANCE,
) -> EliminationResult:
    """
    Reduce a copy of (A, b) to upper-triangular form with column pivoting.

    Parameters
    ----------
    A : (n, n) array_like
        Square coefficient matrix. Never modified.
    b : (n,) array_like | None
        Right-hand side; receives the same swaps and updates. A zero
        vector is used when omitted.
    stop_on_singular : bool
        Probe mode. Stop at the first column whose pivot candidates are
        all below `tol` and report it in `deficient_at`. In plain mode
        the reduction always runs to the end.
    tol : float
        Magnitude below which a pivot counts as zero.

    Returns
    -------
    EliminationResult
    """
    U = as_square_matrix(A).copy()
    n = U.shape[0]
    c = np.zeros(n, dtype=float) if b is None else as_vector(b, n).copy()
    perm = list(range(n))

    for i in range(n):
        # Partial pivoting: the largest magnitude in column i, rows i and
        # below, goes to the diagonal.
        col_slice = np.abs(U[i:, i])
        max_idx = int(col_slice.argmax())
        max_val = col_slice[max_idx]

        if max_val < tol:
            if stop_on_singular:
                logger.debug(f"Pivot column {i} vanished (|max| = {max_val:.3e})")
                return EliminationResult(U, c, perm, deficient_at=i)
            logger.warning(
                f"Pivot {max_val:.3e} in column {i} is below {tol:.1e}; "
                "matrix is numerically singular, result will contain inf/NaN"
            )

        pivot_row = i + max_idx
        if pivot_row != i:
            # full row exchange, matrix and right-hand side together
            U[[i, pivot_row]] = U[[pivot_row, i]]
            c[[i, pivot_row]] = c[[pivot_row, i]]
            perm[i], perm[pivot_row] = perm[pivot_row], perm[i]

        # Only rows with a nonzero entry under the pivot need updating.
        rows = np.nonzero(U[i + 1 :, i])[0] + i + 1
        if rows.size == 0:
            continue
        with np.errstate(divide="ignore", invalid="ignore"):
            factors = U[rows, i] / U[i, i]
            U[rows, i:] -= factors[:, None] * U[i, i:]
            c[rows] -= factors * c[i]

    return EliminationResult(U, c, perm)


def solve(A, b, tol: float = PIVOT_TOLERANCE) -> np.ndarray:
    """
    Solve A x = b for an invertible A by Gaussian elimination with
    column pivoting followed by back substitution.

    Neither A nor b is modified. A singular A is not an error: the
    result simply degrades to inf/NaN.
    """
    result = forward_eliminate(A, b, stop_on_singular=False, tol=tol)
    return back_substitute(result.U, result.c)


def solve_tridiagonal(lower, diag, upper, b) -> np.ndarray:
    """
    Solve a tridiagonal system in O(n) by elimination without pivoting.

    Parameters
    ----------
    lower : (n-1,) array_like
        Sub-diagonal, lower[i] sits at (i + 1, i).
    diag : (n,) array_like
        Main diagonal.
    upper : (n-1,) array_like
        Super-diagonal, upper[i] sits at (i, i + 1).
    b : (n,) array_like
        Right-hand side.

    Only safe without row swaps when the matrix is diagonally dominant,
    as for the spline derivative system.
    """
    d = np.asarray(diag, dtype=float).copy()
    n = d.shape[0]
    lower = as_vector(lower, max(n - 1, 0), "lower")
    upper = as_vector(upper, max(n - 1, 0), "upper")
    c = as_vector(b, n).copy()
    x = np.zeros(n, dtype=float)
    if n == 0:
        return x

    with np.errstate(divide="ignore", invalid="ignore"):
        # forward sweep: each row only has one entry below the diagonal
        for i in range(1, n):
            factor = lower[i - 1] / d[i - 1]
            d[i] -= factor * upper[i - 1]
            c[i] -= factor * c[i - 1]

        # back substitution on the remaining bidiagonal
        x[n - 1] = c[n - 1] / d[n - 1]
        for i in range(n - 2, -1, -1):
            x[i] = (c[i] - upper[i] * x[i + 1]) / d[i]
    return x


def solve_singular(A, tol: float = PIVOT_TOLERANCE) -> np.ndarray:
    """
    Find p != 0 with A p = 0 for a singular square matrix A.

    Elimination runs until a column has no usable pivot. With m the
    size of the triangular block built up to that point, T = U[:m, :m]
    and v = -U[:m, m], the system T x = v is back-substituted and the
    vector (x, 1, 0, ..., 0) returned.

    Only the first vanishing pivot is used. The method is intended for
    rank n - 1 matrices such as the shifted PageRank matrix; with a
    deeper deficiency the vector returned belongs to the first
    dependent column.

    Returns the zero vector if A turns out to be invertible.
    """
    A = as_square_matrix(A)
    n = A.shape[0]
    result = forward_eliminate(A, np.zeros(n), stop_on_singular=True, tol=tol)

    if not result.is_deficient:
        logger.debug("solve_singular(): no vanishing pivot, matrix is invertible")
        return np.zeros(n, dtype=float)

    m = result.deficient_at
    T = np.triu(result.U[:m, :m])
    v = -result.U[:m, m]
    x = back_substitute(T, v)

    p = np.zeros(n, dtype=float)
    p[:m] = x
    p[m] = 1.0
    return p
