# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
denserank
=========

Dense Gaussian elimination with column pivoting, a null-space solver
built on it, and PageRank computed as the null vector of a shifted
transition matrix.

Public API
~~~~~~~~~~
- Linear systems
    - `solve`, `solve_tridiagonal`, `back_substitute`,
      `forward_eliminate`
- Singular systems
    - `solve_singular`
- PageRank
    - `build_transition_matrix`, `rank`, `sorted_labels`, `ranked_pairs`
- Interpolation / transforms
    - `NewtonPolynomial`, `CubicSpline`, `ifft`

Numbers below `PIVOT_TOLERANCE` (1e-10) count as zero; every routine
that compares against it accepts a `tol` keyword instead.

Example
-------
>>> import denserank as dr
>>> L = [[0, 0, 1], [1, 0, 0], [0, 1, 0]]
>>> dr.rank(L, 0.0).round(6).tolist()
[0.333333, 0.333333, 0.333333]
"""

from importlib.metadata import version as _pkg_version

from .elimination import (
    EliminationResult,
    back_substitute,
    forward_eliminate,
    solve,
    solve_singular,
    solve_tridiagonal,
)
from .fft import ifft
from .interpolation import CubicSpline, NewtonPolynomial
from .pagerank import (
    DanglingNodeError,
    build_transition_matrix,
    rank,
    ranked_pairs,
    sorted_labels,
)
from .utils import PIVOT_TOLERANCE, matrix_vector_mult

__all__ = [
    "PIVOT_TOLERANCE",
    "EliminationResult",
    "back_substitute",
    "forward_eliminate",
    "solve",
    "solve_singular",
    "solve_tridiagonal",
    "matrix_vector_mult",
    "DanglingNodeError",
    "build_transition_matrix",
    "rank",
    "ranked_pairs",
    "sorted_labels",
    "NewtonPolynomial",
    "CubicSpline",
    "ifft",
]

# ---------------------------------------------------------------------
# Version string (helps "pip show denserank", Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
