# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
PageRank as a null-space problem.

The stationary distribution p of a column-stochastic transition matrix
A~ satisfies A~ p = p, i.e. (A~ - I) p = 0. The shifted matrix is
singular, so `solve_singular` yields p up to scale and normalising it
to sum 1 gives the ranks.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

from .elimination import solve_singular
from .utils import PIVOT_TOLERANCE

logger = logging.getLogger(__name__)

DANGLING_POLICIES = ("raise", "uniform", "ignore")


class DanglingNodeError(ValueError):
    """A page has no outbound links, so its column cannot be normalised."""

    def __init__(self, columns):
        self.columns = list(columns)
        super().__init__(
            f"pages {self.columns} have no outbound links (zero out-degree)"
        )


def _as_link_matrix(L) -> np.ndarray:
    L = np.asarray(L)
    if L.ndim != 2 or L.shape[0] != L.shape[1]:
        raise ValueError(f"link matrix must be square, got shape {L.shape}")
    if not np.isin(L, (0, 1)).all():
        raise ValueError("link matrix entries must be 0 or 1")
    return L.astype(int)


def build_transition_matrix(L, rho: float, dangling: str = "raise") -> np.ndarray:
    """
    Column-stochastic matrix of the random surfer.

    Parameters
    ----------
    L : (n, n) array_like of 0/1
        L[i, j] = 1 when page j links to page i.
    rho : float
        Teleport probability in [0, 1]: the chance of jumping to a
        uniformly random page instead of following a link.
    dangling : {"raise", "uniform", "ignore"}
        What to do with pages without outbound links. "raise" throws
        DanglingNodeError, "uniform" lets such a page link to every
        page, "ignore" leaves the column with only the rho / n
        teleport mass, so it no longer sums to 1.

    Returns
    -------
    (n, n) ndarray
        Entry (i, j) = (1 - rho) / outdeg(j) + rho / n if j links to i,
        rho / n otherwise.
    """
    if dangling not in DANGLING_POLICIES:
        raise ValueError(f"dangling must be one of {DANGLING_POLICIES}")
    if not 0.0 <= rho <= 1.0:
        raise ValueError(f"rho must lie in [0, 1], got {rho}")

    L = _as_link_matrix(L)
    n = L.shape[0]
    outdegree = L.sum(axis=0).astype(float)

    empty = np.flatnonzero(outdegree == 0)
    if empty.size:
        if dangling == "raise":
            raise DanglingNodeError(empty.tolist())
        if dangling == "uniform":
            logger.debug(f"Dangling pages {empty.tolist()} link to every page")
            L = L.copy()
            L[:, empty] = 1
            outdegree[empty] = n
        else:
            logger.warning(
                f"Dangling pages {empty.tolist()}; their columns will not sum to 1"
            )

    with np.errstate(divide="ignore", invalid="ignore"):
        follow = (1.0 - rho) / outdegree
    P = np.full((n, n), rho / n, dtype=float)
    links = L == 1
    P[links] += np.broadcast_to(follow, (n, n))[links]
    return P


def rank(
    L,
    rho: float,
    dangling: str = "raise",
    tol: float = PIVOT_TOLERANCE,
) -> np.ndarray:
    """
    PageRank vector of the link graph L: non-negative, sums to 1.

    Σp close to zero is not guarded against and yields NaN.
    """
    A = build_transition_matrix(L, rho, dangling=dangling)
    A[np.diag_indices_from(A)] -= 1.0
    p = solve_singular(A, tol=tol)

    with np.errstate(divide="ignore", invalid="ignore"):
        lam = 1.0 / p.sum()
        return p * lam


def ranked_pairs(
    labels: Sequence[str], L, rho: float, dangling: str = "raise"
) -> List[Tuple[str, float]]:
    """(label, score) pairs, highest score first."""
    L = np.asarray(L)
    if len(labels) != L.shape[0]:
        raise ValueError(
            f"got {len(labels)} labels for a link matrix of size {L.shape[0]}"
        )
    scores = rank(L, rho, dangling=dangling)
    pairs = list(zip(labels, scores.tolist()))
    pairs.sort(key=lambda pair: pair[1], reverse=True)
    return pairs


def sorted_labels(
    labels: Sequence[str], L, rho: float, dangling: str = "raise"
) -> List[str]:
    """Labels ordered by descending PageRank."""
    return [label for label, _score in ranked_pairs(labels, L, rho, dangling)]
