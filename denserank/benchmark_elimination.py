#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import argparse
import time

import numpy as np
import pandas as pd

from .elimination import solve, solve_singular
from .pagerank import rank
from .utils import random_rank_deficient

REPEATS = 5  # best of 5 runs leads to stable numbers
SIZES = [50, 200, 500]
COLUMNS = ["kernel", "size", "sec", "sec/NumPy", "residual"]


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def _nullspace_svd(A):
    return np.linalg.svd(A)[2][-1]


def _random_links(n, rng):
    L = (rng.random((n, n)) < 0.1).astype(int)
    # every page links at least to its successor, so nothing dangles
    L[(np.arange(n) + 1) % n, np.arange(n)] = 1
    return L


def run_benchmarks(sizes=SIZES, repeats=REPEATS, seed=0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    records = []
    for n in sizes:
        A = rng.normal(size=(n, n))
        b = rng.normal(size=n)

        t_np = min(wall(np.linalg.solve, A, b) for _ in range(repeats))
        t_ge = min(wall(solve, A, b) for _ in range(repeats))
        r_ge = np.linalg.norm(A @ solve(A, b) - b, np.inf)
        records.append(("GE", n, t_ge, t_ge / t_np, r_ge))

        S = random_rank_deficient(n, seed=seed + n)
        t_svd = min(wall(_nullspace_svd, S) for _ in range(repeats))
        t_sing = min(wall(solve_singular, S) for _ in range(repeats))
        p = solve_singular(S)
        r_sing = np.linalg.norm(S @ p, np.inf) / np.linalg.norm(p, np.inf)
        records.append(("GE-null", n, t_sing, t_sing / t_svd, r_sing))

        L = _random_links(n, rng)
        t_pr = min(wall(rank, L, 0.15) for _ in range(repeats))
        r_pr = abs(rank(L, 0.15).sum() - 1.0)
        records.append(("PageRank", n, t_pr, np.nan, r_pr))

    return pd.DataFrame(records, columns=COLUMNS)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Time the elimination kernels against NumPy/LAPACK."
    )
    parser.add_argument("--sizes", type=int, nargs="+", default=SIZES)
    parser.add_argument("--repeats", type=int, default=REPEATS)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--csv", help="also write the table to this CSV file")
    args = parser.parse_args(argv)

    df = run_benchmarks(args.sizes, args.repeats, args.seed)
    print(df.to_string(index=False))
    if args.csv:
        df.to_csv(args.csv, index=False)
    return df


if __name__ == "__main__":
    main()
