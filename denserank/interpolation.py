# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np

from .elimination import solve_tridiagonal

logger = logging.getLogger(__name__)


class NewtonPolynomial:
    """
    Newton form of the interpolating polynomial

        p(z) = a0 + a1 (z - x0) + a2 (z - x0)(z - x1) + ...

    Besides the coefficients the last diagonal of the divided-difference
    table, f[i] = [x_i, ..., x_n] f, is kept so that further sampling
    points can be appended without rebuilding the table.
    """

    def __init__(self, x, y):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.ndim != 1 or x.shape != y.shape or x.size == 0:
            raise ValueError("x and y must be non-empty vectors of equal length")
        if np.unique(x).size != x.size:
            raise ValueError("sampling points must be distinct")
        self.x = x.copy()
        self._compute_coefficients(y)

    @classmethod
    def equidistant(cls, a: float, b: float, n: int, y) -> "NewtonPolynomial":
        """Interpolate y at the n + 1 equidistant points a, a + h, ..., b."""
        if n < 1:
            raise ValueError("need at least one interval")
        x = a + np.arange(n + 1) * ((b - a) / n)
        return cls(x, y)

    def _compute_coefficients(self, y: np.ndarray):
        # The table is built column by column in a single array.
        f = y.astype(float, copy=True)
        a = np.empty_like(f)
        a[0] = f[0]
        for k in range(1, f.size):
            f[: f.size - k] = (f[1 : f.size - k + 1] - f[: f.size - k]) / (
                self.x[k:] - self.x[: f.size - k]
            )
            a[k] = f[0]
        self.a = a
        self.f = f

    @property
    def coefficients(self) -> np.ndarray:
        return self.a

    @property
    def divided_differences(self) -> np.ndarray:
        return self.f

    def add_sampling_point(self, x_new: float, y_new: float):
        """
        Append (x_new, y_new). Only the stored diagonal and the nodes are
        needed, so this costs O(n). Nodes that already exist are ignored.
        """
        if np.any(self.x == x_new):
            logger.debug(f"Sampling point {x_new} already present, ignored")
            return

        x = np.append(self.x, x_new)
        f = np.empty(self.f.size + 1)
        f[-1] = y_new
        for i in range(self.f.size - 1, -1, -1):
            f[i] = (f[i + 1] - self.f[i]) / (x_new - x[i])

        self.x = x
        self.f = f
        self.a = np.append(self.a, f[0])

    def evaluate(self, z):
        """Horner-like evaluation; z may be a scalar or an array."""
        z = np.asarray(z, dtype=float)
        result = np.full(z.shape, self.a[-1])
        for i in range(self.a.size - 2, -1, -1):
            result = self.a[i] + (z - self.x[i]) * result
        return result if result.ndim else float(result)


class CubicSpline:
    """
    Piecewise cubic Hermite interpolation of equidistant samples.

    The derivatives at the interior nodes follow from continuity of the
    second derivative,

        y'_{i-1} + 4 y'_i + y'_{i+1} = 3 / h (y_{i+1} - y_{i-1}),

    with the end derivatives fixed by the boundary conditions (0 by
    default).
    """

    def __init__(self, a: float, b: float, n: int, y):
        if n < 1:
            raise ValueError("need at least one interval")
        y = np.asarray(y, dtype=float)
        if y.shape != (n + 1,):
            raise ValueError(f"expected {n + 1} sample values, got {y.shape}")
        if not b > a:
            raise ValueError("interval must satisfy a < b")
        self.a = float(a)
        self.b = float(b)
        self.n = n
        self.h = (self.b - self.a) / n
        self.y = y.copy()
        self.yprime = np.zeros(n + 1)
        if n > 1:
            self._compute_derivatives()

    @property
    def derivatives(self) -> np.ndarray:
        return self.yprime

    def set_boundary_conditions(self, yprime0: float, yprimen: float):
        """Fix y'(a) and y'(b) and recompute the interior derivatives."""
        self.yprime[0] = yprime0
        self.yprime[self.n] = yprimen
        if self.n > 1:
            self._compute_derivatives()

    def _compute_derivatives(self):
        n, h, y = self.n, self.h, self.y
        m = n - 1
        rhs = 3.0 / h * (y[2:] - y[:-2])
        rhs[0] -= self.yprime[0]
        rhs[-1] -= self.yprime[n]
        self.yprime[1:n] = solve_tridiagonal(
            np.ones(m - 1), np.full(m, 4.0), np.ones(m - 1), rhs
        )

    def evaluate(self, z):
        """
        Value of the spline at z. Outside [a, b] the nearest end value
        y[0] or y[n] is returned.
        """
        z = np.asarray(z, dtype=float)
        i = np.clip(np.floor((z - self.a) / self.h).astype(int), 0, self.n - 1)
        t = np.clip((z - (self.a + i * self.h)) / self.h, 0.0, 1.0)

        h00 = 1 - 3 * t**2 + 2 * t**3
        h01 = 3 * t**2 - 2 * t**3
        h10 = t - 2 * t**2 + t**3
        h11 = -(t**2) + t**3
        result = (
            self.y[i] * h00
            + self.y[i + 1] * h01
            + self.h * (self.yprime[i] * h10 + self.yprime[i + 1] * h11)
        )
        return result if result.ndim else float(result)
