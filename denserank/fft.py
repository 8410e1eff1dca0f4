# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np


def ifft(c) -> np.ndarray:
    """
    Recursive radix-2 inverse Fourier transform.

        v_k = sum_j c_j exp(2 pi i j k / n)

    No 1/n factor is applied, so ``ifft(c) == n * np.fft.ifft(c)``.

    Parameters
    ----------
    c : (n,) array_like of complex
        n must be a power of two.
    """
    c = np.asarray(c, dtype=complex)
    n = c.shape[0] if c.ndim == 1 else 0
    if n == 0 or n & (n - 1):
        raise ValueError(f"length must be a power of two, got shape {c.shape}")
    return _ifft(c)


def _ifft(c: np.ndarray) -> np.ndarray:
    n = c.size
    if n == 1:
        return c.copy()
    m = n // 2
    even = _ifft(c[0::2])
    odd = _ifft(c[1::2])
    twiddle = np.exp(2j * np.pi * np.arange(m) / n) * odd
    return np.concatenate([even + twiddle, even - twiddle])
