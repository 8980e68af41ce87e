# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import numpy as np

# Machine epsilon for IEEE doubles. The iterative kernels depend on this
# exact value, do not loosen it.
EPS: float = 2.0**-52

# Bits of mantissa used by the SVD rank estimate
RANK_EPS: float = 2.0**-23

# Sweeps allowed per eigenvalue before a kernel gives up on deflation
MAX_ITERATIONS_PER_EIGENVALUE: int = 100

# QR sweeps allowed per singular value in the bidiagonal SVD
MAX_ITERATIONS_PER_SINGULAR_VALUE: int = 500

# Unshifted QR iteration on companion matrices
QR_ITERATION_STEPS: int = 500
QR_ITERATION_CHECK_INTERVAL: int = 10
QR_ITERATION_EPSILON: float = 1e-13

# Significant digits for the exact LU path
DECIMAL_PRECISION: int = 50


def hypot(a: float, b: float) -> float:
    """sqrt(a**2 + b**2) without under/overflow."""
    if abs(a) > abs(b):
        r = b / a
        return abs(a) * math.sqrt(1.0 + r * r)
    if b != 0:
        r = a / b
        return abs(b) * math.sqrt(1.0 + r * r)
    return 0.0


def permutation_sign(perm) -> float:
    """Return +1 or –1 depending on permutation parity."""
    perm = [int(p) for p in perm]
    visited = [False] * len(perm)
    cycles = 0
    for i in range(len(perm)):
        if not visited[i]:
            cycles += 1
            j = i
            while not visited[j]:
                visited[j] = True
                j = perm[j]
    swaps = len(perm) - cycles  # n − #cycles
    return -1.0 if swaps & 1 else 1.0


def random_nonsingular_upper(n, low=-100, high=100, seed=None) -> np.ndarray:
    """
    Build a matrix U that is upper-triangular with random entries
    everywhere and put only non-zero values on its diagonal

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    U = np.triu(rng.uniform(low, high, size=(n, n)))
    # keep the diagonal away from zero
    diag = rng.uniform(1.0, high, size=n) * rng.choice([-1.0, 1.0], size=n)
    U[np.diag_indices(n)] = diag
    return U


def random_symmetric(n, seed=None) -> np.ndarray:
    """Random symmetric matrix, exactly equal to its transpose."""
    rng = np.random.default_rng(seed)
    M = rng.standard_normal((n, n))
    return np.triu(M) + np.triu(M, 1).T
