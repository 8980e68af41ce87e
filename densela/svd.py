# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
import math

import numpy as np

from .matrix import Matrix
from .utils import EPS, MAX_ITERATIONS_PER_SINGULAR_VALUE, RANK_EPS, hypot

logger = logging.getLogger(__name__)

# Absolute floor for negligible entries of the bidiagonal
TINY = 2.0**-966


def _rotate_columns(X: np.ndarray, a: int, b: int, cs: float, sn: float) -> None:
    """Apply the plane rotation (cs, sn) to columns a and b of X in place."""
    xa = X[:, a].copy()
    X[:, a] = cs * xa + sn * X[:, b]
    X[:, b] = -sn * xa + cs * X[:, b]


class SingularValueDecomposition:
    """
    Economy-size Singular Value Decomposition A = U diag(s) V'.

    For an m-by-n real matrix with k = min(m, n):
        U : m-by-k matrix whose columns are orthonormal
        s : length-k vector of singular values, sorted in descending order
        V : n-by-k matrix whose columns are orthonormal

    Algorithm outline
    -----------------
    1.  Householder reflections from the left and right reduce A to an
        upper bidiagonal matrix (Golub-Kahan), accumulating U and V.
    2.  Implicitly shifted QR sweeps on the bidiagonal drive the
        super-diagonal to zero. Negligible entries split or deflate the
        problem.
    3.  Singular values are made non-negative and sorted, with the
        matching columns of U and V.

    Working on A directly rather than on A'A keeps small singular values
    accurate to about eps * s[0], so cond() stays finite for ill-conditioned
    but nonsingular matrices.

    If a value needs more than ``max_iterations`` sweeps the current
    approximation is kept, ``converged`` is set to False and a warning is
    logged.
    """

    def __init__(
        self, matrix: Matrix, max_iterations: int = MAX_ITERATIONS_PER_SINGULAR_VALUE
    ):
        m = matrix.get_row_dimension()
        n = matrix.get_column_dimension()
        self.m = m
        self.n = n
        self.max_iterations = max_iterations
        self.converged = True
        A = matrix.get_array_copy().reshape(m, n)

        # The bidiagonal kernel wants m >= n, so decompose the transpose of
        # a wide matrix and swap the roles of U and V.
        if m < n:
            logger.debug("SVD: %dx%d input is wide, decomposing its transpose", m, n)
            U, s, V = self._decompose(A.T.copy())
            self.U, self.s, self.V = V, s, U
        else:
            self.U, self.s, self.V = self._decompose(A)

    def _decompose(self, A: np.ndarray):
        m, n = A.shape
        if n == 0:
            return np.zeros((m, 0)), np.zeros(0), np.zeros((0, 0))

        s = np.zeros(n)
        e = np.zeros(n)
        U = np.zeros((m, n))
        V = np.zeros((n, n))

        # Reduce A to bidiagonal form, storing the diagonal elements
        # in s and the super-diagonal elements in e.
        nct = min(m - 1, n)
        nrt = max(0, min(n - 2, m))
        for k in range(max(nct, nrt)):
            if k < nct:
                # Column transformation, k-th diagonal goes to s[k].
                s[k] = math.hypot(*A[k:, k])
                if s[k] != 0.0:
                    if A[k, k] < 0.0:
                        s[k] = -s[k]
                    A[k:, k] /= s[k]
                    A[k, k] += 1.0
                s[k] = -s[k]

            for j in range(k + 1, n):
                if k < nct and s[k] != 0.0:
                    t = -(A[k:, k] @ A[k:, j]) / A[k, k]
                    A[k:, j] += t * A[k:, k]
                # k-th row of A, used for the row transformation below
                e[j] = A[k, j]

            if k < nct:
                U[k:, k] = A[k:, k]

            if k < nrt:
                # Row transformation, k-th super-diagonal goes to e[k].
                e[k] = math.hypot(*e[k + 1 :])
                if e[k] != 0.0:
                    if e[k + 1] < 0.0:
                        e[k] = -e[k]
                    e[k + 1 :] /= e[k]
                    e[k + 1] += 1.0
                e[k] = -e[k]
                if k + 1 < m and e[k] != 0.0:
                    work = A[k + 1 :, k + 1 :] @ e[k + 1 :]
                    A[k + 1 :, k + 1 :] += np.outer(work, -e[k + 1 :] / e[k + 1])
                V[k + 1 :, k] = e[k + 1 :]

        # Final bidiagonal matrix of order p.
        p = n
        if nct < n:
            s[nct] = A[nct, nct]
        if nrt + 1 < p:
            e[nrt] = A[nrt, p - 1]
        e[p - 1] = 0.0

        # Generate U.
        for j in range(nct, n):
            U[:, j] = 0.0
            U[j, j] = 1.0
        for k in range(nct - 1, -1, -1):
            if s[k] != 0.0:
                for j in range(k + 1, n):
                    t = -(U[k:, k] @ U[k:, j]) / U[k, k]
                    U[k:, j] += t * U[k:, k]
                U[k:, k] = -U[k:, k]
                U[k, k] += 1.0
                U[:k, k] = 0.0
            else:
                U[:, k] = 0.0
                U[k, k] = 1.0

        # Generate V.
        for k in range(n - 1, -1, -1):
            if k < nrt and e[k] != 0.0:
                for j in range(k + 1, n):
                    t = -(V[k + 1 :, k] @ V[k + 1 :, j]) / V[k + 1, k]
                    V[k + 1 :, j] += t * V[k + 1 :, k]
            V[:, k] = 0.0
            V[k, k] = 1.0

        # Main iteration loop for the singular values.
        pp = p - 1
        iteration = 0
        while p > 0:
            if iteration > self.max_iterations:
                self._give_up(p - 1)
                break

            # Inspect for negligible elements in s and e. On completion
            # kase and k are set as follows:
            #   kase = 1  if s[p-1] and e[k-1] are negligible and k < p
            #   kase = 2  if s[k] is negligible and k < p
            #   kase = 3  if e[k-1] is negligible, k < p and s[k..p-1]
            #             are not negligible (QR step)
            #   kase = 4  if e[p-2] is negligible (convergence)
            k = p - 2
            while k >= 0:
                if abs(e[k]) <= TINY + EPS * (abs(s[k]) + abs(s[k + 1])):
                    e[k] = 0.0
                    break
                k -= 1

            if k == p - 2:
                kase = 4
            else:
                ks = p - 1
                while ks > k:
                    t = abs(e[ks]) if ks != p else 0.0
                    if ks != k + 1:
                        t += abs(e[ks - 1])
                    if abs(s[ks]) <= TINY + EPS * t:
                        s[ks] = 0.0
                        break
                    ks -= 1
                if ks == k:
                    kase = 3
                elif ks == p - 1:
                    kase = 1
                else:
                    kase = 2
                    k = ks
            k += 1

            if kase == 1:
                # Deflate negligible s[p-1].
                f = e[p - 2]
                e[p - 2] = 0.0
                for j in range(p - 2, k - 1, -1):
                    t = hypot(s[j], f)
                    cs = s[j] / t
                    sn = f / t
                    s[j] = t
                    if j != k:
                        f = -sn * e[j - 1]
                        e[j - 1] = cs * e[j - 1]
                    _rotate_columns(V, j, p - 1, cs, sn)

            elif kase == 2:
                # Split at negligible s[k-1].
                f = e[k - 1]
                e[k - 1] = 0.0
                for j in range(k, p):
                    t = hypot(s[j], f)
                    cs = s[j] / t
                    sn = f / t
                    s[j] = t
                    f = -sn * e[j]
                    e[j] = cs * e[j]
                    _rotate_columns(U, j, k - 1, cs, sn)

            elif kase == 3:
                # Shift from the trailing 2x2 block.
                scale = max(
                    abs(s[p - 1]), abs(s[p - 2]), abs(e[p - 2]), abs(s[k]), abs(e[k])
                )
                sp = s[p - 1] / scale
                spm1 = s[p - 2] / scale
                epm1 = e[p - 2] / scale
                sk = s[k] / scale
                ek = e[k] / scale
                b = ((spm1 + sp) * (spm1 - sp) + epm1 * epm1) / 2.0
                c = (sp * epm1) * (sp * epm1)
                shift = 0.0
                if b != 0.0 or c != 0.0:
                    shift = math.sqrt(b * b + c)
                    if b < 0.0:
                        shift = -shift
                    shift = c / (b + shift)
                f = (sk + sp) * (sk - sp) + shift
                g = sk * ek

                # Chase zeros.
                for j in range(k, p - 1):
                    t = hypot(f, g)
                    cs = f / t
                    sn = g / t
                    if j != k:
                        e[j - 1] = t
                    f = cs * s[j] + sn * e[j]
                    e[j] = cs * e[j] - sn * s[j]
                    g = sn * s[j + 1]
                    s[j + 1] = cs * s[j + 1]
                    _rotate_columns(V, j, j + 1, cs, sn)

                    t = hypot(f, g)
                    cs = f / t
                    sn = g / t
                    s[j] = t
                    f = cs * e[j] + sn * s[j + 1]
                    s[j + 1] = -sn * e[j] + cs * s[j + 1]
                    g = sn * e[j + 1]
                    e[j + 1] = cs * e[j + 1]
                    if j < m - 1:
                        _rotate_columns(U, j, j + 1, cs, sn)
                e[p - 2] = f
                iteration += 1

            else:
                # Convergence: make s[k] non-negative, then bubble it into
                # descending order.
                if s[k] <= 0.0:
                    s[k] = -s[k] if s[k] < 0.0 else 0.0
                    V[:, k] = -V[:, k]
                while k < pp and s[k] < s[k + 1]:
                    s[k], s[k + 1] = s[k + 1], s[k]
                    V[:, [k, k + 1]] = V[:, [k + 1, k]]
                    U[:, [k, k + 1]] = U[:, [k + 1, k]]
                    k += 1
                iteration = 0
                p -= 1

        return U, s, V

    def _give_up(self, index: int) -> None:
        self.converged = False
        logger.warning(
            "svd: no convergence for singular value %d after %d iterations, "
            "keeping the current approximation",
            index,
            self.max_iterations,
        )

    def get_u(self) -> Matrix:
        k = self.s.size
        return Matrix(self.m, k, self.U)

    def get_v(self) -> Matrix:
        k = self.s.size
        return Matrix(self.n, k, self.V)

    def get_singular_values(self) -> np.ndarray:
        return self.s.copy()

    def get_s(self) -> Matrix:
        """Diagonal matrix of singular values."""
        return Matrix.diagonal_matrix(self.s)

    def norm2(self) -> float:
        """Two norm, the largest singular value."""
        return float(self.s[0]) if self.s.size else 0.0

    def cond(self) -> float:
        """Two norm condition number, max(S) / min(S)."""
        if self.s.size == 0:
            return 0.0
        smallest = float(self.s[-1])
        if smallest == 0.0:
            return math.inf
        return float(self.s[0]) / smallest

    def rank(self) -> int:
        """Effective numerical rank, counting s > max(m, n) * s[0] * 2^-23."""
        if self.s.size == 0:
            return 0
        tol = max(self.m, self.n) * float(self.s[0]) * RANK_EPS
        return int(np.sum(self.s > tol))

    @staticmethod
    def pseudoinverse(matrix: Matrix) -> Matrix:
        """
        Moore-Penrose inverse, V diag(1/s) U', dropping singular values at
        or below the rank tolerance.
        """
        svd = SingularValueDecomposition(matrix)
        s = svd.s
        if s.size == 0:
            return Matrix(matrix.get_column_dimension(), matrix.get_row_dimension())
        tol = max(svd.m, svd.n) * float(s[0]) * RANK_EPS
        inv = np.zeros_like(s)
        inv[s > tol] = 1.0 / s[s > tol]
        P = (svd.V * inv) @ svd.U.T
        return Matrix(svd.n, svd.m, P)
