# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
LU decomposition with partial pivoting, following JAMA.

For an m-by-n matrix A with m >= n this produces an m-by-n unit lower
triangular L, an n-by-n upper triangular U and a permutation vector piv
of length m so that A(piv, :) = L * U.

lu_decimal.LUDecompositionDecimal repeats this algorithm over exact
decimals; keep the two in step.
"""

import logging

import numpy as np

from .errors import DimensionMismatchError, SingularMatrixError
from .matrix import Matrix

logger = logging.getLogger(__name__)


class LUDecomposition:
    def __init__(self, matrix: Matrix):
        m = matrix.get_row_dimension()
        n = matrix.get_column_dimension()
        self.m = m
        self.n = n

        LU = matrix.get_array_copy().reshape(m, n)
        self.LU = LU
        self.piv = np.arange(m, dtype=np.int64)
        self.pivsign = 1

        # Outer loop over columns ("left-looking" Crout update)
        for j in range(n):
            # Make a copy of the j-th column to localize references.
            LUcolj = LU[:, j].copy()

            # Apply previous transformations.
            for i in range(m):
                kmax = min(i, j)
                # Most of the time is spent in this dot product.
                s = LU[i, :kmax] @ LUcolj[:kmax]
                LUcolj[i] -= s
                LU[i, j] = LUcolj[i]

            # Find pivot and exchange if necessary. The largest magnitude
            # entry gives the most stable elimination.
            p = j
            if j < m:
                p = j + int(np.argmax(np.abs(LUcolj[j:])))
                # argmax returns the first maximum, same as a strict '>' scan
            if p != j:
                LU[[p, j]] = LU[[j, p]]
                self.piv[[p, j]] = self.piv[[j, p]]
                self.pivsign = -self.pivsign

            # Compute multipliers.
            if j < m and LU[j, j] != 0.0:
                LU[j + 1 :, j] /= LU[j, j]

        logger.debug("LU: %dx%d factored, pivsign=%d", m, n, self.pivsign)

    def is_nonsingular(self) -> bool:
        """False iff some diagonal entry of U is exactly zero."""
        k = min(self.m, self.n)
        if k < self.n:
            return False
        return bool(np.all(np.diag(self.LU)[:k] != 0.0))

    def get_l(self) -> Matrix:
        """Unit lower triangular factor, m-by-n."""
        L = np.tril(self.LU, -1)
        k = min(self.m, self.n)
        L[np.arange(k), np.arange(k)] = 1.0
        return Matrix(self.m, self.n, L)

    def get_u(self) -> Matrix:
        """Upper triangular factor, n-by-n."""
        U = np.zeros((self.n, self.n))
        rows = min(self.m, self.n)
        U[:rows, :] = np.triu(self.LU[:rows, :])
        return Matrix(self.n, self.n, U)

    def get_pivot(self) -> np.ndarray:
        return self.piv.copy()

    def get_double_pivot(self) -> np.ndarray:
        return self.piv.astype(float)

    def det(self) -> float:
        if self.m != self.n:
            raise DimensionMismatchError("Matrix must be square.")
        return float(self.pivsign * np.prod(np.diag(self.LU)))

    def solve(self, matrix: Matrix) -> Matrix:
        """
        Solve A * X = B.

        Parameters
        ----------
        matrix : Matrix
            Right-hand side B with as many rows as A.

        Returns
        -------
        X : Matrix
            n-by-k solution so that L * U * X = B(piv, :).

        Raises
        ------
        DimensionMismatchError : B has the wrong row count or A is not square.
        SingularMatrixError    : A is singular.
        """
        if matrix.get_row_dimension() != self.m:
            raise DimensionMismatchError("Matrix row dimensions must agree.")
        if self.m != self.n:
            raise DimensionMismatchError("Matrix must be square.")
        if not self.is_nonsingular():
            raise SingularMatrixError("Matrix is singular.")

        # Copy right hand side with pivoting
        nx = matrix.get_column_dimension()
        Xmat = matrix.get_array_row_matrix(self.piv, 0, nx - 1)
        X = Xmat.get_array().reshape(self.m, nx)
        LU = self.LU
        n = self.n

        # Solve L * Y = B(piv, :)
        for k in range(n):
            X[k + 1 : n, :] -= np.outer(LU[k + 1 : n, k], X[k, :])

        # Solve U * X = Y
        for k in range(n - 1, -1, -1):
            X[k, :] /= LU[k, k]
            X[:k, :] -= np.outer(LU[:k, k], X[k, :])

        return Xmat
