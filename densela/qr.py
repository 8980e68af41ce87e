# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
import math

import numpy as np

from .errors import DimensionMismatchError, RankDeficientError
from .matrix import Matrix

logger = logging.getLogger(__name__)


class QRDecomposition:
    """
    Compute the QR decomposition of an m-by-n matrix A using
    Householder transformations. (m ≥ n)

    A = QR
    H_k = I - u_k * transpose(u_k) / u_k[k]

    The Householder vectors u_k are kept in the lower trapezoid of the
    working buffer; R's strict upper triangle lives above them and its
    diagonal is kept separately in Rdiag.
    """

    def __init__(self, matrix: Matrix):
        m = matrix.get_row_dimension()
        n = matrix.get_column_dimension()
        self.m = m
        self.n = n
        QR = matrix.get_array_copy().reshape(m, n)
        self.QR = QR
        self.Rdiag = np.zeros(n)

        for k in range(n):
            # ---- 2-norm of the k-th column without under/overflow ----------
            nrm = math.hypot(*QR[k:, k]) if k < m else 0.0

            if nrm != 0.0:
                # ---- form k-th Householder vector ----------------------------
                # sign matches the pivot so u_k[k] = 1 + |.| never cancels
                if QR[k, k] < 0:
                    nrm = -nrm
                QR[k:, k] /= nrm
                QR[k, k] += 1.0

                # ---- apply transformation to remaining columns ---------------
                if k + 1 < n:
                    s = QR[k:, k] @ QR[k:, k + 1 :]
                    s = -s / QR[k, k]
                    QR[k:, k + 1 :] += np.outer(QR[k:, k], s)
            self.Rdiag[k] = -nrm

    def is_full_rank(self) -> bool:
        return bool(np.all(self.Rdiag != 0))

    def get_h(self) -> Matrix:
        """Lower trapezoidal matrix whose columns are the Householder vectors."""
        return Matrix(self.m, self.n, np.tril(self.QR))

    def get_r(self) -> Matrix:
        """Upper triangular factor, n-by-n."""
        R = np.zeros((self.n, self.n))
        rows = min(self.m, self.n)
        R[:rows, :] = np.triu(self.QR[:rows, :], 1)
        R[np.arange(self.n), np.arange(self.n)] = self.Rdiag
        return Matrix(self.n, self.n, R)

    def get_q(self) -> Matrix:
        """Economy-size orthogonal factor, m-by-n."""
        m, n = self.m, self.n
        QR = self.QR
        Q = np.zeros((m, n))
        for k in range(n - 1, -1, -1):
            if k < m:
                Q[k, k] = 1.0
            if k < m and QR[k, k] != 0:
                s = QR[k:, k] @ Q[k:, k:]
                s = -s / QR[k, k]
                Q[k:, k:] += np.outer(QR[k:, k], s)
        return Matrix(m, n, Q)

    def solve(self, matrix: Matrix) -> Matrix:
        """
        Least squares solution of A * X = B.

        Returns
        -------
        X : Matrix
            n-by-k matrix minimising ‖A X – B‖₂.

        Raises
        ------
        DimensionMismatchError : B does not have m rows.
        RankDeficientError     : A is rank deficient.
        """
        if matrix.get_row_dimension() != self.m:
            raise DimensionMismatchError("Matrix row dimensions must agree.")
        if not self.is_full_rank():
            raise RankDeficientError("Matrix is rank deficient.")

        nx = matrix.get_column_dimension()
        X = matrix.get_array_copy().reshape(self.m, nx)
        QR = self.QR

        # Compute Y = transpose(Q) * B
        for k in range(self.n):
            s = QR[k:, k] @ X[k:, :]
            s = -s / QR[k, k]
            X[k:, :] += np.outer(QR[k:, k], s)

        # Solve R * X = Y
        for k in range(self.n - 1, -1, -1):
            X[k, :] /= self.Rdiag[k]
            X[:k, :] -= np.outer(QR[:k, k], X[k, :])

        return Matrix(self.n, nx, X[: self.n, :])
