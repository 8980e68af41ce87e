# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Arbitrary-precision LU decomposition.

Same control flow as lu.LUDecomposition, carried out with
``decimal.Decimal`` under an explicit context. It is a separate copy so
the float path keeps its NumPy performance; change both together.
"""

import decimal
import logging
from decimal import Decimal
from typing import List, Optional

from .errors import DimensionMismatchError, SingularMatrixError
from .matrix import Matrix
from .utils import DECIMAL_PRECISION

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # exact binary expansion of the double
        return Decimal(float(value))
    if isinstance(value, (int, str)):
        return Decimal(value)
    return Decimal(str(value))


def _as_decimal_rows(source) -> List[List[Decimal]]:
    if isinstance(source, Matrix):
        m, n = source.get_row_dimension(), source.get_column_dimension()
        return [
            [Decimal(float(source.get(i, j))) for j in range(n)] for i in range(m)
        ]
    rows = [[_to_decimal(v) for v in row] for row in source]
    if rows and any(len(row) != len(rows[0]) for row in rows):
        raise DimensionMismatchError("All rows must have the same length.")
    return rows


class LUDecompositionDecimal:
    def __init__(self, matrix, context: Optional[decimal.Context] = None):
        """
        Parameters
        ----------
        matrix : Matrix | sequence of rows
            Rows may hold Decimal, str, int or float values. Floats are
            converted exactly, so 0.1 stays the double nearest to 0.1.
        context : decimal.Context | None
            Arithmetic context; defaults to DECIMAL_PRECISION digits.
        """
        self.context = context or decimal.Context(prec=DECIMAL_PRECISION)
        rows = _as_decimal_rows(matrix)
        m = len(rows)
        n = len(rows[0]) if m else 0
        self.m = m
        self.n = n

        # flat row-major storage, entry (i, j) at i * n + j
        LU = [value for row in rows for value in row]
        self.LU = LU
        self.piv = list(range(m))
        self.pivsign = 1

        ctx = self.context
        for j in range(n):
            # Make a copy of the j-th column to localize references.
            LUcolj = [LU[i * n + j] for i in range(m)]

            # Apply previous transformations.
            for i in range(m):
                kmax = min(i, j)
                s = Decimal(0)
                for k in range(kmax):
                    s = ctx.add(s, ctx.multiply(LU[i * n + k], LUcolj[k]))
                LUcolj[i] = ctx.subtract(LUcolj[i], s)
                LU[i * n + j] = LUcolj[i]

            # Find pivot and exchange if necessary.
            p = j
            for i in range(j + 1, m):
                if LUcolj[i].copy_abs() > LUcolj[p].copy_abs():
                    p = i
            if p != j:
                for k in range(n):
                    LU[p * n + k], LU[j * n + k] = LU[j * n + k], LU[p * n + k]
                self.piv[p], self.piv[j] = self.piv[j], self.piv[p]
                self.pivsign = -self.pivsign

            # Compute multipliers.
            if j < m and not LU[j * n + j].is_zero():
                for i in range(j + 1, m):
                    LU[i * n + j] = ctx.divide(LU[i * n + j], LU[j * n + j])

        logger.debug(
            "decimal LU: %dx%d factored at %d digits", m, n, self.context.prec
        )

    def is_nonsingular(self) -> bool:
        if self.m < self.n:
            return False
        return all(not self.LU[j * self.n + j].is_zero() for j in range(self.n))

    def get_pivot(self) -> List[int]:
        return list(self.piv)

    def det(self) -> Decimal:
        if self.m != self.n:
            raise DimensionMismatchError("Matrix must be square.")
        d = Decimal(self.pivsign)
        for j in range(self.n):
            d = self.context.multiply(d, self.LU[j * self.n + j])
        return d

    def solve_decimal(self, matrix) -> List[List[Decimal]]:
        """
        Solve A * X = B exactly (to the context precision).

        Returns the solution as rows of Decimal values.
        """
        B = _as_decimal_rows(matrix)
        if len(B) != self.m:
            raise DimensionMismatchError("Matrix row dimensions must agree.")
        if self.m != self.n:
            raise DimensionMismatchError("Matrix must be square.")
        if not self.is_nonsingular():
            raise SingularMatrixError("Matrix is singular.")

        ctx = self.context
        LU = self.LU
        n = self.n
        nx = len(B[0]) if B else 0

        # Copy right hand side with pivoting
        X = [list(B[p]) for p in self.piv]

        # Solve L * Y = B(piv, :)
        for k in range(n):
            for i in range(k + 1, n):
                lik = LU[i * n + k]
                for j in range(nx):
                    X[i][j] = ctx.subtract(X[i][j], ctx.multiply(X[k][j], lik))

        # Solve U * X = Y
        for k in range(n - 1, -1, -1):
            ukk = LU[k * n + k]
            for j in range(nx):
                X[k][j] = ctx.divide(X[k][j], ukk)
            for i in range(k):
                uik = LU[i * n + k]
                for j in range(nx):
                    X[i][j] = ctx.subtract(X[i][j], ctx.multiply(X[k][j], uik))
        return X

    def solve(self, matrix) -> Matrix:
        """Exact solve, rounded back to a float Matrix."""
        X = self.solve_decimal(matrix)
        nx = len(X[0]) if X else 0
        return Matrix(len(X), nx, [float(value) for row in X for value in row])
