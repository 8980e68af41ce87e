# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Dense matrix over a flat, row-major float64 buffer.

Entry (i, j) lives at ``entries[i * n + j]`` for the whole lifetime of the
object. The decompositions copy that buffer at construction time and then
work on their own copy, usually through a 2-D view.
"""

from typing import Iterable, Sequence

import numpy as np

from .errors import DimensionMismatchError
from .utils import hypot


class Matrix:
    def __init__(self, m: int, n: int, filler=None, fast: bool = False):
        """
        Parameters
        ----------
        m, n : int
            Row and column dimensions.
        filler : None | float | sequence | ndarray
            None for zeros, a scalar for a constant matrix, or m*n values in
            row-major order (flat, or already shaped (m, n)).
        fast : bool
            Adopt ``filler`` (a flat float64 ndarray) as the buffer without
            copying it.
        """
        self.m = int(m)
        self.n = int(n)
        self.size = self.m * self.n

        if fast:
            self.entries = filler
        elif filler is None:
            self.entries = np.zeros(self.size, dtype=float)
        elif np.isscalar(filler):
            self.entries = np.full(self.size, float(filler))
        else:
            data = np.asarray(filler, dtype=float).ravel()
            if data.size != self.size:
                raise DimensionMismatchError("filler must have m * n entries")
            self.entries = data.copy()

    @classmethod
    def from_numpy(cls, array) -> "Matrix":
        """Build a Matrix from anything np.asarray understands as 2-D."""
        array = np.atleast_2d(np.asarray(array, dtype=float))
        if array.ndim != 2:
            raise DimensionMismatchError("expected a 2-D array")
        m, n = array.shape
        return cls(m, n, array)

    def to_numpy(self) -> np.ndarray:
        """(m, n) copy of the entries."""
        return self.entries.reshape(self.m, self.n).copy()

    def copy(self) -> "Matrix":
        return Matrix(self.m, self.n, self.entries.copy(), fast=True)

    def get_array(self) -> np.ndarray:
        return self.entries

    def get_array_copy(self) -> np.ndarray:
        return self.entries.copy()

    def get_row_dimension(self) -> int:
        return self.m

    def get_column_dimension(self) -> int:
        return self.n

    @property
    def shape(self):
        return self.m, self.n

    def index(self, i: int, j: int) -> int:
        """Offset of entry (i, j) in the flat buffer."""
        return i * self.n + j

    def get(self, i: int, j: int) -> float:
        return float(self.entries[i * self.n + j])

    def set(self, i: int, j: int, s: float) -> None:
        self.entries[i * self.n + j] = s

    def _view(self) -> np.ndarray:
        return self.entries.reshape(self.m, self.n)

    def get_matrix(self, i0: int, i1: int, j0: int, j1: int) -> "Matrix":
        """Sub-matrix A(i0:i1, j0:j1), both bounds inclusive."""
        block = self._view()[i0 : i1 + 1, j0 : j1 + 1]
        return Matrix(i1 - i0 + 1, j1 - j0 + 1, block)

    def get_array_row_matrix(self, r: Sequence[int], j0: int, j1: int) -> "Matrix":
        """Sub-matrix A(r(:), j0:j1) where r lists row indices."""
        rows = np.asarray(r, dtype=int)
        block = self._view()[rows, j0 : j1 + 1]
        return Matrix(rows.size, j1 - j0 + 1, block)

    def transpose(self) -> "Matrix":
        return Matrix(self.n, self.m, self._view().T)

    # ----------------------------------------------------------------
    # Norms
    # ----------------------------------------------------------------

    def norm1(self) -> float:
        """Maximum column sum."""
        if self.size == 0:
            return 0.0
        return float(np.abs(self._view()).sum(axis=0).max())

    def norm2(self) -> float:
        """Maximum singular value."""
        from .svd import SingularValueDecomposition

        return SingularValueDecomposition(self).norm2()

    def norm_inf(self) -> float:
        """Maximum row sum."""
        if self.size == 0:
            return 0.0
        return float(np.abs(self._view()).sum(axis=1).max())

    def norm_f(self) -> float:
        """Frobenius norm, accumulated with hypot to avoid overflow."""
        f = 0.0
        for value in self.entries:
            f = hypot(f, float(value))
        return f

    # ----------------------------------------------------------------
    # Arithmetic
    # ----------------------------------------------------------------

    def check_matrix_dimensions(self, matrix: "Matrix") -> None:
        if matrix.m != self.m or matrix.n != self.n:
            raise DimensionMismatchError("Matrix dimensions must agree.")

    def uminus(self) -> "Matrix":
        return Matrix(self.m, self.n, -self.entries, fast=True)

    def plus(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        return Matrix(self.m, self.n, self.entries + matrix.entries, fast=True)

    def plus_equals(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        self.entries += matrix.entries
        return self

    def blend_equals(self, matrix: "Matrix", ratio: float) -> "Matrix":
        """
        Linear interpolation towards ``matrix`` (ratio=0 keeps self,
        ratio=1 gives matrix). ratio is not clamped to [0, 1].
        """
        self.check_matrix_dimensions(matrix)
        self.entries += (matrix.entries - self.entries) * ratio
        return self

    def minus(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        return Matrix(self.m, self.n, self.entries - matrix.entries, fast=True)

    def minus_equals(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        self.entries -= matrix.entries
        return self

    def array_times(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        return Matrix(self.m, self.n, self.entries * matrix.entries, fast=True)

    def array_times_equals(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        self.entries *= matrix.entries
        return self

    def array_right_divide(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        return Matrix(self.m, self.n, self.entries / matrix.entries, fast=True)

    def array_right_divide_equals(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        self.entries /= matrix.entries
        return self

    def array_left_divide(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        return Matrix(self.m, self.n, matrix.entries / self.entries, fast=True)

    def array_left_divide_equals(self, matrix: "Matrix") -> "Matrix":
        self.check_matrix_dimensions(matrix)
        self.entries[:] = matrix.entries / self.entries
        return self

    def times(self, matrix_or_scalar) -> "Matrix":
        """Matrix product when given a Matrix, scalar multiple otherwise."""
        if isinstance(matrix_or_scalar, Matrix):
            matrix = matrix_or_scalar
            if matrix.m != self.n:
                raise DimensionMismatchError("Matrix inner dimensions must agree.")
            product = self._view() @ matrix._view()
            return Matrix(self.m, matrix.n, product)
        s = float(matrix_or_scalar)
        return Matrix(self.m, self.n, s * self.entries, fast=True)

    def times_equals(self, s: float) -> "Matrix":
        self.entries *= s
        return self

    def __neg__(self):
        return self.uminus()

    def __add__(self, other):
        return self.plus(other)

    def __sub__(self, other):
        return self.minus(other)

    def __mul__(self, other):
        return self.times(other)

    def __rmul__(self, other):
        return self.times(other)

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.times(other)

    # ----------------------------------------------------------------
    # Solving and scalar summaries
    # ----------------------------------------------------------------

    def solve(self, matrix: "Matrix") -> "Matrix":
        """Solution if square, least squares solution otherwise."""
        if self.m == self.n:
            from .lu import LUDecomposition

            return LUDecomposition(self).solve(matrix)
        from .qr import QRDecomposition

        return QRDecomposition(self).solve(matrix)

    def solve_transpose(self, matrix: "Matrix") -> "Matrix":
        """Solve X * A = B, which is also A' * X' = B'."""
        return self.transpose().solve(matrix.transpose())

    def inverse(self) -> "Matrix":
        return self.solve(Matrix.identity(self.m, self.m))

    def det(self) -> float:
        from .lu import LUDecomposition

        return LUDecomposition(self).det()

    def rank(self) -> int:
        from .svd import SingularValueDecomposition

        return SingularValueDecomposition(self).rank()

    def cond(self) -> float:
        """Ratio of largest to smallest singular value."""
        from .svd import SingularValueDecomposition

        return SingularValueDecomposition(self).cond()

    def trace(self) -> float:
        k = min(self.m, self.n)
        return float(sum(self.entries[i * self.n + i] for i in range(k)))

    # ----------------------------------------------------------------
    # Comparison / display
    # ----------------------------------------------------------------

    def equals_epsilon(self, matrix: "Matrix", epsilon: float = 0.0) -> bool:
        if matrix.m != self.m or matrix.n != self.n:
            return False
        if self.size == 0:
            return True
        return bool(np.max(np.abs(self.entries - matrix.entries)) <= epsilon)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self.m == other.m
            and self.n == other.n
            and bool(np.array_equal(self.entries, other.entries))
        )

    __hash__ = None

    def __str__(self):
        result = f"dim: {self.m}x{self.n}\n"
        for row in range(self.m):
            for col in range(self.n):
                result += f"{self.get(row, col)} "
            result += "\n"
        return result

    def __repr__(self):
        return f"Matrix({self.m}, {self.n}, {self.entries.tolist()!r})"

    # ----------------------------------------------------------------
    # Constructors
    # ----------------------------------------------------------------

    hypot = staticmethod(hypot)

    @staticmethod
    def identity(m: int, n: int) -> "Matrix":
        return Matrix(m, n, np.eye(m, n))

    @staticmethod
    def diagonal_matrix(diagonal_values: Sequence[float]) -> "Matrix":
        """Square matrix with ``diagonal_values`` on the diagonal, zeros elsewhere."""
        values = np.asarray(diagonal_values, dtype=float)
        return Matrix(values.size, values.size, np.diag(values))

    @staticmethod
    def row_vector(values: Sequence[float]) -> "Matrix":
        values = np.asarray(values, dtype=float).ravel()
        return Matrix(1, values.size, values)

    @staticmethod
    def column_vector(values: Sequence[float]) -> "Matrix":
        values = np.asarray(values, dtype=float).ravel()
        return Matrix(values.size, 1, values)

    @staticmethod
    def from_columns(columns: Iterable[Sequence[float]]) -> "Matrix":
        """Matrix whose j-th column is ``columns[j]``."""
        data = np.column_stack([np.asarray(c, dtype=float) for c in columns])
        return Matrix(data.shape[0], data.shape[1], data)
