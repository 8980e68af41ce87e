# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Polynomials in one real variable.

Coefficients are indexed by degree, so 2x^2 + 6x + 4 is built as
``UnivariatePolynomial([4, 6, 2])``.
"""

import logging
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

from .complex_number import Complex
from .eigen import EigenvalueDecomposition
from .matrix import Matrix
from .qr import QRDecomposition
from .utils import (
    QR_ITERATION_CHECK_INTERVAL,
    QR_ITERATION_EPSILON,
    QR_ITERATION_STEPS,
)

logger = logging.getLogger(__name__)


class PolynomialDivision(NamedTuple):
    quotient: "UnivariatePolynomial"
    remainder: "UnivariatePolynomial"


class UnivariatePolynomial:
    def __init__(self, coefficients: Sequence[float]):
        coefficients = [float(c) for c in coefficients]
        # drop zero coefficients of the highest degrees
        while coefficients and coefficients[-1] == 0:
            coefficients.pop()
        self.coefficients: Tuple[float, ...] = tuple(coefficients)

    # ----------------------------------------------------------------
    # Arithmetic
    # ----------------------------------------------------------------

    def plus(self, polynomial: "UnivariatePolynomial") -> "UnivariatePolynomial":
        size = max(len(self.coefficients), len(polynomial.coefficients))
        return UnivariatePolynomial(
            [
                self.get_coefficient(i) + polynomial.get_coefficient(i)
                for i in range(size)
            ]
        )

    def minus(self, polynomial: "UnivariatePolynomial") -> "UnivariatePolynomial":
        size = max(len(self.coefficients), len(polynomial.coefficients))
        return UnivariatePolynomial(
            [
                self.get_coefficient(i) - polynomial.get_coefficient(i)
                for i in range(size)
            ]
        )

    def times(self, polynomial: "UnivariatePolynomial") -> "UnivariatePolynomial":
        if self.is_zero() or polynomial.is_zero():
            return UnivariatePolynomial([])
        size = len(self.coefficients) + len(polynomial.coefficients) - 1
        coefficients = [0.0] * size
        for i, a in enumerate(self.coefficients):
            for j, b in enumerate(polynomial.coefficients):
                coefficients[i + j] += a * b
        return UnivariatePolynomial(coefficients)

    def divided_by(self, polynomial: "UnivariatePolynomial") -> PolynomialDivision:
        """
        Polynomial long division.

        Returns
        -------
        PolynomialDivision
            ``quotient`` and ``remainder`` with
            self == quotient * polynomial + remainder and
            remainder.degree < polynomial.degree.

        Raises
        ------
        ZeroDivisionError : ``polynomial`` is the zero polynomial.
        """
        if polynomial.is_zero():
            raise ZeroDivisionError("polynomial division by the zero polynomial")

        q = UnivariatePolynomial([])
        r = self
        d = polynomial.degree
        c = polynomial.coefficients[-1]
        while r.degree >= d:
            s = UnivariatePolynomial.single_coefficient(
                r.get_coefficient(r.degree) / c, r.degree - d
            )
            q = q.plus(s)
            reduced = list(r.minus(s.times(polynomial)).coefficients)
            # the leading term cancels exactly in theory, force it in practice
            if len(reduced) > r.degree:
                reduced[r.degree] = 0.0
            r = UnivariatePolynomial(reduced)
        return PolynomialDivision(q, r)

    def gcd(self, polynomial: "UnivariatePolynomial") -> "UnivariatePolynomial":
        """Euclidean greatest common divisor (not normalised to monic)."""
        a = self
        b = polynomial
        while not b.is_zero():
            a, b = b, a.divided_by(b).remainder
        return a

    def equals(self, polynomial: "UnivariatePolynomial") -> bool:
        return self.coefficients == polynomial.coefficients

    def get_coefficient(self, degree: int) -> float:
        return self.coefficients[degree] if degree < len(self.coefficients) else 0.0

    @property
    def degree(self) -> int:
        """-1 for the zero polynomial."""
        return len(self.coefficients) - 1

    def is_zero(self) -> bool:
        return len(self.coefficients) == 0

    def get_monic_polynomial(self) -> "UnivariatePolynomial":
        if self.is_zero():
            return self
        leading = self.coefficients[-1]
        return UnivariatePolynomial([c / leading for c in self.coefficients])

    # ----------------------------------------------------------------
    # Evaluation
    # ----------------------------------------------------------------

    def evaluate(self, x: float) -> float:
        # Horner's method
        result = 0.0
        for c in reversed(self.coefficients):
            result = result * x + c
        return result

    def evaluate_complex(self, x) -> Complex:
        if not isinstance(x, Complex):
            x = Complex(complex(x).real, complex(x).imag)
        result = Complex(0, 0)
        for c in reversed(self.coefficients):
            result = result.times(x).plus(Complex.from_real(c))
        return result

    # ----------------------------------------------------------------
    # Roots
    # ----------------------------------------------------------------

    def companion_matrix(self) -> Matrix:
        """
        Frobenius companion matrix: ones on the sub-diagonal and
        -c_i / c_n in the last column. Its characteristic polynomial is
        the monic form of self.
        """
        n = self.degree
        C = np.zeros((n, n))
        C[np.arange(1, n), np.arange(n - 1)] = 1.0
        C[:, n - 1] = -np.asarray(self.coefficients[:n]) / self.coefficients[n]
        return Matrix(n, n, C)

    def qr_iteration_eigenvalues(
        self, steps: int = QR_ITERATION_STEPS
    ) -> Tuple[List[Complex], bool]:
        """
        Diagonal of the unshifted QR iteration A <- R Q on the companion
        matrix.

        Returns
        -------
        values : list of Complex
            Diagonal entries (imaginary parts are zero).
        converged : bool
            True once the strictly lower triangle dropped below
            QR_ITERATION_EPSILON. Complex root pairs never converge here.
        """
        matrix = self.companion_matrix()
        n = self.degree
        converged = False
        for i in range(steps):
            qr = QRDecomposition(matrix)
            matrix = qr.get_r().times(qr.get_q())

            if i % QR_ITERATION_CHECK_INTERVAL == 0:
                lower = np.tril(matrix.to_numpy(), -1)
                if np.max(np.abs(lower), initial=0.0) < QR_ITERATION_EPSILON:
                    converged = True
                    break

        values = [Complex.from_real(matrix.get(i, i)) for i in range(n)]
        return values, converged

    def get_roots(self) -> List[Complex]:
        """
        Every root, repeated by multiplicity where the method can tell.

        Closed forms are used up to degree 3. Beyond that the roots are
        the eigenvalues of the companion matrix.
        """
        if self.is_zero() or self.degree == 0:
            return []

        if self.degree == 1:
            return [Complex.from_real(-self.coefficients[0] / self.coefficients[1])]

        if self.coefficients[0] == 0:
            # x = 0 is a root, once per vanishing low-order coefficient
            k = 0
            while self.coefficients[k] == 0:
                k += 1
            roots = UnivariatePolynomial(self.coefficients[k:]).get_roots()
            return roots + [Complex.from_real(0) for _ in range(k)]

        if self.degree == 2:
            c0, c1, c2 = self.coefficients
            return Complex.solve_quadratic_roots(c2, c1, c0)

        if self.degree == 3:
            c0, c1, c2, c3 = self.coefficients
            return Complex.solve_cubic_roots(c3, c2, c1, c0)

        # Use the eigenvalues of the companion matrix, since they are the
        # zeros of the characteristic polynomial.
        decomp = EigenvalueDecomposition(self.companion_matrix())
        decomp_values = decomp.get_eigenvalues()
        all_real = not np.any(decomp.get_imag_eigenvalues())

        if all_real:
            qr_values, converged = self.qr_iteration_eigenvalues()
            if converged:
                logger.debug("roots: degree %d via QR iteration", self.degree)
                return qr_values

        logger.debug(
            "roots: degree %d via eigenvalue decomposition (converged=%s)",
            self.degree,
            decomp.converged,
        )
        return decomp_values

    # ----------------------------------------------------------------
    # Python protocol
    # ----------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, UnivariatePolynomial):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other):
        if not isinstance(other, UnivariatePolynomial):
            return NotImplemented
        return self.minus(other)

    def __mul__(self, other):
        if not isinstance(other, UnivariatePolynomial):
            return NotImplemented
        return self.times(other)

    def __divmod__(self, other):
        if not isinstance(other, UnivariatePolynomial):
            return NotImplemented
        return tuple(self.divided_by(other))

    def __call__(self, x):
        if isinstance(x, (Complex, complex)):
            return self.evaluate_complex(x)
        return self.evaluate(x)

    def __eq__(self, other):
        if not isinstance(other, UnivariatePolynomial):
            return NotImplemented
        return self.equals(other)

    def __hash__(self):
        return hash(self.coefficients)

    def __repr__(self):
        return f"UnivariatePolynomial({list(self.coefficients)!r})"

    @staticmethod
    def single_coefficient(coefficient: float, degree: int) -> "UnivariatePolynomial":
        """coefficient * x^degree."""
        return UnivariatePolynomial([0.0] * degree + [coefficient])


UnivariatePolynomial.ZERO = UnivariatePolynomial([])
