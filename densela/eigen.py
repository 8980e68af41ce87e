# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Eigenvalues and eigenvectors of a real square matrix (after JAMA/EISPACK).

If A is symmetric, then A = V D V' where the eigenvalue matrix D is
diagonal and the eigenvector matrix V is orthogonal.

If A is not symmetric, then D is block diagonal with the real eigenvalues
in 1-by-1 blocks and any complex eigenvalues, lambda + i*mu, in 2-by-2
blocks [lambda, mu; -mu, lambda]. The columns of V represent the
eigenvectors in the sense that A V = V D. V may be badly conditioned or
even singular, so A = V D inverse(V) only holds as well as V.cond() allows.
"""

import enum
import logging
import math
from typing import List, Tuple

import numpy as np

from .complex_number import Complex
from .errors import DimensionMismatchError
from .matrix import Matrix
from .utils import EPS, MAX_ITERATIONS_PER_EIGENVALUE, hypot

logger = logging.getLogger(__name__)


class EigenPath(enum.Enum):
    SYMMETRIC = "symmetric"
    NONSYMMETRIC = "nonsymmetric"


def _cdiv(xr: float, xi: float, yr: float, yi: float) -> Tuple[float, float]:
    """Complex scalar division (xr + i xi) / (yr + i yi)."""
    if abs(yr) > abs(yi):
        r = yi / yr
        d = yr + r * yi
        return (xr + r * xi) / d, (xi - r * xr) / d
    r = yr / yi
    d = yi + r * yr
    return (r * xr + xi) / d, (r * xi - xr) / d


class EigenvalueDecomposition:
    def __init__(
        self, matrix: Matrix, max_iterations: int = MAX_ITERATIONS_PER_EIGENVALUE
    ):
        """
        Parameters
        ----------
        matrix : Matrix
            Square input. Its entries are copied, later changes to it are
            not observed.
        max_iterations : int
            Sweeps allowed per eigenvalue before giving up on deflation.
            When exhausted the current Schur form is kept and
            ``converged`` is set to False.
        """
        n = matrix.get_column_dimension()
        if matrix.get_row_dimension() != n:
            raise DimensionMismatchError("Matrix must be square.")

        self.n = n
        self.max_iterations = max_iterations
        self.converged = True

        A = matrix.get_array_copy().reshape(n, n)
        self.V = np.zeros((n, n))
        self.d = np.zeros(n)
        self.e = np.zeros(n)

        if np.array_equal(A, A.T):
            self.path = EigenPath.SYMMETRIC
        else:
            self.path = EigenPath.NONSYMMETRIC
        logger.debug("eigen: %dx%d input, %s path", n, n, self.path.value)

        if n == 0:
            return

        if self.path is EigenPath.SYMMETRIC:
            self.V[:] = A
            # Tridiagonalize.
            self._tred2()
            # Diagonalize.
            self._tql2()
        else:
            self.H = A
            self.ort = np.zeros(n)
            # Reduce to Hessenberg form.
            self._orthes()
            # Reduce Hessenberg to real Schur form.
            self._hqr2()

    # ----------------------------------------------------------------
    # Accessors
    # ----------------------------------------------------------------

    def get_v(self) -> Matrix:
        """Eigenvector matrix, one eigenvector per column."""
        return Matrix(self.n, self.n, self.V)

    def get_real_eigenvalues(self) -> np.ndarray:
        return self.d.copy()

    def get_imag_eigenvalues(self) -> np.ndarray:
        return self.e.copy()

    def get_eigenvalues(self) -> List[Complex]:
        return [Complex(float(re), float(im)) for re, im in zip(self.d, self.e)]

    def get_d(self) -> Matrix:
        """Block diagonal eigenvalue matrix."""
        n = self.n
        D = np.diag(self.d)
        for i in range(n):
            if self.e[i] > 0:
                D[i, i + 1] = self.e[i]
            elif self.e[i] < 0:
                D[i, i - 1] = self.e[i]
        return Matrix(n, n, D)

    def _give_up(self, kernel: str, index: int) -> None:
        self.converged = False
        logger.warning(
            "%s: no convergence for eigenvalue %d after %d iterations, "
            "keeping the current approximation",
            kernel,
            index,
            self.max_iterations,
        )

    # ----------------------------------------------------------------
    # Symmetric path
    # ----------------------------------------------------------------

    def _tred2(self):
        """Symmetric Householder reduction to tridiagonal form."""
        # Derived from the Algol procedures tred2 by Bowdler, Martin,
        # Reinsch and Wilkinson, Handbook for Auto. Comp., Vol.ii-Linear
        # Algebra, and the corresponding Fortran subroutine in EISPACK.
        n = self.n
        V, d, e = self.V, self.d, self.e

        d[:] = V[n - 1, :]

        # Householder reduction to tridiagonal form.
        for i in range(n - 1, 0, -1):
            # Scale to avoid under/overflow.
            scale = float(np.sum(np.abs(d[:i])))
            h = 0.0
            if scale == 0.0:
                e[i] = d[i - 1]
                d[:i] = V[i - 1, :i]
                V[i, :i] = 0.0
                V[:i, i] = 0.0
            else:
                # Generate Householder vector.
                d[:i] /= scale
                h = float(d[:i] @ d[:i])
                f = d[i - 1]
                g = math.sqrt(h)
                if f > 0:
                    g = -g
                e[i] = scale * g
                h = h - f * g
                d[i - 1] = f - g
                e[:i] = 0.0

                # Apply similarity transformation to remaining columns.
                for j in range(i):
                    f = d[j]
                    V[j, i] = f
                    g = e[j] + V[j, j] * f + V[j + 1 : i, j] @ d[j + 1 : i]
                    e[j + 1 : i] += V[j + 1 : i, j] * f
                    e[j] = g

                e[:i] /= h
                f = float(e[:i] @ d[:i])
                hh = f / (h + h)
                e[:i] -= hh * d[:i]
                for j in range(i):
                    f = d[j]
                    g = e[j]
                    V[j:i, j] -= f * e[j:i] + g * d[j:i]
                    d[j] = V[i - 1, j]
                    V[i, j] = 0.0
            d[i] = h

        # Accumulate transformations.
        for i in range(n - 1):
            V[n - 1, i] = V[i, i]
            V[i, i] = 1.0
            h = d[i + 1]
            if h != 0.0:
                d[: i + 1] = V[: i + 1, i + 1] / h
                g = V[: i + 1, i + 1] @ V[: i + 1, : i + 1]
                V[: i + 1, : i + 1] -= np.outer(d[: i + 1], g)
            V[: i + 1, i + 1] = 0.0

        d[:] = V[n - 1, :]
        V[n - 1, :] = 0.0
        V[n - 1, n - 1] = 1.0
        e[0] = 0.0

    def _tql2(self):
        """Symmetric tridiagonal QL algorithm."""
        # Derived from the Algol procedures tql2, by Bowdler, Martin,
        # Reinsch and Wilkinson, Handbook for Auto. Comp., Vol.ii-Linear
        # Algebra, and the corresponding Fortran subroutine in EISPACK.
        n = self.n
        V, d, e = self.V, self.d, self.e

        e[: n - 1] = e[1:n]
        e[n - 1] = 0.0

        f = 0.0
        tst1 = 0.0
        eps = EPS
        for l in range(n):
            # Find small subdiagonal element
            tst1 = max(tst1, abs(d[l]) + abs(e[l]))
            m = l
            while m < n:
                if abs(e[m]) <= eps * tst1:
                    break
                m += 1

            # If m == l, d[l] is an eigenvalue, otherwise iterate.
            if m > l:
                iteration = 0
                while True:
                    iteration += 1

                    # Compute implicit shift
                    g = d[l]
                    p = (d[l + 1] - g) / (2.0 * e[l])
                    r = hypot(p, 1.0)
                    if p < 0:
                        r = -r
                    d[l] = e[l] / (p + r)
                    d[l + 1] = e[l] * (p + r)
                    dl1 = d[l + 1]
                    h = g - d[l]
                    d[l + 2 :] -= h
                    f = f + h

                    # Implicit QL transformation.
                    p = d[m]
                    c = 1.0
                    c2 = c
                    c3 = c
                    el1 = e[l + 1]
                    s = 0.0
                    s2 = 0.0
                    for i in range(m - 1, l - 1, -1):
                        c3 = c2
                        c2 = c
                        s2 = s
                        g = c * e[i]
                        h = c * p
                        r = hypot(p, e[i])
                        e[i + 1] = s * r
                        s = e[i] / r
                        c = p / r
                        p = c * d[i] - s * g
                        d[i + 1] = h + s * (c * g + s * d[i])

                        # Accumulate transformation.
                        col = V[:, i + 1].copy()
                        V[:, i + 1] = s * V[:, i] + c * col
                        V[:, i] = c * V[:, i] - s * col

                    p = -s * s2 * c3 * el1 * e[l] / dl1
                    e[l] = s * p
                    d[l] = c * p

                    # Check for convergence.
                    if abs(e[l]) <= eps * tst1:
                        break
                    if iteration >= self.max_iterations:
                        self._give_up("tql2", l)
                        break

            d[l] = d[l] + f
            e[l] = 0.0

        # Sort eigenvalues and corresponding vectors.
        for i in range(n - 1):
            k = i
            p = d[i]
            for j in range(i + 1, n):
                if d[j] < p:
                    k = j
                    p = d[j]
            if k != i:
                d[k] = d[i]
                d[i] = p
                V[:, [i, k]] = V[:, [k, i]]

    # ----------------------------------------------------------------
    # Nonsymmetric path
    # ----------------------------------------------------------------

    def _orthes(self):
        """Nonsymmetric reduction to Hessenberg form."""
        # Derived from the Algol procedures orthes and ortran, by Martin
        # and Wilkinson, Handbook for Auto. Comp., Vol.ii-Linear Algebra,
        # and the corresponding Fortran subroutines in EISPACK.
        n = self.n
        H, V, ort = self.H, self.V, self.ort
        low = 0
        high = n - 1

        for m in range(low + 1, high):
            # Scale column.
            scale = float(np.sum(np.abs(H[m : high + 1, m - 1])))
            if scale != 0.0:
                # Compute Householder transformation.
                ort[m : high + 1] = H[m : high + 1, m - 1] / scale
                h = float(ort[m : high + 1] @ ort[m : high + 1])
                g = math.sqrt(h)
                if ort[m] > 0:
                    g = -g
                h = h - ort[m] * g
                ort[m] = ort[m] - g

                # Apply Householder similarity transformation
                # H = (I - u u'/h) H (I - u u'/h)
                u = ort[m : high + 1]
                f = (u @ H[m : high + 1, m:]) / h
                H[m : high + 1, m:] -= np.outer(u, f)

                f = (H[: high + 1, m : high + 1] @ u) / h
                H[: high + 1, m : high + 1] -= np.outer(f, u)

                ort[m] = scale * ort[m]
                H[m, m - 1] = scale * g

        # Accumulate transformations (Algol's ortran).
        V[:] = np.eye(n)
        for m in range(high - 1, low, -1):
            if H[m, m - 1] != 0.0:
                ort[m + 1 : high + 1] = H[m + 1 : high + 1, m - 1]
                u = ort[m : high + 1]
                g = u @ V[m : high + 1, m : high + 1]
                # Double division avoids possible underflow
                g = (g / ort[m]) / H[m, m - 1]
                V[m : high + 1, m : high + 1] += np.outer(u, g)

    def _hqr2(self):
        """
        Nonsymmetric reduction from Hessenberg to real Schur form, then
        back substitution for the eigenvectors.
        """
        # Derived from the Algol procedure hqr2, by Martin and Wilkinson,
        # Handbook for Auto. Comp., Vol.ii-Linear Algebra, and the
        # corresponding Fortran subroutine in EISPACK.
        H, V, d, e = self.H, self.V, self.d, self.e

        nn = self.n
        n = nn - 1
        low = 0
        high = nn - 1
        eps = EPS
        exshift = 0.0
        p = q = r = s = z = 0.0
        t = w = x = y = 0.0

        # Compute matrix norm
        norm = 0.0
        for i in range(nn):
            norm += float(np.sum(np.abs(H[i, max(i - 1, 0) :])))

        if norm == 0.0:
            return

        # Outer loop over eigenvalue index
        iteration = 0
        while n >= low:
            # Look for single small sub-diagonal element
            l = n
            while l > low:
                s = abs(H[l - 1, l - 1]) + abs(H[l, l])
                if s == 0.0:
                    s = norm
                if abs(H[l, l - 1]) < eps * s:
                    break
                l -= 1

            if l < n - 1 and iteration >= self.max_iterations:
                # Split off the trailing 2x2 block as it stands.
                self._give_up("hqr2", n)
                H[n - 1, n - 2] = 0.0
                l = n - 1

            # Check for convergence
            if l == n:
                # One root found
                H[n, n] = H[n, n] + exshift
                d[n] = H[n, n]
                e[n] = 0.0
                n -= 1
                iteration = 0

            elif l == n - 1:
                # Two roots found
                w = H[n, n - 1] * H[n - 1, n]
                p = (H[n - 1, n - 1] - H[n, n]) / 2.0
                q = p * p + w
                z = math.sqrt(abs(q))
                H[n, n] = H[n, n] + exshift
                H[n - 1, n - 1] = H[n - 1, n - 1] + exshift
                x = H[n, n]

                if q >= 0:
                    # Real pair
                    z = p + z if p >= 0 else p - z
                    d[n - 1] = x + z
                    d[n] = d[n - 1]
                    if z != 0.0:
                        d[n] = x - w / z
                    e[n - 1] = 0.0
                    e[n] = 0.0
                    x = H[n, n - 1]
                    s = abs(x) + abs(z)
                    p = x / s
                    q = z / s
                    r = math.sqrt(p * p + q * q)
                    p = p / r
                    q = q / r

                    # Row modification
                    row = H[n - 1, n - 1 :].copy()
                    H[n - 1, n - 1 :] = q * row + p * H[n, n - 1 :]
                    H[n, n - 1 :] = q * H[n, n - 1 :] - p * row

                    # Column modification
                    col = H[: n + 1, n - 1].copy()
                    H[: n + 1, n - 1] = q * col + p * H[: n + 1, n]
                    H[: n + 1, n] = q * H[: n + 1, n] - p * col

                    # Accumulate transformations
                    col = V[low : high + 1, n - 1].copy()
                    V[low : high + 1, n - 1] = q * col + p * V[low : high + 1, n]
                    V[low : high + 1, n] = q * V[low : high + 1, n] - p * col
                else:
                    # Complex pair
                    d[n - 1] = x + p
                    d[n] = x + p
                    e[n - 1] = z
                    e[n] = -z
                n -= 2
                iteration = 0

            else:
                # No convergence yet. Form shift
                x = H[n, n]
                y = 0.0
                w = 0.0
                if l < n:
                    y = H[n - 1, n - 1]
                    w = H[n, n - 1] * H[n - 1, n]

                # Wilkinson's original ad hoc shift
                if iteration == 10:
                    exshift += x
                    for i in range(low, n + 1):
                        H[i, i] -= x
                    s = abs(H[n, n - 1]) + abs(H[n - 1, n - 2])
                    x = y = 0.75 * s
                    w = -0.4375 * s * s

                # MATLAB's new ad hoc shift
                if iteration == 30:
                    s = (y - x) / 2.0
                    s = s * s + w
                    if s > 0:
                        s = math.sqrt(s)
                        if y < x:
                            s = -s
                        s = x - w / ((y - x) / 2.0 + s)
                        for i in range(low, n + 1):
                            H[i, i] -= s
                        exshift += s
                        x = y = w = 0.964

                iteration += 1

                # Look for two consecutive small sub-diagonal elements
                m = n - 2
                while m >= l:
                    z = H[m, m]
                    r = x - z
                    s = y - z
                    p = (r * s - w) / H[m + 1, m] + H[m, m + 1]
                    q = H[m + 1, m + 1] - z - r - s
                    r = H[m + 2, m + 1]
                    s = abs(p) + abs(q) + abs(r)
                    p = p / s
                    q = q / s
                    r = r / s
                    if m == l:
                        break
                    if abs(H[m, m - 1]) * (abs(q) + abs(r)) < eps * (
                        abs(p) * (abs(H[m - 1, m - 1]) + abs(z) + abs(H[m + 1, m + 1]))
                    ):
                        break
                    m -= 1

                for i in range(m + 2, n + 1):
                    H[i, i - 2] = 0.0
                    if i > m + 2:
                        H[i, i - 3] = 0.0

                # Double QR step involving rows l:n and columns m:n
                for k in range(m, n):
                    notlast = k != n - 1
                    if k != m:
                        p = H[k, k - 1]
                        q = H[k + 1, k - 1]
                        r = H[k + 2, k - 1] if notlast else 0.0
                        x = abs(p) + abs(q) + abs(r)
                        if x == 0.0:
                            continue
                        p = p / x
                        q = q / x
                        r = r / x

                    s = math.sqrt(p * p + q * q + r * r)
                    if p < 0:
                        s = -s
                    if s != 0:
                        if k != m:
                            H[k, k - 1] = -s * x
                        elif l != m:
                            H[k, k - 1] = -H[k, k - 1]
                        p = p + s
                        x = p / s
                        y = q / s
                        z = r / s
                        q = q / p
                        r = r / p

                        # Row modification
                        row = H[k, k:] + q * H[k + 1, k:]
                        if notlast:
                            row = row + r * H[k + 2, k:]
                            H[k + 2, k:] -= row * z
                        H[k, k:] -= row * x
                        H[k + 1, k:] -= row * y

                        # Column modification
                        top = min(n, k + 3) + 1
                        col = x * H[:top, k] + y * H[:top, k + 1]
                        if notlast:
                            col = col + z * H[:top, k + 2]
                            H[:top, k + 2] -= col * r
                        H[:top, k] -= col
                        H[:top, k + 1] -= col * q

                        # Accumulate transformations
                        col = x * V[low : high + 1, k] + y * V[low : high + 1, k + 1]
                        if notlast:
                            col = col + z * V[low : high + 1, k + 2]
                            V[low : high + 1, k + 2] -= col * r
                        V[low : high + 1, k] -= col
                        V[low : high + 1, k + 1] -= col * q

        # Backsubstitute to find vectors of upper triangular form
        for n in range(nn - 1, -1, -1):
            p = d[n]
            q = e[n]

            if q == 0:
                # Real vector
                l = n
                H[n, n] = 1.0
                for i in range(n - 1, -1, -1):
                    w = H[i, i] - p
                    r = H[i, l : n + 1] @ H[l : n + 1, n]
                    if e[i] < 0.0:
                        z = w
                        s = r
                    else:
                        l = i
                        if e[i] == 0.0:
                            if w != 0.0:
                                H[i, n] = -r / w
                            else:
                                H[i, n] = -r / (eps * norm)
                        else:
                            # Solve real equations
                            x = H[i, i + 1]
                            y = H[i + 1, i]
                            q = (d[i] - p) * (d[i] - p) + e[i] * e[i]
                            t = (x * s - z * r) / q
                            H[i, n] = t
                            if abs(x) > abs(z):
                                H[i + 1, n] = (-r - w * t) / x
                            else:
                                H[i + 1, n] = (-s - y * t) / z

                        # Overflow control
                        t = abs(H[i, n])
                        if (eps * t) * t > 1:
                            H[i : n + 1, n] /= t

            elif q < 0:
                # Complex vector. Last vector component imaginary so
                # matrix is triangular
                l = n - 1
                if abs(H[n, n - 1]) > abs(H[n - 1, n]):
                    H[n - 1, n - 1] = q / H[n, n - 1]
                    H[n - 1, n] = -(H[n, n] - p) / H[n, n - 1]
                else:
                    H[n - 1, n - 1], H[n - 1, n] = _cdiv(
                        0.0, -H[n - 1, n], H[n - 1, n - 1] - p, q
                    )
                H[n, n - 1] = 0.0
                H[n, n] = 1.0
                for i in range(n - 2, -1, -1):
                    ra = H[i, l : n + 1] @ H[l : n + 1, n - 1]
                    sa = H[i, l : n + 1] @ H[l : n + 1, n]
                    w = H[i, i] - p

                    if e[i] < 0.0:
                        z = w
                        r = ra
                        s = sa
                    else:
                        l = i
                        if e[i] == 0:
                            H[i, n - 1], H[i, n] = _cdiv(-ra, -sa, w, q)
                        else:
                            # Solve complex equations
                            x = H[i, i + 1]
                            y = H[i + 1, i]
                            vr = (d[i] - p) * (d[i] - p) + e[i] * e[i] - q * q
                            vi = (d[i] - p) * 2.0 * q
                            if vr == 0.0 and vi == 0.0:
                                vr = (
                                    eps
                                    * norm
                                    * (abs(w) + abs(q) + abs(x) + abs(y) + abs(z))
                                )
                            H[i, n - 1], H[i, n] = _cdiv(
                                x * r - z * ra + q * sa,
                                x * s - z * sa - q * ra,
                                vr,
                                vi,
                            )
                            if abs(x) > (abs(z) + abs(q)):
                                H[i + 1, n - 1] = (
                                    -ra - w * H[i, n - 1] + q * H[i, n]
                                ) / x
                                H[i + 1, n] = (-sa - w * H[i, n] - q * H[i, n - 1]) / x
                            else:
                                H[i + 1, n - 1], H[i + 1, n] = _cdiv(
                                    -r - y * H[i, n - 1], -s - y * H[i, n], z, q
                                )

                        # Overflow control
                        t = max(abs(H[i, n - 1]), abs(H[i, n]))
                        if (eps * t) * t > 1:
                            H[i : n + 1, n - 1] /= t
                            H[i : n + 1, n] /= t

        # Back transformation to get eigenvectors of original matrix
        for j in range(nn - 1, low - 1, -1):
            kmax = min(j, high)
            V[low : high + 1, j] = (
                V[low : high + 1, low : kmax + 1] @ H[low : kmax + 1, j]
            )
