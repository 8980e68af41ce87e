# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
densela
=======

Dense linear algebra over flat row-major buffers, and polynomial root
finding built on top of it.

Public API
~~~~~~~~~~
- Containers
    - `Matrix`
    - `Complex`
    - `UnivariatePolynomial`, `PolynomialDivision`
- Decompositions
    - `LUDecomposition`, `LUDecompositionDecimal`
    - `QRDecomposition`
    - `EigenvalueDecomposition`, `EigenPath`
    - `SingularValueDecomposition`
- Errors
    - `DimensionMismatchError`, `SingularMatrixError`, `RankDeficientError`

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import densela as dl
>>> A = dl.Matrix(2, 2, [2.0, 0.0, 0.0, 4.0])
>>> b = dl.Matrix.column_vector([2.0, 8.0])
>>> A.solve(b).get_array().tolist()
[1.0, 2.0]
>>> sorted(r.real for r in dl.UnivariatePolynomial([4, 6, 2]).get_roots())
[-2.0, -1.0]
"""

from importlib.metadata import version as _pkg_version

# ---------------------------------------------------------------------
# Re-export the classes users are expected to construct.
# Each of these names is implemented in one of the internal sub-modules.
# ---------------------------------------------------------------------
from .complex_number import Complex
from .eigen import EigenPath, EigenvalueDecomposition
from .errors import DimensionMismatchError, RankDeficientError, SingularMatrixError
from .lu import LUDecomposition
from .lu_decimal import LUDecompositionDecimal
from .matrix import Matrix
from .polynomial import PolynomialDivision, UnivariatePolynomial
from .qr import QRDecomposition
from .svd import SingularValueDecomposition

__all__ = [
    "Matrix",
    "Complex",
    "UnivariatePolynomial",
    "PolynomialDivision",
    "LUDecomposition",
    "LUDecompositionDecimal",
    "QRDecomposition",
    "EigenvalueDecomposition",
    "EigenPath",
    "SingularValueDecomposition",
    "DimensionMismatchError",
    "SingularMatrixError",
    "RankDeficientError",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show densela”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Library logging stays silent unless the application configures it.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
