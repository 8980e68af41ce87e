# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exceptions raised by the decompositions.

All of them are ``ValueError`` subclasses (``numpy.linalg.LinAlgError``
already is one), so callers that only care about "bad linear system" can
keep catching ``ValueError``.
"""

import numpy as np


class DimensionMismatchError(ValueError):
    """Operand shapes are incompatible."""


class SingularMatrixError(np.linalg.LinAlgError):
    """LU solve attempted on a matrix with an exactly zero pivot."""


class RankDeficientError(np.linalg.LinAlgError):
    """QR solve attempted on a matrix without full column rank."""
