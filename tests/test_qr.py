# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from densela.errors import DimensionMismatchError, RankDeficientError
from densela.matrix import Matrix
from densela.qr import QRDecomposition
from densela.utils import random_nonsingular_upper

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def test_least_squares_qr():
    n = 20
    for i in range(TEST_ITERATIONS):
        logger.debug("==============================")
        A = random_nonsingular_upper(n, seed=i)
        if np.linalg.matrix_rank(A) < n:
            continue

        x_true = np.random.default_rng(i).random(n)
        b = A @ x_true

        x_np, *_ = np.linalg.lstsq(A, b, rcond=None)
        x_ours = QRDecomposition(Matrix.from_numpy(A)).solve(Matrix(n, 1, b))

        res_np = np.linalg.norm(A @ x_np - b, ord=np.inf)
        res_ours = np.linalg.norm(A @ x_ours.get_array() - b, ord=np.inf)
        scale = np.linalg.norm(A, np.inf) * np.linalg.norm(x_ours.get_array(), np.inf)
        assert res_ours <= max(res_np * 1e3, 1e-12 * scale)


def test_overdetermined_matches_lstsq():
    rng = np.random.default_rng(0)
    for m, n in [(10, 3), (50, 10), (7, 7)]:
        A = rng.standard_normal((m, n))
        B = rng.standard_normal((m, 2))
        X_ref, *_ = np.linalg.lstsq(A, B, rcond=None)
        X = QRDecomposition(Matrix.from_numpy(A)).solve(Matrix.from_numpy(B))
        assert X.shape == (n, 2)
        np.testing.assert_allclose(X.to_numpy(), X_ref, rtol=1e-8, atol=1e-10)


@pytest.mark.parametrize("m,n", [(100, 10), (6, 6), (9, 4)])
def test_orthogonality_and_reconstruction(m, n):
    rng = np.random.default_rng(m * n)
    V = rng.standard_normal((m, n))
    qr = QRDecomposition(Matrix.from_numpy(V))
    Q = qr.get_q().to_numpy()
    R = qr.get_r().to_numpy()

    assert Q.shape == (m, n)
    assert R.shape == (n, n)
    assert np.allclose(Q.T @ Q, np.eye(n), atol=1e-10)
    assert np.allclose(np.tril(R, -1), 0.0)
    np.testing.assert_allclose(Q @ R, V, atol=1e-10)


def test_householder_vectors_lower_trapezoidal():
    rng = np.random.default_rng(5)
    qr = QRDecomposition(Matrix.from_numpy(rng.standard_normal((5, 3))))
    H = qr.get_h().to_numpy()
    assert np.all(np.triu(H, 1) == 0.0)
    # each Householder vector is scaled so its leading entry lies in [1, 2]
    assert np.all((np.diag(H) >= 1.0) & (np.diag(H) <= 2.0))


def test_rank_deficient():
    A = Matrix.from_numpy([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
    qr = QRDecomposition(A)
    assert not qr.is_full_rank()
    with pytest.raises(RankDeficientError):
        qr.solve(Matrix(3, 1, 1.0))

    zero = QRDecomposition(Matrix(3, 3))
    assert not zero.is_full_rank()


def test_solve_row_mismatch():
    qr = QRDecomposition(Matrix.identity(3, 3))
    with pytest.raises(DimensionMismatchError):
        qr.solve(Matrix(4, 1))


@pytest.mark.parametrize("a", [5.0, -2.5])
def test_one_by_one(a):
    qr = QRDecomposition(Matrix(1, 1, [a]))
    q = qr.get_q().get(0, 0)
    r = qr.get_r().get(0, 0)
    assert abs(q) == 1.0
    assert abs(r) == abs(a)
    assert q * r == a
    assert qr.solve(Matrix(1, 1, [2 * a])).get(0, 0) == pytest.approx(2.0)
