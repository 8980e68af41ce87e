# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from densela.complex_number import Complex
from densela.eigen import EigenPath, EigenvalueDecomposition
from densela.errors import DimensionMismatchError
from densela.matrix import Matrix
from densela.utils import random_symmetric

TEST_ITERATIONS = 10
logger = logging.getLogger(__name__)


def _assert_same_spectrum(ours, reference, atol):
    """Greedy nearest match of two multisets of complex numbers."""
    remaining = list(ours)
    assert len(remaining) == len(reference)
    for value in reference:
        distances = [abs(value - z) for z in remaining]
        k = int(np.argmin(distances))
        assert distances[k] < atol, f"{value} not found in {remaining}"
        remaining.pop(k)


@pytest.mark.parametrize("n", [1, 2, 5, 20])
def test_symmetric_random(n):
    for i in range(TEST_ITERATIONS):
        A = random_symmetric(n, seed=100 * n + i)
        eig = EigenvalueDecomposition(Matrix.from_numpy(A))
        assert eig.path is EigenPath.SYMMETRIC
        assert eig.converged

        V = eig.get_v().to_numpy()
        D = eig.get_d().to_numpy()
        d = eig.get_real_eigenvalues()

        np.testing.assert_allclose(V.T @ V, np.eye(n), atol=1e-12)
        np.testing.assert_allclose(A @ V, V @ D, atol=1e-11)
        np.testing.assert_allclose(D, np.diag(d))
        np.testing.assert_array_equal(eig.get_imag_eigenvalues(), np.zeros(n))
        assert np.all(np.diff(d) >= 0.0)
        np.testing.assert_allclose(d, np.linalg.eigvalsh(A), atol=1e-11)


@pytest.mark.parametrize("n", [2, 3, 6, 15])
def test_nonsymmetric_random(n):
    rng = np.random.default_rng(n)
    for i in range(TEST_ITERATIONS):
        A = rng.standard_normal((n, n))
        eig = EigenvalueDecomposition(Matrix.from_numpy(A))
        assert eig.path is EigenPath.NONSYMMETRIC
        assert eig.converged

        V = eig.get_v().to_numpy()
        D = eig.get_d().to_numpy()
        logger.debug(f"d={eig.get_real_eigenvalues()} e={eig.get_imag_eigenvalues()}")
        scale = np.linalg.norm(A, np.inf) * max(1.0, np.linalg.norm(V, np.inf))
        np.testing.assert_allclose(A @ V, V @ D, atol=1e-10 * scale)

        ours = [complex(z) for z in eig.get_eigenvalues()]
        _assert_same_spectrum(ours, np.linalg.eigvals(A), atol=1e-8)


def test_complex_pairs_are_adjacent_and_conjugate():
    rng = np.random.default_rng(7)
    A = rng.standard_normal((8, 8))
    eig = EigenvalueDecomposition(Matrix.from_numpy(A))
    d = eig.get_real_eigenvalues()
    e = eig.get_imag_eigenvalues()
    D = eig.get_d().to_numpy()
    i = 0
    while i < 8:
        if e[i] != 0.0:
            assert e[i] > 0.0
            assert e[i + 1] == -e[i]
            assert d[i + 1] == d[i]
            assert D[i, i + 1] == e[i]
            assert D[i + 1, i] == -e[i]
            i += 2
        else:
            i += 1


def test_rotation_has_imaginary_pair():
    A = Matrix.from_numpy([[0.0, -1.0], [1.0, 0.0]])
    eig = EigenvalueDecomposition(A)
    np.testing.assert_allclose(eig.get_real_eigenvalues(), [0.0, 0.0], atol=1e-15)
    np.testing.assert_allclose(eig.get_imag_eigenvalues(), [1.0, -1.0])
    np.testing.assert_allclose(eig.get_d().to_numpy(), [[0.0, 1.0], [-1.0, 0.0]])
    values = eig.get_eigenvalues()
    assert all(isinstance(z, Complex) for z in values)


def test_defective_matrix_does_not_raise():
    A = Matrix.from_numpy([[1.0, 1.0], [0.0, 1.0]])
    eig = EigenvalueDecomposition(A)
    assert eig.converged
    np.testing.assert_allclose(eig.get_real_eigenvalues(), [1.0, 1.0])
    np.testing.assert_array_equal(eig.get_imag_eigenvalues(), [0.0, 0.0])


def test_one_by_one_and_zero():
    eig = EigenvalueDecomposition(Matrix(1, 1, [-3.5]))
    assert eig.get_real_eigenvalues().tolist() == [-3.5]
    assert eig.get_v().get(0, 0) == 1.0

    zero = EigenvalueDecomposition(Matrix(4, 4))
    np.testing.assert_array_equal(zero.get_real_eigenvalues(), np.zeros(4))
    np.testing.assert_allclose(zero.get_v().to_numpy(), np.eye(4))


def test_upper_triangular_nonsymmetric():
    A = np.triu(np.arange(1.0, 17.0).reshape(4, 4))
    eig = EigenvalueDecomposition(Matrix.from_numpy(A))
    assert eig.path is EigenPath.NONSYMMETRIC
    np.testing.assert_allclose(
        np.sort(eig.get_real_eigenvalues()), np.sort(np.diag(A)), atol=1e-12
    )
    V = eig.get_v().to_numpy()
    np.testing.assert_allclose(A @ V, V @ eig.get_d().to_numpy(), atol=1e-10)


def test_outputs_are_copies():
    eig = EigenvalueDecomposition(Matrix.from_numpy(random_symmetric(3, seed=1)))
    d = eig.get_real_eigenvalues()
    d[:] = 0.0
    assert np.any(eig.get_real_eigenvalues() != 0.0)
    e = eig.get_imag_eigenvalues()
    e[0] = 42.0
    assert eig.get_imag_eigenvalues()[0] == 0.0


def test_not_square_raises():
    with pytest.raises(DimensionMismatchError):
        EigenvalueDecomposition(Matrix(2, 3))


def test_iteration_cap_sets_flag_and_warns(caplog):
    A = np.random.default_rng(11).standard_normal((8, 8))
    with caplog.at_level(logging.WARNING, logger="densela.eigen"):
        eig = EigenvalueDecomposition(Matrix.from_numpy(A), max_iterations=1)
    assert eig.path is EigenPath.NONSYMMETRIC
    assert not eig.converged
    assert any("hqr2: no convergence" in r.getMessage() for r in caplog.records)
    assert np.all(np.isfinite(eig.get_real_eigenvalues()))


def test_symmetric_iteration_cap_sets_flag_and_warns(caplog):
    A = random_symmetric(8, seed=2)
    with caplog.at_level(logging.WARNING, logger="densela.eigen"):
        eig = EigenvalueDecomposition(Matrix.from_numpy(A), max_iterations=1)
    assert eig.path is EigenPath.SYMMETRIC
    assert eig.converged is False
    assert any("tql2: no convergence" in r.getMessage() for r in caplog.records)
    assert np.all(np.isfinite(eig.get_real_eigenvalues()))
    assert np.all(np.isfinite(eig.get_v().to_numpy()))
