#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Time the decompositions against NumPy/LAPACK.

    python -m densela.benchmark --sizes 50 100 200 --csv bench_results.csv

Needs the ``bench`` extra (pandas, tabulate).
"""

import argparse
import logging
import time

import numpy as np
import pandas as pd

from .eigen import EigenvalueDecomposition
from .lu import LUDecomposition
from .matrix import Matrix
from .polynomial import UnivariatePolynomial
from .qr import QRDecomposition
from .utils import random_symmetric

logger = logging.getLogger(__name__)

REPEATS = 5  # best of 5 runs leads to stable numbers
COLUMNS = ["kernel", "size", "sec", "sec/NumPy", "residual/NumPy"]


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def best_of(f, *args, repeats=REPEATS):
    return min(wall(f, *args) for _ in range(repeats))


def _ratio(ours: float, reference: float) -> float:
    # LAPACK residuals can be exactly zero on easy inputs
    return ours / reference if reference > 0 else float("nan")


def bench_lu(A: np.ndarray, b: np.ndarray, repeats: int):
    n = A.shape[0]
    M = Matrix.from_numpy(A)
    B = Matrix(n, 1, b)

    t_np = best_of(np.linalg.solve, A, b, repeats=repeats)
    r_ref = np.linalg.norm(A @ np.linalg.solve(A, b) - b, np.inf)

    t = best_of(lambda: LUDecomposition(M).solve(B), repeats=repeats)
    x = LUDecomposition(M).solve(B).get_array()
    r = np.linalg.norm(A @ x - b, np.inf)
    return ("LU", f"{n}x{n}", t, t / t_np, _ratio(r, r_ref))


def bench_qr(A: np.ndarray, b: np.ndarray, repeats: int):
    m, n = A.shape
    M = Matrix.from_numpy(A)
    B = Matrix(m, 1, b)

    t_np = best_of(lambda: np.linalg.lstsq(A, b, rcond=None), repeats=repeats)
    x_ref, *_ = np.linalg.lstsq(A, b, rcond=None)
    r_ref = np.linalg.norm(A @ x_ref - b)

    t = best_of(lambda: QRDecomposition(M).solve(B), repeats=repeats)
    x = QRDecomposition(M).solve(B).get_array()
    r = np.linalg.norm(A @ x - b)
    return ("HH-QR", f"{m}x{n}", t, t / t_np, _ratio(r, r_ref))


def bench_eigen(A: np.ndarray, kernel: str, repeats: int):
    n = A.shape[0]
    M = Matrix.from_numpy(A)

    t_np = best_of(np.linalg.eig, A, repeats=repeats)
    w, V = np.linalg.eig(A)
    r_ref = np.linalg.norm(A @ V - V * w, np.inf)

    t = best_of(EigenvalueDecomposition, M, repeats=repeats)
    eig = EigenvalueDecomposition(M)
    AV = M.times(eig.get_v()).to_numpy()
    VD = eig.get_v().times(eig.get_d()).to_numpy()
    r = np.linalg.norm(AV - VD, np.inf)
    return (kernel, f"{n}x{n}", t, t / t_np, _ratio(r, r_ref))


def bench_roots(coefficients: np.ndarray, repeats: int):
    degree = coefficients.size - 1
    p = UnivariatePolynomial(coefficients)
    # np.roots wants the highest degree first
    reference = coefficients[::-1]

    t_np = best_of(np.roots, reference, repeats=repeats)
    r_ref = max(abs(np.polyval(reference, z)) for z in np.roots(reference))

    t = best_of(p.get_roots, repeats=repeats)
    r = max(p.evaluate_complex(z).magnitude for z in p.get_roots())
    return ("roots", f"deg {degree}", t, t / t_np, _ratio(r, r_ref))


def run(sizes, repeats: int = REPEATS, seed: int = 0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    records = []
    for n in sizes:
        logger.info("benchmarking n=%d", n)
        A = rng.standard_normal((n, n))
        b = rng.standard_normal(n)
        records.append(bench_lu(A, b, repeats))

        tall = rng.standard_normal((2 * n, n))
        records.append(bench_qr(tall, rng.standard_normal(2 * n), repeats))

        S = random_symmetric(n, seed=int(rng.integers(2**31)))
        records.append(bench_eigen(S, "eig-sym", repeats))
        records.append(bench_eigen(A, "eig-nonsym", repeats))

        records.append(bench_roots(rng.standard_normal(min(n, 20) + 1), repeats))

    return pd.DataFrame(records, columns=COLUMNS)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--sizes", type=int, nargs="+", default=[50, 100, 200])
    parser.add_argument("--repeats", type=int, default=REPEATS)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--csv", default=None, help="also write the table here")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    df = run(args.sizes, repeats=args.repeats, seed=args.seed)
    print(df.to_markdown(index=False))
    if args.csv:
        df.to_csv(args.csv, index=False)
    return df


if __name__ == "__main__":
    main()
