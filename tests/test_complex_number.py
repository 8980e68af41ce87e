# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import pytest

from densela.complex_number import Complex

EPSILON = 1e-5


def approx_complex(actual, expected, epsilon=EPSILON):
    assert actual.equals_epsilon(expected, epsilon), f"{actual} != {expected}"


def approx_roots(actual, expected, epsilon=EPSILON):
    """Same roots with multiplicity, in any order."""
    assert actual is not None
    remaining = list(actual)
    assert len(remaining) == len(expected)
    for root in expected:
        hits = [i for i, z in enumerate(remaining) if z.equals_epsilon(root, epsilon)]
        assert hits, f"{root} not in {remaining}"
        remaining.pop(hits[0])


def test_basic_arithmetic():
    approx_complex(Complex(2, 3).times(Complex(7, -13)), Complex(53, -5))
    approx_complex(
        Complex(2, 3).divided_by(Complex(7, -13)), Complex(-25 / 218, 47 / 218)
    )
    approx_complex(Complex(3, 4).plus(Complex(1, -1)), Complex(4, 3))
    approx_complex(Complex(3, 4).minus(Complex(1, -1)), Complex(2, 5))
    approx_complex(Complex(1, 1).squared(), Complex(0, 2))


def test_transcendental():
    approx_complex(Complex(3, 4).sqrt_of(), Complex(2, 1))
    approx_complex(Complex(-4, 0).sqrt_of(), Complex(0, 2))
    approx_complex(Complex(2, -3).exponentiated(), Complex(-7.31511, -1.04274))
    approx_complex(
        Complex(1, 1).cos_of(), Complex(0.8337300251311491, -0.9888977057628651)
    )
    approx_complex(Complex(1, 1).sin_of(), Complex(1.29845758, 0.634963914))
    approx_complex(Complex(0, 2).power_by_real(2), Complex(-4, 0))


def test_queries():
    c = Complex(3, 4)
    assert c.magnitude == 5.0
    assert c.magnitude_squared == 25.0
    assert c.phase() == pytest.approx(math.atan2(4, 3))
    assert c.argument == c.phase()
    assert c.conjugated().equals(Complex(3, -4))
    assert c.negated().equals(Complex(-3, -4))
    assert c.equals(Complex(3.0, 4.0))
    assert not c.equals_epsilon(Complex(3, 4.1), 0.05)


def test_cube_roots():
    roots = Complex(0, 8).get_cube_roots()
    approx_complex(roots[0], Complex(math.sqrt(3), 1))
    approx_complex(roots[1], Complex(-math.sqrt(3), 1))
    approx_complex(roots[2], Complex(0, -2))


def test_mutable_family_returns_self():
    c = Complex(1, 2)
    assert c.add(Complex(1, 1)) is c
    assert c.equals(Complex(2, 3))
    c.subtract(Complex(2, 0)).multiply(Complex(0, 1))
    approx_complex(c, Complex(-3, 0))
    c.divide(Complex(0, 3)).negate()
    approx_complex(c, Complex(0, -1))
    c.conjugate().square()
    approx_complex(c, Complex(-1, 0))
    c.set_polar(2, math.pi / 2)
    approx_complex(c, Complex(0, 2))
    c.set_real(4).set_imaginary(0).sqrt()
    approx_complex(c, Complex(2, 0))
    c.set_real_imaginary(0, 0).exponentiate()
    approx_complex(c, Complex(1, 0))
    c.set(Complex(1, 1)).sin()
    approx_complex(c, Complex(1.29845758, 0.634963914))
    c.set(Complex(1, 1)).cos()
    approx_complex(c, Complex(0.8337300251311491, -0.9888977057628651))


def test_copy():
    c = Complex(1, 2)
    d = c.copy()
    d.add(Complex.ONE)
    assert c.equals(Complex(1, 2))
    target = Complex(0, 0)
    assert c.copy(target) is target
    assert target.equals(c)


def test_factories():
    assert Complex.from_real(3).equals(Complex(3, 0))
    assert Complex.from_imaginary(3).equals(Complex(0, 3))
    approx_complex(Complex.create_polar(2, math.pi), Complex(-2, 0))


def test_constants_are_frozen():
    assert Complex.ZERO.equals(Complex(0, 0))
    assert Complex.ONE.equals(Complex(1, 0))
    assert Complex.I.equals(Complex(0, 1))

    with pytest.raises(TypeError):
        Complex.ZERO.add(Complex.ONE)
    with pytest.raises(TypeError):
        Complex.I.real = 3.0
    with pytest.raises(TypeError):
        Complex.ONE.negate()
    assert Complex.ONE.equals(Complex(1, 0))

    # immutable operations on constants are fine
    assert Complex.ONE.plus(Complex.I).equals(Complex(1, 1))
    c = Complex.I.copy()
    c.multiply(Complex.I)
    assert c.equals(Complex(-1, 0))


def test_python_protocol():
    a = Complex(1, 2)
    b = Complex(3, -1)
    assert (a + b).equals(Complex(4, 1))
    assert (a - b).equals(Complex(-2, 3))
    assert (a * b).equals(Complex(5, 5))
    approx_complex(a / b, Complex(0.1, 0.7))
    assert (-a).equals(Complex(-1, -2))
    assert (a + 1).equals(Complex(2, 2))
    assert (2 * a).equals(Complex(2, 4))
    approx_complex(1 / Complex(0, 1), Complex(0, -1))
    assert a == Complex(1, 2)
    assert Complex(5, 0) == 5
    assert complex(a) == 1 + 2j
    assert abs(Complex(3, 4)) == 5.0
    assert repr(a) == "Complex(1.0, 2.0)"


def test_linear_roots():
    approx_roots(
        Complex.solve_linear_roots(Complex.from_real(3), Complex.from_real(6)),
        [Complex(-2, 0)],
    )
    approx_roots(
        Complex.solve_linear_roots(Complex(3, 0), Complex(6, 3)), [Complex(-2, -1)]
    )
    approx_roots(
        Complex.solve_linear_roots(Complex(2, 1), Complex(6, 3)), [Complex(-3, 0)]
    )
    assert Complex.solve_linear_roots(0, 5) == []
    assert Complex.solve_linear_roots(0, 0) is None


def test_quadratic_roots():
    approx_roots(
        Complex.solve_quadratic_roots(1, -3, 2), [Complex(2, 0), Complex(1, 0)]
    )
    approx_roots(
        Complex.solve_quadratic_roots(2, 8, 8), [Complex(-2, 0), Complex(-2, 0)]
    )
    approx_roots(
        Complex.solve_quadratic_roots(1, 0, -2),
        [Complex(math.sqrt(2), 0), Complex(-math.sqrt(2), 0)],
    )
    approx_roots(
        Complex.solve_quadratic_roots(1, -2, 2), [Complex(1, 1), Complex(1, -1)]
    )
    approx_roots(
        Complex.solve_quadratic_roots(Complex(1, 0), Complex(-3, -2), Complex(1, 3)),
        [Complex(2, 1), Complex(1, 1)],
    )
    approx_roots(Complex.solve_quadratic_roots(1, 0, 1), [Complex.I, Complex(0, -1)])


def test_quadratic_with_zero_leading_coefficient_is_linear():
    approx_roots(Complex.solve_quadratic_roots(0, 2, -4), [Complex(2, 0)])


def test_cubic_roots():
    approx_roots(
        Complex.solve_cubic_roots(1, -6, 11, -6),
        [Complex(1, 0), Complex(3, 0), Complex(2, 0)],
    )
    approx_roots(
        Complex.solve_cubic_roots(1, 0, 0, -8),
        [Complex(-1, -math.sqrt(3)), Complex(2, 0), Complex(-1, math.sqrt(3))],
    )
    approx_roots(
        Complex.solve_cubic_roots(2, 8, 8, 0),
        [Complex(0, 0), Complex(-2, 0), Complex(-2, 0)],
    )
    approx_roots(
        Complex.solve_cubic_roots(1, 1, 1, 1),
        [Complex(-1, 0), Complex(0, -1), Complex(0, 1)],
    )


def test_cubic_triple_root_and_degenerate():
    # (x - 2)^3
    approx_roots(Complex.solve_cubic_roots(1, -6, 12, -8), [Complex(2, 0)] * 3)
    approx_roots(
        Complex.solve_cubic_roots(0, 1, -3, 2), [Complex(2, 0), Complex(1, 0)]
    )


def test_solvers_do_not_mutate_arguments():
    a, b, c, d = Complex(1, 0), Complex(-6, 0), Complex(12, 0), Complex(-8, 0)
    Complex.solve_cubic_roots(a, b, c, d)
    assert b.equals(Complex(-6, 0))
