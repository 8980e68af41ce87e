# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Mutable complex number with closed-form polynomial root solvers.

Methods come in two families. The immutable one (``plus``, ``times``,
``sqrt_of``, ...) returns a new Complex. The mutable one (``add``,
``multiply``, ``sqrt``, ...) rewrites the receiver and returns it so calls
can be chained. ``Complex.ZERO``, ``Complex.ONE`` and ``Complex.I`` are
shared and refuse mutation.
"""

import math
import numbers
from typing import List, Optional


def _as_complex(value) -> "Complex":
    if isinstance(value, Complex):
        return value
    if isinstance(value, numbers.Number):
        z = complex(value)
        return Complex(z.real, z.imag)
    raise TypeError(f"cannot interpret {type(value).__name__} as Complex")


class Complex:
    def __init__(self, real: float, imaginary: float):
        self.real = float(real)
        self.imaginary = float(imaginary)

    def copy(self, target: Optional["Complex"] = None) -> "Complex":
        """New copy, or write self into ``target`` when given."""
        if target is not None:
            return target.set(self)
        return Complex(self.real, self.imaginary)

    # ----------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------

    def phase(self) -> float:
        """Angle from the positive real axis, in (-pi, pi]."""
        return math.atan2(self.imaginary, self.real)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared)

    @property
    def magnitude_squared(self) -> float:
        return self.real * self.real + self.imaginary * self.imaginary

    @property
    def argument(self) -> float:
        return math.atan2(self.imaginary, self.real)

    def equals(self, other: "Complex") -> bool:
        return self.real == other.real and self.imaginary == other.imaginary

    def equals_epsilon(self, other: "Complex", epsilon: float = 0.0) -> bool:
        return (
            max(abs(self.real - other.real), abs(self.imaginary - other.imaginary))
            <= epsilon
        )

    # ----------------------------------------------------------------
    # Immutable family
    # ----------------------------------------------------------------

    def plus(self, c: "Complex") -> "Complex":
        return Complex(self.real + c.real, self.imaginary + c.imaginary)

    def minus(self, c: "Complex") -> "Complex":
        return Complex(self.real - c.real, self.imaginary - c.imaginary)

    def times(self, c: "Complex") -> "Complex":
        return Complex(
            self.real * c.real - self.imaginary * c.imaginary,
            self.real * c.imaginary + self.imaginary * c.real,
        )

    def divided_by(self, c: "Complex") -> "Complex":
        c_mag = c.magnitude_squared
        return Complex(
            (self.real * c.real + self.imaginary * c.imaginary) / c_mag,
            (self.imaginary * c.real - self.real * c.imaginary) / c_mag,
        )

    def negated(self) -> "Complex":
        return Complex(-self.real, -self.imaginary)

    def sqrt_of(self) -> "Complex":
        """Principal square root (non-negative real part)."""
        mag = self.magnitude
        return Complex(
            math.sqrt((mag + self.real) / 2),
            (1 if self.imaginary >= 0 else -1) * math.sqrt((mag - self.real) / 2),
        )

    def power_by_real(self, real_power: float) -> "Complex":
        mag_times = math.pow(self.magnitude, real_power)
        angle = real_power * self.phase()
        return Complex(mag_times * math.cos(angle), mag_times * math.sin(angle))

    def sin_of(self) -> "Complex":
        return Complex(
            math.sin(self.real) * math.cosh(self.imaginary),
            math.cos(self.real) * math.sinh(self.imaginary),
        )

    def cos_of(self) -> "Complex":
        return Complex(
            math.cos(self.real) * math.cosh(self.imaginary),
            -math.sin(self.real) * math.sinh(self.imaginary),
        )

    def squared(self) -> "Complex":
        return self.times(self)

    def conjugated(self) -> "Complex":
        return Complex(self.real, -self.imaginary)

    def exponentiated(self) -> "Complex":
        return Complex.create_polar(math.exp(self.real), self.imaginary)

    # ----------------------------------------------------------------
    # Mutable family
    # ----------------------------------------------------------------

    def set_real_imaginary(self, real: float, imaginary: float) -> "Complex":
        self.real = real
        self.imaginary = imaginary
        return self

    def set_real(self, real: float) -> "Complex":
        self.real = real
        return self

    def set_imaginary(self, imaginary: float) -> "Complex":
        self.imaginary = imaginary
        return self

    def set(self, c: "Complex") -> "Complex":
        return self.set_real_imaginary(c.real, c.imaginary)

    def set_polar(self, magnitude: float, phase: float) -> "Complex":
        return self.set_real_imaginary(
            magnitude * math.cos(phase), magnitude * math.sin(phase)
        )

    def add(self, c: "Complex") -> "Complex":
        return self.set_real_imaginary(self.real + c.real, self.imaginary + c.imaginary)

    def subtract(self, c: "Complex") -> "Complex":
        return self.set_real_imaginary(self.real - c.real, self.imaginary - c.imaginary)

    def multiply(self, c: "Complex") -> "Complex":
        return self.set_real_imaginary(
            self.real * c.real - self.imaginary * c.imaginary,
            self.real * c.imaginary + self.imaginary * c.real,
        )

    def divide(self, c: "Complex") -> "Complex":
        c_mag = c.magnitude_squared
        return self.set_real_imaginary(
            (self.real * c.real + self.imaginary * c.imaginary) / c_mag,
            (self.imaginary * c.real - self.real * c.imaginary) / c_mag,
        )

    def negate(self) -> "Complex":
        return self.set_real_imaginary(-self.real, -self.imaginary)

    def exponentiate(self) -> "Complex":
        return self.set_polar(math.exp(self.real), self.imaginary)

    def square(self) -> "Complex":
        return self.multiply(self)

    def sqrt(self) -> "Complex":
        return self.set(self.sqrt_of())

    def sin(self) -> "Complex":
        return self.set(self.sin_of())

    def cos(self) -> "Complex":
        return self.set(self.cos_of())

    def conjugate(self) -> "Complex":
        return self.set_real_imaginary(self.real, -self.imaginary)

    def get_cube_roots(self) -> List["Complex"]:
        """
        The three cube roots, principal root first, then the roots at
        +2pi/3 and -2pi/3 from it.
        """
        arg3 = self.argument / 3
        really = Complex.from_real(math.pow(self.magnitude, 1.0 / 3.0))

        principal = really.times(Complex.from_imaginary(arg3).exponentiate())
        return [
            principal,
            really.times(
                Complex.from_imaginary(arg3 + math.pi * 2 / 3).exponentiate()
            ),
            really.times(
                Complex.from_imaginary(arg3 - math.pi * 2 / 3).exponentiate()
            ),
        ]

    # ----------------------------------------------------------------
    # Python protocol
    # ----------------------------------------------------------------

    def __add__(self, other):
        try:
            return self.plus(_as_complex(other))
        except TypeError:
            return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        try:
            return self.minus(_as_complex(other))
        except TypeError:
            return NotImplemented

    def __rsub__(self, other):
        try:
            return _as_complex(other).minus(self)
        except TypeError:
            return NotImplemented

    def __mul__(self, other):
        try:
            return self.times(_as_complex(other))
        except TypeError:
            return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        try:
            return self.divided_by(_as_complex(other))
        except TypeError:
            return NotImplemented

    def __rtruediv__(self, other):
        try:
            return _as_complex(other).divided_by(self)
        except TypeError:
            return NotImplemented

    def __neg__(self):
        return self.negated()

    def __abs__(self):
        return self.magnitude

    def __eq__(self, other):
        if isinstance(other, Complex):
            return self.equals(other)
        if isinstance(other, numbers.Number):
            return self.equals(_as_complex(other))
        return NotImplemented

    __hash__ = None

    def __complex__(self):
        return complex(self.real, self.imaginary)

    def __repr__(self):
        return f"Complex({self.real}, {self.imaginary})"

    # ----------------------------------------------------------------
    # Factories
    # ----------------------------------------------------------------

    @staticmethod
    def from_real(real: float) -> "Complex":
        return Complex(real, 0)

    @staticmethod
    def from_imaginary(imaginary: float) -> "Complex":
        return Complex(0, imaginary)

    @staticmethod
    def create_polar(magnitude: float, phase: float) -> "Complex":
        return Complex(magnitude * math.cos(phase), magnitude * math.sin(phase))

    # ----------------------------------------------------------------
    # Root solvers
    # ----------------------------------------------------------------

    @staticmethod
    def solve_linear_roots(a, b) -> Optional[List["Complex"]]:
        """
        Roots of a*x + b = 0.

        Returns
        -------
        None when every x is a root (a == b == 0), [] when there is none
        (a == 0 != b), otherwise the single root.
        """
        a, b = _as_complex(a), _as_complex(b)
        if a.equals(Complex.ZERO):
            return None if b.equals(Complex.ZERO) else []
        return [b.divided_by(a).negate()]

    @staticmethod
    def solve_quadratic_roots(a, b, c) -> Optional[List["Complex"]]:
        """Roots of a*x^2 + b*x + c = 0, with multiplicity."""
        a, b, c = _as_complex(a), _as_complex(b), _as_complex(c)
        if a.equals(Complex.ZERO):
            return Complex.solve_linear_roots(b, c)

        denom = Complex.from_real(2).multiply(a)
        d1 = b.times(b)
        d2 = Complex.from_real(4).multiply(a).multiply(c)
        discriminant = d1.subtract(d2).sqrt()
        return [
            discriminant.minus(b).divide(denom),
            discriminant.negated().subtract(b).divide(denom),
        ]

    @staticmethod
    def solve_cubic_roots(a, b, c, d) -> Optional[List["Complex"]]:
        """
        Roots of a*x^3 + b*x^2 + c*x + d = 0, with multiplicity.

        Uses the general cubic formula. Triple roots and simple-plus-double
        roots are detected exactly and returned in closed form.
        """
        a, b, c, d = _as_complex(a), _as_complex(b), _as_complex(c), _as_complex(d)
        if a.equals(Complex.ZERO):
            return Complex.solve_quadratic_roots(b, c, d)

        three = Complex.from_real(3)
        denom = a.times(three).negate()
        a2 = a.times(a)
        b2 = b.times(b)
        b3 = b2.times(b)
        c2 = c.times(c)
        c3 = c2.times(c)
        abc = a.times(b).times(c)

        D0_1 = b2
        D0_2 = a.times(c).times(three)
        D1_1 = b3.times(Complex.from_real(2)).add(
            a2.times(d).multiply(Complex.from_real(27))
        )
        D1_2 = abc.times(Complex.from_real(9))

        if D0_1.equals(D0_2) and D1_1.equals(D1_2):
            triple_root = b.divided_by(denom)
            return [triple_root, triple_root.copy(), triple_root.copy()]

        Delta0 = D0_1.minus(D0_2)
        Delta1 = D1_1.minus(D1_2)

        discriminant1 = (
            abc.times(d).multiply(Complex.from_real(18)).add(b2.times(c2))
        )
        discriminant2 = (
            b3.times(d)
            .multiply(Complex.from_real(4))
            .add(c3.times(a).multiply(Complex.from_real(4)))
            .add(a2.times(d).multiply(d).multiply(Complex.from_real(27)))
        )

        if discriminant1.equals(discriminant2):
            simple_root = (
                abc.times(Complex.from_real(4)).subtract(
                    b3.plus(a2.times(d).multiply(Complex.from_real(9)))
                )
            ).divide(a.times(Delta0))
            double_root = (
                a.times(d).multiply(Complex.from_real(9)).subtract(b.times(c))
            ).divide(Delta0.times(Complex.from_real(2)))
            return [simple_root, double_root, double_root.copy()]

        if D0_1.equals(D0_2):
            C_cubed = Delta1
        else:
            C_cubed = Delta1.plus(
                Delta1.times(Delta1)
                .subtract(
                    Delta0.times(Delta0).multiply(Delta0).multiply(Complex.from_real(4))
                )
                .sqrt()
            ).divide(Complex.from_real(2))

        return [
            b.plus(root).add(Delta0.divided_by(root)).divide(denom)
            for root in C_cubed.get_cube_roots()
        ]


class _FrozenComplex(Complex):
    """Shared constant; every mutation raises TypeError."""

    def __init__(self, real: float, imaginary: float):
        object.__setattr__(self, "real", float(real))
        object.__setattr__(self, "imaginary", float(imaginary))

    def __setattr__(self, name, value):
        raise TypeError(f"Complex constant {self!r} is immutable")

    def __delattr__(self, name):
        raise TypeError(f"Complex constant {self!r} is immutable")


Complex.ZERO = _FrozenComplex(0, 0)
Complex.ONE = _FrozenComplex(1, 0)
Complex.I = _FrozenComplex(0, 1)
