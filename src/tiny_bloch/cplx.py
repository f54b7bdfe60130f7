"""
Complex scalar value type.

A small immutable (re, im) pair used for display and for the
scalar side of the qubit algebra. Arithmetic is available both as
plain functions and as Python operators.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

Number = Union[int, float, complex, "Complex"]

# Values closer to zero than this are printed as zero
_ZERO_TOL = 1e-10


@dataclass(frozen=True)
class Complex:
    """Immutable complex number."""
    re: float = 0.0
    im: float = 0.0

    # -- Construction -------------------------------------------------------

    @classmethod
    def of(cls, value: Number) -> Complex:
        """Coerce an int, float, complex or Complex into a Complex."""
        if isinstance(value, Complex):
            return value
        c = complex(value)
        return cls(float(c.real), float(c.imag))

    @classmethod
    def from_polar(cls, r: float, theta: float) -> Complex:
        """r * e^(i*theta)"""
        return cls(r * math.cos(theta), r * math.sin(theta))

    def __complex__(self) -> complex:
        return complex(self.re, self.im)

    # -- Operators ----------------------------------------------------------

    def __add__(self, other: Number) -> Complex:
        return add(self, Complex.of(other))

    __radd__ = __add__

    def __sub__(self, other: Number) -> Complex:
        return subtract(self, Complex.of(other))

    def __rsub__(self, other: Number) -> Complex:
        return subtract(Complex.of(other), self)

    def __mul__(self, other: Number) -> Complex:
        return multiply(self, Complex.of(other))

    __rmul__ = __mul__

    def __neg__(self) -> Complex:
        return Complex(-self.re, -self.im)

    def __abs__(self) -> float:
        return magnitude(self)

    # -- Accessors ----------------------------------------------------------

    def conjugate(self) -> Complex:
        return conjugate(self)

    @property
    def magnitude(self) -> float:
        return magnitude(self)

    @property
    def argument(self) -> float:
        return argument(self)

    def is_close(self, other: Number, tol: float = 1e-9) -> bool:
        o = Complex.of(other)
        return abs(self.re - o.re) <= tol and abs(self.im - o.im) <= tol

    def to_string(self, precision: int = 4) -> str:
        return format_complex(self, precision)

    def __str__(self) -> str:
        return format_complex(self)


# ---------------------------------------------------------------------------
# Functional API
# ---------------------------------------------------------------------------

def add(a: Complex, b: Complex) -> Complex:
    return Complex(a.re + b.re, a.im + b.im)


def subtract(a: Complex, b: Complex) -> Complex:
    return Complex(a.re - b.re, a.im - b.im)


def multiply(a: Complex, b: Complex) -> Complex:
    """(a + bi)(c + di) = (ac - bd) + (ad + bc)i"""
    return Complex(a.re * b.re - a.im * b.im, a.re * b.im + a.im * b.re)


def conjugate(a: Complex) -> Complex:
    return Complex(a.re, -a.im)


def magnitude(a: Complex) -> float:
    """sqrt(re² + im²)"""
    return math.hypot(a.re, a.im)


def argument(a: Complex) -> float:
    """Phase angle atan2(im, re), in (-π, π]."""
    theta = math.atan2(a.im, a.re)
    # atan2 gives -π for (negative re, -0.0 im); fold onto +π
    if theta == -math.pi:
        theta = math.pi
    return theta


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def _format_real(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


def format_complex(value: Number, precision: int = 4) -> str:
    """
    Human/LaTeX friendly rendering: ``a + bi`` with zero terms elided.

    Examples: ``0``, ``0.7071``, ``i``, ``-i``, ``0.5 - 0.5i``.
    """
    c = Complex.of(value)
    re = 0.0 if abs(c.re) < _ZERO_TOL else c.re
    im = 0.0 if abs(c.im) < _ZERO_TOL else c.im

    re_str = _format_real(re, precision)
    im_str = _format_real(abs(im), precision)
    # Rounding can still collapse a tiny term
    if re_str == "0":
        re = 0.0
    if im_str == "0":
        im = 0.0

    if im == 0.0:
        return re_str
    imag = "i" if im_str == "1" else f"{im_str}i"
    if re == 0.0:
        return imag if im > 0 else f"-{imag}"
    sign = "+" if im > 0 else "-"
    return f"{re_str} {sign} {imag}"
