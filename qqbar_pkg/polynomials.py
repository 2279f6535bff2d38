"""Polynomial helpers backed by SymPy.

This module provides the polynomial operations the algebraic-number kernel
relies on. Every polynomial is a univariate ``sympy.Poly`` in ``x`` over ZZ:
- Construction from coefficient lists or SymPy expressions
- Canonical form (primitive, positive leading coefficient)
- Squarefree parts, factorization into irreducibles
- Exact evaluation at rationals and Descartes sign variations
- Root transformations (negation, translation, scaling, inversion)
- Root-sum and root-product polynomials via resultants
- Real/imaginary parts along horizontal and vertical lines
"""

from __future__ import annotations

import math
from typing import Any

import sympy as sp
from sympy import QQ, ZZ, Poly

X = sp.Symbol("x")
_Z = sp.Symbol("z")


def _integer_poly(expr: Any) -> Poly:
    """Clear denominators of a rational polynomial in ``x``.

    The result is a positive rational multiple of the input, so signs of
    values are preserved.
    """
    rational = expr if isinstance(expr, Poly) else Poly(expr, X, domain=QQ)
    _, integral = rational.set_domain(QQ).clear_denoms(convert=True)
    return integral


def from_coeffs(coeffs: list[int]) -> Poly:
    """Build a polynomial from coefficients, constant term first.

    Example:
        >>> from_coeffs([-2, 0, 1])
        Poly(x**2 - 2, x, domain='ZZ')
    """
    return Poly.from_list([int(c) for c in reversed(coeffs)], X, domain=ZZ)


def to_poly(value: Any) -> Poly:
    """Convert an expression or Poly in a single variable to an integer Poly in ``x``.

    Rational coefficients are scaled by a positive factor to become integers.
    """
    if isinstance(value, Poly):
        if len(value.gens) != 1:
            raise ValueError("Polynomial must be univariate")
        expr = value.as_expr().subs(value.gen, X)
    else:
        expr = sp.sympify(value)
        symbols = expr.free_symbols
        if len(symbols) > 1:
            raise ValueError("Polynomial must be univariate")
        if symbols:
            expr = expr.subs(symbols.pop(), X)
    return _integer_poly(sp.expand(expr))


def coeff_list(poly: Poly) -> list[int]:
    """Return the coefficients as Python ints, constant term first."""
    return [int(c) for c in reversed(poly.all_coeffs())]


def canonical(poly: Poly) -> tuple[bool, Poly]:
    """Return the favorite associate of ``poly``.

    The favorite associate is the primitive part with a positive leading
    coefficient. The flag reports whether normalization multiplied the input
    by a negative number.
    """
    if poly.is_zero:
        return False, poly
    flipped = bool(poly.LC() < 0)
    _, primitive = poly.primitive()
    if primitive.LC() < 0:
        primitive = -primitive
    return flipped, primitive


def primitive_squarefree_part(poly: Poly) -> Poly:
    """Canonical squarefree part: same roots, each of multiplicity one."""
    if poly.is_zero:
        return poly
    return canonical(poly.sqf_part())[1]


def is_squarefree(poly: Poly) -> bool:
    return primitive_squarefree_part(poly).degree() == poly.degree()


def irreducible_factors(poly: Poly) -> list[tuple[Poly, int]]:
    """Factor into canonical irreducible factors with multiplicities.

    Constant factors are dropped.
    """
    _, factors = poly.factor_list()
    return [(canonical(factor)[1], int(mult)) for factor, mult in factors]


def evaluate(poly: Poly, value: Any) -> sp.Rational:
    """Evaluate ``poly`` exactly at a rational value."""
    return sp.Rational(poly.eval(sp.Rational(value)))


def sign_at(poly: Poly, value: Any) -> int:
    """Return -1, 0 or 1 according to the sign of ``poly(value)``."""
    return int(sp.sign(evaluate(poly, value)))


def cauchy_bound(poly: Poly) -> sp.Rational:
    """Strict bound on the absolute value of every complex root.

    This is Cauchy's bound plus one: ``2 + max|c_i| / |c_n|``.
    """
    coeffs = poly.all_coeffs()
    leading = abs(coeffs[0])
    return 2 + sp.Rational(max(abs(c) for c in coeffs[1:]), leading)


def sign_variations(poly: Poly) -> int:
    """Count the sign changes in the coefficient sequence (Descartes' rule).

    It bounds the number of positive real roots and has the same parity.
    """
    nonzero = [int(c) for c in poly.all_coeffs() if c != 0]
    return sum(1 for c1, c2 in zip(nonzero, nonzero[1:]) if (c1 < 0) != (c2 < 0))


def affine_compose(poly: Poly, offset: Any, slope: Any) -> Poly:
    """Return a positive integer multiple of ``poly(offset + slope * x)``."""
    substitution = Poly(sp.Rational(offset) + sp.Rational(slope) * X, X, domain=QQ)
    return _integer_poly(poly.set_domain(QQ).compose(substitution))


def negate_variable(poly: Poly) -> Poly:
    """Return ``poly(-x)``, whose roots are the negated roots of ``poly``."""
    return poly.compose(Poly(-X, X, domain=ZZ))


def translate(poly: Poly, shift: Any) -> Poly:
    """Return a polynomial whose roots are the roots of ``poly`` plus ``shift``."""
    return affine_compose(poly, -sp.Rational(shift), 1)


def scale(poly: Poly, factor: Any) -> Poly:
    """Return a polynomial whose roots are the roots of ``poly`` times ``factor``."""
    factor = sp.Rational(factor)
    if factor == 0:
        raise ValueError("Cannot scale roots by zero")
    return affine_compose(poly, 0, 1 / factor)


def reverse(poly: Poly) -> Poly:
    """Return ``x**n * poly(1/x)``: the coefficient list reversed.

    When ``poly(0) != 0`` its roots are the reciprocals of the roots of ``poly``.
    """
    return Poly.from_list(list(reversed(poly.all_coeffs())), X, domain=ZZ)


def divide_linear(poly: Poly, root: Any) -> Poly:
    """Divide out the factor ``x - root`` where ``root`` is a rational root of ``poly``.

    The quotient is scaled by a positive factor back to integer coefficients.
    """
    divisor = Poly(X - sp.Rational(root), X, domain=QQ)
    quotient, remainder = poly.set_domain(QQ).div(divisor)
    if not remainder.is_zero:
        raise ValueError(f"{root} is not a root of {poly.as_expr()}")
    return _integer_poly(quotient)


def root_sum_poly(p: Poly, q: Poly) -> Poly:
    """Polynomial whose roots are all sums ``a + b`` with ``p(a) = 0`` and ``q(b) = 0``.

    Computed as the resultant eliminating ``x`` from ``p(x)`` and ``q(z - x)``,
    then reduced to its canonical squarefree part.
    """
    shifted = sp.expand(q.as_expr().subs(X, _Z - X))
    res = sp.resultant(p.as_expr(), shifted, X)
    return primitive_squarefree_part(to_poly(sp.expand(res).subs(_Z, X)))


def root_prod_poly(p: Poly, q: Poly) -> Poly:
    """Polynomial whose roots are all products ``a * b`` with ``p(a) = 0`` and ``q(b) = 0``.

    Uses the homogenization ``x**m * q(z / x)`` of ``q`` and eliminates ``x``
    against ``p``. Requires ``p(0) != 0``.
    """
    degree = q.degree()
    homogeneous = sum(
        c * _Z**i * X ** (degree - i) for i, c in enumerate(reversed(q.all_coeffs()))
    )
    res = sp.resultant(p.as_expr(), sp.expand(homogeneous), X)
    return primitive_squarefree_part(to_poly(sp.expand(res).subs(_Z, X)))


def _line_components(poly: Poly, fixed: sp.Rational, fixed_real: bool) -> tuple[Poly, Poly]:
    # (a + ti)^k = sum_j C(k, j) a^(k-j) (ti)^j
    # (t + ai)^k = sum_j C(k, j) t^(k-j) (ai)^j
    degree = poly.degree()
    re = [sp.Integer(0)] * (degree + 1)
    im = [sp.Integer(0)] * (degree + 1)
    for power, coeff in enumerate(reversed(poly.all_coeffs())):
        if coeff == 0:
            continue
        for j in range(power + 1):
            if fixed_real:
                term = coeff * math.comb(power, j) * fixed ** (power - j)
                t_power = j
            else:
                term = coeff * math.comb(power, j) * fixed**j
                t_power = power - j
            quarter = j % 4
            if quarter == 0:
                re[t_power] += term
            elif quarter == 1:
                im[t_power] += term
            elif quarter == 2:
                re[t_power] -= term
            else:
                im[t_power] -= term
    re_poly = Poly.from_list(list(reversed(re)), X, domain=QQ)
    im_poly = Poly.from_list(list(reversed(im)), X, domain=QQ)
    return _integer_poly(re_poly), _integer_poly(im_poly)


def at_fixed_re(poly: Poly, value: Any) -> tuple[Poly, Poly]:
    """Real and imaginary parts of ``poly(value + t*i)`` as polynomials in ``t``.

    Each part is scaled by a positive factor to have integer coefficients.
    """
    if poly.is_zero:
        return poly, poly
    return _line_components(poly, sp.Rational(value), True)


def at_fixed_im(poly: Poly, value: Any) -> tuple[Poly, Poly]:
    """Real and imaginary parts of ``poly(t + value*i)`` as polynomials in ``t``.

    Each part is scaled by a positive factor to have integer coefficients.
    """
    if poly.is_zero:
        return poly, poly
    return _line_components(poly, sp.Rational(value), False)
