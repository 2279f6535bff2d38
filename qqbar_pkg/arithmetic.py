"""Field arithmetic on real and complex algebraic numbers.

The sum (or product) of two irrational algebraic numbers is a root of the
root-sum (or root-product) polynomial of their minimal polynomials. That
polynomial has many roots; the right one is found by isolating all of them
and refining the operands and the candidates together until exactly one
candidate is still compatible with the interval sum (or product) of the
operands.
"""

from __future__ import annotations

from typing import Callable, Sequence

from .complex import ComplexAlgebraicNumber, all_complex_roots_irreducible
from .logging_config import get_logger
from .polynomials import irreducible_factors, root_prod_poly, root_sum_poly
from .real import RealAlgebraicNumber, real_roots_irreducible
from .types import DivideByZeroError, InvariantError

logger = get_logger("arithmetic")

Bounds = tuple  # ((lower, upper), ...) one pair per dimension


def _overlaps(candidate: Bounds, region: Bounds) -> bool:
    for (lower, upper), (lo, hi) in zip(candidate, region):
        if lower == upper:
            if not lo <= lower <= hi:
                return False
        elif not (lower < hi and lo < upper):
            return False
    return True


def _select_candidate(
    candidates: list,
    operands: Sequence,
    region: Callable[[], Bounds],
    bounds: Callable[[object], Bounds],
):
    """Refine operands and candidates until one candidate lies in ``region()``.

    ``region`` encloses the true result and shrinks as the operands are
    refined; candidates are referenced by index into the fixed list.
    """
    alive = list(range(len(candidates)))
    rounds = 0
    while True:
        current = region()
        alive = [i for i in alive if _overlaps(bounds(candidates[i]), current)]
        if len(alive) == 1:
            logger.debug(
                "Selected 1 of %d candidates after %d rounds", len(candidates), rounds
            )
            return candidates[alive[0]]
        if not alive:
            raise InvariantError("no candidate root matches the combined bounds")
        for operand in operands:
            operand.refine()
        for i in alive:
            candidates[i].refine()
        rounds += 1


def _real_candidates(poly) -> list[RealAlgebraicNumber]:
    candidates = []
    for factor, _ in irreducible_factors(poly):
        candidates.extend(real_roots_irreducible(factor))
    return candidates


def _real_bounds(number: RealAlgebraicNumber) -> Bounds:
    return (number.bounds(),)


def neg_real(x: RealAlgebraicNumber) -> RealAlgebraicNumber:
    if x.is_rational():
        return RealAlgebraicNumber(-x.rational)
    return RealAlgebraicNumber(x.root.negated())


def add_real(x: RealAlgebraicNumber, y: RealAlgebraicNumber) -> RealAlgebraicNumber:
    """Exact sum. Refines both operands."""
    if x.is_rational() and y.is_rational():
        return RealAlgebraicNumber(x.rational + y.rational)
    if x.is_rational():
        return RealAlgebraicNumber(y.root.translated(x.rational))
    if y.is_rational():
        return RealAlgebraicNumber(x.root.translated(y.rational))

    def region() -> Bounds:
        x_lower, x_upper = x.bounds()
        y_lower, y_upper = y.bounds()
        return ((x_lower + y_lower, x_upper + y_upper),)

    candidates = _real_candidates(root_sum_poly(x.root.poly, y.root.poly))
    return _select_candidate(candidates, (x, y), region, _real_bounds).copy()


def mul_real(x: RealAlgebraicNumber, y: RealAlgebraicNumber) -> RealAlgebraicNumber:
    """Exact product. Refines both operands."""
    if x.is_rational() and y.is_rational():
        return RealAlgebraicNumber(x.rational * y.rational)
    if x.is_rational() or y.is_rational():
        factor, other = (x.rational, y) if x.is_rational() else (y.rational, x)
        if factor == 0:
            return RealAlgebraicNumber(0)
        if factor > 0:
            return RealAlgebraicNumber(other.root.scaled(factor))
        return RealAlgebraicNumber(other.root.scaled(-factor).negated())

    def region() -> Bounds:
        x_lower, x_upper = x.bounds()
        y_lower, y_upper = y.bounds()
        corners = [
            x_lower * y_lower,
            x_lower * y_upper,
            x_upper * y_lower,
            x_upper * y_upper,
        ]
        return ((min(corners), max(corners)),)

    candidates = _real_candidates(root_prod_poly(x.root.poly, y.root.poly))
    return _select_candidate(candidates, (x, y), region, _real_bounds).copy()


def inv_real(x: RealAlgebraicNumber) -> RealAlgebraicNumber:
    """Exact reciprocal.

    Raises:
        DivideByZeroError: If ``x`` is zero
    """
    if x.is_rational():
        if x.rational == 0:
            raise DivideByZeroError("cannot invert zero")
        return RealAlgebraicNumber(1 / x.rational)
    if x.sign() < 0:
        return neg_real(inv_real(neg_real(x)))
    root = x.root
    while root.tight_lower <= 0:
        root.refine()
    return RealAlgebraicNumber(root.reciprocal())


def div_real(x: RealAlgebraicNumber, y: RealAlgebraicNumber) -> RealAlgebraicNumber:
    return mul_real(x, inv_real(y))


def _complex_bounds(number: ComplexAlgebraicNumber) -> Bounds:
    return number.real_bounds(), number.imag_bounds()


def neg_complex(z: ComplexAlgebraicNumber) -> ComplexAlgebraicNumber:
    if z.is_real():
        return ComplexAlgebraicNumber(neg_real(z.real))
    return ComplexAlgebraicNumber(z.root.negated())


def add_complex(x: ComplexAlgebraicNumber, y: ComplexAlgebraicNumber) -> ComplexAlgebraicNumber:
    """Exact sum. Refines both operands."""
    if x.is_real() and y.is_real():
        return ComplexAlgebraicNumber(add_real(x.real, y.real))
    if x.is_real() and x.real.is_rational():
        return ComplexAlgebraicNumber(y.root.translated(x.real.rational))
    if y.is_real() and y.real.is_rational():
        return ComplexAlgebraicNumber(x.root.translated(y.real.rational))

    def region() -> Bounds:
        (xa, xb), (xc, xd) = _complex_bounds(x)
        (ya, yb), (yc, yd) = _complex_bounds(y)
        return (xa + ya, xb + yb), (xc + yc, xd + yd)

    candidates = []
    for factor, _ in irreducible_factors(root_sum_poly(x.polynomial, y.polynomial)):
        candidates.extend(all_complex_roots_irreducible(factor))
    return _select_candidate(candidates, (x, y), region, _complex_bounds).copy()


def sub_complex(x: ComplexAlgebraicNumber, y: ComplexAlgebraicNumber) -> ComplexAlgebraicNumber:
    return add_complex(x, neg_complex(y))


def mul_complex(x: ComplexAlgebraicNumber, y: ComplexAlgebraicNumber) -> ComplexAlgebraicNumber:
    if x.is_real() and y.is_real():
        return ComplexAlgebraicNumber(mul_real(x.real, y.real))
    raise NotImplementedError("multiplication of non-real algebraic numbers")


def div_complex(x: ComplexAlgebraicNumber, y: ComplexAlgebraicNumber) -> ComplexAlgebraicNumber:
    if x.is_real() and y.is_real():
        return ComplexAlgebraicNumber(div_real(x.real, y.real))
    raise NotImplementedError("division of non-real algebraic numbers")
