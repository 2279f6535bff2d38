"""Real algebraic numbers.

A real algebraic number is either an exact rational or a ``RealAlgebraicRoot``:
an irreducible integer polynomial of degree >= 2 together with an isolating
interval for one of its real roots.

Comparison and arithmetic refine the intervals of their operands in place.
Refinement only ever makes an operand more precise; it never changes the
number it represents.
"""

from __future__ import annotations

import copy
import functools
from typing import Any

import sympy as sp
from sympy import Poly

from .config import CHECK_INVARIANTS, OUTPUT_DIGITS
from .isolation import IsolatingInterval, isolate_real_roots
from .logging_config import get_logger
from .polynomials import (
    canonical,
    evaluate,
    from_coeffs,
    irreducible_factors,
    negate_variable,
    primitive_squarefree_part,
    reverse,
    scale,
    sign_at,
    translate,
)
from .types import InvariantError

logger = get_logger("real")


def format_decimal(value: sp.Rational, digits: int) -> str:
    """Round a rational to ``digits`` decimal places, ties away from zero."""
    value = sp.Rational(value)
    rounded = int(sp.floor(abs(value) * 10**digits + sp.Rational(1, 2)))
    sign = "-" if value < 0 and rounded else ""
    integer, fraction = divmod(rounded, 10**digits)
    if digits <= 0:
        return f"{sign}{integer}"
    return f"{sign}{integer}.{fraction:0{digits}d}"


class RealAlgebraicRoot:
    """The unique root of ``poly`` inside (tight_lower, tight_upper).

    The tight interval shrinks with every ``refine``. The wide bounds are
    fixed at construction and enclose no other root of ``poly``; they let two
    roots of the same polynomial be recognised as equal without refining
    forever. ``increasing`` is True when ``poly`` is negative at the lower end.
    """

    def __init__(
        self,
        poly: Poly,
        tight_lower: Any,
        tight_upper: Any,
        wide_lower: Any = None,
        wide_upper: Any = None,
        increasing: bool | None = None,
    ):
        self.poly = poly
        self.tight_lower = sp.Rational(tight_lower)
        self.tight_upper = sp.Rational(tight_upper)
        self.wide_lower = self.tight_lower if wide_lower is None else sp.sympify(wide_lower)
        self.wide_upper = self.tight_upper if wide_upper is None else sp.sympify(wide_upper)
        if increasing is None:
            increasing = sign_at(poly, self.tight_lower) < 0
        self.increasing = increasing
        if CHECK_INVARIANTS:
            self.check_invariants()

    def check_invariants(self) -> None:
        if not self.tight_lower < self.tight_upper:
            raise InvariantError("tight lower bound should be strictly less than upper")
        if not (self.wide_lower <= self.tight_lower and self.tight_upper <= self.wide_upper):
            raise InvariantError("wide bounds should contain the tight bounds")
        if self.poly != primitive_squarefree_part(self.poly):
            raise InvariantError("poly should be primitive and the favorite associate")
        if self.poly.degree() < 2:
            raise InvariantError("poly should have degree at least 2")
        if not self.poly.is_irreducible:
            raise InvariantError("poly should be irreducible")
        at_lower = sign_at(self.poly, self.tight_lower)
        at_upper = sign_at(self.poly, self.tight_upper)
        if at_lower == 0 or at_upper == 0 or at_lower == at_upper:
            raise InvariantError("poly should change sign across the tight interval")
        if self.increasing != (at_lower < 0):
            raise InvariantError("direction flag is incorrect")

    def __repr__(self) -> str:
        return (
            f"RealAlgebraicRoot({self.poly.as_expr()}, "
            f"({self.tight_lower}, {self.tight_upper}))"
        )

    def copy(self) -> RealAlgebraicRoot:
        return copy.copy(self)

    def evaluate(self, value: Any) -> sp.Rational:
        return evaluate(self.poly, value)

    def accuracy(self) -> sp.Rational:
        return self.tight_upper - self.tight_lower

    def refine(self) -> None:
        """Halve the tight interval, keeping the half that holds the root."""
        mid = (self.tight_lower + self.tight_upper) / 2
        # poly is irreducible of degree >= 2, so it never vanishes at a rational
        if (sign_at(self.poly, mid) > 0) == self.increasing:
            self.tight_upper = mid
        else:
            self.tight_lower = mid

    def refine_to_accuracy(self, accuracy: Any) -> None:
        while self.accuracy() > accuracy:
            self.refine()

    def _inside_wide_of(self, other: RealAlgebraicRoot) -> bool:
        return bool(
            other.wide_lower <= self.tight_lower and self.tight_upper <= other.wide_upper
        )

    def compare(self, other: RealAlgebraicRoot) -> int:
        """Return -1, 0 or 1 as this root is less than, equal to or greater than ``other``.

        Refines both roots until the answer is decided.
        """
        same_poly = self.poly == other.poly
        while True:
            if same_poly and (self._inside_wide_of(other) or other._inside_wide_of(self)):
                return 0
            if self.tight_upper <= other.tight_lower:
                return -1
            if other.tight_upper <= self.tight_lower:
                return 1
            self.refine()
            other.refine()

    def compare_rational(self, value: Any) -> int:
        """Return -1 or 1 as this root is less than or greater than ``value``.

        Refines until ``value`` lies outside the tight interval.
        """
        value = sp.Rational(value)
        while True:
            if self.tight_upper <= value:
                return -1
            if value <= self.tight_lower:
                return 1
            self.refine()

    def _transformed(
        self,
        raw_poly: Poly,
        lower: sp.Rational,
        upper: sp.Rational,
        wide_lower: Any,
        wide_upper: Any,
        swaps_ends: bool,
    ) -> RealAlgebraicRoot:
        # swaps_ends: the new lower end inherits the sign of the old upper end
        flipped, poly = canonical(raw_poly)
        increasing = self.increasing != swaps_ends
        if flipped:
            increasing = not increasing
        return RealAlgebraicRoot(poly, lower, upper, wide_lower, wide_upper, increasing)

    def negated(self) -> RealAlgebraicRoot:
        """Return the root ``-self`` of ``poly(-x)``."""
        return self._transformed(
            negate_variable(self.poly),
            -self.tight_upper,
            -self.tight_lower,
            -self.wide_upper,
            -self.wide_lower,
            True,
        )

    def translated(self, shift: Any) -> RealAlgebraicRoot:
        """Return the root ``self + shift`` for a rational ``shift``."""
        shift = sp.Rational(shift)
        return self._transformed(
            translate(self.poly, shift),
            self.tight_lower + shift,
            self.tight_upper + shift,
            self.wide_lower + shift,
            self.wide_upper + shift,
            False,
        )

    def scaled(self, factor: Any) -> RealAlgebraicRoot:
        """Return the root ``self * factor`` for a positive rational ``factor``."""
        factor = sp.Rational(factor)
        if factor <= 0:
            raise ValueError("scale factor must be positive")
        return self._transformed(
            scale(self.poly, factor),
            self.tight_lower * factor,
            self.tight_upper * factor,
            self.wide_lower * factor,
            self.wide_upper * factor,
            False,
        )

    def reciprocal(self) -> RealAlgebraicRoot:
        """Return the root ``1 / self``. The tight interval must be strictly positive."""
        if self.tight_lower <= 0:
            raise InvariantError("reciprocal needs a strictly positive tight interval")
        if self.wide_lower > 0:
            wide_lower, wide_upper = 1 / self.wide_upper, 1 / self.wide_lower
        else:
            wide_lower, wide_upper = None, None
        return self._transformed(
            reverse(self.poly),
            1 / self.tight_upper,
            1 / self.tight_lower,
            wide_lower,
            wide_upper,
            True,
        )

    def to_decimal(self, digits: int) -> str:
        """Correctly rounded decimal; the root is irrational so it never sits on a tie."""
        while True:
            lower = format_decimal(self.tight_lower, digits)
            if lower == format_decimal(self.tight_upper, digits):
                return lower
            self.refine()


@functools.total_ordering
class RealAlgebraicNumber:
    """An exact real algebraic number: a rational or a ``RealAlgebraicRoot``.

    Comparisons and arithmetic may refine the intervals of the numbers
    involved as a side effect; results only become more precise.
    """

    def __init__(self, value: Any):
        if isinstance(value, RealAlgebraicRoot):
            self._root = value
            self._rational = None
        elif isinstance(value, RealAlgebraicNumber):
            self._root = value._root.copy() if value._root is not None else None
            self._rational = value._rational
        else:
            self._root = None
            self._rational = sp.Rational(value)

    @staticmethod
    def _coerce(other: Any) -> RealAlgebraicNumber | None:
        if isinstance(other, RealAlgebraicNumber):
            return other
        if isinstance(other, (int, sp.Rational)):
            return RealAlgebraicNumber(other)
        return None

    def is_rational(self) -> bool:
        return self._root is None

    @property
    def rational(self) -> sp.Rational:
        if self._rational is None:
            raise ValueError("number is irrational")
        return self._rational

    @property
    def root(self) -> RealAlgebraicRoot:
        if self._root is None:
            raise ValueError("number is rational")
        return self._root

    @property
    def polynomial(self) -> Poly:
        """The minimal polynomial in canonical form."""
        if self._root is not None:
            return self._root.poly
        return canonical(from_coeffs([-self._rational.p, self._rational.q]))[1]

    def copy(self) -> RealAlgebraicNumber:
        return RealAlgebraicNumber(self)

    def bounds(self) -> tuple[sp.Rational, sp.Rational]:
        """Current (lower, upper) enclosure; a rational is its own enclosure."""
        if self._root is None:
            return self._rational, self._rational
        return self._root.tight_lower, self._root.tight_upper

    def accuracy(self) -> sp.Rational:
        lower, upper = self.bounds()
        return upper - lower

    def refine(self) -> None:
        if self._root is not None:
            self._root.refine()

    def compare(self, other: Any) -> int:
        """Exact three-way comparison. May refine both operands."""
        other = self._coerce(other)
        if other is None:
            raise TypeError("can only compare with real algebraic numbers or rationals")
        if self._root is None and other._root is None:
            return int(sp.sign(self._rational - other._rational))
        if self._root is None:
            return -other._root.compare_rational(self._rational)
        if other._root is None:
            return self._root.compare_rational(other._rational)
        return self._root.compare(other._root)

    def sign(self) -> int:
        return self.compare(0)

    def __eq__(self, other: Any) -> bool:
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: Any) -> bool:
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        # equal numbers share their canonical minimal polynomial
        if self._root is None:
            return hash(self._rational)
        return hash(("root", tuple(self._root.poly.all_coeffs())))

    def __neg__(self) -> RealAlgebraicNumber:
        from .arithmetic import neg_real

        return neg_real(self)

    def __add__(self, other: Any) -> RealAlgebraicNumber:
        from .arithmetic import add_real

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return add_real(self, other)

    __radd__ = __add__

    def __sub__(self, other: Any) -> RealAlgebraicNumber:
        from .arithmetic import add_real, neg_real

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return add_real(self, neg_real(other))

    def __rsub__(self, other: Any) -> RealAlgebraicNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other: Any) -> RealAlgebraicNumber:
        from .arithmetic import mul_real

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return mul_real(self, other)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> RealAlgebraicNumber:
        from .arithmetic import div_real

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return div_real(self, other)

    def __rtruediv__(self, other: Any) -> RealAlgebraicNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other / self

    def inverse(self) -> RealAlgebraicNumber:
        from .arithmetic import inv_real

        return inv_real(self)

    def to_decimal(self, digits: int | None = None) -> str:
        """Approximate decimal rendering, refining as needed."""
        if digits is None:
            digits = OUTPUT_DIGITS
        if self._root is None:
            return format_decimal(self._rational, digits)
        return self._root.to_decimal(digits)

    def describe(self) -> str:
        """Exact description: the rational itself or the polynomial and isolating interval."""
        if self._root is None:
            return str(self._rational)
        return (
            f"root of {self._root.poly.as_expr()} in "
            f"({self._root.tight_lower}, {self._root.tight_upper})"
        )

    def __repr__(self) -> str:
        if self._root is None:
            return f"RealAlgebraicNumber({self._rational})"
        return f"RealAlgebraicNumber({self._root!r})"

    def __str__(self) -> str:
        return self.to_decimal()


def real_roots_irreducible(
    poly: Poly,
    lower: Any = None,
    upper: Any = None,
    include_lower: bool = False,
    include_upper: bool = False,
) -> list[RealAlgebraicNumber]:
    """Isolate the real roots of an irreducible polynomial, in increasing order.

    The wide bounds of each root reach out to the neighbouring isolating
    intervals (or to the search bounds, or to infinity).
    """
    root_set = isolate_real_roots(poly, lower, upper, include_lower, include_upper)
    if root_set.poly.degree() <= 1:
        return [RealAlgebraicNumber(entry) for entry in root_set.entries]

    entries = root_set.entries
    roots = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, IsolatingInterval):
            raise InvariantError(
                f"irreducible polynomial {root_set.poly.as_expr()} has a rational root"
            )
        if idx > 0:
            wide_lower = entries[idx - 1].upper
        else:
            wide_lower = -sp.oo if lower is None else sp.Rational(lower)
        if idx + 1 < len(entries):
            wide_upper = entries[idx + 1].lower
        else:
            wide_upper = sp.oo if upper is None else sp.Rational(upper)
        roots.append(
            RealAlgebraicNumber(
                RealAlgebraicRoot(
                    root_set.poly,
                    entry.lower,
                    entry.upper,
                    wide_lower,
                    wide_upper,
                    entry.increasing,
                )
            )
        )
    return roots


def real_roots(
    poly: Poly,
    lower: Any = None,
    upper: Any = None,
    include_lower: bool = False,
    include_upper: bool = False,
) -> list[RealAlgebraicNumber]:
    """All real roots of ``poly`` with multiplicity, sorted increasingly."""
    if poly.is_zero:
        raise InvariantError("the zero polynomial has every number as a root", "ZERO_POLYNOMIAL")
    roots = []
    for factor, multiplicity in irreducible_factors(poly):
        for root in real_roots_irreducible(factor, lower, upper, include_lower, include_upper):
            roots.append(root)
            roots.extend(root.copy() for _ in range(multiplicity - 1))
    logger.debug("Found %d real roots of %s", len(roots), poly.as_expr())
    return sorted(roots)
