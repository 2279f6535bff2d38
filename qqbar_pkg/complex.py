"""Complex algebraic numbers and root counting via the argument principle.

The number of roots of a polynomial inside an open rectangle is its winding
number around the rectangle's boundary. The boundary is walked
counter-clockwise; along each edge the real and imaginary parts of the
polynomial are real polynomials in one variable, and the points where the
value crosses an axis are found exactly with real root isolation.
"""

from __future__ import annotations

import copy
from typing import Any, Iterator

import sympy as sp
from sympy import Poly

from .config import CHECK_INVARIANTS, COMPLEX_SEARCH_INITIAL_RADIUS, OUTPUT_DIGITS
from .isolation import IsolatingInterval, isolate_real_roots, separate
from .logging_config import get_logger
from .polynomials import (
    at_fixed_im,
    at_fixed_re,
    canonical,
    irreducible_factors,
    negate_variable,
    primitive_squarefree_part,
    sign_at,
    translate,
)
from .real import RealAlgebraicNumber, format_decimal, real_roots_irreducible
from .types import InvariantError, SeparationError

logger = get_logger("complex")

Box = tuple  # (a, b, c, d): a < re < b, c < im < d

# Axis crossings, numbered counter-clockwise
POS_RE = 0
POS_IM = 1
NEG_RE = 2
NEG_IM = 3


def _as_box(box: Any) -> Box:
    a, b, c, d = (sp.Rational(v) for v in box)
    return a, b, c, d


def _edge_events(re: Poly, im: Poly, s: sp.Rational, t: sp.Rational, backwards: bool):
    """Axis crossings of ``re(u) + im(u) i`` as ``u`` runs over [s, t].

    Returns None if the value is zero somewhere on the closed edge.
    """
    if re.is_zero and im.is_zero:
        raise InvariantError("polynomial vanishes along a whole edge")

    if re.is_zero or im.is_zero:
        # the value stays on one axis
        other = im if re.is_zero else re
        if len(isolate_real_roots(primitive_squarefree_part(other), s, t, True, True)):
            return None
        positive = sign_at(other, s) > 0
        if re.is_zero:
            return [POS_IM if positive else NEG_IM]
        return [POS_RE if positive else NEG_RE]

    re_roots = isolate_real_roots(primitive_squarefree_part(re), s, t, True, True)
    im_roots = isolate_real_roots(primitive_squarefree_part(im), s, t, True, True)
    try:
        order = separate(re_roots, im_roots)
    except SeparationError:
        return None

    events = []
    for source, idx in order:
        if source == 0:
            entry, other = re_roots[idx], im
        else:
            entry, other = im_roots[idx], re
        at = entry.midpoint if isinstance(entry, IsolatingInterval) else entry
        positive = sign_at(other, at) > 0
        if source == 0:
            events.append(POS_IM if positive else NEG_IM)
        else:
            events.append(POS_RE if positive else NEG_RE)
    if backwards:
        events.reverse()
    return events


def _winding(events: list[int]) -> int:
    """Number of counter-clockwise turns of a closed sequence of axis crossings."""
    quarters = 0
    for prev, nxt in zip(events, events[1:] + events[:1]):
        step = (nxt - prev) % 4
        if step == 1:
            quarters += 1
        elif step == 3:
            quarters -= 1
        elif step == 2:
            raise InvariantError(
                "value jumped between opposite half axes while walking the boundary"
            )
    if quarters % 4:
        raise InvariantError(f"boundary walk turned {quarters} quarters")
    return quarters // 4


def count_complex_roots(poly: Poly, a: Any, b: Any, c: Any, d: Any) -> int | None:
    """Count the roots of ``poly`` with a < re < b and c < im < d.

    Roots are counted with multiplicity. Returns None if ``poly`` has a root
    on the boundary of the rectangle; retry with different bounds.

    Raises:
        InvariantError: If the rectangle is empty or ``poly`` is zero
    """
    a, b, c, d = _as_box((a, b, c, d))
    if not (a < b and c < d):
        raise InvariantError(f"empty rectangle ({a}, {b}) x ({c}, {d})")
    if poly.is_zero:
        raise InvariantError("cannot count the roots of the zero polynomial", "ZERO_POLYNOMIAL")

    left = at_fixed_re(poly, a)
    right = at_fixed_re(poly, b)
    bottom = at_fixed_im(poly, c)
    top = at_fixed_im(poly, d)

    for (re, im), corners in ((left, (c, d)), (right, (c, d))):
        for corner in corners:
            if sign_at(re, corner) == 0 and sign_at(im, corner) == 0:
                return None

    events = []
    for (re, im), s, t, backwards in (
        (bottom, a, b, False),
        (right, c, d, False),
        (top, a, b, True),
        (left, c, d, True),
    ):
        edge = _edge_events(re, im, s, t, backwards)
        if edge is None:
            return None
        events.extend(edge)

    count = _winding(events)
    logger.debug(
        "%s has %d roots in (%s, %s) x (%s, %s)", poly.as_expr(), count, a, b, c, d
    )
    return count


def _split_ratios() -> Iterator[sp.Rational]:
    """Rationals in (0, 1): i/p for successive primes p, nearest to 1/2 first."""
    p = 2
    while True:
        ratios = [sp.Rational(i, p) for i in range(1, p)]
        ratios.sort(key=lambda r: abs(r - sp.Rational(1, 2)))
        yield from ratios
        p = sp.nextprime(p)


def _split_box(poly: Poly, n: int, box: Box):
    a, b, c, d = box
    for ratio in _split_ratios():
        if b - a >= d - c:
            m = a + (b - a) * ratio
            halves = ((a, m, c, d), (m, b, c, d))
        else:
            m = c + (d - c) * ratio
            halves = ((a, b, c, m), (a, b, m, d))
        counts = [count_complex_roots(poly, *half) for half in halves]
        if None in counts:
            continue
        if sum(counts) == n:
            return list(zip(halves, counts))
        logger.warning("Split of %s gave %s roots, expected %d", box, counts, n)


def bisect_box(poly: Poly, n: int, box: Any) -> list[tuple[Box, int]]:
    """Split a rectangle holding exactly ``n >= 2`` roots into two with definite counts.

    The longer side is cut at ratios i/p for successive primes p until
    neither half has a root on its boundary.

    Returns:
        Two (box, count) pairs whose counts sum to ``n``
    """
    if n < 2:
        raise InvariantError(f"bisect_box needs at least 2 roots, got {n}")
    return _split_box(poly, n, _as_box(box))


class ComplexAlgebraicRoot:
    """The unique root of ``poly`` inside an open rectangle off the real axis.

    ``box`` shrinks with every ``refine``. ``wide`` is fixed at construction
    and also holds no other root of ``poly``, including on its boundary.
    """

    def __init__(self, poly: Poly, box: Any, wide: Any = None):
        self.poly = poly
        self.box = _as_box(box)
        self.wide = self.box if wide is None else _as_box(wide)
        if CHECK_INVARIANTS:
            self.check_invariants()

    def check_invariants(self) -> None:
        a, b, c, d = self.box
        if not (a < b and c < d):
            raise InvariantError("box should have positive width and height")
        if c < 0 < d:
            raise InvariantError("box should not meet the real axis")
        if self.poly != primitive_squarefree_part(self.poly):
            raise InvariantError("poly should be primitive and the favorite associate")
        if self.poly.degree() < 2 or not self.poly.is_irreducible:
            raise InvariantError("poly should be irreducible of degree at least 2")
        if count_complex_roots(self.poly, *self.box) != 1:
            raise InvariantError("box should hold exactly one root")

    def __repr__(self) -> str:
        return f"ComplexAlgebraicRoot({self.poly.as_expr()}, {self.box})"

    def copy(self) -> ComplexAlgebraicRoot:
        return copy.copy(self)

    def accuracy(self) -> sp.Rational:
        a, b, c, d = self.box
        return max(b - a, d - c)

    def refine(self) -> None:
        """Cut the longer side, keeping the part that holds the root."""
        for half, count in _split_box(self.poly, 1, self.box):
            if count == 1:
                self.box = half
                return

    def refine_to_accuracy(self, accuracy: Any) -> None:
        while self.accuracy() > accuracy:
            self.refine()

    def conjugate(self) -> ComplexAlgebraicRoot:
        a, b, c, d = self.box
        wa, wb, wc, wd = self.wide
        return ComplexAlgebraicRoot(self.poly, (a, b, -d, -c), (wa, wb, -wd, -wc))

    def negated(self) -> ComplexAlgebraicRoot:
        a, b, c, d = self.box
        wa, wb, wc, wd = self.wide
        return ComplexAlgebraicRoot(
            canonical(negate_variable(self.poly))[1],
            (-b, -a, -d, -c),
            (-wb, -wa, -wd, -wc),
        )

    def translated(self, shift: Any) -> ComplexAlgebraicRoot:
        """Return the root ``self + shift`` for a rational ``shift``."""
        shift = sp.Rational(shift)
        a, b, c, d = self.box
        wa, wb, wc, wd = self.wide
        return ComplexAlgebraicRoot(
            canonical(translate(self.poly, shift))[1],
            (a + shift, b + shift, c, d),
            (wa + shift, wb + shift, wc, wd),
        )

    @staticmethod
    def _contains(outer: Box, inner: Box) -> bool:
        return bool(
            outer[0] <= inner[0]
            and inner[1] <= outer[1]
            and outer[2] <= inner[2]
            and inner[3] <= outer[3]
        )

    @staticmethod
    def _disjoint(x: Box, y: Box) -> bool:
        return bool(x[1] <= y[0] or y[1] <= x[0] or x[3] <= y[2] or y[3] <= x[2])

    def equals(self, other: ComplexAlgebraicRoot) -> bool:
        """Exact equality test. Refines both roots until it is decided."""
        # distinct canonical irreducible polynomials share no roots
        if self.poly != other.poly:
            return False
        while True:
            if self._contains(other.wide, self.box) or self._contains(self.wide, other.box):
                return True
            if self._disjoint(self.box, other.box):
                return False
            self.refine()
            other.refine()

    def to_decimal(self, digits: int) -> str:
        # guard digits; a rational real part may sit exactly on a rounding tie
        self.refine_to_accuracy(sp.Rational(1, 10 ** (digits + 3)))
        a, b, c, d = self.box
        return _format_complex((a + b) / 2, (c + d) / 2, digits)


def _format_complex(re: sp.Rational, im: sp.Rational, digits: int) -> str:
    im_text = format_decimal(abs(im), digits)
    sign = "-" if im < 0 else "+"
    return f"{format_decimal(re, digits)} {sign} {im_text}i"


class ComplexAlgebraicNumber:
    """An exact complex algebraic number: real, or a non-real ``ComplexAlgebraicRoot``."""

    def __init__(self, value: Any):
        if isinstance(value, ComplexAlgebraicNumber):
            self._real = value._real.copy() if value._real is not None else None
            self._root = value._root.copy() if value._root is not None else None
        elif isinstance(value, ComplexAlgebraicRoot):
            self._real = None
            self._root = value
        else:
            self._real = RealAlgebraicNumber(value)
            self._root = None

    @staticmethod
    def _coerce(other: Any) -> ComplexAlgebraicNumber | None:
        if isinstance(other, ComplexAlgebraicNumber):
            return other
        if isinstance(other, (int, sp.Rational, RealAlgebraicNumber)):
            return ComplexAlgebraicNumber(other)
        return None

    def is_real(self) -> bool:
        return self._root is None

    @property
    def real(self) -> RealAlgebraicNumber:
        if self._real is None:
            raise ValueError("number is not real")
        return self._real

    @property
    def root(self) -> ComplexAlgebraicRoot:
        if self._root is None:
            raise ValueError("number is real")
        return self._root

    @property
    def polynomial(self) -> Poly:
        return self._real.polynomial if self._root is None else self._root.poly

    def copy(self) -> ComplexAlgebraicNumber:
        return ComplexAlgebraicNumber(self)

    def refine(self) -> None:
        if self._root is None:
            self._real.refine()
        else:
            self._root.refine()

    def real_bounds(self) -> tuple[sp.Rational, sp.Rational]:
        if self._root is None:
            return self._real.bounds()
        return self._root.box[0], self._root.box[1]

    def imag_bounds(self) -> tuple[sp.Rational, sp.Rational]:
        if self._root is None:
            return sp.Integer(0), sp.Integer(0)
        return self._root.box[2], self._root.box[3]

    def conjugate(self) -> ComplexAlgebraicNumber:
        if self._root is None:
            return self.copy()
        return ComplexAlgebraicNumber(self._root.conjugate())

    def __eq__(self, other: Any) -> bool:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        if self._root is None and other._root is None:
            return self._real == other._real
        if self._root is None or other._root is None:
            return False
        return self._root.equals(other._root)

    def __hash__(self) -> int:
        if self._root is None:
            return hash(self._real)
        return hash(("complex", tuple(self._root.poly.all_coeffs())))

    def __neg__(self) -> ComplexAlgebraicNumber:
        from .arithmetic import neg_complex

        return neg_complex(self)

    def __add__(self, other: Any) -> ComplexAlgebraicNumber:
        from .arithmetic import add_complex

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return add_complex(self, other)

    __radd__ = __add__

    def __sub__(self, other: Any) -> ComplexAlgebraicNumber:
        from .arithmetic import sub_complex

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return sub_complex(self, other)

    def __rsub__(self, other: Any) -> ComplexAlgebraicNumber:
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other: Any) -> ComplexAlgebraicNumber:
        from .arithmetic import mul_complex

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return mul_complex(self, other)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> ComplexAlgebraicNumber:
        from .arithmetic import div_complex

        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return div_complex(self, other)

    def to_decimal(self, digits: int | None = None) -> str:
        if digits is None:
            digits = OUTPUT_DIGITS
        if self._root is None:
            return self._real.to_decimal(digits)
        return self._root.to_decimal(digits)

    def describe(self) -> str:
        if self._root is None:
            return self._real.describe()
        a, b, c, d = self._root.box
        return f"root of {self._root.poly.as_expr()} in ({a}, {b}) x ({c}, {d})i"

    def __repr__(self) -> str:
        inner = self._real if self._root is None else self._root
        return f"ComplexAlgebraicNumber({inner!r})"

    def __str__(self) -> str:
        return self.to_decimal()


def all_complex_roots_irreducible(poly: Poly) -> list[ComplexAlgebraicNumber]:
    """Every root of an irreducible polynomial: real roots in increasing order,
    then the non-real roots, each followed by its conjugate."""
    _, poly = canonical(poly)
    reals = real_roots_irreducible(poly)
    roots = [ComplexAlgebraicNumber(r) for r in reals]
    target = (poly.degree() - len(reals)) // 2
    if target == 0:
        return roots

    radius = max(sp.Rational(COMPLEX_SEARCH_INITIAL_RADIUS), sp.Integer(2))
    while count_complex_roots(poly, -radius, radius, 1 / radius, radius) != target:
        radius *= 2
    logger.debug("Upper half plane roots of %s lie within radius %s", poly.as_expr(), radius)

    pending = [((-radius, radius, 1 / radius, radius), target)]
    while pending:
        box, n = pending.pop()
        if n == 1:
            found = ComplexAlgebraicRoot(poly, box)
            roots.append(ComplexAlgebraicNumber(found))
            roots.append(ComplexAlgebraicNumber(found.conjugate()))
            continue
        for half, count in bisect_box(poly, n, box):
            if count > 0:
                pending.append((half, count))
    return roots


def complex_roots(poly: Poly) -> list[ComplexAlgebraicNumber]:
    """All complex roots of ``poly`` with multiplicity, grouped by irreducible factor."""
    if poly.is_zero:
        raise InvariantError("the zero polynomial has every number as a root", "ZERO_POLYNOMIAL")
    roots = []
    for factor, multiplicity in irreducible_factors(poly):
        for found in all_complex_roots_irreducible(factor):
            roots.append(found)
            roots.extend(found.copy() for _ in range(multiplicity - 1))
    return roots
