"""Real root isolation for squarefree integer polynomials.

Roots are isolated with the Collins-Akritas bisection algorithm: the search
interval is mapped onto [0, 1] and split into dyadic intervals until
Descartes' rule of signs proves each piece holds zero or one root. Rational
roots met on a dyadic grid point are recorded exactly.

The result is a ``RootSet``: the squarefree polynomial together with an
ordered list of entries, each an exact ``sympy.Rational`` root or an
``IsolatingInterval`` around exactly one irrational-or-unknown root.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Union

import sympy as sp
from sympy import ZZ, Poly

from .config import CHECK_INVARIANTS
from .logging_config import get_logger
from .polynomials import (
    X,
    affine_compose,
    canonical,
    cauchy_bound,
    divide_linear,
    evaluate,
    is_squarefree,
    reverse,
    sign_at,
    sign_variations,
)
from .types import InvariantError, SeparationError

logger = get_logger("isolation")


@dataclass(frozen=True)
class IsolatingInterval:
    """Open interval (lower, upper) holding exactly one root of a polynomial.

    ``increasing`` is True when the polynomial is negative at ``lower`` and
    positive at ``upper``.
    """

    lower: sp.Rational
    upper: sp.Rational
    increasing: bool

    @property
    def midpoint(self) -> sp.Rational:
        return (self.lower + self.upper) / 2

    @property
    def width(self) -> sp.Rational:
        return self.upper - self.lower


Entry = Union[sp.Rational, IsolatingInterval]


def entry_bounds(entry: Entry) -> tuple[sp.Rational, sp.Rational]:
    """Return (lower, upper) of an entry; an exact root is a degenerate interval."""
    if isinstance(entry, IsolatingInterval):
        return entry.lower, entry.upper
    return entry, entry


def _within(value: sp.Rational, lower, upper, include_lower: bool, include_upper: bool) -> bool:
    if lower is not None:
        if value < lower or (value == lower and not include_lower):
            return False
    if upper is not None:
        if value > upper or (value == upper and not include_upper):
            return False
    return True


class RootSet:
    """A squarefree polynomial with an ordered list of isolated real roots.

    Entries are refined in place by ``refine``; refinement only ever shrinks
    an interval or replaces it by the exact root it contains.
    """

    def __init__(self, poly: Poly, entries: list[Entry]):
        self.poly = poly
        self.entries = list(entries)
        if CHECK_INVARIANTS:
            self.check_invariants()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __getitem__(self, idx: int) -> Entry:
        return self.entries[idx]

    def __repr__(self) -> str:
        return f"RootSet({self.poly.as_expr()}, {self.entries!r})"

    def check_invariants(self) -> None:
        """Raise ``InvariantError`` unless every entry isolates a root and entries are ordered."""
        if self.poly.is_zero:
            raise InvariantError("poly should be non-zero")
        if not is_squarefree(self.poly):
            raise InvariantError("poly should be squarefree")
        if self.poly.LC() <= 0:
            raise InvariantError("poly should have positive leading coefficient")

        for left, right in zip(self.entries, self.entries[1:]):
            left_lower, left_upper = entry_bounds(left)
            right_lower, right_upper = entry_bounds(right)
            if not (left_lower <= left_upper and right_lower <= right_upper):
                raise InvariantError("interval bounds should be increasing")
            both_intervals = isinstance(left, IsolatingInterval) and isinstance(
                right, IsolatingInterval
            )
            if both_intervals:
                if not left_upper <= right_lower:
                    raise InvariantError("isolating intervals should not overlap")
            elif not left_upper < right_lower:
                raise InvariantError("entries should be strictly increasing")

        for entry in self.entries:
            if isinstance(entry, IsolatingInterval):
                if not entry.lower < entry.upper:
                    raise InvariantError("isolating interval should have lower < upper")
                at_lower = sign_at(self.poly, entry.lower)
                at_upper = sign_at(self.poly, entry.upper)
                if at_lower == 0 or at_upper == 0:
                    raise InvariantError(
                        "poly should not be zero at boundary of isolating interval"
                    )
                if at_lower == at_upper:
                    raise InvariantError("sign of poly should differ at the interval ends")
                if entry.increasing != (at_lower < 0):
                    raise InvariantError("direction flag disagrees with the signs")
            elif evaluate(self.poly, entry) != 0:
                raise InvariantError("poly should be zero at a rational root")

    def is_exact(self, idx: int) -> bool:
        return not isinstance(self.entries[idx], IsolatingInterval)

    def refine(self, idx: int) -> None:
        """Halve the isolating interval at ``idx``.

        If the midpoint happens to be the root, the entry becomes exact.
        """
        entry = self.entries[idx]
        if not isinstance(entry, IsolatingInterval):
            return
        mid = entry.midpoint
        sign = sign_at(self.poly, mid)
        if sign == 0:
            self.entries[idx] = mid
        elif (sign > 0) == entry.increasing:
            self.entries[idx] = IsolatingInterval(entry.lower, mid, entry.increasing)
        else:
            self.entries[idx] = IsolatingInterval(mid, entry.upper, entry.increasing)


def _halve(poly: Poly) -> Poly:
    """Return ``2**n * poly(x / 2)``."""
    coeffs = poly.all_coeffs()
    return Poly.from_list([c * 2**j for j, c in enumerate(coeffs)], X, domain=ZZ)


def _collins_akritas(poly: Poly) -> list[tuple[int, int, bool]]:
    """Isolate the roots of ``poly`` in the open unit interval.

    ``poly`` must be squarefree with ``poly(0) != 0`` and ``poly(1) != 0``.
    Returns triples ``(c, k, exact)``: when ``exact`` the root is ``c / 2**k``,
    otherwise ``(c / 2**k, (c + 1) / 2**k)`` holds exactly one root.
    """
    isolated = []
    stack = [(0, 0, poly)]
    while stack:
        c, k, q = stack.pop()
        if q.eval(0) == 0:
            # a root at the left end of this dyadic interval: q = q / x
            q = Poly.from_list(q.all_coeffs()[:-1], X, domain=ZZ)
            isolated.append((c, k, True))
        if q.degree() <= 0:
            continue
        variations = sign_variations(reverse(q).shift(1))
        if variations == 1:
            isolated.append((c, k, False))
        elif variations > 1:
            half = _halve(q)
            stack.append((2 * c + 1, k + 1, half.shift(1)))
            stack.append((2 * c, k + 1, half))
    return isolated


def _shrink_off_roots(poly: Poly, lower: sp.Rational, upper: sp.Rational) -> Entry:
    """Turn (lower, upper), known to hold exactly one root in its interior, into an entry.

    If an endpoint is itself a root of ``poly`` the interval is shrunk by
    nested bisection until neither endpoint is a root.
    """
    reduced = poly
    for end in (lower, upper):
        if evaluate(poly, end) == 0:
            reduced = divide_linear(reduced, end)
    while evaluate(poly, lower) == 0 or evaluate(poly, upper) == 0:
        mid = (lower + upper) / 2
        at_mid = sign_at(reduced, mid)
        if at_mid == 0:
            return mid
        if sign_at(reduced, lower) != at_mid:
            upper = mid
        else:
            lower = mid
    return IsolatingInterval(lower, upper, sign_at(poly, lower) < 0)


def _sort_key(entry: Entry) -> tuple[Any, int]:
    lower, _ = entry_bounds(entry)
    return lower, 1 if isinstance(entry, IsolatingInterval) else 0


def isolate_real_roots(
    poly: Poly,
    lower: Any = None,
    upper: Any = None,
    include_lower: bool = False,
    include_upper: bool = False,
) -> RootSet:
    """Isolate the real roots of a squarefree polynomial.

    Args:
        poly: Non-zero squarefree integer polynomial
        lower: Lower end of the search interval (default: no bound)
        upper: Upper end of the search interval (default: no bound)
        include_lower: Whether a root exactly at ``lower`` is reported
        include_upper: Whether a root exactly at ``upper`` is reported

    Returns:
        RootSet over the canonical form of ``poly``

    Raises:
        InvariantError: If ``poly`` is zero
    """
    if poly.is_zero:
        raise InvariantError("cannot isolate the roots of the zero polynomial", "ZERO_POLYNOMIAL")
    _, poly = canonical(poly)
    degree = poly.degree()

    if degree == 0:
        return RootSet(poly, [])

    if degree == 1:
        c1, c0 = poly.all_coeffs()
        root = sp.Rational(-c0, c1)
        if _within(root, lower, upper, include_lower, include_upper):
            return RootSet(poly, [root])
        return RootSet(poly, [])

    if lower is None or upper is None:
        bound = cauchy_bound(poly)
        return isolate_real_roots(
            poly,
            -bound if lower is None else lower,
            bound if upper is None else upper,
            include_lower,
            include_upper,
        )

    lower, upper = sp.Rational(lower), sp.Rational(upper)
    if lower > upper:
        return RootSet(poly, [])
    if lower == upper:
        if include_lower and include_upper and evaluate(poly, lower) == 0:
            return RootSet(poly, [lower])
        return RootSet(poly, [])

    reduced = poly
    head: list[Entry] = []
    tail: list[Entry] = []
    if evaluate(poly, lower) == 0:
        reduced = divide_linear(reduced, lower)
        if include_lower:
            head.append(lower)
    if evaluate(poly, upper) == 0:
        reduced = divide_linear(reduced, upper)
        if include_upper:
            tail.append(upper)

    interior: list[Entry] = []
    if reduced.degree() > 0:
        width = upper - lower
        unit_poly = affine_compose(reduced, lower, width)
        for c, k, exact in _collins_akritas(unit_poly):
            left = lower + width * sp.Rational(c, 2**k)
            if exact:
                interior.append(left)
            else:
                right = lower + width * sp.Rational(c + 1, 2**k)
                interior.append(_shrink_off_roots(poly, left, right))
    interior.sort(key=_sort_key)

    logger.debug(
        "Isolated %d real roots of %s in [%s, %s]",
        len(head) + len(interior) + len(tail),
        poly.as_expr(),
        lower,
        upper,
    )
    return RootSet(poly, head + interior + tail)


def _order_entries(
    first: RootSet, i: int, second: RootSet, j: int, common: Poly
) -> int:
    """Decide whether ``first[i]`` lies before (-1) or after (1) ``second[j]``.

    Both entries are refined until they are strictly separated. Raises
    ``SeparationError`` if the two entries isolate the same number.
    """
    while True:
        x, y = first.entries[i], second.entries[j]
        x_lower, x_upper = entry_bounds(x)
        y_lower, y_upper = entry_bounds(y)
        x_exact = not isinstance(x, IsolatingInterval)
        y_exact = not isinstance(y, IsolatingInterval)

        if x_exact and y_exact and x == y:
            raise SeparationError(f"both polynomials vanish at {x}")
        # roots lie strictly inside intervals, so touching ends are already ordered
        if x_upper <= y_lower:
            return -1
        if y_upper <= x_lower:
            return 1

        if x_exact:
            if evaluate(second.poly, x) == 0:
                raise SeparationError(f"both polynomials vanish at {x}")
            second.refine(j)
            continue
        if y_exact:
            if evaluate(first.poly, y) == 0:
                raise SeparationError(f"both polynomials vanish at {y}")
            first.refine(i)
            continue

        overlap_lower = max(x_lower, y_lower)
        overlap_upper = min(x_upper, y_upper)
        if common.degree() > 0 and overlap_lower < overlap_upper:
            if sign_at(common, overlap_lower) * sign_at(common, overlap_upper) < 0:
                raise SeparationError(
                    f"both polynomials share a root in ({overlap_lower}, {overlap_upper})"
                )
        first.refine(i)
        second.refine(j)


def separate(first: RootSet, second: RootSet) -> list[tuple[int, int]]:
    """Interleave the roots of two root sets in strictly increasing order.

    Entries of both sets are refined in place until no entry of one set
    overlaps an entry of the other. Returns ``(source, idx)`` pairs where
    ``source`` is 0 for ``first`` and 1 for ``second``.

    Raises:
        SeparationError: If the two polynomials have a common real root
            among the isolated entries
    """
    common = first.poly.gcd(second.poly)
    merged = []
    i = j = 0
    while i < len(first) and j < len(second):
        if _order_entries(first, i, second, j, common) < 0:
            merged.append((0, i))
            i += 1
        else:
            merged.append((1, j))
            j += 1
    merged.extend((0, k) for k in range(i, len(first)))
    merged.extend((1, k) for k in range(j, len(second)))
    return merged
