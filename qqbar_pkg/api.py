"""Public API for qqbar - string in, structured result out, never raises on bad input."""

from __future__ import annotations

from typing import Any

import sympy as sp

from .complex import complex_roots as _complex_roots
from .complex import count_complex_roots
from .config import OUTPUT_DIGITS
from .logging_config import get_logger
from .parser import parse_polynomial, parse_rational
from .real import real_roots as _real_roots
from .types import CountResult, ParseError, RootsResult, ValidationError

logger = get_logger("api")


def _bound(value: Any) -> sp.Rational | None:
    if value is None:
        return None
    if isinstance(value, str):
        return parse_rational(value)
    return sp.Rational(value)


def _digits(digits: int | None) -> int:
    if digits is None:
        return OUTPUT_DIGITS
    if digits < 0:
        raise ValidationError("digits must be non-negative", "INVALID_DIGITS")
    return digits


def real_roots(
    expression: str,
    lower: Any = None,
    upper: Any = None,
    include_lower: bool = False,
    include_upper: bool = False,
    digits: int | None = None,
) -> RootsResult:
    """Find the real roots of a polynomial, with multiplicity.

    Args:
        expression: Polynomial or equation string (e.g., "x^2 - 2", "x^3 = x + 1")
        lower: Optional lower bound (number or string such as "-3/2")
        upper: Optional upper bound
        include_lower: Whether a root exactly at ``lower`` is reported
        include_upper: Whether a root exactly at ``upper`` is reported
        digits: Decimal places in the approximations (default: OUTPUT_DIGITS)

    Returns:
        RootsResult with exact descriptions and decimal approximations

    Example:
        >>> from qqbar_pkg.api import real_roots
        >>> result = real_roots("x^2 - 2", digits=5)
        >>> print(result.approx)
        ['-1.41421', '1.41421']
    """
    try:
        digits = _digits(digits)
        poly = parse_polynomial(expression)
        roots = _real_roots(
            poly, _bound(lower), _bound(upper), include_lower, include_upper
        )
    except (ValidationError, ParseError) as e:
        logger.info("Rejected input %r: %s", expression, e)
        return RootsResult(ok=False, error=str(e))
    return RootsResult(
        ok=True,
        count=len(roots),
        exact=[r.describe() for r in roots],
        approx=[r.to_decimal(digits) for r in roots],
    )


def complex_roots(expression: str, digits: int | None = None) -> RootsResult:
    """Find all complex roots of a polynomial, with multiplicity.

    Real roots come first for each irreducible factor, then conjugate pairs.

    Example:
        >>> from qqbar_pkg.api import complex_roots
        >>> complex_roots("x^2 + 1", digits=3).approx
        ['0.000 + 1.000i', '0.000 - 1.000i']
    """
    try:
        digits = _digits(digits)
        poly = parse_polynomial(expression)
        roots = _complex_roots(poly)
    except (ValidationError, ParseError) as e:
        logger.info("Rejected input %r: %s", expression, e)
        return RootsResult(ok=False, error=str(e))
    return RootsResult(
        ok=True,
        count=len(roots),
        exact=[r.describe() for r in roots],
        approx=[r.to_decimal(digits) for r in roots],
    )


def count_roots_in_box(expression: str, a: Any, b: Any, c: Any, d: Any) -> CountResult:
    """Count roots with a < re < b and c < im < d.

    If a root lies on the boundary no count is given and ``on_boundary`` is set.
    """
    try:
        poly = parse_polynomial(expression)
        a, b, c, d = (_bound(v) for v in (a, b, c, d))
        if None in (a, b, c, d):
            raise ValidationError("All four rectangle bounds are required", "EMPTY_BOX")
        if not (a < b and c < d):
            raise ValidationError("Rectangle must have a < b and c < d", "EMPTY_BOX")
    except (ValidationError, ParseError) as e:
        logger.info("Rejected input %r: %s", expression, e)
        return CountResult(ok=False, error=str(e))
    count = count_complex_roots(poly, a, b, c, d)
    if count is None:
        return CountResult(ok=True, on_boundary=True)
    return CountResult(ok=True, count=count)
