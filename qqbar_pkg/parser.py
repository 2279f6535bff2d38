"""Input parsing and preprocessing module.

This module handles:
- Input sanitization and validation
- Expression preprocessing (exponents, superscripts, implicit multiplication)
- Conversion of the parsed expression to an integer polynomial
- Parsing of rational bounds
- Balancing checks for parentheses/brackets
"""

from __future__ import annotations

import re
from functools import lru_cache
from tokenize import TokenError
from typing import Any

import sympy as sp
from sympy import Poly, parse_expr
from sympy.polys.polyerrors import PolynomialError

from .config import (
    CACHE_SIZE_PARSE,
    DIGIT_LETTERS_REGEX,
    MAX_DEGREE,
    MAX_INPUT_LENGTH,
    TRANSFORMATIONS,
)
from .logging_config import get_logger
from .polynomials import X, to_poly
from .types import ParseError, ValidationError

logger = get_logger("parser")


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses/brackets are balanced. Returns (is_balanced, error_position)."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack: list[tuple[str, int]] = []  # (char, position)
    for i, char in enumerate(input_str):
        if char in pairs:
            stack.append((char, i))
        elif char in pairs.values():
            if not stack:
                return False, i
            opening, _ = stack.pop()
            if pairs[opening] != char:
                return False, i
    if stack:
        return False, stack[0][1]  # Return position of first unmatched
    return True, None


# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
    "memoryview",
    "bytes",
    "bytearray",
)

FROM_SUPERSCRIPT = {
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
}
SUPERSCRIPT_RE = re.compile(f"([{''.join(FROM_SUPERSCRIPT)}]+)")


def preprocess(input_str: str) -> str:
    """Validate and normalize raw input for SymPy parsing.

    Applies transformations:
    - Standardizes unicode minus and multiplication signs
    - Converts exponents (^ to **, superscripts to **)
    - Inserts implicit multiplication (2x -> 2*x)

    Raises:
        ValidationError: If input is empty, too long, contains forbidden
                        tokens, or has unbalanced parentheses/brackets
    """
    input_str = input_str.strip() if input_str else ""
    if not input_str:
        raise ValidationError("Input cannot be empty", "EMPTY_INPUT")
    if len(input_str) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )

    lowered = input_str.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning(
                "Blocked input containing forbidden token",
                extra={"forbidden_token": tok, "input_length": len(input_str)},
            )
            raise ValidationError(
                f"Input contains forbidden token: {tok}", "FORBIDDEN_TOKEN"
            )

    balanced, position = is_balanced(input_str)
    if not balanced:
        raise ValidationError(
            f"Unbalanced parentheses or brackets at position {position}", "UNBALANCED"
        )

    processed = input_str.replace("−", "-").replace("–", "-").replace("×", "*")
    processed = SUPERSCRIPT_RE.sub(
        lambda m: "**" + "".join(FROM_SUPERSCRIPT[ch] for ch in m.group(1)), processed
    )
    processed = processed.replace("^", "**")
    processed = DIGIT_LETTERS_REGEX.sub(r"\1*\2", processed)
    return processed


def _parse_expression(text: str) -> Any:
    processed = preprocess(text)
    sides = processed.split("=")
    if len(sides) > 2:
        raise ParseError("Expected at most one '='", "SYNTAX_ERROR")
    try:
        parsed = [parse_expr(side, transformations=TRANSFORMATIONS) for side in sides]
    except (SyntaxError, TokenError, TypeError, ValueError, sp.SympifyError) as e:
        raise ParseError(f"Could not parse '{text}': {e}", "SYNTAX_ERROR") from e
    if len(parsed) == 2:
        return parsed[0] - parsed[1]
    return parsed[0]


def _rational_coefficients(poly: Poly) -> Poly:
    if poly.domain.is_ZZ or poly.domain.is_QQ:
        return poly
    if poly.domain.is_RR:
        coeffs = [sp.nsimplify(c, rational=True) for c in poly.all_coeffs()]
        return Poly(coeffs, poly.gen)
    raise ParseError(
        f"Coefficients must be rational, got domain {poly.domain}",
        "NON_RATIONAL_COEFFICIENT",
    )


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse_polynomial(text: str) -> Poly:
    """Parse a univariate polynomial with rational coefficients.

    An equation ``lhs = rhs`` is read as ``lhs - rhs``. The variable may have
    any name; the result is a ``Poly`` in ``x`` over ZZ with denominators
    cleared by a positive factor.

    Raises:
        ValidationError: If the input is malformed or the polynomial is zero
            or of too high degree
        ParseError: If the input is not a polynomial in one variable with
            rational coefficients
    """
    expr = _parse_expression(text)
    symbols = expr.free_symbols
    if len(symbols) > 1:
        names = ", ".join(sorted(str(s) for s in symbols))
        raise ParseError(f"Expected one variable, found {names}", "MULTIVARIATE")
    var = symbols.pop() if symbols else X

    try:
        poly = Poly(expr, var)
    except PolynomialError as e:
        raise ParseError(f"'{text}' is not a polynomial", "NOT_POLYNOMIAL") from e
    poly = _rational_coefficients(poly)

    if poly.is_zero:
        raise ValidationError("The zero polynomial has no isolated roots", "ZERO_POLYNOMIAL")
    if poly.degree() > MAX_DEGREE:
        raise ValidationError(
            f"Degree {poly.degree()} exceeds the limit of {MAX_DEGREE}", "DEGREE_TOO_HIGH"
        )
    result = to_poly(poly)
    logger.debug("Parsed %r as %s", text, result.as_expr())
    return result


def parse_rational(text: str) -> sp.Rational:
    """Parse an exact rational number such as ``-3/4`` or ``0.25``."""
    value = _parse_expression(text)
    if isinstance(value, sp.Float):
        value = sp.nsimplify(value, rational=True)
    if not isinstance(value, sp.Rational):
        raise ParseError(f"'{text}' is not a rational number", "NOT_RATIONAL")
    return value
