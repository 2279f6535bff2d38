"""Tests for failure modes and invalid input handling."""

import pytest

from qqbar_pkg.arithmetic import inv_real
from qqbar_pkg.complex import count_complex_roots
from qqbar_pkg.isolation import isolate_real_roots, separate
from qqbar_pkg.parser import parse_polynomial, preprocess
from qqbar_pkg.polynomials import from_coeffs
from qqbar_pkg.real import RealAlgebraicNumber
from qqbar_pkg.types import (
    DivideByZeroError,
    InvariantError,
    ParseError,
    SeparationError,
    ValidationError,
)


class TestInputValidationFailures:
    """Test input validation failure modes."""

    def test_empty_input(self):
        with pytest.raises(ValidationError) as exc_info:
            preprocess("")
        assert exc_info.value.code == "EMPTY_INPUT"

    def test_whitespace_only(self):
        with pytest.raises(ValidationError):
            preprocess("   ")

    def test_too_long_input(self):
        with pytest.raises(ValidationError) as exc_info:
            preprocess("x" * 10001)
        assert exc_info.value.code == "TOO_LONG"

    def test_unbalanced_parentheses(self):
        with pytest.raises(ValidationError) as exc_info:
            preprocess("(x + 1")
        assert exc_info.value.code == "UNBALANCED"

    def test_mismatched_delimiters(self):
        with pytest.raises(ValidationError):
            preprocess("(x + 1]")

    def test_forbidden_token(self):
        with pytest.raises(ValidationError) as exc_info:
            preprocess("__import__('os')")
        assert exc_info.value.code == "FORBIDDEN_TOKEN"
        assert "forbidden" in str(exc_info.value).lower()

    def test_forbidden_token_eval(self):
        with pytest.raises(ValidationError):
            parse_polynomial("eval('x')")


class TestParseFailures:
    """Test parse failure modes."""

    def test_invalid_syntax(self):
        with pytest.raises(ParseError):
            parse_polynomial("x ** ** 2")

    def test_error_carries_message(self):
        with pytest.raises(ParseError) as exc_info:
            parse_polynomial("x*y")
        assert exc_info.value.message == str(exc_info.value)


class TestKernelFailures:
    """Test errors raised by the algebraic kernel."""

    def test_divide_by_zero_is_zero_division(self):
        with pytest.raises(ZeroDivisionError) as exc_info:
            inv_real(RealAlgebraicNumber(0))
        assert isinstance(exc_info.value, DivideByZeroError)
        assert exc_info.value.code == "DIVIDE_BY_ZERO"

    def test_zero_polynomial_isolation(self):
        with pytest.raises(InvariantError) as exc_info:
            isolate_real_roots(from_coeffs([0]))
        assert exc_info.value.code == "ZERO_POLYNOMIAL"

    def test_shared_root_separation(self):
        roots = isolate_real_roots(from_coeffs([-1, 0, 1]))
        with pytest.raises(SeparationError) as exc_info:
            separate(roots, isolate_real_roots(from_coeffs([-1, 1])))
        assert exc_info.value.code == "SHARED_ROOT"

    def test_box_with_no_area(self):
        with pytest.raises(InvariantError):
            count_complex_roots(from_coeffs([1, 0, 1]), 0, 0, 0, 1)
