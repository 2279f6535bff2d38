"""Unit tests for field arithmetic on algebraic numbers."""

import functools
import unittest

import pytest
import sympy as sp

from qqbar_pkg.arithmetic import (
    add_complex,
    add_real,
    div_complex,
    div_real,
    inv_real,
    mul_complex,
    mul_real,
    neg_complex,
    neg_real,
    sub_complex,
)
from qqbar_pkg.complex import ComplexAlgebraicNumber, complex_roots
from qqbar_pkg.polynomials import from_coeffs, to_poly
from qqbar_pkg.real import RealAlgebraicNumber, real_roots
from qqbar_pkg.types import DivideByZeroError


def sqrt(n):
    return real_roots(from_coeffs([-n, 0, 1]))[1]


def imaginary_unit():
    return complex_roots(from_coeffs([1, 0, 1]))[0]


class TestRealArithmetic(unittest.TestCase):
    """Test add, negate, multiply and invert on real algebraic numbers."""

    def test_rationals(self):
        half = RealAlgebraicNumber(sp.Rational(1, 2))
        third = RealAlgebraicNumber(sp.Rational(1, 3))
        self.assertEqual(add_real(half, third), sp.Rational(5, 6))
        self.assertEqual(mul_real(half, third), sp.Rational(1, 6))
        self.assertEqual(div_real(half, third), sp.Rational(3, 2))
        self.assertEqual(neg_real(half), sp.Rational(-1, 2))

    def test_sum_of_opposite_roots_is_zero(self):
        negative, positive = real_roots(from_coeffs([-2, 0, 1]))
        total = add_real(negative, positive)
        self.assertTrue(total.is_rational())
        self.assertEqual(total.rational, 0)

    def test_product_of_conjugate_roots(self):
        negative, positive = real_roots(from_coeffs([-2, 0, 1]))
        product = mul_real(negative, positive)
        self.assertTrue(product.is_rational())
        self.assertEqual(product.rational, -2)

    def test_square_root_squared(self):
        self.assertEqual(mul_real(sqrt(2), sqrt(2)), 2)

    def test_sum_of_square_roots(self):
        total = add_real(sqrt(2), sqrt(3))
        self.assertEqual(total.polynomial.all_coeffs(), [1, 0, -10, 0, 1])
        self.assertEqual(total.to_decimal(6), "3.146264")

    def test_difference_recovers_operand(self):
        total = sqrt(2) + sqrt(3)
        self.assertEqual(total - sqrt(3), sqrt(2))

    def test_product_of_square_roots(self):
        self.assertEqual(mul_real(sqrt(2), sqrt(3)), sqrt(6))
        self.assertEqual(div_real(sqrt(6), sqrt(2)), sqrt(3))

    def test_rational_times_root(self):
        self.assertEqual(mul_real(RealAlgebraicNumber(-2), sqrt(2)), -sqrt(8))
        self.assertEqual(mul_real(sqrt(2), RealAlgebraicNumber(0)), 0)

    def test_rational_plus_root(self):
        self.assertEqual((sqrt(2) + 1).to_decimal(4), "2.4142")
        self.assertEqual((1 - sqrt(2)).to_decimal(4), "-0.4142")

    def test_inverse(self):
        inverse = inv_real(sqrt(2))
        self.assertEqual(inverse, sqrt(2) / 2)
        self.assertEqual(inverse.to_decimal(4), "0.7071")
        self.assertEqual(sqrt(2).inverse(), inverse)

    def test_inverse_of_negative_root(self):
        negative = real_roots(from_coeffs([-2, 0, 1]))[0]
        inverse = inv_real(negative)
        self.assertTrue(inverse < 0)
        self.assertEqual(mul_real(inverse, negative), 1)

    def test_inverse_of_zero(self):
        with self.assertRaises(DivideByZeroError):
            inv_real(RealAlgebraicNumber(0))
        with self.assertRaises(DivideByZeroError):
            div_real(sqrt(2), RealAlgebraicNumber(0))
        with self.assertRaises(ZeroDivisionError):
            sqrt(2) / 0


class TestVieta:
    """Sums and products of all roots match the coefficients."""

    def test_cubic_sum_and_product(self):
        # x^3 - 3x + 1: sum of roots 0, product -1
        roots = real_roots(to_poly("x**3 - 3*x + 1"))
        assert len(roots) == 3
        total = add_real(add_real(roots[0], roots[1]), roots[2])
        assert total == 0
        product = mul_real(mul_real(roots[0], roots[1]), roots[2])
        assert product == -1

    def test_repeated_roots_counted_with_multiplicity(self):
        poly = to_poly("(x - 1)**2 * (x**2 - 2) * (x + 3)")
        roots = real_roots(poly)
        assert len(roots) == 5
        c = list(reversed(poly.all_coeffs()))
        n = poly.degree()
        assert functools.reduce(add_real, roots) == -c[n - 1]
        assert functools.reduce(mul_real, roots) == (-1) ** n * c[0]

    def test_operators_match_functions(self):
        first, second = real_roots(to_poly("x**2 - x - 1"))
        assert first + second == 1
        assert first * second == -1
        assert -first == second - 1


class TestComplexArithmetic:
    """Test add and negate on complex algebraic numbers."""

    def test_imaginary_unit_doubled(self):
        i = imaginary_unit()
        doubled = add_complex(i, imaginary_unit())
        two_i = complex_roots(from_coeffs([4, 0, 1]))[0]
        assert doubled == two_i
        assert doubled.to_decimal(3) == "0.000 + 2.000i"

    def test_conjugates_cancel(self):
        i = imaginary_unit()
        total = add_complex(i, i.conjugate())
        assert total.is_real()
        assert total == 0

    def test_subtraction(self):
        i = imaginary_unit()
        assert sub_complex(i, imaginary_unit()) == 0

    def test_negate(self):
        i = imaginary_unit()
        assert neg_complex(i) == i.conjugate()
        assert -ComplexAlgebraicNumber(sqrt(2)) == ComplexAlgebraicNumber(-sqrt(2))

    def test_real_plus_imaginary(self):
        total = add_complex(ComplexAlgebraicNumber(sqrt(2)), imaginary_unit())
        assert not total.is_real()
        assert total.to_decimal(3) == "1.414 + 1.000i"

    def test_rational_shift(self):
        total = imaginary_unit() + 3
        assert total.to_decimal(2) == "3.00 + 1.00i"

    def test_real_operands_use_real_field(self):
        x = ComplexAlgebraicNumber(sqrt(2))
        assert mul_complex(x, ComplexAlgebraicNumber(sqrt(2))) == 2
        assert div_complex(ComplexAlgebraicNumber(2), x) == ComplexAlgebraicNumber(sqrt(2))

    def test_non_real_multiplication_not_implemented(self):
        with pytest.raises(NotImplementedError):
            mul_complex(imaginary_unit(), imaginary_unit())
        with pytest.raises(NotImplementedError):
            imaginary_unit() / 2


if __name__ == "__main__":
    unittest.main()
