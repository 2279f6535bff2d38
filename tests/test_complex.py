"""Unit tests for complex root counting and complex algebraic numbers."""

import unittest

import pytest
import sympy as sp

from qqbar_pkg.complex import (
    ComplexAlgebraicNumber,
    all_complex_roots_irreducible,
    bisect_box,
    complex_roots,
    count_complex_roots,
)
from qqbar_pkg.polynomials import from_coeffs, to_poly
from qqbar_pkg.types import InvariantError


def unity(k):
    """x^k - 1"""
    return from_coeffs([-1] + [0] * (k - 1) + [1])


class TestCountComplexRoots(unittest.TestCase):
    """Test root counting with the argument principle."""

    def test_roots_of_unity_in_square(self):
        for k in range(1, 20):
            with self.subTest(k=k):
                self.assertEqual(count_complex_roots(unity(k), -2, 2, -2, 2), k)

    def test_root_on_left_edge(self):
        for k in range(2, 20, 2):
            with self.subTest(k=k):
                self.assertIsNone(count_complex_roots(unity(k), -1, 3, -3, 3))

    def test_no_root_on_left_edge(self):
        for k in range(1, 20, 2):
            with self.subTest(k=k):
                self.assertEqual(count_complex_roots(unity(k), -1, 3, -3, 3), k)

    def test_root_at_vertex(self):
        self.assertIsNone(count_complex_roots(from_coeffs([1, 0, 1]), 0, 1, 1, 2))

    def test_empty_box(self):
        poly = from_coeffs([1, 0, 1])
        self.assertEqual(count_complex_roots(poly, 1, 2, 1, 2), 0)
        self.assertEqual(count_complex_roots(poly, -1, 1, 0.5, 2), 1)

    def test_multiple_roots_counted_with_multiplicity(self):
        self.assertEqual(count_complex_roots(to_poly("(x**2 + 1)**2"), -1, 1, 0, 2), 2)

    def test_constant_has_no_roots(self):
        self.assertEqual(count_complex_roots(from_coeffs([3]), -1, 1, -1, 1), 0)

    def test_degenerate_rectangle(self):
        with self.assertRaises(InvariantError):
            count_complex_roots(from_coeffs([1, 0, 1]), 1, 1, -1, 1)
        with self.assertRaises(InvariantError):
            count_complex_roots(from_coeffs([1, 0, 1]), -1, 1, 2, 1)

    def test_zero_polynomial(self):
        with self.assertRaises(InvariantError):
            count_complex_roots(from_coeffs([0]), -1, 1, -1, 1)


class TestBisectBox:
    """Test splitting boxes."""

    def test_counts_sum(self):
        poly = unity(6)
        halves = bisect_box(poly, 6, (-2, 2, -2, 2))
        assert len(halves) == 2
        assert sum(count for _, count in halves) == 6
        for box, count in halves:
            assert count_complex_roots(poly, *box) == count

    def test_longer_side_is_cut(self):
        halves = bisect_box(from_coeffs([1, 0, 1]), 2, (-1, 1, -4, 4))
        for (a, b, c, d), _ in halves:
            assert (a, b) == (-1, 1)

    def test_needs_two_roots(self):
        with pytest.raises(InvariantError):
            bisect_box(from_coeffs([1, 0, 1]), 1, (-2, 2, -2, 2))


class TestComplexRoots:
    """Test finding all complex roots."""

    def test_imaginary_unit(self):
        roots = complex_roots(from_coeffs([1, 0, 1]))
        assert len(roots) == 2
        assert not roots[0].is_real()
        assert roots[0].imag_bounds()[0] > 0
        assert roots[1] == roots[0].conjugate()
        assert roots[0].to_decimal(3) == "0.000 + 1.000i"
        assert roots[1].to_decimal(3) == "0.000 - 1.000i"

    def test_real_roots_first(self):
        roots = complex_roots(to_poly("x**3 - 1"))
        assert len(roots) == 3
        assert roots[0].is_real()
        assert roots[0] == 1
        assert [r.to_decimal(3) for r in roots[1:]] == ["-0.500 + 0.866i", "-0.500 - 0.866i"]

    def test_all_roots_of_irreducible_quartic(self):
        roots = all_complex_roots_irreducible(to_poly("x**4 + 1"))
        assert len(roots) == 4
        assert not any(r.is_real() for r in roots)
        for root, conjugate in zip(roots[::2], roots[1::2]):
            assert conjugate == root.conjugate()
        assert roots[0] != roots[2]

    def test_mixed_real_and_complex(self):
        roots = all_complex_roots_irreducible(to_poly("x**3 - 2"))
        assert [r.is_real() for r in roots] == [True, False, False]

    def test_multiplicity(self):
        roots = complex_roots(to_poly("(x**2 + 1)**2"))
        assert len(roots) == 4

    def test_far_roots_found(self):
        roots = complex_roots(to_poly("x**2 + 10000"))
        assert roots[0].to_decimal(1) == "0.0 + 100.0i"


class TestComplexAlgebraicRoot:
    """Test refinement and transformations of non-real roots."""

    def test_refine_shrinks_box(self):
        root = complex_roots(from_coeffs([1, 0, 1]))[0].root
        for _ in range(6):
            before = root.accuracy()
            root.refine()
            assert root.accuracy() <= before
            a, b, c, d = root.box
            assert a < 0 < b and c < 1 < d
        assert root.accuracy() < 2

    def test_negated(self):
        i = complex_roots(from_coeffs([1, 0, 1]))[0]
        negated = ComplexAlgebraicNumber(i.root.negated())
        assert negated == i.conjugate()

    def test_translated(self):
        i = complex_roots(from_coeffs([1, 0, 1]))[0]
        shifted = ComplexAlgebraicNumber(i.root.translated(sp.Rational(1, 2)))
        assert shifted.to_decimal(2) == "0.50 + 1.00i"

    def test_real_number_wrapped(self):
        value = ComplexAlgebraicNumber(3)
        assert value.is_real()
        assert value.real == 3
        assert value.imag_bounds() == (0, 0)
        assert value.conjugate() == 3

    def test_describe(self):
        i = complex_roots(from_coeffs([1, 0, 1]))[0]
        assert i.describe().startswith("root of x**2 + 1 in (")


if __name__ == "__main__":
    unittest.main()
