"""Unit tests for real root isolation."""

import unittest

import pytest
import sympy as sp

from qqbar_pkg.isolation import (
    IsolatingInterval,
    entry_bounds,
    isolate_real_roots,
    separate,
)
from qqbar_pkg.polynomials import from_coeffs, sign_at, to_poly
from qqbar_pkg.types import InvariantError, SeparationError

FOUR_ROOTS = to_poly("(x - 1)*(x - 2)*(x - 3)*(x - 4)")


def holds(entry, value):
    if isinstance(entry, IsolatingInterval):
        return entry.lower < value < entry.upper
    return entry == value


class TestIsolateRealRoots(unittest.TestCase):
    """Test isolate_real_roots."""

    def test_constant_has_no_roots(self):
        self.assertEqual(len(isolate_real_roots(from_coeffs([5]))), 0)

    def test_linear_root_is_exact(self):
        roots = isolate_real_roots(from_coeffs([-1, 2]))
        self.assertEqual(roots.entries, [sp.Rational(1, 2)])
        self.assertTrue(roots.is_exact(0))

    def test_linear_root_outside_bounds(self):
        self.assertEqual(len(isolate_real_roots(from_coeffs([-1, 2]), 1, 2)), 0)

    def test_sqrt_two(self):
        roots = isolate_real_roots(from_coeffs([-2, 0, 1]))
        self.assertEqual(len(roots), 2)
        for entry, value in zip(roots, (-sp.sqrt(2), sp.sqrt(2))):
            self.assertIsInstance(entry, IsolatingInterval)
            self.assertTrue(entry.lower < value < entry.upper)

    def test_roots_in_order(self):
        roots = isolate_real_roots(to_poly("x**3 - x"))
        self.assertEqual(len(roots), 3)
        for entry, value in zip(roots, (-1, 0, 1)):
            self.assertTrue(holds(entry, value))

    def test_open_bounds_exclude_endpoint_roots(self):
        roots = isolate_real_roots(FOUR_ROOTS, 1, 4)
        self.assertEqual(len(roots), 2)
        self.assertTrue(holds(roots[0], 2))
        self.assertTrue(holds(roots[1], 3))

    def test_closed_bounds_include_endpoint_roots(self):
        roots = isolate_real_roots(FOUR_ROOTS, 1, 4, True, True)
        self.assertEqual(len(roots), 4)
        self.assertEqual(roots[0], 1)
        self.assertEqual(roots[3], 4)

    def test_half_open_bounds(self):
        self.assertEqual(len(isolate_real_roots(FOUR_ROOTS, 1, 4, True, False)), 3)
        self.assertEqual(len(isolate_real_roots(FOUR_ROOTS, 1, 4, False, True)), 3)

    def test_empty_search_interval(self):
        self.assertEqual(len(isolate_real_roots(FOUR_ROOTS, 4, 1)), 0)

    def test_single_point_search_interval(self):
        self.assertEqual(len(isolate_real_roots(FOUR_ROOTS, 2, 2)), 0)
        self.assertEqual(isolate_real_roots(FOUR_ROOTS, 2, 2, True, True).entries, [2])

    def test_zero_polynomial(self):
        with self.assertRaises(InvariantError):
            isolate_real_roots(from_coeffs([0]))

    def test_negative_leading_coefficient_is_normalized(self):
        roots = isolate_real_roots(from_coeffs([2, 0, -1]))
        self.assertEqual(roots.poly.all_coeffs(), [1, 0, -2])


class TestRootSetRefine:
    """Test refinement of isolating intervals."""

    def test_endpoint_signs_differ(self):
        roots = isolate_real_roots(to_poly("x**5 - 3*x + 1"))
        for entry in roots:
            assert isinstance(entry, IsolatingInterval)
            at_lower = sign_at(roots.poly, entry.lower)
            at_upper = sign_at(roots.poly, entry.upper)
            assert at_lower * at_upper == -1
            assert entry.increasing == (at_lower < 0)

    def test_refine_halves_width(self):
        roots = isolate_real_roots(from_coeffs([-2, 0, 1]))
        for _ in range(10):
            before = roots[1].width
            roots.refine(1)
            assert roots[1].width == before / 2
            assert roots[1].lower < sp.sqrt(2) < roots[1].upper

    def test_refine_keeps_rational_root(self):
        roots = isolate_real_roots(to_poly("(2*x - 1)*(x**2 - 5)"))
        idx = next(i for i, e in enumerate(roots) if holds(e, sp.Rational(1, 2)))
        for _ in range(64):
            if roots.is_exact(idx):
                break
            roots.refine(idx)
        lower, upper = entry_bounds(roots[idx])
        assert lower <= sp.Rational(1, 2) <= upper


class TestSeparate:
    """Test interleaving the roots of two polynomials."""

    def test_interleave(self):
        first = isolate_real_roots(from_coeffs([-2, 0, 1]))
        second = isolate_real_roots(from_coeffs([-3, 0, 1]))
        order = separate(first, second)
        assert [source for source, _ in order] == [1, 0, 0, 1]
        previous_upper = None
        for source, idx in order:
            lower, upper = entry_bounds((first, second)[source][idx])
            if previous_upper is not None:
                assert previous_upper <= lower
            previous_upper = upper

    def test_exact_and_interval(self):
        first = isolate_real_roots(to_poly("x**2 - x"))
        second = isolate_real_roots(from_coeffs([-2, 0, 1]))
        order = separate(first, second)
        assert order == [(1, 0), (0, 0), (0, 1), (1, 1)]

    def test_shared_root_raises(self):
        first = isolate_real_roots(from_coeffs([-2, 0, 1]))
        second = isolate_real_roots(to_poly("x**3 - 2*x"))
        with pytest.raises(SeparationError):
            separate(first, second)

    def test_shared_rational_root_raises(self):
        first = isolate_real_roots(to_poly("x**2 - 1"))
        second = isolate_real_roots(to_poly("x**2 + x - 2"))
        with pytest.raises(SeparationError):
            separate(first, second)


if __name__ == "__main__":
    unittest.main()
