"""Unit tests for exact rational arithmetic."""

import importlib.util
import math
import sys
import unittest

import schedsim.rational as rational_module
from schedsim.errors import DivisionByZero, MalformedRationalString, TypeMismatch
from schedsim.rational import ONE, ZERO, Rational, as_rational, lcm

SAMPLES = [
    Rational(1, 2), Rational(-3, 4), Rational(7), Rational(0),
    Rational(5, 6), Rational(-11, 3), Rational(22, 7),
]


class TestConstruction(unittest.TestCase):
    """Test the construction forms and normalization."""

    def test_reduces_to_lowest_terms(self):
        """Test that numerator and denominator are divided by their gcd."""
        r = Rational(6, 8)
        self.assertEqual((r.n, r.d), (3, 4))

    def test_sign_moves_to_numerator(self):
        """Test that a negative denominator is normalized away."""
        r = Rational(3, -6)
        self.assertEqual((r.n, r.d), (-1, 2))

    def test_zero_is_zero_over_one(self):
        """Test that every zero value is represented as 0/1."""
        r = Rational(0, 5)
        self.assertEqual((r.n, r.d), (0, 1))

    def test_unreduced_construction(self):
        """Test that reduce=False keeps the pair as given."""
        r = Rational(2, 4, reduce=False)
        self.assertEqual((r.n, r.d), (2, 4))
        # Equality compares pairs, so only reduced values compare equal.
        self.assertNotEqual(r, Rational(1, 2))
        self.assertEqual(r.simplify(), Rational(1, 2))

    def test_zero_denominator(self):
        """Test that a zero denominator raises DivisionByZero."""
        with self.assertRaises(DivisionByZero):
            Rational(1, 0)
        with self.assertRaises(ZeroDivisionError):
            Rational(1, 0)

    def test_non_integer_parts(self):
        """Test that non-integer parts raise TypeMismatch."""
        with self.assertRaises(TypeMismatch):
            Rational(1.5, 2)
        with self.assertRaises(TypeError):
            Rational("1", 2)

    def test_lowest_terms_and_value(self):
        """Test that Rational(a, b) is reduced and equals a/b as a float."""
        for a in range(-12, 13):
            for b in (-7, -4, -1, 1, 2, 3, 6, 9):
                r = Rational(a, b)
                self.assertEqual(math.gcd(r.n, r.d), 1)
                self.assertGreater(r.d, 0)
                self.assertAlmostEqual(float(r), a / b, places=12)

    def test_immutable(self):
        """Test that a Rational cannot be modified in place."""
        r = Rational(1, 2)
        with self.assertRaises(AttributeError):
            r.n = 3


class TestParse(unittest.TestCase):
    """Test parsing rationals from strings."""

    def test_integer(self):
        self.assertEqual(Rational.parse("3"), Rational(3))

    def test_fraction(self):
        self.assertEqual(Rational.parse("1/2"), Rational(1, 2))
        self.assertEqual(Rational.parse("-6/8"), Rational(-3, 4))

    def test_decimal(self):
        """Test that decimal strings are converted exactly."""
        self.assertEqual(Rational.parse("0.25"), Rational(1, 4))
        self.assertEqual(Rational.parse("1.5/2"), Rational(3, 4))

    def test_whitespace(self):
        self.assertEqual(Rational.parse(" 3 / 4 "), Rational(3, 4))

    def test_malformed(self):
        """Test that non-numeric strings raise MalformedRationalString."""
        for text in ("abc", "", "1/x", "x/2", "1/2/3"):
            with self.subTest(text=text):
                with self.assertRaises(MalformedRationalString):
                    Rational.parse(text)

    def test_malformed_is_value_error(self):
        with self.assertRaises(ValueError):
            Rational.parse("nope")

    def test_zero_denominator(self):
        with self.assertRaises(DivisionByZero):
            Rational.parse("1/0")

    def test_round_trip(self):
        """Test that parsing the string form of a value gives it back."""
        for r in SAMPLES:
            self.assertEqual(Rational.parse(str(r)), r)


class TestFromFloat(unittest.TestCase):
    """Test the float approximation path."""

    def test_exact_decimals(self):
        self.assertEqual(Rational.from_float(0.5), Rational(1, 2))
        self.assertEqual(Rational.from_float(0.1), Rational(1, 10))
        self.assertEqual(Rational.from_float(0.3), Rational(3, 10))
        self.assertEqual(Rational.from_float(2.0), Rational(2))
        self.assertEqual(Rational.from_float(-0.5), Rational(-1, 2))

    def test_approximation_within_tolerance(self):
        """Test that a repeating fraction is approximated within 1e-7."""
        r = Rational.from_float(1 / 3)
        self.assertLess(abs(float(r) - 1 / 3), 1e-7)

    def test_non_finite(self):
        with self.assertRaises(ValueError):
            Rational.from_float(float("nan"))
        with self.assertRaises(ValueError):
            Rational.from_float(float("inf"))


class TestArithmetic(unittest.TestCase):
    """Test arithmetic operators."""

    def test_add_subtract(self):
        self.assertEqual(Rational(1, 2) + Rational(1, 3), Rational(5, 6))
        self.assertEqual(Rational(1, 2) - Rational(3, 4), Rational(-1, 4))

    def test_multiply_divide(self):
        self.assertEqual(Rational(2, 3) * Rational(3, 4), Rational(1, 2))
        self.assertEqual(Rational(1, 2) / Rational(1, 4), Rational(2))

    def test_divide_by_zero(self):
        with self.assertRaises(DivisionByZero):
            Rational(1, 2) / Rational(0)
        with self.assertRaises(DivisionByZero):
            Rational(1, 2) / 0

    def test_modulo(self):
        """Test modulo over a common denominator."""
        self.assertEqual(Rational(7, 2) % 3, Rational(1, 2))
        self.assertEqual(Rational(5) % Rational(3, 2), Rational(1, 2))
        self.assertEqual(Rational(9) % 3, Rational(0))

    def test_modulo_follows_divisor_sign(self):
        """Test that a negative dividend gives a non-negative remainder."""
        self.assertEqual(Rational(-3, 2) % 3, Rational(3, 2))

    def test_modulo_by_zero(self):
        with self.assertRaises(DivisionByZero):
            Rational(1, 2) % Rational(0)

    def test_integer_power(self):
        self.assertEqual(Rational(2, 3) ** 2, Rational(4, 9))
        self.assertEqual(Rational(2, 3) ** -2, Rational(9, 4))
        self.assertEqual(Rational(5, 7) ** 0, Rational(1))

    def test_negative_power_of_zero(self):
        with self.assertRaises(DivisionByZero):
            Rational(0) ** -1

    def test_fractional_power_raises_parts_independently(self):
        """Test that n and d are raised to the exponent's n and d respectively."""
        self.assertEqual(Rational(4, 9) ** Rational(1, 2), Rational(4, 81))

    def test_negate_and_abs(self):
        self.assertEqual(-Rational(1, 2), Rational(-1, 2))
        self.assertEqual(abs(Rational(-1, 2)), Rational(1, 2))

    def test_mixed_with_numbers(self):
        """Test that ints and floats are coerced to Rational."""
        self.assertEqual(Rational(1, 2) + 1, Rational(3, 2))
        self.assertEqual(1 + Rational(1, 2), Rational(3, 2))
        self.assertEqual(2 * Rational(1, 4), Rational(1, 2))
        self.assertEqual(Rational(1, 2) * 0.5, Rational(1, 4))
        self.assertEqual(1 - Rational(1, 4), Rational(3, 4))
        self.assertEqual(1 / Rational(1, 4), Rational(4))

    def test_type_mismatch(self):
        with self.assertRaises(TypeMismatch):
            Rational(1, 2) + "1/2"
        with self.assertRaises(TypeMismatch):
            Rational(1, 2) * None

    def test_laws(self):
        """Test commutativity and inverse operations over sample values."""
        for a in SAMPLES:
            for b in SAMPLES:
                self.assertEqual(a + b, b + a)
                self.assertEqual(a * b, b * a)
                self.assertEqual(a - b + b, a)
                if b != 0:
                    self.assertEqual(a / b * b, a)


class TestComparison(unittest.TestCase):
    """Test ordering and equality."""

    def test_ordering(self):
        self.assertLess(Rational(1, 3), Rational(1, 2))
        self.assertLessEqual(Rational(1, 2), Rational(2, 4))
        self.assertGreater(Rational(-1, 3), Rational(-1, 2))
        self.assertGreaterEqual(Rational(3), 3)

    def test_compare_with_numbers(self):
        self.assertTrue(Rational(1, 2) <= 0.5)
        self.assertTrue(Rational(3, 2) > 1)
        self.assertTrue(0 < Rational(1, 10 ** 12))

    def test_compare_exactly(self):
        """Test values too close for floats to tell apart."""
        big = 10 ** 20
        self.assertLess(Rational(big, big + 1), Rational(big + 1, big + 2))

    def test_compare_with_unsupported_type(self):
        with self.assertRaises(TypeMismatch):
            Rational(1, 2) < "1"

    def test_equality(self):
        self.assertEqual(Rational(2, 4), Rational(1, 2))
        self.assertEqual(Rational(4, 2), 2)
        self.assertNotEqual(Rational(1, 2), "1/2")
        self.assertNotEqual(Rational(1, 2), None)

    def test_hash_matches_integers(self):
        self.assertIn(Rational(4, 2), {2})
        self.assertEqual(len({Rational(1, 2), Rational(2, 4)}), 1)


class TestConversion(unittest.TestCase):
    """Test string and numeric conversion."""

    def test_str(self):
        self.assertEqual(str(Rational(1, 2)), "1/2")
        self.assertEqual(str(Rational(-1, 2)), "-1/2")
        self.assertEqual(str(Rational(6, 2)), "3")
        self.assertEqual(str(Rational(0, 7)), "0")

    def test_repr(self):
        self.assertEqual(repr(Rational(1, 2)), "Rational(1, 2)")

    def test_float_and_floor(self):
        self.assertEqual(float(Rational(1, 4)), 0.25)
        self.assertEqual(math.floor(Rational(7, 2)), 3)
        self.assertEqual(math.floor(Rational(-1, 2)), -1)

    def test_is_integer(self):
        self.assertTrue(Rational(4, 2).is_integer)
        self.assertFalse(Rational(1, 2).is_integer)

    def test_as_rational(self):
        """Test every accepted input form."""
        self.assertEqual(as_rational("1/2"), Rational(1, 2))
        self.assertEqual(as_rational(3), Rational(3))
        self.assertEqual(as_rational(0.25), Rational(1, 4))
        r = Rational(5, 7)
        self.assertIs(as_rational(r), r)

    def test_as_rational_rejects_other_types(self):
        for value in (None, True, [1, 2]):
            with self.subTest(value=value):
                with self.assertRaises(TypeMismatch):
                    as_rational(value)


class TestModuleConstants(unittest.TestCase):
    """Test the constants built when the module is first imported."""

    def test_constants(self):
        self.assertEqual(ZERO, Rational(0, 1))
        self.assertEqual(ONE, Rational(1, 1))
        self.assertFalse(ZERO)

    def test_fresh_import(self):
        """Test that executing the module from scratch builds its constants."""
        spec = importlib.util.spec_from_file_location("fresh_rational", rational_module.__file__)
        fresh = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = fresh
        self.addCleanup(sys.modules.pop, spec.name, None)
        spec.loader.exec_module(fresh)
        self.assertEqual((fresh.ZERO.n, fresh.ZERO.d), (0, 1))
        self.assertEqual((fresh.ONE.n, fresh.ONE.d), (1, 1))


class TestLcm(unittest.TestCase):
    """Test least common multiple of rationals."""

    def test_integers(self):
        self.assertEqual(lcm(4, 4, 3, 3), Rational(12))

    def test_fractions(self):
        self.assertEqual(lcm(Rational(3, 2), 2), Rational(6))
        self.assertEqual(lcm(Rational(1, 2), Rational(1, 3)), Rational(1))
        self.assertEqual(lcm(Rational(2, 3), Rational(3, 4)), Rational(6))

    def test_empty(self):
        self.assertEqual(lcm(), Rational(0))

    def test_non_positive(self):
        with self.assertRaises(ValueError):
            lcm(0, 2)


if __name__ == "__main__":
    unittest.main()
