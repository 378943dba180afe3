"""Tests for algebraic number fields."""

from fractions import Fraction

import pytest

from numctx.core.errors import ConfigurationError, ContextMismatch, ConversionError, DivisionError
from numctx.math import (
    FiniteField,
    IntModCtx,
    IntPoly,
    NumberField,
    NumFldElem,
    PolynomialRing,
    Rational,
    RatPoly,
    cyclotomic,
)


class TestNumberFieldArithmetic:
    """Test arithmetic in Q(sqrt(2)) and friends."""

    def test_generator_squares_to_two(self, qsqrt2):
        """Test a^2 = 2."""
        a = qsqrt2.gen()
        assert a * a == 2
        assert str(a * a) == "2"

    def test_reduction(self, qsqrt2):
        """Test that a^3 reduces to 2a."""
        assert qsqrt2([0, 0, 0, 1]) == qsqrt2([0, 2])

    def test_inverse(self, qsqrt2):
        """Test 1 / (1 + a) = a - 1."""
        a = qsqrt2.gen()
        assert (1 + a).inv() == a - 1
        assert (1 + a) * (1 + a).inv() == 1

    def test_division(self, qsqrt2):
        """Test (x / y) * y = x."""
        x = qsqrt2([Fraction(1, 3), 2])
        y = qsqrt2([5, -1])
        assert (x / y) * y == x

    def test_zero_has_no_inverse(self, qsqrt2):
        """Test division by zero."""
        with pytest.raises(DivisionError):
            qsqrt2.zero().inv()
        with pytest.raises(DivisionError):
            qsqrt2.gen() / 0

    def test_rational_coercion(self, qsqrt2):
        """Test mixing with rationals."""
        a = qsqrt2.gen()
        assert a + Rational(1, 2) == qsqrt2([Fraction(1, 2), 1])
        assert (a * a).to_fraction() == 2

    def test_from_rational_polynomial(self, qsqrt2):
        """Test conversion of an integer polynomial in the generator."""
        assert qsqrt2(IntPoly([1, 0, 1])) == 3

    def test_positive_characteristic_refused(self, qsqrt2, gf9):
        """Test that finite field elements and polynomials over them do not convert."""
        with pytest.raises(ConversionError):
            qsqrt2(FiniteField(5)(3))
        with pytest.raises(ConversionError):
            qsqrt2(gf9.gen())
        with pytest.raises(ConversionError):
            qsqrt2(PolynomialRing(IntModCtx(5))([1, 1]))

    def test_to_fraction_needs_rational_value(self, qsqrt2):
        """Test that a irrational element has no rational value."""
        with pytest.raises(ConversionError):
            qsqrt2.gen().to_fraction()

    def test_printing(self, qsqrt2):
        """Test the printed form."""
        assert str(qsqrt2([Fraction(-1, 2), 3])) == "3*a - 1/2"

    def test_cubic_field(self):
        """Test a degree three field x^3 - x - 1."""
        k = NumberField([-1, -1, 0, 1])
        a = k.gen()
        assert a ** 3 == a + 1
        assert a ** 5 * a ** -5 == 1

    def test_cyclotomic_field(self):
        """Test that a primitive 5th root of unity has order 5."""
        k = NumberField(cyclotomic(5))
        z = k.gen()
        assert z ** 5 == 1
        assert z ** 4 + z ** 3 + z ** 2 + z + 1 == 0

    def test_mixing_fields(self, qsqrt2):
        """Test that Q(sqrt 2) and Q(sqrt 3) do not mix."""
        other = NumberField([-3, 0, 1])
        with pytest.raises(ContextMismatch):
            qsqrt2.gen() + other.gen()


class TestNumberFieldStructure:
    """Test field parameters."""

    def test_degree_and_polynomial(self, qsqrt2):
        """Test degree and the defining polynomial."""
        assert qsqrt2.degree == 2
        assert qsqrt2.defining_polynomial() == RatPoly([-2, 0, 1])

    def test_from_polynomial(self):
        """Test building the field from a Polynomial."""
        assert NumberField(IntPoly([-2, 0, 1])) == NumberField([-2, 0, 1])

    def test_rational_defining_polynomial(self):
        """Test a non-monic rational defining polynomial."""
        k = NumberField([Fraction(-3, 2), 0, 2])
        a = k.gen()
        assert a * a == Fraction(3, 4)

    def test_reducible_defining_polynomial(self):
        """Test that 2x^2 - 1/2 is rejected as reducible."""
        with pytest.raises(ConfigurationError):
            NumberField([Fraction(-1, 2), 0, 2])

    def test_fields(self, qsqrt2):
        """Test the field view."""
        x = qsqrt2([Fraction(1, 2), -3])
        assert x.to_fields() == [[1, 2], [-3, 1]]
        assert NumFldElem.from_fields(qsqrt2, [[1, 2], [-3, 1]]) == x
        with pytest.raises(DivisionError):
            NumFldElem.from_fields(qsqrt2, [[1, 0]])
