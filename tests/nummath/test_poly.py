"""Tests for univariate polynomials."""

from fractions import Fraction

import pytest

from numctx.core.errors import ContextMismatch, ConversionError, DivisionError
from numctx.math import (
    QQ,
    ZZ,
    Integer,
    IntModCtx,
    IntPoly,
    Polynomial,
    PolynomialRing,
    RatPoly,
    Rational,
    cyclotomic,
)
from numctx.math.poly import format_polynomial


class TestPolynomialConstruction:
    """Test building polynomials."""

    def test_trailing_zeros_stripped(self):
        """Test that the degree ignores trailing zeros."""
        p = IntPoly([1, 2, 0, 0])
        assert p.degree() == 1
        assert IntPoly([0, 0]).degree() == -1

    def test_coefficients_reduce_in_base_ring(self):
        """Test that coefficients over Z/5Z are reduced."""
        ring = PolynomialRing(IntModCtx(5), "t")
        p = ring([6, 10, 7])
        assert p.to_python() == [1, 0, 2]
        assert str(p) == "2*t^2 + 1"

    def test_printing(self):
        """Test the printed forms."""
        assert str(IntPoly([1, 2, 3])) == "3*x^2 + 2*x + 1"
        assert str(IntPoly([-1, 0, -1])) == "-x^2 - 1"
        assert str(IntPoly([])) == "0"
        assert str(RatPoly([Fraction(1, 2), 1], var="y")) == "y + 1/2"

    def test_format_wraps_compound_coefficients(self):
        """Test parentheses around sums."""
        assert format_polynomial(["1", "a + 1"], "x") == "(a + 1)*x + 1"

    def test_polynomial_coerces_rationals_in_integer_ring(self):
        """Test that a non-integral coefficient is rejected over ZZ."""
        with pytest.raises(ConversionError):
            IntPoly([Fraction(1, 2)])

    def test_accessors(self):
        """Test coefficient access."""
        p = IntPoly([3, 0, 5])
        assert p.coefficient(2) == 5
        assert p.coefficient(7) == 0
        assert p.leading_coefficient() == 5
        assert not p.is_monic()
        assert IntPoly([1, 1]).is_monic()
        assert IntPoly([4]).is_constant()

    def test_change_of_ring(self):
        """Test moving an integer polynomial to QQ[x]."""
        p = IntPoly([1, 2])
        q = PolynomialRing(QQ, "x")(p)
        assert q.base_ring == QQ
        assert q == RatPoly([1, 2])

    def test_change_of_variable_rejected(self):
        """Test that x and y rings do not convert into each other."""
        with pytest.raises(ConversionError):
            PolynomialRing(ZZ, "y")(IntPoly([1, 2]))


class TestPolynomialArithmetic:
    """Test ring operations."""

    def test_add_sub(self):
        """Test addition, subtraction and (a + b) - b = a."""
        a, b = IntPoly([1, 2, 3]), IntPoly([0, -2, -3, 4])
        assert a + b == IntPoly([1, 0, 0, 4])
        assert (a + b) - b == a

    def test_mul(self):
        """Test (x + 1)(x - 1) = x^2 - 1."""
        assert IntPoly([1, 1]) * IntPoly([-1, 1]) == IntPoly([-1, 0, 1])

    def test_scalars(self):
        """Test multiplication by native and base ring scalars."""
        p = IntPoly([1, 2])
        assert p * 3 == IntPoly([3, 6])
        assert 3 * p == IntPoly([3, 6])
        assert p * Integer(2) == IntPoly([2, 4])
        assert p + 1 == IntPoly([2, 2])

    def test_scalar_division_over_field(self):
        """Test dividing a rational polynomial by a scalar."""
        assert RatPoly([2, 4]) / 2 == RatPoly([1, 2])

    def test_power(self):
        """Test (x + 1)^3."""
        assert IntPoly([1, 1]) ** 3 == IntPoly([1, 3, 3, 1])

    def test_mixed_rings_mismatch(self):
        """Test that ZZ[x] and (Z/5)[x] do not mix."""
        with pytest.raises(ContextMismatch):
            IntPoly([1]) + PolynomialRing(IntModCtx(5))([1])

    def test_cyclotomic(self):
        """Test x^6 - 1 = Phi1 Phi2 Phi3 Phi6."""
        product = cyclotomic(1) * cyclotomic(2) * cyclotomic(3) * cyclotomic(6)
        assert product == IntPoly([-1, 0, 0, 0, 0, 0, 1])

    def test_cyclotomic_rejects_zero(self):
        """Test that n must be positive."""
        with pytest.raises(ConversionError):
            cyclotomic(0)


class TestPolynomialDivision:
    """Test Euclidean division over fields."""

    def test_divmod(self):
        """Test a = q*b + r with deg r < deg b."""
        a = RatPoly([1, 0, 0, 1])
        b = RatPoly([1, 2])
        q, r = divmod(a, b)
        assert q * b + r == a
        assert r.degree() < b.degree()

    def test_floordiv_and_mod(self):
        """Test (x^2 - 1) // (x - 1) = x + 1."""
        a, b = RatPoly([-1, 0, 1]), RatPoly([-1, 1])
        assert a // b == RatPoly([1, 1])
        assert (a % b).degree() == -1

    def test_division_needs_field(self):
        """Test that Euclidean division over ZZ is refused."""
        with pytest.raises(DivisionError):
            divmod(IntPoly([1, 1]), IntPoly([1]))

    def test_division_by_zero(self):
        """Test division by the zero polynomial."""
        with pytest.raises(DivisionError):
            RatPoly([1, 1]) // RatPoly([])

    def test_gcd(self):
        """Test a monic gcd."""
        a = RatPoly([-1, 0, 1])
        b = RatPoly([2, 2])
        assert a.gcd(b) == RatPoly([1, 1])
        assert a.gcd(RatPoly([])) == RatPoly([-1, 0, 1])

    def test_gcd_over_finite_prime_field(self):
        """Test a gcd in GF(7)[x]."""
        ring = PolynomialRing(IntModCtx(7))
        a = ring([6, 0, 1])
        b = ring([1, 1])
        assert a.gcd(b) == ring([1, 1])

    def test_inverse_of_constant(self):
        """Test that only constants are units."""
        assert RatPoly([2]).inv() == RatPoly([Fraction(1, 2)])
        with pytest.raises(DivisionError):
            RatPoly([0, 1]).inv()


class TestPolynomialCalculus:
    """Test derivative and evaluation."""

    def test_derivative(self):
        """Test d/dx (x^3 + 2x) = 3x^2 + 2."""
        assert IntPoly([0, 2, 0, 1]).derivative() == IntPoly([2, 0, 3])

    def test_evaluate_integer(self):
        """Test evaluation at an integer."""
        p = IntPoly([1, -3, 2])
        assert p(2) == 3
        assert isinstance(p(2), Integer)

    def test_evaluate_promotes(self):
        """Test evaluation at a rational."""
        value = IntPoly([1, 1]).evaluate(Rational(1, 2))
        assert value == Rational(3, 2)

    def test_evaluate_zero_polynomial(self):
        """Test that the zero polynomial evaluates to zero."""
        assert IntPoly([])(5) == 0

    def test_fields(self):
        """Test the nested field view."""
        p = PolynomialRing(IntModCtx(5))([1, 2])
        assert p.to_fields() == [[5, 1], [5, 2]]
        assert Polynomial.from_fields(p.context, p.to_fields()) == p
