"""Tests for Real balls and their context."""

import math
import sys
from fractions import Fraction

import mpmath
import pytest

from numctx.core.errors import ContextMismatch, ConversionError, DivisionError, IndeterminateComparison
from numctx.math import BallOrdering, Integer, Rational, Real, RealField, compare, pi


def reference(name: str, value: Fraction, bits: int = 600) -> Fraction:
    """mpmath value of name(value) at `bits` bits, as an exact fraction."""
    with mpmath.workprec(bits):
        x = mpmath.mpf(value.numerator) / value.denominator
        result = getattr(mpmath, name)(x)
        sign, man, exp, _ = result._mpf_
    value = Fraction(int(man)) * Fraction(2) ** int(exp)
    return -value if sign else value


class TestRealConstruction:
    """Test conversion into a real field."""

    def test_third(self, rr53):
        """Test that 1/3 is enclosed."""
        x = rr53(1) / 3
        assert x.contains_point(Fraction(1, 3))
        assert not x.is_exact()

    def test_radius_shrinks_with_precision(self):
        """Test that the enclosure of 1/3 tightens from 10 to 100 bits."""
        radii = [RealField(p)(Fraction(1, 3)).rad for p in range(10, 101, 10)]
        for wide, narrow in zip(radii, radii[1:]):
            assert narrow < wide

    def test_from_native_values(self, rr53):
        """Test ints, floats, strings and exact elements."""
        assert rr53(3).is_exact()
        assert rr53(0.5).is_exact()
        assert rr53("0.1").contains_point(Fraction(1, 10))
        assert rr53(Integer(7)) == 7
        assert rr53(Rational(1, 4)) == Fraction(1, 4)

    def test_non_finite_float(self, rr53):
        """Test that inf and nan do not convert."""
        with pytest.raises(ConversionError):
            rr53(float("inf"))
        with pytest.raises(ConversionError):
            rr53(float("nan"))

    def test_default_context(self):
        """Test Real() with the default precision."""
        assert Real(2).precision == 53
        assert Real(2, RealField(100)).precision == 100

    def test_change_of_precision(self, rr53, rr100):
        """Test that converting between precisions keeps the enclosure."""
        x = rr100(1) / 3
        y = rr53(x)
        assert y.context == rr53
        assert y.rad > x.rad
        assert y.contains_point(Fraction(1, 3))

    def test_from_endpoints(self, rr53):
        """Test the ball around an interval."""
        x = Real.from_endpoints(1, 2, rr53)
        assert x.contains_point(1) and x.contains_point(2)
        assert x.contains_point(Fraction(3, 2))

    def test_to_python(self, rr53):
        """Test the float view of the midpoint."""
        assert float(rr53(1) / 4) == 0.25


class TestRealArithmetic:
    """Test arithmetic on real balls."""

    def test_sampled_soundness(self, rr53, rational_samples):
        """Test that results contain the exact rational results."""
        samples = rational_samples(30)
        for a, b in zip(samples, samples[1:]):
            x, y = rr53(a), rr53(b)
            assert (x + y).contains_point(a + b)
            assert (x - y).contains_point(a - b)
            assert (x * y).contains_point(a * b)
            if b != 0:
                assert (x / y).contains_point(a / b)

    def test_native_operands(self, rr53):
        """Test mixing with ints, fractions and integers."""
        x = rr53(2)
        assert x + 1 == 3
        assert 1 + x == 3
        assert x * Fraction(1, 2) == 1
        assert Integer(3) - x == 1
        assert x ** 10 == 1024
        assert x ** -1 == Fraction(1, 2)

    def test_division_by_ball_containing_zero(self, rr53):
        """Test the two division modes when the divisor contains zero."""
        x = rr53(1)
        y = Real.from_endpoints(-1, 1, rr53)
        with pytest.raises(DivisionError):
            x / y
        assert not x.div(y, extended=True).is_finite()
        with pytest.raises(DivisionError):
            x / 0

    def test_precision_mismatch(self, rr53, rr100):
        """Test that balls of different precisions do not mix."""
        with pytest.raises(ContextMismatch):
            rr53(1) + rr100(1)

    def test_explicit_precision(self, rr53):
        """Test a per-call precision override."""
        x = rr53(1)
        coarse = x.div(3, prec=10)
        fine = x.div(3, prec=200)
        assert coarse.rad > fine.rad
        assert coarse.context == rr53

    def test_in_place(self, rr53):
        """Test += keeps the object and its context."""
        x = rr53(1)
        alias = x
        x += 2
        assert x is alias
        assert x == 3

    def test_abs_and_neg(self, rr53):
        """Test sign operations."""
        assert abs(rr53(-2)) == 2
        assert -rr53(2) == -2


class TestRealFunctions:
    """Test elementary functions."""

    @pytest.mark.parametrize("name", ["exp", "sin", "cos", "atan"])
    def test_functions_contain_reference(self, rr53, rational_samples, name):
        """Test that f(x) contains a high precision reference value."""
        for value in rational_samples(15, bound=20):
            result = getattr(rr53(value), name)()
            assert result.contains_point(reference(name, value))

    def test_negative_arguments(self, rr53):
        """Test odd functions on negative inputs against signed references."""
        x = Fraction(-20, 3)
        expected = reference("sin", x)
        assert expected < 0
        assert rr53(x).sin().contains_point(expected)
        assert not rr53(x).sin().contains_point(-expected)
        assert rr53(x).atan().contains_point(reference("atan", x))

    def test_log_contains_reference(self, rr53, rational_samples):
        """Test log on positive samples."""
        for value in rational_samples(15, bound=100):
            value = abs(value) + Fraction(1, 100)
            assert rr53(value).log().contains_point(reference("log", value))

    def test_sqrt_contains_reference(self, rr53):
        """Test the square root of 2 and of a ball."""
        assert rr53(2).sqrt().contains_point(reference("sqrt", Fraction(2)))
        third = rr53(1) / 3
        assert third.sqrt().contains_point(reference("sqrt", Fraction(1, 3)))

    def test_exact_special_values(self, rr53):
        """Test results that are exact."""
        assert rr53(4).sqrt() == 2
        assert rr53(4).sqrt().is_exact()
        assert rr53(0).exp() == 1
        assert rr53(1).log() == 0
        assert rr53(0).sin() == 0

    def test_domain_errors_give_indeterminate(self, rr53):
        """Test log and sqrt outside their domains."""
        assert not rr53(-1).log().is_finite()
        assert not rr53(-1).sqrt().is_finite()
        assert not rr53(0).log().is_finite()

    def test_input_radius_is_propagated(self, rr53):
        """Test that exp of an interval contains exp at both ends."""
        x = Real.from_endpoints(0, 1, rr53)
        result = x.exp()
        assert result.contains_point(1)
        assert result.contains_point(reference("exp", Fraction(1)))

    def test_accuracy_near_working_precision(self, rr53, rr100):
        """Test that functions of exact inputs are accurate to almost full precision."""
        assert rr53(2).exp().rel_accuracy_bits() >= 45
        assert rr100(Fraction(1, 3)).sin().rel_accuracy_bits() >= 90

    def test_high_precision(self):
        """Test a 1000 bit evaluation."""
        field = RealField(1000)
        x = field(Fraction(1, 7)).exp()
        assert x.contains_point(reference("exp", Fraction(1, 7), bits=3000))
        assert x.rel_accuracy_bits() >= 980

    def test_tan_near_pole_is_indeterminate(self, rr53):
        """Test tan at pi/2."""
        assert not (rr53.pi() / 2).tan().is_finite()

    def test_tan(self, rr53):
        """Test tan of a regular point."""
        assert rr53(1).tan().contains_point(reference("tan", Fraction(1)))

    def test_pi(self, rr53):
        """Test the pi constant."""
        assert pi(rr53).contains_point(math.pi)
        assert pi().context == RealField(53)
        assert rr53.pi().sin().contains_zero()


class TestRealComparison:
    """Test certified comparison."""

    def test_decided_comparisons(self, rr53):
        """Test comparisons of disjoint balls."""
        assert rr53(1) < rr53(2)
        assert rr53(3) > 2
        assert rr53(2) >= 2
        assert rr53(2) <= rr53(2)

    def test_undecided_comparison_raises(self, rr53):
        """Test overlapping balls."""
        third = rr53(1) / 3
        other = rr53(Fraction(1, 3))
        assert third.compare(other) is BallOrdering.INDETERMINATE
        with pytest.raises(IndeterminateComparison):
            third < other

    def test_module_compare(self, rr53):
        """Test compare() with a plain number on either side."""
        assert compare(rr53(1), 2) is BallOrdering.LESS
        assert compare(3, rr53(2)) is BallOrdering.GREATER
        with pytest.raises(ConversionError):
            compare(1, 2)

    def test_structural_equality(self, rr53):
        """Test that == compares midpoint and radius exactly."""
        third = rr53(1) / 3
        wider = third.union(rr53(1), 53)
        assert third == third.copy()
        assert third != wider
        assert wider.contains(third)

    def test_equal_balls_are_not_certified_equal(self, rr53):
        """Test that == after conversion is not a proof of equality."""
        third = rr53(1) / 3
        assert third == Fraction(1, 3)
        assert compare(third, Fraction(1, 3)) is BallOrdering.INDETERMINATE


class TestRealAccessors:
    """Test parts and accuracy queries."""

    def test_midpoint_and_radius(self, rr53):
        """Test exact midpoint and radius balls."""
        x = rr53(1) / 3
        assert x.midpoint().is_exact()
        assert x.radius().is_exact()
        assert x.radius() > 0

    def test_endpoints(self, rr53):
        """Test lower and upper endpoints."""
        x = Real.from_endpoints(1, 2, rr53)
        assert x.lower().to_fraction() <= 1
        assert x.upper().to_fraction() >= 2

    def test_accuracy(self, rr53):
        """Test rel_accuracy_bits conventions."""
        assert rr53(1).rel_accuracy_bits() == sys.maxsize
        assert rr53.indeterminate().rel_accuracy_bits() == -sys.maxsize
        assert str(rr53.indeterminate()) == "[+/- inf]"
