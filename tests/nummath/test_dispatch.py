"""Tests for operator dispatch, coercion and in-place variants."""

from fractions import Fraction

import pytest

from numctx.core.errors import ContextMismatch, ConversionError
from numctx.math import (
    ZZ,
    FiniteField,
    Integer,
    IntMod,
    IntModCtx,
    IntPoly,
    Rational,
    Real,
    TypePrecedence,
)
from numctx.math.dispatch import binary, coerce_operand


class TestCoercion:
    """Test coerce_operand."""

    def test_native_value_moves_into_context(self, z12):
        """Test that an int becomes a residue."""
        operand = coerce_operand(z12(1), 25)
        assert isinstance(operand, IntMod)
        assert operand.residue == 1
        assert operand.context is z12

    def test_richer_type_defers(self):
        """Test that a higher precedence operand returns NotImplemented."""
        assert coerce_operand(Integer(1), Rational(1, 2)) is NotImplemented

    def test_unrelated_object_defers(self):
        """Test that arbitrary objects are not coerced."""
        assert coerce_operand(Integer(1), object()) is NotImplemented
        assert coerce_operand(Integer(1), True) is NotImplemented

    def test_strict_and_lenient(self):
        """Test the two failure modes of coercion."""
        with pytest.raises(ConversionError):
            coerce_operand(Integer(1), Fraction(1, 2))
        assert coerce_operand(Integer(1), Fraction(1, 2), strict=False) is None

    def test_precedence_order(self):
        """Test the promotion order."""
        assert TypePrecedence.INTEGER < TypePrecedence.RATIONAL < TypePrecedence.INTMOD
        assert TypePrecedence.REAL < TypePrecedence.COMPLEX < TypePrecedence.POLYNOMIAL < TypePrecedence.MATRIX


class TestOperators:
    """Test forward, reflected and in-place operators."""

    def test_forward_and_reflected_agree(self, z12):
        """Test that a + 5 and 5 + a give the same residue."""
        a = z12(9)
        assert a + 5 == 5 + a
        assert (a - 5).residue == 4
        assert (5 - a).residue == 8

    def test_reflected_division(self, z7):
        """Test 1 / a."""
        assert (1 / z7(3)) * 3 == 1

    def test_integer_promotes_into_intmod(self, z12):
        """Test that an Integer on the left defers to the IntMod."""
        result = Integer(20) + z12(1)
        assert isinstance(result, IntMod)
        assert result.residue == 9

    def test_rational_promotes_into_real(self, rr53):
        """Test that a Rational on the left defers to the Real."""
        result = Rational(1, 2) + rr53(1)
        assert isinstance(result, Real)
        assert result == Fraction(3, 2)

    def test_scalar_into_polynomial(self):
        """Test scaling a polynomial by a base ring element on the left."""
        assert Integer(2) * IntPoly([1, 1]) == IntPoly([2, 2])

    def test_unsupported_operand(self):
        """Test that unrelated objects raise TypeError."""
        with pytest.raises(TypeError):
            Integer(1) + object()
        with pytest.raises(TypeError):
            Integer(1) + [1, 2]

    def test_characteristics_do_not_mix(self, qsqrt2):
        """Test that GF(5) and Q(sqrt 2) elements refuse each other in either order."""
        three = FiniteField(5)(3)
        with pytest.raises(ConversionError):
            three + qsqrt2.gen()
        with pytest.raises(ConversionError):
            qsqrt2.gen() * three

    def test_binary_by_name(self, z12):
        """Test the shared dispatch entry point."""
        assert binary(z12(5), 10, "mul").residue == 2
        assert binary(z12(5), 10, "sub", reflected=True).residue == 5

    def test_context_check_on_every_operation(self):
        """Test that mixed moduli fail for all four operations."""
        a, b = IntModCtx(5)(1), IntModCtx(7)(1)
        for op in ("add", "sub", "mul", "div"):
            with pytest.raises(ContextMismatch):
                binary(a, b, op)

    def test_context_mismatch_is_an_assertion(self):
        """Test that the defect class derives from AssertionError."""
        assert issubclass(ContextMismatch, AssertionError)


class TestInPlace:
    """Test in-place operators and the named *_assign variants."""

    def test_iadd_mutates(self, z12):
        """Test that += writes the payload back."""
        a = z12(11)
        alias = a
        a += 3
        assert a is alias
        assert a.residue == 2

    def test_add_assign(self, z12):
        """Test the named variants."""
        a = z12(4)
        a.add_assign(10)
        assert a.residue == 2
        a.mul_assign(z12(5))
        assert a.residue == 10
        a.sub_assign(11)
        assert a.residue == 11
        a.div_assign(5)
        assert a.residue == 7

    def test_in_place_does_not_touch_copies(self, z12):
        """Test that a copy keeps its own payload."""
        a = z12(1)
        b = a.copy()
        a += 1
        assert b.residue == 1

    def test_type_changing_in_place_rebinds(self):
        """Test that Integer /= 2 rebinds to a Rational."""
        a = Integer(3)
        original = a
        a /= 2
        assert isinstance(a, Rational)
        assert original == 3

    def test_type_changing_assign_raises(self):
        """Test that div_assign cannot turn an Integer into a Rational."""
        a = Integer(3)
        with pytest.raises(ConversionError):
            a.div_assign(2)
        assert a == 3

    def test_unsupported_assign_raises(self):
        """Test a named variant with an unrelated operand."""
        with pytest.raises(TypeError):
            Integer(1).add_assign(object())

    def test_assign_shares_context(self):
        """Test that the receiver keeps its context after mutation."""
        a = Integer(1)
        a.add_assign(Integer(2))
        assert a.context is ZZ
        assert a == 3
