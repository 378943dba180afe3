"""Tests for integers mod n."""

from fractions import Fraction

import pytest

from numctx.core.errors import ContextMismatch, ConversionError, DivisionError
from numctx.math import Integer, IntMod, IntModCtx, Rational


class TestIntModReduction:
    """Test that residues are always reduced."""

    def test_reduction_on_construction(self, z12):
        """Test that 13 and 1 are the same residue mod 12."""
        assert z12(13) == z12(1)
        assert z12(-1).residue == 11

    def test_huge_values_reduce(self, z12):
        """Test reduction of a big integer."""
        assert z12(10 ** 40 + 5).residue == (10 ** 40 + 5) % 12

    def test_results_stay_reduced(self, z12):
        """Test that every operation lands back in [0, 12)."""
        for a in range(-15, 15):
            for b in range(-5, 5):
                x, y = z12(a), z12(b)
                for result in (x + y, x - y, x * y, -x):
                    assert 0 <= result.residue < 12

    def test_add_then_subtract(self, z12):
        """Test that (a + b) - b == a."""
        for a in range(12):
            for b in range(12):
                assert (z12(a) + z12(b)) - z12(b) == z12(a)

    def test_compare_with_integer(self, z12):
        """Test that plain integers are read as residues."""
        assert z12(5) == 17
        assert z12(5) == Integer(-7)

    def test_rational_with_invertible_denominator(self, z7):
        """Test that 1/2 maps to the inverse of 2."""
        assert z7(Fraction(1, 2)) == z7(4)
        assert z7(Rational(3, 2)) == z7(5)

    def test_rational_with_non_unit_denominator(self, z12):
        """Test that 1/2 has no image mod 12."""
        with pytest.raises(ConversionError):
            z12(Fraction(1, 2))

    def test_equality_with_non_convertible_value(self, z12):
        """Test that == answers False instead of raising."""
        assert not z12(6) == Fraction(1, 2)

    def test_lift(self, z12):
        """Test the canonical integer representative."""
        lifted = z12(-1).lift()
        assert isinstance(lifted, Integer)
        assert lifted == 11


class TestIntModUnits:
    """Test inversion and powers."""

    def test_inverse_of_unit(self, z12):
        """Test that 5 * 5 = 1 mod 12."""
        assert z12(5).inv() == z12(5)
        assert z12(5).is_unit()

    def test_inverse_of_non_unit(self, z12):
        """Test that a zero divisor has no inverse."""
        assert not z12(4).is_unit()
        with pytest.raises(DivisionError):
            z12(4).inv()
        with pytest.raises(DivisionError):
            z12(1) / z12(4)

    def test_division_in_prime_field(self, z7):
        """Test division in Z/7Z."""
        assert z7(3) / z7(5) * z7(5) == z7(3)
        assert z7.is_field
        assert not IntModCtx(12).is_field

    def test_fermat(self, z7):
        """Test a^(p-1) = 1 for units."""
        for a in range(1, 7):
            assert z7(a) ** 6 == 1

    def test_negative_power(self, z7):
        """Test a^-1 agrees with inv()."""
        assert z7(3) ** -1 == z7(3).inv()
        assert z7(3) ** -2 == z7(3).inv() ** 2

    def test_large_exponent(self, z12):
        """Test a power with a large exponent."""
        assert z12(7) ** (10 ** 30) == pow(7, 10 ** 30, 12)


class TestIntModContexts:
    """Test mixing of moduli."""

    def test_different_moduli_mismatch(self):
        """Test that combining mod 12 and mod 13 fails fast."""
        a = IntMod(1, IntModCtx(12))
        b = IntMod(1, IntModCtx(13))
        with pytest.raises(ContextMismatch):
            a + b
        with pytest.raises(ContextMismatch):
            a == b

    def test_equal_contexts_mix(self):
        """Test that separately built equal contexts combine."""
        a = IntMod(3, IntModCtx(12))
        b = IntMod(4, IntModCtx(12))
        assert (a * b).residue == 0

    def test_result_shares_context(self, z12):
        """Test that results carry the operand context."""
        assert (z12(3) + 4).context is z12

    def test_string_and_fields(self, z12):
        """Test the printed form and the field view."""
        x = z12(29)
        assert str(x) == "5"
        assert x.to_fields() == [12, 5]
        assert x.modulus == 12
