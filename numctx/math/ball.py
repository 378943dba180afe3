"""
Certified ball arithmetic.

A Ball (m, r) stands for every real number in [m - r, m + r]. Each operation
returns a ball that contains the exact result for every choice of inputs from
the operand balls: the midpoint is computed at the requested precision and
the radius collects the propagated input radii plus every rounding error,
always rounded upward.

Balls are immutable; all operations are pure and take the working precision
explicitly. The context-bearing Real and Complex types wrap them.
"""

from __future__ import annotations

import sys
from enum import Enum
from fractions import Fraction

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import settings
from ..core.errors import ConversionError, DivisionError
from ..core.logging import get_context_logger
from .arf import Arf, arf_from_fraction, evaluate, pi_value
from .mag import Mag

logger = get_context_logger(__name__, component="ball")


class BallOrdering(Enum):
    """Outcome of a certified comparison."""

    LESS = "less"
    GREATER = "greater"
    EQUAL = "equal"
    INDETERMINATE = "indeterminate"


class Ball(BaseModel):
    """
    Midpoint-radius interval.

    Examples:
        >>> third = Ball.from_fraction(Fraction(1, 3), 53)
        >>> third.contains_point(Fraction(1, 3))
        True
        >>> third.is_exact()
        False
    """

    model_config = ConfigDict(frozen=True)

    mid: Arf = Field(default_factory=Arf)
    rad: Mag = Field(default_factory=Mag)

    # Construction

    @classmethod
    def make(cls, mid: Arf, rad: Mag) -> Ball:
        return cls.model_construct(mid=mid, rad=rad)

    @classmethod
    def exact(cls, mid: Arf) -> Ball:
        return cls.make(mid, Mag.zero())

    @classmethod
    def indeterminate(cls) -> Ball:
        """The ball containing every real number."""
        return cls.make(Arf(), Mag.inf())

    @classmethod
    def from_fraction(cls, value: Fraction, prec: int) -> Ball:
        mid, err = arf_from_fraction(value, prec)
        return cls.make(mid, err)

    @classmethod
    def from_endpoints(cls, lower: Fraction, upper: Fraction, prec: int) -> Ball:
        """Smallest ball at `prec` containing [lower, upper]."""
        lower, upper = Fraction(lower), Fraction(upper)
        if lower > upper:
            raise ConversionError(f"[{lower}, {upper}]", "interval", "Ball")
        mid, err = arf_from_fraction((lower + upper) / 2, prec)
        return cls.make(mid, Mag.from_fraction((upper - lower) / 2).add(err))

    @classmethod
    def from_fields(cls, fields: list) -> Ball:
        mid, rad = fields
        return cls.make(Arf.from_fields(mid), Mag.from_fields(rad))

    def to_fields(self) -> list:
        return [self.mid.to_fields(), self.rad.to_fields()]

    def set_round(self, prec: int) -> Ball:
        """Round the midpoint to `prec` bits; the radius absorbs the error."""
        mid, err = self.mid.round(prec)
        if err.is_zero():
            return self
        return Ball.make(mid, self.rad.add(err))

    # Predicates

    def is_exact(self) -> bool:
        return self.rad.is_zero()

    def is_finite(self) -> bool:
        return self.rad.is_finite()

    def is_zero(self) -> bool:
        return self.mid.is_zero() and self.rad.is_zero()

    def lower(self) -> Arf:
        """Exact lower endpoint."""
        return self.mid.sub_exact(Arf.from_mag(self.rad))

    def upper(self) -> Arf:
        """Exact upper endpoint."""
        return self.mid.add_exact(Arf.from_mag(self.rad))

    def contains_zero(self) -> bool:
        if not self.is_finite():
            return True
        return abs(self.mid) <= Arf.from_mag(self.rad)

    def contains_point(self, value: Fraction) -> bool:
        """Whether the exact rational `value` lies in the ball."""
        if not self.is_finite():
            return True
        return abs(Fraction(value) - self.mid.to_fraction()) <= self.rad.to_fraction()

    def contains(self, other: Ball) -> bool:
        """Whether every point of `other` lies in this ball."""
        if not self.is_finite():
            return True
        if not other.is_finite():
            return False
        return self.lower() <= other.lower() and other.upper() <= self.upper()

    def overlaps(self, other: Ball) -> bool:
        if not (self.is_finite() and other.is_finite()):
            return True
        return self.lower() <= other.upper() and other.lower() <= self.upper()

    def compare(self, other: Ball) -> BallOrdering:
        """
        Certified three-valued comparison.

        EQUAL only for two identical exact points; LESS and GREATER only when
        the balls are disjoint.
        """
        if not (self.is_finite() and other.is_finite()):
            return BallOrdering.INDETERMINATE
        if self.is_exact() and other.is_exact() and self.mid == other.mid:
            return BallOrdering.EQUAL
        if self.upper() < other.lower():
            return BallOrdering.LESS
        if self.lower() > other.upper():
            return BallOrdering.GREATER
        return BallOrdering.INDETERMINATE

    # Accuracy

    def bits(self) -> int:
        """Bits in the midpoint mantissa."""
        return self.mid.bits()

    def rel_accuracy_bits(self) -> int:
        """
        Relative accuracy in bits: about log2(|mid| / rad).

        sys.maxsize for exact balls, -sys.maxsize when the ball carries no
        information (infinite radius, or a zero midpoint with a radius).
        """
        if self.rad.is_zero():
            return sys.maxsize
        if not self.rad.is_finite() or self.mid.is_zero():
            return -sys.maxsize
        rad_exponent = self.rad.exponent + self.rad.mantissa.bit_length() - 1
        return self.mid.magnitude_exponent() - rad_exponent

    def union(self, other: Ball, prec: int) -> Ball:
        """A ball containing both balls."""
        if not (self.is_finite() and other.is_finite()):
            return Ball.indeterminate()
        lower = min(self.lower(), other.lower())
        upper = max(self.upper(), other.upper())
        return Ball.from_endpoints(lower.to_fraction(), upper.to_fraction(), prec)

    # Arithmetic

    def neg(self) -> Ball:
        return Ball.make(-self.mid, self.rad)

    def abs(self) -> Ball:
        """|x|; when the ball straddles zero, [|m| - r, |m| + r] still covers [0, |m| + r]."""
        return Ball.make(abs(self.mid), self.rad)

    def add(self, other: Ball, prec: int) -> Ball:
        mid, err = self.mid.add(other.mid, prec)
        return Ball.make(mid, self.rad.add(other.rad).add(err))

    def sub(self, other: Ball, prec: int) -> Ball:
        mid, err = self.mid.sub(other.mid, prec)
        return Ball.make(mid, self.rad.add(other.rad).add(err))

    def mul(self, other: Ball, prec: int) -> Ball:
        mid, err = self.mid.mul(other.mid, prec)
        rad = (self.mid.mag().mul(other.rad)
               .add(other.mid.mag().mul(self.rad))
               .add(self.rad.mul(other.rad))
               .add(err))
        return Ball.make(mid, rad)

    def div(self, other: Ball, prec: int, extended: bool = False) -> Ball:
        """
        Quotient self / other.

        A divisor that contains zero raises DivisionError, or gives the
        indeterminate ball with extended=True.
        """
        if other.contains_zero():
            if extended:
                return Ball.indeterminate()
            raise DivisionError(f"divisor {other.to_string(10)} contains zero")
        mid, err = self.mid.div(other.mid, prec)
        numerator = self.mid.mag().mul(other.rad).add(other.mid.mag().mul(self.rad))
        if numerator.is_zero():
            return Ball.make(mid, err)
        gap = abs(other.mid).sub_exact(Arf.from_mag(other.rad)).mag_lower()
        denominator = other.mid.mag_lower().mul_lower(gap)
        return Ball.make(mid, numerator.div(denominator).add(err))

    def inv(self, prec: int, extended: bool = False) -> Ball:
        return Ball.exact(Arf.from_int(1)).div(self, prec, extended)

    def sqr(self, prec: int) -> Ball:
        """x * x, known to be non-negative even when the ball straddles zero."""
        if not self.is_finite():
            return Ball.indeterminate()
        if self.is_exact() or not self.contains_zero():
            return self.mul(self, prec)
        bound = abs(self.mid).mag().add(self.rad)
        half = bound.mul(bound).mul_2exp(-1)
        return Ball.make(Arf.from_mag(half), half).set_round(prec)

    def pow_int(self, exponent: int, prec: int) -> Ball:
        """Integer power by repeated squaring."""
        if exponent < 0:
            return self.pow_int(-exponent, prec).inv(prec)
        result = Ball.exact(Arf.from_int(1))
        base = self
        while exponent:
            if exponent & 1:
                result = result.mul(base, prec)
            exponent >>= 1
            if exponent:
                base = base.sqr(prec)
        return result

    # Elementary functions

    def sqrt(self, prec: int) -> Ball:
        if not self.is_finite():
            return Ball.indeterminate()
        if self.is_exact():
            if self.mid.sign() < 0:
                return Ball.indeterminate()
            mid, err = self.mid.sqrt(prec)
            return Ball.make(mid, err)
        lower = self.lower()
        if lower.sign() < 0:
            return Ball.indeterminate()
        if lower.is_zero():
            # Cover [0, sqrt(upper)] by the ball (b/2, b/2)
            root, err = self.upper().sqrt(settings.MAG_BITS)
            bound = root.mag().add(err)
            return Ball.make(Arf.from_mag(bound).mul_2exp(-1), bound.mul_2exp(-1))
        mid, err = self.mid.sqrt(prec)
        root, root_err = lower.sqrt(settings.MAG_BITS)
        slope = Mag.from_int(1).div(root.mag_lower().sub_lower(root_err).mul_2exp(1))
        return Ball.make(mid, slope.mul(self.rad).add(err))

    def exp(self, prec: int) -> Ball:
        if not self.is_finite():
            return Ball.indeterminate()
        if self.is_zero():
            return Ball.exact(Arf.from_int(1))
        slope = _upper_bound("exp", self.upper(), relative=True) if not self.is_exact() else Mag.zero()
        return self._elementary("exp", prec, relative=True, slope=slope)

    def log(self, prec: int) -> Ball:
        if not self.is_finite() or self.lower().sign() <= 0:
            return Ball.indeterminate()
        if self.is_exact() and self.mid == Arf.from_int(1):
            return Ball.exact(Arf())
        slope = Mag.from_int(1).div(self.lower().mag_lower())
        return self._elementary("log", prec, relative=False, slope=slope)

    def sin(self, prec: int) -> Ball:
        if not self.is_finite():
            return Ball.indeterminate()
        if self.is_zero():
            return Ball.exact(Arf())
        return self._elementary("sin", prec, relative=False, slope=Mag.from_int(1))

    def cos(self, prec: int) -> Ball:
        if not self.is_finite():
            return Ball.indeterminate()
        if self.is_zero():
            return Ball.exact(Arf.from_int(1))
        return self._elementary("cos", prec, relative=False, slope=Mag.from_int(1))

    def tan(self, prec: int) -> Ball:
        """sin/cos; indeterminate when the cosine ball contains zero."""
        if self.is_zero():
            return Ball.exact(Arf())
        wp = prec + settings.GUARD_BITS
        return self.sin(wp).div(self.cos(wp), wp, extended=True).set_round(prec)

    def atan(self, prec: int) -> Ball:
        if not self.is_finite():
            return Ball.indeterminate()
        if self.is_zero():
            return Ball.exact(Arf())
        return self._elementary("atan", prec, relative=False, slope=Mag.from_int(1))

    def _elementary(self, name: str, prec: int, relative: bool, slope: Mag) -> Ball:
        """
        Evaluate `name` at the midpoint with adaptive working precision.

        The working precision starts at prec + GUARD_BITS and grows until the
        evaluation error is below one ulp at `prec`, or below the error
        propagated from the input radius (slope * rad), or the extra
        precision reaches MAX_EXTRA_PRECISION.
        """
        propagated = slope.mul(self.rad) if not self.rad.is_zero() else Mag.zero()
        limit = prec + settings.MAX_EXTRA_PRECISION
        wp = prec + settings.GUARD_BITS
        while True:
            value = evaluate(name, self.mid, wp)
            error = _evaluation_error(value, wp, relative)
            if wp >= limit or error <= _ulp(value, prec) or (not propagated.is_zero() and error <= propagated):
                break
            next_wp = min(limit, wp + max(wp - prec, settings.GUARD_BITS))
            logger.debug(
                "Raising working precision",
                extra_data={"function": name, "prec": prec, "wp": next_wp},
            )
            wp = next_wp
        mid, round_err = value.round(prec)
        return Ball.make(mid, error.add(propagated).add(round_err))

    # Formatting

    def to_string(self, digits: int = 15) -> str:
        if not self.is_finite():
            return "[+/- inf]"
        if self.is_exact():
            return self.mid.to_string(digits)
        return f"[{self.mid.to_string(digits)} +/- {self.rad.to_string(3)}]"

    def __str__(self) -> str:
        return self.to_string()


def _evaluation_error(value: Arf, wp: int, relative: bool) -> Mag:
    """
    Error bound for an elementary function value computed at `wp` bits.

    ELEMENTARY_ERROR_ULPS ulps of the value, or of 1 when the function is
    evaluated to absolute rather than relative accuracy and |value| < 1.
    """
    exponent = value.magnitude_exponent() if not value.is_zero() else 0
    if not relative:
        exponent = max(exponent, 0)
    return Mag.from_int(settings.ELEMENTARY_ERROR_ULPS).mul_2exp(exponent + 1 - wp)


def _ulp(value: Arf, prec: int) -> Mag:
    exponent = value.magnitude_exponent() if not value.is_zero() else 0
    return Mag.from_int(1).mul_2exp(exponent + 1 - prec)


def _upper_bound(name: str, x: Arf, relative: bool) -> Mag:
    """Upper bound of |f(x)| at low precision."""
    wp = settings.MAG_BITS + settings.GUARD_BITS
    value = evaluate(name, x, wp)
    return value.mag().add(_evaluation_error(value, wp, relative))


def pi_ball(prec: int) -> Ball:
    wp = prec + settings.GUARD_BITS
    value = pi_value(wp)
    mid, round_err = value.round(prec)
    return Ball.make(mid, _evaluation_error(value, wp, relative=True).add(round_err))

