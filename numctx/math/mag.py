"""
Mag: non-negative upper bounds for ball radii.

A Mag is mantissa * 2**exponent with a mantissa of at most MAG_BITS bits, or
+inf. Every operation rounds upward so the result stays an upper bound of the
exact value. The *_lower variants round downward instead and are used where a
quantity appears in a denominator.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any

from mpmath.libmp import (
    finf,
    from_man_exp,
    from_rational,
    fzero,
    mpf_add,
    mpf_cmp,
    mpf_div,
    mpf_mul,
    mpf_sub,
    round_ceiling,
    round_floor,
    to_str,
)
from pydantic import BaseModel, ConfigDict

from ..core.config import settings
from ..core.errors import ConversionError


class Mag(BaseModel):
    """
    Upper bound on a magnitude.

    Examples:
        >>> Mag.from_fraction(Fraction(1, 3)).to_fraction() > Fraction(1, 3)
        True
        >>> Mag.inf().is_finite()
        False
    """

    model_config = ConfigDict(frozen=True)

    mantissa: int = 0
    exponent: int = 0
    infinite: bool = False

    # Construction

    @classmethod
    def zero(cls) -> Mag:
        return cls.model_construct(mantissa=0, exponent=0, infinite=False)

    @classmethod
    def inf(cls) -> Mag:
        return cls.model_construct(mantissa=0, exponent=0, infinite=True)

    @classmethod
    def from_mpf(cls, value: tuple, rnd: str = round_ceiling) -> Mag:
        """Bound a non-negative mpmath value, rounding in direction `rnd`."""
        if value == finf:
            return cls.inf()
        sign, man, exp, _ = value
        if sign:
            raise ConversionError(to_str(value, 10), "mpf", "Mag")
        if not man:
            return cls.zero()
        rounded = from_man_exp(man, exp, settings.MAG_BITS, rnd)
        return cls.model_construct(mantissa=int(rounded[1]), exponent=int(rounded[2]), infinite=False)

    @classmethod
    def from_int(cls, value: int) -> Mag:
        return cls.from_mpf(from_man_exp(abs(value), 0))

    @classmethod
    def from_fraction(cls, value: Fraction, rnd: str = round_ceiling) -> Mag:
        value = abs(Fraction(value))
        return cls.from_mpf(from_rational(value.numerator, value.denominator, settings.MAG_BITS, rnd))

    @classmethod
    def from_fields(cls, fields: Any) -> Mag:
        if fields == "inf":
            return cls.inf()
        mantissa, exponent = fields
        return cls.from_mpf(from_man_exp(int(mantissa), int(exponent)))

    def to_fields(self) -> Any:
        return "inf" if self.infinite else [self.mantissa, self.exponent]

    @property
    def mpf(self) -> tuple:
        if self.infinite:
            return finf
        if not self.mantissa:
            return fzero
        return from_man_exp(self.mantissa, self.exponent)

    # Predicates

    def is_zero(self) -> bool:
        return not self.infinite and self.mantissa == 0

    def is_finite(self) -> bool:
        return not self.infinite

    # Arithmetic, rounded upward

    def _result(self, value: tuple, rnd: str = round_ceiling) -> Mag:
        return Mag.from_mpf(value, rnd)

    def add(self, other: Mag) -> Mag:
        if self.infinite or other.infinite:
            return Mag.inf()
        return self._result(mpf_add(self.mpf, other.mpf, settings.MAG_BITS, round_ceiling))

    def mul(self, other: Mag) -> Mag:
        if self.infinite or other.infinite:
            return Mag.inf()
        return self._result(mpf_mul(self.mpf, other.mpf, settings.MAG_BITS, round_ceiling))

    def div(self, other: Mag) -> Mag:
        """self / other, rounded up; division by zero gives +inf."""
        if self.infinite or other.is_zero():
            return Mag.inf()
        if other.infinite:
            return Mag.zero()
        return self._result(mpf_div(self.mpf, other.mpf, settings.MAG_BITS, round_ceiling))

    def mul_2exp(self, n: int) -> Mag:
        if self.infinite or not self.mantissa:
            return self
        return Mag.model_construct(mantissa=self.mantissa, exponent=self.exponent + n, infinite=False)

    def __add__(self, other: Mag) -> Mag:
        return self.add(other)

    def __mul__(self, other: Mag) -> Mag:
        return self.mul(other)

    def __truediv__(self, other: Mag) -> Mag:
        return self.div(other)

    # Arithmetic, rounded downward

    def sub_lower(self, other: Mag) -> Mag:
        """Lower bound of max(self - other, 0)."""
        if other.infinite:
            return Mag.zero()
        if self.infinite:
            return Mag.inf()
        diff = mpf_sub(self.mpf, other.mpf, settings.MAG_BITS, round_floor)
        if mpf_cmp(diff, fzero) <= 0:
            return Mag.zero()
        return self._result(diff, round_floor)

    def mul_lower(self, other: Mag) -> Mag:
        if self.is_zero() or other.is_zero():
            return Mag.zero()
        if self.infinite or other.infinite:
            return Mag.inf()
        return self._result(mpf_mul(self.mpf, other.mpf, settings.MAG_BITS, round_floor), round_floor)

    # Ordering

    def cmp(self, other: Mag) -> int:
        return mpf_cmp(self.mpf, other.mpf)

    def __lt__(self, other: Mag) -> bool:
        return self.cmp(other) < 0

    def __le__(self, other: Mag) -> bool:
        return self.cmp(other) <= 0

    def __gt__(self, other: Mag) -> bool:
        return self.cmp(other) > 0

    def __ge__(self, other: Mag) -> bool:
        return self.cmp(other) >= 0

    # Conversions

    def to_fraction(self) -> Fraction:
        if self.infinite:
            raise ConversionError("inf", "Mag", "Fraction")
        return Fraction(self.mantissa) * Fraction(2) ** self.exponent

    def __float__(self) -> float:
        return float("inf") if self.infinite else float(self.to_fraction())

    def to_string(self, digits: int = 3) -> str:
        if self.infinite:
            return "inf"
        return to_str(self.mpf, digits)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Mag({self.to_string(10)})"
