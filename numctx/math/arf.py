"""
Arf: exact binary floating-point midpoints.

An Arf is mantissa * 2**exponent with an odd mantissa (or zero), so equal
values have equal fields. Exact operations never round; rounded operations
take a precision in bits and return the nearest result together with a Mag
bounding the rounding error.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Callable

from mpmath.libmp import (
    fzero,
    from_man_exp,
    from_rational,
    mpf_abs,
    mpf_add,
    mpf_atan,
    mpf_cmp,
    mpf_cos,
    mpf_div,
    mpf_exp,
    mpf_log,
    mpf_mul,
    mpf_pi,
    mpf_shift,
    mpf_sin,
    mpf_sqrt,
    mpf_sub,
    round_ceiling,
    round_floor,
    round_nearest,
    to_float,
    to_str,
)
from pydantic import BaseModel, ConfigDict

from ..core.config import settings
from ..core.errors import ConversionError
from .mag import Mag


class Arf(BaseModel):
    """Exact dyadic number."""

    model_config = ConfigDict(frozen=True)

    mantissa: int = 0
    exponent: int = 0

    # Construction

    @classmethod
    def from_mpf(cls, value: tuple) -> Arf:
        sign, man, exp, bc = value
        if not man:
            if bc:
                raise ConversionError(to_str(value, 5), "mpf", "Arf")
            return cls.model_construct(mantissa=0, exponent=0)
        return cls.model_construct(mantissa=-int(man) if sign else int(man), exponent=int(exp))

    @classmethod
    def from_int(cls, value: int) -> Arf:
        return cls.from_mpf(from_man_exp(value, 0))

    @classmethod
    def from_man_exp(cls, mantissa: int, exponent: int) -> Arf:
        return cls.from_mpf(from_man_exp(int(mantissa), int(exponent)))

    @classmethod
    def from_mag(cls, value: Mag) -> Arf:
        """Exact value of a finite Mag."""
        if not value.is_finite():
            raise ConversionError("inf", "Mag", "Arf")
        return cls.from_man_exp(value.mantissa, value.exponent)

    @classmethod
    def from_fields(cls, fields: Any) -> Arf:
        mantissa, exponent = fields
        return cls.from_man_exp(mantissa, exponent)

    def to_fields(self) -> list:
        return [self.mantissa, self.exponent]

    @property
    def mpf(self) -> tuple:
        if not self.mantissa:
            return fzero
        return from_man_exp(self.mantissa, self.exponent)

    # Exact operations

    def is_zero(self) -> bool:
        return self.mantissa == 0

    def sign(self) -> int:
        return (self.mantissa > 0) - (self.mantissa < 0)

    def __neg__(self) -> Arf:
        return Arf.model_construct(mantissa=-self.mantissa, exponent=self.exponent)

    def __abs__(self) -> Arf:
        return Arf.model_construct(mantissa=abs(self.mantissa), exponent=self.exponent)

    def add_exact(self, other: Arf) -> Arf:
        return Arf.from_mpf(mpf_add(self.mpf, other.mpf))

    def sub_exact(self, other: Arf) -> Arf:
        return Arf.from_mpf(mpf_sub(self.mpf, other.mpf))

    def mul_2exp(self, n: int) -> Arf:
        return Arf.from_mpf(mpf_shift(self.mpf, n))

    def bits(self) -> int:
        """Bit length of the mantissa."""
        return abs(self.mantissa).bit_length()

    def magnitude_exponent(self) -> int:
        """floor(log2(|self|)) for non-zero values."""
        return self.exponent + self.bits() - 1

    # Rounded operations

    def add(self, other: Arf, prec: int) -> tuple[Arf, Mag]:
        return rounded(mpf_add, self.mpf, other.mpf, prec=prec)

    def sub(self, other: Arf, prec: int) -> tuple[Arf, Mag]:
        return rounded(mpf_sub, self.mpf, other.mpf, prec=prec)

    def mul(self, other: Arf, prec: int) -> tuple[Arf, Mag]:
        return rounded(mpf_mul, self.mpf, other.mpf, prec=prec)

    def div(self, other: Arf, prec: int) -> tuple[Arf, Mag]:
        return rounded(mpf_div, self.mpf, other.mpf, prec=prec)

    def sqrt(self, prec: int) -> tuple[Arf, Mag]:
        return rounded(mpf_sqrt, self.mpf, prec=prec)

    def round(self, prec: int) -> tuple[Arf, Mag]:
        """Round to `prec` bits."""
        if self.bits() <= prec:
            return self, Mag.zero()
        return rounded(from_man_exp, self.mantissa, self.exponent, prec=prec)

    # Magnitude bounds

    def mag(self) -> Mag:
        """Upper bound of |self|."""
        return Mag.from_mpf(mpf_abs(self.mpf))

    def mag_lower(self) -> Mag:
        """Lower bound of |self|."""
        return Mag.from_mpf(mpf_abs(self.mpf), round_floor)

    # Ordering

    def cmp(self, other: Arf) -> int:
        return mpf_cmp(self.mpf, other.mpf)

    def __lt__(self, other: Arf) -> bool:
        return self.cmp(other) < 0

    def __le__(self, other: Arf) -> bool:
        return self.cmp(other) <= 0

    def __gt__(self, other: Arf) -> bool:
        return self.cmp(other) > 0

    def __ge__(self, other: Arf) -> bool:
        return self.cmp(other) >= 0

    # Conversions

    def to_fraction(self) -> Fraction:
        return Fraction(self.mantissa) * Fraction(2) ** self.exponent

    def __float__(self) -> float:
        return to_float(self.mpf)

    def to_string(self, digits: int = 15) -> str:
        return to_str(self.mpf, digits)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Arf({self.mantissa}*2^{self.exponent})"


def rounded(fn: Callable[..., tuple], *args: Any, prec: int) -> tuple[Arf, Mag]:
    """
    Evaluate an mpmath primitive rounded to nearest at `prec` bits.

    The result is evaluated in both directed rounding modes too; when they
    agree the nearest result is exact, otherwise their gap bounds its error.
    """
    nearest = fn(*args, prec, round_nearest)
    lower = fn(*args, prec, round_floor)
    upper = fn(*args, prec, round_ceiling)
    if lower == upper:
        return Arf.from_mpf(nearest), Mag.zero()
    gap = mpf_sub(upper, lower, settings.MAG_BITS, round_ceiling)
    return Arf.from_mpf(nearest), Mag.from_mpf(gap)


def arf_from_fraction(value: Fraction, prec: int) -> tuple[Arf, Mag]:
    """Round a rational to `prec` bits."""
    value = Fraction(value)
    return rounded(from_rational, value.numerator, value.denominator, prec=prec)


ELEMENTARY_FUNCTIONS: dict[str, Callable[..., tuple]] = {
    "exp": mpf_exp,
    "log": mpf_log,
    "sin": mpf_sin,
    "cos": mpf_cos,
    "atan": mpf_atan,
}


def evaluate(name: str, x: Arf, wp: int) -> Arf:
    """
    Evaluate an elementary function at `wp` bits, rounded to nearest.

    mpmath does not guarantee correct rounding here; callers account for a
    few ulps of error at `wp`.
    """
    return Arf.from_mpf(ELEMENTARY_FUNCTIONS[name](x.mpf, wp, round_nearest))


def pi_value(wp: int) -> Arf:
    return Arf.from_mpf(mpf_pi(wp, round_nearest))
