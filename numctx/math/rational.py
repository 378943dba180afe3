"""
Arbitrary-precision rationals.

Rational wraps fractions.Fraction, the big-rational kernel. Values are always
kept in lowest terms with a positive denominator, so payload equality is
value equality.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Any, ClassVar

from ..core.errors import DivisionError
from .integer import ZZ, Integer, _ExactOrdering, to_exact_fraction
from .value import Context, Element, TypePrecedence


class RationalField(Context):
    """The field of rational numbers QQ."""

    is_field: ClassVar[bool] = True

    def element_from(self, raw: Any) -> Rational:
        return Rational.model_construct(context=self, value=to_exact_fraction(raw, "Rational"))

    def to_string(self) -> str:
        return "Rational field"


QQ = RationalField()


class Rational(_ExactOrdering, Element):
    """
    Rational number as numerator/denominator.

    Examples:
        >>> Rational(1, 2)
        Rational(1/2)
        >>> Rational("6/4")
        Rational(3/2)
    """

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.RATIONAL

    context: RationalField
    value: Fraction

    def __init__(self, num: Any = 0, den: Any = 1, context: RationalField | None = None, **kwargs):
        """
        Create a Rational.

        Args:
            num: Numerator, or any exact value when den is 1
            den: Denominator (default 1)
            context: The rational field (None = QQ)
        """
        context = context if context is not None else QQ
        value = to_exact_fraction(num, "Rational")
        denominator = to_exact_fraction(den, "Rational")
        if denominator == 0:
            raise DivisionError("Rational denominator cannot be zero")
        super().__init__(context=context, value=value / denominator, **kwargs)

    def _payload(self) -> tuple:
        return (self.value.numerator, self.value.denominator)

    def to_fields(self) -> list:
        return [self.value.numerator, self.value.denominator]

    @classmethod
    def from_fields(cls, context: RationalField, fields: list) -> Rational:
        num, den = fields
        if int(den) == 0:
            raise DivisionError("Rational denominator cannot be zero")
        return context.element_from(Fraction(int(num), int(den)))

    def to_string(self) -> str:
        return str(self.value)

    def to_python(self) -> Fraction:
        return self.value

    def to_fraction(self) -> Fraction:
        return self.value

    def _new(self, value: Fraction) -> Rational:
        return Rational.model_construct(context=self.context, value=value)

    @property
    def numerator(self) -> Integer:
        return ZZ.element_from(self.value.numerator)

    @property
    def denominator(self) -> Integer:
        return ZZ.element_from(self.value.denominator)

    # Canonical operations

    def _add(self, other: Rational) -> Rational:
        return self._new(self.value + other.value)

    def _sub(self, other: Rational) -> Rational:
        return self._new(self.value - other.value)

    def _mul(self, other: Rational) -> Rational:
        return self._new(self.value * other.value)

    def _div(self, other: Rational) -> Rational:
        if other.value == 0:
            raise DivisionError("division by zero")
        return self._new(self.value / other.value)

    def _neg(self) -> Rational:
        return self._new(-self.value)

    def inv(self) -> Rational:
        if self.value == 0:
            raise DivisionError("zero has no inverse")
        return self._new(1 / self.value)

    def __abs__(self) -> Rational:
        return self._new(abs(self.value))

    # Rounding

    def floor(self) -> Integer:
        return ZZ.element_from(math.floor(self.value))

    def ceil(self) -> Integer:
        return ZZ.element_from(math.ceil(self.value))

    def round(self) -> Integer:
        """Round to nearest, ties to even."""
        return ZZ.element_from(round(self.value))

    def is_integer(self) -> bool:
        return self.value.denominator == 1

    def sign(self) -> int:
        return (self.value > 0) - (self.value < 0)

    def height(self) -> Integer:
        """max(|numerator|, denominator)."""
        return ZZ.element_from(max(abs(self.value.numerator), self.value.denominator))

    def __float__(self) -> float:
        return float(self.value)
