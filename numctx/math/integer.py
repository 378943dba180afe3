"""
Arbitrary-precision integers.

Integer wraps Python's built-in int, which is the big-integer kernel of the
library. Integers are contextless from the caller's point of view: they all
live in the parameterless IntegerRing, so Integer(5) needs no context
argument.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Any, ClassVar

import sympy
from pydantic import Field

from ..core.errors import ConversionError, DivisionError
from .value import Context, Element, TypePrecedence


def to_exact_fraction(raw: Any, out_type: str) -> Fraction:
    """
    Convert a native value or exact element to a Fraction.

    Floats convert exactly (every finite float is a dyadic rational); strings
    are parsed as decimal or p/q literals.
    """
    if isinstance(raw, (int, Fraction)):
        return Fraction(raw)
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise ConversionError(raw, "float", out_type)
        return Fraction(raw)
    if isinstance(raw, str):
        try:
            return Fraction(raw.strip())
        except (ValueError, ZeroDivisionError) as e:
            raise ConversionError(raw, "str", out_type) from e
    if isinstance(raw, Element) and hasattr(raw, "to_fraction"):
        return raw.to_fraction()
    raise ConversionError(raw, type(raw).__name__, out_type)


class IntegerRing(Context):
    """The ring of integers ZZ."""

    def element_from(self, raw: Any) -> Integer:
        if isinstance(raw, Integer):
            return Integer.model_construct(context=self, value=raw.value)
        value = to_exact_fraction(raw, "Integer")
        if value.denominator != 1:
            raise ConversionError(raw, type(raw).__name__, "Integer")
        return Integer.model_construct(context=self, value=value.numerator)

    def to_string(self) -> str:
        return "Integer ring"


ZZ = IntegerRing()


class _ExactOrdering:
    """Total ordering shared by Integer and Rational."""

    def _order_operand(self, other: Any) -> Any:
        if isinstance(other, Element):
            if other.type_precedence > self.type_precedence or not hasattr(other, "to_fraction"):
                return NotImplemented
        elif isinstance(other, bool) or not isinstance(other, (int, Fraction, float)):
            return NotImplemented
        return to_exact_fraction(other, type(self).__name__)

    def __lt__(self, other: Any) -> bool:
        rhs = self._order_operand(other)
        return rhs if rhs is NotImplemented else self.to_fraction() < rhs

    def __le__(self, other: Any) -> bool:
        rhs = self._order_operand(other)
        return rhs if rhs is NotImplemented else self.to_fraction() <= rhs

    def __gt__(self, other: Any) -> bool:
        rhs = self._order_operand(other)
        return rhs if rhs is NotImplemented else self.to_fraction() > rhs

    def __ge__(self, other: Any) -> bool:
        rhs = self._order_operand(other)
        return rhs if rhs is NotImplemented else self.to_fraction() >= rhs


class Integer(_ExactOrdering, Element):
    """
    Arbitrary-precision integer.

    Examples:
        >>> Integer(10) + 5
        Integer(15)
        >>> Integer(1) / 2
        Rational(1/2)
    """

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.INTEGER

    context: IntegerRing
    value: int = Field(default=0, description="The integer value")

    def __init__(self, value: Any = 0, context: IntegerRing | None = None, **kwargs):
        context = context if context is not None else ZZ
        value = context.element_from(value).value
        super().__init__(context=context, value=value, **kwargs)

    # Capability interface

    def _payload(self) -> tuple:
        return (self.value,)

    def to_fields(self) -> list:
        return [self.value]

    @classmethod
    def from_fields(cls, context: IntegerRing, fields: list) -> Integer:
        (value,) = fields
        return context.element_from(int(value))

    def to_string(self) -> str:
        return str(self.value)

    def to_python(self) -> int:
        return self.value

    def to_fraction(self) -> Fraction:
        return Fraction(self.value)

    def _new(self, value: int) -> Integer:
        return Integer.model_construct(context=self.context, value=value)

    # Canonical operations

    def _add(self, other: Integer) -> Integer:
        return self._new(self.value + other.value)

    def _sub(self, other: Integer) -> Integer:
        return self._new(self.value - other.value)

    def _mul(self, other: Integer) -> Integer:
        return self._new(self.value * other.value)

    def _div(self, other: Integer) -> Element:
        """Exact division; the quotient is a Rational."""
        from .rational import QQ

        if other.value == 0:
            raise DivisionError("division by zero")
        return QQ.element_from(Fraction(self.value, other.value))

    def _neg(self) -> Integer:
        return self._new(-self.value)

    def inv(self) -> Integer:
        if self.value not in (1, -1):
            raise DivisionError(f"{self.value} is not a unit in the integers")
        return self._new(self.value)

    def __abs__(self) -> Integer:
        return self._new(abs(self.value))

    def __pow__(self, exponent: Any, modulo: Any = None) -> Element:
        if isinstance(exponent, bool) or not isinstance(exponent, (int, Integer)):
            return NotImplemented
        if modulo is not None:
            if int(modulo) == 0:
                raise DivisionError("modulus is zero")
            try:
                return self._new(pow(self.value, int(exponent), int(modulo)))
            except ValueError as e:
                raise DivisionError(str(e)) from e
        exponent = int(exponent)
        if exponent < 0:
            from .rational import QQ
            return QQ.element_from(self.value) ** exponent
        return self._new(self.value ** exponent)

    # Euclidean division (floor semantics, like Python ints)

    def _euclid_operand(self, other: Any) -> int:
        from .dispatch import coerce_operand
        operand = coerce_operand(self, other)
        if operand is NotImplemented:
            raise TypeError(f"unsupported operand type: '{type(other).__name__}'")
        if operand.value == 0:
            raise DivisionError("division by zero")
        return operand.value

    def __floordiv__(self, other: Any) -> Integer:
        return self._new(self.value // self._euclid_operand(other))

    def __rfloordiv__(self, other: Any) -> Integer:
        return ZZ.element_from(other) // self

    def __mod__(self, other: Any) -> Integer:
        return self._new(self.value % self._euclid_operand(other))

    def __rmod__(self, other: Any) -> Integer:
        return ZZ.element_from(other) % self

    def __divmod__(self, other: Any) -> tuple[Integer, Integer]:
        q, r = divmod(self.value, self._euclid_operand(other))
        return self._new(q), self._new(r)

    # Python conversions

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __float__(self) -> float:
        return float(self.value)

    # Number theory

    def sign(self) -> int:
        return (self.value > 0) - (self.value < 0)

    def bits(self) -> int:
        """Number of bits in the absolute value."""
        return self.value.bit_length()

    def is_even(self) -> bool:
        return self.value % 2 == 0

    def is_odd(self) -> bool:
        return self.value % 2 == 1

    def is_prime(self) -> bool:
        return bool(sympy.isprime(self.value))

    def next_prime(self) -> Integer:
        return self._new(int(sympy.nextprime(self.value)))

    def gcd(self, other: Any) -> Integer:
        return self._new(math.gcd(self.value, int(ZZ.element_from(other))))

    def lcm(self, other: Any) -> Integer:
        return self._new(math.lcm(self.value, int(ZZ.element_from(other))))

    def invmod(self, modulus: Any) -> Integer:
        """Inverse of self modulo `modulus`."""
        modulus = int(ZZ.element_from(modulus))
        try:
            return self._new(pow(self.value, -1, modulus))
        except ValueError as e:
            raise DivisionError(f"{self.value} is not invertible modulo {modulus}") from e

    def isqrt(self) -> Integer:
        if self.value < 0:
            raise ConversionError(self.value, "Integer", "non-negative Integer")
        return self._new(math.isqrt(self.value))

    def factor(self) -> dict[int, int]:
        """Prime factorization as {prime: multiplicity}."""
        if self.value == 0:
            raise DivisionError("zero has no factorization")
        return {int(p): int(e) for p, e in sympy.factorint(self.value).items()}
