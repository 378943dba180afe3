"""
Certified complex numbers as pairs of real balls.

The real and imaginary parts carry independent radii, so a Complex encloses
a rectangle; containment is decided per component.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar, Optional

from ..core.errors import ConversionError, DivisionError
from .arf import Arf
from .ball import Ball
from .integer import to_exact_fraction
from .real import Real, RealField, ball_from_value, validate_precision
from .value import Context, Element, TypePrecedence, ensure_same_context


class ComplexField(Context):
    """
    Context for complex balls at a fixed precision in bits.

    Examples:
        >>> CC = ComplexField(53)
        >>> CC.onei() ** 2 == CC(-1)
        True
    """

    is_field: ClassVar[bool] = True

    precision: int

    def __init__(self, precision: Any = None, **kwargs):
        if precision is None:
            precision = kwargs.pop("precision", None)
        super().__init__(precision=validate_precision("ComplexField", precision), **kwargs)

    @property
    def digits(self) -> int:
        return self.real_field().digits

    def real_field(self) -> RealField:
        """The real field of the same precision."""
        return RealField(self.precision)

    def _ball(self, raw: Any) -> Ball:
        if isinstance(raw, Real):
            return raw.ball.set_round(self.precision)
        return ball_from_value(raw, self.precision, self.to_string())

    def element_from(self, raw: Any) -> Complex:
        if isinstance(raw, Complex):
            if raw.context == self:
                return self.from_balls(raw.re, raw.im)
            return self.from_balls(raw.re.set_round(self.precision), raw.im.set_round(self.precision))
        if isinstance(raw, complex):
            if not (math.isfinite(raw.real) and math.isfinite(raw.imag)):
                raise ConversionError(raw, "complex", self.to_string())
            return self.from_balls(self._ball(raw.real), self._ball(raw.imag))
        if isinstance(raw, (list, tuple)):
            if len(raw) != 2:
                raise ConversionError(raw, type(raw).__name__, self.to_string())
            return self.from_balls(self._ball(raw[0]), self._ball(raw[1]))
        return self.from_balls(self._ball(raw), Ball())

    def from_balls(self, re: Ball, im: Ball) -> Complex:
        return Complex.model_construct(context=self, re=re, im=im)

    def onei(self) -> Complex:
        return self.from_balls(Ball(), Ball.exact(Arf.from_int(1)))

    def to_string(self) -> str:
        return f"Complex field with {self.precision} bits of precision"


class Complex(Element):
    """
    Complex ball with real part `re` and imaginary part `im`.

    Like Real, == is structural: both parts must have identical midpoint and
    radius after the other operand is converted into the field. It is not a
    certified equality test.
    """

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.COMPLEX

    context: ComplexField
    re: Ball
    im: Ball

    def __init__(self, real: Any = 0, imag: Any = 0, context: Optional[ComplexField] = None, **kwargs):
        context = context if context is not None else ComplexField()
        if isinstance(real, (Complex, complex)):
            value = context.element_from(real)
        else:
            value = context.element_from((real, imag))
        super().__init__(context=context, re=value.re, im=value.im, **kwargs)

    @property
    def precision(self) -> int:
        return self.context.precision

    def _payload(self) -> tuple:
        return (self.re, self.im)

    def to_fields(self) -> list:
        """[real ball, imaginary ball], each as [midpoint, radius]."""
        return [self.re.to_fields(), self.im.to_fields()]

    @classmethod
    def from_fields(cls, context: ComplexField, fields: list) -> Complex:
        re, im = fields
        return context.from_balls(Ball.from_fields(re), Ball.from_fields(im))

    def to_string(self) -> str:
        digits = self.context.digits
        if self.im.is_zero():
            return self.re.to_string(digits)
        if self.re.is_zero():
            return f"{self.im.to_string(digits)}*I"
        if self.im.is_exact() and self.im.mid.sign() < 0:
            return f"{self.re.to_string(digits)} - {self.im.neg().to_string(digits)}*I"
        return f"{self.re.to_string(digits)} + {self.im.to_string(digits)}*I"

    def to_python(self) -> complex:
        return complex(float(self.re.mid), float(self.im.mid))

    def __complex__(self) -> complex:
        return self.to_python()

    def _new(self, re: Ball, im: Ball) -> Complex:
        return Complex.model_construct(context=self.context, re=re, im=im)

    # Canonical operations

    def _add(self, other: Complex) -> Complex:
        p = self.precision
        return self._new(self.re.add(other.re, p), self.im.add(other.im, p))

    def _sub(self, other: Complex) -> Complex:
        p = self.precision
        return self._new(self.re.sub(other.re, p), self.im.sub(other.im, p))

    def _mul(self, other: Complex) -> Complex:
        p = self.precision
        a, b, c, d = self.re, self.im, other.re, other.im
        return self._new(a.mul(c, p).sub(b.mul(d, p), p), a.mul(d, p).add(b.mul(c, p), p))

    def _div(self, other: Complex) -> Complex:
        p = self.precision
        a, b, c, d = self.re, self.im, other.re, other.im
        if c.contains_zero() and d.contains_zero():
            raise DivisionError(f"divisor {other} contains zero")
        denominator = c.sqr(p).add(d.sqr(p), p)
        re = a.mul(c, p).add(b.mul(d, p), p).div(denominator, p)
        im = b.mul(c, p).sub(a.mul(d, p), p).div(denominator, p)
        return self._new(re, im)

    def _neg(self) -> Complex:
        return self._new(self.re.neg(), self.im.neg())

    def inv(self) -> Complex:
        return self.context.one()._div(self)

    # Parts

    def real(self) -> Real:
        return self.context.real_field().from_ball(self.re)

    def imag(self) -> Real:
        return self.context.real_field().from_ball(self.im)

    def conj(self) -> Complex:
        return self._new(self.re, self.im.neg())

    def __abs__(self) -> Real:
        p = self.precision
        return self.context.real_field().from_ball(self.re.sqr(p).add(self.im.sqr(p), p).sqrt(p))

    def abs(self) -> Real:
        return abs(self)

    def exp(self) -> Complex:
        """exp(a + bi) = exp(a) * (cos b + i sin b)."""
        p = self.precision
        scale = self.re.exp(p)
        return self._new(scale.mul(self.im.cos(p), p), scale.mul(self.im.sin(p), p))

    # Containment

    def _operand(self, other: Any) -> Complex:
        from .dispatch import coerce_operand

        operand = coerce_operand(self, other)
        if operand is NotImplemented:
            raise TypeError(f"unsupported operand type: '{type(other).__name__}'")
        ensure_same_context(self, operand)
        return operand

    def contains(self, other: Any) -> bool:
        """Componentwise containment of another complex ball."""
        operand = self._operand(other)
        return self.re.contains(operand.re) and self.im.contains(operand.im)

    def contains_point(self, value: Any) -> bool:
        """Whether the exact point (a Python complex, a (re, im) pair or a rational) lies in the rectangle."""
        if isinstance(value, complex):
            re, im = value.real, value.imag
        elif isinstance(value, (list, tuple)):
            re, im = value
        else:
            re, im = value, 0
        return (self.re.contains_point(to_exact_fraction(re, "Rational"))
                and self.im.contains_point(to_exact_fraction(im, "Rational")))

    def overlaps(self, other: Any) -> bool:
        operand = self._operand(other)
        return self.re.overlaps(operand.re) and self.im.overlaps(operand.im)

    def is_exact(self) -> bool:
        return self.re.is_exact() and self.im.is_exact()

    def is_finite(self) -> bool:
        return self.re.is_finite() and self.im.is_finite()

    def is_real(self) -> bool:
        """Whether the imaginary part is exactly zero."""
        return self.im.is_zero()


def onei(context: Optional[ComplexField] = None) -> Complex:
    """The imaginary unit."""
    return (context if context is not None else ComplexField()).onei()
