"""
Certified real numbers.

RealField(precision) is the context; a Real is a ball whose midpoint is kept
at the context precision. Every operation reads the precision from the
context, and most accept a per-call `prec=` override.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar, Optional

from ..core.config import settings
from ..core.errors import ConfigurationError, ConversionError, IndeterminateComparison
from .arf import Arf
from .ball import Ball, BallOrdering, pi_ball
from .integer import Integer, to_exact_fraction
from .mag import Mag
from .value import Context, Element, TypePrecedence, ensure_same_context

LOG10_2 = 0.30102999566398120


def validate_precision(context_type: str, precision: Any) -> int:
    """Shared precision check for the ball contexts."""
    if precision is None:
        precision = settings.DEFAULT_PRECISION
    if isinstance(precision, Integer):
        precision = precision.value
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ConfigurationError(context_type, "precision must be an integer", precision=str(precision))
    if not 2 <= precision <= settings.MAX_PRECISION:
        raise ConfigurationError(
            context_type,
            f"precision must be between 2 and {settings.MAX_PRECISION} bits",
            precision=precision,
        )
    return precision


def ball_from_value(raw: Any, prec: int, out_type: str) -> Ball:
    """Round a native number or exact element into a ball at `prec`."""
    if isinstance(raw, float) and not math.isfinite(raw):
        raise ConversionError(raw, "float", out_type)
    return Ball.from_fraction(to_exact_fraction(raw, out_type), prec)


class RealField(Context):
    """
    Context for real balls at a fixed precision in bits.

    Examples:
        >>> RR = RealField(53)
        >>> x = RR(1) / 3
        >>> x.contains_point(Fraction(1, 3))
        True
    """

    is_field: ClassVar[bool] = True

    precision: int

    def __init__(self, precision: Any = None, **kwargs):
        if precision is None:
            precision = kwargs.pop("precision", None)
        super().__init__(precision=validate_precision("RealField", precision), **kwargs)

    @property
    def digits(self) -> int:
        """Decimal digits shown when printing."""
        return max(1, int(self.precision * LOG10_2))

    def element_from(self, raw: Any) -> Real:
        from .complex import Complex

        if isinstance(raw, Real):
            ball = raw.ball if raw.context == self else raw.ball.set_round(self.precision)
            return self.from_ball(ball)
        if isinstance(raw, Complex):
            if not raw.im.is_zero():
                raise ConversionError(raw, "Complex", self.to_string())
            return self.from_ball(raw.re.set_round(self.precision))
        return self.from_ball(ball_from_value(raw, self.precision, self.to_string()))

    def from_ball(self, ball: Ball) -> Real:
        return Real.model_construct(context=self, mid=ball.mid, rad=ball.rad)

    def pi(self) -> Real:
        return self.from_ball(pi_ball(self.precision))

    def indeterminate(self) -> Real:
        return self.from_ball(Ball.indeterminate())

    def to_string(self) -> str:
        return f"Real field with {self.precision} bits of precision"


class Real(Element):
    """
    Real ball: midpoint `mid` with radius `rad`.

    == compares the (midpoint, radius) payload exactly; use compare() or the
    ordering operators for certified comparisons. A native operand is first
    converted into the field, so `RealField(53)(1) / 3 == Fraction(1, 3)` is
    True: both sides round to the same ball, which says nothing about the
    values being provably equal.
    """

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.REAL

    context: RealField
    mid: Arf
    rad: Mag

    def __init__(self, value: Any = 0, context: Optional[RealField] = None, **kwargs):
        context = context if context is not None else RealField()
        ball = context.element_from(value).ball
        super().__init__(context=context, mid=ball.mid, rad=ball.rad, **kwargs)

    @classmethod
    def from_endpoints(cls, lower: Any, upper: Any, context: Optional[RealField] = None) -> Real:
        """Ball containing the exact interval [lower, upper]."""
        context = context if context is not None else RealField()
        lower = to_exact_fraction(lower, "Real")
        upper = to_exact_fraction(upper, "Real")
        return context.from_ball(Ball.from_endpoints(lower, upper, context.precision))

    @property
    def ball(self) -> Ball:
        return Ball.make(self.mid, self.rad)

    @property
    def precision(self) -> int:
        return self.context.precision

    def _payload(self) -> tuple:
        return (self.mid, self.rad)

    def to_fields(self) -> list:
        """[midpoint, radius]; midpoint as [mantissa, exponent], radius likewise or "inf"."""
        return self.ball.to_fields()

    @classmethod
    def from_fields(cls, context: RealField, fields: list) -> Real:
        return context.from_ball(Ball.from_fields(fields))

    def to_string(self) -> str:
        return self.ball.to_string(self.context.digits)

    def to_python(self) -> float:
        return float(self.mid)

    def __float__(self) -> float:
        return float(self.mid)

    def _new(self, ball: Ball) -> Real:
        return Real.model_construct(context=self.context, mid=ball.mid, rad=ball.rad)

    def _prec(self, prec: Optional[int]) -> int:
        return self.context.precision if prec is None else prec

    def _operand(self, other: Any) -> Real:
        from .dispatch import coerce_operand

        operand = coerce_operand(self, other)
        if operand is NotImplemented:
            raise TypeError(f"unsupported operand type: '{type(other).__name__}'")
        ensure_same_context(self, operand)
        return operand

    # Canonical operations

    def _add(self, other: Real) -> Real:
        return self._new(self.ball.add(other.ball, self.precision))

    def _sub(self, other: Real) -> Real:
        return self._new(self.ball.sub(other.ball, self.precision))

    def _mul(self, other: Real) -> Real:
        return self._new(self.ball.mul(other.ball, self.precision))

    def _div(self, other: Real) -> Real:
        return self._new(self.ball.div(other.ball, self.precision))

    def _neg(self) -> Real:
        return self._new(self.ball.neg())

    def inv(self) -> Real:
        return self._new(self.ball.inv(self.precision))

    def __abs__(self) -> Real:
        return self._new(self.ball.abs())

    def __pow__(self, exponent: Any) -> Real:
        if isinstance(exponent, Integer):
            exponent = exponent.value
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        return self._new(self.ball.pow_int(exponent, self.precision))

    # Arithmetic at an explicit precision

    def add(self, other: Any, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.add(self._operand(other).ball, self._prec(prec)))

    def sub(self, other: Any, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.sub(self._operand(other).ball, self._prec(prec)))

    def mul(self, other: Any, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.mul(self._operand(other).ball, self._prec(prec)))

    def div(self, other: Any, prec: Optional[int] = None, extended: bool = False) -> Real:
        """
        Certified quotient.

        Raises DivisionError when the divisor contains zero, unless
        extended=True, which returns the indeterminate ball instead.
        """
        return self._new(self.ball.div(self._operand(other).ball, self._prec(prec), extended))

    # Elementary functions

    def sqrt(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.sqrt(self._prec(prec)))

    def exp(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.exp(self._prec(prec)))

    def log(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.log(self._prec(prec)))

    def sin(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.sin(self._prec(prec)))

    def cos(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.cos(self._prec(prec)))

    def tan(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.tan(self._prec(prec)))

    def atan(self, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.atan(self._prec(prec)))

    # Certified comparison

    def compare(self, other: Any) -> BallOrdering:
        return self.ball.compare(self._operand(other).ball)

    def _decide(self, other: Any, accept: tuple[BallOrdering, ...]) -> bool:
        operand = self._operand(other)
        ordering = self.ball.compare(operand.ball)
        if ordering is BallOrdering.INDETERMINATE:
            raise IndeterminateComparison(self, operand)
        return ordering in accept

    def __lt__(self, other: Any) -> bool:
        return self._decide(other, (BallOrdering.LESS,))

    def __le__(self, other: Any) -> bool:
        return self._decide(other, (BallOrdering.LESS, BallOrdering.EQUAL))

    def __gt__(self, other: Any) -> bool:
        return self._decide(other, (BallOrdering.GREATER,))

    def __ge__(self, other: Any) -> bool:
        return self._decide(other, (BallOrdering.GREATER, BallOrdering.EQUAL))

    def overlaps(self, other: Any) -> bool:
        return self.ball.overlaps(self._operand(other).ball)

    def contains(self, other: Any) -> bool:
        """Whether the ball contains another Real ball, or an exact value."""
        if isinstance(other, Real):
            ensure_same_context(self, other)
            return self.ball.contains(other.ball)
        return self.contains_point(other)

    def contains_point(self, value: Any) -> bool:
        return self.ball.contains_point(to_exact_fraction(value, "Rational"))

    def contains_zero(self) -> bool:
        return self.ball.contains_zero()

    def is_exact(self) -> bool:
        return self.ball.is_exact()

    def is_finite(self) -> bool:
        return self.ball.is_finite()

    # Parts and accuracy

    def midpoint(self) -> Real:
        return self._new(Ball.exact(self.mid))

    def radius(self) -> Real:
        return self._new(Ball.exact(Arf.from_mag(self.rad)))

    def lower(self) -> Arf:
        return self.ball.lower()

    def upper(self) -> Arf:
        return self.ball.upper()

    def bits(self) -> int:
        return self.ball.bits()

    def rel_accuracy_bits(self) -> int:
        return self.ball.rel_accuracy_bits()

    def union(self, other: Any, prec: Optional[int] = None) -> Real:
        return self._new(self.ball.union(self._operand(other).ball, self._prec(prec)))


def pi(context: Optional[RealField] = None) -> Real:
    """pi as a ball in `context` (default precision when omitted)."""
    return (context if context is not None else RealField()).pi()


def compare(x: Any, y: Any) -> BallOrdering:
    """Certified comparison of two reals; plain numbers are moved into the other operand's field."""
    if isinstance(x, Real):
        return x.compare(y)
    if isinstance(y, Real):
        ordering = y.compare(x)
        return {
            BallOrdering.LESS: BallOrdering.GREATER,
            BallOrdering.GREATER: BallOrdering.LESS,
        }.get(ordering, ordering)
    raise ConversionError(x, type(x).__name__, "Real")

