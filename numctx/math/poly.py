"""
Dense univariate polynomials over any numctx context.

A PolynomialRing is parameterized by its base ring context and variable name.
Polynomial coefficients are base-ring elements, lowest degree first, with no
trailing zeros (the zero polynomial has no coefficients).
"""

from __future__ import annotations

from typing import Any, ClassVar, Sequence

import sympy

from ..core.config import settings
from ..core.errors import ConfigurationError, ConversionError, DivisionError
from .integer import ZZ, Integer
from .rational import QQ
from .value import Context, Element, TypePrecedence, ensure_same_context


def format_polynomial(coeffs: Sequence[str], var: str) -> str:
    """
    Format coefficient strings (lowest degree first) as a polynomial.

    Zero coefficients ("0") are skipped; compound coefficients are wrapped in
    parentheses.

    Examples:
        >>> format_polynomial(["1", "0", "-3"], "x")
        '-3*x^2 + 1'
    """
    terms = []
    for power in reversed(range(len(coeffs))):
        c = coeffs[power]
        if c == "0":
            continue
        monomial = "" if power == 0 else var if power == 1 else f"{var}^{power}"
        if not monomial:
            term = c
        elif c == "1":
            term = monomial
        elif c == "-1":
            term = f"-{monomial}"
        elif any(ch in c[1:] for ch in "+- "):
            term = f"({c})*{monomial}"
        else:
            term = f"{c}*{monomial}"
        terms.append(term)
    if not terms:
        return "0"
    out = terms[0]
    for term in terms[1:]:
        out += f" - {term[1:]}" if term.startswith("-") else f" + {term}"
    return out


class PolynomialRing(Context):
    """
    Context for univariate polynomials over `base_ring` in variable `var`.

    Examples:
        >>> R = PolynomialRing(ZZ, "x")
        >>> R([1, 2, 3])
        Polynomial(3*x^2 + 2*x + 1)
    """

    base_ring: Context
    var: str

    def __init__(self, base_ring: Any = None, var: Any = None, **kwargs):
        if base_ring is None:
            base_ring = kwargs.pop("base_ring", None)
        if var is None:
            var = kwargs.pop("var", settings.DEFAULT_VARIABLE)
        if not isinstance(base_ring, Context):
            raise ConfigurationError("PolynomialRing", "base ring must be a context", base_ring=str(base_ring))
        if not isinstance(var, str) or not var.isidentifier():
            raise ConfigurationError("PolynomialRing", "variable must be a non-empty identifier", var=str(var))
        super().__init__(base_ring=base_ring, var=var, **kwargs)

    def _coefficients(self, raw: Sequence[Any]) -> list[Element]:
        coeffs = [self.base_ring.element_from(c) for c in raw]
        while coeffs and coeffs[-1].is_zero():
            coeffs.pop()
        return coeffs

    def element_from(self, raw: Any) -> Polynomial:
        if isinstance(raw, Polynomial):
            if raw.context == self:
                return Polynomial.model_construct(context=self, coefficients=[c.copy() for c in raw.coefficients])
            if raw.context.var != self.var:
                raise ConversionError(raw, raw.context.to_string(), self.to_string())
            return Polynomial.model_construct(context=self, coefficients=self._coefficients(raw.coefficients))
        if isinstance(raw, (list, tuple)):
            return Polynomial.model_construct(context=self, coefficients=self._coefficients(raw))
        return Polynomial.model_construct(context=self, coefficients=self._coefficients([raw]))

    def gen(self) -> Polynomial:
        """The variable as a polynomial."""
        return self.element_from([0, 1])

    def to_string(self) -> str:
        return f"Univariate polynomial ring in {self.var} over {self.base_ring.to_string()}"


class Polynomial(Element):
    """Dense univariate polynomial."""

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.POLYNOMIAL

    context: PolynomialRing
    coefficients: list[Any]

    def __init__(self, coefficients: Any, context: PolynomialRing, **kwargs):
        coeffs = context.element_from(coefficients).coefficients
        super().__init__(context=context, coefficients=coeffs, **kwargs)

    def _payload(self) -> tuple:
        return tuple(c._payload() for c in self.coefficients)

    def to_fields(self) -> list:
        return [c.to_fields() for c in self.coefficients]

    @classmethod
    def from_fields(cls, context: PolynomialRing, fields: list) -> Polynomial:
        element_type = type(context.base_ring.zero())
        coeffs = [element_type.from_fields(context.base_ring, f) for f in fields]
        return context.element_from(coeffs)

    def to_string(self) -> str:
        return format_polynomial([c.to_string() for c in self.coefficients], self.context.var)

    def to_python(self) -> list:
        return [c.to_python() for c in self.coefficients]

    def _new(self, coeffs: list[Element]) -> Polynomial:
        while coeffs and coeffs[-1].is_zero():
            coeffs.pop()
        return Polynomial.model_construct(context=self.context, coefficients=coeffs)

    # Structure

    @property
    def base_ring(self) -> Context:
        return self.context.base_ring

    def degree(self) -> int:
        """Degree; -1 for the zero polynomial."""
        return len(self.coefficients) - 1

    def coefficient(self, power: int) -> Element:
        if 0 <= power < len(self.coefficients):
            return self.coefficients[power].copy()
        return self.base_ring.zero()

    def leading_coefficient(self) -> Element:
        if not self.coefficients:
            return self.base_ring.zero()
        return self.coefficients[-1].copy()

    def is_monic(self) -> bool:
        return bool(self.coefficients) and self.coefficients[-1].is_one()

    def is_constant(self) -> bool:
        return len(self.coefficients) <= 1

    # Canonical operations

    def _add(self, other: Polynomial) -> Polynomial:
        a, b = self.coefficients, other.coefficients
        if len(a) < len(b):
            a, b = b, a
        return self._new([a[i]._add(b[i]) if i < len(b) else a[i].copy() for i in range(len(a))])

    def _sub(self, other: Polynomial) -> Polynomial:
        return self._add(other._neg())

    def _mul(self, other: Polynomial) -> Polynomial:
        if not self.coefficients or not other.coefficients:
            return self._new([])
        zero = self.base_ring.zero()
        result = [zero] * (len(self.coefficients) + len(other.coefficients) - 1)
        for i, a in enumerate(self.coefficients):
            for j, b in enumerate(other.coefficients):
                result[i + j] = result[i + j]._add(a._mul(b))
        return self._new(result)

    def _scale(self, scalar: Element) -> Polynomial:
        return self._new([c._mul(scalar) for c in self.coefficients])

    def _neg(self) -> Polynomial:
        return self._new([c._neg() for c in self.coefficients])

    def inv(self) -> Polynomial:
        if len(self.coefficients) != 1:
            raise DivisionError(f"{self} is not a unit")
        return self._new([self.coefficients[0].inv()])

    # Euclidean division over a field

    def _division_operand(self, other: Any, allow_zero: bool = False) -> Polynomial:
        from .dispatch import coerce_operand

        if not self.base_ring.is_field:
            raise DivisionError(f"polynomial division needs a field, not {self.base_ring.to_string()}")
        operand = coerce_operand(self, other)
        if operand is NotImplemented:
            raise TypeError(f"unsupported operand type: '{type(other).__name__}'")
        ensure_same_context(self, operand)
        if not operand.coefficients and not allow_zero:
            raise DivisionError("polynomial division by zero")
        return operand

    def __divmod__(self, other: Any) -> tuple[Polynomial, Polynomial]:
        divisor = self._division_operand(other)
        lead_inv = divisor.coefficients[-1].inv()
        zero = self.base_ring.zero()
        remainder = list(self.coefficients)
        quotient = [zero] * max(len(remainder) - len(divisor.coefficients) + 1, 0)
        for shift in reversed(range(len(quotient))):
            factor = remainder[shift + len(divisor.coefficients) - 1]._mul(lead_inv)
            quotient[shift] = factor
            for i, d in enumerate(divisor.coefficients):
                remainder[shift + i] = remainder[shift + i]._sub(factor._mul(d))
        return self._new(quotient), self._new(remainder)

    def __floordiv__(self, other: Any) -> Polynomial:
        return divmod(self, other)[0]

    def __mod__(self, other: Any) -> Polynomial:
        return divmod(self, other)[1]

    def gcd(self, other: Any) -> Polynomial:
        """Monic greatest common divisor over a field."""
        a, b = self, self._division_operand(other, allow_zero=True)
        while b.coefficients:
            a, b = b, a % b
        if not a.coefficients:
            return a
        return a._scale(a.coefficients[-1].inv())

    # Calculus and evaluation

    def derivative(self) -> Polynomial:
        return self._new([c * power for power, c in enumerate(self.coefficients)][1:])

    def evaluate(self, point: Any) -> Any:
        """Evaluate at `point` by Horner's rule; the result type follows coercion."""
        if not self.coefficients:
            return self.base_ring.zero()
        result = self.coefficients[-1].copy()
        for c in reversed(self.coefficients[:-1]):
            result = result * point + c
        return result

    def __call__(self, point: Any) -> Any:
        return self.evaluate(point)


def IntPoly(coefficients: Sequence[Any], var: str | None = None) -> Polynomial:
    """Polynomial over the integers, coefficients lowest degree first."""
    return PolynomialRing(ZZ, var or settings.DEFAULT_VARIABLE).element_from(list(coefficients))


def RatPoly(coefficients: Sequence[Any], var: str | None = None) -> Polynomial:
    """Polynomial over the rationals, coefficients lowest degree first."""
    return PolynomialRing(QQ, var or settings.DEFAULT_VARIABLE).element_from(list(coefficients))


def cyclotomic(n: Any, var: str | None = None) -> Polynomial:
    """The n-th cyclotomic polynomial over the integers."""
    n = int(n) if isinstance(n, Integer) else n
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ConversionError(n, type(n).__name__, "positive integer")
    poly = sympy.cyclotomic_poly(n, sympy.Symbol("x"), polys=True)
    return IntPoly([int(c) for c in reversed(poly.all_coeffs())], var)
