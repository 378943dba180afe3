"""
Algebraic number fields Q[a] / (f(a)).

Elements are rational coefficient lists in the generator a (lowest degree
first), reduced modulo the defining polynomial f. Reduction and inversion
are done with sympy's univariate Poly over QQ.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, ClassVar, Sequence

import sympy
from sympy.polys.polyerrors import NotInvertible

from ..core.config import settings
from ..core.errors import ConfigurationError, ConversionError, DivisionError
from ..core.logging import get_logger
from .integer import ZZ, Integer, to_exact_fraction
from .poly import Polynomial, RatPoly, format_polynomial
from .rational import QQ, Rational
from .value import Context, Element, TypePrecedence

logger = get_logger(__name__)

_X = sympy.Symbol("x")


def _to_poly(coeffs: Sequence[Fraction]) -> sympy.Poly:
    terms = [sympy.Rational(c.numerator, c.denominator) for c in reversed(coeffs)] or [0]
    return sympy.Poly(terms, _X, domain=sympy.QQ)


def _from_poly(poly: sympy.Poly) -> list[Fraction]:
    coeffs = [Fraction(int(c.p), int(c.q)) for c in reversed(poly.all_coeffs())]
    while coeffs and coeffs[-1] == 0:
        coeffs.pop()
    return coeffs


class NumberField(Context):
    """
    Context for the number field defined by an irreducible rational polynomial.

    The defining polynomial is given by its coefficients, lowest degree first,
    or as a Polynomial with integer or rational coefficients.

    Examples:
        >>> k = NumberField([-2, 0, 1])
        >>> a = k.gen()
        >>> a * a
        NumFldElem(2)
    """

    is_field: ClassVar[bool] = True

    polynomial: tuple[Fraction, ...]

    def __init__(self, polynomial: Any = None, **kwargs):
        if polynomial is None:
            polynomial = kwargs.pop("polynomial", None)
        if isinstance(polynomial, Polynomial):
            polynomial = polynomial.coefficients
        if not isinstance(polynomial, (list, tuple)):
            raise ConfigurationError("NumberField", "defining polynomial must be a coefficient list",
                                     polynomial=str(polynomial))
        try:
            coeffs = [to_exact_fraction(c, "NumberField") for c in polynomial]
        except ConversionError as e:
            raise ConfigurationError("NumberField", "coefficients must be rational",
                                     polynomial=str(polynomial)) from e
        while coeffs and coeffs[-1] == 0:
            coeffs.pop()
        if len(coeffs) < 2:
            raise ConfigurationError("NumberField", "defining polynomial must have degree at least 1",
                                     polynomial=[str(c) for c in coeffs])
        if not _to_poly(coeffs).is_irreducible:
            raise ConfigurationError("NumberField", "defining polynomial is not irreducible over Q",
                                     polynomial=[str(c) for c in coeffs])

        super().__init__(polynomial=tuple(coeffs), **kwargs)
        logger.debug("Created NumberField of degree %d", len(coeffs) - 1)

    @property
    def degree(self) -> int:
        return len(self.polynomial) - 1

    @property
    def variable(self) -> str:
        return settings.NUMBER_FIELD_VARIABLE

    def defining_polynomial(self) -> Any:
        """The defining polynomial as a Polynomial over the rationals."""
        return RatPoly(list(self.polynomial))

    def gen(self) -> NumFldElem:
        return self.element_from([0, 1])

    def _reduce(self, coeffs: Sequence[Fraction]) -> list[Fraction]:
        return _from_poly(_to_poly(coeffs).rem(_to_poly(self.polynomial)))

    def element_from(self, raw: Any) -> NumFldElem:
        if isinstance(raw, NumFldElem):
            if raw.context != self:
                raise ConversionError(raw, raw.context.to_string(), self.to_string())
            return NumFldElem.model_construct(context=self, coefficients=list(raw.coefficients))
        if isinstance(raw, Polynomial) and raw.context.base_ring in (ZZ, QQ):
            raw = list(raw.coefficients)
        elif isinstance(raw, Element) and not isinstance(raw, (Integer, Rational)):
            raise ConversionError(raw, raw.context.to_string(), self.to_string())
        if isinstance(raw, (list, tuple)):
            coeffs = [to_exact_fraction(c, self.to_string()) for c in raw]
        else:
            coeffs = [to_exact_fraction(raw, self.to_string())]
        return NumFldElem.model_construct(context=self, coefficients=self._reduce(coeffs))

    def to_string(self) -> str:
        poly = format_polynomial([str(c) for c in self.polynomial], settings.DEFAULT_VARIABLE)
        return f"Number field with defining polynomial {poly}"


class NumFldElem(Element):
    """Element of a number field, as a rational polynomial in the generator."""

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.NUMBER_FIELD

    context: NumberField
    coefficients: list[Fraction]

    def __init__(self, value: Any, context: NumberField, **kwargs):
        coeffs = context.element_from(value).coefficients
        super().__init__(context=context, coefficients=coeffs, **kwargs)

    def _payload(self) -> tuple:
        return tuple(self.coefficients)

    def to_fields(self) -> list:
        """Coefficients as [numerator, denominator] pairs."""
        return [[c.numerator, c.denominator] for c in self.coefficients]

    @classmethod
    def from_fields(cls, context: NumberField, fields: list) -> NumFldElem:
        if len(fields) > context.degree:
            raise ConversionError(fields, "NumFldElem", context.to_string())
        coeffs = []
        for num, den in fields:
            if int(den) == 0:
                raise DivisionError("coefficient denominator cannot be zero")
            coeffs.append(Fraction(int(num), int(den)))
        return context.element_from(coeffs)

    def to_string(self) -> str:
        return format_polynomial([str(c) for c in self.coefficients], self.context.variable)

    def to_python(self) -> list[Fraction]:
        return list(self.coefficients)

    def to_fraction(self) -> Fraction:
        """The value as a rational, when it lies in Q."""
        if len(self.coefficients) > 1:
            raise ConversionError(self, "NumFldElem", "Rational")
        return self.coefficients[0] if self.coefficients else Fraction(0)

    def _new(self, coeffs: Sequence[Fraction]) -> NumFldElem:
        return NumFldElem.model_construct(context=self.context, coefficients=self.context._reduce(coeffs))

    # Canonical operations

    def _add(self, other: NumFldElem) -> NumFldElem:
        return self._new(_from_poly(_to_poly(self.coefficients) + _to_poly(other.coefficients)))

    def _sub(self, other: NumFldElem) -> NumFldElem:
        return self._new(_from_poly(_to_poly(self.coefficients) - _to_poly(other.coefficients)))

    def _mul(self, other: NumFldElem) -> NumFldElem:
        return self._new(_from_poly(_to_poly(self.coefficients) * _to_poly(other.coefficients)))

    def _neg(self) -> NumFldElem:
        return NumFldElem.model_construct(context=self.context, coefficients=[-c for c in self.coefficients])

    def inv(self) -> NumFldElem:
        if not self.coefficients:
            raise DivisionError("zero has no inverse in a number field")
        try:
            inverse = _to_poly(self.coefficients).invert(_to_poly(self.context.polynomial))
        except NotInvertible as e:
            raise DivisionError(f"{self} is not invertible") from e
        return self._new(_from_poly(inverse))
