"""
Finite fields GF(p^k).

A FiniteField is GF(p)[o] / (m(o)) for a monic irreducible m of degree k.
Elements are coefficient lists in the generator o (lowest degree first),
always reduced modulo m. Polynomial arithmetic over GF(p) is delegated to
sympy's galoistools, which works on dense lists with the highest degree
first.
"""

from __future__ import annotations

from typing import Any, ClassVar, Sequence

import sympy
from sympy.polys.domains import ZZ as GF_DOMAIN
from sympy.polys.galoistools import (
    gf_add,
    gf_gcdex,
    gf_irreducible_p,
    gf_mul,
    gf_neg,
    gf_pow_mod,
    gf_rem,
    gf_sub,
)

from ..core.config import settings
from ..core.errors import ConfigurationError, ConversionError, DivisionError
from ..core.logging import get_context_logger
from .integer import Integer, to_exact_fraction
from .intmod import IntMod
from .poly import Polynomial, format_polynomial
from .rational import Rational
from .value import Context, Element, TypePrecedence

logger = get_context_logger(__name__, component="finite_field")


def _strip(coeffs: list[int]) -> list[int]:
    while coeffs and coeffs[-1] == 0:
        coeffs.pop()
    return coeffs


def _to_gf(coeffs: Sequence[int]) -> list[int]:
    return list(reversed(coeffs))


def _from_gf(f: Sequence[Any], p: int) -> list[int]:
    return _strip([int(c) % p for c in reversed(f)])


def first_irreducible(p: int, k: int) -> tuple[int, ...]:
    """
    Deterministic default modulus for GF(p^k).

    Degree one uses x - g for the least primitive root g, so the generator is
    primitive. Higher degrees take the first monic irreducible polynomial in
    lexicographic order of the lower coefficients.
    """
    if k == 1:
        g = int(sympy.primitive_root(p)) if p > 2 else 1
        return ((-g) % p, 1)
    for index in range(1, p ** k):
        lower = []
        n = index
        for _ in range(k):
            n, digit = divmod(n, p)
            lower.append(digit)
        if lower[0] == 0:
            continue
        candidate = tuple(lower) + (1,)
        if gf_irreducible_p(_to_gf(candidate), p, GF_DOMAIN):
            logger.debug("Selected default modulus", extra_data={"p": p, "k": k, "modulus": candidate})
            return candidate
    raise ConfigurationError("FiniteField", "no irreducible polynomial found", prime=p, degree=k)


class FiniteField(Context):
    """
    Context for the finite field with p^k elements.

    Examples:
        >>> fq = FiniteField(3, 2)
        >>> fq.order
        9
        >>> fq([-1, -1])
        FinFldElem(2*o + 2)
    """

    is_field: ClassVar[bool] = True

    prime: int
    degree: int
    modulus: tuple[int, ...]

    def __init__(self, prime: Any = None, degree: Any = 1, modulus: Sequence[Any] | None = None, **kwargs):
        if prime is None:
            prime = kwargs.pop("prime", None)
        prime = int(prime) if isinstance(prime, Integer) else prime
        if isinstance(prime, bool) or not isinstance(prime, int) or not sympy.isprime(prime):
            raise ConfigurationError("FiniteField", "characteristic must be prime", prime=str(prime))
        if isinstance(degree, bool) or not isinstance(degree, int) or degree < 1:
            raise ConfigurationError("FiniteField", "degree must be a positive integer", degree=str(degree))

        if modulus is None:
            modulus = first_irreducible(prime, degree)
        else:
            modulus = tuple(int(c) % prime for c in modulus)
            if len(modulus) != degree + 1 or modulus[-1] != 1:
                raise ConfigurationError(
                    "FiniteField", "modulus must be monic of the field degree", modulus=list(modulus)
                )
            if not gf_irreducible_p(_to_gf(modulus), prime, GF_DOMAIN):
                raise ConfigurationError("FiniteField", "modulus is not irreducible", modulus=list(modulus))

        super().__init__(prime=prime, degree=degree, modulus=tuple(modulus), **kwargs)

    @property
    def order(self) -> int:
        return self.prime ** self.degree

    @property
    def variable(self) -> str:
        return settings.FINITE_FIELD_VARIABLE

    def gen(self) -> FinFldElem:
        """The class of o, a root of the modulus."""
        return self.element_from([0, 1])

    def _reduce(self, coeffs: Sequence[int]) -> list[int]:
        p = self.prime
        reduced = gf_rem(_to_gf([int(c) % p for c in coeffs]), _to_gf(self.modulus), p, GF_DOMAIN)
        return _from_gf(reduced, p)

    def element_from(self, raw: Any) -> FinFldElem:
        if isinstance(raw, FinFldElem):
            if raw.context != self:
                raise ConversionError(raw, raw.context.to_string(), self.to_string())
            return FinFldElem.model_construct(context=self, coefficients=list(raw.coefficients))
        if isinstance(raw, (list, tuple)):
            coeffs = [self._coefficient(c) for c in raw]
        elif isinstance(raw, Polynomial):
            coeffs = [self._coefficient(c) for c in raw.coefficients]
        else:
            coeffs = [self._coefficient(raw)]
        return FinFldElem.model_construct(context=self, coefficients=self._reduce(coeffs))

    def _coefficient(self, raw: Any) -> int:
        """Map a raw scalar into GF(p)."""
        p = self.prime
        if isinstance(raw, IntMod):
            if raw.context.modulus != p:
                raise ConversionError(raw, raw.context.to_string(), self.to_string())
            return raw.residue
        if isinstance(raw, Element) and not isinstance(raw, (Integer, Rational)):
            raise ConversionError(raw, raw.context.to_string(), self.to_string())
        value = to_exact_fraction(raw, self.to_string())
        try:
            return value.numerator * pow(value.denominator, -1, p) % p
        except ValueError as e:
            raise ConversionError(raw, type(raw).__name__, self.to_string()) from e

    def to_string(self) -> str:
        return f"Finite field of order {self.prime}^{self.degree}"


class FinFldElem(Element):
    """Element of a finite field, as a polynomial in the generator."""

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.FINITE_FIELD

    context: FiniteField
    coefficients: list[int]

    def __init__(self, value: Any, context: FiniteField, **kwargs):
        coeffs = context.element_from(value).coefficients
        super().__init__(context=context, coefficients=coeffs, **kwargs)

    def _payload(self) -> tuple:
        return tuple(self.coefficients)

    def to_fields(self) -> list:
        return list(self.coefficients)

    @classmethod
    def from_fields(cls, context: FiniteField, fields: list) -> FinFldElem:
        if len(fields) > context.degree:
            raise ConversionError(fields, "FinFldElem", context.to_string())
        return context.element_from([int(c) for c in fields])

    def to_string(self) -> str:
        return format_polynomial([str(c) for c in self.coefficients], self.context.variable)

    def to_python(self) -> list[int]:
        return list(self.coefficients)

    def _new_gf(self, f: Sequence[Any]) -> FinFldElem:
        return FinFldElem.model_construct(context=self.context, coefficients=_from_gf(f, self.context.prime))

    def _gf(self) -> list[int]:
        return _to_gf(self.coefficients)

    # Canonical operations

    def _add(self, other: FinFldElem) -> FinFldElem:
        return self._new_gf(gf_add(self._gf(), other._gf(), self.context.prime, GF_DOMAIN))

    def _sub(self, other: FinFldElem) -> FinFldElem:
        return self._new_gf(gf_sub(self._gf(), other._gf(), self.context.prime, GF_DOMAIN))

    def _mul(self, other: FinFldElem) -> FinFldElem:
        ctx = self.context
        product = gf_mul(self._gf(), other._gf(), ctx.prime, GF_DOMAIN)
        return self._new_gf(gf_rem(product, _to_gf(ctx.modulus), ctx.prime, GF_DOMAIN))

    def _neg(self) -> FinFldElem:
        return self._new_gf(gf_neg(self._gf(), self.context.prime, GF_DOMAIN))

    def inv(self) -> FinFldElem:
        if not self.coefficients:
            raise DivisionError("zero has no inverse in a finite field")
        ctx = self.context
        s, _, h = gf_gcdex(self._gf(), _to_gf(ctx.modulus), ctx.prime, GF_DOMAIN)
        if [int(c) for c in h] != [1]:
            raise DivisionError(f"{self} is not invertible")
        return self._new_gf(s)

    def __pow__(self, exponent: Any) -> FinFldElem:
        if isinstance(exponent, Integer):
            exponent = exponent.value
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        base = self.inv() if exponent < 0 else self
        ctx = self.context
        return self._new_gf(gf_pow_mod(base._gf(), abs(exponent), _to_gf(ctx.modulus), ctx.prime, GF_DOMAIN))

    # Field structure

    def frobenius(self, power: int = 1) -> FinFldElem:
        """Apply x -> x^p `power` times."""
        return self ** (self.context.prime ** (power % self.context.degree))

    def _prime_field_value(self, value: FinFldElem) -> int:
        if len(value.coefficients) > 1:
            raise ConversionError(value, "FinFldElem", f"GF({self.context.prime})")
        return value.coefficients[0] if value.coefficients else 0

    def trace(self) -> int:
        """Absolute trace to GF(p), as an integer in [0, p)."""
        total = self.context.zero()
        conjugate = self
        for _ in range(self.context.degree):
            total = total._add(conjugate)
            conjugate = conjugate.frobenius()
        return self._prime_field_value(total)

    def norm(self) -> int:
        """Absolute norm to GF(p), as an integer in [0, p)."""
        p, k = self.context.prime, self.context.degree
        return self._prime_field_value(self ** ((p ** k - 1) // (p - 1)))
