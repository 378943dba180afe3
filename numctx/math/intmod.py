"""
Integers modulo n.

IntModCtx describes the ring Z/nZ; IntMod holds a residue that is always
reduced into [0, n). Every operation re-establishes that invariant.
"""

from __future__ import annotations

from typing import Any, ClassVar

import sympy

from ..core.errors import ConfigurationError, ConversionError, DivisionError
from ..core.logging import get_logger
from .integer import ZZ, Integer, to_exact_fraction
from .value import Context, Element, TypePrecedence

logger = get_logger(__name__)


class IntModCtx(Context):
    """
    Context for the ring of integers mod n.

    Examples:
        >>> zn = IntModCtx(12)
        >>> zn(13) == zn(1)
        True
    """

    modulus: int

    def __init__(self, modulus: Any = None, **kwargs):
        if modulus is None:
            modulus = kwargs.pop("modulus", None)
        if isinstance(modulus, Integer):
            modulus = modulus.value
        if isinstance(modulus, bool) or not isinstance(modulus, int):
            raise ConfigurationError("IntModCtx", "modulus must be an integer", modulus=str(modulus))
        if modulus <= 0:
            raise ConfigurationError("IntModCtx", "modulus must be positive", modulus=modulus)
        super().__init__(modulus=modulus, **kwargs)
        logger.debug("Created IntModCtx(%d)", modulus)

    @property
    def is_field(self) -> bool:  # type: ignore[override]
        return bool(sympy.isprime(self.modulus))

    def element_from(self, raw: Any) -> IntMod:
        if isinstance(raw, IntMod):
            if raw.context != self:
                raise ConversionError(raw, f"IntMod mod {raw.context.modulus}", f"IntMod mod {self.modulus}")
            return IntMod.model_construct(context=self, residue=raw.residue)
        value = to_exact_fraction(raw, f"IntMod mod {self.modulus}")
        residue = value.numerator % self.modulus
        if value.denominator != 1:
            try:
                residue = residue * pow(value.denominator, -1, self.modulus) % self.modulus
            except ValueError as e:
                raise ConversionError(raw, type(raw).__name__, f"IntMod mod {self.modulus}") from e
        return IntMod.model_construct(context=self, residue=residue)

    def to_string(self) -> str:
        return f"Ring of integers mod {self.modulus}"


class IntMod(Element):
    """
    Residue class modulo n.

    Rationals coerce when their denominator is invertible mod n.
    """

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.INTMOD

    context: IntModCtx
    residue: int

    def __init__(self, value: Any, context: IntModCtx, **kwargs):
        residue = context.element_from(value).residue
        super().__init__(context=context, residue=residue, **kwargs)

    def _payload(self) -> tuple:
        return (self.residue,)

    def to_fields(self) -> list:
        return [self.context.modulus, self.residue]

    @classmethod
    def from_fields(cls, context: IntModCtx, fields: list) -> IntMod:
        modulus, residue = fields
        if int(modulus) != context.modulus:
            raise ConversionError(f"{residue} mod {modulus}", "IntMod", context.to_string())
        return context.element_from(int(residue))

    def to_string(self) -> str:
        return str(self.residue)

    def to_python(self) -> int:
        return self.residue

    @property
    def modulus(self) -> int:
        return self.context.modulus

    def _new(self, value: int) -> IntMod:
        return IntMod.model_construct(context=self.context, residue=value % self.context.modulus)

    def lift(self) -> Integer:
        """Canonical representative in [0, n) as an Integer."""
        return ZZ.element_from(self.residue)

    def __int__(self) -> int:
        return self.residue

    # Canonical operations

    def _add(self, other: IntMod) -> IntMod:
        return self._new(self.residue + other.residue)

    def _sub(self, other: IntMod) -> IntMod:
        return self._new(self.residue - other.residue)

    def _mul(self, other: IntMod) -> IntMod:
        return self._new(self.residue * other.residue)

    def _neg(self) -> IntMod:
        return self._new(-self.residue)

    def is_unit(self) -> bool:
        return sympy.igcd(self.residue, self.context.modulus) == 1

    def inv(self) -> IntMod:
        try:
            return self._new(pow(self.residue, -1, self.context.modulus))
        except ValueError as e:
            raise DivisionError(f"{self.residue} is not invertible mod {self.context.modulus}") from e

    def __pow__(self, exponent: Any) -> IntMod:
        if isinstance(exponent, Integer):
            exponent = exponent.value
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        base = self.inv() if exponent < 0 else self
        return self._new(pow(base.residue, abs(exponent), self.context.modulus))
