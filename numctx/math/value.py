"""
Base Context and Element classes for the numctx type system.

Every value belongs to exactly one context: an immutable description of the
algebraic structure it lives in (a modulus, a field, a working precision).
Elements hold a shared reference to their context and own their payload.

This module provides:
- Structural equality and hashing for contexts
- Context-gated equality for elements
- Type promotion precedence
- Python operator wiring onto one canonical implementation per operation
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from ..core.errors import ContextMismatch, DivisionError


class TypePrecedence(IntEnum):
    """
    Type promotion precedence hierarchy.

    Lower values promote to higher values.
    """

    INTEGER = 0
    RATIONAL = 1
    INTMOD = 2
    FINITE_FIELD = 3
    NUMBER_FIELD = 4
    REAL = 5
    COMPLEX = 6
    POLYNOMIAL = 7
    MATRIX = 8


def ensure_same_context(lhs: Element, rhs: Element) -> None:
    """
    Fail fast when two elements do not share a structurally equal context.

    Mixing structures (two moduli, two precisions) is a programming error,
    so this raises ContextMismatch rather than a recoverable error.
    """
    if lhs.context is rhs.context:
        return
    if lhs.context != rhs.context:
        raise ContextMismatch(lhs.context, rhs.context)


class Context(BaseModel, ABC):
    """
    Immutable descriptor of an algebraic structure.

    Subclasses declare their defining parameters as pydantic fields and
    validate them in __init__, raising ConfigurationError. Equality and
    hashing compare the defining parameters, never object identity.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Whether every non-zero element is invertible
    is_field: ClassVar[bool] = False

    @abstractmethod
    def element_from(self, raw: Any) -> Element:
        """
        Build an element of this context from a raw value.

        The payload is reduced against the context before it is returned.
        Raises ConversionError when raw has no image in this structure.
        """

    @abstractmethod
    def to_string(self) -> str:
        """Human-readable description of the structure."""

    def parameters(self) -> tuple:
        """Defining parameters, in declaration order."""
        return tuple(getattr(self, name) for name in type(self).model_fields)

    def zero(self) -> Element:
        return self.element_from(0)

    def one(self) -> Element:
        return self.element_from(1)

    def __call__(self, raw: Any = 0) -> Element:
        return self.element_from(raw)

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, Context):
            return NotImplemented
        return type(self) is type(other) and self.parameters() == other.parameters()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.parameters()))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        args = ", ".join(f"{name}={getattr(self, name)!r}" for name in type(self).model_fields)
        return f"{self.__class__.__name__}({args})"


class Element(BaseModel, ABC):
    """
    Base class for all values that belong to a context.

    Subclasses declare a `context` field plus their payload fields and
    implement the canonical operation bodies (_add, _sub, _mul, _div, _neg).
    The Python operators defined here only forward to numctx.math.dispatch,
    which coerces the foreign operand, checks the contexts and calls the
    canonical body.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Type precedence for promotion (must be set by subclasses)
    type_precedence: ClassVar[TypePrecedence]

    # Operations for which both operands must share a context
    context_checked_ops: ClassVar[frozenset[str]] = frozenset({"add", "sub", "mul", "div"})

    context: Any

    # Capability interface

    @abstractmethod
    def _payload(self) -> tuple:
        """Exact, hashable view of the payload used for equality."""

    @abstractmethod
    def to_fields(self) -> list:
        """Ordered payload fields for serialization."""

    @classmethod
    @abstractmethod
    def from_fields(cls, context: Context, fields: list) -> Element:
        """Rebuild an element of `context` from its ordered payload fields."""

    @abstractmethod
    def to_string(self) -> str:
        """Convert to human-readable string."""

    @abstractmethod
    def _add(self, other: Element) -> Element:
        pass

    @abstractmethod
    def _sub(self, other: Element) -> Element:
        pass

    @abstractmethod
    def _mul(self, other: Element) -> Element:
        pass

    @abstractmethod
    def _neg(self) -> Element:
        pass

    def _div(self, other: Element) -> Element:
        return self._mul(other.inv())

    def inv(self) -> Element:
        raise DivisionError(f"{self.__class__.__name__} has no multiplicative inverse")

    # Context access

    def parent(self) -> Context:
        """Return the context this element belongs to."""
        return self.context

    def is_zero(self) -> bool:
        return self._payload() == self.context.zero()._payload()

    def is_one(self) -> bool:
        return self._payload() == self.context.one()._payload()

    def copy(self) -> Element:
        """Duplicate the payload, sharing the context."""
        return self.model_copy(update={name: _copy_payload(getattr(self, name))
                                       for name in self._payload_fields()})

    @classmethod
    def _payload_fields(cls) -> list[str]:
        return [name for name in cls.model_fields if name != "context"]

    def _assign(self, other: Element) -> None:
        """Overwrite this payload with the payload of `other` (same context)."""
        ensure_same_context(self, other)
        for name in self._payload_fields():
            setattr(self, name, getattr(other, name))

    # String representations

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_string()})"

    def to_python(self) -> Any:
        raise NotImplementedError(f"{self.__class__.__name__}.to_python() not implemented")

    # Equality

    def __eq__(self, other: Any) -> bool:
        from .dispatch import coerce_operand

        operand = coerce_operand(self, other, strict=False)
        if operand is NotImplemented:
            return NotImplemented
        if operand is None:
            return False
        ensure_same_context(self, operand)
        return self._payload() == operand._payload()

    __hash__ = None  # type: ignore[assignment]

    def __bool__(self) -> bool:
        return not self.is_zero()

    # Operator overloading (forwarded to the dispatch layer)

    def __add__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "add")

    def __radd__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "add", reflected=True)

    def __iadd__(self, other: Any) -> Element:
        from .dispatch import inplace
        return inplace(self, other, "add")

    def __sub__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "sub")

    def __rsub__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "sub", reflected=True)

    def __isub__(self, other: Any) -> Element:
        from .dispatch import inplace
        return inplace(self, other, "sub")

    def __mul__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "mul")

    def __rmul__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "mul", reflected=True)

    def __imul__(self, other: Any) -> Element:
        from .dispatch import inplace
        return inplace(self, other, "mul")

    def __truediv__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "div")

    def __rtruediv__(self, other: Any) -> Element:
        from .dispatch import binary
        return binary(self, other, "div", reflected=True)

    def __itruediv__(self, other: Any) -> Element:
        from .dispatch import inplace
        return inplace(self, other, "div")

    def __neg__(self) -> Element:
        return self._neg()

    def __pos__(self) -> Element:
        return self.copy()

    def __pow__(self, exponent: Any) -> Element:
        """Exponentiation by an integer, by repeated squaring."""
        if isinstance(exponent, Element) and exponent.type_precedence == TypePrecedence.INTEGER:
            exponent = int(exponent)
        if not isinstance(exponent, int) or isinstance(exponent, bool):
            return NotImplemented
        base = self
        if exponent < 0:
            base = self.inv()
            exponent = -exponent
        result = self.context.one()
        while exponent:
            if exponent & 1:
                result = result._mul(base)
            exponent >>= 1
            if exponent:
                base = base._mul(base)
        return result

    # Named in-place variants

    def add_assign(self, other: Any) -> None:
        from .dispatch import inplace_or_raise
        inplace_or_raise(self, other, "add")

    def sub_assign(self, other: Any) -> None:
        from .dispatch import inplace_or_raise
        inplace_or_raise(self, other, "sub")

    def mul_assign(self, other: Any) -> None:
        from .dispatch import inplace_or_raise
        inplace_or_raise(self, other, "mul")

    def div_assign(self, other: Any) -> None:
        from .dispatch import inplace_or_raise
        inplace_or_raise(self, other, "div")


def _copy_payload(value: Any) -> Any:
    if isinstance(value, list):
        return [_copy_payload(item) for item in value]
    if isinstance(value, Element):
        return value.copy()
    return value
