"""
Operator dispatch and coercion.

Every binary operator on an Element ends up in binary(): the foreign operand
is coerced into the receiver's context (native Python numbers, or elements of
lower type precedence), the contexts are checked, and the single canonical
method (_add, _sub, _mul, _div) runs. Reflected and in-place operators are
thin wrappers around the same path.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Optional

from ..core.errors import ConversionError
from .value import Element, ensure_same_context

NATIVE_TYPES = (int, Fraction, float, complex, str)


def coerce_operand(lhs: Element, rhs: Any, strict: bool = True) -> Any:
    """
    Bring `rhs` into the type and context of `lhs`.

    Returns NotImplemented when `rhs` is a richer type (Python then tries the
    reflected operator on it) or an unrelated Python object. With
    strict=False a value that has no image in the context yields None instead
    of raising ConversionError.
    """
    if isinstance(rhs, Element):
        if type(rhs) is type(lhs):
            return rhs
        if rhs.type_precedence >= lhs.type_precedence:
            return NotImplemented
    elif isinstance(rhs, bool) or not isinstance(rhs, NATIVE_TYPES):
        return NotImplemented

    try:
        return lhs.context.element_from(rhs)
    except ConversionError:
        if strict:
            raise
        return None


def _scalar_operand(lhs: Element, rhs: Any) -> Optional[Element]:
    """Return `rhs` as an element of lhs's base ring when lhs supports scaling."""
    base_ring = getattr(lhs.context, "base_ring", None)
    if base_ring is None or isinstance(rhs, type(lhs)):
        return None
    if isinstance(rhs, Element):
        if rhs.type_precedence >= lhs.type_precedence:
            return None
    elif isinstance(rhs, bool) or not isinstance(rhs, NATIVE_TYPES):
        return None
    return base_ring.element_from(rhs)


def binary(lhs: Element, rhs: Any, op: str, reflected: bool = False) -> Any:
    """
    Run the canonical implementation of `op` for `lhs op rhs`.

    With reflected=True the expression is `rhs op lhs` (Python called the
    reflected operator on lhs).
    """
    if op in ("mul", "div") and hasattr(lhs, "_scale"):
        scalar = _scalar_operand(lhs, rhs)
        if scalar is not None:
            if op == "mul":
                return lhs._scale(scalar)
            if not reflected:
                return lhs._scale(scalar.inv())

    operand = coerce_operand(lhs, rhs)
    if operand is NotImplemented:
        return NotImplemented

    left, right = (operand, lhs) if reflected else (lhs, operand)
    if op in type(lhs).context_checked_ops:
        ensure_same_context(left, right)
    return getattr(left, f"_{op}")(right)


def inplace(lhs: Element, rhs: Any, op: str) -> Any:
    """
    In-place form of binary(): write the result payload back into lhs.

    When the result lives in another type or context (Integer /= 2 gives a
    Rational, a non-square matrix product changes shape) lhs cannot hold it
    and the new value is returned for rebinding instead.
    """
    result = binary(lhs, rhs, op)
    if result is NotImplemented:
        return NotImplemented
    if type(result) is type(lhs) and result.context == lhs.context:
        lhs._assign(result)
        return lhs
    return result


def inplace_or_raise(lhs: Element, rhs: Any, op: str) -> None:
    """Named *_assign variant: mutate lhs or fail."""
    result = inplace(lhs, rhs, op)
    if result is NotImplemented:
        raise TypeError(
            f"unsupported operand types for {op}: "
            f"'{type(lhs).__name__}' and '{type(rhs).__name__}'"
        )
    if result is not lhs:
        raise ConversionError(result, type(result).__name__, type(lhs).__name__)
