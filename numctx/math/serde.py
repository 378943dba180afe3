"""
Serialization of elements.

serialize() turns an element into a JSON-compatible list

    [type tag, context fields, payload fields]

where the context fields are [context tag, *defining parameters] (nested
contexts are serialized the same way) and the payload fields come from the
element's to_fields(). deserialize() rebuilds the context through its
constructor, so every parameter is validated again, then rebuilds the element
from its payload.
"""

from __future__ import annotations

import json
from fractions import Fraction
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ..core.errors import ConversionError
from ..core.logging import get_context_logger
from .complex import Complex, ComplexField
from .finfld import FinFldElem, FiniteField
from .integer import Integer, IntegerRing
from .intmod import IntMod, IntModCtx
from .matrix import Matrix, MatrixSpace
from .numfld import NumberField, NumFldElem
from .poly import Polynomial, PolynomialRing
from .rational import Rational, RationalField
from .real import Real, RealField
from .value import Context, Element

logger = get_context_logger(__name__, component="serde")

ELEMENT_TYPES: dict[str, tuple[type[Element], type[Context]]] = {
    "Integer": (Integer, IntegerRing),
    "Rational": (Rational, RationalField),
    "IntMod": (IntMod, IntModCtx),
    "FinFldElem": (FinFldElem, FiniteField),
    "NumFldElem": (NumFldElem, NumberField),
    "Polynomial": (Polynomial, PolynomialRing),
    "Matrix": (Matrix, MatrixSpace),
    "Real": (Real, RealField),
    "Complex": (Complex, ComplexField),
}

ELEMENT_TAGS = {element_type: tag for tag, (element_type, _) in ELEMENT_TYPES.items()}


# Contexts

def _fraction_fields(value: Fraction) -> list:
    return [value.numerator, value.denominator]


CONTEXT_ENCODERS: dict[type[Context], Callable[[Any], list]] = {
    IntegerRing: lambda ctx: [],
    RationalField: lambda ctx: [],
    IntModCtx: lambda ctx: [ctx.modulus],
    FiniteField: lambda ctx: [ctx.prime, ctx.degree, list(ctx.modulus)],
    NumberField: lambda ctx: [[_fraction_fields(c) for c in ctx.polynomial]],
    PolynomialRing: lambda ctx: [serialize_context(ctx.base_ring), ctx.var],
    MatrixSpace: lambda ctx: [serialize_context(ctx.base_ring), ctx.nrows, ctx.ncols],
    RealField: lambda ctx: [ctx.precision],
    ComplexField: lambda ctx: [ctx.precision],
}

CONTEXT_DECODERS: dict[str, Callable[..., Context]] = {
    "IntegerRing": lambda: IntegerRing(),
    "RationalField": lambda: RationalField(),
    "IntModCtx": lambda modulus: IntModCtx(modulus),
    "FiniteField": lambda prime, degree, modulus: FiniteField(prime, degree, modulus),
    "NumberField": lambda coeffs: NumberField([Fraction(int(n), int(d)) for n, d in coeffs]),
    "PolynomialRing": lambda base, var: PolynomialRing(deserialize_context(base), var),
    "MatrixSpace": lambda base, nrows, ncols: MatrixSpace(deserialize_context(base), nrows, ncols),
    "RealField": lambda precision: RealField(precision),
    "ComplexField": lambda precision: ComplexField(precision),
}


def serialize_context(context: Context) -> list:
    """[context tag, *defining parameters]."""
    encoder = CONTEXT_ENCODERS.get(type(context))
    if encoder is None:
        raise ConversionError(context, type(context).__name__, "serialized context")
    return [type(context).__name__] + encoder(context)


def deserialize_context(fields: Any) -> Context:
    """Rebuild (and so re-validate) a context from its fields."""
    if not isinstance(fields, list) or not fields or fields[0] not in CONTEXT_DECODERS:
        raise ConversionError(fields, "serialized context", "Context")
    tag, *params = fields
    try:
        return CONTEXT_DECODERS[tag](*params)
    except (TypeError, ValueError) as e:
        raise ConversionError(fields, "serialized context", tag) from e


# Elements

def serialize(value: Element) -> list:
    """
    Ordered field view of an element.

    Examples:
        >>> serialize(IntModCtx(7)(10))
        ['IntMod', ['IntModCtx', 7], [7, 3]]
    """
    tag = ELEMENT_TAGS.get(type(value))
    if tag is None:
        raise ConversionError(value, type(value).__name__, "serialized element")
    return [tag, serialize_context(value.context), value.to_fields()]


def deserialize(fields: Any, context: Optional[Context] = None) -> Element:
    """
    Rebuild an element from serialize() output.

    When `context` is given the embedded context must equal it, and the
    element is attached to the given context object.
    """
    if not isinstance(fields, list) or len(fields) != 3 or fields[0] not in ELEMENT_TYPES:
        raise ConversionError(fields, "serialized element", "Element")
    tag, context_fields, payload = fields
    element_type, context_type = ELEMENT_TYPES[tag]

    embedded = deserialize_context(context_fields)
    if not isinstance(embedded, context_type):
        raise ConversionError(context_fields, type(embedded).__name__, context_type.__name__)
    if context is not None:
        if context != embedded:
            raise ConversionError(embedded, embedded.to_string(), context.to_string())
        embedded = context

    try:
        return element_type.from_fields(embedded, payload)
    except (TypeError, ValueError) as e:
        raise ConversionError(payload, "serialized payload", tag) from e


def dumps(value: Element) -> bytes:
    """JSON encoding of serialize(value)."""
    return json.dumps(serialize(value), separators=(",", ":")).encode("utf-8")


def loads(data: Union[bytes, str], context: Optional[Context] = None) -> Element:
    try:
        fields = json.loads(data)
    except json.JSONDecodeError as e:
        raise ConversionError(data[:40], "bytes", "Element") from e
    return deserialize(fields, context)


def save(value: Element, path: Union[str, Path]) -> Path:
    """Write the JSON encoding of `value` to a named file."""
    path = Path(path)
    path.write_bytes(dumps(value))
    logger.debug("Saved element", extra_data={"type": ELEMENT_TAGS[type(value)], "path": str(path)})
    return path


def load(path: Union[str, Path], context: Optional[Context] = None) -> Element:
    """Read an element written by save()."""
    path = Path(path)
    value = loads(path.read_bytes(), context)
    logger.debug("Loaded element", extra_data={"type": type(value).__name__, "path": str(path)})
    return value
