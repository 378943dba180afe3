"""
numctx.math - context-parameterized numeric types

Values that carry their algebraic structure with them:
- Integers, rationals and integers mod n
- Finite fields and number fields
- Polynomials and matrices over any of the above
- Certified real and complex balls at a chosen precision
"""

from .arf import Arf
from .ball import Ball, BallOrdering
from .complex import Complex, ComplexField, onei
from .finfld import FinFldElem, FiniteField
from .integer import ZZ, Integer, IntegerRing
from .intmod import IntMod, IntModCtx
from .mag import Mag
from .matrix import IntMat, Matrix, MatrixSpace, RatMat
from .numfld import NumberField, NumFldElem
from .poly import IntPoly, Polynomial, PolynomialRing, RatPoly, cyclotomic
from .rational import QQ, Rational, RationalField
from .real import Real, RealField, compare, pi
from .serde import deserialize, dumps, load, loads, save, serialize
from .value import Context, Element, TypePrecedence

__all__ = [
    "Context",
    "Element",
    "TypePrecedence",
    "IntegerRing",
    "Integer",
    "ZZ",
    "RationalField",
    "Rational",
    "QQ",
    "IntModCtx",
    "IntMod",
    "FiniteField",
    "FinFldElem",
    "NumberField",
    "NumFldElem",
    "PolynomialRing",
    "Polynomial",
    "IntPoly",
    "RatPoly",
    "cyclotomic",
    "MatrixSpace",
    "Matrix",
    "IntMat",
    "RatMat",
    "Arf",
    "Mag",
    "Ball",
    "BallOrdering",
    "RealField",
    "Real",
    "ComplexField",
    "Complex",
    "pi",
    "onei",
    "compare",
    "serialize",
    "deserialize",
    "dumps",
    "loads",
    "save",
    "load",
]
