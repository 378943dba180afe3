"""
Dense matrices over any numctx context.

A MatrixSpace is parameterized by its base ring and shape. Entries are kept
row-major as base-ring elements. Addition and subtraction need identical
spaces; a product only needs a shared base ring and matching inner
dimension, and lands in the space of the result's shape.
"""

from __future__ import annotations

from typing import Any, ClassVar, Sequence

import numpy as np
import sympy
from sympy.matrices.normalforms import smith_normal_form
from sympy.polys.domains import ZZ as INT_DOMAIN

from ..core.errors import ConfigurationError, ContextMismatch, ConversionError, DivisionError
from .integer import ZZ
from .intmod import IntModCtx
from .rational import QQ
from .value import Context, Element, TypePrecedence


class MatrixSpace(Context):
    """
    Context for nrows x ncols matrices over `base_ring`.

    Elements are built from a matrix, an ndarray, a list of rows, a flat
    row-major list of entries or a scalar (placed on the diagonal). Nested
    lists are rows when their shape matches the space.

    Examples:
        >>> M = MatrixSpace(ZZ, 2, 2)
        >>> M([[1, 2], [3, 4]]).det()
        Integer(-2)
    """

    base_ring: Context
    nrows: int
    ncols: int

    def __init__(self, base_ring: Any = None, nrows: Any = None, ncols: Any = None, **kwargs):
        if base_ring is None:
            base_ring = kwargs.pop("base_ring", None)
        if nrows is None:
            nrows = kwargs.pop("nrows", None)
        if ncols is None:
            ncols = kwargs.pop("ncols", nrows)
        if not isinstance(base_ring, Context):
            raise ConfigurationError("MatrixSpace", "base ring must be a context", base_ring=str(base_ring))
        for name, value in (("nrows", nrows), ("ncols", ncols)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError("MatrixSpace", f"{name} must be a non-negative integer",
                                         **{name: str(value)})
        super().__init__(base_ring=base_ring, nrows=nrows, ncols=ncols, **kwargs)

    @property
    def is_square(self) -> bool:
        return self.nrows == self.ncols

    def element_from(self, raw: Any) -> Matrix:
        base = self.base_ring
        size = self.nrows * self.ncols
        if isinstance(raw, Matrix):
            if (raw.context.nrows, raw.context.ncols) != (self.nrows, self.ncols):
                raise ConversionError(raw, raw.context.to_string(), self.to_string())
            entries = [base.element_from(e) for e in raw.entries]
        elif isinstance(raw, np.ndarray):
            return self.element_from(raw.tolist())
        elif isinstance(raw, (list, tuple)):
            if self._is_row_list(raw):
                entries = [base.element_from(e) for row in raw for e in row]
            else:
                if len(raw) != size:
                    raise ConversionError(raw, "list", self.to_string())
                entries = [base.element_from(e) for e in raw]
        else:
            scalar = base.element_from(raw)
            if not scalar.is_zero() and not self.is_square:
                raise ConversionError(raw, type(raw).__name__, self.to_string())
            zero = base.zero()
            entries = [scalar.copy() if i // self.ncols == i % self.ncols else zero.copy() for i in range(size)]
        return Matrix.model_construct(context=self, entries=entries)

    def _is_row_list(self, raw: Sequence[Any]) -> bool:
        """
        Whether `raw` is a list of rows rather than a flat list of entries.

        Nested input means rows when its shape matches the space. Otherwise it
        is read as flat entries, which lets base rings whose own elements are
        written as lists (finite and number fields) take `[[1, 1], [0, 1]]` as
        two entries of a 2 x 1 matrix.
        """
        if not raw or not all(isinstance(row, (list, tuple)) for row in raw):
            return False
        if len(raw) == self.nrows and all(len(row) == self.ncols for row in raw):
            return True
        if len(raw) == self.nrows * self.ncols:
            return False
        raise ConversionError(raw, "nested list", self.to_string())

    def identity(self) -> Matrix:
        return self.one()

    def to_string(self) -> str:
        return f"Matrix space of {self.nrows} rows and {self.ncols} columns over {self.base_ring.to_string()}"


def _space(base_ring: Context, nrows: int, ncols: int) -> MatrixSpace:
    return MatrixSpace(base_ring, nrows, ncols)


class Matrix(Element):
    """Dense matrix; entries row-major."""

    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.MATRIX
    context_checked_ops: ClassVar[frozenset[str]] = frozenset({"add", "sub"})

    context: MatrixSpace
    entries: list[Any]

    def __init__(self, entries: Any, context: MatrixSpace, **kwargs):
        entries = context.element_from(entries).entries
        super().__init__(context=context, entries=entries, **kwargs)

    def _payload(self) -> tuple:
        return tuple(e._payload() for e in self.entries)

    def to_fields(self) -> list:
        return [self.nrows, self.ncols] + [e.to_fields() for e in self.entries]

    @classmethod
    def from_fields(cls, context: MatrixSpace, fields: list) -> Matrix:
        nrows, ncols, *entries = fields
        if (int(nrows), int(ncols)) != (context.nrows, context.ncols) or len(entries) != nrows * ncols:
            raise ConversionError(fields[:2], "Matrix", context.to_string())
        element_type = type(context.base_ring.zero())
        return context.element_from([element_type.from_fields(context.base_ring, f) for f in entries])

    def to_string(self) -> str:
        rows = (", ".join(e.to_string() for e in row) for row in self.rows())
        return "[" + ", ".join(f"[{row}]" for row in rows) + "]"

    def to_python(self) -> list[list]:
        return [[e.to_python() for e in row] for row in self.rows()]

    def to_numpy(self) -> np.ndarray:
        """Entries as a numpy object array of Python values."""
        array = np.empty((self.nrows, self.ncols), dtype=object)
        for i, row in enumerate(self.rows()):
            for j, e in enumerate(row):
                array[i, j] = e.to_python()
        return array

    def _new(self, entries: list[Element], context: MatrixSpace | None = None) -> Matrix:
        return Matrix.model_construct(context=context or self.context, entries=entries)

    # Shape and entries

    @property
    def nrows(self) -> int:
        return self.context.nrows

    @property
    def ncols(self) -> int:
        return self.context.ncols

    @property
    def base_ring(self) -> Context:
        return self.context.base_ring

    def is_square(self) -> bool:
        return self.context.is_square

    def _check_index(self, i: int, j: int) -> int:
        if not (0 <= i < self.nrows and 0 <= j < self.ncols):
            raise IndexError(f"entry ({i}, {j}) outside a {self.nrows}x{self.ncols} matrix")
        return i * self.ncols + j

    def entry(self, i: int, j: int) -> Element:
        return self.entries[self._check_index(i, j)].copy()

    def set_entry(self, i: int, j: int, value: Any) -> None:
        self.entries[self._check_index(i, j)] = self.base_ring.element_from(value)

    def __getitem__(self, index: tuple[int, int]) -> Element:
        return self.entry(*index)

    def __setitem__(self, index: tuple[int, int], value: Any) -> None:
        self.set_entry(*index, value)

    def rows(self) -> list[list[Element]]:
        n = self.ncols
        return [self.entries[i * n:(i + 1) * n] for i in range(self.nrows)]

    def row(self, i: int) -> list[Element]:
        if not 0 <= i < self.nrows:
            raise IndexError(f"row {i} outside a {self.nrows}x{self.ncols} matrix")
        return [e.copy() for e in self.rows()[i]]

    def column(self, j: int) -> list[Element]:
        if not 0 <= j < self.ncols:
            raise IndexError(f"column {j} outside a {self.nrows}x{self.ncols} matrix")
        return [self.entries[i * self.ncols + j].copy() for i in range(self.nrows)]

    def transpose(self) -> Matrix:
        space = _space(self.base_ring, self.ncols, self.nrows)
        return self._new([self.entries[i * self.ncols + j].copy()
                          for j in range(self.ncols) for i in range(self.nrows)], space)

    # Canonical operations

    def _add(self, other: Matrix) -> Matrix:
        return self._new([a._add(b) for a, b in zip(self.entries, other.entries)])

    def _sub(self, other: Matrix) -> Matrix:
        return self._new([a._sub(b) for a, b in zip(self.entries, other.entries)])

    def _mul(self, other: Matrix) -> Matrix:
        if self.base_ring != other.base_ring or self.ncols != other.nrows:
            raise ContextMismatch(self.context, other.context)
        zero = self.base_ring.zero()
        a_rows = self.rows()
        b_cols = [other.column(j) for j in range(other.ncols)]
        entries = []
        for row in a_rows:
            for col in b_cols:
                total = zero
                for x, y in zip(row, col):
                    total = total._add(x._mul(y))
                entries.append(total)
        return self._new(entries, _space(self.base_ring, self.nrows, other.ncols))

    def _scale(self, scalar: Element) -> Matrix:
        return self._new([e._mul(scalar) for e in self.entries])

    def _neg(self) -> Matrix:
        return self._new([e._neg() for e in self.entries])

    def inv(self) -> Matrix:
        return self.inverse()

    # Invariants

    def _require_square(self) -> None:
        if not self.is_square():
            raise ConversionError(self, f"{self.nrows}x{self.ncols} matrix", "square matrix")

    def trace(self) -> Element:
        self._require_square()
        total = self.base_ring.zero()
        for i in range(self.nrows):
            total = total._add(self.entries[i * self.ncols + i])
        return total

    def det(self) -> Element:
        """
        Determinant.

        Integer and modular matrices use sympy's fraction-free Bareiss
        elimination on the integer lift; matrices over fields use Gaussian
        elimination; any other base ring falls back to cofactor expansion.
        """
        self._require_square()
        base = self.base_ring
        if self.nrows == 0:
            return base.one()
        if base == ZZ or isinstance(base, IntModCtx):
            lifted = sympy.Matrix(self.nrows, self.ncols, [int(e) for e in self.entries])
            return base.element_from(int(lifted.det(method="bareiss")))
        if base.is_field:
            _, _, det = self._echelon()
            return det
        return self._cofactor_det(self.rows())

    def _cofactor_det(self, rows: list[list[Element]]) -> Element:
        if len(rows) == 1:
            return rows[0][0]
        total = self.base_ring.zero()
        for j, pivot in enumerate(rows[0]):
            if pivot.is_zero():
                continue
            minor = self._cofactor_det([row[:j] + row[j + 1:] for row in rows[1:]])
            term = pivot._mul(minor)
            total = total._sub(term) if j % 2 else total._add(term)
        return total

    def _field_matrix(self) -> Matrix:
        """This matrix over a field: itself, or its image over QQ for integer matrices."""
        if self.base_ring.is_field:
            return self
        if self.base_ring == ZZ:
            return _space(QQ, self.nrows, self.ncols).element_from(self)
        raise DivisionError(f"linear algebra needs a field, not {self.base_ring.to_string()}")

    def _echelon(self) -> tuple[list[list[Element]], list[int], Element]:
        """Gauss-Jordan elimination: (reduced rows, pivot columns, determinant factor)."""
        rows = [[e.copy() for e in row] for row in self.rows()]
        pivots: list[int] = []
        det = self.base_ring.one()
        r = 0
        for c in range(self.ncols):
            if r == self.nrows:
                break
            pivot = next((i for i in range(r, self.nrows) if not rows[i][c].is_zero()), None)
            if pivot is None:
                det = self.base_ring.zero()
                continue
            if pivot != r:
                rows[r], rows[pivot] = rows[pivot], rows[r]
                det = det._neg()
            det = det._mul(rows[r][c])
            inverse = rows[r][c].inv()
            rows[r] = [x._mul(inverse) for x in rows[r]]
            for i in range(self.nrows):
                if i != r and not rows[i][c].is_zero():
                    factor = rows[i][c]
                    rows[i] = [x._sub(factor._mul(y)) for x, y in zip(rows[i], rows[r])]
            pivots.append(c)
            r += 1
        if r < self.nrows:
            det = self.base_ring.zero()
        return rows, pivots, det

    def rank(self) -> int:
        _, pivots, _ = self._field_matrix()._echelon()
        return len(pivots)

    def rref(self) -> Matrix:
        """Reduced row echelon form, over the fraction field for integer matrices."""
        matrix = self._field_matrix()
        rows, _, _ = matrix._echelon()
        return matrix._new([e for row in rows for e in row])

    def inverse(self) -> Matrix:
        self._require_square()
        matrix = self._field_matrix()
        n = self.nrows
        augmented = matrix.hcat(matrix.context.identity())
        rows, pivots, _ = augmented._echelon()
        if pivots[:n] != list(range(n)):
            raise DivisionError("matrix is singular")
        return matrix._new([e for row in rows for e in row[n:]])

    def solve(self, rhs: Any) -> Matrix:
        """
        Solve self * X = rhs for a non-singular square matrix.

        `rhs` is a Matrix, a list of rows, or a flat list read as a column.
        """
        inverse = self.inverse()
        if not isinstance(rhs, Matrix):
            rhs = _matrix(self.base_ring, [r if isinstance(r, (list, tuple)) else [r] for r in rhs], None, None)
        if rhs.nrows != self.nrows:
            raise ContextMismatch(self.context, rhs.context)
        return inverse._mul(_space(inverse.base_ring, rhs.nrows, rhs.ncols).element_from(rhs))

    # Integer normal forms

    def _integer_rows(self) -> list[list[int]]:
        if self.base_ring != ZZ:
            raise ConversionError(self, self.base_ring.to_string(), "Integer ring")
        return [[int(e) for e in row] for row in self.rows()]

    def hnf(self) -> Matrix:
        """Row-style Hermite normal form of an integer matrix."""
        rows = self._integer_rows()
        m, n = self.nrows, self.ncols
        r = 0
        for c in range(n):
            if r == m:
                break
            for i in range(r + 1, m):
                a, b = rows[r][c], rows[i][c]
                if b == 0:
                    continue
                s, t, g = (int(v) for v in INT_DOMAIN.gcdex(a, b))
                top, bottom = rows[r], rows[i]
                rows[r] = [s * x + t * y for x, y in zip(top, bottom)]
                rows[i] = [(b // g) * x - (a // g) * y for x, y in zip(top, bottom)]
            if rows[r][c] == 0:
                continue
            if rows[r][c] < 0:
                rows[r] = [-x for x in rows[r]]
            p = rows[r][c]
            for i in range(r):
                q = rows[i][c] // p
                rows[i] = [x - q * y for x, y in zip(rows[i], rows[r])]
            r += 1
        return self._new([ZZ.element_from(int(x)) for row in rows for x in row])

    def snf(self) -> Matrix:
        """Smith normal form of an integer matrix (sympy)."""
        rows = self._integer_rows()
        if not self.nrows or not self.ncols:
            return self.copy()
        form = smith_normal_form(sympy.Matrix(rows), domain=INT_DOMAIN)
        return self._new([ZZ.element_from(abs(int(x)) if i // self.ncols == i % self.ncols else int(x))
                          for i, x in enumerate(form)])

    # Block constructions

    def _check_base(self, other: Matrix) -> None:
        if not isinstance(other, Matrix):
            raise TypeError(f"expected a Matrix, got '{type(other).__name__}'")
        if self.base_ring != other.base_ring:
            raise ContextMismatch(self.context, other.context)

    def hcat(self, other: Matrix) -> Matrix:
        """Place `other` to the right of this matrix."""
        self._check_base(other)
        if self.nrows != other.nrows:
            raise ContextMismatch(self.context, other.context)
        entries = [e.copy() for a, b in zip(self.rows(), other.rows()) for e in a + b]
        return self._new(entries, _space(self.base_ring, self.nrows, self.ncols + other.ncols))

    def vcat(self, other: Matrix) -> Matrix:
        """Place `other` below this matrix."""
        self._check_base(other)
        if self.ncols != other.ncols:
            raise ContextMismatch(self.context, other.context)
        entries = [e.copy() for e in self.entries + other.entries]
        return self._new(entries, _space(self.base_ring, self.nrows + other.nrows, self.ncols))

    def kronecker_product(self, other: Matrix) -> Matrix:
        self._check_base(other)
        a_rows, b_rows = self.rows(), other.rows()
        entries = [a._mul(b)
                   for a_row in a_rows for b_row in b_rows
                   for a in a_row for b in b_row]
        space = _space(self.base_ring, self.nrows * other.nrows, self.ncols * other.ncols)
        return self._new(entries, space)


def _matrix(base_ring: Context, entries: Sequence[Any], nrows: int | None, ncols: int | None) -> Matrix:
    entries = list(entries)
    if nrows is None:
        if entries and not isinstance(entries[0], (list, tuple)):
            raise ConversionError(entries, "flat list", "matrix without a shape")
        nrows = len(entries)
        ncols = len(entries[0]) if entries else 0
    elif ncols is None:
        ncols = len(entries) // nrows if nrows else 0
    return MatrixSpace(base_ring, nrows, ncols).element_from(entries)


def IntMat(entries: Sequence[Any], nrows: int | None = None, ncols: int | None = None) -> Matrix:
    """
    Integer matrix from a list of rows, or from a flat row-major list and a shape.

    Examples:
        >>> IntMat([[1, 2], [3, 4]]).nrows
        2
        >>> IntMat([1, 2, 3, 4, 5, 6], 2, 3).ncols
        3
    """
    return _matrix(ZZ, entries, nrows, ncols)


def RatMat(entries: Sequence[Any], nrows: int | None = None, ncols: int | None = None) -> Matrix:
    """Rational matrix; same forms as IntMat."""
    return _matrix(QQ, entries, nrows, ncols)
