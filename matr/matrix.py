# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Growable, row-major 2-D container.
"""

import logging
import operator
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from . import arithmetic
from .errors import (
    ColOutOfBoundsError,
    InvalidColSizeError,
    InvalidRowSizeError,
    InvalidSizeError,
    InvalidSourceError,
    RowOutOfBoundsError,
)
from .storage import CloneFn, RowMajorBuffer, copy_into
from .utils import (
    DEFAULT_DTYPE,
    check_numeric,
    coerce_values,
    flat_index,
    infer_dtype,
    is_numeric_dtype,
    is_real_number,
    storage_dtype,
)
from .views import ElementRef

logger = logging.getLogger(__name__)


def _check_extent(rows: int, cols: int) -> Tuple[int, int]:
    rows, cols = operator.index(rows), operator.index(cols)
    if rows < 0 or cols < 0:
        raise InvalidSizeError(rows, cols)
    return rows, cols


class Matrix:
    """
    A dynamically growable matrix over a single owned, contiguous,
    row-major buffer.

    Element (i, j) lives at flat offset ``i * cols + j``. The buffer may hold
    more slots than ``rows * cols``; the extra capacity is what lets
    `push_row` run in amortised O(1).

    Parameters
    ----------
    dtype : dtype-like
        Element type. Integer and real float dtypes support arithmetic;
        anything else (``object`` for arbitrary Python values) supports
        storage and access only.
    clone : callable | None
        Duplicates one element. Used by every copy-producing operation
        (growth, row/column extraction, ...). None copies values directly.

    Example
    -------
    >>> m = Matrix()
    >>> m.push_row([1, 2, 3])
    >>> m.push_row([4, 5, 6])
    >>> m.push_col([7, 8])
    >>> m.shape
    (2, 4)
    """

    # numpy operands on the left defer to our reflected operators
    __array_ufunc__ = None

    def __init__(self, dtype=DEFAULT_DTYPE, clone: Optional[CloneFn] = None):
        self._buffer = RowMajorBuffer(storage_dtype(dtype), clone)
        self._rows = 0
        self._cols = 0
        self._generation = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def empty(cls, dtype=DEFAULT_DTYPE, clone: Optional[CloneFn] = None) -> "Matrix":
        """0 x 0 matrix. Nothing is allocated until the first push."""
        return cls(dtype, clone)

    @classmethod
    def with_capacity(
        cls,
        rows: int,
        cols: int,
        dtype=DEFAULT_DTYPE,
        clone: Optional[CloneFn] = None,
    ) -> "Matrix":
        """
        Empty matrix with room for ``rows * cols`` elements.

        The logical shape stays 0 x 0; a zero-sized request allocates nothing.
        """
        rows, cols = _check_extent(rows, cols)
        out = cls(dtype, clone)
        if rows and cols:
            out._buffer.reserve(rows * cols)
        return out

    @classmethod
    def from_sequence(
        cls,
        rows: int,
        cols: int,
        source: Sequence[Any],
        dtype=None,
        clone: Optional[CloneFn] = None,
    ) -> "Matrix":
        """
        Build a ``rows x cols`` matrix from a flat, row-major `source`.

        Raises
        ------
        InvalidSizeError   : rows or cols is zero
        InvalidSourceError : len(source) != rows * cols
        """
        rows, cols = _check_extent(rows, cols)
        if rows == 0 or cols == 0:
            raise InvalidSizeError(rows, cols)

        if isinstance(source, np.ndarray):
            items = source.ravel()
            if dtype is None:
                dtype = storage_dtype(source.dtype)
        else:
            items = list(source)
            if dtype is None:
                dtype = infer_dtype(items)

        if len(items) != rows * cols:
            raise InvalidSourceError(rows * cols, len(items))

        out = cls._blank(rows, cols, dtype, clone)
        out._write_flat(0, items, clone)
        return out

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Sequence[Any]],
        dtype=None,
        clone: Optional[CloneFn] = None,
    ) -> "Matrix":
        """Build a matrix by pushing each row of `rows` in turn."""
        rows = [list(r) for r in rows]
        if dtype is None:
            dtype = infer_dtype(x for r in rows for x in r)
        out = cls(dtype, clone)
        for r in rows:
            out.push_row(r)
        return out

    @classmethod
    def filled(
        cls,
        rows: int,
        cols: int,
        value: Any,
        dtype=None,
        clone: Optional[CloneFn] = None,
    ) -> "Matrix":
        """``rows x cols`` matrix with every element set to `value`."""
        rows, cols = _check_extent(rows, cols)
        if dtype is None:
            dtype = infer_dtype([value])
        if rows == 0 or cols == 0:
            return cls.empty(dtype, clone)

        out = cls._blank(rows, cols, dtype, clone)
        data = out._buffer.data
        n = rows * cols
        if clone is not None:
            for k in range(n):
                data[k] = clone(value)
        elif data.dtype == object:
            for k in range(n):
                data[k] = value
        else:
            data[:n] = coerce_values([value], data.dtype)[0]
        return out

    @classmethod
    def identity(cls, size: int, dtype=DEFAULT_DTYPE) -> "Matrix":
        dtype = check_numeric(dtype, "identity")
        size = operator.index(size)
        out = cls.zeros(size, size, dtype)
        if size:
            # every (size + 1)-th slot is on the diagonal
            out._buffer.data[: size * size : size + 1] = 1
        return out

    @classmethod
    def zeros(cls, rows: int, cols: int, dtype=DEFAULT_DTYPE) -> "Matrix":
        return cls.filled(rows, cols, 0, check_numeric(dtype, "zeros"))

    @classmethod
    def ones(cls, rows: int, cols: int, dtype=DEFAULT_DTYPE) -> "Matrix":
        return cls.filled(rows, cols, 1, check_numeric(dtype, "ones"))

    @classmethod
    def _blank(
        cls, rows: int, cols: int, dtype, clone: Optional[CloneFn] = None
    ) -> "Matrix":
        """Allocated ``rows x cols`` matrix whose elements are not yet written."""
        out = cls(dtype, clone)
        if rows and cols:
            out._buffer.reserve(rows * cols)
            out._rows = rows
            out._cols = cols
        return out

    @classmethod
    def _from_flat(
        cls,
        rows: int,
        cols: int,
        items: np.ndarray,
        dtype,
        clone: Optional[CloneFn] = None,
    ) -> "Matrix":
        out = cls._blank(rows, cols, dtype, clone)
        if rows and cols:
            copy_into(out._buffer.data, items, rows * cols, clone)
        return out

    def copy(self, clone: Optional[CloneFn] = None) -> "Matrix":
        """Independent matrix with the same shape, dtype and elements."""
        clone = clone if clone is not None else self.clone
        return self._from_flat(self._rows, self._cols, self._live(), self.dtype, clone)

    def release(self) -> None:
        """
        Free the buffer and reset to 0 x 0.

        Calling it again is a no-op. Outstanding references become stale.
        """
        if self._buffer.capacity == 0:
            return
        logger.debug(f"release: {self._rows} x {self._cols}, capacity {self.capacity}")
        self._buffer.release()
        self._rows = 0
        self._cols = 0
        self._generation += 1

    def __enter__(self) -> "Matrix":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    @property
    def clone(self) -> Optional[CloneFn]:
        return self._buffer.clone

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_numeric(self) -> bool:
        return is_numeric_dtype(self.dtype)

    @property
    def is_empty(self) -> bool:
        return self._rows == 0 or self._cols == 0

    # ------------------------------------------------------------------
    # Storage helpers
    # ------------------------------------------------------------------
    def _live(self) -> np.ndarray:
        """Flat view of the rows * cols live elements."""
        if self._buffer.data is None:
            return np.empty(0, dtype=self.dtype)
        return self._buffer.data[: self.size]

    def _grid(self) -> np.ndarray:
        """2-D view of the live elements (a detached empty array for 0 x 0)."""
        return self._live().reshape(self._rows, self._cols)

    def _write_flat(self, start: int, items, clone: Optional[CloneFn] = None) -> None:
        data = self._buffer.data
        if clone is not None or data.dtype == object:
            for k, x in enumerate(items):
                data[start + k] = clone(x) if clone is not None else x
        else:
            data[start : start + len(items)] = coerce_values(items, data.dtype)

    def _check_row(self, row: int) -> int:
        row = operator.index(row)
        if not 0 <= row < self._rows:
            raise RowOutOfBoundsError(row, self._rows)
        return row

    def _check_col(self, col: int) -> int:
        col = operator.index(col)
        if not 0 <= col < self._cols:
            raise ColOutOfBoundsError(col, self._cols)
        return col

    def _offset(self, row: int, col: int) -> int:
        row = self._check_row(row)
        col = self._check_col(col)
        return flat_index(row, col, self._cols)

    def _as_line(self, values) -> np.ndarray:
        """
        Convert `values` to a 1-D array of this matrix's dtype.

        Conversion happens before any state change, so a bad value leaves
        the matrix untouched.
        """
        if isinstance(values, Matrix):
            values = values._live()
        if isinstance(values, np.ndarray):
            values = values.ravel()
        else:
            values = list(values)

        if self.dtype == object:
            line = np.empty(len(values), dtype=object)
            for k, x in enumerate(values):
                line[k] = x
            return line
        return coerce_values(values, self.dtype)

    def grow(self) -> int:
        """Reallocate to the next capacity in the doubling schedule."""
        new_capacity = self._buffer.grow(self._rows, self._cols)
        self._generation += 1
        return new_capacity

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def get(self, row: int, col: int) -> Any:
        """
        Value at (row, col).

        Raises RowOutOfBoundsError / ColOutOfBoundsError, row checked first.
        """
        return self._buffer.data[self._offset(row, col)]

    def set(self, row: int, col: int, value: Any) -> None:
        offset = self._offset(row, col)
        self._buffer.data[offset] = self._as_line([value])[0]

    def get_ref(self, row: int, col: int) -> ElementRef:
        """
        Live handle on (row, col).

        Do not keep it across push_row/push_col/grow/release; using it
        afterwards raises StaleReferenceError.
        """
        row = self._check_row(row)
        col = self._check_col(col)
        return ElementRef(self, row, col)

    def get_row(self, row: int, clone: Optional[CloneFn] = None) -> "Matrix":
        """New 1 x cols matrix holding a copy of `row`."""
        row = self._check_row(row)
        clone = clone if clone is not None else self.clone
        start = flat_index(row, 0, self._cols)
        items = self._buffer.data[start : start + self._cols]
        return self._from_flat(1, self._cols, items, self.dtype, clone)

    def get_col(self, col: int, clone: Optional[CloneFn] = None) -> "Matrix":
        """New rows x 1 matrix holding a copy of `col`."""
        col = self._check_col(col)
        clone = clone if clone is not None else self.clone
        items = self._buffer.data[col : self.size : self._cols]
        return self._from_flat(self._rows, 1, items, self.dtype, clone)

    def get_row_refs(self, row: int) -> List[ElementRef]:
        row = self._check_row(row)
        return [ElementRef(self, row, j) for j in range(self._cols)]

    def get_col_refs(self, col: int) -> List[ElementRef]:
        col = self._check_col(col)
        return [ElementRef(self, i, col) for i in range(self._rows)]

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        row, col = key
        self.set(row, col, value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set_row(self, idx: int, values: Iterable[Any]) -> None:
        """Overwrite row `idx`; `values` must have exactly `cols` elements."""
        idx = self._check_row(idx)
        line = self._as_line(values)
        if len(line) != self._cols:
            raise InvalidRowSizeError(self._cols, len(line))
        start = flat_index(idx, 0, self._cols)
        self._buffer.data[start : start + self._cols] = line

    def set_col(self, idx: int, values: Iterable[Any]) -> None:
        """Overwrite column `idx`; `values` must have exactly `rows` elements."""
        idx = self._check_col(idx)
        line = self._as_line(values)
        if len(line) != self._rows:
            raise InvalidColSizeError(self._rows, len(line))
        self._buffer.data[idx : self.size : self._cols] = line

    def push_row(self, values: Iterable[Any]) -> None:
        """
        Append a row.

        An empty matrix adopts ``len(values)`` as its column count. Amortised
        O(1): the buffer doubles when it runs out of room.
        """
        line = self._as_line(values)
        if self._cols == 0:
            if len(line) == 0:
                raise InvalidRowSizeError(self._cols, 0)
            cols = len(line)
        elif len(line) != self._cols:
            raise InvalidRowSizeError(self._cols, len(line))
        else:
            cols = self._cols

        grown = self._buffer.ensure(self._rows, cols, (self._rows + 1) * cols)
        if grown:
            logger.debug(f"push_row: reallocated {grown}x, capacity {self.capacity}")

        self._cols = cols
        self._rows += 1
        self._generation += 1
        self.set_row(self._rows - 1, line)

    def push_col(self, values: Iterable[Any]) -> None:
        """
        Append a column.

        An empty matrix adopts ``len(values)`` as its row count. Unlike
        `push_row` this is O(rows * cols): every existing row has to slide
        right to open a slot at its end.
        """
        line = self._as_line(values)
        if self._rows == 0:
            if len(line) == 0:
                raise InvalidColSizeError(self._rows, 0)
            rows = len(line)
        elif len(line) != self._rows:
            raise InvalidColSizeError(self._rows, len(line))
        else:
            rows = self._rows

        old_cols = self._cols
        new_cols = old_cols + 1
        grown = self._buffer.ensure(rows, old_cols, rows * new_cols)
        if grown:
            logger.debug(f"push_col: reallocated {grown}x, capacity {self.capacity}")

        # last row first: each row's destination only overlaps rows already moved
        data = self._buffer.data
        for i in reversed(range(rows)):
            src = flat_index(i, 0, old_cols)
            dst = flat_index(i, 0, new_cols)
            if old_cols:
                data[dst : dst + old_cols] = data[src : src + old_cols]
            data[dst + old_cols] = line[i]

        self._rows = rows
        self._cols = new_cols
        self._generation += 1

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def scale(self, scalar) -> "Matrix":
        return arithmetic.scale(self, scalar)

    def add_scalar(self, scalar) -> "Matrix":
        return arithmetic.add_scalar(self, scalar)

    def sub_scalar(self, scalar) -> "Matrix":
        return arithmetic.sub_scalar(self, scalar)

    def add_elementwise(self, other: "Matrix") -> "Matrix":
        return arithmetic.add_elementwise(self, other)

    def sub_elementwise(self, other: "Matrix") -> "Matrix":
        return arithmetic.sub_elementwise(self, other)

    def mul_elementwise(self, other: "Matrix") -> "Matrix":
        return arithmetic.mul_elementwise(self, other)

    def multiply(self, other: "Matrix") -> "Matrix":
        return arithmetic.multiply(self, other)

    def transpose(self) -> "Matrix":
        return arithmetic.transpose(self)

    def norm(self) -> float:
        return arithmetic.norm(self)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def __add__(self, other):
        if isinstance(other, Matrix):
            return self.add_elementwise(other)
        if is_real_number(other):
            return self.add_scalar(other)
        return NotImplemented

    def __radd__(self, other):
        if is_real_number(other):
            return self.add_scalar(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Matrix):
            return self.sub_elementwise(other)
        if is_real_number(other):
            return self.sub_scalar(other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self.mul_elementwise(other)
        if is_real_number(other):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if is_real_number(other):
            return self.scale(other)
        return NotImplemented

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return self.multiply(other)
        return NotImplemented

    # ------------------------------------------------------------------
    # Conversion / rendering
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """Fresh (rows, cols) ndarray; never aliases the matrix buffer."""
        return self._grid().copy()

    def tolist(self) -> List[List[Any]]:
        return self._grid().tolist()

    def render(self) -> str:
        """
        Human-readable block, e.g.::

            Matrix (2 x 3) [
            1 2 3
            4 5 6
            ]
        """
        lines = [f"Matrix ({self._rows} x {self._cols}) ["]
        for row in self._grid():
            lines.append(" ".join(str(x) for x in row))
        lines.append("]")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(rows={self._rows}, cols={self._cols}, "
            f"dtype={self.dtype})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            return False
        return bool(np.array_equal(self._live(), other._live()))

    __hash__ = None
