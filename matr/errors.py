# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exception hierarchy for matr.

Every error raised by the package derives from `MatrixError`, and each
concrete class also derives from the closest builtin exception so that
callers catching `IndexError`, `ValueError`, ... keep working.
"""

from typing import Optional, Tuple


class MatrixError(Exception):
    """Base exception for all matr errors."""


class InvalidSizeError(MatrixError, ValueError):
    """A construction asked for a zero row or column count."""

    def __init__(self, rows: int, cols: int):
        super().__init__(
            "Invalid size: The matrix must have at least one row and column "
            f"(got {rows} x {cols})"
        )
        self.rows = rows
        self.cols = cols


class InvalidSourceError(MatrixError, ValueError):
    """A flat source sequence does not hold exactly rows * cols elements."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            "Invalid source: The sequence must have `rows * cols` elements to "
            f"create a valid matrix (expected {expected}, got {actual})"
        )
        self.expected = expected
        self.actual = actual


class RowOutOfBoundsError(MatrixError, IndexError):
    def __init__(self, index: int, rows: int):
        super().__init__(
            "Index out of bounds: The row index must be less than the number "
            f"of rows in the matrix (index {index}, rows {rows})"
        )
        self.index = index
        self.rows = rows


class ColOutOfBoundsError(MatrixError, IndexError):
    def __init__(self, index: int, cols: int):
        super().__init__(
            "Index out of bounds: The column index must be less than the "
            f"number of columns in the matrix (index {index}, cols {cols})"
        )
        self.index = index
        self.cols = cols


class InvalidRowSizeError(MatrixError, ValueError):
    """A supplied row does not have `cols` elements."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Invalid row size: expected {expected} elements, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class InvalidColSizeError(MatrixError, ValueError):
    """A supplied column does not have `rows` elements."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Invalid column size: expected {expected} elements, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class AllocationError(MatrixError, MemoryError):
    """A fresh buffer of the requested capacity could not be obtained."""

    def __init__(self, capacity: int, reason: Optional[str] = None):
        msg = f"Allocation failed: could not reserve {capacity} elements"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.capacity = capacity


class ResizeError(MatrixError, MemoryError):
    """
    Growing an existing buffer failed.

    The matrix keeps its previous buffer, so it is still valid.
    """

    def __init__(self, old_capacity: int, new_capacity: int):
        super().__init__(
            f"Resize failed: could not grow buffer from {old_capacity} "
            f"to {new_capacity} elements"
        )
        self.old_capacity = old_capacity
        self.new_capacity = new_capacity


class DimensionMismatchError(MatrixError, ValueError):
    """
    Operands of a binary operation have incompatible shapes.

    Attributes:
        left, right: (rows, cols) of each operand
        operation: name of the operation that was attempted
    """

    def __init__(
        self,
        operation: str,
        left: Tuple[int, int],
        right: Tuple[int, int],
    ):
        super().__init__(
            f"Dimension mismatch in {operation}: "
            f"{left[0]} x {left[1]} vs {right[0]} x {right[1]}"
        )
        self.operation = operation
        self.left = left
        self.right = right


class UnsupportedTypeError(MatrixError, TypeError):
    """A numeric-only operation was requested for a non-numeric dtype."""

    def __init__(self, operation: str, dtype):
        super().__init__(
            "Invalid type: The type must be numerical to use "
            f"`{operation}` (got dtype {dtype})"
        )
        self.operation = operation
        self.dtype = dtype


class StaleReferenceError(MatrixError, RuntimeError):
    """An element reference outlived a structural mutation of its matrix."""

    def __init__(self, row: int, col: int):
        super().__init__(
            f"Stale reference to element ({row}, {col}): the matrix was "
            "resized or released after the reference was taken"
        )
        self.row = row
        self.col = col


class InvalidValueError(MatrixError, ValueError):
    """
    Supplied values cannot be stored in the matrix dtype without loss
    (None, strings, fractional values for an integer dtype, out of range).
    """

    def __init__(self, source_dtype, target_dtype, reason: str = "lossy conversion"):
        super().__init__(
            f"Invalid value: cannot store {source_dtype} values in a "
            f"{target_dtype} matrix ({reason})"
        )
        self.source_dtype = source_dtype
        self.target_dtype = target_dtype


class ScalarRangeError(MatrixError, OverflowError):
    """A scalar operand does not fit the matrix dtype."""

    def __init__(self, operation: str, scalar, dtype):
        super().__init__(
            f"Scalar out of range in {operation}: {scalar} does not fit {dtype}"
        )
        self.operation = operation
        self.scalar = scalar
        self.dtype = dtype
