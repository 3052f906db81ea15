# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Arithmetic on matrices.

Every function returns a new matrix and leaves its inputs untouched. The
result buffer is allocated once, up front; if that fails an
AllocationError is raised and no partial result is produced.
"""

import numbers
from typing import TYPE_CHECKING

import numpy as np

from .errors import DimensionMismatchError, ScalarRangeError, UnsupportedTypeError
from .storage import copy_into
from .utils import is_real_number, requires_numeric

if TYPE_CHECKING:
    from .matrix import Matrix


def _check_scalar(a: "Matrix", scalar, operation: str) -> None:
    """
    Reject non-real scalars, and Python ints too large for the matrix dtype.

    NumPy would otherwise raise a bare OverflowError (or promote to inf)
    when mixing such an int with a narrower array.
    """
    if not is_real_number(scalar):
        raise UnsupportedTypeError(operation, type(scalar).__name__)
    if not isinstance(scalar, numbers.Integral) or isinstance(scalar, np.generic):
        return

    kind = a.dtype.kind
    if kind in "iu":
        info = np.iinfo(a.dtype)
        fits = info.min <= scalar <= info.max
    else:
        fits = abs(scalar) <= float(np.finfo(a.dtype).max)
    if not fits:
        raise ScalarRangeError(operation, scalar, a.dtype)


def _check_same_shape(a: "Matrix", b: "Matrix", operation: str) -> None:
    if a.shape != b.shape:
        raise DimensionMismatchError(operation, a.shape, b.shape)


def _scalar_op(ufunc, a: "Matrix", scalar) -> "Matrix":
    dtype = np.result_type(a._grid(), scalar)
    out = a._blank(a.rows, a.cols, dtype)
    ufunc(a._grid(), scalar, out=out._grid())
    return out


def _elementwise_op(ufunc, a: "Matrix", b: "Matrix") -> "Matrix":
    dtype = np.result_type(a.dtype, b.dtype)
    out = a._blank(a.rows, a.cols, dtype)
    ufunc(a._grid(), b._grid(), out=out._grid())
    return out


@requires_numeric
def scale(a: "Matrix", scalar) -> "Matrix":
    """Multiply every element by `scalar`."""
    _check_scalar(a, scalar, "scale")
    return _scalar_op(np.multiply, a, scalar)


@requires_numeric
def add_scalar(a: "Matrix", scalar) -> "Matrix":
    _check_scalar(a, scalar, "add_scalar")
    return _scalar_op(np.add, a, scalar)


@requires_numeric
def sub_scalar(a: "Matrix", scalar) -> "Matrix":
    _check_scalar(a, scalar, "sub_scalar")
    return _scalar_op(np.subtract, a, scalar)


@requires_numeric
def add_elementwise(a: "Matrix", b: "Matrix") -> "Matrix":
    _check_same_shape(a, b, "add_elementwise")
    return _elementwise_op(np.add, a, b)


@requires_numeric
def sub_elementwise(a: "Matrix", b: "Matrix") -> "Matrix":
    _check_same_shape(a, b, "sub_elementwise")
    return _elementwise_op(np.subtract, a, b)


@requires_numeric
def mul_elementwise(a: "Matrix", b: "Matrix") -> "Matrix":
    """Hadamard product."""
    _check_same_shape(a, b, "mul_elementwise")
    return _elementwise_op(np.multiply, a, b)


@requires_numeric
def multiply(a: "Matrix", b: "Matrix") -> "Matrix":
    """
    Matrix product A B.

    Parameters
    ----------
    a : (m, n) Matrix
    b : (n, p) Matrix

    Returns
    -------
    (m, p) Matrix. Each cell is sum_k a[i, k] * b[k, j], accumulated in the
    operands' own dtype, so integer inputs stay integer.

    Raises
    ------
    DimensionMismatchError : if a.cols != b.rows
    """
    if a.cols != b.rows:
        raise DimensionMismatchError("multiply", a.shape, b.shape)

    dtype = np.result_type(a.dtype, b.dtype)
    out = a._blank(a.rows, b.cols, dtype)
    A, B, C = a._grid(), b._grid(), out._grid()
    for i in range(a.rows):
        for j in range(b.cols):
            C[i, j] = A[i, :] @ B[:, j]
    return out


def transpose(a: "Matrix") -> "Matrix":
    """(cols x rows) matrix with result[j, i] == a[i, j]. Works for any dtype."""
    out = a._blank(a.cols, a.rows, a.dtype, a.clone)
    if a.clone is not None and a.size:
        copy_into(out._buffer.data, a._grid().T.ravel(), a.size, a.clone)
    else:
        out._grid()[...] = a._grid().T
    return out


@requires_numeric
def norm(a: "Matrix") -> float:
    """Frobenius norm, accumulated in float64 whatever the storage dtype."""
    x = a._live().astype(np.float64)
    return float(np.sqrt(np.sum(x * x)))
