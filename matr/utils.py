# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import functools
import numbers
from typing import Any, Iterable

import numpy as np

from .errors import InvalidValueError, UnsupportedTypeError

DEFAULT_DTYPE = np.dtype(np.float64)

# signed int, unsigned int, real float
NUMERIC_KINDS: str = "iuf"


def is_numeric_dtype(dtype) -> bool:
    """Return True for integer and real floating-point dtypes (not bool)."""
    return np.dtype(dtype).kind in NUMERIC_KINDS


def check_numeric(dtype, operation: str) -> np.dtype:
    """Return `dtype` as a np.dtype, or raise if it cannot do arithmetic."""
    dtype = np.dtype(dtype)
    if not is_numeric_dtype(dtype):
        raise UnsupportedTypeError(operation, dtype)
    return dtype


def requires_numeric(func):
    """
    Reject non-numeric matrices before `func` runs.

    Every positional argument that looks like a matrix (has a `dtype` and a
    `shape`) is checked, so binary operations validate both operands.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        for arg in args:
            if hasattr(arg, "dtype") and hasattr(arg, "shape"):
                check_numeric(arg.dtype, func.__name__)
        return func(*args, **kwargs)

    return wrapper


def flat_index(row: int, col: int, cols: int) -> int:
    """Row-major offset of element (row, col) in a matrix `cols` wide."""
    return row * cols + col


def next_capacity(rows: int, cols: int, capacity: int) -> int:
    """
    Capacity the buffer should grow to from its current state.

        rows == cols == 0    ->  2
        one of them is 0     ->  2 * the non-zero one
        otherwise            ->  2 * capacity

    The result is always larger than `capacity`; a reserved but still
    empty matrix doubles what it already has instead of shrinking.
    """
    if rows == 0 and cols == 0:
        new = 2
    elif rows == 0 or cols == 0:
        new = 2 * max(rows, cols)
    else:
        new = 2 * capacity
    if new <= capacity:
        new = 2 * capacity
    return new


def is_real_number(x: Any) -> bool:
    if isinstance(x, (bool, np.bool_)):
        return False
    return isinstance(x, numbers.Real)


def storage_dtype(dtype) -> np.dtype:
    """Fixed-width string dtypes would truncate on write; keep them as objects."""
    dtype = np.dtype(dtype)
    if dtype.kind in "USV":
        return np.dtype(object)
    return dtype


def infer_dtype(items: Iterable[Any]) -> np.dtype:
    """
    Pick a storage dtype for `items`.

    Real numbers get the dtype NumPy would choose for them; anything else
    (strings, arbitrary objects, booleans, complex) is stored as `object`.
    """
    items = list(items)
    if items and all(is_real_number(x) for x in items):
        return storage_dtype(np.asarray(items).dtype)
    return np.dtype(object)


def coerce_values(values, dtype) -> np.ndarray:
    """
    Convert `values` to a 1-D array of numeric `dtype`, refusing lossy input.

    None, strings, fractional values bound for an integer dtype, and
    integers outside the dtype's range raise InvalidValueError.
    """
    dtype = np.dtype(dtype)
    try:
        raw = np.asarray(values)
    except (ValueError, TypeError, OverflowError) as e:
        raise InvalidValueError("unconvertible", dtype, str(e)) from e
    raw = raw.ravel()
    if raw.size == 0:
        return raw.astype(dtype)

    if not np.can_cast(raw.dtype, dtype, "same_kind"):
        raise InvalidValueError(raw.dtype, dtype)
    if dtype.kind in "iu" and raw.dtype.kind in "iu":
        info = np.iinfo(dtype)
        if int(raw.min()) < info.min or int(raw.max()) > info.max:
            raise InvalidValueError(raw.dtype, dtype, "out of range")
    return raw.astype(dtype)
