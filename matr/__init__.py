# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
matr
====

A growable, row-major matrix container with a small set of arithmetic
operators, built on a single NumPy buffer.

Public API
~~~~~~~~~~
- Container
    - `Matrix` (construction, access, row/column mutation)
    - `ElementRef` (live handle on one element)
- Arithmetic
    - `scale`, `add_scalar`, `sub_scalar`
    - `add_elementwise`, `sub_elementwise`, `mul_elementwise`
    - `multiply`, `transpose`, `norm`
- Storage helpers
    - `flat_index`, `next_capacity`
- Errors
    - `MatrixError` and its subclasses

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import matr
>>> M = matr.Matrix.from_sequence(2, 3, [1, 2, 3, 4, 5, 6])
>>> (M @ M.T).tolist()
[[14, 32], [32, 77]]
"""

from importlib.metadata import version as _pkg_version

# ---------------------------------------------------------------------
# Re-export the high-level names users are expected to touch.
# Each of these is implemented in one of the internal sub-modules.
# ---------------------------------------------------------------------
from .arithmetic import (
    add_elementwise,
    add_scalar,
    mul_elementwise,
    multiply,
    norm,
    scale,
    sub_elementwise,
    sub_scalar,
    transpose,
)
from .errors import (
    AllocationError,
    ColOutOfBoundsError,
    DimensionMismatchError,
    InvalidColSizeError,
    InvalidRowSizeError,
    InvalidSizeError,
    InvalidSourceError,
    InvalidValueError,
    MatrixError,
    ResizeError,
    RowOutOfBoundsError,
    ScalarRangeError,
    StaleReferenceError,
    UnsupportedTypeError,
)
from .matrix import Matrix
from .utils import flat_index, is_numeric_dtype, next_capacity
from .views import ElementRef

__all__ = [
    "Matrix",
    "ElementRef",
    "scale",
    "add_scalar",
    "sub_scalar",
    "add_elementwise",
    "sub_elementwise",
    "mul_elementwise",
    "multiply",
    "transpose",
    "norm",
    "flat_index",
    "next_capacity",
    "is_numeric_dtype",
    "MatrixError",
    "InvalidSizeError",
    "InvalidSourceError",
    "RowOutOfBoundsError",
    "ColOutOfBoundsError",
    "InvalidRowSizeError",
    "InvalidColSizeError",
    "AllocationError",
    "ResizeError",
    "DimensionMismatchError",
    "UnsupportedTypeError",
    "StaleReferenceError",
    "InvalidValueError",
    "ScalarRangeError",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show matr”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see debug
# output only if they deliberately enable it.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
