# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Borrowed references into a matrix's live storage.

A reference remembers the generation of its matrix when it was taken.
Pushing a row or column, growing, or releasing the matrix bumps the
generation, after which the reference refuses to read or write.
"""

from typing import TYPE_CHECKING, Any

from .errors import StaleReferenceError

if TYPE_CHECKING:
    from .matrix import Matrix


class ElementRef:
    __slots__ = ("_matrix", "_generation", "row", "col")

    def __init__(self, matrix: "Matrix", row: int, col: int):
        self._matrix = matrix
        self._generation = matrix.generation
        self.row = row
        self.col = col

    @property
    def is_valid(self) -> bool:
        return self._generation == self._matrix.generation

    def _offset(self) -> int:
        if not self.is_valid:
            raise StaleReferenceError(self.row, self.col)
        return self._matrix._offset(self.row, self.col)

    def get(self) -> Any:
        return self._matrix._buffer.data[self._offset()]

    def set(self, value: Any) -> None:
        self._offset()
        self._matrix.set(self.row, self.col, value)

    value = property(get, set)

    def __repr__(self) -> str:
        state = "live" if self.is_valid else "stale"
        return f"{self.__class__.__name__}(row={self.row}, col={self.col}, {state})"
