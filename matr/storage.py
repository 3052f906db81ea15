# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Row-major storage and its growth policy.
"""

import logging
from typing import Any, Callable, Optional

import numpy as np

from .errors import AllocationError, ResizeError
from .utils import next_capacity

logger = logging.getLogger(__name__)

CloneFn = Callable[[Any], Any]


def _allocate(capacity: int, dtype: np.dtype) -> np.ndarray:
    # np.empty raises ValueError for sizes it cannot even describe
    try:
        return np.empty(capacity, dtype=dtype)
    except (MemoryError, ValueError) as e:
        raise AllocationError(capacity, str(e) or type(e).__name__) from e


def copy_into(
    dst: np.ndarray,
    src: np.ndarray,
    count: int,
    clone: Optional[CloneFn] = None,
) -> None:
    """Copy the first `count` slots of `src` into `dst`, in flat order."""
    if clone is None:
        dst[:count] = src[:count]
        return
    for k in range(count):
        dst[k] = clone(src[k])


class RowMajorBuffer:
    """
    A flat, owned buffer with separate length (kept by the owner) and
    capacity.

    Parameters
    ----------
    dtype : np.dtype
        Element type of every slot.
    clone : callable | None
        Used to duplicate elements whenever the buffer is reallocated.
        None means a direct copy.
    """

    def __init__(self, dtype, clone: Optional[CloneFn] = None):
        self.dtype = np.dtype(dtype)
        self.clone = clone
        self.data: Optional[np.ndarray] = None
        self.capacity = 0

    def reserve(self, capacity: int) -> None:
        """Allocate exactly `capacity` slots, discarding any current contents."""
        if capacity < 0:
            raise AllocationError(capacity, "negative capacity")
        if capacity == 0:
            self.release()
            return
        self.data = _allocate(capacity, self.dtype)
        self.capacity = capacity

    def grow(self, rows: int, cols: int) -> int:
        """
        Reallocate to the next capacity in the doubling schedule, keeping
        the rows * cols live elements.

        Returns the new capacity. On failure the old buffer is untouched.
        """
        old_capacity = self.capacity
        new_capacity = next_capacity(rows, cols, old_capacity)
        try:
            new_data = _allocate(new_capacity, self.dtype)
        except AllocationError as e:
            raise ResizeError(old_capacity, new_capacity) from e

        live = rows * cols
        if live:
            copy_into(new_data, self.data, live, self.clone)
        logger.debug(
            f"grow: {rows} x {cols}, capacity {old_capacity} -> {new_capacity}"
        )
        self.data = new_data
        self.capacity = new_capacity
        return new_capacity

    def ensure(self, rows: int, cols: int, needed: int) -> int:
        """Grow until at least `needed` slots exist; return the number of reallocations."""
        count = 0
        while self.capacity < needed:
            self.grow(rows, cols)
            count += 1
        return count

    def release(self) -> None:
        self.data = None
        self.capacity = 0
