# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import copy
import logging

import numpy as np
import pytest

import matr.storage
from matr import Matrix
from matr.errors import AllocationError, ResizeError
from matr.storage import RowMajorBuffer
from matr.utils import flat_index, next_capacity

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "rows,cols,capacity,expected",
    [
        (0, 0, 0, 2),  # empty
        (0, 3, 0, 6),  # only cols known
        (4, 0, 0, 8),  # only rows known
        (2, 3, 6, 12),  # both known: double capacity
        (5, 5, 40, 80),
        (0, 0, 6, 12),  # reserved but empty never shrinks
        (0, 3, 6, 12),
    ],
)
def test_next_capacity(rows, cols, capacity, expected):
    assert next_capacity(rows, cols, capacity) == expected


def test_flat_index_is_row_major_and_unique():
    rows, cols = 7, 5
    seen = set()
    for i in range(rows):
        for j in range(cols):
            k = flat_index(i, j, cols)
            assert k == i * cols + j
            seen.add(k)
    assert seen == set(range(rows * cols))


def test_reserve_exact_capacity():
    buf = RowMajorBuffer(np.int64)
    buf.reserve(7)
    assert buf.capacity == 7
    assert buf.data.shape == (7,)
    assert buf.data.dtype == np.int64

    buf.reserve(0)
    assert buf.capacity == 0
    assert buf.data is None


def test_reserve_failures():
    buf = RowMajorBuffer(np.float64)
    with pytest.raises(AllocationError):
        buf.reserve(-1)
    with pytest.raises(AllocationError):
        buf.reserve(2**62)
    assert buf.capacity == 0


def test_grow_keeps_live_elements_in_order():
    buf = RowMajorBuffer(np.int64)
    buf.reserve(6)
    buf.data[:6] = [1, 2, 3, 4, 5, 6]

    assert buf.grow(2, 3) == 12
    assert buf.capacity == 12
    np.testing.assert_array_equal(buf.data[:6], [1, 2, 3, 4, 5, 6])


def test_grow_uses_clone():
    calls = []

    def clone(x):
        calls.append(x)
        return copy.deepcopy(x)

    buf = RowMajorBuffer(object, clone=clone)
    buf.reserve(2)
    first, second = [1], [2]
    buf.data[0] = first
    buf.data[1] = second

    buf.grow(1, 2)
    assert calls == [first, second]
    assert buf.data[0] == [1] and buf.data[0] is not first
    assert buf.data[1] == [2] and buf.data[1] is not second


def test_ensure_counts_reallocations():
    buf = RowMajorBuffer(np.float64)
    assert buf.ensure(0, 3, 3) == 1
    assert buf.capacity == 6
    assert buf.ensure(1, 3, 6) == 0
    assert buf.ensure(2, 3, 9) == 1
    assert buf.capacity == 12


def test_failed_grow_leaves_buffer_untouched(monkeypatch):
    buf = RowMajorBuffer(np.int64)
    buf.reserve(4)
    buf.data[:4] = [1, 2, 3, 4]
    old = buf.data

    def refuse(capacity, dtype):
        raise AllocationError(capacity, "refused")

    monkeypatch.setattr(matr.storage, "_allocate", refuse)
    with pytest.raises(ResizeError) as info:
        buf.grow(2, 2)

    assert info.value.old_capacity == 4
    assert info.value.new_capacity == 8
    assert buf.capacity == 4
    assert buf.data is old
    np.testing.assert_array_equal(buf.data, [1, 2, 3, 4])


def test_push_row_growth_is_amortised():
    m = Matrix()
    width = 3
    capacities = []
    for i in range(40):
        m.push_row(np.arange(width) + i)
        capacities.append(m.capacity)
        assert m.capacity >= m.rows * m.cols

    logger.debug(f"capacities: {capacities}")
    # every capacity is 2 * width times a power of two
    for c in set(capacities):
        k = c // (2 * width)
        assert c % (2 * width) == 0
        assert k & (k - 1) == 0
    # log2(40 / 2) + 1 reallocations, not 40
    assert len(set(capacities)) == 6


def test_push_col_grows_from_empty():
    m = Matrix()
    m.push_col([1, 2, 3])
    assert m.capacity == 6
    m.push_col([4, 5, 6])
    assert m.capacity == 6
    m.push_col([7, 8, 9])
    assert m.capacity == 12
    assert m.shape == (3, 3)
