# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from matr import Matrix
from matr.errors import (
    InvalidRowSizeError,
    InvalidSizeError,
    InvalidSourceError,
    InvalidValueError,
    UnsupportedTypeError,
)


def test_empty():
    m = Matrix.empty()
    assert m.shape == (0, 0)
    assert m.capacity == 0
    assert m.is_empty
    assert m.size == 0
    assert m.dtype == np.float64
    assert Matrix() == m


def test_with_capacity():
    m = Matrix.with_capacity(2, 3)
    assert m.shape == (0, 0)
    assert m.capacity == 6

    # pushing within the reservation does not reallocate
    m.push_row([1, 2, 3])
    m.push_row([4, 5, 6])
    assert m.capacity == 6


@pytest.mark.parametrize("rows,cols", [(0, 0), (0, 4), (3, 0)])
def test_with_capacity_zero_is_empty(rows, cols):
    m = Matrix.with_capacity(rows, cols)
    assert m.shape == (0, 0)
    assert m.capacity == 0


@pytest.mark.parametrize("rows,cols", [(1, 1), (2, 3), (5, 1), (1, 7), (6, 4)])
def test_from_sequence_row_major(rows, cols):
    rng = np.random.default_rng(seed=rows * 10 + cols)
    source = rng.integers(-100, 100, size=rows * cols).tolist()

    m = Matrix.from_sequence(rows, cols, source)
    assert m.shape == (rows, cols)
    assert m.capacity == rows * cols
    for i in range(rows):
        for j in range(cols):
            assert m.get(i, j) == source[i * cols + j]


def test_from_sequence_invalid_size():
    with pytest.raises(InvalidSizeError):
        Matrix.from_sequence(0, 3, [])
    with pytest.raises(InvalidSizeError):
        Matrix.from_sequence(2, 0, [])
    with pytest.raises(InvalidSizeError):
        Matrix.from_sequence(-1, 2, [1, 2])


def test_from_sequence_invalid_source():
    with pytest.raises(InvalidSourceError) as info:
        Matrix.from_sequence(2, 3, [1, 2, 3, 4, 5])
    assert info.value.expected == 6
    assert info.value.actual == 5
    assert isinstance(info.value, ValueError)


def test_from_sequence_dtype():
    assert Matrix.from_sequence(1, 2, [1, 2]).dtype.kind == "i"
    assert Matrix.from_sequence(1, 2, [1, 2.5]).dtype == np.float64
    assert Matrix.from_sequence(1, 2, [1, 2], dtype=np.float32).dtype == np.float32

    words = Matrix.from_sequence(1, 3, ["a", "bb", "ccc"])
    assert words.dtype == object
    assert not words.is_numeric
    assert words.get(0, 2) == "ccc"


def test_from_sequence_ndarray():
    A = np.arange(6, dtype=np.int32).reshape(2, 3)
    m = Matrix.from_sequence(2, 3, A)
    assert m.dtype == np.int32
    np.testing.assert_array_equal(m.to_numpy(), A)

    # the matrix owns its copy
    A[0, 0] = 99
    assert m.get(0, 0) == 0


def test_from_sequence_clone():
    calls = []

    def clone(x):
        calls.append(x)
        return list(x)

    source = [[1], [2], [3], [4]]
    m = Matrix.from_sequence(2, 2, source, clone=clone)
    assert len(calls) == 4
    assert m.get(1, 0) == [3]
    assert m.get(1, 0) is not source[2]
    assert m.clone is clone


def test_from_rows():
    m = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
    assert m.shape == (2, 3)
    assert m.tolist() == [[1, 2, 3], [4, 5, 6]]

    assert Matrix.from_rows([]).shape == (0, 0)

    with pytest.raises(InvalidRowSizeError):
        Matrix.from_rows([[1, 2, 3], [4, 5]])


def test_filled():
    m = Matrix.filled(2, 3, 5)
    assert m.shape == (2, 3)
    assert m.capacity == 6
    assert all(x == 5 for row in m.tolist() for x in row)

    assert Matrix.filled(0, 3, 5).shape == (0, 0)
    assert Matrix.filled(3, 0, 5).capacity == 0


def test_factories_reject_lossy_values():
    with pytest.raises(InvalidValueError):
        Matrix.filled(1, 1, 300, dtype=np.int8)
    with pytest.raises(InvalidValueError):
        Matrix.filled(2, 2, None, dtype=np.float64)
    with pytest.raises(InvalidValueError):
        Matrix.from_sequence(1, 2, [1.5, 2], dtype=np.int64)
    with pytest.raises(InvalidValueError):
        Matrix.from_sequence(1, 2, np.array([0.5, 1.0]), dtype=np.int32)

    assert Matrix.filled(1, 1, 127, dtype=np.int8).get(0, 0) == 127


def test_filled_clones_each_slot():
    m = Matrix.filled(2, 2, [0], clone=list)
    m.get(0, 0).append(1)
    assert m.get(0, 0) == [0, 1]
    assert m.get(1, 1) == [0]


def test_filled_without_clone_shares_value():
    shared = [0]
    m = Matrix.filled(1, 2, shared)
    assert m.get(0, 0) is shared
    assert m.get(0, 1) is shared


@pytest.mark.parametrize("n", [1, 2, 5])
def test_identity(n):
    m = Matrix.identity(n)
    assert m.shape == (n, n)
    for i in range(n):
        for j in range(n):
            assert m.get(i, j) == (1 if i == j else 0)


def test_identity_dtype_and_zero_size():
    assert Matrix.identity(3, dtype=np.int32).dtype == np.int32
    assert Matrix.identity(0).shape == (0, 0)


@pytest.mark.parametrize("dtype", [object, bool, np.complex128, str])
def test_numeric_factories_reject_other_types(dtype):
    with pytest.raises(UnsupportedTypeError):
        Matrix.identity(2, dtype=dtype)
    with pytest.raises(UnsupportedTypeError):
        Matrix.zeros(2, 2, dtype=dtype)
    with pytest.raises(UnsupportedTypeError):
        Matrix.ones(2, 2, dtype=dtype)


def test_zeros_and_ones():
    z = Matrix.zeros(3, 4)
    o = Matrix.ones(3, 4, dtype=np.int8)
    assert z.shape == o.shape == (3, 4)
    np.testing.assert_array_equal(z.to_numpy(), np.zeros((3, 4)))
    np.testing.assert_array_equal(o.to_numpy(), np.ones((3, 4)))
    assert o.dtype == np.int8


def test_copy_is_independent():
    m = Matrix.from_sequence(2, 2, [1, 2, 3, 4])
    c = m.copy()
    assert c == m
    c.set(0, 0, 9)
    assert m.get(0, 0) == 1
    assert Matrix().copy().shape == (0, 0)


def test_release_and_context_manager():
    m = Matrix.ones(2, 2)
    m.release()
    assert m.shape == (0, 0)
    assert m.capacity == 0
    m.release()  # second call is a no-op
    assert m.capacity == 0

    with Matrix.zeros(3, 3) as z:
        assert z.capacity == 9
    assert z.capacity == 0
    assert z.shape == (0, 0)


def test_render():
    m = Matrix.from_sequence(2, 3, [1, 2, 3, 4, 5, 6])
    assert str(m) == "Matrix (2 x 3) [\n1 2 3\n4 5 6\n]"
    assert m.render() == str(m)
    assert str(Matrix()) == "Matrix (0 x 0) [\n]"
    assert repr(Matrix.zeros(1, 2)) == "Matrix(rows=1, cols=2, dtype=float64)"


def test_equality():
    a = Matrix.from_sequence(2, 2, [1, 2, 3, 4])
    assert a == Matrix.from_sequence(2, 2, [1.0, 2.0, 3.0, 4.0])
    assert a != Matrix.from_sequence(2, 2, [1, 2, 3, 5])
    assert a != Matrix.from_sequence(1, 4, [1, 2, 3, 4])
    assert a != [[1, 2], [3, 4]]
