#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Row append vs column append.

Builds square matrices one line at a time with `push_row` and with
`push_col` and reports the wall time of each, plus the number of
reallocations, next to a NumPy `vstack` baseline.
"""

import time

import numpy as np
import pandas as pd

from matr import Matrix

np.random.seed(0)
REPEATS = 5  # best of 5 runs
sizes = [50, 200, 500]


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def build_by_rows(lines):
    m = Matrix()
    for line in lines:
        m.push_row(line)
    return m


def build_by_cols(lines):
    m = Matrix()
    for line in lines:
        m.push_col(line)
    return m


def count_growths(push_name, lines):
    m = Matrix()
    push = getattr(m, push_name)
    grows = 0
    last_capacity = m.capacity
    for line in lines:
        push(line)
        if m.capacity != last_capacity:
            grows += 1
            last_capacity = m.capacity
    return grows


def main():
    records = []
    for n in sizes:
        lines = [np.random.randn(n) for _ in range(n)]

        # reference: one concatenation at the end
        t_np = min(wall(np.vstack, lines) for _ in range(REPEATS))

        for name, build in (("push_row", build_by_rows), ("push_col", build_by_cols)):
            t = min(wall(build, lines) for _ in range(REPEATS))
            m = build(lines)
            grows = count_growths(name, lines)
            records.append((name, f"{n}x{n}", t, t / t_np, grows, m.capacity))

    df = pd.DataFrame(
        records,
        columns=["kernel", "size", "sec", "sec/NumPy", "reallocs", "capacity"],
    )
    print(df.to_markdown(index=False))

    df.to_csv("bench_push_results.csv", index=False)


if __name__ == "__main__":
    main()
