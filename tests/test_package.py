# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

import densekkt as dk


def test_public_api():
    for name in dk.__all__:
        assert hasattr(dk, name), name
    assert isinstance(dk.__version__, str)


def test_readme_example():
    out = dk.KKTSolver().solve(dk.KKTInput(np.eye(2), [0, 0], [[1, 1]], [1]))
    assert out.solvable
    assert out.X.ravel().tolist() == [0.5, 0.5]


def test_errors_share_a_base():
    for error in (
        dk.DimensionError,
        dk.NotComputedError,
        dk.RankDeficientError,
        dk.InvalidInputError,
    ):
        assert issubclass(error, dk.DenseKKTError)
