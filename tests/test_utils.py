# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math

import numpy as np

from densekkt.pivot import Pivot
from densekkt.utils import (
    count_significant,
    hypot_norm,
    is_small,
    permutation_sign,
    random_spd,
)


def test_permutation_sign():
    assert permutation_sign([0, 1, 2]) == 1.0
    assert permutation_sign([1, 0, 2]) == -1.0
    assert permutation_sign([1, 2, 0]) == 1.0
    assert permutation_sign([]) == 1.0


def test_hypot_norm():
    assert hypot_norm([]) == 0.0
    assert math.isclose(hypot_norm([3.0, 4.0]), 5.0)
    assert math.isclose(hypot_norm([1e300, 1e300]), math.sqrt(2.0) * 1e300)
    assert hypot_norm([1e-300, 1e-300]) > 0.0


def test_small_and_significant():
    assert is_small(1e-14, 1.0)
    assert not is_small(1e-6, 1.0)
    assert is_small(0.0, 0.0)
    assert count_significant(np.array([5.0, 1e-20, -2.0])) == 2
    assert count_significant(np.zeros(4)) == 0
    assert count_significant(np.zeros(0)) == 0


def test_random_spd_is_spd():
    S = random_spd(6, seed=0)
    assert np.allclose(S, S.T)
    assert np.all(np.linalg.eigvalsh(S) > 0)


def test_pivot_value():
    p = Pivot((2, 0, 1))
    assert p.is_modified
    assert p.signum == 1.0
    assert len(p) == 3
    A = np.arange(9.0).reshape(3, 3)
    np.testing.assert_array_equal(p.permute_rows(A), A[[2, 0, 1]])
    np.testing.assert_array_equal(p.as_matrix() @ A, A[[2, 0, 1]])

    q = Pivot.identity(3)
    assert not q.is_modified
    assert q.signum == 1.0
    assert Pivot((1, 0)).signum == -1.0
    assert Pivot([0, 1]) == Pivot.identity(2)
