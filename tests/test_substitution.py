# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

from densekkt.substitution import substitute_backwards, substitute_forwards


def _packed(n, seed):
    """Random well-conditioned square with both triangles in use."""
    rng = np.random.default_rng(seed)
    body = rng.uniform(-1, 1, size=(n, n))
    body[np.diag_indices(n)] = rng.uniform(2, 4, size=n)
    return body


def test_forward_unit_lower():
    body = _packed(6, 0)
    L = np.tril(body, -1) + np.eye(6)
    b = np.arange(12.0).reshape(6, 2)
    x = substitute_forwards(body, b.copy(), unit_diagonal=True)
    np.testing.assert_allclose(L @ x, b, atol=1e-12)


def test_forward_transposed_upper():
    body = _packed(5, 1)
    T = np.triu(body).T
    b = np.ones((5, 1))
    x = substitute_forwards(body, b.copy(), unit_diagonal=False, transposed=True)
    np.testing.assert_allclose(T @ x, b, atol=1e-12)


def test_backward_upper():
    U = np.triu(_packed(8, 2))
    b = np.random.default_rng(2).standard_normal((8, 3))
    x = substitute_backwards(U, b.copy(), unit_diagonal=False)
    np.testing.assert_allclose(x, np.linalg.solve(U, b), rtol=1e-10, atol=1e-12)


def test_backward_transposed_unit_lower():
    body = _packed(7, 3)
    LT = (np.tril(body, -1) + np.eye(7)).T
    b = np.ones((7, 1))
    x = substitute_backwards(body, b.copy(), unit_diagonal=True, transposed=True)
    np.testing.assert_allclose(LT @ x, b, atol=1e-12)


def test_solution_overwrites_rhs():
    U = np.array([[2.0, 1.0], [0.0, 4.0]])
    b = np.array([[3.0], [4.0]])
    out = substitute_backwards(U, b)
    assert out is b
    np.testing.assert_array_equal(b, [[1.0], [1.0]])


def test_zero_diagonal_divides_silently():
    U = np.array([[1.0, 1.0], [0.0, 0.0]])
    with np.errstate(all="raise"):
        x = substitute_backwards(U, np.ones((2, 1)))
    assert np.isinf(x[1, 0])
