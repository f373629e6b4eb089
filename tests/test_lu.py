# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from densekkt.decomposition import Decomposition
from densekkt.exceptions import DimensionError, NotComputedError
from densekkt.lu import LU
from densekkt.utils import EPS, random_nonsingular_upper

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def _lu(A):
    lu = LU()
    assert lu.decompose(A)
    return lu


def test_lu_reconstructs_square():
    rng = np.random.default_rng(0)
    for _ in range(10):
        A = rng.standard_normal((8, 8))
        lu = _lu(A)
        P = lu.get_pivot().as_matrix()
        assert np.allclose(lu.get_l() @ lu.get_u(), P @ A, atol=1e-12)
        assert np.allclose(lu.reconstruct(), A, atol=1e-12)


@pytest.mark.parametrize("m,n", [(7, 4), (4, 7), (1, 5), (5, 1)])
def test_lu_reconstructs_rectangular(m, n):
    rng = np.random.default_rng(m * 10 + n)
    A = rng.standard_normal((m, n))
    lu = _lu(A)
    assert lu.get_l().shape == (m, min(m, n))
    assert lu.get_u().shape == (min(m, n), n)
    assert np.allclose(lu.reconstruct(), A, atol=1e-12)


def test_lu_solve_random_nonsingular_upper():
    n = TEST_ITERATIONS

    for i in range(5):
        logger.debug("==============================")
        A = random_nonsingular_upper(n, seed=i)
        x_true = np.random.default_rng(i).random(n)
        b = A @ x_true

        x_np = np.linalg.solve(A, b)
        x_lu = _lu(A).solve(b)

        # Compare the residual (r = b - Ax), this judges numerical
        # correctness in a way that is independent of conditioning
        res_np = np.linalg.norm(A @ x_np - b, ord=np.inf)
        res_lu = np.linalg.norm(A @ x_lu - b, ord=np.inf)
        logger.debug(f"residuals: ours {res_lu}, numpy {res_np}")
        scale = np.linalg.norm(A, ord=np.inf) * np.linalg.norm(x_lu, ord=np.inf)
        assert res_lu <= 1e-12 * scale


def test_lu_solve_matches_numpy():
    rng = np.random.default_rng(3)
    A = rng.standard_normal((40, 40))
    B = rng.standard_normal((40, 3))
    lu = _lu(A)
    X = lu.solve(B)
    assert X.shape == (40, 3)
    np.testing.assert_allclose(X, np.linalg.solve(A, B), rtol=1e-8, atol=1e-10)

    x = lu.solve(B[:, 0])
    assert x.shape == (40,)
    np.testing.assert_allclose(x, X[:, 0], rtol=1e-12, atol=EPS)


def test_lu_solve_transposed():
    rng = np.random.default_rng(4)
    A = rng.standard_normal((12, 12))
    b = rng.standard_normal(12)
    x = _lu(A).solve_transposed(b)
    np.testing.assert_allclose(x, np.linalg.solve(A.T, b), rtol=1e-8, atol=1e-10)


def test_lu_inverse():
    rng = np.random.default_rng(5)
    A = rng.standard_normal((10, 10))
    A_inv = _lu(A).get_inverse()
    assert np.allclose(A_inv @ A, np.eye(10), atol=1e-9)
    np.testing.assert_allclose(A_inv, np.linalg.inv(A), rtol=1e-8, atol=1e-10)


def test_lu_determinant():
    rng = np.random.default_rng(6)
    A = rng.standard_normal((20, 20))
    assert np.isclose(_lu(A).get_determinant(), np.linalg.det(A), rtol=1e-9)


def test_determinant_sign_follows_row_swaps():
    # one exchange: U's diagonal multiplies to +1, the determinant is -1
    lu = _lu(np.array([[0.0, 1.0], [1.0, 0.0]]))
    assert lu.get_pivot_order() == (1, 0)
    assert lu.get_pivot().signum == -1.0
    assert float(np.prod(np.diag(lu.get_u()))) == 1.0
    assert lu.get_determinant() == -1.0

    lu = _lu(np.array([[1.0, 2.0], [3.0, 4.0]]))
    assert lu.get_pivot().is_modified
    assert np.isclose(lu.get_determinant(), -2.0)


def test_pivot_ties_go_to_first_row():
    lu = _lu(np.array([[1.0, 0.0], [-1.0, 1.0]]))
    assert lu.get_pivot_order() == (0, 1)
    assert not lu.get_pivot().is_modified
    assert lu.get_pivot().signum == 1.0


def test_singular_matrix_is_reported_not_raised():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    lu = _lu(A)
    assert not lu.is_nonsingular()
    assert not lu.is_solvable()
    assert lu.get_determinant() == 0.0

    # the zero pivot is divided by silently; inf/nan come out
    with np.errstate(all="raise"):
        x = lu.solve(np.array([1.0, 1.0]))
    assert not np.all(np.isfinite(x))


def test_rank_exact_example():
    A = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [1.0, 0.0, 1.0]])
    lu = _lu(A)
    assert lu.get_rank() == 2
    assert not lu.is_nonsingular()
    assert lu.get_determinant() == 0.0


@pytest.mark.parametrize("n", [1, 3, 10])
def test_rank_identity_and_zero(n):
    assert _lu(np.eye(n)).get_rank() == n
    assert _lu(np.zeros((n, n))).get_rank() == 0


def test_decompose_twice_is_identical():
    rng = np.random.default_rng(7)
    A = rng.standard_normal((15, 15))
    b = rng.standard_normal(15)
    lu = _lu(A)
    det1, rank1, x1 = lu.get_determinant(), lu.get_rank(), lu.solve(b)
    lu.decompose(A)
    assert lu.get_determinant() == det1
    assert lu.get_rank() == rank1
    assert np.array_equal(lu.solve(b), x1)


def test_input_is_not_modified():
    rng = np.random.default_rng(8)
    A = rng.standard_normal((6, 6))
    A_before = A.copy()
    _lu(A)
    assert np.array_equal(A, A_before)


def test_queries_before_decompose_raise():
    lu = LU()
    assert not lu.is_computed
    with pytest.raises(NotComputedError):
        lu.solve(np.ones(2))
    with pytest.raises(NotComputedError):
        lu.get_determinant()

    lu.decompose(np.eye(2))
    assert lu.is_computed
    lu.reset()
    with pytest.raises(NotComputedError):
        lu.get_rank()


def test_structural_errors():
    lu = _lu(np.ones((3, 2)))
    with pytest.raises(DimensionError):
        lu.get_determinant()
    with pytest.raises(DimensionError):
        lu.solve(np.ones(3))
    assert not lu.is_solvable()

    lu = _lu(np.eye(3))
    with pytest.raises(DimensionError):
        lu.solve(np.ones(4))
    # still a ValueError for callers that only know the builtin
    with pytest.raises(ValueError):
        lu.solve(np.ones((2, 2)))


def test_base_decomposition_has_no_algorithm():
    with pytest.raises(NotImplementedError):
        Decomposition().decompose(np.eye(2))
