# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import functools
import math
from typing import Sequence

import numpy as np

EPS: float = 1e-12


def scale_tol(A: np.ndarray) -> float:
    """Return an absolute tolerance scaled to the matrix magnitude."""
    return EPS * max(1.0, np.linalg.norm(A, ord=np.inf))


def is_small(value: float, compared_to: float) -> bool:
    """True if `value` is negligible next to `compared_to`."""
    return abs(value) <= EPS * abs(compared_to)


def count_significant(diagonal: np.ndarray) -> int:
    """
    Number of diagonal entries that are not small relative to the
    largest one. An all-zero diagonal has no significant entries.
    """
    diagonal = np.asarray(diagonal, dtype=float)
    if diagonal.size == 0:
        return 0
    largest = float(np.max(np.abs(diagonal)))
    return sum(1 for d in diagonal if not is_small(d, largest))


def hypot_norm(x: np.ndarray) -> float:
    """
    Euclidean norm accumulated pairwise with hypot, so neither huge
    nor tiny entries overflow / underflow the intermediate sums.
    """
    return functools.reduce(math.hypot, (float(v) for v in x), 0.0)


def permutation_sign(perm: Sequence[int]) -> float:
    """Return +1 or –1 depending on permutation parity."""
    visited = [False] * len(perm)
    cycles = 0
    for i in range(len(perm)):
        if not visited[i]:
            cycles += 1
            j = i
            while not visited[j]:
                visited[j] = True
                j = perm[j]
    swaps = len(perm) - cycles  # n − #cycles
    return -1.0 if swaps & 1 else 1.0


def random_nonsingular_upper(n, low=-100, high=100, seed=None) -> np.ndarray:
    """
    Build a matrix U that is upper-triangular with random entries
    everywhere and put only non-zero values on its diagonal

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    U = rng.uniform(low, high, size=(n, n))
    # enforce upper-triangular
    U = np.triu(U)
    # replace any accidental zeros on the diagonal
    diag = rng.uniform(low if low != 0 else 1, high, size=n)
    U[np.diag_indices(n)] = diag
    return np.asarray(U)


def random_spd(n, seed=None, shift: float = 1.0) -> np.ndarray:
    """
    Symmetric positive definite test matrix M^T M + shift * I.
    """
    rng = np.random.default_rng(seed)
    M = rng.standard_normal((n, n))
    return M.T @ M + shift * np.eye(n)
