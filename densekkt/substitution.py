# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Triangular substitution on a packed factor body.

The factorizers keep both triangles of a decomposition in one square
workspace, so these routines read only the triangle they are told to and
ignore whatever sits in the other one. Both overwrite `X` in place.
"""

import numpy as np


def substitute_forwards(
    body: np.ndarray,
    X: np.ndarray,
    unit_diagonal: bool = True,
    transposed: bool = False,
) -> np.ndarray:
    """
    Solve T x = X for lower-triangular T read from `body`.

    Parameters
    ----------
    body : (n, n) ndarray
        Packed factor. The strictly lower part (or, with `transposed`,
        the strictly upper part read as its transpose) is used.
    X : (n, k) ndarray
        Right-hand side, overwritten with the solution.
    unit_diagonal : bool
        Treat the diagonal as ones instead of reading it.
    transposed : bool
        Use body.T, i.e. solve with the transpose of the upper triangle.
    """
    T = body.T if transposed else body
    n = X.shape[0]
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for i in range(n):
            if i:
                X[i] -= T[i, :i] @ X[:i]
            if not unit_diagonal:
                X[i] /= T[i, i]
    return X


def substitute_backwards(
    body: np.ndarray,
    X: np.ndarray,
    unit_diagonal: bool = False,
    transposed: bool = False,
) -> np.ndarray:
    """
    Solve T x = X for upper-triangular T read from `body`.

    A zero on a non-unit diagonal is divided by anyway: the result
    carries inf/nan and no warning is emitted. Check the owning
    factorization's `is_solvable()` before trusting it.
    """
    T = body.T if transposed else body
    n = X.shape[0]
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for i in reversed(range(n)):
            if i + 1 < n:
                X[i] -= T[i, i + 1 : n] @ X[i + 1 : n]
            if not unit_diagonal:
                X[i] /= T[i, i]
    return X
