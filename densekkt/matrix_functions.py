# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np

from .exceptions import DimensionError
from .lu import LU
from .qr import QR

logger = logging.getLogger(__name__)


def det(A):
    """
    Calculate the determinant of n-by-n matrix A using LU
    """
    lu = LU()
    lu.decompose(A)
    return lu.get_determinant()


def rank(A) -> int:
    """
    Numerical rank of A from the diagonal of R in a Householder QR;
    wide matrices are factorized transposed.
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2:
        raise DimensionError(f"rank needs a 2-D matrix, got shape {A.shape}")
    qr = QR()
    qr.decompose(A.T if A.shape[0] < A.shape[1] else A)
    return qr.get_rank()


def inv(A) -> np.ndarray:
    """
    Inverse of a square matrix through LU with partial pivoting.

    A singular A gives inf/nan entries rather than an exception.
    """
    lu = LU()
    lu.decompose(A)
    if not lu.is_square_and_not_singular():
        logger.warning("inv(): matrix is singular, result is not finite")
    return lu.get_inverse()


def solve(A, b) -> np.ndarray:
    """
    Solve A x = b. Square A goes through LU, tall A through QR
    (least squares).
    """
    A = np.asarray(A, dtype=float)
    if A.ndim == 2 and A.shape[0] > A.shape[1]:
        qr = QR()
        qr.decompose(A)
        return qr.solve(b)
    lu = LU()
    lu.decompose(A)
    return lu.solve(b)


def adj(A: np.ndarray):
    """
    Adjugate (classical adjoint) of a square matrix A.

    Fast path (det ≠ 0): adj(A) = det(A) · A^{-1}
    Slow path (det = 0): cofactor expansion (still O(n³) each det call)
    """
    A = np.asarray(A, dtype=float)
    m, n = A.shape
    if m != n:
        raise DimensionError("A must be a square matrix")

    lu = LU()
    lu.decompose(A)
    d = lu.get_determinant()
    if d == 0:
        logger.warning("adj(): falling back to cofactor expansion")
        # singular matrix, calculate cofactors
        C = np.empty_like(A)

        for i in range(n):
            for j in range(n):
                minor = A[np.arange(n) != i][:, np.arange(n) != j]
                C[i, j] = ((-1) ** (i + j)) * det(minor) if n > 1 else 1.0
        return C.T

    return d * lu.get_inverse()
