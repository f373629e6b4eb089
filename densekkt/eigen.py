# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Eigenvalue collaborator used by KKT input validation to tell
"positive semidefinite but not definite" from "indefinite".
"""

from typing import Optional

import numpy as np

from .exceptions import DimensionError
from .utils import scale_tol


def symmetric_eigenvalues(A: np.ndarray) -> np.ndarray:
    """
    Eigenvalues of the symmetric part (A + Aᵀ) / 2, ascending.

    The quadratic form xᵀ A x only sees the symmetric part, so that is
    what decides semidefiniteness.
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise DimensionError(f"eigenvalues need a square matrix, got shape {A.shape}")
    if A.shape[0] == 0:
        return np.zeros(0)
    return np.linalg.eigvalsh(0.5 * (A + A.T))


def min_eigenvalue(A: np.ndarray) -> float:
    eigvals = symmetric_eigenvalues(A)
    return float(eigvals[0]) if eigvals.size else 0.0


def is_positive_semidefinite(A: np.ndarray, tol: Optional[float] = None) -> bool:
    """
    No eigenvalue below -tol. The default tolerance scales with the
    magnitude of A so round-off on a singular PSD matrix is accepted.
    """
    if tol is None:
        tol = scale_tol(A)
    return min_eigenvalue(A) >= -tol
