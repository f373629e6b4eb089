# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Optional, Tuple

import numpy as np

from .decomposition import Decomposition
from .exceptions import DimensionError
from .matrix import as_rhs
from .pivot import Pivot
from .substitution import substitute_backwards, substitute_forwards
from .utils import count_significant

logger = logging.getLogger(__name__)


class LU(Decomposition):
    """
    LU decomposition with partial pivoting, P A = L U.

    L (unit diagonal) is stored below the diagonal of the workspace and
    U on and above it. A zero pivot is not an error: the column below it
    is left undivided and `is_nonsingular()` reports the problem.
    """

    def __init__(self):
        super().__init__()
        self._pivot: Optional[Pivot] = None

    def reset(self) -> None:
        super().reset()
        self._pivot = None

    def decompose(self, matrix) -> bool:
        """
        Left-looking (Crout/Doolittle, dot-product) factorization of an
        m by n matrix.

        Parameters
        ----------
        matrix : array_like (m, n)
            Copied; the caller's array is never touched.

        Returns
        -------
        True once the workspace holds the factors. Singularity is a
        separate query.
        """
        self.reset()
        LU_ = self._set_in_place(matrix)
        m, n = LU_.shape

        order = list(range(m))
        col_j = np.empty(m)

        for j in range(n):
            # Make a copy of the j-th column to localize references
            col_j[:] = LU_[:, j]

            # Apply previous transformations. Above the diagonal each
            # entry depends on the ones just updated, below it the whole
            # block uses the finished part of the column.
            for i in range(min(j, m)):
                col_j[i] -= LU_[i, :i] @ col_j[:i]
            if j < m:
                col_j[j:] -= LU_[j:, :j] @ col_j[:j]
            LU_[:, j] = col_j

            if j >= m:
                continue

            # The computation is more stable if we pick the largest
            # magnitude at or below the diagonal; ties go to the first.
            p = j + int(np.argmax(np.abs(col_j[j:])))
            if p != j:
                LU_[[j, p]] = LU_[[p, j]]
                order[j], order[p] = order[p], order[j]

            # Compute multipliers
            pivot = LU_[j, j]
            if pivot != 0.0:
                LU_[j + 1 :, j] /= pivot
            else:
                logger.debug(f"LU: zero pivot in column {j}")

        self._pivot = Pivot(tuple(order))
        return self._computed_ok()

    def get_pivot(self) -> Pivot:
        self._require_computed()
        return self._pivot

    def get_pivot_order(self) -> Tuple[int, ...]:
        return self.get_pivot().order

    def get_l(self) -> np.ndarray:
        """Unit lower-trapezoidal factor, (m, min(m, n))."""
        self._require_computed()
        k = min(self._rows, self._cols)
        L = np.tril(self._data[:, :k], -1)
        L[np.arange(k), np.arange(k)] = 1.0
        return L

    def get_u(self) -> np.ndarray:
        """Upper-trapezoidal factor, (min(m, n), n)."""
        self._require_computed()
        k = min(self._rows, self._cols)
        return np.triu(self._data[:k, :])

    def get_determinant(self) -> float:
        self._require_computed()
        if not self.is_square:
            raise DimensionError("The determinant is undefined for non-square matrices.")
        return self._pivot.signum * float(np.prod(np.diag(self._data)))

    def get_rank(self) -> int:
        """
        Count of U's diagonal entries that are not small relative to the
        largest one.
        """
        self._require_computed()
        return count_significant(np.diag(self._data))

    def is_nonsingular(self) -> bool:
        """True if no diagonal entry of U is exactly zero."""
        self._require_computed()
        return bool(np.all(np.diag(self._data) != 0.0))

    def is_square_and_not_singular(self) -> bool:
        return self.is_square and self.is_nonsingular()

    def is_solvable(self) -> bool:
        return self.is_computed and self.is_square_and_not_singular()

    def _require_square(self, what: str) -> None:
        self._require_computed()
        if not self.is_square:
            raise DimensionError(
                f"{what} needs a square LU, got {self._rows}x{self._cols}"
            )

    def solve(self, rhs) -> np.ndarray:
        """
        Solve A x = rhs.

        Parameters
        ----------
        rhs : (n,) or (n, k) array_like

        Returns
        -------
        x with the same dimensionality as `rhs`. If A is singular the
        result contains inf/nan.
        """
        self._require_square("solve")
        B, flat = as_rhs(rhs, self._rows)
        X = self._pivot.permute_rows(B)
        substitute_forwards(self._data, X, unit_diagonal=True)
        substitute_backwards(self._data, X, unit_diagonal=False)
        return X.ravel() if flat else X

    def solve_transposed(self, rhs) -> np.ndarray:
        """
        Solve A^T x = rhs with the factors of A.

        A^T = U^T L^T P, so this is a forward sweep with U^T, a backward
        sweep with L^T, then the inverse row permutation.
        """
        self._require_square("solve_transposed")
        B, flat = as_rhs(rhs, self._rows)
        substitute_forwards(self._data, B, unit_diagonal=False, transposed=True)
        substitute_backwards(self._data, B, unit_diagonal=True, transposed=True)
        X = np.empty_like(B)
        X[list(self._pivot.order)] = B
        return X.ravel() if flat else X

    def get_inverse(self) -> np.ndarray:
        self._require_square("get_inverse")
        n = self._rows
        X = np.zeros((n, n))
        for i, p in enumerate(self._pivot.order):
            X[i, p] = 1.0
        substitute_forwards(self._data, X, unit_diagonal=True)
        substitute_backwards(self._data, X, unit_diagonal=False)
        return X

    def reconstruct(self) -> np.ndarray:
        """P^T L U, the matrix that was decomposed."""
        self._require_computed()
        return self._pivot.as_matrix().T @ (self.get_l() @ self.get_u())
