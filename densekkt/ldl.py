# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np

from .decomposition import Decomposition
from .exceptions import DimensionError
from .matrix import as_matrix, as_rhs
from .substitution import substitute_backwards, substitute_forwards
from .utils import count_significant

logger = logging.getLogger(__name__)


class LDL(Decomposition):
    """
    Unpivoted A = L D Lᵀ with L unit lower-triangular and D diagonal.

    Only the lower triangle of the input is read. There is no pivoting,
    so this is meant for matrices expected to be symmetric positive
    definite; whether they were is reported by `is_spd()`. An indefinite
    or singular input still produces a (possibly meaningless) result
    rather than an exception, and a zero in D puts inf/nan into L.
    """

    def __init__(self):
        super().__init__()
        self._spd = False

    def reset(self) -> None:
        super().reset()
        self._spd = False

    def decompose(self, matrix) -> bool:
        self.reset()
        A = as_matrix(matrix)
        m, n = A.shape
        self._rows, self._cols = m, n
        # L and D are built from A directly; the upper part stays zero
        LDL_ = self._data = np.zeros((m, n))

        spd = m == n
        row_ij = np.empty(min(m, n))

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for ij in range(min(m, n)):
                # L[ij, j] * D[j] for the columns already done
                row_ij[:ij] = LDL_[ij, :ij] * np.diag(LDL_)[:ij]

                d = A[ij, ij] - LDL_[ij, :ij] @ row_ij[:ij]
                LDL_[ij, ij] = d
                if not d > 0.0:
                    if spd:
                        logger.debug(f"LDL: non-positive pivot {d} at {ij}")
                    spd = False

                # column below the diagonal
                LDL_[ij + 1 :, ij] = (
                    A[ij + 1 :, ij] - LDL_[ij + 1 :, :ij] @ row_ij[:ij]
                ) / d

        self._spd = spd
        return self._computed_ok()

    def is_spd(self) -> bool:
        """
        True if the input was square and every pivot in D was strictly
        positive. Any non-positive pivot clears it for good.
        """
        self._require_computed()
        return self._spd

    def get_d(self) -> np.ndarray:
        self._require_computed()
        return np.diag(np.diag(self._data))

    def get_l(self) -> np.ndarray:
        self._require_computed()
        k = min(self._rows, self._cols)
        L = np.tril(self._data[:, :k], -1)
        L[np.arange(k), np.arange(k)] = 1.0
        return L

    def get_determinant(self) -> float:
        self._require_computed()
        if not self.is_square:
            raise DimensionError("The determinant is undefined for non-square matrices.")
        return float(np.prod(np.diag(self._data)))

    def get_rank(self) -> int:
        """D entries that are not small relative to the largest |D|."""
        self._require_computed()
        return count_significant(np.diag(self._data))

    def is_solvable(self) -> bool:
        return (
            self.is_computed
            and self.is_square
            and bool(np.all(np.diag(self._data) != 0.0))
        )

    def _substitute(self, X: np.ndarray) -> np.ndarray:
        # L y = b, then D z = y, then Lᵀ x = z
        substitute_forwards(self._data, X, unit_diagonal=True)
        with np.errstate(divide="ignore", invalid="ignore"):
            X /= np.diag(self._data)[:, None]
        substitute_backwards(self._data, X, unit_diagonal=True, transposed=True)
        return X

    def solve(self, rhs) -> np.ndarray:
        self._require_computed()
        if not self.is_square:
            raise DimensionError(
                f"solve needs a square LDL, got {self._rows}x{self._cols}"
            )
        X, flat = as_rhs(rhs, self._rows)
        self._substitute(X)
        return X.ravel() if flat else X

    def get_inverse(self) -> np.ndarray:
        self._require_computed()
        if not self.is_square:
            raise DimensionError(
                f"get_inverse needs a square LDL, got {self._rows}x{self._cols}"
            )
        return self._substitute(np.eye(self._rows))

    def reconstruct(self) -> np.ndarray:
        """L D Lᵀ, which equals the input only if it was symmetric."""
        L = self.get_l()
        return L @ self.get_d() @ L.T
