# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Optional

import numpy as np

from .decomposition import Decomposition
from .exceptions import DimensionError, RankDeficientError
from .matrix import as_rhs
from .utils import count_significant, hypot_norm


class QR(Decomposition):
    """
    Economy-size QR decomposition of an m-by-n matrix A (m ≥ n) by
    Householder reflections, A = Q R.

    The workspace is A transposed: row k holds the k-th Householder
    vector from position k down, and R's k-th column above it. R's
    diagonal is kept separately in `diagonal_r`, where a zero marks a
    column that lies in the span of the previous ones.
    """

    def __init__(self):
        super().__init__()
        self._diagonal_r: Optional[np.ndarray] = None

    def reset(self) -> None:
        super().reset()
        self._diagonal_r = None

    def decompose(self, matrix) -> bool:
        """
        For column k

            w = x / ‖x‖ + e₁   (‖x‖ carrying the sign of x₀)
            H = I – w wᵀ / w₀

        is applied to every column to its right; R[k, k] = –‖x‖.
        """
        self.reset()
        QR_ = self._set_in_place(matrix, transpose=True)
        m, n = self._rows, self._cols
        if m < n:
            raise DimensionError(f"QR needs rows >= columns, got {m}x{n}")

        diagonal_r = np.zeros(n)

        for k in range(n):
            # ---- build the reflector for column k --------------------------
            col_k = QR_[k]
            nrm = hypot_norm(col_k[k:])

            if nrm != 0.0:
                # match the sign of the pivot so 1 + x₀/‖x‖ cannot cancel
                if col_k[k] < 0:
                    nrm = -nrm
                col_k[k:] /= nrm
                col_k[k] += 1.0

                # ---- apply H to the remaining columns ----------------------
                w = col_k[k:]
                rest = QR_[k + 1 :, k:]
                s = (rest @ w) / w[0]
                rest -= np.outer(s, w)

            diagonal_r[k] = -nrm

        self._diagonal_r = diagonal_r
        return self._computed_ok()

    @property
    def diagonal_r(self) -> np.ndarray:
        self._require_computed()
        return self._diagonal_r.copy()

    def is_full_column_rank(self) -> bool:
        """True if no diagonal entry of R is exactly zero."""
        self._require_computed()
        return bool(np.all(self._diagonal_r != 0.0))

    def is_solvable(self) -> bool:
        return self.is_computed and self.is_full_column_rank()

    def get_q(self) -> np.ndarray:
        """
        Orthonormal (m, n) factor, accumulated from the last reflection
        back to the first starting from the identity.
        """
        self._require_computed()
        m, n = self._rows, self._cols
        QR_ = self._data
        Q = np.zeros((m, n))

        for k in reversed(range(n)):
            Q[k, k] = 1.0
            w = QR_[k, k:]
            if w[0] != 0.0:
                s = -(w @ Q[k:, k:]) / w[0]
                Q[k:, k:] += np.outer(w, s)
        return Q

    def get_r(self) -> np.ndarray:
        """Upper-triangular (n, n) factor."""
        self._require_computed()
        n = self._cols
        R = np.triu(self._data[:n, :n].T, 1)
        R[np.arange(n), np.arange(n)] = self._diagonal_r
        return R

    def get_rank(self) -> int:
        self._require_computed()
        return count_significant(self._diagonal_r)

    def get_determinant(self) -> float:
        """
        det(A) for square A. Every reflection that was applied flips the
        sign, so the product of R's diagonal is corrected by (-1)^r.
        """
        self._require_computed()
        if not self.is_square:
            raise DimensionError("The determinant is undefined for non-square matrices.")
        reflections = int(np.count_nonzero(self._diagonal_r))
        sign = -1.0 if reflections & 1 else 1.0
        return sign * float(np.prod(self._diagonal_r))

    def solve(self, rhs) -> np.ndarray:
        """
        Least-squares solution of A x = rhs (exact for square A).

        Returns
        -------
        x : (n,) or (n, k) ndarray

        Raises
        ------
        DimensionError : rhs rows differ from A's.
        RankDeficientError : A is not of full column rank.
        """
        self._require_computed()
        Y, flat = as_rhs(rhs, self._rows)
        if not self.is_full_column_rank():
            raise RankDeficientError(
                "QR solve needs full column rank",
                rank=self.get_rank(),
                expected_rank=self._cols,
            )
        n = self._cols
        QR_ = self._data

        # Y = Qᵀ rhs, one reflection at a time
        for k in range(n):
            w = QR_[k, k:]
            s = (w @ Y[k:]) / w[0]
            Y[k:] -= np.outer(w, s)

        # R X = Y
        for k in reversed(range(n)):
            Y[k] /= self._diagonal_r[k]
            Y[:k] -= np.outer(QR_[k, :k], Y[k])

        X = Y[:n]
        return X.ravel() if flat else X

    def get_inverse(self) -> np.ndarray:
        """Inverse for square A, the pseudo-inverse for tall A."""
        self._require_computed()
        return self.solve(np.eye(self._rows))

    def reconstruct(self) -> np.ndarray:
        return self.get_q() @ self.get_r()


def least_squares(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Solve min ‖Ax – b‖₂ using (economic) Householder QR
    decomposition (A = QR). Works for tall or square
    full-rank A.

    Returns:
    x : (n, ) ndarray
        The least squares solution to Ax = b
    """
    qr = QR()
    qr.decompose(A)
    return qr.solve(b)
