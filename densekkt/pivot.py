# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .utils import permutation_sign


@dataclass(frozen=True)
class Pivot:
    """
    Row permutation chosen by partial pivoting.

    Row i of the permuted matrix is row ``order[i]`` of the unpermuted one,
    i.e. ``P @ A == A[list(order)]``.
    """

    order: Tuple[int, ...]
    signum: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "order", tuple(int(i) for i in self.order))
        object.__setattr__(self, "signum", permutation_sign(self.order))

    @classmethod
    def identity(cls, n: int) -> "Pivot":
        return cls(tuple(range(n)))

    def __len__(self) -> int:
        return len(self.order)

    @property
    def is_modified(self) -> bool:
        """True if any row exchange took place."""
        return any(i != j for i, j in enumerate(self.order))

    def permute_rows(self, X: np.ndarray) -> np.ndarray:
        """Copy of X with its rows put in pivot order."""
        return np.array(X[list(self.order)], dtype=float, copy=True)

    def as_matrix(self) -> np.ndarray:
        """Permutation matrix P."""
        n = len(self.order)
        P = np.zeros((n, n))
        P[np.arange(n), list(self.order)] = 1.0
        return P
