# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Shared lifecycle for the in-place factorizers.

A factorizer owns one workspace. `decompose` resets it, copies the input
in and factorizes; only after that succeeds may the read-only queries be
used. Instances are not thread safe: serialize `decompose` calls
yourself or use one instance per computation.
"""

from typing import Optional

import numpy as np

from .exceptions import NotComputedError
from .matrix import as_matrix


class Decomposition:
    """Owned workspace plus an explicit computed tag."""

    def __init__(self):
        self._data: Optional[np.ndarray] = None
        self._computed = False

    def reset(self) -> None:
        self._data = None
        self._computed = False

    @property
    def is_computed(self) -> bool:
        return self._computed

    @property
    def row_dim(self) -> int:
        self._require_computed()
        return self._rows

    @property
    def col_dim(self) -> int:
        self._require_computed()
        return self._cols

    def decompose(self, matrix) -> bool:
        """Factorize `matrix`; every factorizer overrides this."""
        raise NotImplementedError

    def _set_in_place(self, matrix, transpose: bool = False) -> np.ndarray:
        """Copy `matrix` into a fresh workspace and remember its shape."""
        A = as_matrix(matrix)
        self._rows, self._cols = A.shape
        self._data = np.ascontiguousarray(A.T) if transpose else A
        return self._data

    def _computed_ok(self) -> bool:
        self._computed = True
        return True

    def _require_computed(self) -> None:
        if not self._computed:
            raise NotComputedError(
                f"{type(self).__name__} has not been decomposed yet"
            )

    @property
    def is_square(self) -> bool:
        self._require_computed()
        return self._rows == self._cols
