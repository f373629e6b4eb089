# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
The little bit of dense-matrix plumbing the factorizers and the KKT
solver need on top of NumPy. Element access, products, transposes and
differences are plain ndarray operations; only conversion and block
assembly live here.
"""

from typing import Optional

import numpy as np

from .exceptions import DimensionError


def as_matrix(x, name: str = "matrix") -> np.ndarray:
    """
    Return a fresh 2-D float64 copy of `x`.

    A 1-D input becomes a single column, a scalar a 1x1 matrix.
    """
    A = np.array(x, dtype=float, copy=True)
    if A.ndim == 0:
        return A.reshape(1, 1)
    if A.ndim == 1:
        return A[:, None]
    if A.ndim != 2:
        raise DimensionError(f"{name} must be 1-D or 2-D, got shape {A.shape}")
    return A


def as_rhs(b, rows: int, name: str = "rhs"):
    """
    Right-hand side as an (rows, k) float copy, plus a flag telling the
    caller to flatten the answer back to 1-D.
    """
    b = np.asarray(b, dtype=float)
    flat = b.ndim == 1
    B = as_matrix(b, name)
    if B.shape[0] != rows:
        raise DimensionError(
            f"{name} has {B.shape[0]} rows, expected {rows}"
        )
    return B, flat


def assemble_block(
    top_left: np.ndarray,
    top_right: Optional[np.ndarray],
    bottom_left: Optional[np.ndarray],
    bottom_right: Optional[np.ndarray],
) -> np.ndarray:
    """
    [[top_left, top_right], [bottom_left, bottom_right]] as one matrix.

    `top_left` is required. A missing block is zero-filled with the shape
    its row and column neighbours imply; a missing right column or bottom
    row collapses the result to the blocks that exist.
    """
    TL = np.asarray(top_left, dtype=float)
    if top_right is None and bottom_right is None:
        if bottom_left is None:
            return TL.copy()
        return _join(np.vstack, [TL, bottom_left])
    if bottom_left is None and bottom_right is None:
        return _join(np.hstack, [TL, top_right])

    rows_bottom = (bottom_left if bottom_left is not None else bottom_right).shape[0]
    cols_right = (top_right if top_right is not None else bottom_right).shape[1]
    TR = top_right if top_right is not None else np.zeros((TL.shape[0], cols_right))
    BL = bottom_left if bottom_left is not None else np.zeros((rows_bottom, TL.shape[1]))
    BR = bottom_right if bottom_right is not None else np.zeros((rows_bottom, cols_right))
    return _join(np.block, [[TL, TR], [BL, BR]])


def _join(stack, blocks) -> np.ndarray:
    try:
        return stack(blocks).astype(float, copy=False)
    except ValueError as e:
        raise DimensionError(f"blocks do not line up: {e}") from e


def row_block(A: np.ndarray, first: int, limit: int) -> np.ndarray:
    """Copy of rows [first, limit) of A."""
    return np.array(A[first:limit], dtype=float, copy=True)
