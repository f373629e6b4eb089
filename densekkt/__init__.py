# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
densekkt
========

Dense in-place matrix factorizations and a solver for the KKT
(saddle-point) systems of equality-constrained quadratic programs.

Public API
~~~~~~~~~~
- Decompositions
    - `LU` (partial pivoting), `QR` (Householder), `LDL`
    - `Pivot`
- Matrix utilities
    - `det`, `rank`, `inv`, `solve`, `adj`, `least_squares`
- KKT systems
    - `KKTSolver`, `KKTInput`, `KKTOutput`, `SolverOptions`
- Errors
    - `DimensionError`, `NotComputedError`, `RankDeficientError`,
      `InvalidInputError`

Every factorizer follows the same lifecycle: `decompose(matrix)` copies
the input into the factorizer's own workspace, after which the queries
(`solve`, `get_inverse`, `get_determinant`, `get_rank`, ...) read from
it. Numerical trouble (a singular matrix, a rank-deficient column, a
matrix that is not positive definite) is reported by predicates such
as `is_solvable()`, never raised.

Example
-------
>>> import numpy as np, densekkt as dk
>>> out = dk.KKTSolver().solve(dk.KKTInput(np.eye(2), [0, 0], [[1, 1]], [1]))
>>> out.solvable, out.X.ravel().tolist()
(True, [0.5, 0.5])
"""

from importlib.metadata import version as _pkg_version

from .exceptions import (
    DenseKKTError,
    DimensionError,
    InvalidInputError,
    NotComputedError,
    RankDeficientError,
)
from .kkt import (
    DEFAULT_OPTIONS,
    DirectElimination,
    FullSystem,
    KKTInput,
    KKTOutput,
    KKTSolver,
    SchurComplement,
    SolverOptions,
    StrategyResult,
)
from .ldl import LDL
from .lu import LU
from .matrix_functions import adj, det, inv, rank, solve
from .pivot import Pivot
from .qr import QR, least_squares

__all__ = [
    "LU",
    "QR",
    "LDL",
    "Pivot",
    "det",
    "rank",
    "inv",
    "solve",
    "adj",
    "least_squares",
    "KKTSolver",
    "KKTInput",
    "KKTOutput",
    "SolverOptions",
    "DEFAULT_OPTIONS",
    "StrategyResult",
    "DirectElimination",
    "SchurComplement",
    "FullSystem",
    "DenseKKTError",
    "DimensionError",
    "NotComputedError",
    "RankDeficientError",
    "InvalidInputError",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show densekkt”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
