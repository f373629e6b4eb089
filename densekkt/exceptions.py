# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exception hierarchy for densekkt.

Only structural problems and explicitly requested validation raise.
Numerical degeneracy (a zero pivot, a rank-deficient column, a
non-positive LDL diagonal, an unsolvable KKT system) is reported through
predicates such as ``is_solvable()`` and never raised.
"""

from typing import Optional


class DenseKKTError(Exception):
    """Base class for every error raised by densekkt."""


class DimensionError(DenseKKTError, ValueError):
    """
    Shapes are wrong or inconsistent: a right-hand side with the wrong
    number of rows, a non-square matrix where a square one is needed,
    or KKT blocks that do not line up.
    """


class NotComputedError(DenseKKTError, RuntimeError):
    """A factorization was queried before `decompose` completed."""


class RankDeficientError(DenseKKTError, ArithmeticError):
    """
    A solve needs full column rank and the factorization does not have it.

    Attributes:
        rank: estimated numerical rank
        expected_rank: rank the solve needs
    """

    def __init__(
        self,
        message: str,
        rank: Optional[int] = None,
        expected_rank: Optional[int] = None,
    ):
        super().__init__(message)
        self.rank = rank
        self.expected_rank = expected_rank


class InvalidInputError(DenseKKTError, ValueError):
    """
    KKT input failed the opt-in validation.

    Attributes:
        block: name of the offending block ("Q" or "A")
        min_eigenvalue: smallest eigenvalue of Q, when that was the problem
        rank: rank found for A, when that was the problem
        expected_rank: rank A should have had
    """

    def __init__(
        self,
        message: str,
        block: Optional[str] = None,
        min_eigenvalue: Optional[float] = None,
        rank: Optional[int] = None,
        expected_rank: Optional[int] = None,
    ):
        super().__init__(message)
        self.block = block
        self.min_eigenvalue = min_eigenvalue
        self.rank = rank
        self.expected_rank = expected_rank
