# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
KKT systems
===========

The optimality conditions of

    min ½ xᵀ Q x – cᵀ x   subject to   A x = b

form the saddle-point system

    | Q  Aᵀ | | X |   | C |
    | A  0  | | L | = | B |

When the KKT matrix is nonsingular there is a unique optimal primal-dual
pair (X, L). When it is singular but the system is still solvable, any
solution is an optimal pair. When the system is not solvable the
problem is infeasible or unbounded below.

`KKTSolver` tries three strategies in order and stops at the first one
that succeeds:

1. `DirectElimination` – A square and nonsingular: X is the only
   feasible point.
2. `SchurComplement` – Q positive definite: eliminate X through the
   Schur complement A Q⁻¹ Aᵀ.
3. `FullSystem` – LU of the whole KKT matrix.

Always check `KKTOutput.solvable` before reading X and L.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from .eigen import is_positive_semidefinite, min_eigenvalue
from .exceptions import DimensionError, InvalidInputError
from .ldl import LDL
from .lu import LU
from .matrix import as_matrix, assemble_block, row_block
from .utils import scale_tol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class KKTInput:
    """
    Q (n, n), C (n, k) and optionally A (m, n), B (m, k).

    Blocks are copied to 2-D float arrays; a 1-D C or B is a single
    column. Shapes are checked here so a malformed problem fails before
    any factorization runs.
    """

    Q: np.ndarray
    C: np.ndarray
    A: Optional[np.ndarray] = None
    B: Optional[np.ndarray] = None

    def __post_init__(self):
        if self.Q is None or self.C is None:
            raise DimensionError("Neither Q nor C may be None")
        if (self.A is None) != (self.B is None):
            raise DimensionError("Either A or B is None, and the other one is not")

        Q = as_matrix(self.Q, "Q")
        C = as_matrix(self.C, "C")
        n = Q.shape[0]
        if Q.shape != (n, n):
            raise DimensionError(f"Q must be square, got {Q.shape}")
        if C.shape[0] != n:
            raise DimensionError(f"C has {C.shape[0]} rows, Q has {n}")
        object.__setattr__(self, "Q", Q)
        object.__setattr__(self, "C", C)

        if self.A is not None:
            A = as_matrix(self.A, "A")
            B = as_matrix(self.B, "B")
            if A.size == 0:
                A = A.reshape(0, n)
            if A.shape[1] != n:
                raise DimensionError(f"A has {A.shape[1]} columns, Q has {n}")
            if B.shape[0] != A.shape[0]:
                raise DimensionError(f"B has {B.shape[0]} rows, A has {A.shape[0]}")
            if A.shape[0] and B.shape[1] != C.shape[1]:
                raise DimensionError(
                    f"B has {B.shape[1]} columns, C has {C.shape[1]}"
                )
            object.__setattr__(self, "A", A)
            object.__setattr__(self, "B", B)

    @property
    def n(self) -> int:
        return self.Q.shape[0]

    @property
    def m(self) -> int:
        return self.A.shape[0] if self.A is not None else 0

    @property
    def k(self) -> int:
        return self.C.shape[1]

    @property
    def is_constrained(self) -> bool:
        return self.A is not None and self.A.size > 0

    def kkt_matrix(self) -> np.ndarray:
        if self.is_constrained:
            return assemble_block(self.Q, self.A.T, self.A, None)
        return self.Q.copy()

    def rhs(self) -> np.ndarray:
        if self.is_constrained:
            return assemble_block(self.C, None, self.B, None)
        return self.C.copy()


@dataclass(frozen=True, eq=False)
class KKTOutput:
    """Primal X (n, k), multipliers L (m, k) and whether they mean anything."""

    X: np.ndarray
    L: np.ndarray
    solvable: bool

    def __str__(self) -> str:
        text = str(self.solvable)
        if self.solvable:
            text += f" X={self.X.ravel().tolist()} L={self.L.ravel().tolist()}"
        return text


@dataclass(frozen=True)
class SolverOptions:
    """
    validate : run `KKTSolver.check` before solving and raise
        InvalidInputError on failure.
    """

    validate: bool = False


DEFAULT_OPTIONS = SolverOptions()


@dataclass(frozen=True, eq=False)
class StrategyResult:
    """What one strategy produced. X and L are None unless solved."""

    solved: bool
    X: Optional[np.ndarray] = None
    L: Optional[np.ndarray] = None


class DirectElimination:
    """
    A square and nonsingular: A X = B has exactly one solution, and
    Aᵀ L = C – Q X then fixes the multipliers. Both solves share the one
    LU of A.
    """

    name = "direct elimination"

    def __call__(self, solver: "KKTSolver", problem: KKTInput) -> Optional[StrategyResult]:
        A = problem.A
        if not problem.is_constrained or A.shape[0] != A.shape[1]:
            return None
        lu = solver.lu
        lu.decompose(A)
        if not lu.is_solvable():
            return StrategyResult(False)
        X = lu.solve(problem.B)
        L = lu.solve_transposed(problem.C - problem.Q @ X)
        return StrategyResult(True, X, L)


class SchurComplement:
    """
    Q symmetric positive definite. Unconstrained this is just Q X = C.
    Otherwise the negated Schur complement S = A Q⁻¹ Aᵀ gives

        S L = A Q⁻¹ C – B,   Q X = C – Aᵀ L
    """

    name = "Schur complement"

    def __call__(self, solver: "KKTSolver", problem: KKTInput) -> Optional[StrategyResult]:
        ldl = solver.ldl
        Q = problem.Q
        # LDL only reads the lower triangle
        if not np.allclose(Q, Q.T, rtol=0.0, atol=scale_tol(Q)):
            return StrategyResult(False)
        ldl.decompose(Q)
        if not ldl.is_spd():
            return StrategyResult(False)

        C = problem.C
        if not problem.is_constrained:
            return StrategyResult(True, ldl.solve(C), np.zeros((0, problem.k)))

        A, B = problem.A, problem.B
        inv_q_at = ldl.solve(A.T)
        S = A @ inv_q_at
        lu = solver.lu
        lu.decompose(S)
        if not lu.is_solvable():
            return StrategyResult(False)

        inv_q_c = ldl.solve(C)
        L = lu.solve(A @ inv_q_c - B)
        X = ldl.solve(C - A.T @ L)
        return StrategyResult(True, X, L)


class FullSystem:
    """LU of the whole KKT matrix, split back into X and L."""

    name = "full KKT system"

    def __call__(self, solver: "KKTSolver", problem: KKTInput) -> Optional[StrategyResult]:
        lu = solver.lu
        lu.decompose(problem.kkt_matrix())
        if not lu.is_solvable():
            return StrategyResult(False)
        XL = lu.solve(problem.rhs())
        n = problem.n
        return StrategyResult(True, row_block(XL, 0, n), row_block(XL, n, XL.shape[0]))


Strategy = Callable[["KKTSolver", KKTInput], Optional[StrategyResult]]


@dataclass
class KKTSolver:
    """
    Solves KKT systems with a tiered fallback.

    The solver owns one LDL and one LU factorizer that every strategy
    reuses, so an instance must not be shared between threads without
    external locking. It can be reused for any number of problems.
    """

    strategies: List[Strategy] = field(
        default_factory=lambda: [DirectElimination(), SchurComplement(), FullSystem()]
    )
    ldl: LDL = field(default_factory=LDL, repr=False)
    lu: LU = field(default_factory=LU, repr=False)

    def solve(self, problem: KKTInput, options: Optional[SolverOptions] = None) -> KKTOutput:
        """
        Parameters
        ----------
        problem : KKTInput
        options : SolverOptions, optional
            With ``validate=True`` the input is checked first.

        Returns
        -------
        KKTOutput. When no strategy succeeds ``solvable`` is False and X,
        L are zeros.

        Raises
        ------
        InvalidInputError : only when validation was requested.
        """
        options = options or DEFAULT_OPTIONS
        if options.validate:
            self.check(problem)

        for strategy in self.strategies:
            result = strategy(self, problem)
            if result is None:
                continue
            if result.solved:
                logger.debug(f"KKT system solved by {_name(strategy)}")
                return KKTOutput(result.X, result.L, True)
            logger.debug(f"{_name(strategy)} failed, trying next strategy")

        self._log_unsolvable(problem)
        return KKTOutput(
            np.zeros((problem.n, problem.k)),
            np.zeros((problem.m, problem.k)),
            False,
        )

    def validate(self, problem: KKTInput) -> bool:
        try:
            self.check(problem)
        except InvalidInputError as e:
            logger.debug(f"KKT input is invalid: {e}")
            return False
        return True

    def check(self, problem: KKTInput) -> None:
        """
        Raise InvalidInputError unless Q is positive semidefinite and A
        (if any) has full row rank.
        """
        Q, A = problem.Q, problem.A

        self.ldl.decompose(Q)
        # Not positive definite. Check if at least positive semidefinite.
        if not self.ldl.is_spd() and not is_positive_semidefinite(Q):
            raise InvalidInputError(
                "Q must be positive semidefinite",
                block="Q",
                min_eigenvalue=min_eigenvalue(Q),
            )

        if A is not None and A.size:
            rows, cols = A.shape
            self.lu.decompose(A.T if rows < cols else A)
            found = self.lu.get_rank()
            if found != rows:
                raise InvalidInputError(
                    "A must have full (row) rank",
                    block="A",
                    rank=found,
                    expected_rank=rows,
                )

    def _log_unsolvable(self, problem: KKTInput) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug("KKT system unsolvable")
        logger.debug(f"KKT:\n{problem.kkt_matrix()}")
        logger.debug(f"RHS:\n{problem.rhs()}")
        if problem.is_constrained:
            for name in ("Q", "C", "A", "B"):
                logger.debug(f"{name}:\n{getattr(problem, name)}")


def _name(strategy: Strategy) -> str:
    return getattr(strategy, "name", type(strategy).__name__)
