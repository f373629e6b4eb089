#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Time the factorizations and the KKT solver against NumPy.

    python -m densekkt.benchmark

Prints a markdown table and writes bench_results.csv.
"""

import time

import numpy as np
import pandas as pd

from densekkt.kkt import KKTInput, KKTSolver
from densekkt.ldl import LDL
from densekkt.lu import LU
from densekkt.qr import QR
from densekkt.utils import random_spd

REPEATS = 5  # best of 5 runs leads to stable numbers
sizes = [(100, 100), (300, 300), (600, 200)]


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def lu_solve(A, b):
    lu = LU()
    lu.decompose(A)
    return lu.solve(b)


def qr_solve(A, b):
    qr = QR()
    qr.decompose(A)
    return qr.solve(b)


def ldl_solve(A, b):
    ldl = LDL()
    ldl.decompose(A)
    return ldl.solve(b)


def run(seed: int = 0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    records = []
    for m, n in sizes:
        A = rng.standard_normal((m, n))
        b = rng.standard_normal(m)

        # reference
        t_np = min(wall(np.linalg.lstsq, A, b, rcond=None) for _ in range(REPEATS))
        x_ref, *_ = np.linalg.lstsq(A, b, rcond=None)
        r_ref = np.linalg.norm(A @ x_ref - b, np.inf)

        # ---------- Householder QR --------------------------------------
        t_qr = min(wall(qr_solve, A, b) for _ in range(REPEATS))
        x_qr = qr_solve(A, b)
        r_qr = np.linalg.norm(A @ x_qr - b, np.inf)
        records.append(("QR", f"{m}×{n}", t_qr, t_qr / t_np, r_qr / r_ref))

        if m != n:
            continue

        # ---------- LU -----------------------------------------------------
        t_lu = min(wall(lu_solve, A, b) for _ in range(REPEATS))
        x_lu = lu_solve(A, b)
        r_lu = np.linalg.norm(A @ x_lu - b, np.inf)
        records.append(("LU", f"{m}×{n}", t_lu, t_lu / t_np, r_lu / r_ref))

        # ---------- LDL on an SPD matrix ------------------------------------
        S = random_spd(n, seed=seed)
        t_ref = min(wall(np.linalg.solve, S, b) for _ in range(REPEATS))
        r_spd = np.linalg.norm(S @ np.linalg.solve(S, b) - b, np.inf)
        t_ldl = min(wall(ldl_solve, S, b) for _ in range(REPEATS))
        r_ldl = np.linalg.norm(S @ ldl_solve(S, b) - b, np.inf)
        records.append(("LDL", f"{m}×{n}", t_ldl, t_ldl / t_ref, r_ldl / r_spd))

        # ---------- KKT, Schur complement path -----------------------------
        k = n // 4
        Aeq = rng.standard_normal((k, n))
        beq = rng.standard_normal(k)
        problem = KKTInput(S, b, Aeq, beq)
        K, rhs = problem.kkt_matrix(), problem.rhs()
        t_ref = min(wall(np.linalg.solve, K, rhs) for _ in range(REPEATS))
        r_kkt_ref = np.linalg.norm(K @ np.linalg.solve(K, rhs) - rhs, np.inf)
        solver = KKTSolver()
        t_kkt = min(wall(solver.solve, problem) for _ in range(REPEATS))
        out = solver.solve(problem)
        r_kkt = np.linalg.norm(K @ np.vstack([out.X, out.L]) - rhs, np.inf)
        records.append(("KKT", f"{n}+{k}", t_kkt, t_kkt / t_ref, r_kkt / r_kkt_ref))

    return pd.DataFrame(
        records,
        columns=["kernel", "size", "sec", "sec/NumPy", "residual/NumPy"],
    )


if __name__ == "__main__":
    df = run()
    print(df.to_markdown(index=False))
    df.to_csv("bench_results.csv", index=False)
