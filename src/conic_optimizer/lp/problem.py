from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

import numpy as np


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def _as_matrix(A, n: int, name: str) -> np.ndarray:
    if A is None:
        return np.zeros((0, n), dtype=float)
    A = np.atleast_2d(np.array(A, dtype=float))
    if A.shape[1] != n:
        raise ValueError(f"{name} must have {n} columns, found {A.shape[1]}.")
    return A


def _as_vector(b, rows: int, name: str) -> np.ndarray:
    if b is None:
        if rows:
            raise ValueError(f"{name} is required when its matrix has rows.")
        return np.zeros(0, dtype=float)
    b = np.atleast_1d(np.array(b, dtype=float))
    if b.shape != (rows,):
        raise ValueError(f"{name} must have {rows} entries, found {b.size}.")
    return b


class LPProblem:
    """
    min c'x  s.t.  A x >= b,  A_leq x <= b_leq,  A_eq x = b_eq,  x >= 0 unless free.

    ``bounds`` maps a (0-based) variable index to ``(lower, upper)``. A variable
    with a bound whose lower end is not 0 is free; every finite bound is kept as
    an extra ``>=`` row. The ``<=`` rows are negated into the ``>=`` block.
    """

    def __init__(
        self,
        c: Sequence[float],
        A=None,
        b=None,
        A_leq=None,
        b_leq=None,
        A_eq=None,
        b_eq=None,
        bounds: Optional[Dict[int, Tuple[Optional[float], Optional[float]]]] = None,
    ) -> None:
        c = np.atleast_1d(np.array(c, dtype=float))
        n = c.size
        A_geq = _as_matrix(A, n, "A")
        b_geq = _as_vector(b, A_geq.shape[0], "b")
        A_leq = _as_matrix(A_leq, n, "A_leq")
        b_leq = _as_vector(b_leq, A_leq.shape[0], "b_leq")
        A_eq = _as_matrix(A_eq, n, "A_eq")
        b_eq = _as_vector(b_eq, A_eq.shape[0], "b_eq")

        free = set()
        bound_rows = []
        bound_rhs = []
        for idx, (lower, upper) in sorted((bounds or {}).items()):
            if not 0 <= idx < n:
                raise ValueError(f"Bound refers to variable {idx}, problem has {n} variables.")
            lower = -np.inf if lower is None else float(lower)
            upper = np.inf if upper is None else float(upper)
            if lower > upper:
                raise ValueError(f"Variable {idx} has inconsistent bounds (lb {lower} > ub {upper}).")
            if lower != 0.0:
                free.add(idx)
            if np.isfinite(lower) and lower != 0.0:
                row = np.zeros(n)
                row[idx] = 1.0
                bound_rows.append(row)
                bound_rhs.append(lower)
            if np.isfinite(upper):
                row = np.zeros(n)
                row[idx] = -1.0
                bound_rows.append(row)
                bound_rhs.append(-upper)

        blocks = [A_geq, -A_leq]
        rhs = [b_geq, -b_leq]
        if bound_rows:
            blocks.append(np.array(bound_rows))
            rhs.append(np.array(bound_rhs))

        self._c = _readonly(c)
        self._A = _readonly(np.vstack(blocks))
        self._b = _readonly(np.concatenate(rhs))
        self._A_eq = _readonly(A_eq)
        self._b_eq = _readonly(b_eq)
        self._free = frozenset(free)

    @property
    def c(self) -> np.ndarray:
        return self._c

    @property
    def A(self) -> np.ndarray:
        """All ``>=`` rows, including converted ``<=`` rows and bound rows."""
        return self._A

    @property
    def b(self) -> np.ndarray:
        return self._b

    @property
    def A_eq(self) -> np.ndarray:
        return self._A_eq

    @property
    def b_eq(self) -> np.ndarray:
        return self._b_eq

    @property
    def dimension(self) -> int:
        return self._c.size

    @property
    def n_inequalities(self) -> int:
        return self._A.shape[0]

    @property
    def n_equalities(self) -> int:
        return self._A_eq.shape[0]

    @property
    def free_variables(self) -> Tuple[int, ...]:
        return tuple(sorted(self._free))

    def is_free(self, i: int) -> bool:
        return i in self._free

    def objective(self, x) -> float:
        return float(self._c @ np.asarray(x, dtype=float))

    def is_satisfied(self, x, tol: float = 1e-8) -> bool:
        x = np.asarray(x, dtype=float)
        if np.any(self._A @ x < self._b - tol):
            return False
        if np.any(np.abs(self._A_eq @ x - self._b_eq) > tol):
            return False
        restricted = [j for j in range(self.dimension) if j not in self._free]
        return bool(np.all(x[restricted] >= -tol))

    def __repr__(self) -> str:
        return (
            f"LPProblem(n={self.dimension}, inequalities={self.n_inequalities}, "
            f"equalities={self.n_equalities}, free={list(self.free_variables)})"
        )


class CanonicalLPProblem(LPProblem):
    """min c'x s.t. A x >= b, x >= 0, with b <= 0 so that x = 0 is a feasible start."""

    def __init__(self, c: Sequence[float], A, b) -> None:
        super().__init__(c, A=A, b=b)
        if np.any(self.b > 0):
            raise ValueError("A canonical LP problem requires b <= 0.")
