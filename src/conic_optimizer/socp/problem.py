"""
The dual form of a second-order cone program::

    max  b'y
    s.t. A_i' y + s_i = c_i,   s_i in K_i,   i = 1..q

where ``K_i = {(t, u) : ||u|| <= t}`` has dimension ``n_i``. The stacked
matrix ``A = [A_1, ..., A_q]`` and vector ``c = [c_1; ...; c_q]`` are derived
from the blocks.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class SOCPDualProblem:
    def __init__(self, b: Sequence[float], A: Sequence, c: Sequence) -> None:
        b = np.atleast_1d(np.array(b, dtype=float))
        if b.ndim != 1:
            raise ValueError("b must be a vector.")
        if len(A) != len(c):
            raise ValueError(f"Got {len(A)} blocks of A but {len(c)} blocks of c.")
        if len(A) == 0:
            raise ValueError("At least one cone block is required.")

        A_blocks: List[np.ndarray] = []
        c_blocks: List[np.ndarray] = []
        for i, (A_i, c_i) in enumerate(zip(A, c)):
            A_i = np.array(A_i, dtype=float, ndmin=2)
            c_i = np.atleast_1d(np.array(c_i, dtype=float))
            if A_i.shape[0] != b.size:
                raise ValueError(f"A[{i}] must have {b.size} rows, found {A_i.shape[0]}.")
            if A_i.shape[1] != c_i.size:
                raise ValueError(f"A[{i}] has {A_i.shape[1]} columns but c[{i}] has {c_i.size} entries.")
            if c_i.size == 0:
                raise ValueError(f"Cone block {i} is empty.")
            A_blocks.append(_readonly(A_i))
            c_blocks.append(_readonly(c_i))

        self._b = _readonly(b)
        self._A_blocks = tuple(A_blocks)
        self._c_blocks = tuple(c_blocks)
        self._A = _readonly(np.hstack(A_blocks))
        self._c = _readonly(np.concatenate(c_blocks))

        offsets = np.cumsum([0] + [c_i.size for c_i in c_blocks])
        self._slices = tuple(slice(int(lo), int(hi)) for lo, hi in zip(offsets[:-1], offsets[1:]))

    @property
    def b(self) -> np.ndarray:
        return self._b

    @property
    def m(self) -> int:
        """The dimension of y."""
        return self._b.size

    @property
    def q(self) -> int:
        """The number of cones."""
        return len(self._A_blocks)

    def n(self, i: int) -> int:
        """The dimension of cone ``i`` (0-based)."""
        return self._c_blocks[i].size

    @property
    def N(self) -> int:
        return self._c.size

    def A_block(self, i: int) -> np.ndarray:
        return self._A_blocks[i]

    def c_block(self, i: int) -> np.ndarray:
        return self._c_blocks[i]

    @property
    def A(self) -> np.ndarray:
        return self._A

    @property
    def c(self) -> np.ndarray:
        return self._c

    @property
    def block_slices(self) -> tuple:
        return self._slices

    def objective(self, y) -> float:
        return float(self._b @ np.asarray(y, dtype=float))

    def slack(self, y) -> np.ndarray:
        return self._c - self._A.T @ np.asarray(y, dtype=float)

    def is_in_cone(self, s, tol: float = 0.0) -> bool:
        s = np.asarray(s, dtype=float)
        for sl in self._slices:
            block = s[sl]
            if block[0] < np.linalg.norm(block[1:]) - tol:
                return False
        return True

    def __repr__(self) -> str:
        sizes = [self.n(i) for i in range(self.q)]
        return f"SOCPDualProblem(m={self.m}, cones={sizes})"
