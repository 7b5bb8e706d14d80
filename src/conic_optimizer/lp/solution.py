from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .pivoting import SmallestSubscriptRule
from .tableau import PIVOT_COLUMNS, Label, LabelType, SimplexTable

logger = logging.getLogger(__name__)

_VARIABLES = (LabelType.NON_BASIC, LabelType.FREE)


class LPBoundedMinimizer:
    """
    The solution of an LP with a finite minimum.

    An LP may attain its minimum at many vertices. Besides the basic point of
    the final table, all the vertices reachable through zero reduced cost
    pivots are collected (a brute force search: exponential in the worst case).
    ``minimizer()`` always returns the first one.
    """

    def __init__(self, table: SimplexTable, enumerate_optima: bool = True) -> None:
        self._table = table.copy()
        self.epsilon = table.epsilon
        self._minimizers: List[np.ndarray] = [self._table.minimizer()]
        if enumerate_optima:
            self._search(self._table)
        logger.debug("found %d optimal vertices", len(self._minimizers))

    def resultant_table(self) -> SimplexTable:
        return self._table.copy()

    def minimum(self) -> float:
        return self._table.minimum()

    def minimizer(self) -> np.ndarray:
        return self._minimizers[0].copy()

    def minimizers(self) -> List[np.ndarray]:
        return [x.copy() for x in self._minimizers]

    def multipliers(self) -> Tuple[np.ndarray, np.ndarray]:
        return self._table.multipliers()

    def _contains(self, x: np.ndarray) -> bool:
        return any(np.allclose(x, seen, rtol=0.0, atol=self.epsilon) for seen in self._minimizers)

    def _search(self, root: SimplexTable) -> None:
        # see Ferris, Mangasarian, Wright, "Linear Programming with MATLAB", pp. 57-59
        rule = SmallestSubscriptRule()
        for s, label in enumerate(root.col_labels):
            if label.type not in PIVOT_COLUMNS:
                continue
            if not root.is_zero(root.cost(s)):
                continue
            r = rule.ratio_test(root, s)
            if r is None:
                continue
            candidate = root.swap(r, s)
            if not candidate.is_feasible():
                continue
            x = candidate.minimizer()
            if self._contains(x):
                continue
            self._minimizers.append(x)
            self._search(candidate)

    def __repr__(self) -> str:
        return f"LPBoundedMinimizer(minimum={self.minimum():g}, n_minimizers={len(self._minimizers)})"


class LPUnboundedMinimizer:
    """
    The solution of an LP whose objective decreases without bound.

    ``minimizer()`` is a feasible point ``u`` and ``v()`` a direction such that
    ``u + t v`` stays feasible for every ``t >= 0`` while the objective tends to -inf.
    """

    def __init__(self, table: SimplexTable, column: int) -> None:
        self._table = table.copy()
        self.column = column
        self._u = self._table.minimizer()
        self._v = self._direction(self._table, column)

    def _direction(self, table: SimplexTable, s: int) -> np.ndarray:
        v = np.zeros(table.problem_size)
        label: Label = table.col_labels[s]
        if label.type in _VARIABLES:
            v[label.index] = 1.0
        for i, row_label in enumerate(table.row_labels):
            if row_label.type in _VARIABLES:
                v[row_label.index] = table.get(i, s)
        return v

    def resultant_table(self) -> SimplexTable:
        return self._table.copy()

    def minimum(self) -> float:
        return -np.inf

    def minimizer(self) -> np.ndarray:
        return self._u.copy()

    def minimizers(self) -> List[np.ndarray]:
        return [self._u.copy()]

    def v(self) -> np.ndarray:
        return self._v.copy()

    def point_along(self, t: float) -> np.ndarray:
        return self._u + t * self._v

    def objective_along(self, c: Sequence[float], t: float) -> float:
        return float(np.dot(np.asarray(c, dtype=float), self.point_along(t)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(column={self.column}, v={self._v})"


class LPUnboundedMinimizerScheme2(LPUnboundedMinimizer):
    """
    Unboundedness found while moving free variables out of the columns: the
    free column touches no sign-restricted row, so the variable moves in the
    direction opposite to the sign of its reduced cost.
    """

    def _direction(self, table: SimplexTable, s: int) -> np.ndarray:
        sign = -np.sign(table.cost(s))
        return sign * super()._direction(table, s)


LPSimplexMinimizer = Union[LPBoundedMinimizer, LPUnboundedMinimizer]


class LPSimplexSolution:
    def __init__(
        self,
        minimizer: LPSimplexMinimizer,
        history: Optional[Sequence[Tuple[Label, Label]]] = None,
    ) -> None:
        self._minimizer = minimizer
        self.history: Tuple[Tuple[Label, Label], ...] = tuple(history or ())

    @property
    def status(self) -> str:
        return "unbounded" if isinstance(self._minimizer, LPUnboundedMinimizer) else "optimal"

    @property
    def iterations(self) -> int:
        return len(self.history)

    def minimum(self) -> float:
        return self._minimizer.minimum()

    def minimizer(self) -> LPSimplexMinimizer:
        return self._minimizer

    def __repr__(self) -> str:
        return f"LPSimplexSolution(status={self.status}, minimum={self.minimum():g}, iterations={self.iterations})"
