"""
Simplex tableau in the form used by Ferris, Mangasarian and Wright.

For ``min c'x s.t. A x >= b`` the initial table is::

        | A   -b |
    T = | c'   0 |

A row labelled ``BASIC i`` reads ``y_i = sum_j T[i, j] * (column variable j) + T[i, B]``
with ``y_i >= 0``; the last row is the objective. Pivoting exchanges the role
of a row variable and a column variable (Jordan exchange).
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..errors import NumericalSingularity
from .problem import CanonicalLPProblem, LPProblem
from .utils import auto_epsilon

logger = logging.getLogger(__name__)


class LabelType(enum.Enum):
    NON_BASIC = "non_basic"  # an original variable, kept at 0 while in a column
    BASIC = "basic"  # the slack of a ">=" inequality
    EQUALITY = "equality"  # the residual of an equality, must stay 0
    FREE = "free"  # an original variable without sign restriction
    ARTIFICIAL = "artificial"  # x0 of phase 1
    B = "b"  # the right-hand side column
    COST = "cost"  # the objective row
    ARTIFICIAL_COST = "artificial_cost"  # z0 of phase 1


_SUBSCRIPT_ORDER = {
    LabelType.ARTIFICIAL: 0,
    LabelType.NON_BASIC: 1,
    LabelType.FREE: 1,
    LabelType.BASIC: 2,
    LabelType.EQUALITY: 3,
    LabelType.B: 4,
    LabelType.COST: 4,
    LabelType.ARTIFICIAL_COST: 4,
}


class Label(NamedTuple):
    type: LabelType
    index: int

    @property
    def subscript(self) -> Tuple[int, int]:
        """Total order over variables used by the smallest-subscript rule: x0, x_1..x_n, y_1..y_m."""
        return _SUBSCRIPT_ORDER[self.type], self.index

    def __str__(self) -> str:
        return f"{self.type.value}[{self.index}]"


COST = Label(LabelType.COST, -1)
B = Label(LabelType.B, -1)
ARTIFICIAL_COST = Label(LabelType.ARTIFICIAL_COST, -1)
ARTIFICIAL = Label(LabelType.ARTIFICIAL, 0)

# rows that carry a sign-restricted variable
RESTRICTED_ROWS = frozenset({LabelType.BASIC, LabelType.NON_BASIC})
# rows the ratio test may pivot on
PIVOT_ROWS = frozenset({LabelType.BASIC, LabelType.NON_BASIC, LabelType.ARTIFICIAL})
# columns that may enter
PIVOT_COLUMNS = frozenset({LabelType.BASIC, LabelType.NON_BASIC, LabelType.ARTIFICIAL})
_VARIABLES = frozenset({LabelType.NON_BASIC, LabelType.FREE})


def jordan_exchange(cells: np.ndarray, r: int, s: int) -> np.ndarray:
    """
    Exchange the row variable ``r`` with the column variable ``s``.

    With pivot ``p = T[r, s]``: ``T'[r, s] = 1/p``, ``T'[r, j] = -T[r, j]/p``,
    ``T'[i, s] = T[i, s]/p`` and ``T'[i, j] = T[i, j] - T[i, s] T[r, j]/p``.
    """

    T = np.asarray(cells, dtype=float)
    pivot = T[r, s]
    if pivot == 0.0 or not np.isfinite(pivot):
        raise NumericalSingularity(f"Cannot pivot on T[{r}, {s}] = {pivot}.")
    result = T - np.outer(T[:, s], T[r, :]) / pivot
    result[r, :] = -T[r, :] / pivot
    result[:, s] = T[:, s] / pivot
    result[r, s] = 1.0 / pivot
    return result


class SimplexTable:
    """A labelled simplex table. Every operation returns a new table."""

    def __init__(
        self,
        cells,
        row_labels: Sequence[Label],
        col_labels: Sequence[Label],
        epsilon: Optional[float] = None,
    ) -> None:
        cells = np.array(cells, dtype=float, ndmin=2)
        if cells.shape != (len(row_labels), len(col_labels)):
            raise ValueError(
                f"Table of shape {cells.shape} needs {cells.shape[0]} row labels and "
                f"{cells.shape[1]} column labels, got {len(row_labels)} and {len(col_labels)}."
            )
        cells.setflags(write=False)
        self._cells = cells
        self._row_labels = tuple(row_labels)
        self._col_labels = tuple(col_labels)
        self.epsilon = auto_epsilon(cells) if epsilon is None else float(epsilon)

    @classmethod
    def from_problem(cls, problem: LPProblem, epsilon: Optional[float] = None) -> "SimplexTable":
        """
        Build ``[[A, -b], [A_eq, -b_eq], [c', 0]]``; inequality rows are ``BASIC``,
        equality rows ``EQUALITY``, columns ``NON_BASIC`` or ``FREE``.
        """

        n = problem.dimension
        body = np.vstack([problem.A, problem.A_eq])
        rhs = -np.concatenate([problem.b, problem.b_eq])
        top = np.column_stack([body, rhs]) if body.size else np.zeros((0, n + 1))
        cells = np.vstack([top, np.append(problem.c, 0.0)])

        row_labels = [Label(LabelType.BASIC, i) for i in range(problem.n_inequalities)]
        row_labels += [Label(LabelType.EQUALITY, i) for i in range(problem.n_equalities)]
        row_labels.append(COST)
        col_labels = [
            Label(LabelType.FREE if problem.is_free(j) else LabelType.NON_BASIC, j) for j in range(n)
        ]
        col_labels.append(B)
        return cls(cells, row_labels, col_labels, epsilon)

    @classmethod
    def from_canonical(cls, problem: CanonicalLPProblem, epsilon: Optional[float] = None) -> "SimplexTable":
        return cls.from_problem(problem, epsilon)

    def copy(self) -> "SimplexTable":
        return SimplexTable(self._cells, self._row_labels, self._col_labels, self.epsilon)

    @property
    def cells(self) -> np.ndarray:
        return self._cells

    @property
    def row_labels(self) -> Tuple[Label, ...]:
        return self._row_labels

    @property
    def col_labels(self) -> Tuple[Label, ...]:
        return self._col_labels

    @property
    def n_rows(self) -> int:
        return self._cells.shape[0]

    @property
    def n_cols(self) -> int:
        return self._cells.shape[1]

    def get(self, i: int, j: int) -> float:
        return float(self._cells[i, j])

    def row_index(self, label: Label) -> int:
        return self._row_labels.index(label)

    def col_index(self, label: Label) -> int:
        return self._col_labels.index(label)

    @property
    def b_col(self) -> int:
        return self.col_index(B)

    @property
    def cost_row(self) -> np.ndarray:
        """The last row: the objective, or z0 during phase 1."""
        return self._cells[-1]

    @property
    def rhs(self) -> np.ndarray:
        return self._cells[:, self.b_col]

    def cost(self, j: int) -> float:
        return float(self._cells[-1, j])

    def b(self, i: int) -> float:
        return float(self._cells[i, self.b_col])

    def is_zero(self, value: float) -> bool:
        return abs(value) <= self.epsilon

    @property
    def problem_size(self) -> int:
        """The number of original variables, wherever they currently sit."""
        return sum(1 for label in self._row_labels + self._col_labels if label.type in _VARIABLES)

    def swap(self, r: int, s: int) -> "SimplexTable":
        """Jordan exchange of row ``r`` with column ``s``; the two labels trade places."""
        cells = jordan_exchange(self._cells, r, s)
        row_labels = list(self._row_labels)
        col_labels = list(self._col_labels)
        row_labels[r], col_labels[s] = self._col_labels[s], self._row_labels[r]
        logger.debug("pivot on (%d, %d): %s <-> %s", r, s, self._row_labels[r], self._col_labels[s])
        return SimplexTable(cells, row_labels, col_labels, self.epsilon)

    def add_row(self, position: int, label: Label, values: Optional[Iterable[float]] = None) -> "SimplexTable":
        values = np.zeros(self.n_cols) if values is None else np.asarray(list(values), dtype=float)
        cells = np.insert(self._cells, position, values, axis=0)
        row_labels = list(self._row_labels)
        row_labels.insert(position, label)
        return SimplexTable(cells, row_labels, self._col_labels, self.epsilon)

    def add_column(self, position: int, label: Label, values: Optional[Iterable[float]] = None) -> "SimplexTable":
        values = np.zeros(self.n_rows) if values is None else np.asarray(list(values), dtype=float)
        cells = np.insert(self._cells, position, values, axis=1)
        col_labels = list(self._col_labels)
        col_labels.insert(position, label)
        return SimplexTable(cells, self._row_labels, col_labels, self.epsilon)

    def delete_row(self, i: int) -> "SimplexTable":
        cells = np.delete(self._cells, i, axis=0)
        row_labels = self._row_labels[:i] + self._row_labels[i + 1 :]
        return SimplexTable(cells, row_labels, self._col_labels, self.epsilon)

    def delete_column(self, j: int) -> "SimplexTable":
        cells = np.delete(self._cells, j, axis=1)
        col_labels = self._col_labels[:j] + self._col_labels[j + 1 :]
        return SimplexTable(cells, self._row_labels, col_labels, self.epsilon)

    def is_feasible(self) -> bool:
        """True iff every sign-restricted row variable has a non-negative value."""
        b_col = self.b_col
        for i, label in enumerate(self._row_labels):
            if label.type in RESTRICTED_ROWS and self._cells[i, b_col] < -self.epsilon:
                return False
        return True

    def minimum(self) -> float:
        return float(self._cells[-1, self.b_col])

    def minimizer(self) -> np.ndarray:
        """The basic point: row variables read off the RHS, column variables at 0."""
        x = np.zeros(self.problem_size)
        b_col = self.b_col
        for i, label in enumerate(self._row_labels):
            if label.type in _VARIABLES:
                x[label.index] = self._cells[i, b_col]
        return x

    def multipliers(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Lagrange multipliers of the ``>=`` rows and the equalities: the objective
        row entry of every slack sitting in a column, 0 for those in rows.
        """

        labels = self._row_labels + self._col_labels
        u = np.zeros(sum(1 for label in labels if label.type is LabelType.BASIC))
        w = np.zeros(sum(1 for label in labels if label.type is LabelType.EQUALITY))
        for j, label in enumerate(self._col_labels):
            if label.type is LabelType.BASIC:
                u[label.index] = self._cells[-1, j]
            elif label.type is LabelType.EQUALITY:
                w[label.index] = self._cells[-1, j]
        return u, w

    def to_matrix(self) -> np.ndarray:
        return np.array(self._cells)

    def __repr__(self) -> str:
        return f"SimplexTable(shape={self._cells.shape}, epsilon={self.epsilon:g})"

    def __str__(self) -> str:
        header = "\t".join(["", *map(str, self._col_labels)])
        lines = [header]
        for label, row in zip(self._row_labels, self._cells):
            lines.append("\t".join([str(label), *(f"{v:.6g}" for v in row)]))
        return "\n".join(lines)
