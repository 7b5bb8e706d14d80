"""
Bring a simplex table to a state Phase 2 can start from.

Scheme II moves every equality residual into a column (where it stays at 0) and
every free variable into a row (where its sign is never checked). Phase 1 finds
a feasible basic point with a single artificial variable.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..errors import LPInfeasible, LPUnbounded, NumericalSingularity
from .pivoting import Optimal, PivotingRule, SmallestSubscriptRule
from .tableau import (
    ARTIFICIAL,
    ARTIFICIAL_COST,
    PIVOT_COLUMNS,
    PIVOT_ROWS,
    RESTRICTED_ROWS,
    Label,
    LabelType,
    SimplexTable,
)

logger = logging.getLogger(__name__)

History = List[Tuple[Label, Label]]


def _first_nonzero_column(table: SimplexTable, r: int, kind: LabelType) -> Optional[int]:
    for j, label in enumerate(table.col_labels):
        if label.type is kind and not table.is_zero(table.get(r, j)):
            return j
    return None


def _first_nonzero_row(table: SimplexTable, s: int) -> Optional[int]:
    rows = [
        i
        for i, label in enumerate(table.row_labels)
        if label.type in PIVOT_ROWS and not table.is_zero(table.get(i, s))
    ]
    if not rows:
        return None
    return min(rows, key=lambda i: table.row_labels[i].subscript)


def _decreasing_ratio_row(table: SimplexTable, s: int) -> Optional[int]:
    """The row that hits zero first when column ``s`` decreases from 0."""
    b_col = table.b_col
    ratios = [
        (table.get(i, b_col) / table.get(i, s), i)
        for i, label in enumerate(table.row_labels)
        if label.type in PIVOT_ROWS and table.get(i, s) > table.epsilon
    ]
    if not ratios:
        return None
    theta = min(ratio for ratio, _ in ratios)
    tied = [i for ratio, i in ratios if ratio - theta <= table.epsilon]
    return min(tied, key=lambda i: table.row_labels[i].subscript)


def _pivot(table: SimplexTable, r: int, s: int, history: Optional[History]) -> SimplexTable:
    if history is not None:
        history.append((table.row_labels[r], table.col_labels[s]))
    return table.swap(r, s)


def remove_equalities(table: SimplexTable, history: Optional[History] = None) -> SimplexTable:
    """Exchange every equality row into a column; its residual then stays at 0."""
    equalities = [label for label in table.row_labels if label.type is LabelType.EQUALITY]
    for label in equalities:
        r = table.row_index(label)
        s = _first_nonzero_column(table, r, LabelType.FREE)
        if s is None:
            s = _first_nonzero_column(table, r, LabelType.NON_BASIC)
        if s is None:
            if not table.is_zero(table.b(r)):
                raise LPInfeasible(f"Equality {label.index} cannot be satisfied.")
            logger.debug("equality %d is redundant", label.index)
            continue
        table = _pivot(table, r, s, history)
    return table


def remove_free_variables(table: SimplexTable, history: Optional[History] = None) -> SimplexTable:
    """
    Exchange every free column into a row. A free column with no usable pivot
    and a non-zero cost proves unboundedness once the table is feasible.
    """

    rule = SmallestSubscriptRule()
    frees = [label for label in table.col_labels if label.type is LabelType.FREE]
    for label in frees:
        s = table.col_index(label)
        r = rule.ratio_test(table, s)
        if r is None:
            # a feasible table stays feasible when the free variable decreases
            r = _decreasing_ratio_row(table, s) if table.is_feasible() else _first_nonzero_row(table, s)
        if r is None:
            if table.is_zero(table.cost(s)):
                continue
            if table.is_feasible():
                raise LPUnbounded(s, table)
            # decided once the table is feasible
            continue
        table = _pivot(table, r, s, history)
    return table


def scheme2(table: SimplexTable, history: Optional[History] = None) -> SimplexTable:
    """Ferris, Mangasarian, Wright, Scheme II (p. 77)."""
    table = remove_equalities(table, history)
    return remove_free_variables(table, history)


def phase1(
    table: SimplexTable,
    rule: Optional[PivotingRule] = None,
    max_iters: int = 10_000,
    history: Optional[History] = None,
) -> SimplexTable:
    """
    Ferris, Mangasarian, Wright, Algorithm 3.2: minimise an artificial variable
    ``x0`` added to every infeasible row. The problem is feasible iff the
    minimum is 0.
    """

    from .simplex import phase2

    if table.is_feasible():
        return table
    rule = rule or SmallestSubscriptRule()
    history = [] if history is None else history

    eps = table.epsilon
    b_col = table.b_col
    column = [
        1.0 if label.type in RESTRICTED_ROWS and table.get(i, b_col) < -eps else 0.0
        for i, label in enumerate(table.row_labels)
    ]
    table = table.add_column(0, ARTIFICIAL, column)
    z0 = [0.0] * table.n_cols
    z0[table.col_index(ARTIFICIAL)] = 1.0
    table = table.add_row(table.n_rows, ARTIFICIAL_COST, z0)

    b_col = table.b_col
    restricted = [i for i, label in enumerate(table.row_labels) if label.type in RESTRICTED_ROWS]
    r = min(restricted, key=lambda i: table.get(i, b_col))
    table = _pivot(table, r, table.col_index(ARTIFICIAL), history)
    logger.debug("phase 1 starts with x0 = %g", table.b(r))

    result = phase2(table, rule, max_iters - len(history))
    history.extend(result.history)
    table = result.table
    if not isinstance(result.outcome, Optimal):
        raise NumericalSingularity("The phase 1 problem cannot be unbounded.")
    if table.minimum() > eps:
        logger.info("phase 1 ended with z0 = %g: infeasible", table.minimum())
        raise LPInfeasible()

    if ARTIFICIAL in table.row_labels:
        r = table.row_index(ARTIFICIAL)
        choices = [
            j
            for j, label in enumerate(table.col_labels)
            if label.type in PIVOT_COLUMNS and not table.is_zero(table.get(r, j))
        ]
        if choices:
            s = min(choices, key=lambda j: table.col_labels[j].subscript)
            table = _pivot(table, r, s, history)
        else:
            table = table.delete_row(r)

    table = table.delete_row(table.row_index(ARTIFICIAL_COST))
    if ARTIFICIAL in table.col_labels:
        table = table.delete_column(table.col_index(ARTIFICIAL))
    return table
