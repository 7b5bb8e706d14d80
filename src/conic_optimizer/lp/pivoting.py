from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Tuple, Type, Union

from .tableau import PIVOT_COLUMNS, PIVOT_ROWS, SimplexTable


class Pivot(NamedTuple):
    """Exchange row ``row`` with column ``col``."""

    row: int
    col: int


class Optimal(NamedTuple):
    """No entering column: the table is optimal."""


class Unbounded(NamedTuple):
    """Column ``col`` may enter but no row limits it."""

    col: int


PivotOutcome = Union[Pivot, Optimal, Unbounded]


class PivotingRule:
    """Chooses the entering column and the leaving row of a simplex table."""

    name = "abstract"

    def candidates(self, table: SimplexTable) -> List[int]:
        """Columns whose variable may enter and whose reduced cost is negative."""
        cost = table.cost_row
        return [
            j
            for j, label in enumerate(table.col_labels)
            if label.type in PIVOT_COLUMNS and cost[j] < -table.epsilon
        ]

    def entering(self, table: SimplexTable) -> Optional[int]:
        raise NotImplementedError

    def ratio_test(self, table: SimplexTable, s: int) -> Optional[int]:
        """
        Among the rows that decrease when column ``s`` increases, return the one
        that hits zero first, or ``None`` when there is none.
        """

        ratios = self._ratios(table, s)
        if not ratios:
            return None
        return min(ratios, key=lambda item: item[0])[1]

    def get_pivot(self, table: SimplexTable) -> PivotOutcome:
        s = self.entering(table)
        if s is None:
            return Optimal()
        r = self.ratio_test(table, s)
        if r is None:
            return Unbounded(s)
        return Pivot(r, s)

    @staticmethod
    def _ratios(table: SimplexTable, s: int) -> List[Tuple[float, int]]:
        cells = table.cells
        b_col = table.b_col
        ratios: List[Tuple[float, int]] = []
        for i, label in enumerate(table.row_labels):
            if label.type not in PIVOT_ROWS:
                continue
            value = cells[i, s]
            if value < -table.epsilon:
                ratios.append((-cells[i, b_col] / value, i))
        return ratios


class SmallestSubscriptRule(PivotingRule):
    """
    Bland's rule: enter the eligible variable with the smallest subscript and,
    among rows tied in the ratio test, leave with the smallest subscript.
    Never cycles.
    """

    name = "smallest_subscript"

    def entering(self, table: SimplexTable) -> Optional[int]:
        candidates = self.candidates(table)
        if not candidates:
            return None
        return min(candidates, key=lambda j: table.col_labels[j].subscript)

    def ratio_test(self, table: SimplexTable, s: int) -> Optional[int]:
        ratios = self._ratios(table, s)
        if not ratios:
            return None
        theta = min(ratio for ratio, _ in ratios)
        tied = [i for ratio, i in ratios if ratio - theta <= table.epsilon]
        return min(tied, key=lambda i: table.row_labels[i].subscript)


class DantzigRule(PivotingRule):
    """Enter the most negative reduced cost; leave with the first minimum ratio."""

    name = "dantzig"

    def entering(self, table: SimplexTable) -> Optional[int]:
        candidates = self.candidates(table)
        if not candidates:
            return None
        cost = table.cost_row
        return min(candidates, key=lambda j: cost[j])


PIVOTING_RULES: Dict[str, Type[PivotingRule]] = {
    SmallestSubscriptRule.name: SmallestSubscriptRule,
    DantzigRule.name: DantzigRule,
}


def get_pivoting_rule(name: str) -> PivotingRule:
    try:
        return PIVOTING_RULES[name]()
    except KeyError as exc:
        raise ValueError(f"Unknown pivoting rule '{name}'; expected one of {sorted(PIVOTING_RULES)}.") from exc
