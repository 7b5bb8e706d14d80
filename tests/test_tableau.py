import numpy as np
import pytest

from conic_optimizer.lp.problem import CanonicalLPProblem, LPProblem
from conic_optimizer.lp.tableau import (
    ARTIFICIAL,
    ARTIFICIAL_COST,
    B,
    COST,
    Label,
    LabelType,
    SimplexTable,
)


def make_problem() -> LPProblem:
    # x3 is free
    return LPProblem(
        c=[2.0, -1.0, 1.0],
        A=[[1.0, -1.0, 4.0], [1.0, -1.0, -1.0]],
        b=[-1.0, 2.0],
        A_eq=[[1.0, 3.0, 2.0]],
        b_eq=[3.0],
        bounds={2: (None, None)},
    )


def test_table_from_problem():
    table = SimplexTable.from_problem(make_problem())

    assert (table.n_rows, table.n_cols) == (4, 4)
    assert [label.type for label in table.col_labels] == [
        LabelType.NON_BASIC,
        LabelType.NON_BASIC,
        LabelType.FREE,
        LabelType.B,
    ]
    assert [label.type for label in table.row_labels] == [
        LabelType.BASIC,
        LabelType.BASIC,
        LabelType.EQUALITY,
        LabelType.COST,
    ]
    expected = np.array(
        [
            [1.0, -1.0, 4.0, 1.0],
            [1.0, -1.0, -1.0, -2.0],
            [1.0, 3.0, 2.0, -3.0],
            [2.0, -1.0, 1.0, 0.0],
        ]
    )
    assert np.array_equal(table.to_matrix(), expected)
    assert table.problem_size == 3
    assert not table.is_feasible()


def test_swap_exchanges_labels():
    table = SimplexTable(
        [[2.0, 1.0], [3.0, 1.0]],
        row_labels=[COST, ARTIFICIAL_COST],
        col_labels=[B, ARTIFICIAL],
        epsilon=1e-12,
    )

    table1 = table.swap(0, 0)

    assert table1.to_matrix() == pytest.approx(np.array([[0.5, -0.5], [1.5, -0.5]]))
    assert table1.row_labels == (B, ARTIFICIAL_COST)
    assert table1.col_labels == (COST, ARTIFICIAL)
    # the original is untouched
    assert table.row_labels == (COST, ARTIFICIAL_COST)
    assert table.get(0, 0) == 2.0


def test_swap_twice_restores_table():
    table = SimplexTable.from_problem(make_problem())

    restored = table.swap(1, 0).swap(1, 0)

    assert restored.to_matrix() == pytest.approx(table.to_matrix())
    assert restored.row_labels == table.row_labels
    assert restored.col_labels == table.col_labels


def test_cells_are_read_only():
    table = SimplexTable.from_problem(make_problem())

    with pytest.raises(ValueError):
        table.cells[0, 0] = 5.0


def test_epsilon_is_carried_by_derived_tables():
    table = SimplexTable.from_problem(make_problem())

    derived = table.swap(0, 0).add_row(0, Label(LabelType.BASIC, 9)).delete_row(0)

    assert derived.epsilon == table.epsilon
    assert table.epsilon > 0


def test_explicit_epsilon_is_used():
    table = SimplexTable.from_problem(make_problem(), epsilon=1e-6)

    assert table.epsilon == 1e-6
    assert table.is_zero(5e-7)


def test_minimizer_minimum_and_feasibility_after_pivot():
    problem = LPProblem(c=[1.0, 2.0], A=[[1.0, 1.0]], b=[2.0])
    table = SimplexTable.from_problem(problem)

    assert not table.is_feasible()
    assert table.minimizer() == pytest.approx([0.0, 0.0])

    pivoted = table.swap(0, 0)

    assert pivoted.is_feasible()
    assert pivoted.minimizer() == pytest.approx([2.0, 0.0])
    assert pivoted.minimum() == pytest.approx(2.0)
    assert pivoted.row_labels[0] == Label(LabelType.NON_BASIC, 0)


def test_multipliers_read_from_cost_row():
    problem = LPProblem(c=[1.0, 2.0], A=[[1.0, 1.0]], b=[2.0])
    table = SimplexTable.from_problem(problem).swap(0, 0)

    u, w = table.multipliers()

    assert u == pytest.approx([1.0])
    assert w.size == 0


def test_add_and_delete_column():
    table = SimplexTable.from_problem(LPProblem(c=[1.0], A=[[1.0]], b=[-1.0]))

    widened = table.add_column(0, ARTIFICIAL, [1.0, 0.0])

    assert widened.col_labels[0] == ARTIFICIAL
    assert widened.b_col == 2
    narrowed = widened.delete_column(widened.col_index(ARTIFICIAL))
    assert np.array_equal(narrowed.to_matrix(), table.to_matrix())


def test_subscript_order():
    labels = [
        Label(LabelType.EQUALITY, 0),
        Label(LabelType.BASIC, 1),
        Label(LabelType.NON_BASIC, 2),
        Label(LabelType.BASIC, 0),
        ARTIFICIAL,
        Label(LabelType.FREE, 0),
    ]

    ordered = sorted(labels, key=lambda label: label.subscript)

    assert ordered == [
        ARTIFICIAL,
        Label(LabelType.FREE, 0),
        Label(LabelType.NON_BASIC, 2),
        Label(LabelType.BASIC, 0),
        Label(LabelType.BASIC, 1),
        Label(LabelType.EQUALITY, 0),
    ]


def test_canonical_problem_requires_non_positive_b():
    with pytest.raises(ValueError):
        CanonicalLPProblem([1.0], [[1.0]], [1.0])

    table = SimplexTable.from_canonical(CanonicalLPProblem([1.0], [[1.0]], [-1.0]))
    assert table.is_feasible()


def test_problem_dimension_checks():
    with pytest.raises(ValueError):
        LPProblem(c=[1.0, 2.0], A=[[1.0, 2.0, 3.0]], b=[1.0])
    with pytest.raises(ValueError):
        LPProblem(c=[1.0, 2.0], A=[[1.0, 2.0]], b=[1.0, 2.0])
