import pytest

from conic_optimizer.instances import generate_random_lp
from conic_optimizer.lp.simplex import simplex_solve
from conic_optimizer.schemas import Constraint, LPModel, LinearExpr, LinearTerm, SolveOptions, Variable


def expr(*terms, constant: float = 0.0) -> LinearExpr:
    return LinearExpr(terms=[LinearTerm(var=v, coef=c) for v, c in terms], constant=constant)


def make_lp() -> LPModel:
    return LPModel(
        name="diet-toy",
        sense="min",
        objective=expr(("x", 3.0), ("y", 2.0)),
        variables=[
            Variable(name="x", lb=0.0),
            Variable(name="y", lb=0.0),
        ],
        constraints=[
            Constraint(name="c1", lhs=expr(("x", 1.0), ("y", 2.0)), cmp=">=", rhs=8.0),
            Constraint(name="c2", lhs=expr(("x", 3.0), ("y", 1.0)), cmp=">=", rhs=6.0),
        ],
    )


def make_equality_lp() -> LPModel:
    return LPModel(
        name="dual-test",
        sense="min",
        objective=expr(("x", 1.0), ("y", 1.0)),
        variables=[Variable(name="x", lb=0.0), Variable(name="y", lb=0.0)],
        constraints=[
            Constraint(name="balance", lhs=expr(("x", 1.0), ("y", 1.0)), cmp="==", rhs=4.0),
            Constraint(name="symmetry", lhs=expr(("x", 1.0), ("y", -1.0)), cmp="==", rhs=0.0),
        ],
    )


def test_lp_solver_optimal_solution():
    solution = simplex_solve(make_lp(), SolveOptions())

    assert solution.status == "optimal"
    assert solution.objective_value == pytest.approx(9.6, rel=1e-6)
    assert solution.x is not None
    assert solution.x["x"] == pytest.approx(0.8, rel=1e-6)
    assert solution.x["y"] == pytest.approx(3.6, rel=1e-6)
    assert solution.alternate_optima is None
    assert solution.iterations > 0


def test_inequality_duals():
    solution = simplex_solve(make_lp(), SolveOptions())

    assert solution.duals == pytest.approx({"c1": 0.6, "c2": 0.8})


def test_dual_values_for_equalities():
    solution = simplex_solve(make_equality_lp(), SolveOptions())

    assert solution.status == "optimal"
    assert solution.x == pytest.approx({"x": 2.0, "y": 2.0})
    assert solution.duals is not None
    assert solution.duals["balance"] == pytest.approx(1.0, rel=1e-6, abs=1e-6)
    assert solution.duals["symmetry"] == pytest.approx(0.0, abs=1e-6)


def test_duals_can_be_skipped():
    solution = simplex_solve(make_lp(), SolveOptions(return_duals=False))

    assert solution.duals is None


def test_maximisation_with_upper_rows():
    model = LPModel(
        sense="max",
        objective=expr(("x", 3.0), ("y", 2.0)),
        variables=[Variable(name="x", lb=0.0), Variable(name="y", lb=0.0)],
        constraints=[
            Constraint(name="cap", lhs=expr(("x", 1.0), ("y", 1.0)), cmp="<=", rhs=4.0),
            Constraint(name="mix", lhs=expr(("x", 1.0), ("y", 3.0)), cmp="<=", rhs=6.0),
        ],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "optimal"
    assert solution.objective_value == pytest.approx(12.0)
    assert solution.x == pytest.approx({"x": 4.0, "y": 0.0})
    assert solution.duals["cap"] == pytest.approx(3.0)
    assert solution.duals["mix"] == pytest.approx(0.0, abs=1e-9)


def test_bounds_and_objective_constant():
    model = LPModel(
        sense="min",
        objective=expr(("x", 1.0), ("y", -1.0), constant=10.0),
        variables=[Variable(name="x", lb=1.0), Variable(name="y", lb=0.0, ub=3.0)],
        constraints=[
            Constraint(name="link", lhs=expr(("x", 1.0), ("y", 1.0)), cmp=">=", rhs=2.0),
        ],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "optimal"
    assert solution.x == pytest.approx({"x": 1.0, "y": 3.0})
    assert solution.objective_value == pytest.approx(8.0)


def test_free_variable():
    model = LPModel(
        sense="min",
        objective=expr(("z", 1.0)),
        variables=[Variable(name="z", lb=None)],
        constraints=[Constraint(name="floor", lhs=expr(("z", 1.0)), cmp=">=", rhs=-5.0)],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "optimal"
    assert solution.x["z"] == pytest.approx(-5.0)
    assert solution.objective_value == pytest.approx(-5.0)


def test_unconstrained_free_variable_is_unbounded():
    model = LPModel(
        sense="min",
        objective=expr(("x", 2.0), ("y", -2.0)),
        variables=[Variable(name="x", lb=None), Variable(name="y", lb=None)],
        constraints=[Constraint(name="cap", lhs=expr(("y", 1.0)), cmp="<=", rhs=-2.0)],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "unbounded"
    assert solution.objective_value is None
    assert solution.x["y"] == pytest.approx(-2.0)
    assert solution.ray["x"] == pytest.approx(-1.0)


def test_alternate_optima_reported_by_name():
    model = LPModel(
        sense="min",
        objective=expr(("x", 1.0), ("y", 1.0)),
        variables=[Variable(name="x", lb=0.0), Variable(name="y", lb=0.0)],
        constraints=[Constraint(name="cover", lhs=expr(("x", 1.0), ("y", 1.0)), cmp=">=", rhs=2.0)],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.objective_value == pytest.approx(2.0)
    assert solution.x == pytest.approx({"x": 2.0, "y": 0.0})
    assert solution.alternate_optima == [pytest.approx({"x": 0.0, "y": 2.0})]


def test_unbounded_reports_ray():
    model = LPModel(
        sense="max",
        objective=expr(("x", 1.0)),
        variables=[Variable(name="x", lb=0.0), Variable(name="y", lb=0.0)],
        constraints=[Constraint(name="c", lhs=expr(("x", 1.0), ("y", -1.0)), cmp="<=", rhs=1.0)],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "unbounded"
    assert solution.objective_value is None
    assert solution.ray is not None
    assert solution.ray["x"] > 0


def test_infeasible_status():
    model = LPModel(
        sense="min",
        objective=expr(("x", 1.0)),
        variables=[Variable(name="x", lb=0.0)],
        constraints=[
            Constraint(name="low", lhs=expr(("x", 1.0)), cmp=">=", rhs=6.0),
            Constraint(name="high", lhs=expr(("x", 1.0)), cmp="<=", rhs=4.0),
        ],
    )

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "infeasible"
    assert solution.x is None
    assert solution.iterations >= 1


def test_unknown_variable_is_reported():
    model = make_lp()
    model.constraints.append(Constraint(name="bad", lhs=expr(("w", 1.0)), cmp=">=", rhs=0.0))

    solution = simplex_solve(model, SolveOptions())

    assert solution.status == "infeasible"
    assert "w" in solution.message


def test_iteration_limit_status():
    solution = simplex_solve(make_lp(), SolveOptions(max_iters=0))

    assert solution.status == "iteration_limit"
    assert solution.x is None


def test_random_instances_are_feasible():
    for seed in range(3):
        model = generate_random_lp(4, 3, seed=seed)
        solution = simplex_solve(model, SolveOptions())

        assert solution.status == "optimal"
        for cons in model.constraints:
            lhs = sum(t.coef * solution.x[t.var] for t in cons.lhs.terms)
            if cons.cmp == ">=":
                assert lhs >= cons.rhs - 1e-7
            elif cons.cmp == "<=":
                assert lhs <= cons.rhs + 1e-7
            else:
                assert lhs == pytest.approx(cons.rhs, abs=1e-7)
        for var in model.variables:
            if var.lb is not None:
                assert solution.x[var.name] >= var.lb - 1e-7
            if var.ub is not None:
                assert solution.x[var.name] <= var.ub + 1e-7
