import logging
import numpy as np
from typing import Dict, Any, NamedTuple, Optional, Union

from ..errors import LPInfeasible, LPUnbounded, NonConvergence, NumericalSingularity
from ..schemas import LPModel, SolveOptions, LPSolution
from .pivoting import Pivot, PivotOutcome, PivotingRule, Unbounded, get_pivoting_rule
from .preprocess import History, phase1, remove_free_variables, scheme2
from .problem import CanonicalLPProblem, LPProblem
from .solution import (
    LPBoundedMinimizer,
    LPSimplexSolution,
    LPUnboundedMinimizer,
    LPUnboundedMinimizerScheme2,
)
from .tableau import LabelType, SimplexTable
from .utils import build_lp_problem

logger = logging.getLogger(__name__)


class PhaseResult(NamedTuple):
    table: SimplexTable
    outcome: PivotOutcome
    history: History


def phase2(table: SimplexTable, rule: PivotingRule, max_iters: int) -> PhaseResult:
    """
    Pivot a feasible table until the rule reports optimality or an unbounded
    column. Feasibility is an invariant of every pivot.
    """

    if not table.is_feasible():
        raise LPInfeasible("Phase 2 needs a feasible table.")
    history: History = []
    while True:
        outcome = rule.get_pivot(table)
        if not isinstance(outcome, Pivot):
            return PhaseResult(table, outcome, history)
        if len(history) >= max_iters:
            logger.warning("phase 2 stopped after %d pivots", len(history))
            raise NonConvergence(len(history), table)
        history.append((table.row_labels[outcome.row], table.col_labels[outcome.col]))
        table = table.swap(outcome.row, outcome.col)
        if not table.is_feasible():
            raise NumericalSingularity(
                f"Pivot on ({outcome.row}, {outcome.col}) lost feasibility; the table is ill-conditioned."
            )


class _Solver:
    def __init__(self, options: Optional[SolveOptions] = None) -> None:
        self.options = options or SolveOptions()
        self.rule = get_pivoting_rule(self.options.pivot_rule)

    def _finish(self, table: SimplexTable, history: History) -> LPSimplexSolution:
        result = phase2(table, self.rule, self.options.max_iters - len(history))
        history = history + result.history
        if isinstance(result.outcome, Unbounded):
            logger.info("unbounded along column %s", result.table.col_labels[result.outcome.col])
            minimizer = LPUnboundedMinimizer(result.table, result.outcome.col)
        else:
            logger.info("optimal after %d pivots, minimum %g", len(history), result.table.minimum())
            minimizer = LPBoundedMinimizer(result.table, self.options.enumerate_optima)
        return LPSimplexSolution(minimizer, history)


class LPCanonicalSolver(_Solver):
    """Phase 2 only: the problem must be feasible at x = 0."""

    def solve(self, problem: Union[CanonicalLPProblem, SimplexTable]) -> LPSimplexSolution:
        if isinstance(problem, SimplexTable):
            table = problem
        else:
            table = SimplexTable.from_canonical(problem, self.options.epsilon)
        return self._finish(table, [])


class LPTwoPhaseSolver(_Solver):
    """
    Scheme II, then Phase 1 when the table is infeasible, then Phase 2.
    Raises ``LPInfeasible``; unboundedness is reported through the solution.
    """

    def solve(self, problem: Union[LPProblem, SimplexTable]) -> LPSimplexSolution:
        if isinstance(problem, SimplexTable):
            table = problem
        else:
            table = SimplexTable.from_problem(problem, self.options.epsilon)
        history: History = []
        try:
            table = scheme2(table, history)
            if not table.is_feasible():
                table = phase1(table, self.rule, self.options.max_iters, history)
            # columns skipped while the table was infeasible
            if any(label.type is LabelType.FREE for label in table.col_labels):
                table = remove_free_variables(table, history)
        except LPInfeasible as exc:
            exc.iterations = len(history)
            raise
        except LPUnbounded as exc:
            logger.info("unbounded free variable in column %s", exc.table.col_labels[exc.column])
            return LPSimplexSolution(LPUnboundedMinimizerScheme2(exc.table, exc.column), history)
        return self._finish(table, history)


def simplex_solve(model: LPModel, opts: SolveOptions) -> LPSolution:
    """
    Solve a named-variable LP with the two-phase tableau simplex and map the
    result back onto the model's names. Infeasible, unbounded and over-budget
    problems are reported through ``status`` rather than raised.
    """

    try:
        problem, meta = build_lp_problem(model)
    except ValueError as exc:
        return LPSolution(
            status="infeasible",
            objective_value=None,
            x=None,
            duals=None,
            iterations=0,
            message=str(exc),
        )

    try:
        solution = LPTwoPhaseSolver(opts).solve(problem)
    except LPInfeasible as exc:
        return LPSolution(
            status="infeasible",
            objective_value=None,
            x=None,
            duals=None,
            iterations=exc.iterations,
            message=str(exc),
        )
    except NonConvergence as exc:
        return LPSolution(
            status="iteration_limit",
            objective_value=None,
            x=None,
            duals=None,
            iterations=exc.iterations,
            message="Hit iteration limit.",
        )

    minimizer = solution.minimizer()
    if isinstance(minimizer, LPUnboundedMinimizer):
        return LPSolution(
            status="unbounded",
            objective_value=None,
            x=_reconstruct_original_solution(meta, minimizer.minimizer()),
            ray=_reconstruct_direction(meta, minimizer.v()),
            duals=None,
            iterations=solution.iterations,
            message="Unbounded.",
        )

    objective_value = meta["sense_factor"] * solution.minimum() + meta["objective_constant"]
    alternates = [_reconstruct_original_solution(meta, x) for x in minimizer.minimizers()[1:]]
    return LPSolution(
        status="optimal",
        objective_value=float(objective_value),
        x=_reconstruct_original_solution(meta, minimizer.minimizer()),
        alternate_optima=alternates or None,
        duals=_map_duals(meta, minimizer, opts),
        iterations=solution.iterations,
        message="",
    )


def _clean(value: float) -> float:
    value = float(value)
    return 0.0 if abs(value) < 1e-12 else value


def _reconstruct_original_solution(meta: Dict[str, Any], x: np.ndarray) -> Dict[str, float]:
    return {
        name: _clean(meta["offsets"][name] + x[idx])
        for idx, name in enumerate(meta["original_names"])
    }


def _reconstruct_direction(meta: Dict[str, Any], v: np.ndarray) -> Dict[str, float]:
    return {name: _clean(v[idx]) for idx, name in enumerate(meta["original_names"])}


def _map_duals(meta: Dict[str, Any], minimizer: LPBoundedMinimizer, opts: SolveOptions) -> Optional[Dict[str, float]]:
    """Sensitivity of the model's objective to each constraint's right-hand side."""
    if not opts.return_duals:
        return None
    u, w = minimizer.multipliers()
    sense = meta["sense_factor"]
    result: Dict[str, float] = {}
    for idx, name in enumerate(meta["inequality_names"]):
        result[name] = _clean(sense * meta["inequality_signs"][idx] * u[idx])
    for idx, name in enumerate(meta["equality_names"]):
        result[name] = _clean(sense * w[idx])
    return result or None


