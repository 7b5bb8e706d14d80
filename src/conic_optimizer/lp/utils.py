import numpy as np
from typing import Dict, Tuple, List, Any

from ..schemas import LPModel
from .problem import LPProblem


def auto_epsilon(*arrays: Any) -> float:
    """
    Guess how small a number must be to count as zero for the given data:
    |max| * sqrt(size) * machine epsilon * 10, taking the largest over the inputs.
    """

    best = 0.0
    for values in arrays:
        values = np.asarray(values, dtype=float).ravel()
        if values.size == 0:
            continue
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            continue
        guess = float(np.max(np.abs(finite))) * np.sqrt(values.size) * np.finfo(float).eps * 10
        best = max(best, guess)
    if best == 0.0:
        best = np.finfo(float).tiny
    return best


def build_lp_problem(model: LPModel) -> Tuple[LPProblem, Dict[str, Any]]:
    """
    Convert a named-variable LP into matrix form ``min c'x, A x >= b, A_eq x = b_eq``.
    Variables with a finite lower bound are shifted to start at zero, variables
    without one are free; upper bounds become extra rows.
    Return the problem and the metadata needed to map results back to names.
    """

    index: Dict[str, int] = {}
    offsets: Dict[str, float] = {}
    free: List[int] = []
    for var in model.variables:
        lb = var.lb
        ub = var.ub
        if lb is not None and np.isneginf(lb):
            lb = None
        if ub is not None and np.isposinf(ub):
            ub = None
        if lb is not None and ub is not None and lb > ub:
            raise ValueError(f"Variable {var.name} has inconsistent bounds (lb {lb} > ub {ub}).")
        if var.name in index:
            raise ValueError(f"Variable '{var.name}' is declared twice.")
        index[var.name] = len(index)
        offsets[var.name] = 0.0 if lb is None else lb
        if lb is None:
            free.append(index[var.name])

    n = len(index)
    c = np.zeros(n)
    objective_constant = model.objective.constant
    for term in model.objective.terms:
        if term.var not in index:
            raise ValueError(f"Objective references unknown variable '{term.var}'.")
        c[index[term.var]] += term.coef
        objective_constant += term.coef * offsets[term.var]

    geq_rows: List[np.ndarray] = []
    geq_rhs: List[float] = []
    geq_names: List[str] = []
    geq_signs: List[float] = []
    eq_rows: List[np.ndarray] = []
    eq_rhs: List[float] = []
    eq_names: List[str] = []

    constraint_specs = [
        (cons.name, [(t.var, t.coef) for t in cons.lhs.terms], cons.lhs.constant, cons.cmp, cons.rhs)
        for cons in model.constraints
    ]
    for var in model.variables:
        if var.ub is not None and not np.isposinf(var.ub):
            constraint_specs.append((f"bound_{var.name}_ub", [(var.name, 1.0)], 0.0, "<=", var.ub))

    for name, terms, constant, cmp, rhs in constraint_specs:
        row = np.zeros(n)
        shift = constant
        for var_name, coef in terms:
            if var_name not in index:
                raise ValueError(f"Constraint '{name}' references unknown variable '{var_name}'.")
            row[index[var_name]] += coef
            shift += coef * offsets[var_name]
        rhs_value = rhs - shift

        if cmp == "==":
            eq_rows.append(row)
            eq_rhs.append(rhs_value)
            eq_names.append(name)
        elif cmp == ">=":
            geq_rows.append(row)
            geq_rhs.append(rhs_value)
            geq_names.append(name)
            geq_signs.append(1.0)
        else:
            geq_rows.append(-row)
            geq_rhs.append(-rhs_value)
            geq_names.append(name)
            geq_signs.append(-1.0)

    sense_factor = -1.0 if model.sense == "max" else 1.0
    problem = LPProblem(
        sense_factor * c,
        A=np.array(geq_rows) if geq_rows else None,
        b=np.array(geq_rhs) if geq_rows else None,
        A_eq=np.array(eq_rows) if eq_rows else None,
        b_eq=np.array(eq_rhs) if eq_rows else None,
        bounds={j: (None, None) for j in free},
    )

    metadata: Dict[str, Any] = {
        "original_names": [var.name for var in model.variables],
        "offsets": offsets,
        "inequality_names": geq_names,
        "inequality_signs": geq_signs,
        "equality_names": eq_names,
        "objective_constant": objective_constant,
        "sense_factor": sense_factor,
    }
    return problem, metadata
