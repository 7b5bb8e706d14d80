import random
from typing import List, Optional, Sequence

from .schemas import LPModel, Variable, Constraint, LinearExpr, LinearTerm, ConeBlock, SOCPModel

_CYCLE = (">=", "==", "<=")


def generate_random_lp(
    num_vars: int,
    num_constraints: int,
    seed: Optional[int] = None,
    num_free: int = 1,
) -> LPModel:
    """
    A feasible, bounded LP built around a hidden point ``x0``.

    Rows cycle through ``>=``, ``==`` and ``<=`` and hold at ``x0`` with some
    slack, so both Scheme II and Phase 1 have work to do. The last ``num_free``
    variables are free with an upper bound and a negative cost; the others are
    non-negative with a positive cost, which keeps the minimum finite.
    """

    rng = random.Random(seed)
    num_free = min(num_free, num_vars)
    x0 = [rng.uniform(1.0, 3.0) for _ in range(num_vars)]
    variables: List[Variable] = []
    costs: List[float] = []
    for i in range(num_vars):
        if i >= num_vars - num_free:
            variables.append(Variable(name=f"x{i}", lb=None, ub=x0[i] + rng.uniform(0.5, 2.0)))
            costs.append(-rng.uniform(0.5, 2.0))
        else:
            variables.append(Variable(name=f"x{i}", lb=0.0))
            costs.append(rng.uniform(1.0, 4.0))

    constraints: List[Constraint] = []
    for j in range(num_constraints):
        coefs = [rng.uniform(-2.0, 5.0) for _ in range(num_vars)]
        value = sum(a * x for a, x in zip(coefs, x0))
        cmp = _CYCLE[j % len(_CYCLE)]
        slack = rng.uniform(0.5, 2.0)
        rhs = {">=": value - slack, "==": value, "<=": value + slack}[cmp]
        constraints.append(
            Constraint(
                name=f"c{j}",
                lhs=LinearExpr(terms=[LinearTerm(var=f"x{i}", coef=a) for i, a in enumerate(coefs)]),
                cmp=cmp,
                rhs=rhs,
            )
        )

    return LPModel(
        name="random-lp",
        sense="min",
        objective=LinearExpr(terms=[LinearTerm(var=f"x{i}", coef=c) for i, c in enumerate(costs)]),
        variables=variables,
        constraints=constraints,
    )


def generate_random_socp(num_rows: int, cone_sizes: Sequence[int], seed: Optional[int] = None) -> SOCPModel:
    """
    A dual SOCP with strictly feasible primal and dual points ``x0`` and ``s0``.

    The first row of every ``A_i`` is ``(1, 0, ..., 0)`` and ``s0_i = (tau, 0, ..., 0)``,
    so ``c_i - s`` lies in the range of ``A'`` for any ``s`` of that shape. The
    default starting point is then dual feasible and the iterates stay so.
    Instances without that structure may stall when the initial dual residual is large.
    """

    if num_rows < 1:
        raise ValueError("An SOCP instance needs at least one row.")
    rng = random.Random(seed)
    y0 = [rng.uniform(-1.0, 1.0) for _ in range(num_rows)]
    b = [0.0] * num_rows
    blocks: List[ConeBlock] = []
    for n in cone_sizes:
        A = [[1.0] + [0.0] * (n - 1)]
        A += [[rng.uniform(-1.0, 1.0) for _ in range(n)] for _ in range(num_rows - 1)]
        tau = rng.uniform(1.0, 2.0)
        x0 = [float(n)] + [rng.uniform(-0.5, 0.5) for _ in range(n - 1)]
        c = [sum(A[r][k] * y0[r] for r in range(num_rows)) + (tau if k == 0 else 0.0) for k in range(n)]
        for r in range(num_rows):
            b[r] += sum(A[r][k] * x0[k] for k in range(n))
        blocks.append(ConeBlock(A=A, c=c))
    return SOCPModel(name="random-socp", b=b, blocks=blocks)
