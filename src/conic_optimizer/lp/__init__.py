"""Linear programming on Ferris-Mangasarian-Wright simplex tables."""

from .problem import LPProblem, CanonicalLPProblem
from .tableau import Label, LabelType, SimplexTable, jordan_exchange
from .pivoting import DantzigRule, SmallestSubscriptRule, get_pivoting_rule
from .solution import (
    LPBoundedMinimizer,
    LPSimplexSolution,
    LPUnboundedMinimizer,
    LPUnboundedMinimizerScheme2,
)
from .simplex import LPCanonicalSolver, LPTwoPhaseSolver, simplex_solve

__all__ = [
    "LPProblem",
    "CanonicalLPProblem",
    "Label",
    "LabelType",
    "SimplexTable",
    "jordan_exchange",
    "SmallestSubscriptRule",
    "DantzigRule",
    "get_pivoting_rule",
    "LPBoundedMinimizer",
    "LPUnboundedMinimizer",
    "LPUnboundedMinimizerScheme2",
    "LPSimplexSolution",
    "LPCanonicalSolver",
    "LPTwoPhaseSolver",
    "simplex_solve",
]
