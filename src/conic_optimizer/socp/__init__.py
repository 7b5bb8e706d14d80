"""Second-order cone programming: the dual problem and a primal-dual interior point solver."""

from .problem import SOCPDualProblem
from .interior_point import (
    InteriorPointSolution,
    PrimalDualInteriorPoint,
    PrimalDualSolution,
    socp_solve,
)

__all__ = [
    "SOCPDualProblem",
    "PrimalDualSolution",
    "PrimalDualInteriorPoint",
    "InteriorPointSolution",
    "socp_solve",
]
