from __future__ import annotations

from typing import Any, Optional


class OptimizerError(Exception):
    """Base class for every failure surfaced by the solvers."""


class LPInfeasible(OptimizerError):
    def __init__(self, message: str = "Infeasible.", iterations: int = 0) -> None:
        super().__init__(message)
        self.iterations = iterations


class LPUnbounded(OptimizerError):
    """
    The objective can be driven to -inf.

    Carries the column index on which the ratio test found no limiting row and
    the table at that moment, so the ray can be rebuilt by the caller.
    """

    def __init__(self, column: int, table: Any = None, message: str = "Unbounded.") -> None:
        super().__init__(message)
        self.column = column
        self.table = table


class NumericalSingularity(OptimizerError):
    """A required inverse (pivot, Schur complement, cone matrix) is degenerate."""


class NonConvergence(OptimizerError):
    def __init__(self, iterations: int, last: Any = None, message: Optional[str] = None) -> None:
        super().__init__(message or f"No convergence after {iterations} iterations.")
        self.iterations = iterations
        self.last = last
