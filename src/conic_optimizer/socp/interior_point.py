"""
Primal-dual interior point method for the dual SOCP problem.

See Andreas Antoniou, Wu-Sheng Lu, "Practical Optimization: Algorithms and
Engineering Applications", Section 14.8.2. The starting point follows SDPT3.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..errors import NumericalSingularity
from ..schemas import InteriorPointOptions, SOCPModel, SOCPSolution
from .problem import SOCPDualProblem

logger = logging.getLogger(__name__)

STEP_FRACTION = 0.75


def _frozen(values) -> np.ndarray:
    array = np.array(values, dtype=float)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class PrimalDualSolution:
    """One iterate ``(x, s, y)``; never modified once built."""

    x: np.ndarray
    s: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "x", _frozen(self.x))
        object.__setattr__(self, "s", _frozen(self.s))
        object.__setattr__(self, "y", _frozen(self.y))

    def duality_measure(self, q: int) -> float:
        return float(self.x @ self.s) / q


def arrow_matrix(v: np.ndarray, slices: Sequence[slice]) -> np.ndarray:
    """
    Block diagonal matrix of the cone blocks of ``v``. Each block has the block
    vector in its first row and column and the leading entry on the rest of the
    diagonal, so that ``arrow(x) s`` is the Jordan product of ``x`` and ``s``.
    """

    N = v.size
    result = np.zeros((N, N))
    for sl in slices:
        block = v[sl]
        lo = sl.start
        n = block.size
        result[lo, lo : lo + n] = block
        result[lo : lo + n, lo] = block
        idx = np.arange(lo + 1, lo + n)
        result[idx, idx] = block[0]
    return result


def _block_step(x: np.ndarray, dx: np.ndarray) -> float:
    x1, xr = x[0], x[1:]
    dx1, dxr = dx[0], dx[1:]

    # ||xr + a dxr||^2 = (x1 + a dx1)^2  <=>  p0 a^2 + p1 a + p2 = 0
    p0 = dx1 * dx1 - dxr @ dxr
    p1 = 2.0 * (x1 * dx1 - xr @ dxr)
    p2 = x1 * x1 - xr @ xr

    alpha1 = 1.0
    if dx1 < 0:
        alpha1 = 0.99 * (x1 / (-dx1))

    if p0 == 0.0:
        alpha2 = 1.0 if p1 >= 0 else -p2 / p1
        return min(alpha1, alpha2)

    discriminant = p1 * p1 - 4.0 * p0 * p2
    if discriminant < 0:
        # the boundary is never crossed
        return min(alpha1, 1.0)
    root = np.sqrt(discriminant)
    a1 = (-p1 + root) / (2.0 * p0)
    a2 = (-p1 - root) / (2.0 * p0)
    rt1, rt2 = min(a1, a2), max(a1, a2)

    alpha2 = rt2
    if p0 >= 0:
        if rt1 > 0:
            alpha2 = rt1
        if rt2 < 0:
            alpha2 = 1.0
    return min(alpha1, alpha2)


def cone_step_length(x: np.ndarray, dx: np.ndarray, slices: Sequence[slice]) -> float:
    """The largest step along ``dx`` keeping every block of ``x`` in its cone, over all blocks."""
    return min(_block_step(x[sl], dx[sl]) for sl in slices)


class InteriorPointSolution:
    """
    The iterative state of one solve. ``step()`` replaces the current iterate
    with a new one; ``search()`` steps until convergence or the budget.
    """

    def __init__(self, problem: SOCPDualProblem, sigma: float, epsilon: float, max_iterations: int) -> None:
        self.problem = problem
        self.sigma = sigma
        self.epsilon = epsilon
        self.max_iterations = max_iterations
        self._A = problem.A
        self._At = problem.A.T
        self._soln: Optional[PrimalDualSolution] = None
        self._iterations = 0
        self.history: List[float] = []

    @property
    def iterations(self) -> int:
        return self._iterations

    def minimizer(self) -> PrimalDualSolution:
        if self._soln is None:
            raise ValueError("No iterate yet: call search() or set_initial() first.")
        return self._soln

    def set_initial(self, initial: PrimalDualSolution) -> None:
        N, m = self.problem.N, self.problem.m
        if initial.x.shape != (N,) or initial.s.shape != (N,) or initial.y.shape != (m,):
            raise ValueError(f"Initial point needs x and s of size {N} and y of size {m}.")
        self._soln = initial

    @property
    def duality_measure(self) -> float:
        return self.minimizer().duality_measure(self.problem.q)

    @property
    def converged(self) -> bool:
        return self._soln is not None and self.duality_measure < self.epsilon

    def default_initial(self) -> PrimalDualSolution:
        problem = self.problem
        b = problem.b
        e = np.zeros(problem.N)
        for sl in problem.block_slices:
            e[sl.start] = 1.0

        xi = 1.0
        for i, sl in enumerate(problem.block_slices):
            for j in range(min(problem.n(i), problem.m)):
                term = (1.0 + b[j]) / (1.0 + np.linalg.norm(self._A[:, sl.start + j]))
                xi = max(xi, term)

        norm_max = np.linalg.norm(problem.c)
        for j in range(self._At.shape[1]):
            norm_max = max(norm_max, np.linalg.norm(self._At[:, j]))
        eta = max(1.0, (1.0 + norm_max) / np.sqrt(problem.N))

        x = xi * e
        s = eta * e
        # A' y + s = c
        y = np.linalg.lstsq(self._At, problem.c - s, rcond=None)[0]
        return PrimalDualSolution(x, s, y)

    def search(self, initial: Optional[PrimalDualSolution] = None) -> PrimalDualSolution:
        self.set_initial(initial if initial is not None else self.default_initial())
        while self._iterations < self.max_iterations:
            if not self.step():
                break
            self._iterations += 1

        if self.converged:
            logger.info("converged after %d iterations, mu = %.3e", self._iterations, self.duality_measure)
        else:
            logger.warning(
                "no convergence after %d iterations, mu = %.3e", self._iterations, self.duality_measure
            )
        return self.minimizer()

    def step(self) -> bool:
        """Take one Newton step; return False once the duality measure is below epsilon."""
        soln = self.minimizer()
        problem = self.problem
        A, At = self._A, self._At
        x, s, y = soln.x, soln.s, soln.y

        mu = soln.duality_measure(problem.q)
        if mu < self.epsilon:
            return False

        X = arrow_matrix(x, problem.block_slices)
        S = arrow_matrix(s, problem.block_slices)

        rp = problem.b - A @ x
        rd = problem.c - s - At @ y
        rc = self.sigma * mu * np.ones(problem.N) - X @ s

        try:
            S_inv = np.linalg.inv(S)
        except np.linalg.LinAlgError as exc:
            raise NumericalSingularity("The arrow matrix of s is singular.") from exc
        # the Schur complement
        M = A @ S_inv @ X @ At
        try:
            dy = np.linalg.solve(M, rp + A @ S_inv @ (X @ rd - rc))
        except np.linalg.LinAlgError as exc:
            raise NumericalSingularity("The Schur complement A S^-1 X A' is singular.") from exc
        ds = rd - At @ dy
        dx = S_inv @ rc - S_inv @ X @ ds

        slices = problem.block_slices
        alpha_x = cone_step_length(x, dx, slices)
        alpha_s = cone_step_length(s, ds, slices)
        alpha_t = cone_step_length(problem.c - At @ y, -(At @ dy), slices)
        alpha = STEP_FRACTION * min(alpha_x, alpha_s, alpha_t)

        self._soln = PrimalDualSolution(x + alpha * dx, s + alpha * ds, y + alpha * dy)
        self.history.append(mu)
        logger.debug("step %d: mu = %.3e, alpha = %.4f", self._iterations, mu, alpha)
        return True


class PrimalDualInteriorPoint:
    def __init__(self, sigma: float = 1e-5, epsilon: float = 1e-8, max_iterations: int = 100) -> None:
        if not 0.0 <= sigma < 1.0:
            raise ValueError("sigma must lie in [0, 1).")
        if epsilon <= 0:
            raise ValueError("epsilon must be positive.")
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1.")
        self.sigma = sigma
        self.epsilon = epsilon
        self.max_iterations = max_iterations

    @classmethod
    def from_options(cls, options: InteriorPointOptions) -> "PrimalDualInteriorPoint":
        return cls(options.sigma, options.epsilon, options.max_iterations)

    def solve(self, problem: SOCPDualProblem) -> InteriorPointSolution:
        return InteriorPointSolution(problem, self.sigma, self.epsilon, self.max_iterations)


def socp_solve(model: SOCPModel, opts: InteriorPointOptions) -> SOCPSolution:
    """
    Solve ``max b'y s.t. A_i' y + s_i = c_i, s_i in K_i``. Numerical failures
    propagate; running out of iterations is reported as ``iteration_limit``.
    """

    problem = SOCPDualProblem(model.b, [block.A for block in model.blocks], [block.c for block in model.blocks])
    solution = PrimalDualInteriorPoint.from_options(opts).solve(problem)
    final = solution.search()
    converged = solution.converged
    return SOCPSolution(
        status="optimal" if converged else "iteration_limit",
        objective_value=problem.objective(final.y),
        x=final.x.tolist(),
        s=final.s.tolist(),
        y=final.y.tolist(),
        duality_measure=solution.duality_measure,
        iterations=solution.iterations,
        message="" if converged else f"Duality measure above {opts.epsilon:g} after {solution.iterations} iterations.",
    )
