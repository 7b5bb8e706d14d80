import logging

from mcp.server.fastmcp import FastMCP
from .schemas import LPModel, SolveOptions, SOCPModel, InteriorPointOptions
from .lp.simplex import simplex_solve
from .socp.interior_point import socp_solve

mcp = FastMCP("Conic Optimizer")


@mcp.tool()
def solve_lp(model: LPModel, options: SolveOptions | None = None) -> dict:
    "Solve a linear program with the two-phase tableau simplex and return solution dict."
    opts = options or SolveOptions()
    return simplex_solve(model, opts).model_dump()


@mcp.tool()
def solve_socp(model: SOCPModel, options: InteriorPointOptions | None = None) -> dict:
    "Solve a dual second-order cone program (max b'y, c_i - A_i'y in K_i) by primal-dual interior point."
    opts = options or InteriorPointOptions()
    return socp_solve(model, opts).model_dump()


if __name__ == "__main__":
    # Allow: `uv run mcp dev src/conic_optimizer/server.py` or pack as stdio/http via CLI
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    mcp.run()
