from pydantic import BaseModel, Field, model_validator
from typing import Literal, List, Dict, Optional

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]


class Variable(BaseModel):
    name: str
    lb: float | None = None
    ub: float | None = None


class LinearTerm(BaseModel):
    var: str
    coef: float


class LinearExpr(BaseModel):
    terms: List[LinearTerm] = Field(default_factory=list)
    constant: float = 0.0


class Constraint(BaseModel):
    name: str
    lhs: LinearExpr
    cmp: Cmp
    rhs: float


class LPModel(BaseModel):
    name: str = "problem"
    sense: Sense
    objective: LinearExpr
    variables: List[Variable]
    constraints: List[Constraint]


class SolveOptions(BaseModel):
    max_iters: int = 10_000
    epsilon: Optional[float] = None
    pivot_rule: Literal["smallest_subscript", "dantzig"] = "smallest_subscript"
    enumerate_optima: bool = True
    return_duals: bool = True


class LPSolution(BaseModel):
    status: Literal["optimal", "infeasible", "unbounded", "iteration_limit"]
    objective_value: Optional[float]
    x: Dict[str, float] | None
    alternate_optima: List[Dict[str, float]] | None = None
    ray: Dict[str, float] | None = None
    duals: Dict[str, float] | None = None
    iterations: int
    message: str = ""


class ConeBlock(BaseModel):
    A: List[List[float]]
    c: List[float]

    @model_validator(mode="after")
    def _check_shape(self) -> "ConeBlock":
        widths = {len(row) for row in self.A}
        if len(widths) > 1:
            raise ValueError("Rows of A must all have the same length.")
        if self.A and widths.pop() != len(self.c):
            raise ValueError("A must have as many columns as c has entries.")
        return self


class SOCPModel(BaseModel):
    name: str = "problem"
    b: List[float]
    blocks: List[ConeBlock]

    @model_validator(mode="after")
    def _check_rows(self) -> "SOCPModel":
        if not self.blocks:
            raise ValueError("At least one cone block is required.")
        for idx, block in enumerate(self.blocks):
            if len(block.A) != len(self.b):
                raise ValueError(f"Block {idx} must have {len(self.b)} rows, found {len(block.A)}.")
        return self


class InteriorPointOptions(BaseModel):
    sigma: float = Field(default=1e-5, ge=0.0, lt=1.0)
    epsilon: float = Field(default=1e-8, gt=0.0)
    max_iterations: int = Field(default=100, ge=1)


class SOCPSolution(BaseModel):
    status: Literal["optimal", "iteration_limit"]
    objective_value: float
    x: List[float]
    s: List[float]
    y: List[float]
    duality_measure: float
    iterations: int
    message: str = ""
