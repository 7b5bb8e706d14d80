import numpy as np
import pytest

from conic_optimizer.schemas import ConeBlock, SOCPModel
from conic_optimizer.socp.problem import SOCPDualProblem


def make_problem() -> SOCPDualProblem:
    return SOCPDualProblem(
        b=[1.0, 0.0],
        A=[[[1.0], [0.0]], [[0.0, -1.0, 0.0], [0.0, 0.0, -1.0]]],
        c=[[2.0], [1.0, 0.0, 0.0]],
    )


def test_blocks_are_stacked():
    problem = make_problem()

    assert problem.m == 2
    assert problem.q == 2
    assert [problem.n(i) for i in range(problem.q)] == [1, 3]
    assert problem.N == 4
    assert problem.A.shape == (2, 4)
    assert np.array_equal(problem.A[:, 1:], problem.A_block(1))
    assert np.array_equal(problem.c, [2.0, 1.0, 0.0, 0.0])
    assert problem.block_slices == (slice(0, 1), slice(1, 4))


def test_data_is_read_only():
    problem = make_problem()

    with pytest.raises(ValueError):
        problem.c[0] = 3.0
    with pytest.raises(ValueError):
        problem.A_block(0)[0, 0] = 3.0


def test_objective_and_slack():
    problem = make_problem()
    y = np.array([0.5, 0.25])

    assert problem.objective(y) == pytest.approx(0.5)
    assert problem.slack(y) == pytest.approx([1.5, 1.0, 0.5, 0.25])
    assert problem.is_in_cone(problem.slack(y))
    assert not problem.is_in_cone(problem.slack([3.0, 0.0]))


@pytest.mark.parametrize(
    "A, c",
    [
        ([[[1.0, 2.0], [0.0, 1.0]]], [[1.0]]),
        ([[[1.0], [0.0], [2.0]]], [[1.0]]),
        ([[[1.0], [0.0]]], [[1.0], [2.0]]),
        ([], []),
    ],
)
def test_shape_errors(A, c):
    with pytest.raises(ValueError):
        SOCPDualProblem(b=[1.0, 1.0], A=A, c=c)


def test_model_validation():
    with pytest.raises(ValueError):
        ConeBlock(A=[[1.0, 2.0], [1.0]], c=[1.0, 2.0])
    with pytest.raises(ValueError):
        ConeBlock(A=[[1.0, 2.0]], c=[1.0])
    with pytest.raises(ValueError):
        SOCPModel(b=[1.0, 1.0], blocks=[ConeBlock(A=[[1.0]], c=[1.0])])
    with pytest.raises(ValueError):
        SOCPModel(b=[1.0], blocks=[])
