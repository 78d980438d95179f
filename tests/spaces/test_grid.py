"""Unit tests for the occupancy-grid state space."""

from __future__ import annotations

import numpy as np
import pytest
from hypothesis import given

from sampled_astar.spaces.discretization import (
    DiscreteAngles,
    DiscreteGrid2D,
    DiscreteSE2Space,
    GridCell,
)
from sampled_astar.spaces.grid import (
    EIGHT_CONNECTED_MOVES,
    FOUR_CONNECTED_MOVES,
    GridModel,
    GridMove,
    GridSampler,
    GridState,
)
from sampled_astar.spaces.unicycle import UnicycleModel

from ..strategies.grid_strategies import GridProblem, grid_problems


@pytest.fixture
def walled_grid() -> GridModel:
    """Create a 3x3 grid whose center cell is occupied."""
    return GridModel.from_obstacles(width=3, height=3, obstacles=[(1, 1)])


def test_from_obstacles_marks_occupied_cells(walled_grid: GridModel) -> None:
    """Verify that obstacles given as (x, y) cells are stored at [y, x] in the occupancy mask."""
    # Arrange/Act - Given a grid built with a single obstacle at (1,1), and one at (2,0)
    grid = GridModel.from_obstacles(width=3, height=2, obstacles=[(2, 0)])

    # Assert - Expect the obstacles in the mask and the correct grid dimensions
    assert walled_grid.occupancy_mask[1, 1]
    assert grid.occupancy_mask[0, 2]
    assert grid.occupancy_mask.sum() == 1
    assert (grid.width, grid.height) == (3, 2)


def test_transition_rejects_blocked_and_out_of_bounds_cells(walled_grid: GridModel) -> None:
    """Verify that moves into obstacles or off the grid are inapplicable."""
    # Arrange - Given a state beside the central obstacle and on the grid's edge
    state = GridState(0, 1)

    # Act - Attempt moves into the obstacle, off the grid, and into a free cell
    into_obstacle = walled_grid.transition(state, GridMove(1, 0))
    off_grid = walled_grid.transition(state, GridMove(-1, 0))
    into_free = walled_grid.transition(state, GridMove(0, 1))

    # Assert - Expect only the move into the free cell to succeed
    assert into_obstacle is None
    assert off_grid is None
    assert into_free == GridState(0, 2)


def test_cost_and_heuristics() -> None:
    """Verify the edge costs and heuristics of 4- and 8-connected grids."""
    # Arrange - Given open 4- and 8-connected grids
    four = GridModel.from_obstacles(width=5, height=5, connectivity=4)
    eight = GridModel.from_obstacles(width=5, height=5, connectivity=8)
    origin = GridState(0, 0)

    # Act/Assert - Expect unit straight moves, sqrt(2) diagonals, and Manhattan/octile estimates
    assert four.cost(origin, GridState(1, 0)) == 1.0
    assert eight.cost(origin, GridState(1, 1)) == pytest.approx(np.sqrt(2))
    assert four.heuristic(origin, GridState(3, 4)) == 7.0
    assert eight.heuristic(origin, GridState(3, 4)) == pytest.approx(4 + 3 * (np.sqrt(2) - 1))


def test_sampler_proposes_moves_by_connectivity() -> None:
    """Verify that the grid sampler proposes all moves allowed by the grid's connectivity."""
    # Arrange - Given 4- and 8-connected grids
    four = GridModel.from_obstacles(width=2, height=2, connectivity=4)
    eight = GridModel.from_obstacles(width=2, height=2, connectivity=8)
    sampler = GridSampler()

    # Act/Assert - Expect the corresponding sets of moves
    assert sampler.sample(four, GridState(0, 0)) == list(FOUR_CONNECTED_MOVES)
    assert sampler.sample(eight, GridState(0, 0)) == list(EIGHT_CONNECTED_MOVES)


def test_invalid_grid_configuration_raises() -> None:
    """Verify that unsupported connectivities and non-2D masks are rejected."""
    # Act/Assert - Expect ValueErrors for a 6-connected grid and a 1D mask
    with pytest.raises(ValueError, match="connectivity"):
        GridModel(np.zeros((2, 2), dtype=bool), connectivity=6)
    with pytest.raises(ValueError, match="2D"):
        GridModel(np.zeros(4, dtype=bool))


def test_sampler_requires_grid_model() -> None:
    """Verify that the grid sampler refuses to propose moves for non-grid models."""
    # Arrange - Given a model of a continuous state space
    grid = DiscreteGrid2D(resolution_m=1.0, width_cells=2, height_cells=2)
    model = UnicycleModel(DiscreteSE2Space(grid=grid, headings=DiscreteAngles(4)))

    # Act/Assert - Expect a TypeError
    with pytest.raises(TypeError):
        GridSampler().sample(model, GridState(0, 0))


@given(grid_problems(connectivity=8))
def test_heuristic_is_consistent(problem: GridProblem) -> None:
    """Verify that the octile heuristic never decreases by more than the cost of a move."""
    # Arrange - Given a random 8-connected grid and a free start cell
    model = problem.model
    state = problem.start

    # Act/Assert - Expect h(s) <= c(s, s') + h(s') for every successor s'
    for move in model.moves:
        child = model.transition(state, move)
        if child is None:
            continue
        bound = model.cost(state, child) + model.heuristic(child, problem.goal)
        assert model.heuristic(state, problem.goal) <= bound + 1e-9


def test_grid_state_keys_are_cells() -> None:
    """Verify that grid states are bucketed into the (row, col) cell they occupy."""
    # Act/Assert - Expect x to map to the column and y to the row
    assert GridState(3, 1).discretization_key() == GridCell(row=1, col=3)
