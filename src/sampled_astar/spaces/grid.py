"""Define a 2D occupancy-grid state space searchable with 4- or 8-connected moves."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from sampled_astar.planning.interfaces import HeuristicModel, Model, Sampler
from sampled_astar.spaces.discretization import GridCell


class GridMove(NamedTuple):
    """A move between grid cells, given as offsets along the x and y axes."""

    dx: int
    dy: int


NO_MOVE = GridMove(0, 0)

FOUR_CONNECTED_MOVES = (GridMove(1, 0), GridMove(0, 1), GridMove(-1, 0), GridMove(0, -1))

EIGHT_CONNECTED_MOVES = (
    *FOUR_CONNECTED_MOVES,
    GridMove(1, 1),
    GridMove(-1, 1),
    GridMove(-1, -1),
    GridMove(1, -1),
)

SQRT_2 = float(np.sqrt(2.0))


@dataclass(frozen=True)
class GridState:
    """An (x, y) cell in a 2D occupancy grid."""

    x: int
    y: int

    def discretization_key(self) -> GridCell:
        """Return the grid cell of the state (grid states are their own cells)."""
        return GridCell(row=self.y, col=self.x)

    def manhattan_distance(self, other: GridState) -> int:
        """Compute the number of 4-connected moves between two cells, ignoring obstacles."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def octile_distance(self, other: GridState) -> float:
        """Compute the cost of the cheapest 8-connected path between cells, ignoring obstacles."""
        dx = abs(self.x - other.x)
        dy = abs(self.y - other.y)
        return max(dx, dy) + (SQRT_2 - 1.0) * min(dx, dy)


class GridModel(HeuristicModel[GridState, GridMove]):
    """Model of moving between the free cells of a 2D occupancy grid."""

    def __init__(self, occupancy_mask: np.ndarray, connectivity: int = 4) -> None:
        """Initialize the model from an occupancy mask and a grid connectivity.

        :param occupancy_mask: Boolean array of shape (height, width); True marks occupied cells
        :param connectivity: Number of neighbors reachable from each cell (4 or 8)
        """
        if connectivity not in (4, 8):
            raise ValueError(f"Grid connectivity must be 4 or 8, got {connectivity}.")
        if occupancy_mask.ndim != 2:
            raise ValueError(f"Expected a 2D occupancy mask, got shape {occupancy_mask.shape}.")

        self.occupancy_mask = occupancy_mask.astype(bool)
        self.connectivity = connectivity

    @classmethod
    def from_obstacles(
        cls,
        width: int,
        height: int,
        obstacles: Iterable[tuple[int, int]] = (),
        connectivity: int = 4,
    ) -> GridModel:
        """Construct a grid model from its dimensions and a collection of occupied (x, y) cells."""
        occupancy_mask = np.zeros((height, width), dtype=bool)
        for x, y in obstacles:
            occupancy_mask[y, x] = True
        return GridModel(occupancy_mask, connectivity)

    @property
    def width(self) -> int:
        """Retrieve the width (in cells) of the grid."""
        return int(self.occupancy_mask.shape[1])

    @property
    def height(self) -> int:
        """Retrieve the height (in cells) of the grid."""
        return int(self.occupancy_mask.shape[0])

    @property
    def moves(self) -> tuple[GridMove, ...]:
        """Retrieve the moves available from every cell under the model's connectivity."""
        return FOUR_CONNECTED_MOVES if self.connectivity == 4 else EIGHT_CONNECTED_MOVES

    def is_free(self, state: GridState) -> bool:
        """Check whether the given cell is inside the grid and unoccupied."""
        in_bounds = 0 <= state.x < self.width and 0 <= state.y < self.height
        return in_bounds and not self.occupancy_mask[state.y, state.x]

    def transition(self, state: GridState, control: GridMove) -> GridState | None:
        """Move to the neighboring cell, or return None if that cell isn't free."""
        child = GridState(state.x + control.dx, state.y + control.dy)
        return child if self.is_free(child) else None

    def cost(self, from_state: GridState, to_state: GridState) -> float:
        """Compute the Euclidean length of the move between two cells."""
        return float(np.hypot(to_state.x - from_state.x, to_state.y - from_state.y))

    def heuristic(self, state: GridState, goal: GridState) -> float:
        """Estimate cost-to-go using the obstacle-free distance under the grid's connectivity."""
        if self.connectivity == 4:
            return float(state.manhattan_distance(goal))
        return state.octile_distance(goal)

    def converge(self, state: GridState, goal: GridState) -> bool:
        """Check whether the given cell is the goal cell."""
        return state == goal

    def default_control(self) -> GridMove:
        """Return the move that stays in place."""
        return NO_MOVE


class GridSampler(Sampler[GridState, GridMove]):
    """Sampler proposing every move allowed by a grid model's connectivity."""

    def sample(self, model: Model[GridState, GridMove], state: GridState) -> list[GridMove]:
        """Return all moves of the grid model (the model rejects moves into blocked cells)."""
        if not isinstance(model, GridModel):
            raise TypeError(f"GridSampler requires a GridModel, got {type(model).__name__}.")
        return list(model.moves)
