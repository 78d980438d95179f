"""Define a continuous SE(2) state space for unicycle-like robots with sampled velocity controls.

States are continuous (x, y, yaw) poses; duplicate detection buckets poses into the cells of a
discrete SE(2) space (a grid of positions times a set of evenly-spaced headings).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from sampled_astar.math import RealRange, angle_difference_rad, normalize_angle
from sampled_astar.planning.interfaces import HeuristicModel, Model, Sampler
from sampled_astar.spaces.discretization import DiscreteSE2, DiscreteSE2Space

MIN_ANGULAR_SPEED_RAD_S = 1e-9
"""Angular speeds with smaller magnitudes are integrated as straight-line motion."""


class VelocityControl(NamedTuple):
    """A constant (linear, angular) velocity command held for a fixed duration."""

    linear_m_s: float
    angular_rad_s: float
    duration_s: float


NO_OP_CONTROL = VelocityControl(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class UnicycleState:
    """A continuous pose on the plane, bucketed into a discrete SE(2) space for search."""

    x: float
    y: float
    yaw_rad: float
    space: DiscreteSE2Space = field(compare=False, repr=False)

    def discretization_key(self) -> DiscreteSE2:
        """Return the discrete (cell, heading) indices containing the pose."""
        return self.space.discretize(self.x, self.y, self.yaw_rad)

    def distance_to(self, other: UnicycleState) -> float:
        """Compute the Euclidean distance (meters) between the positions of two states."""
        return float(np.hypot(other.x - self.x, other.y - self.y))


def integrate_unicycle(
    x: float,
    y: float,
    yaw_rad: float,
    control: VelocityControl,
    time_s: float,
) -> tuple[float, float, float]:
    """Compute the exact pose reached by holding a velocity command for the given time.

    :return: Resulting (x, y, yaw) pose, with yaw normalized into [-pi, pi]
    """
    v = control.linear_m_s
    w = control.angular_rad_s
    new_yaw = yaw_rad + w * time_s

    if abs(w) < MIN_ANGULAR_SPEED_RAD_S:
        new_x = x + v * np.cos(yaw_rad) * time_s
        new_y = y + v * np.sin(yaw_rad) * time_s
    else:
        radius = v / w
        new_x = x + radius * (np.sin(new_yaw) - np.sin(yaw_rad))
        new_y = y - radius * (np.cos(new_yaw) - np.cos(yaw_rad))

    return float(new_x), float(new_y), normalize_angle(new_yaw)


class UnicycleModel(HeuristicModel[UnicycleState, VelocityControl]):
    """Model of a unicycle moving through the free cells of a discrete SE(2) space."""

    def __init__(
        self,
        space: DiscreteSE2Space,
        occupancy_mask: np.ndarray | None = None,
        goal_tolerance_m: float = 0.25,
        heading_tolerance_rad: float | None = None,
        num_collision_checks: int = 8,
    ) -> None:
        """Initialize the unicycle model.

        :param space: Discrete SE(2) space bounding the workspace and bucketing states
        :param occupancy_mask: Optional boolean (height, width) array over the space's grid
        :param goal_tolerance_m: Distance (meters) within which a state reaches the goal
        :param heading_tolerance_rad: Optional heading tolerance (radians); None ignores heading
        :param num_collision_checks: Number of poses checked along each motion
        """
        grid = space.grid
        if occupancy_mask is None:
            occupancy_mask = np.zeros((grid.height_cells, grid.width_cells), dtype=bool)
        if occupancy_mask.shape != (grid.height_cells, grid.width_cells):
            raise ValueError(
                f"Occupancy mask shape {occupancy_mask.shape} doesn't match the grid "
                f"({grid.height_cells}, {grid.width_cells}).",
            )

        self.space = space
        self.occupancy_mask = occupancy_mask.astype(bool)
        self.goal_tolerance_m = goal_tolerance_m
        self.heading_tolerance_rad = heading_tolerance_rad
        self.num_collision_checks = num_collision_checks

    def make_state(self, x: float, y: float, yaw_rad: float) -> UnicycleState:
        """Construct a state bucketed by the model's discrete space."""
        return UnicycleState(x, y, normalize_angle(yaw_rad), self.space)

    def is_free(self, x: float, y: float) -> bool:
        """Check whether the given world-frame position lies in a free cell of the grid."""
        cell = self.space.grid.world_to_cell(x, y)
        return self.space.grid.is_valid_cell(cell) and not self.occupancy_mask[cell.row, cell.col]

    def is_applicable(self, state: UnicycleState, control: VelocityControl) -> bool:
        """Reject commands that don't move the robot forward in time."""
        return control.duration_s > 0.0

    def transition(self, state: UnicycleState, control: VelocityControl) -> UnicycleState | None:
        """Integrate the command from the state, or return None if the motion collides."""
        for fraction in np.linspace(0.0, 1.0, num=self.num_collision_checks + 1)[1:]:
            x, y, _ = integrate_unicycle(
                state.x,
                state.y,
                state.yaw_rad,
                control,
                time_s=fraction * control.duration_s,
            )
            if not self.is_free(x, y):
                return None

        x, y, yaw_rad = integrate_unicycle(
            state.x,
            state.y,
            state.yaw_rad,
            control,
            time_s=control.duration_s,
        )
        return self.make_state(x, y, yaw_rad)

    def cost(self, from_state: UnicycleState, to_state: UnicycleState) -> float:
        """Compute the straight-line distance (meters) between the two states."""
        return from_state.distance_to(to_state)

    def heuristic(self, state: UnicycleState, goal: UnicycleState) -> float:
        """Estimate cost-to-go as the distance remaining beyond the goal tolerance."""
        return max(0.0, state.distance_to(goal) - self.goal_tolerance_m)

    def converge(self, state: UnicycleState, goal: UnicycleState) -> bool:
        """Check whether the state is within tolerance of the goal."""
        if state.distance_to(goal) > self.goal_tolerance_m:
            return False
        if self.heading_tolerance_rad is None:
            return True
        return abs(angle_difference_rad(state.yaw_rad, goal.yaw_rad)) <= self.heading_tolerance_rad

    def default_control(self) -> VelocityControl:
        """Return the command that holds the robot still."""
        return NO_OP_CONTROL


class MotionPrimitiveSampler(Sampler[UnicycleState, VelocityControl]):
    """Sampler proposing a fixed lattice of velocity commands from every state."""

    def __init__(
        self,
        linear_range: RealRange,
        angular_range: RealRange,
        duration_s: float,
        num_linear: int = 2,
        num_angular: int = 3,
    ) -> None:
        """Initialize the lattice of commands as evenly-spaced values over each range."""
        self.primitives = [
            VelocityControl(v, w, duration_s)
            for v in linear_range.linspace(num_linear)
            for w in angular_range.linspace(num_angular)
        ]

    def sample(
        self,
        model: Model[UnicycleState, VelocityControl],
        state: UnicycleState,
    ) -> list[VelocityControl]:
        """Return the full lattice of velocity commands."""
        return list(self.primitives)


class RandomVelocitySampler(Sampler[UnicycleState, VelocityControl]):
    """Sampler drawing velocity commands uniformly at random from bounded ranges."""

    def __init__(
        self,
        linear_range: RealRange,
        angular_range: RealRange,
        duration_s: float,
        num_samples: int = 8,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Initialize the sampler.

        :param linear_range: Range (m/s) of sampled linear velocities
        :param angular_range: Range (rad/s) of sampled angular velocities
        :param duration_s: Duration (seconds) each sampled command is held
        :param num_samples: Number of commands drawn per expanded state
        :param rng: Optional NumPy random number generator; defaults to np.random.default_rng()
        """
        self.linear_range = linear_range
        self.angular_range = angular_range
        self.duration_s = duration_s
        self.num_samples = num_samples
        self.rng = np.random.default_rng() if rng is None else rng

    def sample(
        self,
        model: Model[UnicycleState, VelocityControl],
        state: UnicycleState,
    ) -> list[VelocityControl]:
        """Draw a fresh batch of random velocity commands."""
        return [
            VelocityControl(
                self.linear_range.sample(self.rng),
                self.angular_range.sample(self.rng),
                self.duration_s,
            )
            for _ in range(self.num_samples)
        ]
