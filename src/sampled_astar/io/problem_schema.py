"""Define Pydantic models for validating planning problem YAML configuration files.

Example usage:
    from sampled_astar.io.problem_schema import load_problem_config

    config = load_problem_config(Path("problem.yaml"))  # Raises ValidationError on issues
    problem = config.build()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal, NamedTuple, Optional, Tuple, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator
from typing_extensions import Annotated

from sampled_astar.io.yaml_utils import load_yaml_mapping
from sampled_astar.math import RealRange
from sampled_astar.planning.interfaces import HeuristicModel, Sampler
from sampled_astar.spaces.discretization import (
    DiscreteAngles,
    DiscreteGrid2D,
    DiscreteSE2Space,
    GridCell,
)
from sampled_astar.spaces.grid import GridModel, GridSampler, GridState
from sampled_astar.spaces.unicycle import (
    MotionPrimitiveSampler,
    RandomVelocitySampler,
    UnicycleModel,
)

XY = Tuple[int, int]
"""A two-tuple of integers representing an (x, y) grid cell."""

XY_YAW = Tuple[float, float, float]
"""A three-tuple of floats representing an SE(2) pose (x, y, yaw) (radians)."""


class PlanningProblem(NamedTuple):
    """Everything an optimizer needs to solve a planning problem."""

    model: HeuristicModel
    sampler: Sampler
    start: Any
    goal: Any

    def model_args(self) -> tuple[HeuristicModel, Any, Any, Sampler]:
        """Retrieve the (model, start, goal, sampler) arguments expected by optimizers."""
        return self.model, self.start, self.goal, self.sampler


# =============================================================================
# Grid Problems
# =============================================================================


class GridProblemConfig(BaseModel):
    """Schema for a planning problem on a 2D occupancy grid."""

    model_config = ConfigDict(extra="forbid")

    space: Literal["grid"] = "grid"
    width: int = Field(gt=0, description="Grid width (cells)")
    height: int = Field(gt=0, description="Grid height (cells)")
    connectivity: Literal[4, 8] = 4
    obstacles: List[XY] = Field(default_factory=list, description="Occupied (x, y) cells")
    start: XY
    goal: XY

    @model_validator(mode="after")
    def validate_cells(self) -> GridProblemConfig:
        """Verify that all cells are within the grid and that start and goal are free."""
        for name, cell in [("start", self.start), ("goal", self.goal)] + [
            ("obstacle", obstacle) for obstacle in self.obstacles
        ]:
            x, y = cell
            if not (0 <= x < self.width and 0 <= y < self.height):
                raise ValueError(
                    f"The {name} cell {cell} lies outside the {self.width}x{self.height} grid.",
                )

        blocked = set(self.obstacles)
        if self.start in blocked:
            raise ValueError(f"The start cell {self.start} is occupied by an obstacle.")
        if self.goal in blocked:
            raise ValueError(f"The goal cell {self.goal} is occupied by an obstacle.")

        return self

    def build(self) -> PlanningProblem:
        """Construct the grid model, sampler, start, and goal described by the config."""
        model = GridModel.from_obstacles(self.width, self.height, self.obstacles, self.connectivity)
        return PlanningProblem(model, GridSampler(), GridState(*self.start), GridState(*self.goal))


# =============================================================================
# Unicycle Problems
# =============================================================================


class BoundsConfig(BaseModel):
    """Schema for an axis-aligned rectangle on the x-y plane."""

    model_config = ConfigDict(extra="forbid")

    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @model_validator(mode="after")
    def validate_extent(self) -> BoundsConfig:
        """Verify that the bounds enclose a non-empty area."""
        if self.x_max <= self.x_min or self.y_max <= self.y_min:
            raise ValueError(f"Bounds must enclose a non-empty area, got {self.model_dump()}.")
        return self

    def contains(self, x: float, y: float) -> bool:
        """Check whether the given point lies within the bounds."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


class UnicycleProblemConfig(BaseModel):
    """Schema for a planning problem over continuous poses with sampled velocity commands."""

    model_config = ConfigDict(extra="forbid")

    space: Literal["unicycle"]
    bounds: BoundsConfig
    resolution_m: float = Field(gt=0, description="Size of discretization cells (meters)")
    num_headings: int = Field(default=8, ge=1, description="Number of discrete heading bins")
    obstacles: List[XY] = Field(default_factory=list, description="Occupied (col, row) cells")
    linear_velocity_m_s: Tuple[float, float]
    angular_velocity_rad_s: Tuple[float, float]
    duration_s: float = Field(gt=0, description="Duration each velocity command is held")
    sampler: Literal["primitives", "random"] = "primitives"
    num_samples: int = Field(default=8, ge=1, description="Commands per expansion (random)")
    goal_tolerance_m: float = Field(default=0.25, gt=0)
    heading_tolerance_rad: Optional[float] = Field(default=None, gt=0)
    seed: Optional[int] = None
    start: XY_YAW
    goal: XY_YAW

    @model_validator(mode="after")
    def validate_poses(self) -> UnicycleProblemConfig:
        """Verify that poses, obstacles, and velocity ranges are consistent with the bounds."""
        grid = self.make_grid()
        for col, row in self.obstacles:
            if not grid.is_valid_cell(GridCell(row, col)):
                raise ValueError(
                    f"The obstacle cell {(col, row)} lies outside the planning bounds.",
                )

        blocked = set(self.obstacles)
        for name, pose in [("start", self.start), ("goal", self.goal)]:
            cell = grid.world_to_cell(pose[0], pose[1])
            if not (self.bounds.contains(pose[0], pose[1]) and grid.is_valid_cell(cell)):
                raise ValueError(f"The {name} pose {pose} lies outside the planning bounds.")
            if (cell.col, cell.row) in blocked:
                raise ValueError(f"The {name} pose {pose} lies in an obstacle cell.")

        for name, (low, high) in [
            ("linear_velocity_m_s", self.linear_velocity_m_s),
            ("angular_velocity_rad_s", self.angular_velocity_rad_s),
        ]:
            if high < low:
                raise ValueError(f"Invalid range for {name}: high ({high}) < low ({low}).")

        return self

    def make_grid(self) -> DiscreteGrid2D:
        """Construct the discrete grid covering the planning bounds."""
        return DiscreteGrid2D.from_bounds(
            self.resolution_m,
            x_min=self.bounds.x_min,
            y_min=self.bounds.y_min,
            x_max=self.bounds.x_max,
            y_max=self.bounds.y_max,
        )

    def build(self) -> PlanningProblem:
        """Construct the unicycle model, sampler, start, and goal described by the config."""
        grid = self.make_grid()
        space = DiscreteSE2Space(grid=grid, headings=DiscreteAngles(self.num_headings))

        occupancy_mask = np.zeros((grid.height_cells, grid.width_cells), dtype=bool)
        for col, row in self.obstacles:
            occupancy_mask[row, col] = True

        model = UnicycleModel(
            space,
            occupancy_mask=occupancy_mask,
            goal_tolerance_m=self.goal_tolerance_m,
            heading_tolerance_rad=self.heading_tolerance_rad,
        )

        linear_range = RealRange.from_tuple(self.linear_velocity_m_s)
        angular_range = RealRange.from_tuple(self.angular_velocity_rad_s)
        sampler: Sampler
        if self.sampler == "random":
            sampler = RandomVelocitySampler(
                linear_range,
                angular_range,
                self.duration_s,
                num_samples=self.num_samples,
                rng=np.random.default_rng(self.seed),
            )
        else:
            sampler = MotionPrimitiveSampler(linear_range, angular_range, self.duration_s)

        start = model.make_state(*self.start)
        goal = model.make_state(*self.goal)
        return PlanningProblem(model, sampler, start, goal)


ProblemConfig = Annotated[
    Union[GridProblemConfig, UnicycleProblemConfig],
    Field(discriminator="space"),
]
"""A planning problem config of any supported state space, selected by its `space` key."""


class ProblemConfigFile(RootModel[ProblemConfig]):
    """Root schema for a YAML file describing a single planning problem."""


def load_problem_config(yaml_path: Path) -> GridProblemConfig | UnicycleProblemConfig:
    """Load and validate a planning problem config from a YAML file.

    Files without a `space` key are treated as grid problems.

    :param yaml_path: Path to the YAML file describing the problem
    :return: Validated problem config
    :raises ValidationError: If the file's contents don't match any problem schema
    """
    yaml_data = load_yaml_mapping(yaml_path)
    yaml_data.setdefault("space", "grid")
    return ProblemConfigFile.model_validate(yaml_data).root
