"""Define classes to discretize continuous planar spaces into cells for duplicate detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from sampled_astar.math import normalize_angle


class GridCell(NamedTuple):
    """A pair of (row, column) indices to a cell in a discrete grid."""

    row: int
    col: int


def homogeneous_matrix_2d(x: float, y: float, yaw_rad: float) -> np.ndarray:
    """Construct the 3x3 homogeneous transformation matrix of a pose on the plane.

    Reference: https://lavalle.pl/planning/node108.html
    """
    cos_yaw = np.cos(yaw_rad)
    sin_yaw = np.sin(yaw_rad)
    return np.array([[cos_yaw, -sin_yaw, x], [sin_yaw, cos_yaw, y], [0, 0, 1]])


class DiscreteGrid2D:
    """A discrete 2D grid of cells on the global x-y plane."""

    def __init__(
        self,
        resolution_m: float,
        width_cells: int,
        height_cells: int,
        origin_xy: tuple[float, float] = (0.0, 0.0),
        origin_yaw_rad: float = 0.0,
    ) -> None:
        """Initialize the 2D grid.

        :param resolution_m: Size of cells in the grid (meters)
        :param width_cells: Grid width in cells (along the grid's x-axis)
        :param height_cells: Grid height in cells (along the grid's y-axis)
        :param origin_xy: World-frame position of the grid's bottom-left corner
        :param origin_yaw_rad: World-frame rotation of the grid (radians)
        """
        if resolution_m <= 0.0:
            raise ValueError(f"Grid resolution must be positive, got {resolution_m}.")

        self.resolution_m = resolution_m
        self.width_cells = width_cells
        self.height_cells = height_cells
        self.origin_xy = origin_xy
        self.origin_yaw_rad = origin_yaw_rad

        # Cache transformation matrices for efficient coordinate conversion
        self._transform_w_g = homogeneous_matrix_2d(*origin_xy, origin_yaw_rad)
        self._transform_g_w = np.linalg.inv(self._transform_w_g)

    @classmethod
    def from_bounds(
        cls,
        resolution_m: float,
        *,
        x_min: float,
        y_min: float,
        x_max: float,
        y_max: float,
    ) -> DiscreteGrid2D:
        """Construct a 2D grid of cells covering the specified area of the x-y plane."""
        return DiscreteGrid2D(
            resolution_m=resolution_m,
            width_cells=int(np.ceil((x_max - x_min) / resolution_m)),
            height_cells=int(np.ceil((y_max - y_min) / resolution_m)),
            origin_xy=(x_min, y_min),
        )

    def local_x_to_col(self, x: float) -> int:
        """Convert a local-frame x-coordinate to the corresponding column index."""
        return int(np.floor(x / self.resolution_m))

    def local_y_to_row(self, y: float) -> int:
        """Convert a local-frame y-coordinate to the corresponding row index."""
        return int(np.floor(y / self.resolution_m))

    def world_to_cell(self, x: float, y: float) -> GridCell:
        """Convert a world-frame (x, y) point to the corresponding grid indices."""
        homogeneous_coord_g = self._transform_g_w @ np.array([x, y, 1.0])
        col = self.local_x_to_col(homogeneous_coord_g[0])
        row = self.local_y_to_row(homogeneous_coord_g[1])
        return GridCell(row, col)

    def cell_to_world(self, cell: GridCell) -> tuple[float, float]:
        """Convert grid cell indices to a world-frame (x, y) position at the cell center."""
        local_x = (cell.col + 0.5) * self.resolution_m
        local_y = (cell.row + 0.5) * self.resolution_m

        homogeneous_world = self._transform_w_g @ np.array([local_x, local_y, 1.0])
        return float(homogeneous_world[0]), float(homogeneous_world[1])

    def is_valid_cell(self, cell: GridCell) -> bool:
        """Check whether the given cell coordinate is within the grid."""
        return 0 <= cell.row < self.height_cells and 0 <= cell.col < self.width_cells


class DiscreteAngles:
    """A discrete space of evenly-spaced angles (radians)."""

    def __init__(self, num_angles: int = 8) -> None:
        """Initialize the discrete space with the number of angles it should contain."""
        if num_angles < 1:
            raise ValueError(f"A discrete angle space needs at least one angle, got {num_angles}.")

        self.num_angles = num_angles
        self.angles_space = np.linspace(0, 2 * np.pi, num=num_angles, endpoint=False)

    def index_to_angle_rad(self, index: int) -> float:
        """Retrieve the angle (radians) with the given index."""
        if index < 0 or index >= self.num_angles:
            raise ValueError(f"Invalid angle index: {index} (num_angles={self.num_angles})")
        return normalize_angle(float(self.angles_space[index]))

    def nearest_index(self, angle_rad: float) -> int:
        """Find the index of the nearest discretized angle to the given angle (in radians)."""
        diff_rad = self.angles_space - angle_rad
        normalized_rad = np.abs(np.arctan2(np.sin(diff_rad), np.cos(diff_rad)))
        return int(np.argmin(normalized_rad))


@dataclass(frozen=True)
class DiscreteSE2:
    """A discrete cell of indices corresponding to a 2D pose."""

    cell: GridCell
    heading_idx: int


@dataclass(frozen=True)
class DiscreteSE2Space:
    """A discrete space of 2D poses consisting of (x, y, yaw) values."""

    grid: DiscreteGrid2D
    headings: DiscreteAngles

    def discretize(self, x: float, y: float, yaw_rad: float) -> DiscreteSE2:
        """Compute the indices within the discrete SE(2) space nearest to the given pose."""
        cell = self.grid.world_to_cell(x, y)
        heading_idx = self.headings.nearest_index(yaw_rad)
        return DiscreteSE2(cell=cell, heading_idx=heading_idx)
