"""Demonstrate A* over a two-room grid, and how closing the doorway affects feasibility.

This script builds two rooms separated by a wall with a single doorway, plans between the
rooms incrementally (reporting each search step), and then replans with the doorway closed.

To run this script, use the commands:

    pip install -e .
    python scripts/doorway_planning_demo.py

"""

from __future__ import annotations

import click
import numpy as np

from sampled_astar.io import console
from sampled_astar.io.planning_cli import render_grid, render_trajectory_table
from sampled_astar.planning import AStarOptimizer, UnreachableGoalError
from sampled_astar.spaces import GridModel, GridSampler, GridState

# Room layout parameters (cells)
ROOM_WIDTH_CELLS = 7
ROOM_HEIGHT_CELLS = 5
DIVIDING_WALL_X = 3
DOORWAY_Y = 2


def create_occupancy_mask(*, door_closed: bool) -> np.ndarray:
    """Create the occupancy mask of the two rooms, optionally closing the doorway.

    :param door_closed: Whether the doorway in the dividing wall is blocked
    :return: Boolean (height, width) array where True marks occupied cells
    """
    mask = np.zeros((ROOM_HEIGHT_CELLS, ROOM_WIDTH_CELLS), dtype=bool)
    mask[:, DIVIDING_WALL_X] = True
    mask[DOORWAY_Y, DIVIDING_WALL_X] = door_closed
    return mask


@click.command()
@click.option("--connectivity", type=click.Choice(["4", "8"]), default="4", show_default=True)
@click.option("--seed", type=int, default=None, help="Seed for sampling start and goal cells.")
def main(connectivity: str, seed: int | None) -> None:
    """Run the doorway planning demonstration."""
    rng = np.random.default_rng(seed)
    console.print("[bold blue]Doorway Planning Demo[/bold blue]")
    console.print()

    # Step 1: Sample a start cell in the left room and a goal cell in the right room
    start_x = int(rng.integers(0, DIVIDING_WALL_X))
    goal_x = int(rng.integers(DIVIDING_WALL_X + 1, ROOM_WIDTH_CELLS))
    start = GridState(start_x, int(rng.integers(0, ROOM_HEIGHT_CELLS)))
    goal = GridState(goal_x, int(rng.integers(0, ROOM_HEIGHT_CELLS)))
    console.print(f"[bold]Step 1:[/] Planning from {start} to {goal}...")

    # Step 2: Plan incrementally with the door open, reporting each intermediate trajectory
    console.print("[bold]Step 2:[/] Planning a path when door is OPEN...")
    model = GridModel(create_occupancy_mask(door_closed=False), connectivity=int(connectivity))
    optimizer = AStarOptimizer()

    result = optimizer.next_trajectory(model, start, goal, GridSampler())
    while not result.is_final:
        result = optimizer.next_trajectory(model, start, goal, GridSampler())

    console.print(f"  [green]SUCCESS![/] Found path after {optimizer.steps_taken} steps.")
    console.print(render_grid(model, result.trajectory, goal, optimizer.inspect_discovered()))
    console.print(render_trajectory_table(result.trajectory))

    # Step 3: Reuse the optimizer to plan again with the door closed
    console.print("[bold]Step 3:[/] Planning a path when door is CLOSED...")
    closed_model = GridModel(create_occupancy_mask(door_closed=True), int(connectivity))
    optimizer.reset()

    try:
        optimizer.optimize(closed_model, start, goal, GridSampler())
        console.print("  [yellow]UNEXPECTED:[/] Found path when door is closed.")
    except UnreachableGoalError as err:
        console.print(f"  [green]VERIFIED:[/] {err}")

    optimizer.log_info()
    console.print("[green]Demo complete![/]")


if __name__ == "__main__":
    main()
