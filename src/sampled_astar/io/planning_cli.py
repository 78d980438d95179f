"""Define a command-line interface for solving planning problems described in YAML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sampled_astar.io.logging import configure_logging, console
from sampled_astar.io.problem_schema import PlanningProblem, load_problem_config
from sampled_astar.planning import AStarOptimizer, PlanResult, UnreachableGoalError
from sampled_astar.spaces.grid import GridModel, GridState
from sampled_astar.spaces.unicycle import UnicycleState, VelocityControl

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable

    from sampled_astar.planning import Trajectory

OBSTACLE_CHAR = "#"
FREE_CHAR = "."
DISCOVERED_CHAR = ","
PATH_CHAR = "*"


def _format_value(value: Any) -> str:
    """Format a state or control compactly for display in a table."""
    if isinstance(value, UnicycleState):
        return f"({value.x:.2f}, {value.y:.2f}, {value.yaw_rad:.2f})"
    if isinstance(value, VelocityControl):
        return f"v={value.linear_m_s:.2f} w={value.angular_rad_s:.2f} t={value.duration_s:.2f}"
    if isinstance(value, GridState):
        return f"({value.x}, {value.y})"
    return str(value)


def render_trajectory_table(trajectory: Trajectory) -> Table:
    """Render a numbered table of the (state, control) steps of a trajectory."""
    table = Table(title=f"Trajectory (cost {trajectory.cost:.3f})", show_lines=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("State", style="bold")
    table.add_column("Control", style="magenta")

    for idx, (state, control) in enumerate(trajectory):
        table.add_row(str(idx), _format_value(state), _format_value(control))
    return table


def render_grid(
    model: GridModel,
    trajectory: Trajectory,
    goal: GridState,
    discovered: Iterable[Hashable] = (),
) -> Text:
    """Render a grid problem as text, with the y-axis pointing up the screen.

    :param model: Grid model whose obstacles are drawn
    :param trajectory: Trajectory whose states are highlighted
    :param goal: Goal cell of the problem
    :param discovered: Discretization keys of cells reached during search
    :return: Styled text drawing of the grid
    """
    path_cells = {(s.x, s.y) for s in trajectory.states}
    discovered_cells = {(key.col, key.row) for key in discovered}
    start = trajectory.start_state

    text = Text()
    for y in reversed(range(model.height)):
        for x in range(model.width):
            if (x, y) == (start.x, start.y):
                text.append("S", style="bold green")
            elif (x, y) == (goal.x, goal.y):
                text.append("G", style="bold red")
            elif model.occupancy_mask[y, x]:
                text.append(OBSTACLE_CHAR, style="white")
            elif (x, y) in path_cells:
                text.append(PATH_CHAR, style="yellow")
            elif (x, y) in discovered_cells:
                text.append(DISCOVERED_CHAR, style="blue")
            else:
                text.append(FREE_CHAR, style="dim")
        text.append("\n")
    return text


def _plan_incrementally(
    optimizer: AStarOptimizer,
    problem: PlanningProblem,
    max_steps: int | None,
) -> PlanResult:
    """Step the optimizer until it reaches the goal, reporting each intermediate trajectory."""
    step = 0
    while True:
        step += 1
        if max_steps is not None and step > max_steps:
            raise click.ClickException(f"No trajectory reached the goal within {max_steps} steps.")

        result = optimizer.next_trajectory(*problem.model_args())
        trajectory = result.trajectory
        final_state = _format_value(trajectory.final_state)
        console.print(f"[dim]Step {step}: reached {final_state} (cost {trajectory.cost:.3f})[/]")
        if result.is_final:
            return result


@click.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--incremental", is_flag=True, help="Expand one node at a time, reporting each step.")
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Give up after this many steps (incremental mode only).",
)
@click.option("--stats", is_flag=True, help="Print search statistics after planning.")
@click.option("--verbose", is_flag=True, help="Log search progress at the DEBUG level.")
def plan(
    config_path: Path,
    incremental: bool,
    max_steps: int | None,
    stats: bool,
    verbose: bool,
) -> None:
    """Plan a trajectory for the problem described by CONFIG_PATH."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = load_problem_config(config_path)
    except (ValidationError, RuntimeError, ValueError) as err:
        raise click.ClickException(f"Invalid problem config {config_path}:\n{err}") from err

    problem = config.build()
    optimizer = AStarOptimizer()

    try:
        if incremental:
            result = _plan_incrementally(optimizer, problem, max_steps)
        else:
            result = optimizer.optimize(*problem.model_args())
    except UnreachableGoalError as err:
        console.print(f"[red]{err}[/]")
        raise click.ClickException("No trajectory reaches the goal.") from err

    trajectory = result.trajectory
    console.print(Panel.fit(f"[bold green]Reached the goal with cost {trajectory.cost:.3f}[/]"))

    if isinstance(problem.model, GridModel):
        discovered = optimizer.inspect_discovered()
        console.print(render_grid(problem.model, trajectory, problem.goal, discovered))
    console.print(render_trajectory_table(trajectory))

    if stats:
        optimizer.log_info()
