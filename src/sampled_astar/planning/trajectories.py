"""Define classes to represent planned trajectories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, NamedTuple

from sampled_astar.planning.interfaces import ControlT, StateT

if TYPE_CHECKING:
    from collections.abc import Iterator


class TrajectoryStep(NamedTuple):
    """A state in a trajectory paired with the control that produced it."""

    state: Any
    control: Any


@dataclass
class Trajectory(Generic[StateT, ControlT]):
    """A sequence of (state, control) steps from a start state, with its total cost."""

    cost: Any
    """Total cost of the trajectory, summed over its edges."""

    steps: list[TrajectoryStep]
    """Chronological steps; the first step's control is the model's no-op control."""

    def __post_init__(self) -> None:
        """Verify properties expected of any valid trajectory."""
        if not self.steps:
            raise ValueError("A trajectory must contain at least its start state.")

    def __len__(self) -> int:
        """Retrieve the number of steps (states) in the trajectory."""
        return len(self.steps)

    def __iter__(self) -> Iterator[TrajectoryStep]:
        """Provide an iterator over the steps of the trajectory."""
        return iter(self.steps)

    @property
    def states(self) -> list[StateT]:
        """Retrieve the states visited by the trajectory, in order."""
        return [step.state for step in self.steps]

    @property
    def controls(self) -> list[ControlT]:
        """Retrieve the controls applied along the trajectory, in order."""
        return [step.control for step in self.steps]

    @property
    def start_state(self) -> StateT:
        """Retrieve the state the trajectory begins from."""
        return self.steps[0].state

    @property
    def final_state(self) -> StateT:
        """Retrieve the state the trajectory ends at."""
        return self.steps[-1].state
