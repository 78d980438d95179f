"""Define the results and errors reported by optimizers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Generic

from sampled_astar.planning.interfaces import ControlT, StateT
from sampled_astar.planning.trajectories import Trajectory


class PlanStatus(Enum):
    """Whether a returned trajectory reaches the goal or only reports search progress."""

    FINAL = "final"
    INTERMEDIATE = "intermediate"


@dataclass(frozen=True)
class PlanResult(Iterable, Generic[StateT, ControlT]):
    """A trajectory returned by an optimizer, tagged with whether it reaches the goal."""

    status: PlanStatus
    trajectory: Trajectory[StateT, ControlT]

    def __iter__(self) -> Iterator:
        """Return an iterator over the (status, trajectory) values of the result."""
        return iter((self.status, self.trajectory))

    @property
    def is_final(self) -> bool:
        """Check whether the trajectory ends at a state satisfying the goal condition."""
        return self.status is PlanStatus.FINAL


class PlanningError(Exception):
    """Base class for errors reported by optimizers."""


class UnreachableGoalError(PlanningError):
    """Raised when no nodes remain to be searched before the goal condition is satisfied."""

    def __init__(self, steps_taken: int) -> None:
        """Initialize the error with the number of search steps that preceded it."""
        super().__init__(f"Goal is unreachable: search space exhausted after {steps_taken} steps.")
        self.steps_taken = steps_taken
