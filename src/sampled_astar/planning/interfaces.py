"""Define the interfaces between optimizers and the state spaces they search.

An optimizer only ever interacts with a state space through a model (transitions, costs,
heuristics, and goal tests) and a sampler (candidate controls). States need only expose a
discretization key that identifies which states are treated as duplicates during search.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, Hashable, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sampled_astar.planning.results import PlanResult


@runtime_checkable
class DiscretizableState(Protocol):
    """A state that can be bucketed into a coarse cell for duplicate detection."""

    def discretization_key(self) -> Hashable:
        """Return a hashable key shared by all states considered equivalent during search."""
        ...


StateT = TypeVar("StateT", bound=DiscretizableState)
"""Type variable for states in a searched space."""

ControlT = TypeVar("ControlT")
"""Type variable for controls (actions) applied to states."""


class Model(ABC, Generic[StateT, ControlT]):
    """A model of how controls transform states and how much those transformations cost.

    Costs may be any totally ordered type closed under addition (floats by default). Costs
    must be non-negative for optimal search, but this is never checked.
    """

    @abstractmethod
    def transition(self, state: StateT, control: ControlT) -> StateT | None:
        """Apply a control to the given state.

        :param state: State the control is applied from
        :param control: Control to be applied
        :return: Resulting child state, or None if the control is inapplicable from the state
        """

    def is_applicable(self, state: StateT, control: ControlT) -> bool:
        """Check whether the given control may be applied from the given state.

        Models that find it simpler to filter controls before transitioning may override
        this; any control rejected here is treated as if `transition()` returned None.
        """
        return True

    @abstractmethod
    def cost(self, from_state: StateT, to_state: StateT) -> Any:
        """Compute the cost of the edge between two states.

        Must be deterministic: optimizers recompute edge costs when reconstructing paths.
        """

    @abstractmethod
    def converge(self, state: StateT, goal: StateT) -> bool:
        """Check whether the given state satisfies the goal condition."""

    @abstractmethod
    def default_control(self) -> ControlT:
        """Return the no-op control associated with the start of every trajectory."""

    def zero_cost(self) -> Any:
        """Return the additive identity of the model's cost type."""
        return 0.0


class HeuristicModel(Model[StateT, ControlT]):
    """A model that can also estimate the remaining cost from a state to the goal."""

    @abstractmethod
    def heuristic(self, state: StateT, goal: StateT) -> Any:
        """Estimate the cost-to-go from the given state to the goal.

        Must never overestimate the true cost (and be consistent) for A* to be cost-optimal.
        """


class Sampler(ABC, Generic[StateT, ControlT]):
    """A generator of candidate controls to be tried from a state."""

    @abstractmethod
    def sample(self, model: Model[StateT, ControlT], state: StateT) -> Sequence[ControlT]:
        """Produce a finite, ordered collection of candidate controls from the given state.

        :param model: Model of the searched space (may inform adaptive sampling)
        :param state: State from which the candidate controls will be applied
        :return: Candidate controls, in the order they should be tried
        """


class Optimizer(ABC, Generic[StateT, ControlT]):
    """An optimizer that searches for trajectories from a start state to a goal."""

    @abstractmethod
    def optimize(
        self,
        model: HeuristicModel[StateT, ControlT],
        start: StateT,
        goal: StateT,
        sampler: Sampler[StateT, ControlT],
    ) -> PlanResult[StateT, ControlT]:
        """Search until a trajectory reaching the goal is found.

        :raises UnreachableGoalError: If the search space is exhausted without reaching the goal
        """

    @abstractmethod
    def next_trajectory(
        self,
        model: HeuristicModel[StateT, ControlT],
        start: StateT,
        goal: StateT,
        sampler: Sampler[StateT, ControlT],
    ) -> PlanResult[StateT, ControlT]:
        """Take a single search step and return the trajectory to the node it considered.

        :raises UnreachableGoalError: If no nodes remain to be searched
        """
