"""Define an A* optimizer over generic, sampled state spaces.

Reference: Section 3.5.2 (pg. 85-86) of AIMA (4th Ed.) by Russell and Norvig.

Duplicate states are detected using each state's discretization key: a child arriving in an
already-reached cell is only kept if it reaches that cell more cheaply than the best node
known for the cell. Superseded nodes are not removed from the frontier (lazy invalidation).
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Hashable

from sampled_astar.io.logging import console, log_debug, log_info
from sampled_astar.planning.interfaces import ControlT, Optimizer, StateT
from sampled_astar.planning.results import PlanResult, PlanStatus, UnreachableGoalError
from sampled_astar.planning.trajectories import Trajectory, TrajectoryStep

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sampled_astar.planning.interfaces import HeuristicModel, Model, Sampler


@dataclass(frozen=True)
class SearchNode(Generic[StateT, ControlT]):
    """A node in the A* search tree (represents a particular path to a state).

    Nodes are equal (and hash) by their unique ID alone; the frontier orders them by f-value.
    """

    node_id: int
    """Unique ID assigned in increasing order; parents always have smaller IDs than children."""

    g: Any = field(compare=False)
    """Path cost from the start node to this node."""

    f: Any = field(compare=False)
    """Estimated cost of the best path continuing from the node to the goal."""

    state: StateT = field(compare=False)
    control: ControlT = field(compare=False)
    """Control that produced the node's state from its parent's state."""


class AStarOptimizer(Optimizer[StateT, ControlT]):
    """A* search over a state space defined by a model and a sampler of controls.

    The optimizer may be reused across planning problems, but `reset()` must be called in
    between unrelated problems; otherwise stale cells bias pruning in the new search.
    """

    def __init__(self) -> None:
        """Initialize an empty A* optimizer."""
        self._frontier: list[tuple[Any, int]] = []
        """Heap of (f-value, node ID) pairs for nodes to be expanded."""

        self._nodes: dict[int, SearchNode[StateT, ControlT]] = {}
        """Every node ever pushed onto the frontier, indexed by ID."""

        self._parents: dict[int, int] = {}
        """A map from node IDs to the IDs of their parent nodes (the start node has none)."""

        self._best_in_cell: dict[Hashable, int] = {}
        """A map from discretization keys to the ID of the lowest-cost node reaching that cell."""

        self._next_id = 0
        self._num_step_calls = 0
        self._nodes_expanded = 0

    def reset(self) -> None:
        """Clear all search state so that the optimizer can solve an unrelated problem."""
        self._frontier.clear()
        self._nodes.clear()
        self._parents.clear()
        self._best_in_cell.clear()
        self._next_id = 0
        self._num_step_calls = 0
        self._nodes_expanded = 0

    @property
    def steps_taken(self) -> int:
        """Retrieve the number of nodes that the optimizer has popped from its frontier."""
        return self._num_step_calls

    @property
    def nodes_expanded(self) -> int:
        """Retrieve the number of nodes whose successors have been sampled."""
        return self._nodes_expanded

    @property
    def frontier_size(self) -> int:
        """Retrieve the number of entries currently in the frontier (stale entries included)."""
        return len(self._frontier)

    def inspect_queue(self) -> Iterator[tuple[StateT, ControlT]]:
        """Iterate over the (state, control) pairs of the nodes currently in the frontier."""
        for _, node_id in self._frontier:
            node = self._nodes[node_id]
            yield node.state, node.control

    def inspect_discovered(self) -> Iterator[Hashable]:
        """Iterate over the discretization keys of all cells reached so far."""
        yield from self._best_in_cell

    def best_node_in_cell(self, key: Hashable) -> SearchNode[StateT, ControlT] | None:
        """Retrieve the lowest-cost node known to reach the given cell (None if unreached)."""
        node_id = self._best_in_cell.get(key)
        return None if node_id is None else self._nodes[node_id]

    def optimize(
        self,
        model: HeuristicModel[StateT, ControlT],
        start: StateT,
        goal: StateT,
        sampler: Sampler[StateT, ControlT],
    ) -> PlanResult[StateT, ControlT]:
        """Search until the goal is reached, then return the trajectory reaching it.

        :param model: Model defining transitions, costs, heuristic, and goal test
        :param start: State from which the search begins
        :param goal: Goal passed to the model's heuristic and goal test
        :param sampler: Sampler producing candidate controls during expansion
        :return: Final result containing the lowest-cost trajectory found to the goal
        :raises UnreachableGoalError: If the frontier empties before the goal is reached
        """
        if model.converge(start, goal):
            log_info("Start state already satisfies the goal condition.")
            start_step = TrajectoryStep(start, model.default_control())
            trajectory = Trajectory(cost=model.zero_cost(), steps=[start_step])
            return PlanResult(PlanStatus.FINAL, trajectory)

        self._seed(model, start, goal)

        while self._frontier:
            current = self._pop()
            if self._expand(current, model, goal, sampler):
                return PlanResult(PlanStatus.FINAL, self._converged_trajectory(model, current))

        log_info(f"Frontier exhausted after {self._num_step_calls} steps; goal is unreachable.")
        raise UnreachableGoalError(self._num_step_calls)

    def next_trajectory(
        self,
        model: HeuristicModel[StateT, ControlT],
        start: StateT,
        goal: StateT,
        sampler: Sampler[StateT, ControlT],
    ) -> PlanResult[StateT, ControlT]:
        """Pop and expand a single node, then return the trajectory reaching that node.

        The first call on an empty optimizer seeds the search using the start state.

        :return: Result tagged FINAL if the popped node reached the goal, else INTERMEDIATE
        :raises UnreachableGoalError: If the frontier is empty when called
        """
        if not self._nodes:
            self._seed(model, start, goal)

        if not self._frontier:
            raise UnreachableGoalError(self._num_step_calls)

        current = self._pop()
        if self._expand(current, model, goal, sampler):
            return PlanResult(PlanStatus.FINAL, self._converged_trajectory(model, current))

        return PlanResult(PlanStatus.INTERMEDIATE, self.unwind_trajectory(model, current))

    def unwind_trajectory(
        self,
        model: Model[StateT, ControlT],
        node: SearchNode[StateT, ControlT],
    ) -> Trajectory[StateT, ControlT]:
        """Follow the parents from the given node up to the start node.

        :param model: Model used to recompute the cost of each edge along the path
        :param node: Node at which the reconstructed trajectory ends
        :return: Chronological trajectory from the start state to the node's state
        """
        steps = [TrajectoryStep(node.state, node.control)]
        cost = model.zero_cost()

        current = node
        while current.node_id in self._parents:
            parent = self._nodes[self._parents[current.node_id]]
            cost = cost + model.cost(parent.state, current.state)
            steps.append(TrajectoryStep(parent.state, parent.control))
            current = parent

        steps.reverse()
        return Trajectory(cost=cost, steps=steps)

    def log_info(self) -> None:
        """Log the current state of A* search to the console."""
        console.print(f"Current frontier size: {len(self._frontier)}.")
        console.print(f"Current number of reached cells: {len(self._best_in_cell)}.")
        console.print(f"Search steps taken: {self._num_step_calls}.")
        console.print(f"Nodes expanded: {self._nodes_expanded}.")

    def _seed(
        self,
        model: HeuristicModel[StateT, ControlT],
        start: StateT,
        goal: StateT,
    ) -> None:
        """Push a node for the start state onto the frontier and mark its cell as reached."""
        g = model.zero_cost()
        start_node = self._create_node(
            g=g,
            f=g + model.heuristic(start, goal),
            state=start,
            control=model.default_control(),
        )
        self._best_in_cell[start.discretization_key()] = start_node.node_id
        self._push(start_node)
        log_info(f"Seeded A* search with start node (f={start_node.f}).")

    def _create_node(
        self,
        g: Any,
        f: Any,
        state: StateT,
        control: ControlT,
    ) -> SearchNode[StateT, ControlT]:
        """Create a search node with the next unused ID."""
        node = SearchNode(node_id=self._next_id, g=g, f=f, state=state, control=control)
        self._next_id += 1
        return node

    def _push(self, node: SearchNode[StateT, ControlT]) -> None:
        """Store the given node and push it onto the frontier."""
        self._nodes[node.node_id] = node
        heapq.heappush(self._frontier, (node.f, node.node_id))

    def _pop(self) -> SearchNode[StateT, ControlT]:
        """Pop the node with the lowest f-value from the frontier."""
        self._num_step_calls += 1
        _, node_id = heapq.heappop(self._frontier)
        return self._nodes[node_id]

    def _expand(
        self,
        current: SearchNode[StateT, ControlT],
        model: HeuristicModel[StateT, ControlT],
        goal: StateT,
        sampler: Sampler[StateT, ControlT],
    ) -> bool:
        """Check the given node against the goal, otherwise add its successors to the frontier.

        :return: True if the node satisfies the goal condition, otherwise False
        """
        if model.converge(current.state, goal):
            return True

        num_pushed = 0
        for control in sampler.sample(model, current.state):
            child_state = self._attempt_transition(model, current.state, control)
            if child_state is None:
                continue  # Inapplicable controls leave no trace in the search

            g = current.g + model.cost(current.state, child_state)
            child = self._create_node(
                g=g,
                f=g + model.heuristic(child_state, goal),
                state=child_state,
                control=control,
            )
            num_pushed += self._update_frontier(child, parent=current)

        self._nodes_expanded += 1
        log_debug(f"Expanded node {current.node_id} (g={current.g}): pushed {num_pushed} children.")
        return False

    def _attempt_transition(
        self,
        model: Model[StateT, ControlT],
        state: StateT,
        control: ControlT,
    ) -> StateT | None:
        """Apply the control to the state, returning None if the model rejects the control."""
        if not model.is_applicable(state, control):
            return None
        return model.transition(state, control)

    def _update_frontier(
        self,
        child: SearchNode[StateT, ControlT],
        parent: SearchNode[StateT, ControlT],
    ) -> bool:
        """Push the child onto the frontier if it reaches its cell more cheaply than before.

        :param child: Newly created node for a successor state
        :param parent: Node from which the child was generated
        :return: True if the child was pushed, False if it was dominated
        """
        key = child.state.discretization_key()
        best_id = self._best_in_cell.get(key)

        if best_id is not None and self._nodes[best_id].g <= child.g:
            return False

        self._best_in_cell[key] = child.node_id
        self._parents[child.node_id] = parent.node_id
        self._push(child)
        return True

    def _converged_trajectory(
        self,
        model: Model[StateT, ControlT],
        node: SearchNode[StateT, ControlT],
    ) -> Trajectory[StateT, ControlT]:
        """Reconstruct the trajectory to a node satisfying the goal, logging the outcome."""
        trajectory = self.unwind_trajectory(model, node)
        log_info(
            f"Reached the goal after {self._num_step_calls} steps "
            f"({len(trajectory)} states, cost {trajectory.cost}).",
        )
        return trajectory
