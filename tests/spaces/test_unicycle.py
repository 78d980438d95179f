"""Unit tests for the unicycle state space and its velocity samplers."""

from __future__ import annotations

import numpy as np
import pytest

from sampled_astar.math import RealRange
from sampled_astar.planning import AStarOptimizer, PlanStatus
from sampled_astar.spaces.discretization import DiscreteAngles, DiscreteGrid2D, DiscreteSE2Space
from sampled_astar.spaces.unicycle import (
    NO_OP_CONTROL,
    MotionPrimitiveSampler,
    RandomVelocitySampler,
    UnicycleModel,
    VelocityControl,
    integrate_unicycle,
)


@pytest.fixture
def space() -> DiscreteSE2Space:
    """Create a discrete SE(2) space covering [0, 4] x [0, 2] with 0.25 m cells."""
    grid = DiscreteGrid2D.from_bounds(0.25, x_min=0.0, y_min=0.0, x_max=4.0, y_max=2.0)
    return DiscreteSE2Space(grid=grid, headings=DiscreteAngles(8))


@pytest.fixture
def model(space: DiscreteSE2Space) -> UnicycleModel:
    """Create an obstacle-free unicycle model with a 0.3 m goal tolerance."""
    return UnicycleModel(space, goal_tolerance_m=0.3)


def test_integrate_straight_line() -> None:
    """Verify that a command without rotation drives straight along the current heading."""
    # Act - Drive at 2 m/s for 0.5 s while facing +y
    x, y, yaw_rad = integrate_unicycle(1.0, 1.0, np.pi / 2, VelocityControl(2.0, 0.0, 0.5), 0.5)

    # Assert - Expect to move one meter along +y without turning
    assert (x, y, yaw_rad) == pytest.approx((1.0, 2.0, np.pi / 2))


def test_integrate_full_circle_returns_to_start() -> None:
    """Verify that turning through a full revolution returns to the starting pose."""
    # Arrange - Given a command that turns 2*pi radians over its duration
    control = VelocityControl(1.0, np.pi, 2.0)

    # Act - Integrate for the command's full duration, and for half of it
    full = integrate_unicycle(0.0, 0.0, 0.0, control, 2.0)
    half = integrate_unicycle(0.0, 0.0, 0.0, control, 1.0)

    # Assert - Expect the start pose after a full circle, and the far side after half
    assert full[0] == pytest.approx(0.0, abs=1e-9)
    assert full[1] == pytest.approx(0.0, abs=1e-9)
    assert half[0] == pytest.approx(0.0, abs=1e-9)
    assert half[1] == pytest.approx(2.0 / np.pi)


def test_transition_rejects_collisions(space: DiscreteSE2Space) -> None:
    """Verify that motions passing through occupied or out-of-bounds cells are rejected."""
    # Arrange - Given a model with an occupied column of cells at x in [2.0, 2.25)
    mask = np.zeros((space.grid.height_cells, space.grid.width_cells), dtype=bool)
    mask[:, 8] = True
    model = UnicycleModel(space, occupancy_mask=mask)
    state = model.make_state(1.5, 1.0, 0.0)

    # Act - Drive through the wall, off the grid, and along a free path
    through_wall = model.transition(state, VelocityControl(1.0, 0.0, 1.0))
    off_grid = model.transition(model.make_state(0.2, 1.0, np.pi), VelocityControl(1.0, 0.0, 1.0))
    free = model.transition(state, VelocityControl(0.25, 0.0, 1.0))

    # Assert - Expect only the free motion to produce a child state
    assert through_wall is None
    assert off_grid is None
    assert free is not None
    assert free.x == pytest.approx(1.75)


def test_mismatched_occupancy_mask_raises(space: DiscreteSE2Space) -> None:
    """Verify that the occupancy mask must match the shape of the space's grid."""
    with pytest.raises(ValueError, match="doesn't match"):
        UnicycleModel(space, occupancy_mask=np.zeros((2, 2), dtype=bool))


def test_zero_duration_commands_are_inapplicable(model: UnicycleModel) -> None:
    """Verify that commands which aren't held for any time are rejected."""
    state = model.make_state(1.0, 1.0, 0.0)
    assert not model.is_applicable(state, NO_OP_CONTROL)
    assert model.is_applicable(state, VelocityControl(1.0, 0.0, 0.1))


def test_converge_respects_heading_tolerance(space: DiscreteSE2Space) -> None:
    """Verify that the goal test optionally requires a matching heading."""
    # Arrange - Given models with and without a heading tolerance
    position_only = UnicycleModel(space, goal_tolerance_m=0.3)
    with_heading = UnicycleModel(space, goal_tolerance_m=0.3, heading_tolerance_rad=0.2)
    goal = position_only.make_state(2.0, 1.0, 0.0)
    state = position_only.make_state(2.1, 1.1, np.pi / 2)

    # Act/Assert - Expect only the position-only model to accept the mismatched heading
    assert position_only.converge(state, goal)
    assert not with_heading.converge(state, goal)
    assert with_heading.converge(with_heading.make_state(2.1, 1.1, 0.1), goal)


def test_heuristic_accounts_for_tolerance(model: UnicycleModel) -> None:
    """Verify that the heuristic is the remaining distance beyond the goal tolerance."""
    goal = model.make_state(3.0, 1.0, 0.0)
    assert model.heuristic(model.make_state(1.0, 1.0, 0.0), goal) == pytest.approx(1.7)
    assert model.heuristic(model.make_state(2.9, 1.0, 0.0), goal) == 0.0


def test_motion_primitive_sampler_lattice(model: UnicycleModel) -> None:
    """Verify that the primitive sampler proposes every combination of spaced velocities."""
    # Arrange - Given a sampler with two linear and three angular velocities
    sampler = MotionPrimitiveSampler(RealRange(0.5, 1.0), RealRange(-1.0, 1.0), duration_s=0.5)

    # Act - Sample from any state
    controls = sampler.sample(model, model.make_state(1.0, 1.0, 0.0))

    # Assert - Expect the six combinations
    assert len(controls) == 6
    assert {(c.linear_m_s, c.angular_rad_s) for c in controls} == {
        (v, w) for v in (0.5, 1.0) for w in (-1.0, 0.0, 1.0)
    }


def test_random_sampler_is_reproducible_and_bounded(model: UnicycleModel) -> None:
    """Verify that seeded random samplers repeat their draws and respect their ranges."""
    # Arrange - Given two random samplers with the same seed
    linear = RealRange(0.2, 1.0)
    angular = RealRange(-0.5, 0.5)
    sampler_a = RandomVelocitySampler(linear, angular, 0.5, rng=np.random.default_rng(7))
    sampler_b = RandomVelocitySampler(linear, angular, 0.5, rng=np.random.default_rng(7))
    state = model.make_state(1.0, 1.0, 0.0)

    # Act - Draw a batch of commands from each
    controls_a = sampler_a.sample(model, state)
    controls_b = sampler_b.sample(model, state)

    # Assert - Expect identical batches within the configured ranges
    assert controls_a == controls_b
    assert len(controls_a) == sampler_a.num_samples
    assert all(linear.contains(c.linear_m_s) for c in controls_a)
    assert all(angular.contains(c.angular_rad_s) for c in controls_a)
    assert all(c.duration_s == 0.5 for c in controls_a)


def test_optimize_reaches_goal_with_motion_primitives(model: UnicycleModel) -> None:
    """Verify that A* over sampled velocity commands reaches a goal within tolerance."""
    # Arrange - Given start and goal poses three meters apart and a primitive sampler
    start = model.make_state(0.5, 1.0, 0.0)
    goal = model.make_state(3.5, 1.0, 0.0)
    sampler = MotionPrimitiveSampler(RealRange(0.5, 1.0), RealRange(-1.0, 1.0), duration_s=0.5)

    # Act - Plan to completion
    result = AStarOptimizer().optimize(model, start, goal, sampler)

    # Assert - Expect a trajectory from the start to within tolerance of the goal
    trajectory = result.trajectory
    assert result.status is PlanStatus.FINAL
    assert trajectory.start_state == start
    assert model.converge(trajectory.final_state, goal)
    assert trajectory.controls[0] == NO_OP_CONTROL
    assert 2.7 - 1e-9 <= trajectory.cost <= 3.5
    edge_costs = [model.cost(a, b) for a, b in zip(trajectory.states, trajectory.states[1:])]
    assert trajectory.cost == pytest.approx(sum(edge_costs))


def test_optimize_with_random_sampler_is_reproducible(model: UnicycleModel) -> None:
    """Verify that planning with identically seeded random samplers yields identical plans."""
    # Arrange - Given two identically seeded random samplers
    start = model.make_state(0.5, 1.0, 0.0)
    goal = model.make_state(2.5, 1.0, 0.0)

    def make_sampler() -> RandomVelocitySampler:
        return RandomVelocitySampler(
            RealRange(0.5, 1.0),
            RealRange(-1.0, 1.0),
            duration_s=0.5,
            num_samples=6,
            rng=np.random.default_rng(42),
        )

    # Act - Plan with each sampler
    result_a = AStarOptimizer().optimize(model, start, goal, make_sampler())
    result_b = AStarOptimizer().optimize(model, start, goal, make_sampler())

    # Assert - Expect identical trajectories that reach the goal
    assert result_a.trajectory.states == result_b.trajectory.states
    assert model.converge(result_a.trajectory.final_state, goal)
