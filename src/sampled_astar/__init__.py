"""Heuristic best-first (A*) search over pluggable, sampled state spaces."""

from .planning import AStarOptimizer as AStarOptimizer
from .planning import HeuristicModel as HeuristicModel
from .planning import Model as Model
from .planning import Optimizer as Optimizer
from .planning import PlanningError as PlanningError
from .planning import PlanResult as PlanResult
from .planning import PlanStatus as PlanStatus
from .planning import Sampler as Sampler
from .planning import Trajectory as Trajectory
from .planning import TrajectoryStep as TrajectoryStep
from .planning import UnreachableGoalError as UnreachableGoalError

__version__ = "0.1.0"
