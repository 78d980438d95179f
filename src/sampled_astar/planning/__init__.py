"""Import classes and definitions enabling heuristic search over sampled state spaces."""

from .a_star import AStarOptimizer as AStarOptimizer
from .a_star import SearchNode as SearchNode
from .interfaces import DiscretizableState as DiscretizableState
from .interfaces import HeuristicModel as HeuristicModel
from .interfaces import Model as Model
from .interfaces import Optimizer as Optimizer
from .interfaces import Sampler as Sampler
from .results import PlanningError as PlanningError
from .results import PlanResult as PlanResult
from .results import PlanStatus as PlanStatus
from .results import UnreachableGoalError as UnreachableGoalError
from .trajectories import Trajectory as Trajectory
from .trajectories import TrajectoryStep as TrajectoryStep
