"""Import state spaces that can be searched by the optimizers in `sampled_astar.planning`."""

from .discretization import DiscreteAngles as DiscreteAngles
from .discretization import DiscreteGrid2D as DiscreteGrid2D
from .discretization import DiscreteSE2 as DiscreteSE2
from .discretization import DiscreteSE2Space as DiscreteSE2Space
from .discretization import GridCell as GridCell
from .grid import GridModel as GridModel
from .grid import GridMove as GridMove
from .grid import GridSampler as GridSampler
from .grid import GridState as GridState
from .unicycle import MotionPrimitiveSampler as MotionPrimitiveSampler
from .unicycle import RandomVelocitySampler as RandomVelocitySampler
from .unicycle import UnicycleModel as UnicycleModel
from .unicycle import UnicycleState as UnicycleState
from .unicycle import VelocityControl as VelocityControl
