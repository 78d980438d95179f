"""Import definitions relating to general mathematical operations."""

from .angles import angle_difference_rad as angle_difference_rad
from .angles import normalize_angle as normalize_angle
from .sampling import RealRange as RealRange
