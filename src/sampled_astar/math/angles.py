"""Define utility functions for computations involving angles."""

import numpy as np


def normalize_angle(angle_rad: float) -> float:
    """Normalize the given angle (in radians) into the range [-pi, pi]."""
    return float((angle_rad + np.pi) % (2 * np.pi) - np.pi)


def angle_difference_rad(angle_a_rad: float, angle_b_rad: float) -> float:
    """Compute the smallest signed difference (a - b) between two angles, in [-pi, pi]."""
    return normalize_angle(angle_a_rad - angle_b_rad)
