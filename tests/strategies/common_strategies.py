"""Define strategies for generating common representations for property-based testing."""

from __future__ import annotations

import hypothesis.strategies as st


@st.composite
def real_ranges(draw: st.DrawFn, max_magnitude: float = 1e6) -> tuple[float, float]:
    """Generate random [a,b] ranges of real numbers (i.e., floats) with bounded magnitude."""
    a = draw(st.floats(min_value=-max_magnitude, max_value=max_magnitude))
    b = draw(st.floats(min_value=-max_magnitude, max_value=max_magnitude))
    return (min(a, b), max(a, b))


@st.composite
def angles_rad(draw: st.DrawFn) -> float:
    """Generate random angles (in radians)."""
    return draw(st.floats(min_value=-10e4, max_value=10e4, allow_infinity=False, allow_nan=False))
