"""Keyframe curves and trajectory normalization.

Public API
----------
Curve               - strictly ascending keyframes, optionally periodic
Waypoint            - a (minute, value, interp) control point
Field / NUM         - interpolation algebra and the float instance
VisualState         - x/y/state/opacity value carried by vehicle curves
PartialState        - a VisualState with optional fields (pre fill-forward)
TrajectoryBuilder   - raw waypoints -> normalized periodic Curve
InvalidCurve        - raised on empty / unsorted curve input
TrajectoryError     - raised when waypoint generation produced a bad trajectory
"""

from tunnel_sim.timeline.curve import NUM, Curve, Field, InvalidCurve, Waypoint, wrap_minute
from tunnel_sim.timeline.models import (
    LIFECYCLE_STATES,
    STATE_FIELD,
    XY,
    XY_FIELD,
    PartialState,
    VisualState,
)
from tunnel_sim.timeline.trajectory import (
    TrajectoryBuilder,
    TrajectoryError,
    fill_forward,
    keep_last_per_minute,
    waypoint,
)

__all__ = [
    "LIFECYCLE_STATES",
    "NUM",
    "STATE_FIELD",
    "XY",
    "XY_FIELD",
    "Curve",
    "Field",
    "InvalidCurve",
    "PartialState",
    "TrajectoryBuilder",
    "TrajectoryError",
    "VisualState",
    "Waypoint",
    "fill_forward",
    "keep_last_per_minute",
    "waypoint",
    "wrap_minute",
]
