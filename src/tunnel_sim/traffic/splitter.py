"""Split trajectories that do not fit inside one period.

A vehicle whose lifecycle (fade-in to reset) spans a full period or more would
collide with its own next cycle once wrapped.  :class:`CycleSplitter` hands it
off to a second identity part-way through: the *stub* keeps the original id
and shows the early part, the *continuation* carries the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from tunnel_sim.timeline.curve import Curve, Waypoint, wrap_minute
from tunnel_sim.timeline.models import STATE_FIELD, VisualState
from tunnel_sim.timeline.trajectory import TrajectoryError, keep_last_per_minute

_logger = logging.getLogger(__name__)

CONTINUATION_SUFFIX = ".cont"


@dataclass(frozen=True)
class SplitResult:
    """Output of :meth:`CycleSplitter.split`."""

    stub: list[Waypoint[VisualState]]
    """Waypoints for the original identity (all of them when not split)."""

    continuation: list[Waypoint[VisualState]] | None = None
    continuation_spawn: float | None = None
    cut_min: float | None = None
    """Hand-off minute in the original vehicle's local time."""

    @property
    def was_split(self) -> bool:
        return self.continuation is not None


class CycleSplitter:
    """Split filled waypoint lists whose span reaches one period.

    Args:
        period: Cycle length in minutes.
        epsilon: Gap between the hand-off keyframe and the hidden reset
            keyframe on either side of the cut.
    """

    def __init__(self, period: float, epsilon: float = 1e-6) -> None:
        if period <= 0:
            raise ValueError("period must be > 0")
        self.period = period
        self.epsilon = epsilon

    def split(
        self,
        points: Sequence[Waypoint[VisualState]],
        spawn_min: float,
        name: str = "vehicle",
    ) -> SplitResult:
        """Return the stub and, if needed, the continuation of *points*.

        *points* must already be filled (see
        :func:`~tunnel_sim.timeline.trajectory.fill_forward`) and are in the
        vehicle's local minutes.  The last waypoint is treated as the reset.

        Raises:
            TrajectoryError: If *points* is empty or even the stub would not
                fit inside one period.
        """
        if not points:
            raise TrajectoryError(f"Vehicle {name} has no points defined")
        pts = keep_last_per_minute(points)
        t0, tr = pts[0].minute, pts[-1].minute
        if tr - t0 < self.period:
            return SplitResult(stub=pts)

        eps = self.epsilon
        cut = tr - self.period + 1
        if cut + eps - t0 >= self.period:
            raise TrajectoryError(
                f"Vehicle {name} cannot be split: stub from {t0} to {cut} exceeds one period"
            )

        at_cut = Curve(pts, STATE_FIELD).at(cut)
        reset = pts[-1].value

        stub = [p for p in pts if p.minute < cut]
        stub += [Waypoint(cut, at_cut), Waypoint(cut + eps, reset)]

        continuation = [Waypoint(-eps, reset), Waypoint(0.0, at_cut)]
        continuation += [
            Waypoint(p.minute - cut, p.value, p.interp) for p in pts if p.minute > cut
        ]

        spawn = wrap_minute(spawn_min + cut, self.period)
        _logger.debug(
            "Split %s at local %.3f min; continuation spawns at %.3f", name, cut, spawn
        )
        return SplitResult(
            stub=stub,
            continuation=continuation,
            continuation_spawn=spawn,
            cut_min=cut,
        )
