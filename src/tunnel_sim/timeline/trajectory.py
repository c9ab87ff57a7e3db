"""Per-vehicle trajectory assembly.

Vehicles emit sparse, possibly unordered, possibly partial waypoints in their
own local minutes.  :class:`TrajectoryBuilder` turns them into a valid periodic
:class:`~tunnel_sim.timeline.curve.Curve`:

1. fill-forward unset fields from the previous waypoint;
2. map every time into ``[0, period)``;
3. sort ascending;
4. on equal times keep the waypoint declared last;
5. re-check strict ascension.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from tunnel_sim.timeline.curve import Curve, InvalidCurve, Waypoint, wrap_minute
from tunnel_sim.timeline.models import LIFECYCLE_STATES, STATE_FIELD, PartialState, VisualState

_REQUIRED = ("x", "y", "state", "opacity")


class TrajectoryError(Exception):
    """Raised when a vehicle's waypoints cannot form a valid trajectory.

    This always indicates a bug in the code generating the waypoints, never a
    recoverable runtime condition.
    """


def waypoint(minute: float, interp=None, **fields) -> Waypoint[PartialState]:
    """Build a partial waypoint, e.g. ``waypoint(3.0, opacity=1.0)``."""
    return Waypoint(minute, PartialState(**fields), interp)


def fill_forward(
    points: Sequence[Waypoint[PartialState] | Waypoint[VisualState]],
    name: str = "vehicle",
) -> list[Waypoint[VisualState]]:
    """Complete every waypoint by copying unset fields from its predecessor.

    Works in declaration order, which is the chronological intent of the
    caller even when the times later wrap.

    Raises:
        TrajectoryError: If *points* is empty or the first waypoint leaves a
            required field unset, or a waypoint names a state outside
            :data:`~tunnel_sim.timeline.models.LIFECYCLE_STATES`.
    """
    if not points:
        raise TrajectoryError(f"Vehicle {name} has no points defined")

    first = points[0].value
    missing = [f for f in _REQUIRED if getattr(first, f) is None]
    if missing:
        raise TrajectoryError(
            f"Vehicle {name}: first waypoint must set {', '.join(missing)}"
        )

    filled: list[Waypoint[VisualState]] = []
    prev: dict = {}
    for p in points:
        v = p.value
        cur = {
            "x": v.x if v.x is not None else prev.get("x"),
            "y": v.y if v.y is not None else prev.get("y"),
            "state": v.state if v.state is not None else prev.get("state"),
            "opacity": v.opacity if v.opacity is not None else prev.get("opacity"),
            "direction": v.direction if v.direction is not None else prev.get("direction"),
        }
        if cur["state"] not in LIFECYCLE_STATES:
            raise TrajectoryError(f"Vehicle {name}: unknown state {cur['state']!r} at minute {p.minute}")
        filled.append(Waypoint(p.minute, VisualState(**cur), p.interp))
        prev = cur
    return filled


def keep_last_per_minute(
    points: Sequence[Waypoint[VisualState]],
    key: Callable[[float], float] = lambda m: m,
) -> list[Waypoint[VisualState]]:
    """Stable-sort *points* by ``key(minute)``; on ties the later-declared one wins.

    The returned waypoints carry the keyed minute.
    """
    keyed = sorted(
        ((key(p.minute), i, p) for i, p in enumerate(points)),
        key=lambda k: (k[0], k[1]),
    )
    out: list[Waypoint[VisualState]] = []
    for minute, _, p in keyed:
        pt = Waypoint(minute, p.value, p.interp)
        if out and out[-1].minute == minute:
            out[-1] = pt
        else:
            out.append(pt)
    return out


class TrajectoryBuilder:
    """Normalizes one vehicle's raw waypoints into a periodic curve.

    Args:
        period: Cycle length in minutes.
        name: Vehicle identity, used in error messages.
    """

    def __init__(self, period: float, name: str = "vehicle") -> None:
        if period <= 0:
            raise ValueError("period must be > 0")
        self.period = period
        self.name = name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(
        self,
        raw: Sequence[Waypoint[PartialState] | Waypoint[VisualState]],
    ) -> list[Waypoint[VisualState]]:
        """Return filled, wrapped, sorted, de-duplicated waypoints.

        Raises:
            TrajectoryError: If the result is not strictly ascending within
                ``[0, period)``.
        """
        filled = fill_forward(raw, self.name)
        points = keep_last_per_minute(filled, key=lambda m: wrap_minute(m, self.period))
        self._validate(points)
        return points

    def build(
        self,
        raw: Sequence[Waypoint[PartialState] | Waypoint[VisualState]],
    ) -> Curve[VisualState]:
        """Return a fresh periodic :class:`Curve` for *raw*."""
        points = self.normalize(raw)
        try:
            return Curve(points, STATE_FIELD, self.period)
        except InvalidCurve as exc:
            raise TrajectoryError(f"Vehicle {self.name}: {exc}") from exc

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _validate(self, points: list[Waypoint[VisualState]]) -> None:
        for prev, cur in zip(points, points[1:]):
            if cur.minute <= prev.minute:
                raise TrajectoryError(
                    f"Vehicle {self.name} points must be strictly ascending by minute. "
                    f"Found: {prev.minute} and {cur.minute}"
                )
        for p in points:
            if not 0.0 <= p.minute < self.period:
                raise TrajectoryError(
                    f"Vehicle {self.name} point at {p.minute} outside [0, {self.period})"
                )
