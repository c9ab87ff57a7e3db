"""Vehicle identity plus a lazily built, explicitly invalidated curve."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Union

from tunnel_sim.timeline.curve import Curve, Waypoint, wrap_minute
from tunnel_sim.timeline.models import PartialState, VisualState
from tunnel_sim.timeline.trajectory import TrajectoryBuilder
from tunnel_sim.traffic.models import QueueRecord
from tunnel_sim.vehicles.lane import LANE_IDS

VEHICLE_KINDS = ("bike", "car", "sweep", "pace")

RawPoints = Sequence[Union[Waypoint[PartialState], Waypoint[VisualState]]]
WaypointSource = Callable[[], RawPoints]
"""Zero-argument callable returning a vehicle's raw waypoints (local minutes)."""


def fixed_source(points: RawPoints) -> WaypointSource:
    """Wrap an already computed waypoint list as a :data:`WaypointSource`."""
    frozen = tuple(points)
    return lambda: frozen


class Vehicle:
    """One vehicle in a periodic tunnel cycle.

    The curve is built from ``source()`` on first access and kept until
    :meth:`invalidate` or :meth:`rebuild`.  Queries take minutes relative to
    the owning tunnel's cycle start; the curve itself is keyed by the
    vehicle's local minutes (``relative - spawn_min``).

    Args:
        vehicle_id: Stable identity, e.g. ``"bike-e-3"``.
        kind: One of :data:`VEHICLE_KINDS`.
        spawn_min: Arrival minute in ``[0, period)``.
        period: Cycle length in minutes.
        source: Waypoint generator.
        lane_id: One of :data:`~tunnel_sim.vehicles.lane.LANE_IDS`, or ``None``.
        index: Position in the generating population.
        direction: ``"east"`` / ``"west"``, ``None`` for escorts.
        queue: Queue record if the vehicle waits before entering.
    """

    def __init__(
        self,
        vehicle_id: str,
        kind: str,
        spawn_min: float,
        period: float,
        source: WaypointSource,
        lane_id: str | None = None,
        index: int = 0,
        direction: str | None = None,
        queue: QueueRecord | None = None,
    ) -> None:
        if kind not in VEHICLE_KINDS:
            raise ValueError(f"kind must be one of {VEHICLE_KINDS}, got {kind!r}")
        if lane_id is not None and lane_id not in LANE_IDS:
            raise ValueError(f"lane_id must be one of {LANE_IDS}, got {lane_id!r}")
        if not 0.0 <= spawn_min < period:
            raise ValueError(f"spawn_min must lie in [0, {period}), got {spawn_min}")
        self.vehicle_id = vehicle_id
        self.kind = kind
        self.spawn_min = spawn_min
        self.period = period
        self.source = source
        self.lane_id = lane_id
        self.index = index
        self.direction = direction
        self.queue = queue
        self._builder = TrajectoryBuilder(period, name=vehicle_id)
        self._curve: Curve[VisualState] | None = None

    def __repr__(self) -> str:
        return f"Vehicle({self.vehicle_id!r}, kind={self.kind!r}, spawn={self.spawn_min})"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def curve(self) -> Curve[VisualState]:
        if self._curve is None:
            self._curve = self._builder.build(self.source())
        return self._curve

    def invalidate(self) -> None:
        """Drop the memoized curve; the next query rebuilds it."""
        self._curve = None

    def rebuild(self) -> Curve[VisualState]:
        """Build a fresh curve and publish it in a single assignment."""
        curve = self._builder.build(self.source())
        self._curve = curve
        return curve

    def local_minute(self, rel_min: float) -> float:
        return wrap_minute(rel_min - self.spawn_min, self.period)

    def at(self, rel_min: float) -> VisualState:
        """Visual state at *rel_min* (minutes since the tunnel cycle start)."""
        return self.curve.at(rel_min - self.spawn_min)
