"""Raw waypoint generators for bicycles and cars.

Every generator returns waypoints in the vehicle's local minutes (0 = arrival)
and follows the same lifecycle: fade in at the origin, optionally queue, cross
the tunnel, fade out past the exit, then reset invisibly to the origin.  The
last waypoint is always the reset.
"""

from __future__ import annotations

from tunnel_sim.config.models import Layout, TunnelConfig
from tunnel_sim.timeline.curve import Waypoint
from tunnel_sim.timeline.models import XY, PartialState
from tunnel_sim.traffic.models import MergePlan, QueueRecord
from tunnel_sim.vehicles.lane import Lane

Points = list[Waypoint[PartialState]]


def _wp(minute: float, pos: XY | None = None, **fields) -> Waypoint[PartialState]:
    if pos is None:
        return Waypoint(minute, PartialState(**fields))
    return Waypoint(minute, PartialState.of(pos, **fields))


def _approach(
    d: int,
    fade_dist: float,
    fade_mins: float,
    queue: QueueRecord | None,
    slot: XY,
    entrance: XY,
) -> tuple[Points, float, XY]:
    """Fade in and (optionally) queue.  Returns the points, the entry minute and the start position."""
    if queue is None:
        start = entrance - XY(d * fade_dist, 0.0)
        points = [
            _wp(-fade_mins, start, state="origin", opacity=0.0),
            _wp(0.0, entrance, state="transiting", opacity=1.0),
        ]
        return points, 0.0, start

    start = slot - XY(d * fade_dist, 0.0)
    entry = queue.total_mins
    points = [
        _wp(-fade_mins, start, state="origin", opacity=0.0),
        _wp(0.0, slot, state="queued", opacity=1.0),
        _wp(queue.mins_before_dequeueing, state="dequeueing"),
        _wp(entry, entrance, state="transiting"),
    ]
    return points, entry, start


def _depart(
    exit_min: float,
    exit_pos: XY,
    d: int,
    fade_dist: float,
    fade_mins: float,
    origin: XY,
) -> Points:
    done = exit_min + fade_mins
    return [
        _wp(exit_min, exit_pos, state="exiting"),
        _wp(done, exit_pos + XY(d * fade_dist, 0.0), state="done", opacity=0.0),
        _wp(done + fade_mins, origin, state="origin", opacity=0.0),
    ]


def bike_points(
    config: TunnelConfig,
    layout: Layout,
    lane: Lane,
    pen: XY,
    queue: QueueRecord | None,
) -> Points:
    """Bicycle: pen (if queued), fast downhill half, slow uphill half."""
    d, fade = config.d, config.fade_mins
    fade_dist = config.px_per_min(config.bike_flat_mph, layout) * fade
    slot = pen + queue.offset if queue is not None else lane.entrance

    points, entry, origin = _approach(
        d, fade_dist, fade, queue, slot, lane.entrance
    )
    down = config.transit_mins(config.bike_down_mph) / 2
    up = config.transit_mins(config.bike_up_mph) / 2
    points.append(_wp(entry + down, lane.midpoint()))
    points += _depart(entry + down + up, lane.exit, d, fade_dist, fade, origin)
    return points


def car_points(
    config: TunnelConfig,
    layout: Layout,
    lane: Lane,
    queue_head: XY,
    queue: QueueRecord | None = None,
    merge: MergePlan | None = None,
) -> Points:
    """Car: queue (R lane, bike phases), merge (R lane, pace phase) or drive straight through."""
    d, fade = config.d, config.fade_mins
    speed = config.px_per_min(config.car_mph, layout)
    fade_dist = speed * fade
    transit = config.transit_mins(config.car_mph)
    slot = queue_head + queue.offset if queue is not None else lane.entrance

    points, entry, origin = _approach(
        d, fade_dist, fade, queue, slot, lane.entrance
    )
    exit_pos = lane.exit
    if merge is not None:
        entry = merge.entry_min
        if entry > 0:
            # Hold at the entrance until the gap in the L lane arrives.
            points[1] = _wp(0.0, lane.entrance, state="queued", opacity=1.0)
            points.append(_wp(entry, state="transiting"))
        travelled = speed * (merge.merge_end_min - merge.entry_min)
        points.append(_wp(merge.merge_end_min, XY(lane.entrance.x + d * travelled, merge.to_y)))
        exit_pos = XY(lane.exit.x, merge.to_y)

    points += _depart(entry + transit, exit_pos, d, fade_dist, fade, origin)
    return points
