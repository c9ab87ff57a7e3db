"""Sweep and pace vehicles, which alternate between both directions.

Escort waypoints are in absolute clock minutes (``spawn_min = 0``) and are
declared in chronological intent: eastbound run first, then westbound, with
times allowed to run past the period.
"""

from __future__ import annotations

from tunnel_sim.config.models import EscortConfig, TunnelConfig
from tunnel_sim.timeline.curve import Waypoint
from tunnel_sim.timeline.models import XY, PartialState
from tunnel_sim.vehicles.lane import Lane


def staging_position(config: TunnelConfig, escort: EscortConfig, r_lane: Lane) -> XY:
    """Where the escort waits beside *r_lane*'s entrance, outside the traffic."""
    d = config.d
    return XY(
        r_lane.entrance.x - d * escort.staging_offset_px,
        r_lane.y + d * escort.vertical_offset_px,
    )


def escort_points(
    escort: EscortConfig,
    start_min: float,
    east: TunnelConfig,
    west: TunnelConfig,
    east_r: Lane,
    west_r: Lane,
) -> list[Waypoint[PartialState]]:
    """Waypoints for an escort entering each direction at ``offset + start_min``.

    Args:
        escort: Speed and staging offsets.
        start_min: Phase minute at which the escort enters (sweep or pace start).
        east: Eastbound configuration.
        west: Westbound configuration.
        east_r: Eastbound R lane.
        west_r: Westbound R lane.
    """
    transit = east.transit_mins(escort.mph)
    reset = east.official_reset_mins
    east_stage = staging_position(east, escort, east_r)
    west_stage = staging_position(west, escort, west_r)

    e_enter = east.offset_min + start_min
    e_exit = e_enter + transit
    w_enter = west.offset_min + start_min
    w_exit = w_enter + transit

    def wp(minute: float, **fields) -> Waypoint[PartialState]:
        return Waypoint(minute, PartialState(**fields))

    return [
        wp(e_enter - 1, x=east_stage.x, y=east_stage.y, state="dequeueing", opacity=1.0, direction="east"),
        wp(e_enter, x=east_r.entrance.x, y=east_r.y, state="transiting"),
        wp(e_exit, x=east_r.exit.x, state="exiting"),
        wp(e_exit + reset, x=west_stage.x, y=west_stage.y, state="queued", direction="west"),
        wp(w_enter - 1, state="dequeueing"),
        wp(w_enter, x=west_r.entrance.x, y=west_r.y, state="transiting"),
        wp(w_exit, x=west_r.exit.x, state="exiting"),
        wp(w_exit + reset, x=east_stage.x, y=east_stage.y, state="queued", direction="east"),
    ]
