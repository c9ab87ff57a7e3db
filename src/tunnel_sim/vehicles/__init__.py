"""Vehicles, lanes and their waypoint generators."""

from tunnel_sim.vehicles.escort import escort_points, staging_position
from tunnel_sim.vehicles.lane import LANE_IDS, Lane, car_queue_head, make_lanes, pen_anchor
from tunnel_sim.vehicles.paths import bike_points, car_points
from tunnel_sim.vehicles.vehicle import VEHICLE_KINDS, Vehicle, WaypointSource, fixed_source

__all__ = [
    "LANE_IDS",
    "VEHICLE_KINDS",
    "Lane",
    "Vehicle",
    "WaypointSource",
    "bike_points",
    "car_points",
    "car_queue_head",
    "escort_points",
    "fixed_source",
    "make_lanes",
    "pen_anchor",
    "staging_position",
]
